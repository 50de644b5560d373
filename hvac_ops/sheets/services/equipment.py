"""
Equipment Service

Units installed or serviced on a project.
"""

from ..config import Sheet
from ..models import Equipment
from .base import SheetRepository, PROJECT_CHILD_VERBS


class EquipmentService(SheetRepository[Equipment]):
    sheet = Sheet.EQUIPMENT
    model = Equipment
    supported = PROJECT_CHILD_VERBS
