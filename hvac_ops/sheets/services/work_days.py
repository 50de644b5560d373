from ..config import Sheet
from ..models import WorkDay
from .base import SheetRepository, PROJECT_CHILD_VERBS


class WorkDaysService(SheetRepository[WorkDay]):
    """Hours logged against a project on a given date"""

    sheet = Sheet.WORK_DAYS
    model = WorkDay
    supported = PROJECT_CHILD_VERBS
