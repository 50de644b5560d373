from ..config import Sheet
from ..models import Payment
from .base import SheetRepository, PROJECT_CHILD_VERBS


class PaymentsService(SheetRepository[Payment]):
    """Payments received against a project"""

    sheet = Sheet.PAYMENTS
    model = Payment
    supported = PROJECT_CHILD_VERBS
