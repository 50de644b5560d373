"""
Customers Service

Customer records: list, fetch, create, update and delete.
"""

from ..config import Action, Sheet
from ..models import Customer
from .base import SheetRepository


class CustomersService(SheetRepository[Customer]):
    """Service for the Customers sheet"""

    sheet = Sheet.CUSTOMERS
    model = Customer
    supported = frozenset({
        Action.GET_ALL,
        Action.GET_BY_ID,
        Action.CREATE,
        Action.UPDATE,
        Action.DELETE,
    })
