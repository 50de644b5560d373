"""
Sheet Services

One repository per sheet, plus the bundle that builds them from a gateway.
"""

from ..client import SheetsGateway
from .base import SheetRepository, ALL_VERBS, PROJECT_CHILD_VERBS
from .customers import CustomersService
from .projects import ProjectsService, DeletePolicy
from .equipment import EquipmentService
from .work_days import WorkDaysService
from .payments import PaymentsService
from .photos import PhotosService, photo_data_uri
from .users import UsersService
from .reloading import ReloadingCollection


class Repositories:
    """All sheet repositories sharing one gateway"""

    def __init__(self, gateway: SheetsGateway):
        self.gateway = gateway
        self.customers = CustomersService(gateway)
        self.projects = ProjectsService(gateway)
        self.equipment = EquipmentService(gateway)
        self.work_days = WorkDaysService(gateway)
        self.payments = PaymentsService(gateway)
        self.photos = PhotosService(gateway)
        self.users = UsersService(gateway)

    def project_children(self) -> dict:
        """Child repositories keyed by sheet name, for cascade deletes"""
        return {
            repo.sheet.value: repo
            for repo in (self.equipment, self.work_days, self.payments, self.photos)
        }


__all__ = [
    'SheetRepository',
    'ALL_VERBS',
    'PROJECT_CHILD_VERBS',
    'CustomersService',
    'ProjectsService',
    'DeletePolicy',
    'EquipmentService',
    'WorkDaysService',
    'PaymentsService',
    'PhotosService',
    'photo_data_uri',
    'UsersService',
    'ReloadingCollection',
    'Repositories',
]
