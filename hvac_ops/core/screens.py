"""
Screen loaders

Each screen fetches the collections it needs concurrently, waits for all of
them, then derives its view model. The first failing fetch fails the load.
``ScreenState`` drops results that arrive after the screen has moved on.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, List, Optional, TypeVar

from hvac_ops.sheets.services import Repositories, ReloadingCollection
from .rollups import (
    DashboardStats,
    PaymentRollup,
    ProjectRollup,
    dashboard_stats,
    payment_rollup,
    project_rollup,
    total_hours,
)
from .schedule import DayGroup, group_work_days_by_date, sort_by_date_desc
from .values import field_value


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class DashboardView:
    stats: DashboardStats
    customers: List[Any]
    projects: List[Any]
    payments: List[Any]


@dataclass
class ProjectsView:
    projects: List[Any]
    customers: List[Any]


@dataclass
class PaymentsView:
    payments: List[Any]  # newest first
    projects: List[Any]
    customers: List[Any]
    rollup: PaymentRollup


@dataclass
class ScheduleView:
    work_days: List[Any]
    projects: List[Any]
    customers: List[Any]
    total_hours: float
    groups: "dict[str, DayGroup]" = field(default_factory=dict)


@dataclass
class ProjectDetailView:
    project: Any
    equipment: ReloadingCollection
    work_days: ReloadingCollection
    payments: ReloadingCollection
    photos: ReloadingCollection

    @property
    def rollup(self) -> ProjectRollup:
        return project_rollup(self.project, self.work_days.items, self.payments.items)

    async def reload(self) -> None:
        await asyncio.gather(
            self.equipment.load(),
            self.work_days.load(),
            self.payments.load(),
            self.photos.load(),
        )


async def load_dashboard(repos: Repositories) -> DashboardView:
    customers, projects, payments = await asyncio.gather(
        repos.customers.get_all(),
        repos.projects.get_all(),
        repos.payments.get_all(),
    )
    return DashboardView(
        stats=dashboard_stats(customers, projects, payments),
        customers=customers,
        projects=projects,
        payments=payments,
    )


async def load_projects_screen(repos: Repositories) -> ProjectsView:
    projects, customers = await asyncio.gather(
        repos.projects.get_all(),
        repos.customers.get_all(),
    )
    return ProjectsView(projects=projects, customers=customers)


async def load_payments_screen(repos: Repositories) -> PaymentsView:
    payments, projects, customers = await asyncio.gather(
        repos.payments.get_all(),
        repos.projects.get_all(),
        repos.customers.get_all(),
    )
    return PaymentsView(
        payments=sort_by_date_desc(payments),
        projects=projects,
        customers=customers,
        rollup=payment_rollup(payments, projects),
    )


async def load_schedule_screen(repos: Repositories) -> ScheduleView:
    work_days, projects, customers = await asyncio.gather(
        repos.work_days.get_all(),
        repos.projects.get_all(),
        repos.customers.get_all(),
    )
    return ScheduleView(
        work_days=sort_by_date_desc(work_days),
        projects=projects,
        customers=customers,
        total_hours=total_hours(work_days),
        groups=group_work_days_by_date(work_days),
    )


async def load_project_detail(repos: Repositories, project: Any) -> ProjectDetailView:
    project_id = field_value(project, "id")
    if not project_id:
        raise ValueError("Project has no id yet; save it before loading its records")
    view = ProjectDetailView(
        project=project,
        equipment=ReloadingCollection(repos.equipment, project_id),
        work_days=ReloadingCollection(repos.work_days, project_id),
        payments=ReloadingCollection(repos.payments, project_id),
        photos=ReloadingCollection(repos.photos, project_id),
    )
    await view.reload()
    return view


class ScreenState(Generic[T]):
    """Holds the latest applied result for one screen.

    Each load takes a generation token; a result is applied only if no newer
    load started and the screen was not invalidated in the meantime.
    """

    def __init__(self) -> None:
        self._generation = 0
        self.value: Optional[T] = None
        self.error: Optional[BaseException] = None

    @property
    def generation(self) -> int:
        return self._generation

    def begin(self) -> int:
        self._generation += 1
        return self._generation

    def invalidate(self) -> None:
        self._generation += 1

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def apply(self, token: int, value: T) -> bool:
        if not self.is_current(token):
            logger.debug(f"Discarding stale result for generation {token}")
            return False
        self.value = value
        self.error = None
        return True

    async def run(self, load: Callable[[], Awaitable[T]]) -> Optional[T]:
        """
        Run a load and apply its result if still current

        Returns:
            The loaded value, or None if it arrived stale

        Raises:
            Whatever the load raised, when the load is still current
        """
        token = self.begin()
        try:
            value = await load()
        except Exception as e:
            if not self.is_current(token):
                logger.info(f"Ignoring failure from stale load: {e}")
                return None
            self.error = e
            raise
        if self.apply(token, value):
            return value
        return None
