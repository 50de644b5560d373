"""Dashboard statistics and payment/balance rollups.

Pure functions over already-fetched collections. Every monetary or hour
value goes through parse-or-zero, so a malformed cell adds nothing to a sum
but the record still counts everywhere else.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Sequence

from hvac_ops.sheets.models import ACTIVE_STATUSES, ProjectStatus
from .values import field_value, parse_decimal, sort_newest_first

RECENT_PROJECTS_LIMIT = 5


@dataclass
class DashboardStats:
    """Headline numbers for the dashboard."""

    total_customers: int
    active_projects: int
    pending_estimates: int
    total_revenue: float
    recent_projects: List[Any] = field(default_factory=list)


@dataclass
class PaymentRollup:
    """Company-wide money received versus contracted."""

    total_received: float
    total_contract_value: float
    outstanding_balance: float  # may be negative


@dataclass
class ProjectRollup:
    """Hours and money for a single project."""

    total_hours: float
    total_payments: float
    balance_remaining: float  # may be negative


def sum_field(records: Iterable[Any], name: str) -> float:
    return sum((parse_decimal(field_value(r, name)) for r in records), 0.0)


def total_received(payments: Iterable[Any]) -> float:
    return sum_field(payments, "amount")


def total_contract_value(projects: Iterable[Any]) -> float:
    return sum_field(projects, "contractAmount")


def total_hours(work_days: Iterable[Any]) -> float:
    return sum_field(work_days, "hours")


def count_status(projects: Iterable[Any], statuses) -> int:
    return sum(1 for p in projects if field_value(p, "status") in statuses)


def recent_projects(projects: Sequence[Any], limit: int = RECENT_PROJECTS_LIMIT) -> List[Any]:
    """Most recently created projects, newest first, ties in input order."""
    return sort_newest_first(projects, "createdAt")[:limit]


def dashboard_stats(customers: Sequence[Any], projects: Sequence[Any],
                    payments: Sequence[Any]) -> DashboardStats:
    # Revenue is every payment on record, not scoped to listed projects
    return DashboardStats(
        total_customers=len(customers),
        active_projects=count_status(projects, ACTIVE_STATUSES),
        pending_estimates=count_status(projects, {ProjectStatus.ESTIMATE.value}),
        total_revenue=total_received(payments),
        recent_projects=recent_projects(projects),
    )


def payment_rollup(payments: Sequence[Any], projects: Sequence[Any]) -> PaymentRollup:
    received = total_received(payments)
    contracted = total_contract_value(projects)
    return PaymentRollup(
        total_received=received,
        total_contract_value=contracted,
        outstanding_balance=contracted - received,
    )


def project_rollup(project: Any, work_days: Sequence[Any], payments: Sequence[Any]) -> ProjectRollup:
    """Totals for one project's work days and payments.

    The child lists are expected to be the project's own (as returned by
    get_by_project); they are not re-filtered here.
    """
    paid = total_received(payments)
    return ProjectRollup(
        total_hours=total_hours(work_days),
        total_payments=paid,
        balance_remaining=parse_decimal(field_value(project, "contractAmount")) - paid,
    )
