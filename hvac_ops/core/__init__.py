"""
View-model layer: rollups, schedule grouping, search, validation and
screen loaders built on the sheet repositories.
"""

from .values import field_value, parse_decimal, parse_timestamp
from .rollups import (
    DashboardStats,
    PaymentRollup,
    ProjectRollup,
    dashboard_stats,
    payment_rollup,
    project_rollup,
    recent_projects,
    total_hours,
    total_received,
)
from .schedule import DayGroup, group_work_days_by_date, sort_by_date_desc
from .validation import ValidationError, validate_required

__all__ = [
    'field_value',
    'parse_decimal',
    'parse_timestamp',
    'DashboardStats',
    'PaymentRollup',
    'ProjectRollup',
    'dashboard_stats',
    'payment_rollup',
    'project_rollup',
    'recent_projects',
    'total_hours',
    'total_received',
    'DayGroup',
    'group_work_days_by_date',
    'sort_by_date_desc',
    'ValidationError',
    'validate_required',
]
