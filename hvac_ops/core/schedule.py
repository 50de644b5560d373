"""Work-day schedule grouping."""

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Iterable, List

from .rollups import total_hours
from .values import field_value, sort_newest_first


@dataclass
class DayGroup:
    date: str
    work_days: List[Any] = field(default_factory=list)

    @property
    def day_total(self) -> float:
        return total_hours(self.work_days)


def sort_by_date_desc(records: Iterable[Any]) -> List[Any]:
    return sort_newest_first(records, "date")


def group_work_days_by_date(work_days: Iterable[Any]) -> "OrderedDict[str, DayGroup]":
    """
    Newest date first, one group per exact ``date`` string.

    Within a group, work days keep their post-sort order.
    """
    groups: "OrderedDict[str, DayGroup]" = OrderedDict()
    for work_day in sort_by_date_desc(work_days):
        date = field_value(work_day, "date", "")
        if date not in groups:
            groups[date] = DayGroup(date=date)
        groups[date].work_days.append(work_day)
    return groups
