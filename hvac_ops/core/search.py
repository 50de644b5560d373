"""
Search filters for the list screens.

Each predicate is a plain function recomputed on every keystroke. Text
fields match case-insensitively as substrings; phone numbers match the raw
term. An empty term matches everything.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional, Sequence

from .values import field_value, parse_timestamp

UNKNOWN = "Unknown"
UNKNOWN_PROJECT = "Unknown Project"


def _find(records: Iterable[Any], record_id: Any) -> Optional[Any]:
    if record_id is None:
        return None
    for record in records:
        if field_value(record, "id") == record_id:
            return record
    return None


def _contains(value: Any, needle: str) -> bool:
    return value is not None and needle in str(value).lower()


def customer_name(customers: Sequence[Any], customer_id: Any) -> str:
    customer = _find(customers, customer_id)
    if customer is None:
        return UNKNOWN
    return f"{field_value(customer, 'firstName', '')} {field_value(customer, 'lastName', '')}"


def project_name(projects: Sequence[Any], project_id: Any) -> str:
    project = _find(projects, project_id)
    return field_value(project, "projectName") or UNKNOWN_PROJECT


def customer_name_for_project(projects: Sequence[Any], customers: Sequence[Any],
                              project_id: Any) -> str:
    project = _find(projects, project_id)
    if project is None:
        return UNKNOWN
    return customer_name(customers, field_value(project, "customerId"))


def created_year(record: Any) -> str:
    ts = parse_timestamp(field_value(record, "createdAt"))
    if ts is None:
        return ""
    return str(datetime.fromtimestamp(ts, tz=timezone.utc).year)


def project_years(projects: Iterable[Any]) -> List[str]:
    """Distinct creation years, newest first, for the year filter."""
    return sorted({y for y in (created_year(p) for p in projects) if y}, reverse=True)


def customer_matches(customer: Any, term: str) -> bool:
    needle = term.lower()
    return (
        any(_contains(field_value(customer, f), needle)
            for f in ("firstName", "lastName", "email"))
        or term in str(field_value(customer, "phone", ""))
        or _contains(field_value(customer, "city"), needle)
    )


def project_matches(project: Any, term: str, customers: Sequence[Any],
                    status: Optional[str] = None, year: Optional[str] = None) -> bool:
    needle = term.lower()
    matches_search = (
        _contains(field_value(project, "projectName"), needle)
        or _contains(field_value(project, "contractor"), needle)
        or needle in customer_name(customers, field_value(project, "customerId")).lower()
    )
    matches_status = not status or field_value(project, "status") == status
    matches_year = not year or created_year(project) == str(year)
    return matches_search and matches_status and matches_year


def payment_matches(payment: Any, term: str, projects: Sequence[Any],
                    customers: Sequence[Any]) -> bool:
    needle = term.lower()
    project_id = field_value(payment, "projectId")
    return (
        needle in project_name(projects, project_id).lower()
        or needle in customer_name_for_project(projects, customers, project_id).lower()
        or _contains(field_value(payment, "method"), needle)
        or _contains(field_value(payment, "note"), needle)
    )


def work_day_matches(work_day: Any, term: str, projects: Sequence[Any],
                     customers: Sequence[Any]) -> bool:
    needle = term.lower()
    project_id = field_value(work_day, "projectId")
    return (
        needle in project_name(projects, project_id).lower()
        or needle in customer_name_for_project(projects, customers, project_id).lower()
        or _contains(field_value(work_day, "notes"), needle)
    )


def filter_records(records: Iterable[Any], predicate: Callable[..., bool],
                   term: str = "", *args, **kwargs) -> List[Any]:
    """Keep the records for which ``predicate(record, term, *args, **kwargs)`` holds."""
    return [r for r in records if predicate(r, term, *args, **kwargs)]
