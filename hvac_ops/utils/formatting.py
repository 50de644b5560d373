"""Presentation helpers for currency, dates and hours (en-US)."""

from datetime import datetime, timezone
from typing import Any, Optional

from hvac_ops.core.values import parse_decimal, parse_timestamp


def format_currency(amount: Any) -> str:
    value = parse_decimal(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def _as_datetime(value: Any) -> Optional[datetime]:
    ts = parse_timestamp(value)
    if ts is None:
        return None
    return datetime.fromtimestamp(ts, tz=timezone.utc)


def format_date(value: Any) -> str:
    """'2025-01-05' -> 'Jan 5, 2025'; empty string when missing or unparseable."""
    parsed = _as_datetime(value)
    if parsed is None:
        return ""
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def format_date_time(value: Any) -> str:
    parsed = _as_datetime(value)
    if parsed is None:
        return ""
    return f"{format_date(value)}, {parsed:%I:%M %p}"


def format_hours(value: Any) -> str:
    return f"{parse_decimal(value):.1f} hours"


def status_label(status: Any) -> str:
    # "in-progress" -> "in progress"
    return str(status or "").replace("-", " ", 1)
