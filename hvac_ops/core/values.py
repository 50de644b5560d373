"""
Cell value helpers shared by the rollup, schedule and search code.

Records are either sheet models or plain dicts keyed by wire name; both
support ``.get(name)``.
"""

import math
import re
from datetime import datetime, timezone
from typing import Any, Optional


def field_value(record: Any, name: str, default: Any = None) -> Any:
    if record is None:
        return default
    value = record.get(name, default)
    return default if value is None else value


# Optional sign then "$", digits grouped by commas in threes (or not at all),
# optional fraction and exponent. No "_" separators.
_DECIMAL_RE = re.compile(
    r"[+-]?\$?(?:(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"
)


def parse_decimal(value: Any, default: float = 0.0) -> float:
    """Parse a cell as a finite decimal, or return ``default``. Never raises."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not _DECIMAL_RE.fullmatch(text):
            return default
        number = float(text.replace(",", "").replace("$", ""))
    else:
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def parse_timestamp(value: Any) -> Optional[float]:
    """
    Seconds since the epoch for an ISO date/datetime cell, or None.

    Naive values are read as UTC so that plain dates and full timestamps
    order together. Numbers are taken as epoch milliseconds.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if math.isnan(value) or math.isinf(value):
            return None
        return float(value) / 1000.0
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def sort_newest_first(records, field: str) -> list:
    """Stable sort, newest first; records with missing or bad dates go last."""
    def key(record):
        ts = parse_timestamp(field_value(record, field))
        return (ts is None, -(ts or 0.0))
    return sorted(records, key=key)
