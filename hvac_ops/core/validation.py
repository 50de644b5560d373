"""
Client-side required-field checks, run before a request is issued.
"""

from typing import Any, Dict, List, Tuple

from .values import field_value


class ValidationError(ValueError):
    """One or more required fields are missing"""

    def __init__(self, kind: str, fields: List[str]):
        self.kind = kind
        self.fields = fields
        super().__init__(f"{kind}: missing required field(s): {', '.join(fields)}")


REQUIRED_FIELDS: Dict[str, Tuple[str, ...]] = {
    "customer": ("firstName", "lastName", "email", "phone"),
    "project": ("customerId", "projectName"),
    "equipment": ("name",),
    "work_day": ("date", "hours"),
    "payment": ("date", "amount"),
    "login": ("email", "password"),
    "account": ("name", "email"),
}


def missing_fields(kind: str, record: Any) -> List[str]:
    missing = []
    for name in REQUIRED_FIELDS[kind]:
        value = field_value(record, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def validate_required(kind: str, record: Any) -> None:
    """
    Raises:
        ValidationError: If any required field for ``kind`` is missing or blank
        KeyError: If ``kind`` is not a known form
    """
    missing = missing_fields(kind, record)
    if missing:
        raise ValidationError(kind, missing)
