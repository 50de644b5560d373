from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .exceptions import DecodeError


# Spreadsheet cells come back as whatever the sheet holds; amounts and hours
# are kept raw and parsed (or zeroed) at aggregation time.
Amount = Union[int, float, str, None]


class ProjectStatus(str, Enum):
    ESTIMATE = "estimate"
    APPROVED = "approved"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


ACTIVE_STATUSES = frozenset({ProjectStatus.APPROVED.value, ProjectStatus.IN_PROGRESS.value})


class PaymentMethod(str, Enum):
    CHECK = "Check"
    CASH = "Cash"
    CREDIT_CARD = "Credit Card"
    ZELLE = "Zelle"
    VENMO = "Venmo"
    PAYPAL = "PayPal"


class SheetRecord(BaseModel):
    """One row of a sheet. Unknown columns are preserved as extras."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )

    id: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    def get(self, key: str, default: Any = None) -> Any:
        """Dict-style lookup by wire name or attribute name."""
        for name, field in type(self).model_fields.items():
            if key == name or key == field.alias:
                return getattr(self, name)
        extra = self.model_extra or {}
        return extra.get(key, default)

    def to_record(self) -> Dict[str, Any]:
        """
        Body for create/update: wire names, without id.

        Only fields that were set are sent, so an explicit ``None`` goes out
        as null and clears the cell. Unknown columns are always carried.
        """
        record = self.model_dump(by_alias=True, exclude={"id"}, exclude_unset=True)
        record.update({k: v for k, v in (self.model_extra or {}).items() if k != "id"})
        return record


class Customer(SheetRecord):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(default=None, alias="zip")
    created_at: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class Project(SheetRecord):
    customer_id: Optional[str] = None
    project_name: Optional[str] = None
    contractor: Optional[str] = None
    status: Optional[str] = None
    nature_of_job: Optional[str] = None
    estimate_amount: Amount = None
    contract_amount: Amount = None
    notes: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def status_category(self) -> ProjectStatus:
        """Display category; unrecognised or missing statuses show as estimates."""
        try:
            return ProjectStatus(self.status)
        except ValueError:
            return ProjectStatus.ESTIMATE


class Equipment(SheetRecord):
    project_id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    serial_number: Optional[str] = None


class WorkDay(SheetRecord):
    project_id: Optional[str] = None
    date: Optional[str] = None
    hours: Amount = None
    notes: Optional[str] = None


class Payment(SheetRecord):
    project_id: Optional[str] = None
    date: Optional[str] = None
    amount: Amount = None
    method: Optional[str] = None
    note: Optional[str] = None


class Photo(SheetRecord):
    project_id: Optional[str] = None
    url: Optional[str] = None
    filename: Optional[str] = None


class User(SheetRecord):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)

    def to_session(self) -> Dict[str, Any]:
        """Serializable session record; the password never leaves the remote store."""
        return self.model_dump(by_alias=True, exclude={"password"}, exclude_none=True)


RecordT = TypeVar("RecordT", bound=SheetRecord)


def decode_one(model: Type[RecordT], data: Any) -> RecordT:
    if isinstance(data, model):
        return data
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a {model.__name__} object, got {type(data).__name__}")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"Invalid {model.__name__} record: {e.errors()[0]['msg']}")


def decode_many(model: Type[RecordT], data: Any) -> List[RecordT]:
    # An empty sheet may come back as null
    if data is None:
        return []
    if not isinstance(data, list):
        raise DecodeError(f"Expected a list of {model.__name__} records, got {type(data).__name__}")
    return [decode_one(model, item) for item in data]
