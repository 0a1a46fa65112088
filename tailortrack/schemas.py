"""Request and response bodies.

Attributes are snake_case; the JSON field names (``sno``, ``oDate``, ``tel`` ...)
are the ones the order book front end and the spreadsheet script already use.
"""
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from .models import DeliveryStatus, as_utc

# timestamps go out as UTC ("...Z") even when the database returns them naive
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, from_attributes=True)


def _check_status(v: Optional[str]) -> Optional[str]:
    if v is not None and v not in DeliveryStatus.ALL:
        raise ValueError(f"deliveryStatus must be one of {', '.join(DeliveryStatus.ALL)}")
    return v


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None or not v.strip():
        return None
    return v


# ---------- Orders ----------
class OrderCreate(WireModel):
    serial_number: str = Field(alias="sno", pattern=r"^\d+$")
    product: str = Field(min_length=1)
    additional_notes: Optional[str] = Field(default=None, alias="additional")
    order_date: str = Field(alias="oDate", min_length=1)
    delivery_date: str = Field(alias="dDate", min_length=1)
    telephone: str = Field(alias="tel", min_length=1)
    image_link: Optional[str] = Field(default=None, alias="link")
    delivery_status: str = Field(default=DeliveryStatus.PENDING, alias="deliveryStatus")

    @field_validator("delivery_status")
    @classmethod
    def check_status(cls, v):
        return _check_status(v)

    @field_validator("additional_notes", "image_link")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class OrderUpdate(WireModel):
    """Partial order. Only the fields present in the request body are merged."""

    product: Optional[str] = Field(default=None, min_length=1)
    additional_notes: Optional[str] = Field(default=None, alias="additional")
    order_date: Optional[str] = Field(default=None, alias="oDate", min_length=1)
    delivery_date: Optional[str] = Field(default=None, alias="dDate", min_length=1)
    telephone: Optional[str] = Field(default=None, alias="tel", min_length=1)
    image_link: Optional[str] = Field(default=None, alias="link")
    delivery_status: Optional[str] = Field(default=None, alias="deliveryStatus")

    @field_validator("product", "order_date", "delivery_date", "telephone", "delivery_status")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field is required and cannot be null")
        return v

    @field_validator("delivery_status")
    @classmethod
    def check_status(cls, v):
        return _check_status(v)

    @field_validator("additional_notes", "image_link")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class OrderOut(WireModel):
    id: int
    serial_number: str = Field(alias="sno")
    product: str
    additional_notes: Optional[str] = Field(default=None, alias="additional")
    order_date: str = Field(alias="oDate")
    delivery_date: str = Field(alias="dDate")
    telephone: str = Field(alias="tel")
    image_link: Optional[str] = Field(default=None, alias="link")
    delivery_status: str = Field(alias="deliveryStatus")
    assigned_staff: Optional[str] = Field(default=None, alias="staffName")
    created_at: Optional[UtcDatetime] = Field(default=None, alias="createdAt")


# ---------- Staff book ----------
class StaffBookCreate(WireModel):
    billbook_range: str = Field(alias="billbookRange", pattern=r"^\d+-\d+$")
    staff_name: str = Field(alias="staffName", min_length=1)

    @field_validator("billbook_range")
    @classmethod
    def ordered(cls, v: str) -> str:
        start, end = (int(x) for x in v.split("-"))
        if start > end:
            raise ValueError("billbookRange start must not be greater than its end")
        return v


class StaffBookOut(WireModel):
    id: int
    billbook_range: str = Field(alias="billbookRange")
    staff_name: str = Field(alias="staffName")
    created_at: Optional[UtcDatetime] = Field(default=None, alias="createdAt")


# ---------- Entry status ----------
class EntryStatusCreate(WireModel):
    serial_number: str = Field(alias="sno", min_length=1)
    product: str = Field(min_length=1)
    packaged: bool = Field(default=False, alias="package")


class EntryStatusOut(WireModel):
    id: int
    serial_number: str = Field(alias="sno")
    product: str
    packaged: bool = Field(alias="package")
    created_at: Optional[UtcDatetime] = Field(default=None, alias="createdAt")


# ---------- Reports / sync ----------
class DeliveryStats(BaseModel):
    pending: int = 0
    delivered: int = 0
    canceled: int = 0


class SyncStatus(WireModel):
    configured: bool
    url: str
    last_checked: UtcDatetime = Field(alias="lastChecked")
    last_sync: Optional[UtcDatetime] = Field(default=None, alias="lastSync")
