from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands timestamps back naive; they were written as UTC."""
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


class DeliveryStatus:
    PENDING   = "pending"     # not yet handed to the customer
    DELIVERED = "delivered"
    CANCELED  = "canceled"

    ALL = (PENDING, DELIVERED, CANCELED)


# garments tracked on the entry status page; advisory only
GARMENTS = ("sherwani", "indo-western", "jodhpuri", "coat-pant")


class Order(SQLModel, table=True):
    __tablename__ = "orders"
    __table_args__ = {"sqlite_autoincrement": True}  # ids are never reused after an upsert

    id: Optional[int] = Field(default=None, primary_key=True)
    serial_number: str = Field(index=True, unique=True)  # billbook serial (S No)
    product: str
    additional_notes: Optional[str] = None
    order_date: str
    delivery_date: str                                   # ISO date string, filtered at read time
    telephone: str
    image_link: Optional[str] = None
    delivery_status: str = Field(default=DeliveryStatus.PENDING)
    assigned_staff: Optional[str] = None                 # resolved from the staff book on creation
    created_at: datetime = Field(default_factory=utcnow)


class StaffBook(SQLModel, table=True):
    __tablename__ = "staff_book"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    billbook_range: str = Field(index=True, unique=True)  # "301-350"
    staff_name: str
    created_at: datetime = Field(default_factory=utcnow)


class EntryStatus(SQLModel, table=True):
    __tablename__ = "entry_status"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    serial_number: str = Field(index=True)               # no FK: survives order deletion
    product: str
    packaged: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow)
