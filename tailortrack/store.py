"""Data store: the three record collections behind one SQLModel session.

Lookups are by business key (serial number, billbook range) rather than by the
generated id, except for entry statuses which have no business key. Every
listing comes back in insertion order.
"""
import logging
from typing import List, Optional

from sqlmodel import Session, select

from .errors import NotFound, ValidationError
from .models import Order, StaffBook, EntryStatus

logger = logging.getLogger(__name__)


class Store:
    def __init__(self, session: Session):
        self.session = session

    # ---------- Orders ----------
    def list_orders(self) -> List[Order]:
        return list(self.session.exec(select(Order).order_by(Order.id)).all())

    def get_order(self, sno: str) -> Optional[Order]:
        return self.session.exec(select(Order).where(Order.serial_number == sno)).first()

    def create_order(self, data: dict) -> Order:
        """Upsert by serial number.

        An existing order with the same serial number is deleted first; the new
        row gets a fresh id and timestamp. Nothing of the old record is kept.
        """
        existing = self.get_order(data["serial_number"])
        if existing:
            logger.info("Replacing order %s (id=%s)", existing.serial_number, existing.id)
            self.session.delete(existing)
            self.session.flush()
        o = Order(**data)
        self.session.add(o); self.session.commit(); self.session.refresh(o)
        return o

    def update_order(self, sno: str, fields: dict) -> Order:
        o = self.get_order(sno)
        if not o:
            raise NotFound(f"Order with sno {sno} not found")
        for k, v in fields.items():
            setattr(o, k, v)
        self.session.add(o); self.session.commit(); self.session.refresh(o)
        return o

    def delete_order(self, sno: str) -> None:
        o = self.get_order(sno)
        if o:
            self.session.delete(o); self.session.commit()

    # ---------- Staff book ----------
    def list_staff_book(self) -> List[StaffBook]:
        return list(self.session.exec(select(StaffBook).order_by(StaffBook.id)).all())

    def get_staff_book(self, billbook_range: str) -> Optional[StaffBook]:
        return self.session.exec(
            select(StaffBook).where(StaffBook.billbook_range == billbook_range)
        ).first()

    def create_staff_book(self, data: dict) -> StaffBook:
        if self.get_staff_book(data["billbook_range"]):
            raise ValidationError(f"Billbook range {data['billbook_range']} already exists")
        sb = StaffBook(**data)
        self.session.add(sb); self.session.commit(); self.session.refresh(sb)
        return sb

    def delete_staff_book(self, billbook_range: str) -> None:
        sb = self.get_staff_book(billbook_range)
        if sb:
            self.session.delete(sb); self.session.commit()

    # ---------- Entry status ----------
    def list_entry_statuses(self) -> List[EntryStatus]:
        return list(self.session.exec(select(EntryStatus).order_by(EntryStatus.id)).all())

    def list_entry_statuses_by_sno(self, sno: str) -> List[EntryStatus]:
        return list(self.session.exec(
            select(EntryStatus).where(EntryStatus.serial_number == sno).order_by(EntryStatus.id)
        ).all())

    def create_entry_status(self, data: dict) -> EntryStatus:
        es = EntryStatus(**data)
        self.session.add(es); self.session.commit(); self.session.refresh(es)
        return es

    def delete_entry_status(self, entry_id: int) -> None:
        es = self.session.get(EntryStatus, entry_id)
        if es:
            self.session.delete(es); self.session.commit()
