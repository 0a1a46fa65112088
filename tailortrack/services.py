import logging
from typing import List, Type, TypeVar, Union

import pydantic

from .assignment import resolve_staff
from .errors import NotFound, ValidationError
from .models import Order, EntryStatus
from .schemas import OrderCreate, OrderUpdate, EntryStatusCreate
from .store import Store

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=pydantic.BaseModel)


def parse_payload(model: Type[M], data: Union[M, dict]) -> M:
    """Accept either an already validated model or a raw dict keyed by wire names."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(format_errors(e.errors())) from e


def format_errors(errors: list) -> str:
    msgs = []
    for err in errors:
        loc = ".".join(str(x) for x in err["loc"] if x != "body")
        msgs.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(msgs)


class OrderService:
    def __init__(self, store: Store):
        self.store = store

    def get_order(self, sno: str) -> Order:
        o = self.store.get_order(sno)
        if not o:
            raise NotFound("Order not found")
        return o

    def create_order(self, payload: Union[OrderCreate, dict]) -> Order:
        payload = parse_payload(OrderCreate, payload)
        data = payload.model_dump()
        staff = resolve_staff(payload.serial_number, self.store.list_staff_book())
        data["assigned_staff"] = staff or None
        o = self.store.create_order(data)
        logger.info("Order %s saved, assigned to %s", o.serial_number, o.assigned_staff or "nobody")
        return o

    def update_order(self, sno: str, payload: Union[OrderUpdate, dict]) -> Order:
        payload = parse_payload(OrderUpdate, payload)
        o = self.store.update_order(sno, payload.changes())
        logger.info("Order %s updated: %s", sno, ", ".join(sorted(payload.changes())) or "no changes")
        return o

    def delete_order(self, sno: str) -> None:
        # entry statuses for this serial are kept on purpose
        self.store.delete_order(sno)
        logger.info("Order %s deleted", sno)


class EntryStatusService:
    def __init__(self, store: Store):
        self.store = store

    def add_entry_status(self, sno: str, product: str, packaged: bool = False) -> EntryStatus:
        payload = parse_payload(EntryStatusCreate, {"sno": sno, "product": product, "package": packaged})
        if not self.store.get_order(payload.serial_number):
            raise NotFound(f"Order with S No {payload.serial_number} not found. Please add the order first.")
        es = self.store.create_entry_status(payload.model_dump())
        logger.info("Entry status for %s: %s packaged=%s", es.serial_number, es.product, es.packaged)
        return es

    def list_by_serial(self, sno: str) -> List[EntryStatus]:
        return self.store.list_entry_statuses_by_sno(sno)

    def summary(self, sno: str) -> str:
        """"sherwani ✅ | jodhpuri ❌" style line used on the delivery screen."""
        statuses = self.list_by_serial(sno)
        if not statuses:
            return "None"
        return " | ".join(f"{es.product} {'✅' if es.packaged else '❌'}" for es in statuses)
