"""Order search used by the main screen: text filters, delivery-date windows and sorting."""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional

from .errors import ValidationError
from .models import Order, DeliveryStatus, as_utc
from .schemas import DeliveryStats

WINDOWS = ("today", "tomorrow", "thisweek", "thismonth")
ORDERS = {"asc": "asc", "ascending": "asc", "desc": "desc", "descending": "desc"}


@dataclass
class OrderFilter:
    serial_contains: Optional[str] = None
    product_contains: Optional[str] = None
    status: Optional[str] = None
    date_window: Optional[str] = None  # today | tomorrow | thisWeek | thisMonth
    date_order: Optional[str] = None   # asc | desc

    def __post_init__(self):
        self.serial_contains = (self.serial_contains or "").strip() or None
        self.product_contains = (self.product_contains or "").strip() or None
        if self.status in ("", "all"):
            self.status = None
        if self.status is not None and self.status not in DeliveryStatus.ALL:
            raise ValidationError(f"Unknown delivery status: {self.status}")
        if self.date_window in ("", "all"):
            self.date_window = None
        if self.date_window is not None:
            if self.date_window.lower() not in WINDOWS:
                raise ValidationError(f"Unknown date window: {self.date_window}")
            self.date_window = self.date_window.lower()
        if self.date_order in ("", None):
            self.date_order = None
        else:
            if self.date_order.lower() not in ORDERS:
                raise ValidationError(f"Unknown date order: {self.date_order}")
            self.date_order = ORDERS[self.date_order.lower()]


def parse_day(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def week_bounds(today: date):
    """Sunday..Saturday week containing ``today``."""
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def in_window(day: Optional[date], window: str, today: date) -> bool:
    if day is None:
        return False
    if window == "today":
        return day == today
    if window == "tomorrow":
        return day == today + timedelta(days=1)
    if window == "thisweek":
        start, end = week_bounds(today)
        return start <= day <= end
    if window == "thismonth":
        return day.year == today.year and day.month == today.month
    raise ValidationError(f"Unknown date window: {window}")


def sort_by_delivery(orders: Iterable[Order], direction: str = "asc") -> List[Order]:
    """Stable sort on delivery date; rows without a usable date go last either way."""
    dated, undated = [], []
    for o in orders:
        (dated if parse_day(o.delivery_date) else undated).append(o)
    dated.sort(key=lambda o: parse_day(o.delivery_date), reverse=(direction == "desc"))
    return dated + undated


def filter_orders(orders: Iterable[Order], criteria: OrderFilter, today: Optional[date] = None) -> List[Order]:
    today = today or date.today()
    result = list(orders)

    if criteria.serial_contains:
        result = [o for o in result if criteria.serial_contains in str(o.serial_number)]
    if criteria.product_contains:
        needle = criteria.product_contains.lower()
        result = [o for o in result if needle in (o.product or "").lower()]
    if criteria.status:
        result = [o for o in result if o.delivery_status == criteria.status]
    if criteria.date_window:
        result = [o for o in result if in_window(parse_day(o.delivery_date), criteria.date_window, today)]
    if criteria.date_order:
        result = sort_by_delivery(result, criteria.date_order)
    return result


def delivery_stats(orders: Iterable[Order]) -> DeliveryStats:
    stats = DeliveryStats()
    for o in orders:
        if o.delivery_status in DeliveryStatus.ALL:
            setattr(stats, o.delivery_status, getattr(stats, o.delivery_status) + 1)
    return stats


def recent_orders(orders: Iterable[Order], limit: int = 10) -> List[Order]:
    return sorted(orders, key=lambda o: (as_utc(o.created_at), o.id or 0), reverse=True)[:limit]
