from datetime import date, datetime, timezone

import pytest

from tailortrack.errors import ValidationError
from tailortrack.filters import (
    OrderFilter, filter_orders, week_bounds, sort_by_delivery, delivery_stats, recent_orders,
)
from tailortrack.models import Order

TODAY = date(2024, 3, 6)  # Wednesday


def order(sno, d_date="2024-03-06", product="sherwani", status="pending", **kw):
    return Order(
        id=int(sno), serial_number=sno, product=product, order_date="2024-03-01",
        delivery_date=d_date, telephone="9800000000", delivery_status=status, **kw
    )


def snos(orders):
    return [o.serial_number for o in orders]


class TestTextFilters:

    def test_product_is_case_insensitive(self):
        rows = [order("1", product="sherwani"), order("2", product="coat-pant")]
        assert snos(filter_orders(rows, OrderFilter(product_contains="SHER"), TODAY)) == ["1"]

    def test_serial_substring(self):
        rows = [order("1301"), order("2450"), order("301")]
        assert snos(filter_orders(rows, OrderFilter(serial_contains="30"), TODAY)) == ["1301", "301"]

    def test_status_exact(self):
        rows = [order("1", status="pending"), order("2", status="delivered")]
        assert snos(filter_orders(rows, OrderFilter(status="delivered"), TODAY)) == ["2"]

    def test_criteria_are_conjunctive(self):
        rows = [
            order("301", product="sherwani", status="pending"),
            order("302", product="sherwani", status="delivered"),
            order("401", product="sherwani", status="pending"),
        ]
        f = OrderFilter(serial_contains="30", product_contains="sher", status="pending")
        assert snos(filter_orders(rows, f, TODAY)) == ["301"]

    def test_empty_criteria_keep_everything(self):
        rows = [order("1"), order("2")]
        assert snos(filter_orders(rows, OrderFilter(status="all", date_window="all"), TODAY)) == ["1", "2"]

    def test_unknown_values_rejected(self):
        with pytest.raises(ValidationError):
            OrderFilter(status="lost")
        with pytest.raises(ValidationError):
            OrderFilter(date_window="nextYear")
        with pytest.raises(ValidationError):
            OrderFilter(date_order="sideways")


class TestDateWindows:

    def test_today_excludes_yesterday(self):
        rows = [order("1", "2024-03-06"), order("2", "2024-03-05")]
        assert snos(filter_orders(rows, OrderFilter(date_window="today"), TODAY)) == ["1"]

    def test_today_uses_current_date_by_default(self):
        rows = [order("1", date.today().isoformat())]
        assert snos(filter_orders(rows, OrderFilter(date_window="today"))) == ["1"]

    def test_tomorrow(self):
        rows = [order("1", "2024-03-06"), order("2", "2024-03-07")]
        assert snos(filter_orders(rows, OrderFilter(date_window="tomorrow"), TODAY)) == ["2"]

    def test_week_runs_sunday_to_saturday(self):
        assert week_bounds(TODAY) == (date(2024, 3, 3), date(2024, 3, 9))
        assert week_bounds(date(2024, 3, 3)) == (date(2024, 3, 3), date(2024, 3, 9))
        rows = [order("1", "2024-03-02"), order("2", "2024-03-03"), order("3", "2024-03-09"), order("4", "2024-03-10")]
        assert snos(filter_orders(rows, OrderFilter(date_window="thisWeek"), TODAY)) == ["2", "3"]

    def test_month_matches_month_and_year(self):
        rows = [order("1", "2024-03-31"), order("2", "2023-03-15"), order("3", "2024-04-01")]
        assert snos(filter_orders(rows, OrderFilter(date_window="thisMonth"), TODAY)) == ["1"]

    def test_unparseable_dates_are_excluded(self):
        rows = [order("1", ""), order("2", "next friday"), order("3", "2024-03-06")]
        assert snos(filter_orders(rows, OrderFilter(date_window="today"), TODAY)) == ["3"]


class TestDateOrder:

    def test_ascending_is_stable(self):
        rows = [order("1", "2024-03-02"), order("2", "2024-03-01"), order("3", "2024-03-01")]
        assert snos(filter_orders(rows, OrderFilter(date_order="asc"), TODAY)) == ["2", "3", "1"]

    def test_descending_is_stable(self):
        rows = [order("1", "2024-03-01"), order("2", "2024-03-02"), order("3", "2024-03-01")]
        assert snos(sort_by_delivery(rows, "desc")) == ["2", "1", "3"]

    def test_undated_go_last(self):
        rows = [order("1", "?"), order("2", "2024-03-02"), order("3", "2024-03-01")]
        assert snos(sort_by_delivery(rows, "asc")) == ["3", "2", "1"]
        assert snos(sort_by_delivery(rows, "desc")) == ["2", "3", "1"]

    def test_window_and_order_compose(self):
        rows = [order("1", "2024-03-08"), order("2", "2024-04-01"), order("3", "2024-03-04")]
        f = OrderFilter(date_window="thisweek", date_order="descending")
        assert snos(filter_orders(rows, f, TODAY)) == ["1", "3"]


def test_delivery_stats():
    rows = [order("1"), order("2", status="delivered"), order("3", status="delivered"), order("4", status="canceled")]
    stats = delivery_stats(rows)
    assert (stats.pending, stats.delivered, stats.canceled) == (1, 2, 1)


def test_recent_orders_newest_first():
    rows = [order(str(i), created_at=datetime(2024, 3, i)) for i in range(1, 6)]
    assert snos(recent_orders(rows, limit=3)) == ["5", "4", "3"]


def test_recent_orders_mixes_stored_and_fresh_timestamps():
    stored = order("1", created_at=datetime(2024, 3, 1))
    fresh = order("2", created_at=datetime(2024, 3, 2, tzinfo=timezone.utc))
    assert snos(recent_orders([stored, fresh])) == ["2", "1"]
