from datetime import datetime, timezone

import pytest

from salesledger.aggregation.grouping import (
    by_city,
    by_hour,
    by_product,
    by_status,
    by_weekday,
    orders_over_time,
    quantity_by_product,
    status_counts,
)
from salesledger.core.config import CostConfig
from salesledger.core.types import (
    CostedOrder,
    Customer,
    LineItem,
    Order,
    OrderStatus,
    OrderSummary,
)
from salesledger.cost.model import cost_order

UTC = timezone.utc


def _costed(
    lines: list[tuple[str, float, int]],
    total_price: float,
    status: OrderStatus = "delivered",
    city: str = "Tunis",
    when: datetime | None = datetime(2025, 3, 12, 9, 30, tzinfo=UTC),
) -> CostedOrder:
    products = tuple(
        LineItem(name=name, price=price, quantity=qty, subtotal=price * qty)
        for name, price, qty in lines
    )
    order = Order(
        id=f"{city}-{total_price}-{status}",
        order_number="",
        customer=Customer(city=city, email="c@example.com"),
        products=products,
        summary=OrderSummary(
            products_total=sum(item.subtotal for item in products),
            delivery_fee=8.0,
            total_price=total_price,
            total_items=sum(qty for _, _, qty in lines),
        ),
        status=status,
        order_date=when,
    )
    return cost_order(order, CostConfig())


def test_product_attribution_is_proportional():
    # Lines worth 30 and 10, order revenue 36.
    entry = _costed([("A", 15.0, 2), ("B", 10.0, 1)], total_price=44.0)
    assert entry.costs.revenue == pytest.approx(36.0)
    buckets = {bucket.name: bucket for bucket in by_product([entry])}
    assert buckets["A"].revenue == pytest.approx(27.0)
    assert buckets["B"].revenue == pytest.approx(9.0)
    assert buckets["A"].profit + buckets["B"].profit == pytest.approx(entry.costs.profit)
    assert buckets["A"].quantity == 2
    assert buckets["A"].order_count == 1


def test_product_attribution_skips_zero_total_orders():
    free = _costed([("Gift", 0.0, 2)], total_price=20.0)
    assert by_product([free]) == ()


def test_product_order_count_counts_orders_not_lines():
    entry = _costed([("A", 5.0, 1), ("A", 5.0, 2)], total_price=23.0)
    (bucket,) = by_product([entry])
    assert bucket.order_count == 1
    assert bucket.quantity == 3
    assert bucket.revenue == pytest.approx(15.0)


def test_status_breakdown_excludes_cancelled_but_counts_it():
    entries = [
        _costed([("A", 10.0, 1)], 18.0, status="pending"),
        _costed([("A", 10.0, 2)], 28.0, status="delivered"),
        _costed([("A", 10.0, 3)], 38.0, status="cancelled"),
    ]
    buckets = by_status(entries)
    assert [bucket.status for bucket in buckets] == ["pending", "delivered"]
    assert sum(bucket.revenue for bucket in buckets) == pytest.approx(30.0)
    counts = {count.status: count.count for count in status_counts(entries)}
    assert counts["cancelled"] == 1
    assert counts["shipped"] == 0
    assert len(counts) == 6


def test_city_breakdown_sorted_by_revenue():
    entries = [
        _costed([("A", 10.0, 1)], 18.0, city="Sfax"),
        _costed([("A", 10.0, 3)], 38.0, city="Tunis"),
        _costed([("A", 10.0, 1)], 18.0, city="Tunis"),
        _costed([("A", 10.0, 5)], 58.0, city="Sousse", status="cancelled"),
    ]
    buckets = by_city(entries)
    assert [bucket.city for bucket in buckets] == ["Tunis", "Sfax"]
    assert buckets[0].orders == 2
    assert buckets[0].revenue == pytest.approx(40.0)


def test_quantity_breakdown_filters_and_lists_all_plant_types():
    entries = [
        _costed([("Basilic", 10.0, 3), ("Origan", 10.0, 1)], 48.0, status="delivered"),
        _costed([("Origan", 10.0, 2)], 28.0, status="pending"),
        _costed([("Menthe", 10.0, 4)], 48.0, status="cancelled"),
    ]
    everything = quantity_by_product(entries, [entry.order for entry in entries])
    assert [(b.name, b.quantity) for b in everything.items] == [("Basilic", 3), ("Origan", 3)]
    assert everything.total == 6
    assert everything.plant_types == ("Basilic", "Menthe", "Origan")

    pending = quantity_by_product(entries, [entry.order for entry in entries], status="pending")
    assert [(b.name, b.quantity) for b in pending.items] == [("Origan", 2)]

    origan = quantity_by_product(entries, [entry.order for entry in entries], plant_type="Origan")
    assert origan.total == 3
    assert origan.plant_type == "Origan"


def test_hour_and_weekday_series_are_dense():
    assert len(by_hour([], UTC)) == 24
    assert all(point.orders == 0 for point in by_hour([], UTC))
    week = by_weekday([], UTC)
    assert [point.label for point in week][0] == "Sunday"
    assert len(week) == 7
    assert all(point.revenue == 0.0 for point in week)


def test_hour_and_weekday_buckets():
    entries = [
        _costed([("A", 10.0, 1)], 18.0, when=datetime(2025, 3, 12, 9, 30, tzinfo=UTC)),
        _costed([("A", 10.0, 1)], 18.0, when=datetime(2025, 3, 9, 9, 5, tzinfo=UTC)),
        _costed([("A", 10.0, 1)], 18.0, when=None),
    ]
    hours = by_hour(entries, UTC)
    assert hours[9].orders == 2
    assert hours[9].label == "09:00"
    week = by_weekday(entries, UTC)
    assert week[0].orders == 1
    assert week[3].orders == 1
    assert week[3].revenue == pytest.approx(10.0)
    assert sum(point.orders for point in week) == 2


def test_orders_over_time_groups_by_civil_date():
    entries = [
        _costed([("A", 10.0, 1)], 18.0, when=datetime(2025, 3, 12, 23, 0, tzinfo=UTC)),
        _costed([("A", 10.0, 1)], 18.0, when=datetime(2025, 3, 11, 8, 0, tzinfo=UTC)),
        _costed([("A", 10.0, 2)], 28.0, when=datetime(2025, 3, 12, 1, 0, tzinfo=UTC)),
    ]
    series = orders_over_time(entries, UTC)
    assert [point.day for point in series] == ["2025-03-11", "2025-03-12"]
    assert series[1].orders == 2
    assert series[1].revenue == pytest.approx(30.0)
