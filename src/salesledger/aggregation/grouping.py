from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from datetime import tzinfo

import numpy as np

from salesledger.core.types import (
    ALL,
    ORDER_STATUSES,
    CityBucket,
    CostedOrder,
    DailyPoint,
    HourPoint,
    Order,
    OrderStatus,
    ProductBucket,
    QuantityBreakdown,
    QuantityBucket,
    StatusBucket,
    StatusCount,
    WeekdayPoint,
)
from salesledger.dates.resolver import WEEKDAY_LABELS, day_key, to_local, weekday_index


def status_counts(entries: Sequence[CostedOrder]) -> tuple[StatusCount, ...]:
    counts: dict[OrderStatus, int] = dict.fromkeys(ORDER_STATUSES, 0)
    for entry in entries:
        counts[entry.order.status] += 1
    return tuple(StatusCount(status=status, count=counts[status]) for status in ORDER_STATUSES)


def by_status(entries: Sequence[CostedOrder]) -> tuple[StatusBucket, ...]:
    orders: dict[OrderStatus, int] = defaultdict(int)
    revenue: dict[OrderStatus, float] = defaultdict(float)
    profit: dict[OrderStatus, float] = defaultdict(float)
    for entry in _active(entries):
        status = entry.order.status
        orders[status] += 1
        revenue[status] += entry.costs.revenue
        profit[status] += entry.costs.profit
    return tuple(
        StatusBucket(
            status=status,
            orders=orders[status],
            revenue=revenue[status],
            profit=profit[status],
        )
        for status in ORDER_STATUSES
        if status in orders
    )


def by_city(entries: Sequence[CostedOrder]) -> tuple[CityBucket, ...]:
    orders: dict[str, int] = defaultdict(int)
    revenue: dict[str, float] = defaultdict(float)
    profit: dict[str, float] = defaultdict(float)
    for entry in _active(entries):
        city = entry.order.customer.city
        orders[city] += 1
        revenue[city] += entry.costs.revenue
        profit[city] += entry.costs.profit
    buckets = [
        CityBucket(city=city, orders=orders[city], revenue=revenue[city], profit=profit[city])
        for city in orders
    ]
    buckets.sort(key=lambda bucket: (-bucket.revenue, bucket.city))
    return tuple(buckets)


def by_product(entries: Sequence[CostedOrder]) -> tuple[ProductBucket, ...]:
    """Split each order's revenue and profit across its lines.

    A line's share is its ``price * quantity`` over the order's raw product
    total, so the buckets add back up to the order totals. Orders whose
    product total is zero are left out entirely.
    """
    quantity: dict[str, int] = defaultdict(int)
    revenue: dict[str, float] = defaultdict(float)
    profit: dict[str, float] = defaultdict(float)
    order_count: dict[str, int] = defaultdict(int)
    for entry in _active(entries):
        products_total = sum(item.gross for item in entry.order.products)
        if products_total <= 0:
            continue
        seen: set[str] = set()
        for item in entry.order.products:
            share = item.gross / products_total
            quantity[item.name] += item.quantity
            revenue[item.name] += share * entry.costs.revenue
            profit[item.name] += share * entry.costs.profit
            if item.name not in seen:
                seen.add(item.name)
                order_count[item.name] += 1
    buckets = [
        ProductBucket(
            name=name,
            quantity=quantity[name],
            revenue=revenue[name],
            profit=profit[name],
            order_count=order_count[name],
        )
        for name in quantity
    ]
    buckets.sort(key=lambda bucket: (-bucket.revenue, bucket.name))
    return tuple(buckets)


def quantity_by_product(
    entries: Sequence[CostedOrder],
    all_orders: Sequence[Order],
    status: str = ALL,
    plant_type: str = ALL,
) -> QuantityBreakdown:
    totals: dict[str, int] = defaultdict(int)
    for entry in _active(entries):
        if status != ALL and entry.order.status != status:
            continue
        for item in entry.order.products:
            if plant_type != ALL and item.name != plant_type:
                continue
            totals[item.name] += item.quantity
    items = sorted(
        (QuantityBucket(name=name, quantity=qty) for name, qty in totals.items()),
        key=lambda bucket: (-bucket.quantity, bucket.name),
    )
    plant_types = sorted({item.name for order in all_orders for item in order.products})
    return QuantityBreakdown(
        status=status,
        plant_type=plant_type,
        items=tuple(items),
        total=sum(bucket.quantity for bucket in items),
        plant_types=tuple(plant_types),
    )


def orders_over_time(entries: Sequence[CostedOrder], tz: tzinfo) -> tuple[DailyPoint, ...]:
    orders: dict[str, int] = defaultdict(int)
    revenue: dict[str, float] = defaultdict(float)
    profit: dict[str, float] = defaultdict(float)
    for entry in entries:
        instant = entry.order.timestamp
        if instant is None:
            continue
        key = day_key(to_local(instant, tz).date())
        orders[key] += 1
        revenue[key] += entry.costs.revenue
        profit[key] += entry.costs.profit
    return tuple(
        DailyPoint(day=key, orders=orders[key], revenue=revenue[key], profit=profit[key])
        for key in sorted(orders)
    )


def by_hour(entries: Sequence[CostedOrder], tz: tzinfo) -> tuple[HourPoint, ...]:
    hours = [
        to_local(entry.order.timestamp, tz).hour
        for entry in entries
        if entry.order.timestamp is not None
    ]
    counts = np.bincount(np.asarray(hours, dtype=np.int64), minlength=24)
    return tuple(
        HourPoint(hour=hour, label=f"{hour:02d}:00", orders=int(counts[hour])) for hour in range(24)
    )


def by_weekday(entries: Sequence[CostedOrder], tz: tzinfo) -> tuple[WeekdayPoint, ...]:
    days: list[int] = []
    amounts: list[float] = []
    for entry in entries:
        instant = entry.order.timestamp
        if instant is None:
            continue
        days.append(weekday_index(to_local(instant, tz).date()))
        amounts.append(entry.costs.revenue)
    index = np.asarray(days, dtype=np.int64)
    counts = np.bincount(index, minlength=7)
    revenue = np.bincount(index, weights=np.asarray(amounts, dtype=np.float64), minlength=7)
    return tuple(
        WeekdayPoint(
            index=day,
            label=WEEKDAY_LABELS[day],
            orders=int(counts[day]),
            revenue=float(revenue[day]),
        )
        for day in range(7)
    )


def _active(entries: Sequence[CostedOrder]) -> list[CostedOrder]:
    return [entry for entry in entries if not entry.order.is_cancelled]
