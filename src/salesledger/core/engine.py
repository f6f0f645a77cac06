from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime, tzinfo

from salesledger.aggregation.customers import customer_metrics
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
from salesledger.aggregation.rolling import rolling_averages
from salesledger.core.config import SalesLedgerConfig
from salesledger.core.config_loader import reporting_zone, validate_config
from salesledger.core.errors import FilterError
from salesledger.core.logging import get_logger
from salesledger.core.types import (
    ALL,
    ORDER_STATUSES,
    CostedOrder,
    DateFilter,
    Order,
    RecentOrder,
    ReturnEvent,
    SalesStats,
    WindowTotals,
)
from salesledger.core.validation import check_ledger
from salesledger.cost.model import cost_order
from salesledger.dates.resolver import partition, resolve_range, to_local

logger = get_logger("engine")


def _validate_selectors(cans_status: str, averages_status: str, plant_type: str) -> None:
    for name, value in (("cans_status", cans_status), ("averages_status", averages_status)):
        if value != ALL and value not in ORDER_STATUSES:
            raise FilterError(f"{name} must be 'all' or an order status, got {value!r}")
    if not plant_type:
        raise FilterError("plant_type must be 'all' or a product name")


def window_totals(
    entries: Sequence[CostedOrder], returns: Sequence[ReturnEvent]
) -> WindowTotals:
    active = [entry for entry in entries if not entry.order.is_cancelled]
    return WindowTotals(
        orders=len(entries),
        active_orders=len(active),
        revenue=math.fsum(entry.costs.revenue for entry in active),
        profit=math.fsum(entry.costs.profit for entry in active),
        free_products=sum(entry.costs.free_products for entry in active),
        returns=len(returns),
        returns_cost=math.fsum(event.cost for event in returns),
    )


def recent_orders(
    entries: Sequence[CostedOrder], limit: int, tz: tzinfo
) -> tuple[RecentOrder, ...]:
    dated = [entry.order for entry in entries if entry.order.timestamp is not None]
    dated.sort(key=lambda order: (to_local(order.timestamp, tz), order.id), reverse=True)
    return tuple(
        RecentOrder(
            id=order.id,
            order_number=order.order_number,
            customer_name=order.customer.full_name,
            total_price=order.summary.total_price,
            status=order.status,
            timestamp=order.timestamp,
        )
        for order in dated[:limit]
    )


def compute_stats(
    orders: Sequence[Order],
    returns: Sequence[ReturnEvent],
    date_filter: DateFilter | None = None,
    *,
    now: datetime,
    cans_status: str = ALL,
    plant_type: str = ALL,
    averages_status: str = ALL,
    config: SalesLedgerConfig | None = None,
) -> SalesStats:
    """Derive every dashboard metric from one snapshot of orders and returns.

    ``now`` anchors the today/yesterday windows and must be supplied by the
    caller. The result only depends on the arguments, so two calls with the
    same snapshot compare equal.
    """
    config = config or SalesLedgerConfig()
    date_filter = date_filter or DateFilter.all()
    validate_config(config)
    _validate_selectors(cans_status, averages_status, plant_type)
    check_ledger(orders, returns)
    tz = reporting_zone(config)

    costed = [cost_order(order, config.cost) for order in orders]
    order_parts = partition(costed, date_filter, now, tz, lambda entry: entry.order.timestamp)
    return_parts = partition(returns, date_filter, now, tz, lambda event: event.created_at)
    filtered = order_parts.filtered
    logger.debug(
        "window %s: %d/%d orders, %d/%d returns",
        date_filter.kind,
        len(filtered),
        len(costed),
        len(return_parts.filtered),
        len(returns),
    )

    totals = window_totals(filtered, return_parts.filtered)
    return SalesStats(
        now=now,
        date_filter=date_filter,
        date_range=resolve_range(date_filter, now, tz),
        filtered=totals,
        today=window_totals(order_parts.today, return_parts.today),
        yesterday=window_totals(order_parts.yesterday, return_parts.yesterday),
        days_before=window_totals(order_parts.days_before, return_parts.days_before),
        avg_order_value=totals.revenue / totals.active_orders if totals.active_orders else 0.0,
        status_counts=status_counts(filtered),
        by_status=by_status(filtered),
        by_city=by_city(filtered),
        by_product=by_product(filtered),
        quantities=quantity_by_product(filtered, orders, cans_status, plant_type),
        orders_over_time=orders_over_time(filtered, tz),
        by_hour=by_hour(filtered, tz),
        by_weekday=by_weekday(filtered, tz),
        customers=customer_metrics(filtered),
        averages=rolling_averages(costed, tz, averages_status),
        recent_orders=recent_orders(filtered, config.reporting.recent_orders, tz),
    )
