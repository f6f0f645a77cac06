from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Sequence
from datetime import date, tzinfo

import numpy as np

from salesledger.core.types import (
    ALL,
    CostedOrder,
    Granularity,
    RollingAverages,
    RollingBucket,
    RollingSeries,
)
from salesledger.dates.resolver import day_key, local_day, month_key, week_key

BUCKET_KEYS: dict[Granularity, Callable[[date], str]] = {
    "daily": day_key,
    "weekly": week_key,
    "monthly": month_key,
}


def rolling_series(
    entries: Sequence[CostedOrder], granularity: Granularity, tz: tzinfo
) -> RollingSeries:
    key_of = BUCKET_KEYS[granularity]
    orders: dict[str, int] = defaultdict(int)
    revenue: dict[str, float] = defaultdict(float)
    profit: dict[str, float] = defaultdict(float)
    for entry in entries:
        instant = entry.order.timestamp
        if instant is None:
            continue
        key = key_of(local_day(instant, tz))
        orders[key] += 1
        revenue[key] += entry.costs.revenue
        profit[key] += entry.costs.profit
    buckets = tuple(
        RollingBucket(key=key, orders=orders[key], revenue=revenue[key], profit=profit[key])
        for key in sorted(orders)
    )
    return RollingSeries(
        granularity=granularity,
        buckets=buckets,
        avg_revenue=_mean([bucket.revenue for bucket in buckets]),
        avg_profit=_mean([bucket.profit for bucket in buckets]),
    )


def rolling_averages(
    entries: Sequence[CostedOrder], tz: tzinfo, status: str = ALL
) -> RollingAverages:
    selected = [
        entry
        for entry in entries
        if not entry.order.is_cancelled and (status == ALL or entry.order.status == status)
    ]
    return RollingAverages(
        status=status,
        daily=rolling_series(selected, "daily", tz),
        weekly=rolling_series(selected, "weekly", tz),
        monthly=rolling_series(selected, "monthly", tz),
    )


def _mean(values: list[float]) -> float:
    # Only non-empty buckets exist, so an empty list means no orders at all.
    if not values:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=np.float64)))
