from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CostConfig:
    delivery_fee: float = 8.0
    unit_cost: float = 6.0
    free_item_threshold: int = 3
    # One rate for every profit computation, order detail included.
    commission_rate: float = 0.03
    return_cost: float = 3.0


@dataclass(frozen=True, slots=True)
class ReportingConfig:
    timezone: str = "Africa/Tunis"
    recent_orders: int = 5


@dataclass(frozen=True, slots=True)
class SalesLedgerConfig:
    cost: CostConfig = CostConfig()
    reporting: ReportingConfig = ReportingConfig()
