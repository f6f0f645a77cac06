from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal

OrderStatus = Literal["pending", "confirmed", "preparing", "shipped", "delivered", "cancelled"]
FilterKind = Literal["all", "today", "yesterday", "days_before", "custom"]
IdentityKind = Literal["email", "phone"]
Granularity = Literal["daily", "weekly", "monthly"]

ORDER_STATUSES: tuple[OrderStatus, ...] = (
    "pending",
    "confirmed",
    "preparing",
    "shipped",
    "delivered",
    "cancelled",
)
FILTER_KINDS: tuple[FilterKind, ...] = ("all", "today", "yesterday", "days_before", "custom")
ALL = "all"


@dataclass(frozen=True, slots=True)
class Customer:
    full_name: str = ""
    phone: str = ""
    email: str = ""
    city: str = ""
    postal_code: str = ""
    address: str = ""


@dataclass(frozen=True, slots=True)
class LineItem:
    name: str
    price: float
    quantity: int
    subtotal: float

    @property
    def gross(self) -> float:
        return self.price * self.quantity


@dataclass(frozen=True, slots=True)
class OrderSummary:
    products_total: float
    delivery_fee: float
    total_price: float
    total_items: int


@dataclass(frozen=True, slots=True)
class Order:
    id: str
    order_number: str
    customer: Customer
    products: tuple[LineItem, ...]
    summary: OrderSummary
    status: OrderStatus
    order_date: datetime | None = None
    created_at: datetime | None = None
    note: str | None = None

    @property
    def timestamp(self) -> datetime | None:
        if self.order_date is not None:
            return self.order_date
        return self.created_at

    @property
    def is_cancelled(self) -> bool:
        return self.status == "cancelled"


@dataclass(frozen=True, slots=True)
class ReturnEvent:
    created_at: datetime | None
    cost: float


@dataclass(frozen=True, slots=True)
class CustomerKey:
    kind: IdentityKind
    value: str

    def __str__(self) -> str:
        return f"{self.kind}:{self.value}"


@dataclass(frozen=True, slots=True)
class DateFilter:
    kind: FilterKind = "all"
    start: date | None = None
    end: date | None = None

    @classmethod
    def all(cls) -> DateFilter:
        return cls("all")

    @classmethod
    def custom(cls, start: date, end: date | None = None) -> DateFilter:
        return cls("custom", start, end if end is not None else start)


@dataclass(frozen=True, slots=True)
class DateRange:
    start: datetime | None
    end: datetime | None

    def contains(self, instant: datetime) -> bool:
        if self.start is not None and instant < self.start:
            return False
        if self.end is not None and instant > self.end:
            return False
        return True


@dataclass(frozen=True, slots=True)
class OrderCosts:
    revenue: float = 0.0
    product_cost: float = 0.0
    free_product_cost: float = 0.0
    commission: float = 0.0
    profit: float = 0.0
    free_products: int = 0


@dataclass(frozen=True, slots=True)
class CostedOrder:
    order: Order
    costs: OrderCosts


@dataclass(frozen=True, slots=True)
class WindowTotals:
    orders: int = 0
    active_orders: int = 0
    revenue: float = 0.0
    profit: float = 0.0
    free_products: int = 0
    returns: int = 0
    returns_cost: float = 0.0

    @property
    def net_profit(self) -> float:
        return self.profit - self.returns_cost


@dataclass(frozen=True, slots=True)
class StatusCount:
    status: OrderStatus
    count: int


@dataclass(frozen=True, slots=True)
class StatusBucket:
    status: OrderStatus
    orders: int
    revenue: float
    profit: float


@dataclass(frozen=True, slots=True)
class CityBucket:
    city: str
    orders: int
    revenue: float
    profit: float


@dataclass(frozen=True, slots=True)
class ProductBucket:
    name: str
    quantity: int
    revenue: float
    profit: float
    order_count: int


@dataclass(frozen=True, slots=True)
class QuantityBucket:
    name: str
    quantity: int


@dataclass(frozen=True, slots=True)
class QuantityBreakdown:
    status: str
    plant_type: str
    items: tuple[QuantityBucket, ...]
    total: int
    plant_types: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class DailyPoint:
    day: str
    orders: int
    revenue: float
    profit: float


@dataclass(frozen=True, slots=True)
class HourPoint:
    hour: int
    label: str
    orders: int


@dataclass(frozen=True, slots=True)
class WeekdayPoint:
    index: int
    label: str
    orders: int
    revenue: float


@dataclass(frozen=True, slots=True)
class RollingBucket:
    key: str
    orders: int
    revenue: float
    profit: float


@dataclass(frozen=True, slots=True)
class RollingSeries:
    granularity: Granularity
    buckets: tuple[RollingBucket, ...]
    avg_revenue: float
    avg_profit: float


@dataclass(frozen=True, slots=True)
class RollingAverages:
    status: str
    daily: RollingSeries
    weekly: RollingSeries
    monthly: RollingSeries


@dataclass(frozen=True, slots=True)
class CustomerMetrics:
    unique_customers: int = 0
    repeat_customers: int = 0
    avg_orders_per_customer: float = 0.0
    conversion_rate: float = 0.0
    avg_items_per_order: float = 0.0


@dataclass(frozen=True, slots=True)
class RecentOrder:
    id: str
    order_number: str
    customer_name: str
    total_price: float
    status: OrderStatus
    timestamp: datetime | None


@dataclass(frozen=True, slots=True)
class SalesStats:
    now: datetime
    date_filter: DateFilter
    date_range: DateRange
    filtered: WindowTotals
    today: WindowTotals
    yesterday: WindowTotals
    days_before: WindowTotals
    avg_order_value: float
    status_counts: tuple[StatusCount, ...]
    by_status: tuple[StatusBucket, ...]
    by_city: tuple[CityBucket, ...]
    by_product: tuple[ProductBucket, ...]
    quantities: QuantityBreakdown
    orders_over_time: tuple[DailyPoint, ...]
    by_hour: tuple[HourPoint, ...]
    by_weekday: tuple[WeekdayPoint, ...]
    customers: CustomerMetrics
    averages: RollingAverages
    recent_orders: tuple[RecentOrder, ...]
