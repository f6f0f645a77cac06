from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from salesledger.core.types import CostedOrder, Customer, CustomerKey, CustomerMetrics


def customer_key(customer: Customer) -> CustomerKey | None:
    """Identify a customer by email, or by phone when no email was given."""
    email = (customer.email or "").strip().lower()
    if email:
        return CustomerKey(kind="email", value=email)
    phone = (customer.phone or "").strip()
    if phone:
        return CustomerKey(kind="phone", value=phone)
    return None


def customer_metrics(entries: Sequence[CostedOrder]) -> CustomerMetrics:
    active = [entry for entry in entries if not entry.order.is_cancelled]
    visits: Counter[CustomerKey] = Counter()
    for entry in active:
        key = customer_key(entry.order.customer)
        if key is not None:
            visits[key] += 1

    cancelled = len(entries) - len(active)
    delivered = sum(1 for entry in entries if entry.order.status == "delivered")
    placed = len(entries) - cancelled

    unique = len(visits)
    return CustomerMetrics(
        unique_customers=unique,
        repeat_customers=sum(1 for count in visits.values() if count > 1),
        avg_orders_per_customer=_ratio(sum(visits.values()), unique),
        conversion_rate=_ratio(delivered, placed) * 100,
        avg_items_per_order=_ratio(sum(e.order.summary.total_items for e in active), len(active)),
    )


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return numerator / denominator
