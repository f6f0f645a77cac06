from __future__ import annotations

import math
from collections.abc import Iterable

from salesledger.core.errors import RecordError
from salesledger.core.types import ORDER_STATUSES, Order, ReturnEvent

SUBTOTAL_TOLERANCE = 1e-6
CUSTOMER_FIELDS = ("full_name", "phone", "email", "city", "postal_code", "address")


def check_amount(value: object, field: str, *, integral: bool = False) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RecordError(f"{field} must be a number, got {value!r}")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        finite = False
    if not finite:
        raise RecordError(f"{field} must be finite, got {value!r}")
    if value < 0:
        raise RecordError(f"{field} must be >= 0, got {value!r}")
    if integral and float(value) != int(value):
        raise RecordError(f"{field} must be a whole number, got {value!r}")
    return float(value)


def check_order(order: Order) -> None:
    label = f"order {order.order_number or order.id}"
    if order.status not in ORDER_STATUSES:
        raise RecordError(f"{label}: unknown status {order.status!r}")
    for name in CUSTOMER_FIELDS:
        if not isinstance(getattr(order.customer, name), str):
            raise RecordError(f"{label}: customer.{name} must be a string")
    summary = order.summary
    check_amount(summary.total_price, f"{label}: orderSummary.totalPrice")
    check_amount(summary.total_items, f"{label}: orderSummary.totalItems", integral=True)
    check_amount(summary.products_total, f"{label}: orderSummary.productsTotal")
    check_amount(summary.delivery_fee, f"{label}: orderSummary.deliveryFee")
    for position, item in enumerate(order.products):
        prefix = f"{label}: products[{position}]"
        check_amount(item.price, f"{prefix}.price")
        check_amount(item.quantity, f"{prefix}.quantity", integral=True)
        check_amount(item.subtotal, f"{prefix}.subtotal")
        if not math.isclose(item.subtotal, item.gross, rel_tol=0.0, abs_tol=SUBTOTAL_TOLERANCE):
            raise RecordError(
                f"{prefix}.subtotal {item.subtotal!r} != price x quantity {item.gross!r}"
            )


def check_return(event: ReturnEvent, position: int = 0) -> None:
    check_amount(event.cost, f"return[{position}].cost")


def check_ledger(orders: Iterable[Order], returns: Iterable[ReturnEvent]) -> None:
    for order in orders:
        check_order(order)
    for position, event in enumerate(returns):
        check_return(event, position)
