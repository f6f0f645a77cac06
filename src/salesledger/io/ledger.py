from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any, cast

from dateutil.parser import isoparse

from salesledger.core.errors import RecordError
from salesledger.core.logging import get_logger
from salesledger.core.types import (
    ORDER_STATUSES,
    Customer,
    LineItem,
    Order,
    OrderStatus,
    OrderSummary,
    ReturnEvent,
)
from salesledger.core.validation import check_amount, check_order, check_return

_WRAPPER_KEYS = ("orders", "data")

logger = get_logger("io")


def load_orders(path: str | Path) -> list[Order]:
    return [parse_order(raw, index) for index, raw in enumerate(_read_records(Path(path)))]


def load_returns(path: str | Path, default_cost: float) -> list[ReturnEvent]:
    return [
        parse_return(raw, default_cost, index)
        for index, raw in enumerate(_read_records(Path(path)))
    ]


def _read_records(path: Path) -> list[Mapping[str, Any]]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise RecordError(f"{path}: not valid UTF-8 (byte {exc.start})") from exc
    except json.JSONDecodeError as exc:
        raise RecordError(f"{path}: invalid JSON ({exc.msg} at line {exc.lineno})") from exc
    except ValueError as exc:
        raise RecordError(f"{path}: invalid JSON ({exc})") from exc
    if isinstance(payload, dict):
        wrapper = cast(dict[str, Any], payload)
        for key in _WRAPPER_KEYS:
            if isinstance(wrapper.get(key), list):
                payload = wrapper[key]
                break
    if not isinstance(payload, list):
        raise RecordError(f"{path}: expected a list of records")
    records = cast(list[Any], payload)
    for index, raw in enumerate(records):
        if not isinstance(raw, dict):
            raise RecordError(f"{path}: record {index} is not an object")
    return cast(list[Mapping[str, Any]], records)


def parse_order(raw: Mapping[str, Any], index: int = 0) -> Order:
    order_id = _identifier(raw.get("_id") or raw.get("id") or index)
    label = f"order {raw.get('orderNumber') or order_id}"

    status = raw.get("status")
    if status not in ORDER_STATUSES:
        raise RecordError(f"{label}: unknown status {status!r}")

    summary_raw = _mapping(raw.get("orderSummary"), f"{label}: orderSummary")
    products_raw = raw.get("products") or []
    if not isinstance(products_raw, list):
        raise RecordError(f"{label}: products must be a list")
    products = tuple(
        _parse_line(item, f"{label}: products[{pos}]")
        for pos, item in enumerate(cast(list[Any], products_raw))
    )
    summary = OrderSummary(
        products_total=_amount(
            summary_raw.get("productsTotal", sum(item.subtotal for item in products)),
            f"{label}: orderSummary.productsTotal",
        ),
        delivery_fee=_amount(
            summary_raw.get("deliveryFee", 0), f"{label}: orderSummary.deliveryFee"
        ),
        total_price=_amount(summary_raw.get("totalPrice"), f"{label}: orderSummary.totalPrice"),
        total_items=int(
            _amount(summary_raw.get("totalItems"), f"{label}: orderSummary.totalItems", True)
        ),
    )
    customer_raw = _mapping(raw.get("customer") or {}, f"{label}: customer")
    order = Order(
        id=order_id,
        order_number=str(raw.get("orderNumber") or ""),
        customer=Customer(
            full_name=_text(customer_raw.get("fullName")),
            phone=_text(customer_raw.get("phone")),
            email=_text(customer_raw.get("email")),
            city=_text(customer_raw.get("city")),
            postal_code=_text(customer_raw.get("postalCode")),
            address=_text(customer_raw.get("address")),
        ),
        products=products,
        summary=summary,
        status=cast(OrderStatus, status),
        order_date=_optional_timestamp(raw.get("orderDate"), f"{label}: orderDate"),
        created_at=_timestamp(raw.get("createdAt"), f"{label}: createdAt"),
        note=_text(raw.get("note")) or None,
    )
    check_order(order)
    return order


def parse_return(raw: Mapping[str, Any], default_cost: float, index: int = 0) -> ReturnEvent:
    event = ReturnEvent(
        created_at=_timestamp(raw.get("createdAt"), f"return[{index}].createdAt"),
        cost=_amount(raw.get("cost", default_cost), f"return[{index}].cost"),
    )
    check_return(event, index)
    return event


def _parse_line(value: object, label: str) -> LineItem:
    raw = _mapping(value, label)
    price = _amount(raw.get("price"), f"{label}.price")
    quantity = int(_amount(raw.get("quantity"), f"{label}.quantity", True))
    subtotal = raw.get("subtotal")
    return LineItem(
        name=_text(raw.get("name")),
        price=price,
        quantity=quantity,
        subtotal=price * quantity if subtotal is None else _amount(subtotal, f"{label}.subtotal"),
    )


def _mapping(value: object, label: str) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise RecordError(f"{label} must be an object")
    return cast(Mapping[str, Any], value)


def _amount(value: object, label: str, integral: bool = False) -> float:
    if value is None:
        raise RecordError(f"{label} is missing")
    return check_amount(value, label, integral=integral)


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _timestamp(value: object, label: str) -> datetime | None:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, dict) and "$date" in value:
        # Mongo extended JSON export.
        value = cast(dict[str, Any], value)["$date"]
    if not isinstance(value, str):
        raise RecordError(f"{label} must be an ISO-8601 string, got {value!r}")
    try:
        return isoparse(value)
    except ValueError as exc:
        raise RecordError(f"{label}: invalid timestamp {value!r}") from exc


def _optional_timestamp(value: object, label: str) -> datetime | None:
    # Unusable order dates fall back to the creation time.
    try:
        return _timestamp(value, label)
    except RecordError as exc:
        logger.debug("ignoring %s", exc)
        return None


def _identifier(value: object) -> str:
    if isinstance(value, dict) and "$oid" in value:
        value = cast(dict[str, Any], value)["$oid"]
    return str(value)
