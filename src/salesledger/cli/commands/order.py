from __future__ import annotations

import sys

from salesledger.cli.commands.stats import build_config
from salesledger.core.config import CostConfig
from salesledger.core.errors import RecordError
from salesledger.core.types import Order, OrderCosts
from salesledger.cost.model import order_costs
from salesledger.io.ledger import load_orders
from salesledger.reporting.text_reporter import CURRENCY


def run_order(orders_path: str, order_ref: str, commission_rate: float | None) -> None:
    config = build_config(None, commission_rate)
    order = find_order(load_orders(orders_path), order_ref)
    sys.stdout.write(render_breakdown(order, order_costs(order, config.cost), config.cost))


def find_order(orders: list[Order], order_ref: str) -> Order:
    for order in orders:
        if order_ref in (order.id, order.order_number):
            return order
    raise RecordError(f"no order with id or number {order_ref!r}")


def render_breakdown(order: Order, costs: OrderCosts, cost: CostConfig) -> str:
    summary = order.summary
    rows = [
        ("Products total", summary.products_total),
        ("Delivery fee", summary.delivery_fee),
        ("Order total", summary.total_price),
        ("Revenue", costs.revenue),
        (f"Product cost ({summary.total_items} x {cost.unit_cost:.2f})", -costs.product_cost),
    ]
    if costs.free_products:
        rows.append((f"Free product ({costs.free_products})", -costs.free_product_cost))
    rows.append((f"Commission ({cost.commission_rate * 100:g}% of revenue)", -costs.commission))
    rows.append(("Net profit", costs.profit))

    lines = [f"Order {order.order_number or order.id} [{order.status}]"]
    if order.is_cancelled:
        lines.append("  cancelled orders carry no revenue or profit")
    lines.extend(f"  {label:<32} {amount:>10.2f} {CURRENCY}" for label, amount in rows)
    return "\n".join(lines) + "\n"
