"""Per-order money model.

Revenue is what the shop keeps after the flat delivery fee. Profit takes off
the unit cost of every item, the unit given away on large orders, and the
commission on revenue. Cancelled orders are worth nothing.
"""

from __future__ import annotations

from salesledger.core.config import CostConfig
from salesledger.core.types import CostedOrder, Order, OrderCosts

_ZERO = OrderCosts()


def order_revenue(total_price: float, cost: CostConfig) -> float:
    return max(0.0, total_price - cost.delivery_fee)


def order_costs(order: Order, cost: CostConfig) -> OrderCosts:
    if order.is_cancelled:
        return _ZERO
    items = order.summary.total_items
    revenue = order_revenue(order.summary.total_price, cost)
    product_cost = items * cost.unit_cost
    free_products = 1 if items >= cost.free_item_threshold else 0
    free_product_cost = cost.unit_cost if free_products else 0.0
    commission = revenue * cost.commission_rate
    profit = revenue - product_cost - free_product_cost - commission
    return OrderCosts(
        revenue=revenue,
        product_cost=float(product_cost),
        free_product_cost=free_product_cost,
        commission=commission,
        profit=profit,
        free_products=free_products,
    )


def cost_order(order: Order, cost: CostConfig) -> CostedOrder:
    return CostedOrder(order=order, costs=order_costs(order, cost))
