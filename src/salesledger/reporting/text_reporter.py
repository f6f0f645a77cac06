from __future__ import annotations

from salesledger.core.types import SalesStats, WindowTotals

CURRENCY = "TND"


class TextReporter:
    def write(self, stats: SalesStats, out_path: str) -> None:
        with open(out_path, "w", encoding="utf-8") as handle:
            handle.write(self.render(stats))

    def render(self, stats: SalesStats) -> str:
        lines = [f"Sales summary ({_describe_filter(stats)}) as of {stats.now.isoformat()}", ""]
        lines.extend(_totals_block("Selected window", stats.filtered))
        lines.extend(_totals_block("Today", stats.today))
        lines.extend(_totals_block("Yesterday", stats.yesterday))
        lines.append(f"Average order value: {_money(stats.avg_order_value)}")
        lines.append("")

        lines.append("Orders by status:")
        for count in stats.status_counts:
            lines.append(f"  {count.status:<10} {count.count:>6}")
        lines.append("")

        if stats.by_city:
            lines.append("Top cities:")
            for city in stats.by_city[:10]:
                name = city.city or "(unknown)"
                lines.append(f"  {name:<20} {city.orders:>5} orders  {_money(city.revenue)}")
            lines.append("")

        if stats.by_product:
            lines.append("Products (attributed):")
            for product in stats.by_product:
                lines.append(
                    f"  {product.name:<20} qty {product.quantity:>5}  "
                    f"revenue {_money(product.revenue)}  profit {_money(product.profit)}"
                )
            lines.append("")

        customers = stats.customers
        lines.append(
            f"Customers: {customers.unique_customers} unique, "
            f"{customers.repeat_customers} repeat, "
            f"conversion {customers.conversion_rate:.1f}%, "
            f"{customers.avg_items_per_order:.2f} items/order"
        )
        averages = stats.averages
        lines.append(
            "Average revenue per day/week/month: "
            f"{_money(averages.daily.avg_revenue)} / "
            f"{_money(averages.weekly.avg_revenue)} / "
            f"{_money(averages.monthly.avg_revenue)}"
        )
        return "\n".join(lines) + "\n"


def _totals_block(title: str, totals: WindowTotals) -> list[str]:
    return [
        f"{title}:",
        f"  orders         {totals.orders} ({totals.active_orders} active)",
        f"  revenue        {_money(totals.revenue)}",
        f"  profit         {_money(totals.profit)}",
        f"  returns        {totals.returns} (-{_money(totals.returns_cost)})",
        f"  net profit     {_money(totals.net_profit)}",
        f"  free products  {totals.free_products}",
        "",
    ]


def _describe_filter(stats: SalesStats) -> str:
    date_filter = stats.date_filter
    if date_filter.kind != "custom":
        return date_filter.kind
    return f"{date_filter.start} to {date_filter.end or date_filter.start}"


def _money(amount: float) -> str:
    return f"{amount:.2f} {CURRENCY}"
