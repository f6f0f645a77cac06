from __future__ import annotations

import argparse
import sys

from salesledger.cli.commands.order import run_order
from salesledger.cli.commands.stats import StatsOptions, run_stats
from salesledger.core.errors import SalesLedgerError
from salesledger.core.logging import set_verbosity
from salesledger.core.types import FILTER_KINDS, ORDER_STATUSES

STATUS_CHOICES = ["all", *ORDER_STATUSES]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="salesledger")
    parser.add_argument("--verbose", "-v", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    stats = sub.add_parser("stats", help="Aggregate sales metrics from an order ledger")
    stats.add_argument("orders")
    stats.add_argument("--returns", default=None)
    stats.add_argument("--filter", choices=FILTER_KINDS, default="all")
    stats.add_argument("--from", dest="date_from", default=None)
    stats.add_argument("--to", dest="date_to", default=None)
    stats.add_argument("--cans-status", choices=STATUS_CHOICES, default="all")
    stats.add_argument("--plant-type", default="all")
    stats.add_argument("--averages-status", choices=STATUS_CHOICES, default="all")
    stats.add_argument("--now", default=None)
    stats.add_argument("--timezone", default=None)
    stats.add_argument("--commission-rate", type=float, default=None)
    stats.add_argument("--format", choices=["json", "text"], default="text")
    stats.add_argument("--out", default=None)

    order = sub.add_parser("order", help="Show the cost breakdown of a single order")
    order.add_argument("orders")
    order.add_argument("order_id")
    order.add_argument("--commission-rate", type=float, default=None)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    set_verbosity(args.verbose)
    try:
        if args.command == "stats":
            run_stats(
                StatsOptions(
                    orders_path=args.orders,
                    fmt=args.format,
                    out_path=args.out,
                    returns_path=args.returns,
                    filter_kind=args.filter,
                    date_from=args.date_from,
                    date_to=args.date_to,
                    cans_status=args.cans_status,
                    plant_type=args.plant_type,
                    averages_status=args.averages_status,
                    now=args.now,
                    timezone=args.timezone,
                    commission_rate=args.commission_rate,
                )
            )
        if args.command == "order":
            run_order(args.orders, args.order_id, args.commission_rate)
    except (SalesLedgerError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0
