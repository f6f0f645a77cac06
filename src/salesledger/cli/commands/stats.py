from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import cast

from dateutil.parser import isoparse

from salesledger.core.config import SalesLedgerConfig
from salesledger.core.config_loader import load_config, reporting_zone
from salesledger.core.engine import compute_stats
from salesledger.core.errors import FilterError
from salesledger.core.logging import get_logger
from salesledger.core.types import DateFilter, FilterKind
from salesledger.io.ledger import load_orders, load_returns
from salesledger.reporting.json_reporter import JsonReporter
from salesledger.reporting.text_reporter import TextReporter

logger = get_logger("cli")


@dataclass(frozen=True, slots=True)
class StatsOptions:
    orders_path: str
    fmt: str
    out_path: str | None
    returns_path: str | None = None
    filter_kind: str = "all"
    date_from: str | None = None
    date_to: str | None = None
    cans_status: str = "all"
    plant_type: str = "all"
    averages_status: str = "all"
    now: str | None = None
    timezone: str | None = None
    commission_rate: float | None = None


def run_stats(options: StatsOptions) -> None:
    config = build_config(options.timezone, options.commission_rate)
    orders = load_orders(options.orders_path)
    returns = (
        load_returns(options.returns_path, config.cost.return_cost) if options.returns_path else []
    )
    logger.info("loaded %d orders and %d returns", len(orders), len(returns))

    stats = compute_stats(
        orders,
        returns,
        build_filter(options.filter_kind, options.date_from, options.date_to),
        now=resolve_now(options.now, config),
        cans_status=options.cans_status,
        plant_type=options.plant_type,
        averages_status=options.averages_status,
        config=config,
    )

    if options.fmt == "json":
        reporter: JsonReporter | TextReporter = JsonReporter()
    else:
        reporter = TextReporter()
    if options.out_path is None:
        sys.stdout.write(reporter.render(stats))
        return
    reporter.write(stats, options.out_path)
    logger.info("wrote %s report to %s", options.fmt, options.out_path)


def build_config(timezone: str | None, commission_rate: float | None) -> SalesLedgerConfig:
    overrides: dict[str, object] = {}
    timezone = timezone or os.environ.get("SALESLEDGER_TIMEZONE", "").strip() or None
    if timezone:
        overrides["reporting"] = {"timezone": timezone}
    if commission_rate is not None:
        overrides["cost"] = {"commission_rate": commission_rate}
    return load_config(Path.cwd(), overrides)


def build_filter(kind: str, date_from: str | None, date_to: str | None) -> DateFilter:
    if kind == "custom":
        if not date_from:
            raise FilterError("--filter custom requires --from")
        return DateFilter.custom(_parse_day(date_from), _parse_day(date_to) if date_to else None)
    if date_from or date_to:
        raise FilterError("--from/--to only apply to --filter custom")
    return DateFilter(cast(FilterKind, kind))


def resolve_now(value: str | None, config: SalesLedgerConfig) -> datetime:
    tz = reporting_zone(config)
    if value is None:
        return datetime.now(tz)
    try:
        parsed = isoparse(value)
    except ValueError as exc:
        raise FilterError(f"--now: invalid timestamp {value!r}") from exc
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=tz)


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise FilterError(f"invalid date {value!r}, expected YYYY-MM-DD") from exc
