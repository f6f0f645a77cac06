from __future__ import annotations

import math
from dataclasses import replace
from pathlib import Path
from typing import Any, cast
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from salesledger._compat.toml import load_tool_table
from salesledger.core.config import SalesLedgerConfig
from salesledger.core.errors import ConfigError


def load_config(root: Path, overrides: dict[str, Any] | None = None) -> SalesLedgerConfig:
    overrides = overrides or {}
    tool_cfg = load_tool_table(root / "pyproject.toml", "salesledger")
    config = _apply_config(SalesLedgerConfig(), tool_cfg)
    config = _apply_config(config, overrides)
    validate_config(config)
    return config


def _apply_config(config: SalesLedgerConfig, cfg: dict[str, Any]) -> SalesLedgerConfig:
    if not cfg:
        return config
    if "cost" in cfg:
        c = _section(cfg, "cost")
        config = replace(
            config,
            cost=replace(
                config.cost,
                delivery_fee=_coerce(c, "cost", "delivery_fee", float, config.cost.delivery_fee),
                unit_cost=_coerce(c, "cost", "unit_cost", float, config.cost.unit_cost),
                free_item_threshold=_coerce(
                    c, "cost", "free_item_threshold", int, config.cost.free_item_threshold
                ),
                commission_rate=_coerce(
                    c, "cost", "commission_rate", float, config.cost.commission_rate
                ),
                return_cost=_coerce(c, "cost", "return_cost", float, config.cost.return_cost),
            ),
        )
    if "reporting" in cfg:
        r = _section(cfg, "reporting")
        config = replace(
            config,
            reporting=replace(
                config.reporting,
                timezone=str(r.get("timezone", config.reporting.timezone)),
                recent_orders=_coerce(
                    r, "reporting", "recent_orders", int, config.reporting.recent_orders
                ),
            ),
        )
    return config


def _section(cfg: dict[str, Any], name: str) -> dict[str, Any]:
    section = cfg[name]
    if not isinstance(section, dict):
        raise ConfigError(f"{name} must be a table, got {section!r}")
    return cast(dict[str, Any], section)


def _coerce(section: dict[str, Any], name: str, key: str, kind: type, default: Any) -> Any:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name}.{key} must be a number, got {value!r}")
    try:
        return kind(value)
    except (OverflowError, ValueError) as exc:
        raise ConfigError(f"{name}.{key}: invalid value {value!r}") from exc


def validate_config(config: SalesLedgerConfig) -> None:
    cost = config.cost
    for name in ("delivery_fee", "unit_cost", "return_cost"):
        value = getattr(cost, name)
        if not math.isfinite(value) or value < 0:
            raise ConfigError(f"cost.{name} must be a non-negative number, got {value!r}")
    if not 0.0 <= cost.commission_rate <= 1.0:
        raise ConfigError("cost.commission_rate must be between 0 and 1")
    if cost.free_item_threshold < 1:
        raise ConfigError("cost.free_item_threshold must be >= 1")
    if config.reporting.recent_orders < 0:
        raise ConfigError("reporting.recent_orders must be >= 0")
    reporting_zone(config)


def reporting_zone(config: SalesLedgerConfig) -> ZoneInfo:
    try:
        return ZoneInfo(config.reporting.timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"Unknown timezone: {config.reporting.timezone}") from exc
