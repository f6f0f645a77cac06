from __future__ import annotations

import json
from dataclasses import asdict
from datetime import date, datetime
from typing import Any

from salesledger.core.types import SalesStats, WindowTotals
from salesledger.reporting.schema import SCHEMA_VERSION


class JsonReporter:
    def write(self, stats: SalesStats, out_path: str) -> None:
        with open(out_path, "w", encoding="utf-8") as handle:
            handle.write(self.render(stats))

    def render(self, stats: SalesStats) -> str:
        return json.dumps(self.payload(stats), indent=2, ensure_ascii=False) + "\n"

    def payload(self, stats: SalesStats) -> dict[str, Any]:
        data = _jsonable(asdict(stats))
        for window in ("filtered", "today", "yesterday", "days_before"):
            data[window] = _serialize_totals(getattr(stats, window))
        return {"schema_version": SCHEMA_VERSION, **data}


def _serialize_totals(totals: WindowTotals) -> dict[str, object]:
    payload: dict[str, object] = asdict(totals)
    payload["net_profit"] = totals.net_profit
    return payload


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value
