from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib as _toml
else:  # pragma: no cover - only used on Python < 3.11
    import tomli as _toml


def loads(text: str) -> dict[str, Any]:
    return _toml.loads(text)


def load_tool_table(pyproject: Path, tool: str) -> dict[str, Any]:
    """Return ``[tool.<tool>]`` from a pyproject file, or an empty table."""
    if not pyproject.exists():
        return {}
    data = loads(pyproject.read_text(encoding="utf-8"))
    table = data.get("tool", {}).get(tool, {})
    return table if isinstance(table, dict) else {}
