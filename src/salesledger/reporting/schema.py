from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from salesledger._compat.toml import loads as toml_loads


def _release_version() -> str:
    try:
        return version("salesledger")
    except PackageNotFoundError:
        pyproject = Path(__file__).resolve().parents[3] / "pyproject.toml"
        if not pyproject.exists():
            return "0.0.0"
        project = toml_loads(pyproject.read_text(encoding="utf-8")).get("project", {})
        project_version = project.get("version") if isinstance(project, dict) else None
        return project_version if isinstance(project_version, str) else "0.0.0"


SCHEMA_VERSION = _release_version()
