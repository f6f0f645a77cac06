from pathlib import Path

import pytest

from salesledger.core.config_loader import load_config
from salesledger.core.errors import ConfigError


def test_load_config_from_pyproject(tmp_path: Path):
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(
        """
[tool.salesledger.cost]
delivery_fee = 7
commission_rate = 0.01
free_item_threshold = 4

[tool.salesledger.reporting]
timezone = "UTC"
recent_orders = 10
""",
        encoding="utf-8",
    )
    config = load_config(tmp_path)
    assert config.cost.delivery_fee == 7.0
    assert config.cost.commission_rate == 0.01
    assert config.cost.free_item_threshold == 4
    assert config.cost.unit_cost == 6.0
    assert config.reporting.timezone == "UTC"
    assert config.reporting.recent_orders == 10


def test_defaults_without_pyproject(tmp_path: Path):
    config = load_config(tmp_path)
    assert config.cost.commission_rate == 0.03
    assert config.cost.return_cost == 3.0
    assert config.reporting.timezone == "Africa/Tunis"


def test_overrides_win_over_pyproject(tmp_path: Path):
    (tmp_path / "pyproject.toml").write_text(
        '[tool.salesledger.reporting]\ntimezone = "Europe/Paris"\n', encoding="utf-8"
    )
    config = load_config(tmp_path, {"reporting": {"timezone": "UTC"}})
    assert config.reporting.timezone == "UTC"


@pytest.mark.parametrize(
    "overrides",
    [
        {"cost": {"commission_rate": 1.5}},
        {"cost": {"unit_cost": -1}},
        {"cost": {"free_item_threshold": 0}},
        {"reporting": {"timezone": "Mars/Olympus_Mons"}},
    ],
)
def test_invalid_config_rejected(tmp_path: Path, overrides: dict[str, object]):
    with pytest.raises(ConfigError):
        load_config(tmp_path, overrides)


def test_malformed_pyproject_values_rejected(tmp_path: Path):
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text('[tool.salesledger.reporting]\nrecent_orders = "five"\n', encoding="utf-8")
    with pytest.raises(ConfigError, match="reporting.recent_orders"):
        load_config(tmp_path)
    pyproject.write_text("[tool.salesledger]\ncost = 5\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="cost must be a table"):
        load_config(tmp_path)
    pyproject.write_text(
        "[tool.salesledger.cost]\nfree_item_threshold = inf\n", encoding="utf-8"
    )
    with pytest.raises(ConfigError):
        load_config(tmp_path)
