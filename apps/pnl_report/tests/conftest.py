"""Shared fixtures for pnl_report tests."""

import pytest
import yaml

ROUND_TRIP_CSV = (
    "id,side,price,qty,fee,timestamp\n"
    "b1,Buy,10,100,0.1,2025-01-15T12:00:00Z\n"
    "s1,Sell,12,100,0.1,2025-01-15T13:00:00Z\n"
)


@pytest.fixture(autouse=True)
def _isolate_config_env_var(monkeypatch):
    """Prevent PNL_REPORT_CONFIG_PATH from redirecting load_config() in tests."""
    monkeypatch.delenv("PNL_REPORT_CONFIG_PATH", raising=False)


@pytest.fixture
def config_data():
    """Minimal valid config: capital requirement 1000 * min(10, 5) = 5000."""
    return {
        "grid": {
            "symbol": "BTCUSDT",
            "price_range": {"upper": "13", "lower": "8"},
            "grid_levels": 10,
            "grid_spacing": "0.5",
            "base_order_size": "1000",
            "max_positions": 5,
        },
        "risk_free_rate": 0.0,
    }


@pytest.fixture
def trades_file(tmp_path):
    """BUY 100@10 then SELL 100@12 one hour later, fee 0.1 each."""
    path = tmp_path / "trades.csv"
    path.write_text(ROUND_TRIP_CSV)
    return path


@pytest.fixture
def write_config(tmp_path, config_data, trades_file):
    """Factory writing config_data (plus overrides) next to trades.csv."""
    def _write(**overrides):
        data = {**config_data, "trades_path": trades_file.name, **overrides}
        path = tmp_path / "pnl_report.yaml"
        path.write_text(yaml.dump(data))
        return path
    return _write
