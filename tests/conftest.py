"""Shared fixtures: every test runs against an empty config directory."""

import pytest

from paystub.sdk import get_default_calculator
from paystub.sdk.taxes import clear_cache


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point PAYSTUB_CONFIG_PATH at a temp dir and reset loaded tables."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("PAYSTUB_CONFIG_PATH", str(config_dir))

    clear_cache()
    get_default_calculator.cache_clear()
    yield {"config_dir": config_dir}
    clear_cache()
    get_default_calculator.cache_clear()


@pytest.fixture
def base_params():
    """$31.25/hr x 80 hours biweekly: $2,500.00 gross per period."""
    return {
        "hourlyRate": 31.25,
        "hoursPerPeriod": 80,
        "overtimeHours": 0,
        "filingStatus": "single",
        "taxYear": 2024,
        "state": "TX",
        "payFrequency": "biweekly",
        "additionalDeductions": [],
    }
