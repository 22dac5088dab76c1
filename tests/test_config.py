from __future__ import annotations

import pytest

from pyhomedash.config import DashboardConfig
from pyhomedash.exceptions import HomeDashConfigError


def test_defaults_match_dashboard_cadence() -> None:
    config = DashboardConfig(base_url="https://store.example.com/")
    assert config.base_url == "https://store.example.com"
    assert config.poll_interval == 2.0
    assert config.error_ttl == 3.0
    assert config.control_id == 1
    assert config.sensor_table == "sensor_data"
    assert config.controls_table == "controls"
    assert config.optimistic_hold is None


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOMEDASH_BASE_URL", "https://abc.supabase.co")
    monkeypatch.setenv("HOMEDASH_API_KEY", "anon")
    monkeypatch.setenv("HOMEDASH_SENSOR_TABLE", "readings")
    monkeypatch.setenv("HOMEDASH_POLL_INTERVAL", "5")
    monkeypatch.setenv("HOMEDASH_OPTIMISTIC_HOLD", "4.5")
    monkeypatch.setenv("HOMEDASH_API_TRACE_ENABLED", "yes")

    config = DashboardConfig.from_env()

    assert config.base_url == "https://abc.supabase.co"
    assert config.api_key == "anon"
    assert config.sensor_table == "readings"
    assert config.poll_interval == 5.0
    assert config.optimistic_hold == 4.5
    assert config.api_trace_enabled is True


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOMEDASH_BASE_URL", "https://env.example.com")
    monkeypatch.setenv("HOMEDASH_POLL_INTERVAL", "not-a-number")

    config = DashboardConfig.from_env(base_url="https://override.example.com", poll_interval=1.0)

    assert config.base_url == "https://override.example.com"
    assert config.poll_interval == 1.0


def test_from_env_rejects_bad_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOMEDASH_BASE_URL", "https://env.example.com")
    monkeypatch.setenv("HOMEDASH_ERROR_TTL", "soon")

    with pytest.raises(HomeDashConfigError, match="HOMEDASH_ERROR_TTL"):
        DashboardConfig.from_env()


def test_from_env_requires_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("HOMEDASH_BASE_URL", raising=False)

    with pytest.raises(HomeDashConfigError, match="HOMEDASH_BASE_URL"):
        DashboardConfig.from_env()


@pytest.mark.parametrize("field", ["poll_interval", "error_ttl", "request_timeout"])
def test_non_positive_durations_rejected(field: str) -> None:
    with pytest.raises(HomeDashConfigError):
        DashboardConfig(base_url="https://store.example.com", **{field: 0})
