"""Dashboard configuration for pyhomedash."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyhomedash._constants import (
    CONTROL_ID,
    DEFAULT_CONTROLS_TABLE,
    DEFAULT_ERROR_TTL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SENSOR_TABLE,
)
from pyhomedash.exceptions import HomeDashConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise HomeDashConfigError(f"{name} must be a number, got {value!r}") from exc


def _env_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise HomeDashConfigError(f"{name} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class DashboardConfig:
    """Dashboard configuration.

    Parameters
    ----------
    base_url : str
        Root URL of the PostgREST-compatible store (e.g. a Supabase project
        URL). Rows are read from ``{base_url}/rest/v1/{table}``.
    api_key : str or None
        Key sent as ``apikey`` and ``Authorization: Bearer`` headers.
    sensor_table : str
        Append-only sensor log collection.
    controls_table : str
        Collection holding the singleton control record.
    control_id : int
        Identity of the control record.
    poll_interval : float
        Seconds between poll ticks.
    error_ttl : float
        Seconds a transient error stays visible.
    request_timeout : float
        Total timeout per store request in seconds.
    optimistic_hold : float or None
        When set, an acknowledged write stays visible for this many seconds
        even if a poll result that was already in flight disagrees.
        ``None`` disables the overlay.
    api_trace_enabled : bool
        Log redacted request/response bodies at DEBUG level.
    """

    base_url: str
    api_key: str | None = None
    sensor_table: str = DEFAULT_SENSOR_TABLE
    controls_table: str = DEFAULT_CONTROLS_TABLE
    control_id: int = CONTROL_ID
    poll_interval: float = DEFAULT_POLL_INTERVAL
    error_ttl: float = DEFAULT_ERROR_TTL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    optimistic_hold: float | None = None
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if not self.base_url:
            raise HomeDashConfigError("base_url must be non-empty")
        if self.poll_interval <= 0:
            raise HomeDashConfigError("poll_interval must be positive")
        if self.error_ttl <= 0:
            raise HomeDashConfigError("error_ttl must be positive")
        if self.request_timeout <= 0:
            raise HomeDashConfigError("request_timeout must be positive")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, **overrides: Any) -> DashboardConfig:
        """Create configuration from ``HOMEDASH_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "HOMEDASH_BASE_URL": "base_url",
            "HOMEDASH_API_KEY": "api_key",
            "HOMEDASH_SENSOR_TABLE": "sensor_table",
            "HOMEDASH_CONTROLS_TABLE": "controls_table",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_FLOAT_MAP = {
            "HOMEDASH_POLL_INTERVAL": "poll_interval",
            "HOMEDASH_ERROR_TTL": "error_ttl",
            "HOMEDASH_REQUEST_TIMEOUT": "request_timeout",
            "HOMEDASH_OPTIMISTIC_HOLD": "optimistic_hold",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_float(env_key, val)

        control_id_env = env.get("HOMEDASH_CONTROL_ID")
        if control_id_env is not None and "control_id" not in overrides:
            config_kwargs["control_id"] = _env_int("HOMEDASH_CONTROL_ID", control_id_env)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("HOMEDASH_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)
        if "base_url" not in config_kwargs:
            raise HomeDashConfigError("HOMEDASH_BASE_URL is not set")

        return cls(**config_kwargs)
