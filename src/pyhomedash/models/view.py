"""Derived view state consumed by presentation code."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pyhomedash._constants import UNKNOWN_PLACEHOLDER
from pyhomedash.models.controls import FIELD_SPECS, ControlField, ControlRecord
from pyhomedash.models.sensor import SensorSnapshot


class TimerSetting(BaseModel):
    model_config = ConfigDict(frozen=True)

    hours: int
    minutes: int


def _int_or_none(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def derive_timer(controls: ControlRecord | Mapping[str, Any] | None) -> TimerSetting:
    """Resolve the strip timer, defaulting to 0 h 30 min.

    Total for any input shape: an empty record, a raw row mapping, ``None``
    or a row holding garbage all resolve to a valid setting.
    """
    if isinstance(controls, ControlRecord):
        hours = controls.timer_hours
        minutes = controls.timer_minutes
    elif isinstance(controls, Mapping):
        hours = _int_or_none(controls.get(ControlField.TIMER_HOURS.value))
        minutes = _int_or_none(controls.get(ControlField.TIMER_MINUTES.value))
    else:
        hours = minutes = None
    return TimerSetting(
        hours=hours if hours is not None else int(FIELD_SPECS[ControlField.TIMER_HOURS].default),
        minutes=minutes if minutes is not None else int(FIELD_SPECS[ControlField.TIMER_MINUTES].default),
    )


def format_reading(value: float | int | None, unit: str = "", *, digits: int = 1) -> str:
    """Render a sensor reading, or the unknown placeholder when absent."""
    if value is None:
        return UNKNOWN_PLACEHOLDER
    if isinstance(value, float):
        text = f"{value:.{digits}f}"
    else:
        text = str(value)
    return f"{text}{unit}"


class ViewState(BaseModel):
    """Immutable snapshot of everything the dashboard renders.

    A new instance is produced for every change, so a reader holding one
    always sees a consistent ``(sensor, controls)`` pair.
    """

    model_config = ConfigDict(frozen=True)

    sensor: SensorSnapshot = Field(default_factory=SensorSnapshot.empty)
    controls: ControlRecord = Field(default_factory=ControlRecord.empty)
    is_loading: bool = False
    transient_error: str | None = None
    has_sensor_reading: bool = False
    """Whether any fetch has ever produced a temperature."""

    @property
    def show_loading(self) -> bool:
        """Full-screen placeholder only until the first temperature arrives."""
        return self.is_loading and not self.has_sensor_reading

    @property
    def timer(self) -> TimerSetting:
        return derive_timer(self.controls)

    @property
    def temperature_display(self) -> str:
        return format_reading(self.sensor.temperature, "°C")

    @property
    def humidity_display(self) -> str:
        return format_reading(self.sensor.humidity, "%")

    @property
    def light_display(self) -> str:
        return format_reading(self.sensor.light)
