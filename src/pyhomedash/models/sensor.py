"""Sensor snapshot model."""

from __future__ import annotations

from pydantic import field_validator

from pyhomedash.models._base import StoreRecord, StoreTimestamp


class SensorSnapshot(StoreRecord):
    """Most recent row of the sensor log.

    Every reading may be absent; an empty snapshot stands in for a missing
    or failed fetch.
    """

    temperature: float | None = None
    """Air temperature (°C)."""
    humidity: float | None = None
    """Relative humidity (%)."""
    light: int | None = None
    """Raw light-sensor level."""
    created_at: StoreTimestamp = None

    @field_validator("light", mode="before")
    @classmethod
    def _round_light(cls, value: object) -> object:
        # Some sensor firmwares post the ADC reading as a float.
        if isinstance(value, float):
            return int(round(value))
        return value

    @property
    def is_empty(self) -> bool:
        return self.temperature is None and self.humidity is None and self.light is None
