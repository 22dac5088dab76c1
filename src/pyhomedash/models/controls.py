"""Control record model and per-field validation.

The control record is a singleton row (``id = 1``) describing the desired
actuator state. Writes always touch exactly one field; this module owns the
rules that turn raw widget input into a value the store accepts:

* integer fields go through :func:`parse_int_or_zero` and are then clamped
  into the field's declared range,
* boolean fields go through :func:`coerce_bool`.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pyhomedash._constants import CONTROL_ID
from pyhomedash.models._base import StoreRecord, StoreTimestamp


class ControlField(StrEnum):
    """Mutable columns of the control record."""

    STRIP = "strip"
    TIMER_HOURS = "timer_hours"
    TIMER_MINUTES = "timer_minutes"
    LED1 = "led1"
    LED2 = "led2"
    LED3 = "led3"
    RGB_R = "rgb_r"
    RGB_G = "rgb_g"
    RGB_B = "rgb_b"
    BUZZER = "buzzer"


class FieldKind(StrEnum):
    BOOL = "bool"
    INT = "int"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Type, range and view default of one control field."""

    kind: FieldKind
    default: bool | int
    minimum: int = 0
    maximum: int = 0


_CHANNEL = FieldSpec(FieldKind.INT, 0, 0, 255)

FIELD_SPECS: dict[ControlField, FieldSpec] = {
    ControlField.STRIP: FieldSpec(FieldKind.BOOL, False),
    ControlField.TIMER_HOURS: FieldSpec(FieldKind.INT, 0, 0, 23),
    ControlField.TIMER_MINUTES: FieldSpec(FieldKind.INT, 30, 0, 59),
    ControlField.LED1: _CHANNEL,
    ControlField.LED2: _CHANNEL,
    ControlField.LED3: _CHANNEL,
    ControlField.RGB_R: _CHANNEL,
    ControlField.RGB_G: _CHANNEL,
    ControlField.RGB_B: _CHANNEL,
    ControlField.BUZZER: FieldSpec(FieldKind.BOOL, False),
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_FALSE_STRINGS = frozenset({"", "0", "false", "no", "off"})


def parse_int_or_zero(value: Any) -> int:
    """Parse the leading integer of *value*; anything unparseable is ``0``.

    Mirrors what a slider or number input hands over: ``"42"``, ``"42px"``,
    ``"3.9"`` (→ 3), ``""`` or ``"abc"`` (→ 0).
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return int(value)
    if value is None:
        return 0
    match = _LEADING_INT.match(str(value))
    if match is None:
        return 0
    return int(match.group(1))


def clamp(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, value))


def coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def resolve_field(field: ControlField | str) -> ControlField:
    """Return the :class:`ControlField` for *field*.

    Raises :class:`ValueError` for names that are not control fields.
    """
    try:
        return ControlField(field)
    except ValueError:
        raise ValueError(f"unknown control field: {field!r}") from None


def normalize_control_value(field: ControlField | str, value: Any) -> bool | int:
    """Validate and clamp *value* for *field*. Never fails for bad input."""
    spec = FIELD_SPECS[resolve_field(field)]
    if spec.kind is FieldKind.BOOL:
        return coerce_bool(value)
    return clamp(parse_int_or_zero(value), spec.minimum, spec.maximum)


class ControlRecord(StoreRecord):
    """Desired actuator state as stored remotely (possibly partial)."""

    id: int | None = None
    strip: bool | None = None
    timer_hours: int | None = None
    timer_minutes: int | None = None
    led1: int | None = None
    led2: int | None = None
    led3: int | None = None
    rgb_r: int | None = None
    rgb_g: int | None = None
    rgb_b: int | None = None
    buzzer: bool | None = None
    updated_at: StoreTimestamp = None

    def resolved(self, field: ControlField | str) -> bool | int:
        """Value to show for *field*, substituting the view default when absent."""
        control_field = resolve_field(field)
        value = getattr(self, control_field.value)
        if value is None:
            return FIELD_SPECS[control_field].default
        return value

    def with_value(self, field: ControlField, value: bool | int) -> ControlRecord:
        """Copy of this record with one field replaced."""
        return self.model_copy(update={field.value: value})

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, f.value) is None for f in ControlField)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ControlUpdate(BaseModel):
    """Single-field write envelope for the control record."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int = CONTROL_ID
    field: ControlField
    value: bool | int
    updated_at: datetime = Field(default_factory=_utcnow)

    def to_row(self) -> dict[str, Any]:
        """Row body for the upsert request."""
        return {
            "id": self.id,
            self.field.value: self.value,
            "updated_at": self.updated_at.isoformat(),
        }
