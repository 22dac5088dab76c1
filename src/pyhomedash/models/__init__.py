"""Typed models for store rows and the derived dashboard view."""

from pyhomedash.models._base import StoreRecord, StoreTimestamp, parse_store_timestamp
from pyhomedash.models.controls import (
    FIELD_SPECS,
    ControlField,
    ControlRecord,
    ControlUpdate,
    FieldKind,
    FieldSpec,
    clamp,
    coerce_bool,
    normalize_control_value,
    parse_int_or_zero,
)
from pyhomedash.models.sensor import SensorSnapshot
from pyhomedash.models.view import TimerSetting, ViewState, derive_timer, format_reading

__all__ = [
    "FIELD_SPECS",
    "ControlField",
    "ControlRecord",
    "ControlUpdate",
    "FieldKind",
    "FieldSpec",
    "SensorSnapshot",
    "StoreRecord",
    "StoreTimestamp",
    "TimerSetting",
    "ViewState",
    "clamp",
    "coerce_bool",
    "derive_timer",
    "format_reading",
    "normalize_control_value",
    "parse_int_or_zero",
]
