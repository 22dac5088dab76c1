from __future__ import annotations

from datetime import UTC, datetime

import pytest

from pyhomedash.models import (
    ControlField,
    ControlRecord,
    ControlUpdate,
    SensorSnapshot,
    ViewState,
    coerce_bool,
    derive_timer,
    format_reading,
    normalize_control_value,
    parse_int_or_zero,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (42, 42),
        ("42", 42),
        ("  -7", -7),
        ("12px", 12),
        ("3.9", 3),
        (3.9, 3),
        ("", 0),
        ("abc", 0),
        (None, 0),
        (float("nan"), 0),
        (True, 1),
    ],
)
def test_parse_int_or_zero(raw: object, expected: int) -> None:
    assert parse_int_or_zero(raw) == expected


@pytest.mark.parametrize(
    ("field", "raw", "expected"),
    [
        (ControlField.LED1, 999, 255),
        (ControlField.LED2, -5, 0),
        (ControlField.RGB_B, "128", 128),
        (ControlField.RGB_R, "not a number", 0),
        (ControlField.TIMER_HOURS, 24, 23),
        (ControlField.TIMER_MINUTES, "75", 59),
        (ControlField.TIMER_MINUTES, "", 0),
    ],
)
def test_normalize_control_value_clamps_integer_fields(field: ControlField, raw: object, expected: int) -> None:
    assert normalize_control_value(field, raw) == expected


def test_normalize_control_value_coerces_booleans() -> None:
    assert normalize_control_value("strip", True) is True
    assert normalize_control_value("buzzer", "off") is False
    assert normalize_control_value("buzzer", 1) is True
    assert coerce_bool("false") is False
    assert coerce_bool("yes") is True


def test_normalize_control_value_rejects_unknown_field() -> None:
    with pytest.raises(ValueError, match="unknown control field"):
        normalize_control_value("fan", 1)


def test_control_record_resolves_view_defaults() -> None:
    record = ControlRecord.empty()
    assert record.is_empty
    assert record.resolved(ControlField.STRIP) is False
    assert record.resolved(ControlField.TIMER_HOURS) == 0
    assert record.resolved(ControlField.TIMER_MINUTES) == 30
    assert record.resolved("led3") == 0
    assert record.resolved("rgb_g") == 0


def test_control_record_keeps_raw_row_and_ignores_unknown_columns() -> None:
    row = {"id": 1, "strip": 1, "led1": 200, "fan_speed": 3, "updated_at": "2026-01-01T10:00:00+00:00"}
    record = ControlRecord.model_validate(row)
    assert record.strip is True
    assert record.led1 == 200
    assert record.raw == row
    assert record.updated_at == datetime(2026, 1, 1, 10, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    "controls",
    [
        ControlRecord.empty(),
        None,
        {},
        {"timer_hours": "soon", "timer_minutes": None},
        {"timer_hours": True},
        {"timer_hours": float("inf"), "timer_minutes": float("-inf")},
        {"timer_hours": float("nan")},
    ],
)
def test_derive_timer_defaults_for_any_shape(controls: object) -> None:
    timer = derive_timer(controls)  # type: ignore[arg-type]
    assert (timer.hours, timer.minutes) == (0, 30)


def test_derive_timer_uses_stored_values() -> None:
    timer = derive_timer(ControlRecord(timer_hours=2, timer_minutes=0))
    assert (timer.hours, timer.minutes) == (2, 0)

    timer = derive_timer({"timer_hours": "5", "timer_minutes": 45})
    assert (timer.hours, timer.minutes) == (5, 45)


def test_sensor_snapshot_drops_sentinels() -> None:
    snapshot = SensorSnapshot.model_validate(
        {"temperature": "--", "humidity": 40.5, "light": 512.6, "created_at": "2026-01-01T00:00:00Z"}
    )
    assert snapshot.temperature is None
    assert snapshot.humidity == pytest.approx(40.5)
    assert snapshot.light == 513
    assert snapshot.created_at == datetime(2026, 1, 1, tzinfo=UTC)
    assert not snapshot.is_empty


def test_sensor_snapshot_epoch_milliseconds_timestamp() -> None:
    snapshot = SensorSnapshot.model_validate({"created_at": 1_767_225_600_000})
    assert snapshot.created_at == datetime(2026, 1, 1, tzinfo=UTC)
    assert snapshot.is_empty


def test_control_update_row_contains_identity_field_and_timestamp() -> None:
    stamp = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
    update = ControlUpdate(field=ControlField.LED1, value=255, updated_at=stamp)
    assert update.to_row() == {"id": 1, "led1": 255, "updated_at": "2026-01-01T12:00:00+00:00"}


def test_control_update_generates_fresh_timestamp() -> None:
    update = ControlUpdate(field=ControlField.STRIP, value=True)
    assert update.updated_at.tzinfo is not None
    assert update.to_row()["strip"] is True


def test_view_state_displays_placeholder_for_missing_readings() -> None:
    state = ViewState()
    assert state.temperature_display == "--"
    assert state.humidity_display == "--"
    assert state.light_display == "--"
    assert (state.timer.hours, state.timer.minutes) == (0, 30)


def test_format_reading() -> None:
    assert format_reading(21.456, "°C") == "21.5°C"
    assert format_reading(300) == "300"
    assert format_reading(None, "%") == "--"


def test_show_loading_only_until_first_temperature() -> None:
    assert ViewState(is_loading=True).show_loading is True
    assert ViewState(is_loading=True, has_sensor_reading=True).show_loading is False
    assert ViewState(is_loading=False).show_loading is False
