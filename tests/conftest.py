from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from pyhomedash.config import DashboardConfig
from pyhomedash.exceptions import HomeDashTransportError


@dataclass
class FakeRemote:
    """In-memory stand-in for :class:`pyhomedash.remote.RemoteStoreClient`."""

    sensor_row: dict[str, Any] | None = None
    control_row: dict[str, Any] | None = None
    sensor_error: Exception | None = None
    control_error: Exception | None = None
    upsert_error: Exception | None = None
    upserts: list[tuple[str, dict[str, Any], str]] = field(default_factory=list)
    calls: dict[str, int] = field(default_factory=dict)
    # Optional gates: a fetch waits on the next queued event before returning.
    fetch_gates: list[asyncio.Event] = field(default_factory=list)

    def _record_call(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1

    async def fetch_latest(self, table: str) -> dict[str, Any] | None:
        self._record_call("fetch_latest")
        await asyncio.sleep(0)
        if self.sensor_error is not None:
            raise self.sensor_error
        return None if self.sensor_row is None else dict(self.sensor_row)

    async def fetch_by_id(self, table: str, row_id: int) -> dict[str, Any] | None:
        self._record_call("fetch_by_id")
        row = None if self.control_row is None else dict(self.control_row)
        if self.fetch_gates:
            gate = self.fetch_gates.pop(0)
            await gate.wait()
        else:
            await asyncio.sleep(0)
        if self.control_error is not None:
            raise self.control_error
        return row

    async def upsert(self, table: str, record: Mapping[str, Any], *, on_conflict: str = "id") -> None:
        self._record_call("upsert")
        await asyncio.sleep(0)
        if self.upsert_error is not None:
            raise self.upsert_error
        self.upserts.append((table, dict(record), on_conflict))
        if self.control_row is not None:
            self.control_row.update({k: v for k, v in record.items() if k != "updated_at"})


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def config() -> DashboardConfig:
    return DashboardConfig(
        base_url="https://store.example.com",
        api_key="anon-key",
        poll_interval=0.05,
        error_ttl=0.1,
    )


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote(
        sensor_row={"temperature": 21.5, "humidity": 40.0, "light": 300, "created_at": "2026-01-01T00:00:00Z"},
        control_row={"id": 1, "strip": True, "timer_hours": 1, "timer_minutes": 15, "led1": 10},
    )


@pytest.fixture
def network_error() -> HomeDashTransportError:
    return HomeDashTransportError("Request to /rest/v1/controls failed: connection reset", endpoint="/rest/v1/controls")
