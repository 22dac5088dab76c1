"""In-memory owner of the dashboard :class:`~pyhomedash.models.ViewState`.

This is the only component allowed to change the view state. Every change
swaps in a new immutable ``ViewState``; nothing is mutated in place, so a
reader always observes a consistent pair of sensor snapshot and control
record.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Any

from pyhomedash.config import DashboardConfig
from pyhomedash.models.controls import ControlField, ControlRecord
from pyhomedash.models.sensor import SensorSnapshot
from pyhomedash.models.view import ViewState
from pyhomedash.remote import RemoteStoreClient
from pyhomedash.state.policy import PendingWrite, should_hold

_logger = logging.getLogger(__name__)

StateListener = Callable[[ViewState], None]


class ViewStateStore:
    """Reconciles poll results and control writes into one view state.

    Routine fetch failures never surface to the user: the failing slot falls
    back to an empty record and the failure is logged.
    """

    def __init__(
        self,
        remote: RemoteStoreClient,
        config: DashboardConfig,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._remote = remote
        self._config = config
        self._clock = clock
        self._state = ViewState()
        self._listeners: list[StateListener] = []
        self._pending: dict[ControlField, PendingWrite] = {}
        self._closed = False

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        """Register *listener* for every state change; returns a remover."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def close(self) -> None:
        """Detach the store. Completions arriving afterwards are ignored."""
        self._closed = True
        self._listeners.clear()
        self._pending.clear()

    def _replace(self, **changes: Any) -> None:
        if self._closed:
            return
        self._state = self._state.model_copy(update=changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                _logger.exception("View state listener failed")

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    async def _fetch_sensor(self) -> SensorSnapshot:
        try:
            row = await self._remote.fetch_latest(self._config.sensor_table)
            if row is None:
                _logger.debug("Sensor table %s is empty", self._config.sensor_table)
                return SensorSnapshot.empty()
            return SensorSnapshot.model_validate(row)
        except Exception:
            _logger.warning("Sensor fetch failed; showing empty snapshot", exc_info=True)
            return SensorSnapshot.empty()

    async def _fetch_controls(self) -> ControlRecord:
        try:
            row = await self._remote.fetch_by_id(self._config.controls_table, self._config.control_id)
            if row is None:
                _logger.debug("Control record %s not found", self._config.control_id)
                return ControlRecord.empty()
            return ControlRecord.model_validate(row)
        except Exception:
            _logger.warning("Control fetch failed; showing empty record", exc_info=True)
            return ControlRecord.empty()

    async def refresh(self) -> ViewState:
        """Fetch sensor snapshot and control record concurrently and apply both."""
        if self._closed:
            return self._state
        issued_at = self._clock()
        self._replace(is_loading=True)
        sensor, controls = await asyncio.gather(self._fetch_sensor(), self._fetch_controls())
        self.apply_refresh(sensor, controls, issued_at=issued_at)
        return self._state

    def apply_refresh(
        self,
        sensor: SensorSnapshot,
        controls: ControlRecord,
        *,
        issued_at: float | None = None,
    ) -> None:
        """Replace both records in one step and clear the loading flag.

        Overlapping refreshes are not sequenced: whichever completes last
        wins.
        """
        if self._closed:
            _logger.debug("Dropping refresh result for closed store")
            return
        if issued_at is None:
            issued_at = self._clock()
        controls = self._hold_pending(controls, issued_at)
        self._replace(
            sensor=sensor,
            controls=controls,
            is_loading=False,
            has_sensor_reading=self._state.has_sensor_reading or sensor.temperature is not None,
        )

    def _hold_pending(self, controls: ControlRecord, issued_at: float) -> ControlRecord:
        if not self._pending:
            return controls
        now = self._clock()
        for field, pending in list(self._pending.items()):
            polled = getattr(controls, field.value)
            if should_hold(pending, polled_value=polled, poll_issued_at=issued_at, now=now):
                _logger.debug("Holding %s=%s over polled %s", field.value, pending.value, polled)
                controls = controls.with_value(field, pending.value)
            else:
                del self._pending[field]
        return controls

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def merge_control(self, field: ControlField, value: bool | int) -> None:
        """Merge one already-validated field into the local control record."""
        if self._closed:
            return
        if self._config.optimistic_hold is not None:
            now = self._clock()
            self._pending[field] = PendingWrite(
                value=value,
                acked_at=now,
                expires_at=now + self._config.optimistic_hold,
            )
        self._replace(controls=self._state.controls.with_value(field, value))

    def set_transient_error(self, message: str | None) -> None:
        self._replace(transient_error=message)
