"""High-level async façade wiring the synchronization core together."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from pyhomedash._transport import RestTransport, Transport
from pyhomedash.config import DashboardConfig
from pyhomedash.errors import ErrorSurface
from pyhomedash.exceptions import HomeDashError
from pyhomedash.models.controls import ControlField, ControlUpdate
from pyhomedash.models.view import ViewState
from pyhomedash.mutator import ControlMutator
from pyhomedash.poller import Poller
from pyhomedash.remote import RemoteStoreClient
from pyhomedash.state.store import StateListener, ViewStateStore

_logger = logging.getLogger(__name__)


class Dashboard:
    """Live view of the sensor log and control record.

    Usage::

        async with Dashboard(config) as dashboard:
            dashboard.start_polling()
            ...
            await dashboard.set_control("led1", 128)

    Presentation code reads :meth:`get_view_state` (or subscribes with
    :meth:`add_listener`) and never mutates the state itself.
    """

    def __init__(
        self,
        config: DashboardConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        on_state_change: StateListener | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._on_state_change = on_state_change
        self._remote: RemoteStoreClient | None = None
        self._store: ViewStateStore | None = None
        self._errors: ErrorSurface | None = None
        self._mutator: ControlMutator | None = None
        self._poller = Poller(config.poll_interval)
        self._closed = False

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> Dashboard:
        self.open()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    def open(self) -> None:
        """Build the component graph. Called by ``async with``."""
        if self._closed:
            raise HomeDashError("Dashboard is closed. Create a new Dashboard to reconnect.")
        if self._store is not None:
            return
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = RestTransport(self._config, self._http_session)
        self._remote = RemoteStoreClient(self._transport)
        self._store = ViewStateStore(self._remote, self._config)
        if self._on_state_change is not None:
            self._store.add_listener(self._on_state_change)
        self._errors = ErrorSurface(self._store, ttl=self._config.error_ttl)
        self._mutator = ControlMutator(self._remote, self._store, self._errors, self._config)

    async def close(self) -> None:
        """Stop polling and detach. Late completions become no-ops."""
        self._closed = True
        self._poller.stop()
        if self._store is not None:
            self._store.close()
        if self._errors is not None:
            self._errors.close()
        await self._poller.aclose()
        if self._mutator is not None:
            await self._mutator.drain()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    def _require_store(self) -> ViewStateStore:
        if self._store is None:
            raise HomeDashError("Dashboard not initialized. Use 'async with Dashboard(...) as dashboard:'")
        return self._store

    def _require_mutator(self) -> ControlMutator:
        if self._mutator is None:
            raise HomeDashError("Dashboard not initialized. Use 'async with Dashboard(...) as dashboard:'")
        return self._mutator

    # ------------------------------------------------------------------
    # Presentation-facing API
    # ------------------------------------------------------------------

    def get_view_state(self) -> ViewState:
        return self._require_store().state

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        return self._require_store().add_listener(listener)

    async def refresh(self) -> ViewState:
        """Run one poll cycle outside the schedule."""
        return await self._require_store().refresh()

    def start_polling(self) -> None:
        store = self._require_store()
        self._poller.start(store.refresh)

    def stop_polling(self) -> None:
        self._poller.stop()

    @property
    def is_polling(self) -> bool:
        return self._poller.is_running

    async def set_control(self, field: ControlField | str, value: Any) -> ControlUpdate | None:
        return await self._require_mutator().set_control(field, value)

    def schedule_control(self, field: ControlField | str, value: Any) -> None:
        """Fire-and-forget write for synchronous widget callbacks."""
        self._require_mutator().schedule(field, value)

    def dismiss_error(self) -> None:
        if self._errors is not None:
            self._errors.clear()
