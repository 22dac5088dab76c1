"""Transient, self-clearing error notices for the dashboard."""

from __future__ import annotations

import asyncio
import logging

from pyhomedash._constants import DEFAULT_ERROR_TTL
from pyhomedash.state.store import ViewStateStore

_logger = logging.getLogger(__name__)


class ErrorSurface:
    """Shows one human-readable error at a time and clears it after ``ttl`` seconds.

    Raising a new error replaces the visible one and restarts the timer.
    Must be used from within a running event loop.
    """

    def __init__(self, store: ViewStateStore, *, ttl: float = DEFAULT_ERROR_TTL) -> None:
        self._store = store
        self._ttl = ttl
        self._clear_handle: asyncio.TimerHandle | None = None

    @property
    def current(self) -> str | None:
        return self._store.state.transient_error

    def raise_error(self, message: str) -> None:
        """Show *message* now and schedule it to clear."""
        self._cancel_timer()
        _logger.debug("Showing transient error: %s", message)
        self._store.set_transient_error(message)
        loop = asyncio.get_running_loop()
        self._clear_handle = loop.call_later(self._ttl, self._expire)

    def clear(self) -> None:
        """Hide the current error and cancel the pending auto-clear."""
        self._cancel_timer()
        self._store.set_transient_error(None)

    def close(self) -> None:
        self._cancel_timer()

    def _expire(self) -> None:
        self._clear_handle = None
        self._store.set_transient_error(None)

    def _cancel_timer(self) -> None:
        handle = self._clear_handle
        self._clear_handle = None
        if handle is not None:
            handle.cancel()
