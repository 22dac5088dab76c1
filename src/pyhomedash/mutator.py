"""Single-field writes to the control record."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pyhomedash._constants import GENERIC_CONTROL_ERROR
from pyhomedash.config import DashboardConfig
from pyhomedash.errors import ErrorSurface
from pyhomedash.exceptions import HomeDashError
from pyhomedash.models.controls import ControlField, ControlUpdate, normalize_control_value, resolve_field
from pyhomedash.remote import RemoteStoreClient
from pyhomedash.state.store import ViewStateStore

_logger = logging.getLogger(__name__)


class ControlMutator:
    """Validates, sends and locally commits control writes.

    The local record is only updated once the store acknowledges the write.
    A failed write leaves the local record untouched and shows a generic
    transient error; the next poll brings the view back in line with the
    store. Calls are independent of each other and of polling: no
    debouncing, no ordering.
    """

    def __init__(
        self,
        remote: RemoteStoreClient,
        store: ViewStateStore,
        errors: ErrorSurface,
        config: DashboardConfig,
    ) -> None:
        self._remote = remote
        self._store = store
        self._errors = errors
        self._config = config
        self._tasks: set[asyncio.Task[ControlUpdate | None]] = set()

    async def set_control(self, field: ControlField | str, value: Any) -> ControlUpdate | None:
        """Write one field.

        Returns the acknowledged update, or ``None`` when the write failed
        (the failure is shown through the error surface, never raised) or
        the store is already closed.
        Unknown field names raise :class:`ValueError`.
        """
        control_field = resolve_field(field)
        normalized = normalize_control_value(control_field, value)
        update = ControlUpdate(id=self._config.control_id, field=control_field, value=normalized)

        if self._store.closed:
            _logger.debug("Dropping control write %s=%r: dashboard closed", control_field.value, normalized)
            return None

        try:
            await self._remote.upsert(self._config.controls_table, update.to_row(), on_conflict="id")
        except HomeDashError as exc:
            _logger.warning("Control write %s=%r failed: %s", control_field.value, normalized, exc)
            if not self._store.closed:
                self._errors.raise_error(GENERIC_CONTROL_ERROR)
            return None

        _logger.debug("Control write %s=%r acknowledged", control_field.value, normalized)
        self._store.merge_control(control_field, normalized)
        return update

    def schedule(self, field: ControlField | str, value: Any) -> asyncio.Task[ControlUpdate | None]:
        """Fire-and-forget :meth:`set_control` for synchronous callers."""
        # Validate eagerly so a bad field name fails at the call site.
        resolve_field(field)
        task = asyncio.get_running_loop().create_task(self.set_control(field, value))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for scheduled writes to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
