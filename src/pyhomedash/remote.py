"""Row-level access to the remote store.

Thin wrapper over a :class:`~pyhomedash._transport.Transport` exposing the
three calls the dashboard needs. Rows come back as plain dicts; a missing
row is ``None``. Failures raise :class:`~pyhomedash.exceptions.HomeDashError`
subclasses.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pyhomedash._transport import Transport
from pyhomedash.exceptions import HomeDashTransportError

_logger = logging.getLogger(__name__)


def _first_row(payload: Any, table: str) -> dict[str, Any] | None:
    if payload is None:
        return None
    if not isinstance(payload, list):
        raise HomeDashTransportError(
            f"Expected a list of rows from {table}, got {type(payload).__name__}",
            endpoint=table,
        )
    if not payload:
        return None
    row = payload[0]
    if not isinstance(row, dict):
        raise HomeDashTransportError(f"Malformed row from {table}", endpoint=table)
    return row


class RemoteStoreClient:
    """Fetch and upsert rows in a PostgREST-style store."""

    def __init__(self, transport: Transport, *, order_column: str = "created_at") -> None:
        self._transport = transport
        self._order_column = order_column

    async def fetch_latest(self, table: str) -> dict[str, Any] | None:
        """Most recent row of *table* by creation time, or ``None`` when empty."""
        payload = await self._transport.request(
            "GET",
            table,
            params={
                "select": "*",
                "order": f"{self._order_column}.desc",
                "limit": "1",
            },
        )
        return _first_row(payload, table)

    async def fetch_by_id(self, table: str, row_id: int) -> dict[str, Any] | None:
        """Row of *table* with ``id = row_id``, or ``None`` when absent."""
        payload = await self._transport.request(
            "GET",
            table,
            params={"select": "*", "id": f"eq.{row_id}", "limit": "1"},
        )
        return _first_row(payload, table)

    async def upsert(
        self,
        table: str,
        record: Mapping[str, Any],
        *,
        on_conflict: str = "id",
    ) -> None:
        """Insert *record* or merge it into the row sharing ``on_conflict``.

        Returns once the store acknowledges the write.
        """
        _logger.debug("Upserting into %s on_conflict=%s fields=%s", table, on_conflict, sorted(record))
        await self._transport.request(
            "POST",
            table,
            params={"on_conflict": on_conflict},
            body=[dict(record)],
            headers={"prefer": "resolution=merge-duplicates,return=minimal"},
        )
