"""HTTP transport for the PostgREST-style row store."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyhomedash._constants import REST_PATH, USER_AGENT
from pyhomedash._redact import redact_for_log
from pyhomedash.config import DashboardConfig
from pyhomedash.exceptions import HomeDashApiError, HomeDashTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by :mod:`pyhomedash.remote`.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`RestTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        table: str,
        *,
        params: Mapping[str, str] | None = None,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        ...


def _error_code(text: str) -> str:
    """Pull the ``code`` member out of a PostgREST error body, if any."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return ""
    if isinstance(payload, dict):
        code = payload.get("code")
        if code is not None:
            return str(code)
    return ""


class RestTransport:
    """JSON-over-HTTP transport for ``{base_url}/rest/v1/{table}`` endpoints."""

    def __init__(
        self,
        config: DashboardConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _base_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }
        if self._config.api_key:
            headers["apikey"] = self._config.api_key
            headers["authorization"] = f"Bearer {self._config.api_key}"
        return headers

    async def request(
        self,
        method: str,
        table: str,
        *,
        params: Mapping[str, str] | None = None,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Returns ``None`` for empty bodies (``return=minimal`` writes).
        """
        endpoint = f"{REST_PATH}/{table}"
        url = f"{self._config.base_url}{endpoint}"
        merged_headers = self._base_headers()
        if headers:
            merged_headers.update(headers)
        data = json.dumps(body, separators=(",", ":")) if body is not None else None

        _logger.debug("%s %s params=%s", method, url, dict(params or {}))
        if self._config.api_trace_enabled:
            _logger.debug(
                "Request trace headers=%s body=%s",
                redact_for_log(merged_headers),
                redact_for_log(body),
            )

        try:
            async with self._http.request(
                method,
                url,
                params=dict(params or {}),
                data=data,
                headers=merged_headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                status = resp.status
        except asyncio.TimeoutError as exc:
            raise HomeDashTransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise HomeDashTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        if self._config.api_trace_enabled:
            _logger.debug("Response trace status=%s body=%s", status, redact_for_log(text))

        if not 200 <= status < 300:
            raise HomeDashApiError(
                f"HTTP {status} from {endpoint}: {text[:200]}",
                status_code=status,
                code=_error_code(text),
                endpoint=endpoint,
            )

        if not text.strip():
            return None

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise HomeDashTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            ) from exc
