"""Custom exception hierarchy for pyhomedash."""

from __future__ import annotations


class HomeDashError(Exception):
    """Base exception for all pyhomedash errors."""


class HomeDashConfigError(HomeDashError):
    """Invalid or missing configuration."""


class HomeDashTransportError(HomeDashError):
    """HTTP-level failure (network, timeout, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class HomeDashApiError(HomeDashError):
    """The remote store rejected a request (non-2xx response).

    ``code`` carries the store's own error code when the body includes one
    (PostgREST reports e.g. ``"23505"`` for a unique violation).
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)
