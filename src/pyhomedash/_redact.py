"""Masking for the request/response trace.

The store authenticates with an API key sent twice (``apikey`` and
``Authorization: Bearer``). Supabase keys are JWTs, and PostgREST error
bodies sometimes quote the offending header, so the raw response text is
scrubbed as well as the structured headers and row bodies.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

REDACTED = "<redacted>"

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "apikey",
        "api_key",
        "authorization",
        "cookie",
        "set-cookie",
        "access_token",
        "refresh_token",
    }
)

_BEARER_RE = re.compile(r"(?i)\bbearer\s+[^\s\"',]+")
_JWT_RE = re.compile(r"\beyJ[\w-]+\.[\w-]+\.[\w-]+")


def redact_text(text: str, *, max_string: int = 512) -> str:
    """Mask bearer credentials and JWTs inside free text, then truncate."""
    text = _BEARER_RE.sub(f"Bearer {REDACTED}", text)
    text = _JWT_RE.sub(REDACTED, text)
    if len(text) > max_string:
        return f"{text[:max_string]}…<truncated>"
    return text


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a copy of a header map, JSON body or response text safe to log.

    Keys naming credentials are blanked regardless of case; string values
    elsewhere go through :func:`redact_text`. JSON scalars pass unchanged.
    """
    if isinstance(value, str):
        return redact_text(value, max_string=max_string)
    if isinstance(value, Mapping):
        return {
            str(key): REDACTED
            if str(key).lower() in _SENSITIVE_KEYS
            else redact_for_log(item, max_string=max_string)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string) for item in value]
    return value
