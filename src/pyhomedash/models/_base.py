"""Base model for rows read from the remote store.

Every row model inherits from :class:`StoreRecord` which provides:

* A ``model_validator(mode="before")`` that strips store sentinel
  values (``""``, ``"--"``, NaN) so the field default is used.
* A ``raw`` dict that captures the original row.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Annotated, Any, Self

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

# Sentinel strings that mean "not available".
_SENTINELS = frozenset({"", "--", "NaN", "nan", "null"})

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def parse_store_timestamp(value: Any) -> datetime | None:
    """Convert an ISO-8601 string or epoch number to a UTC datetime.

    Naive datetimes are assumed to be UTC. Returns ``None`` for ``None``.
    """
    if value is None:
        return value
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        ts = float(value)
        if ts >= _MS_THRESHOLD:
            ts /= 1000.0
        return datetime.fromtimestamp(ts, tz=UTC)
    else:
        parsed = datetime.fromisoformat(str(value).strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


StoreTimestamp = Annotated[datetime | None, BeforeValidator(parse_store_timestamp)]
"""Annotated type that coerces store timestamps to aware UTC datetimes."""


class StoreRecord(BaseModel):
    """Base for rows read from the store."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original row as returned by the store."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_store_values(cls, values: Any) -> Any:
        """Strip sentinel values and stash the raw row."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = StoreRecord._clean_dict(original)
        # Keep the caller's raw when constructing with keyword arguments.
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned

    @classmethod
    def empty(cls) -> Self:
        """An instance with every field absent."""
        return cls.model_validate({})
