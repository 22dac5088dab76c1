"""Merge policy for acknowledged writes racing routine polls.

A poll issued before a write was acknowledged can still carry the old
value. When an optimistic hold is configured, such stale values are
suppressed for a bounded time instead of briefly flipping the view back.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PendingWrite:
    """An acknowledged write that polls may not have caught up with yet."""

    value: bool | int
    acked_at: float
    expires_at: float


def is_expired(now: float, expires_at: float) -> bool:
    return now >= expires_at


def should_hold(
    pending: PendingWrite,
    *,
    polled_value: bool | int | None,
    poll_issued_at: float,
    now: float,
) -> bool:
    """Whether *pending* should override the value a poll brought back.

    Policy:
    - a poll issued after the acknowledgment reflects the write: release,
    - a poll that already agrees with the write: release,
    - an expired hold: release,
    - otherwise keep showing the written value.
    """
    if is_expired(now, pending.expires_at):
        return False
    if poll_issued_at >= pending.acked_at:
        return False
    return polled_value != pending.value
