"""Invite status and party soft-delete lifecycle rules.

Two lifecycles, both one-way:
- Invite status: ``pending`` resolves once to ``accepted`` or ``declined``.
  ``responded_at`` is stamped exactly on that transition.
- Party activity: ``disbanded_at`` is NULL while active. Once set it is
  never cleared or moved.

All stored timestamps are UTC. SQLite drops tzinfo on write and read, so
values are normalized with :func:`as_utc` on the way in and naive values
read back are taken as UTC.
"""

from __future__ import annotations

from datetime import UTC, datetime

INVITE_TRANSITIONS: dict[str, list[str]] = {
    "pending": ["accepted", "declined"],
    "accepted": [],
    "declined": [],
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]],
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed


def is_expired(expires_at: datetime, now: datetime | None = None) -> bool:
    """True when *expires_at* is at or before *now*."""
    now = now or utc_now()
    return as_utc(expires_at) <= as_utc(now)


def is_active(disbanded_at: datetime | None) -> bool:
    """A party is active until its soft-delete marker is set."""
    return disbanded_at is None


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Convert *value* to an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
