"""ISO-8601 timestamp helpers shared by the data model and the temporal activator."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Return ``moment`` as an aware UTC datetime (naive values are taken as UTC)."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 date or date-time string into an aware UTC datetime.

    Accepts a trailing ``Z`` for UTC. Date-only strings resolve to midnight
    UTC; strings without an offset are taken as UTC.

    Returns:
        The parsed datetime, or None if ``value`` is not a parseable string.
    """
    if isinstance(value, datetime):
        return as_utc(value)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    if text[-1] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return as_utc(parsed)


__all__ = ["as_utc", "parse_timestamp", "utc_now"]
