"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

from datetime import date, datetime, time, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def coerce_utc(value: datetime | None) -> datetime | None:
    """Return a UTC-normalized datetime, assuming naive values are already UTC."""

    if value is None:
        return None

    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)

    return value.astimezone(timezone.utc)


def day_bounds(
    start: str | None, end: str | None
) -> tuple[datetime | None, datetime | None]:
    """Parse inclusive ``YYYY-MM-DD`` filter bounds into UTC datetimes.

    ``start`` maps to the first instant of its day and ``end`` to the last one.
    Raises ``ValueError`` naming the offending bound when a value is malformed.
    """

    lower = upper = None
    if start:
        try:
            lower = datetime.combine(date.fromisoformat(start), time.min, timezone.utc)
        except ValueError:
            raise ValueError("Invalid from date format") from None
    if end:
        try:
            upper = datetime.combine(date.fromisoformat(end), time.max, timezone.utc)
        except ValueError:
            raise ValueError("Invalid to date format") from None
    return lower, upper
