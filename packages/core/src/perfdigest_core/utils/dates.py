"""Calendar-day helpers.

Every comparison happens on UTC calendar days: a timestamp is converted to
UTC first and then truncated to midnight, so ``2025-06-16T01:30:00+02:00``
belongs to 2025-06-15.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

DATE_FORMAT = "%Y-%m-%d"


def parse_date(value: str) -> datetime:
    """Parse a ``YYYY-MM-DD`` string into a UTC midnight datetime.

    Raises ValueError when the string does not match the format.
    """
    try:
        parsed = datetime.strptime(value, DATE_FORMAT)
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid date string {value!r}: expected YYYY-MM-DD") from e
    return parsed.replace(tzinfo=timezone.utc)


def to_utc(timestamp: datetime) -> datetime:
    # PyGithub returns naive datetimes on older releases; those are UTC already.
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def utc_midnight(timestamp: datetime) -> datetime:
    ts = to_utc(timestamp)
    return datetime(ts.year, ts.month, ts.day, tzinfo=timezone.utc)


def is_on_date(timestamp: datetime | None, target: str) -> bool:
    """Return True when ``timestamp`` falls on the UTC calendar day ``target``.

    The target is parsed before the timestamp is inspected so that a malformed
    date string always raises, even for a missing timestamp.
    """
    target_day = parse_date(target)
    if timestamp is None:
        return False
    return utc_midnight(timestamp) == target_day


def default_date_range(today: date | None = None) -> tuple[str, str]:
    """Return ``(yesterday, today)`` as ``YYYY-MM-DD`` strings."""
    today = today or datetime.now(timezone.utc).date()
    yesterday = today - timedelta(days=1)
    return yesterday.strftime(DATE_FORMAT), today.strftime(DATE_FORMAT)
