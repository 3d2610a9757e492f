"""Elapsed Time — day arithmetic shared by the decay engine and status classifier.

Invariants:
    - Naive datetimes are interpreted as UTC
    - Elapsed days are fractional (a 36h gap is 1.5 days)
"""

from datetime import datetime, timezone

SECONDS_PER_DAY: float = 60 * 60 * 24


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def elapsed_days(since: datetime, now: datetime) -> float:
    return (as_utc(now) - as_utc(since)).total_seconds() / SECONDS_PER_DAY
