"""Calendar-day helpers for review scheduling.

Due dates are compared by local calendar day only; the time of day a card
was reviewed, or the time stored alongside an old ``next_review``, never
changes whether the card is due.
"""

from datetime import date, datetime, time, timedelta
from typing import Any


def local_midnight(moment: datetime) -> datetime:
    """Return 00:00:00.000 of ``moment``'s calendar day, keeping its tzinfo."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def midnight_after(moment: datetime, days: int) -> datetime:
    """Return midnight of the day ``days`` calendar days after ``moment``."""
    day = moment.date() + timedelta(days=days)
    return datetime.combine(day, time.min, tzinfo=moment.tzinfo)


def parse_review_date(value: Any) -> datetime | None:
    """Parse a stored ``next_review`` value.

    Accepts datetimes, dates, ISO-8601 strings (``Z`` suffix included) and
    epoch milliseconds. Returns None for anything that doesn't describe a
    valid moment.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def align_to(value: datetime, reference: datetime) -> datetime:
    """Express ``value`` on the same wall clock as ``reference``.

    Aware values are converted to the reference's zone (the system local
    zone when the reference is naive); naive values are taken as already
    being in the reference's zone.
    """
    if value.tzinfo is None:
        if reference.tzinfo is None:
            return value
        return value.replace(tzinfo=reference.tzinfo)
    if reference.tzinfo is None:
        return value.astimezone().replace(tzinfo=None)
    return value.astimezone(reference.tzinfo)


def is_same_day_or_earlier(moment: datetime, reference: datetime) -> bool:
    """Return True if ``moment`` falls on ``reference``'s calendar day or before."""
    moment = align_to(moment, reference)
    return local_midnight(moment) <= local_midnight(reference)
