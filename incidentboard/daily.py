"""
Date-seeded selection of the item of the day.

Every caller that passes the same calendar day and the same pool gets the
same item back, with no shared state and no "already shown" flag. The seed is
the sum of the character codes of the ISO day string ("YYYY-MM-DD") and the
pick is `pool[seed % len(pool)]`. This is a small auditable hash, not a
random generator; collisions between nearby days are expected.

Timezones are the caller's concern: normalize to the viewer's calendar day
before calling.
"""

from datetime import date, datetime
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


def _calendar_day(day: date) -> date:
    # datetime is a date subclass; drop the time part without converting zones
    if isinstance(day, datetime):
        return day.date()
    return day


def date_seed(day: date) -> int:
    """Sum of the character codes of the day's "YYYY-MM-DD" representation."""
    return sum(ord(char) for char in _calendar_day(day).isoformat())


def select_daily_item(pool: Sequence[T], day: date) -> T:
    """Return the pool item featured on `day`.

    Args:
        pool: Active items, already sorted by their order
        day: Calendar day to select for

    Raises:
        ValueError: If the pool is empty (callers must skip selection instead)
    """
    if not pool:
        raise ValueError("Cannot select a daily item from an empty pool")

    return pool[date_seed(day) % len(pool)]


def select_daily_item_for_today(pool: Sequence[T], today: Optional[date] = None) -> T:
    """Select for `today`, defaulting to the local calendar day."""
    return select_daily_item(pool, today or date.today())
