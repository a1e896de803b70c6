"""Monday-start week arithmetic for the two-week planning window."""
from datetime import date, datetime, timedelta
from typing import List, Union

from planifia.utilities.constants import WEEK_OFFSETS

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def monday_of(value: DateLike) -> date:
    """Monday of the week containing value."""
    d = _as_date(value)
    return d - timedelta(days=d.weekday())


def is_same_week(a: DateLike, b: DateLike) -> bool:
    """True when both days fall in the same Monday-start week."""
    return monday_of(a) == monday_of(b)


def is_ingredient_week(day: DateLike, now: DateLike) -> bool:
    """Ingredient derivation applies only to days of the week in progress.

    Always relative to the real current week (offset 0), whatever week is on screen.
    """
    return is_same_week(day, now)


def week_days(now: DateLike, week_offset: int = 0) -> List[date]:
    """The 7 visible days: MondayOf(now) + 7*week_offset .. +6 days."""
    if week_offset not in WEEK_OFFSETS:
        raise ValueError(f"week_offset must be one of {WEEK_OFFSETS}, got {week_offset}")
    start = monday_of(now) + timedelta(days=7 * week_offset)
    return [start + timedelta(days=i) for i in range(7)]


__all__ = ['monday_of', 'is_same_week', 'is_ingredient_week', 'week_days']
