"""
Range Selector — inclusive day / week / month windows around a reference time.

Weeks start on Monday. Bounds are naive local wall-clock times; aware inputs
are read in local time first. All arithmetic is done on immutable
date/datetime values; nothing here mutates its argument.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Union

from timelog.data.models import Bounds, local_wall

DateLike = Union[date, datetime]

_END_OF_DAY = time(23, 59, 59, 999000)


class RangeUnit:
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    ALL = (DAY, WEEK, MONTH)


def _as_date(value: DateLike) -> date:
    return local_wall(value).date() if isinstance(value, datetime) else value


def start_of_day(value: DateLike) -> datetime:
    return datetime.combine(_as_date(value), time.min)


def end_of_day(value: DateLike) -> datetime:
    return datetime.combine(_as_date(value), _END_OF_DAY)


def same_day(a: datetime, b: datetime) -> bool:
    return local_wall(a).date() == local_wall(b).date()


def start_of_week(value: DateLike) -> datetime:
    """Monday 00:00 of the week containing value."""
    d = _as_date(value)
    # isoweekday: Monday=1 .. Sunday=7, so Sunday backs up 6 days
    return start_of_day(d - timedelta(days=d.isoweekday() - 1))


def end_of_week(value: DateLike) -> datetime:
    """Sunday 23:59:59.999 of the week containing value."""
    return end_of_day(start_of_week(value).date() + timedelta(days=6))


def start_of_month(value: DateLike) -> datetime:
    return start_of_day(_as_date(value).replace(day=1))


def end_of_month(value: DateLike) -> datetime:
    d = _as_date(value)
    last_day = calendar.monthrange(d.year, d.month)[1]
    return end_of_day(d.replace(day=last_day))


def bounds(reference: DateLike, unit: str) -> Bounds:
    """Inclusive [start, end] of the day, week or month containing reference."""
    if unit == RangeUnit.DAY:
        return Bounds(start_of_day(reference), end_of_day(reference))
    if unit == RangeUnit.WEEK:
        return Bounds(start_of_week(reference), end_of_week(reference))
    if unit == RangeUnit.MONTH:
        return Bounds(start_of_month(reference), end_of_month(reference))
    raise ValueError(f"Unknown range unit {unit!r}; expected one of {RangeUnit.ALL}.")
