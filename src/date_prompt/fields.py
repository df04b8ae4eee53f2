"""Calendar field accessors for the editable date segments.

Each editable segment type maps to a ``(get, set)`` pair.  Setters accept
out-of-range values and let ``dateutil.relativedelta`` roll them over, so
setting the month to 13 lands in January of the next year and setting the
day to 32 in January lands on February 1st.  Month and year changes keep the
day offset from the first of the month, so a day past the end of the target
month spills into the following one.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, NamedTuple

from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)


class FieldAccessor(NamedTuple):
    get: Callable[[datetime], int]
    set: Callable[[datetime, int], datetime]


def _setter(unit: str, getter: Callable[[datetime], int]) -> Callable[[datetime, int], datetime]:
    def set_field(value: datetime, field_value: int) -> datetime:
        return value + relativedelta(**{unit: field_value - getter(value)})

    set_field.__name__ = f"set_{unit}"
    return set_field


def _calendar_setter(unit: str, getter: Callable[[datetime], int]) -> Callable[[datetime, int], datetime]:
    # Day of month spills into the next month instead of clamping: Jan 31
    # plus one month is Mar 3 (or Mar 2 in a leap year).
    def set_field(value: datetime, field_value: int) -> datetime:
        first = value + relativedelta(day=1, **{unit: field_value - getter(value)})
        return first + relativedelta(days=value.day - 1)

    set_field.__name__ = f"set_{unit}"
    return set_field


def _get_year(value: datetime) -> int:
    return value.year


def _get_month(value: datetime) -> int:
    return value.month


def _get_day(value: datetime) -> int:
    return value.day


def _get_hour(value: datetime) -> int:
    return value.hour


def _get_minute(value: datetime) -> int:
    return value.minute


def _get_second(value: datetime) -> int:
    return value.second


FIELD_ACCESSORS: dict[str, FieldAccessor] = {
    "year": FieldAccessor(_get_year, _calendar_setter("years", _get_year)),
    "month": FieldAccessor(_get_month, _calendar_setter("months", _get_month)),
    "day": FieldAccessor(_get_day, _setter("days", _get_day)),
    "hour": FieldAccessor(_get_hour, _setter("hours", _get_hour)),
    "minute": FieldAccessor(_get_minute, _setter("minutes", _get_minute)),
    "second": FieldAccessor(_get_second, _setter("seconds", _get_second)),
}

EDITABLE_TYPES: frozenset[str] = frozenset(FIELD_ACCESSORS)


def is_editable(segment_type: str) -> bool:
    return segment_type in FIELD_ACCESSORS


def shift_field(value: datetime, segment_type: str, amount: int) -> datetime:
    """Return *value* with the field behind *segment_type* moved by *amount*.

    Non-editable segment types leave the value untouched.  A result outside
    the range ``datetime`` can represent (before year 1 or after 9999) is
    refused and the original value returned.
    """
    accessor = FIELD_ACCESSORS.get(segment_type)
    if accessor is None:
        return value
    try:
        return accessor.set(value, accessor.get(value) + amount)
    except (OverflowError, ValueError):
        logger.debug("Refusing to shift %s by %d past datetime range", segment_type, amount)
        return value
