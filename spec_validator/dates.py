"""
dates.py - small date conversion helpers
========================================

Every helper accepts the same loose set of inputs and turns them into a
:class:`pandas.Timestamp` first:

* ``pandas.Timestamp`` / ``datetime.datetime`` - used as is;
* ``datetime.date`` - midnight of that day;
* ``str`` - anything pandas can parse, including ``"now"`` and ``"today"``;
* ``int`` - seconds since the epoch, in UTC.

Comparing a timezone-aware value with a naive one raises ``TypeError``,
exactly like comparing the underlying timestamps does.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Union

import pandas as pd

__all__ = [
    "DEFAULT_FORMAT",
    "to_timestamp",
    "to_datetime",
    "format_date",
    "is_in_future",
    "is_older",
    "is_not_older",
    "are_equal",
    "now_string",
    "today_string",
]

DEFAULT_FORMAT = "%Y-%m-%d %H:%M:%S"

DateLike = Union[pd.Timestamp, _dt.datetime, _dt.date, str, int]


def to_timestamp(value: DateLike) -> pd.Timestamp:
    """Convert *value* to a :class:`pandas.Timestamp`.

    Raises ``TypeError`` for unsupported types and ``ValueError`` for strings
    that cannot be parsed.
    """
    if isinstance(value, pd.Timestamp):
        return value
    if isinstance(value, _dt.datetime):
        return pd.Timestamp(value)
    if isinstance(value, _dt.date):
        return pd.Timestamp(_dt.datetime.combine(value, _dt.time()))
    if isinstance(value, str):
        return pd.Timestamp(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return pd.Timestamp(value, unit="s", tz="UTC")
    raise TypeError("Invalid param date - cannot be converted to Timestamp")


def to_datetime(value: DateLike) -> _dt.datetime:
    """Like :func:`to_timestamp` but returns a standard-library datetime."""
    return to_timestamp(value).to_pydatetime()


def format_date(value: DateLike, fmt: str = DEFAULT_FORMAT) -> str:
    return to_timestamp(value).strftime(fmt)


def is_in_future(value: DateLike) -> bool:
    ts = to_timestamp(value)
    return ts > pd.Timestamp.now(tz=ts.tz)


def is_older(first: DateLike, second: DateLike) -> bool:
    """Tell if *first* is strictly before *second*."""
    return to_timestamp(first) < to_timestamp(second)


def is_not_older(first: DateLike, second: DateLike) -> bool:
    return to_timestamp(first) >= to_timestamp(second)


def are_equal(first: DateLike, second: DateLike, scope: str = "%Y%m%d%H%M%S%Z") -> bool:
    """Tell if both dates look the same once formatted with *scope*.

    ``scope="%Y%m"`` compares year and month only, ``"%M"`` the minute only.
    """
    return format_date(first, scope) == format_date(second, scope)


def now_string(fmt: str = DEFAULT_FORMAT) -> str:
    """Current local date and time as text."""
    return pd.Timestamp.now().strftime(fmt)


def today_string(fmt: str = "%Y-%m-%d") -> str:
    return now_string(fmt)
