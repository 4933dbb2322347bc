"""
Civil Date Codec.

Stored dates are calendar days (``YYYY-MM-DD``) with no time-of-day and no
offset.  Instants are localised into a single fixed zone (``Asia/Kolkata``,
UTC+05:30) and truncated to their day before they are written.  Reading goes
the other way and never fails: a malformed stored value becomes today's date.

Usage::

    from spendwise.utils.dates import format_date, parse_date

    format_date(datetime(2024, 1, 31, 20, 0, tzinfo=timezone.utc))  # "2024-02-01"
    parse_date("2024-02-01")                                          # date(2024, 2, 1)
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

from pydantic import BaseModel

__all__ = [
    "STORAGE_TIMEZONE",
    "MIN_YEAR",
    "MAX_YEAR",
    "DateParseResult",
    "to_civil_date",
    "format_date",
    "try_parse_date",
    "parse_date",
    "today",
    "current_date_key",
    "month_key",
    "is_month_key",
    "month_date_range",
]

STORAGE_TIMEZONE: tzinfo = ZoneInfo("Asia/Kolkata")

MIN_YEAR: int = 1900
MAX_YEAR: int = 2100

_RE_MONTH_KEY = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

DateLike = Union[date, datetime]


class DateParseResult(BaseModel):
    """Outcome of decoding a stored date string.

    Attributes
    ----------
    value:
        The decoded civil date, or ``None`` on failure.
    error:
        Why the string was rejected, or ``None`` on success.
    """

    value: Optional[date] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def to_civil_date(value: DateLike, tz: tzinfo = STORAGE_TIMEZONE) -> date:
    """Reduce *value* to the calendar day it falls on in *tz*.

    A ``datetime`` is an instant: naive values are read as UTC, then
    converted into *tz* before the time-of-day is dropped.  A plain
    ``date`` is already a civil date and is returned unchanged.
    """
    # datetime subclasses date, so it must be checked first.
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(tz).date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def format_date(value: DateLike, tz: tzinfo = STORAGE_TIMEZONE) -> str:
    """Encode *value* as a zero-padded ``YYYY-MM-DD`` string."""
    day = to_civil_date(value, tz)
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def try_parse_date(text: object) -> DateParseResult:
    """Decode a ``YYYY-MM-DD`` string, reporting failures explicitly.

    Only range checks are applied: year in [1900, 2100], month in [1, 12]
    and day in [1, 31].  The day is not checked against the month length;
    an overflowing day rolls into the next month (``2024-02-30`` decodes
    to March 1st).
    """
    if not text or not isinstance(text, str):
        return DateParseResult(error="date is empty or not a string")

    parts = text.split("-")
    if len(parts) != 3:
        return DateParseResult(error=f"expected YYYY-MM-DD, got {text!r}")

    try:
        year, month, day = (int(part) for part in parts)
    except ValueError:
        return DateParseResult(error=f"non-numeric date component in {text!r}")

    if not (MIN_YEAR <= year <= MAX_YEAR):
        return DateParseResult(error=f"year {year} outside {MIN_YEAR}-{MAX_YEAR}")
    if not (1 <= month <= 12):
        return DateParseResult(error=f"month {month} outside 1-12")
    if not (1 <= day <= 31):
        return DateParseResult(error=f"day {day} outside 1-31")

    return DateParseResult(value=date(year, month, 1) + timedelta(days=day - 1))


def parse_date(text: object, tz: tzinfo = STORAGE_TIMEZONE) -> date:
    """Decode a stored date, substituting today's date when it is malformed."""
    result = try_parse_date(text)
    if result.ok and result.value is not None:
        return result.value
    return today(tz)


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------


def today(tz: tzinfo = STORAGE_TIMEZONE) -> date:
    """Today's civil date in *tz*."""
    return datetime.now(tz).date()


def current_date_key(tz: tzinfo = STORAGE_TIMEZONE) -> str:
    """Today's date encoded the way it is stored."""
    return format_date(today(tz))


def month_key(value: DateLike, tz: tzinfo = STORAGE_TIMEZONE) -> str:
    """The ``YYYY-MM`` key of the month *value* falls in."""
    return format_date(value, tz)[:7]


def is_month_key(value: object) -> bool:
    return isinstance(value, str) and _RE_MONTH_KEY.match(value) is not None


def month_date_range(key: str) -> tuple[str, str]:
    """Inclusive string bounds covering every stored date of month *key*.

    The upper bound is always day 31.  Stored dates compare
    lexicographically, and ``YYYY-MM-31`` sorts before the first day of
    the following month, so short months never leak into the next one.

    Raises:
        ValueError: If *key* is not a ``YYYY-MM`` month key.
    """
    if not is_month_key(key):
        raise ValueError(f"Expected a YYYY-MM month key, got {key!r}")
    return f"{key}-01", f"{key}-31"
