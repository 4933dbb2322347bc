"""Shared utility functions for the spendwise storage layer.

Re-exports the civil date codec so consumers can import directly from
``spendwise.utils`` (e.g. ``from spendwise.utils import format_date``).
"""

from spendwise.utils.dates import (
    STORAGE_TIMEZONE,
    DateParseResult,
    current_date_key,
    format_date,
    month_date_range,
    parse_date,
    to_civil_date,
    today,
    try_parse_date,
)

__all__ = [
    "STORAGE_TIMEZONE",
    "DateParseResult",
    "current_date_key",
    "format_date",
    "month_date_range",
    "parse_date",
    "to_civil_date",
    "today",
    "try_parse_date",
]
