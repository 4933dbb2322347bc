"""
Shared Enumerations for spendwise Models.

StrEnum values compare equal to their string equivalents, so rows read
back from Supabase (``"income"``) match the members directly.
"""

from __future__ import annotations
from enum import StrEnum


class TransactionType(StrEnum):
    """Direction of a transaction's cash flow."""

    INCOME = "income"
    EXPENSE = "expense"


class StorageErrorKind(StrEnum):
    """Categories of failure surfaced by the storage layer.

    Invalid stored dates never appear here: the codec coerces them to
    today's date.  Any other stored row that does not fit its model is
    reported as ``BACKEND``.
    """

    UNAUTHENTICATED = "unauthenticated"
    BACKEND = "backend"
