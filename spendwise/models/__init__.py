from __future__ import annotations

"""
Data Models Package.

Re-exports all Pydantic models:
    from spendwise.models import Transaction, Budget, User
    from spendwise.models import TransactionType, StorageErrorKind
    from spendwise.models import StorageError, StorageResult
"""

from spendwise.models.enums import StorageErrorKind, TransactionType
from spendwise.models.user import User
from spendwise.models.transaction import Transaction
from spendwise.models.budget import Budget
from spendwise.models.results import StorageError, StorageResult

__all__ = [
    "StorageErrorKind",
    "TransactionType",
    "User",
    "Transaction",
    "Budget",
    "StorageError",
    "StorageResult",
]
