"""
spendwise: user-scoped Supabase storage for transactions and budgets.

Usage::

    from spendwise import create_storage, Transaction, TransactionType

    storage = create_storage()
    storage.save_transaction(Transaction(
        date=date(2024, 2, 1),
        category="Food",
        amount=Decimal("-12.50"),
        type=TransactionType.EXPENSE,
    ))
"""

from spendwise.models import (
    Budget,
    StorageError,
    StorageErrorKind,
    StorageResult,
    Transaction,
    TransactionType,
    User,
)
from spendwise.storage import StorageAdapter, create_storage

__version__ = "1.0.0"

__all__ = [
    "Budget",
    "StorageAdapter",
    "StorageError",
    "StorageErrorKind",
    "StorageResult",
    "Transaction",
    "TransactionType",
    "User",
    "create_storage",
]
