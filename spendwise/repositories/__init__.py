"""
Repository Layer Package.

Provides data-access abstractions over Supabase.  All database operations
flow through repositories; nothing else touches ``db.supabase`` directly.

Usage:
    from spendwise.repositories.transaction_repository import TransactionRepository
    from spendwise.repositories.budget_repository import BudgetRepository
"""

from spendwise.repositories.base_repository import BaseRepository
from spendwise.repositories.transaction_repository import TransactionRepository
from spendwise.repositories.budget_repository import BudgetRepository

__all__ = [
    "BaseRepository",
    "TransactionRepository",
    "BudgetRepository",
]
