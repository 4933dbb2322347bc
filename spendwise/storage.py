"""
Storage Adapter.

The public surface of the package: one object per signed-in client that
exposes the transaction and budget repositories, plus flat helpers named
after the operations the application calls.

``create_storage()`` is the composition root.  It wires configuration,
logging, the Supabase connection and identity resolution together so the
application never builds repositories by hand::

    from spendwise import create_storage

    storage = create_storage()
    result = storage.save_transaction(txn)
    if not result.ok:
        show_error(result.error.message)
"""

from __future__ import annotations

from datetime import tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from supabase import Client as SupabaseClient

from spendwise.auth import IdentityProvider, SupabaseIdentityProvider
from spendwise.config import AppConfig, get_config
from spendwise.database import DatabaseManager
from spendwise.logger import StructuredLogger, get_logger
from spendwise.models.budget import Budget
from spendwise.models.results import StorageResult
from spendwise.models.transaction import Transaction
from spendwise.repositories.budget_repository import BudgetRepository
from spendwise.repositories.transaction_repository import TransactionRepository
from spendwise.utils.dates import STORAGE_TIMEZONE


class StorageAdapter:
    """User-scoped access to the ``transactions`` and ``budgets`` collections.

    Parameters
    ----------
    db:
        Database manager owning the Supabase client.
    identity:
        Resolves the user every call is scoped to.
    logger:
        Structured JSON logger shared by both repositories.
    tz:
        Zone whose calendar days are stored.
    transactions_table / budgets_table:
        Collection names, when they differ from the defaults.
    """

    def __init__(
        self,
        db: DatabaseManager,
        identity: IdentityProvider,
        logger: StructuredLogger,
        *,
        tz: tzinfo = STORAGE_TIMEZONE,
        transactions_table: Optional[str] = None,
        budgets_table: Optional[str] = None,
    ) -> None:
        self._db: DatabaseManager = db
        self._identity: IdentityProvider = identity
        self.transactions: TransactionRepository = TransactionRepository(
            db, identity, logger, table=transactions_table, tz=tz,
        )
        self.budgets: BudgetRepository = BudgetRepository(
            db, identity, logger, table=budgets_table, tz=tz,
        )

    @property
    def identity(self) -> IdentityProvider:
        return self._identity

    @property
    def is_online(self) -> bool:
        return self._db.is_online

    # -- Transactions ---------------------------------------------------------

    def save_transaction(self, transaction: Transaction) -> StorageResult[Transaction]:
        return self.transactions.save(transaction)

    def load_transactions(self) -> list[Transaction]:
        return self.transactions.load_all()

    def update_transaction(self, transaction: Transaction) -> StorageResult[Transaction]:
        return self.transactions.update(transaction)

    def delete_transaction(self, transaction_id: str) -> StorageResult[None]:
        return self.transactions.delete(transaction_id)

    def bulk_insert_transactions(
        self, transactions: list[Transaction]
    ) -> StorageResult[list[Transaction]]:
        return self.transactions.bulk_insert(transactions)

    def delete_transactions_by_month(self, month: str) -> StorageResult[None]:
        return self.transactions.delete_by_month(month)

    def delete_all_transactions(self) -> StorageResult[None]:
        return self.transactions.delete_all()

    # -- Budgets --------------------------------------------------------------

    def save_budgets(self, budgets: list[Budget]) -> StorageResult[list[Budget]]:
        return self.budgets.save(budgets)

    def load_budgets(self) -> list[Budget]:
        return self.budgets.load_all()

    def update_budget(self, budget: Budget) -> StorageResult[Budget]:
        return self.budgets.update(budget)


def create_storage(
    config: Optional[AppConfig] = None,
    *,
    client: Optional[SupabaseClient] = None,
    identity: Optional[IdentityProvider] = None,
    logger: Optional[StructuredLogger] = None,
) -> StorageAdapter:
    """Wire a :class:`StorageAdapter` from configuration.

    Args:
        config: Settings to use; defaults to the cached ``get_config()``.
        client: A ready Supabase client, bypassing the URL/key settings.
        identity: Identity provider; defaults to the Supabase auth session
            of the client.
        logger: Logger shared by the adapter; defaults to ``spendwise.storage``.

    Returns:
        A fully wired adapter.  It is returned even when the backend is
        not configured; writes then fail and reads come back empty.
    """
    config = config or get_config()
    logger = logger or get_logger("spendwise.storage")

    db = DatabaseManager(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        logger=logger,
        client=client,
    )
    if identity is None:
        identity = SupabaseIdentityProvider(db=db, logger=logger)

    return StorageAdapter(
        db,
        identity,
        logger,
        tz=ZoneInfo(config.STORAGE_TIMEZONE),
        transactions_table=config.TRANSACTIONS_TABLE,
        budgets_table=config.BUDGETS_TABLE,
    )
