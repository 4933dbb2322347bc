"""
Transaction Repository.

Handles all transaction data access via Supabase.  Every query and
mutation is filtered by the current user's id; dates cross the wire as
``YYYY-MM-DD`` civil dates.
"""

from __future__ import annotations

from datetime import tzinfo
from typing import Optional

from spendwise.auth import IdentityProvider
from spendwise.database import DatabaseManager
from spendwise.logger import StructuredLogger
from spendwise.models.results import StorageResult
from spendwise.models.transaction import Transaction
from spendwise.repositories.base_repository import BaseRepository, Row
from spendwise.utils.dates import (
    STORAGE_TIMEZONE,
    format_date,
    month_date_range,
    today,
    try_parse_date,
)


class TransactionRepository(BaseRepository):
    """Data access layer for Transaction entities.

    Writes return a :class:`StorageResult`; :meth:`load_all` returns a
    plain list and logs failures instead (use :meth:`fetch_all` to see
    them).
    """

    TABLE = "transactions"

    def __init__(
        self,
        db: DatabaseManager,
        identity: IdentityProvider,
        logger: StructuredLogger,
        *,
        table: Optional[str] = None,
        tz: tzinfo = STORAGE_TIMEZONE,
    ) -> None:
        super().__init__(db, identity, logger, table=table, tz=tz)

    def save(self, transaction: Transaction) -> StorageResult[Transaction]:
        """Insert one transaction and return the stored record."""
        def _insert(user_id: str) -> Transaction:
            response = (
                self._query()
                .insert(self._serialize(transaction, user_id))
                .execute()
            )
            created = self._parse_transaction(
                self._single_row(response, "save (transactions)")
            )
            self._logger.info("Transaction created: %s", created.id)
            return created

        return self._execute_write(_insert, operation_name="save (transactions)")

    def fetch_all(self) -> StorageResult[list[Transaction]]:
        """All of the user's transactions, newest date first."""
        def _select(user_id: str) -> list[Transaction]:
            response = (
                self._query()
                .select("*")
                .eq("user_id", user_id)
                .order("date", desc=True)
                .execute()
            )
            return [self._parse_transaction(row) for row in response.data or []]

        return self._execute_read(_select, operation_name="fetch_all (transactions)")

    def load_all(self) -> list[Transaction]:
        """Like :meth:`fetch_all`, but failures yield an empty list."""
        return self._unwrap_read(self.fetch_all(), operation_name="transactions")

    def update(self, transaction: Transaction) -> StorageResult[Transaction]:
        """Overwrite the mutable fields of one of the user's transactions.

        A row that does not exist or belongs to someone else is reported
        as PostgREST's ``PGRST116`` "no rows" error.

        Raises:
            ValueError: If *transaction* has no ``id``.
        """
        if transaction.id is None:
            raise ValueError("Cannot update a transaction without an id")

        def _update(user_id: str) -> Transaction:
            payload = self._serialize(transaction, user_id)
            del payload["user_id"]
            response = (
                self._query()
                .update(payload)
                .eq("id", transaction.id)
                .eq("user_id", user_id)
                .execute()
            )
            updated = self._parse_transaction(
                self._single_row(response, "update (transactions)")
            )
            self._logger.info("Transaction updated: %s", updated.id)
            return updated

        return self._execute_write(_update, operation_name="update (transactions)")

    def delete(self, transaction_id: str) -> StorageResult[None]:
        """Delete one of the user's transactions.

        No existence check: an unknown or foreign id deletes nothing and
        still succeeds.
        """
        def _delete(user_id: str) -> None:
            (
                self._query()
                .delete()
                .eq("id", transaction_id)
                .eq("user_id", user_id)
                .execute()
            )
            self._logger.info("Transaction deleted: %s", transaction_id)

        return self._execute_write(_delete, operation_name="delete (transactions)")

    def bulk_insert(
        self, transactions: list[Transaction]
    ) -> StorageResult[list[Transaction]]:
        """Insert many transactions in a single request.

        The backend applies the batch as one statement, so it either
        lands entirely or fails entirely.  An empty batch is a no-op.
        """
        def _insert(user_id: str) -> list[Transaction]:
            if not transactions:
                return []
            rows = [self._serialize(t, user_id) for t in transactions]
            response = self._query().insert(rows).execute()
            created = [self._parse_transaction(row) for row in response.data or []]
            self._logger.info("Bulk inserted %d transactions.", len(created))
            return created

        return self._execute_write(_insert, operation_name="bulk_insert (transactions)")

    def delete_by_month(self, month: str) -> StorageResult[None]:
        """Delete the user's transactions dated within *month* (``YYYY-MM``).

        Without a user this fails with ``UNAUTHENTICATED`` whatever *month*
        holds; the key is only checked once a user is resolved.

        Raises:
            ValueError: If *month* is not a ``YYYY-MM`` key.
        """
        def _delete(user_id: str) -> None:
            start_date, end_date = month_date_range(month)
            (
                self._query()
                .delete()
                .eq("user_id", user_id)
                .gte("date", start_date)
                .lte("date", end_date)
                .execute()
            )
            self._logger.info("Transactions deleted for month %s.", month)

        return self._execute_write(_delete, operation_name="delete_by_month (transactions)")

    def delete_all(self) -> StorageResult[None]:
        """Delete every transaction the user owns."""
        def _delete(user_id: str) -> None:
            self._query().delete().eq("user_id", user_id).execute()
            self._logger.info("All transactions deleted for user %s.", user_id)

        return self._execute_write(_delete, operation_name="delete_all (transactions)")

    # --- Private helpers ---

    def _serialize(self, transaction: Transaction, user_id: str) -> Row:
        """Convert a Transaction model to a dict suitable for Supabase insert/update."""
        return {
            "user_id": user_id,
            "date": format_date(transaction.date, self._tz),
            "category": transaction.category,
            "subcategory": transaction.subcategory,
            "amount": float(transaction.amount),
            "description": transaction.description or "",
            "type": str(transaction.type),
        }

    def _parse_transaction(self, row: Row) -> Transaction:
        """Parse a Supabase row into a Transaction model.

        An unreadable stored date is replaced by today's date.
        """
        parsed = try_parse_date(row.get("date"))
        if parsed.ok:
            day = parsed.value
        else:
            day = today(self._tz)
            self._logger.warning(
                "Transaction %s has an invalid stored date (%s); using %s.",
                row.get("id"),
                parsed.error,
                day.isoformat(),
            )
        return Transaction(
            id=row.get("id"),
            date=day,
            category=row.get("category"),
            subcategory=row.get("subcategory"),
            amount=row.get("amount"),
            description=row.get("description") or "",
            type=row.get("type"),
        )
