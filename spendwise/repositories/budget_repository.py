"""
Budget Repository.

Handles budget data access via Supabase.  A user holds at most one
budget per (category, month); :meth:`BudgetRepository.save` replaces
whole months and :meth:`BudgetRepository.update` upserts a single one.
"""

from __future__ import annotations

from datetime import tzinfo
from typing import Optional

from spendwise.auth import IdentityProvider
from spendwise.database import DatabaseManager
from spendwise.logger import StructuredLogger
from spendwise.models.budget import Budget
from spendwise.models.results import StorageResult
from spendwise.repositories.base_repository import BaseRepository, Row
from spendwise.utils.dates import STORAGE_TIMEZONE

# Natural key of a budget row; the table needs a matching unique index.
BUDGET_CONFLICT_COLUMNS: str = "user_id,category,month"


class BudgetRepository(BaseRepository):
    """Data access layer for Budget entities."""

    TABLE = "budgets"

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

    def save(self, budgets: list[Budget]) -> StorageResult[list[Budget]]:
        """Replace the user's budgets for every month present in *budgets*.

        Two phases, not wrapped in a transaction:

        1. delete the user's rows for each distinct month, one request each;
        2. insert all of *budgets* in one request.

        A failed delete stops before anything is inserted.  A failed
        insert leaves the affected months with no budgets at all; nothing
        is restored.  Two concurrent saves touching the same month can
        interleave their phases.  If one finishes before the other starts
        deleting, the later save wins; if both deletes run before either
        insert, the month keeps the union of both sets.
        """
        def _replace(user_id: str) -> list[Budget]:
            if not budgets:
                return []

            months = list(dict.fromkeys(b.month for b in budgets))
            for month in months:
                (
                    self._query()
                    .delete()
                    .eq("user_id", user_id)
                    .eq("month", month)
                    .execute()
                )

            rows = [self._serialize(b, user_id) for b in budgets]
            try:
                response = self._query().insert(rows).execute()
            except Exception:
                self._logger.error(
                    "Budget insert failed after clearing months %s; "
                    "those months now have no budgets.",
                    ", ".join(months),
                )
                raise

            saved = [self._parse_budget(row) for row in response.data or []]
            self._logger.info(
                "Saved %d budgets for months %s.", len(saved), ", ".join(months)
            )
            return saved

        return self._execute_write(_replace, operation_name="save (budgets)")

    def fetch_all(self) -> StorageResult[list[Budget]]:
        """All of the user's budgets, latest month first."""
        def _select(user_id: str) -> list[Budget]:
            response = (
                self._query()
                .select("*")
                .eq("user_id", user_id)
                .order("month", desc=True)
                .execute()
            )
            return [self._parse_budget(row) for row in response.data or []]

        return self._execute_read(_select, operation_name="fetch_all (budgets)")

    def load_all(self) -> list[Budget]:
        """Like :meth:`fetch_all`, but failures yield an empty list."""
        return self._unwrap_read(self.fetch_all(), operation_name="budgets")

    def update(self, budget: Budget) -> StorageResult[Budget]:
        """Insert or replace the budget for (user, category, month)."""
        def _upsert(user_id: str) -> Budget:
            response = (
                self._query()
                .upsert(
                    self._serialize(budget, user_id),
                    on_conflict=BUDGET_CONFLICT_COLUMNS,
                )
                .execute()
            )
            stored = self._parse_budget(
                self._single_row(response, "update (budgets)")
            )
            self._logger.info(
                "Budget upserted: %s / %s", stored.month, stored.category
            )
            return stored

        return self._execute_write(_upsert, operation_name="update (budgets)")

    # --- Private helpers ---

    @staticmethod
    def _serialize(budget: Budget, user_id: str) -> Row:
        return {
            "user_id": user_id,
            "category": budget.category,
            "amount": float(budget.amount),
            "month": budget.month,
        }

    @staticmethod
    def _parse_budget(row: Row) -> Budget:
        return Budget(
            category=row.get("category"),
            amount=row.get("amount"),
            month=row.get("month"),
        )
