"""
Base Repository.

Provides shared infrastructure for all repositories:
- DatabaseManager reference (Supabase)
- IdentityProvider reference (row owner for every query)
- Logger reference
- The write / read envelopes that turn backend failures into results
"""

from __future__ import annotations

from datetime import tzinfo
from typing import Callable, Optional, TypeVar

import httpx
from postgrest import APIResponse, SyncRequestBuilder
from postgrest.exceptions import APIError
from pydantic import ValidationError
from supabase import Client as SupabaseClient

from spendwise.auth import IdentityProvider
from spendwise.database import DatabaseManager
from spendwise.logger import StructuredLogger
from spendwise.models.enums import StorageErrorKind
from spendwise.models.results import StorageError, StorageResult
from spendwise.utils.dates import STORAGE_TIMEZONE

T = TypeVar("T")
Row = dict[str, object]

# Failures passed back to the caller as BACKEND errors.  RuntimeError is
# what DatabaseManager.supabase raises when no client is configured;
# ValidationError comes from a returned row that does not fit its model.
BACKEND_ERRORS: tuple[type[Exception], ...] = (
    APIError, httpx.HTTPError, RuntimeError, ValidationError,
)


class BaseRepository:
    """Base class for all repositories. Receives dependencies via __init__.

    Subclasses set ``TABLE``; a different collection name can be passed
    as ``table`` (e.g. a per-environment prefix).
    """

    TABLE: str = ""

    def __init__(
        self,
        db: DatabaseManager,
        identity: IdentityProvider,
        logger: StructuredLogger,
        *,
        table: Optional[str] = None,
        tz: tzinfo = STORAGE_TIMEZONE,
    ) -> None:
        self._db = db
        self._identity = identity
        self._logger = logger
        self._table: str = table or self.TABLE
        self._tz: tzinfo = tz

    @property
    def supabase(self) -> SupabaseClient:
        """Returns the Supabase client for cloud operations."""
        return self._db.supabase

    @property
    def table_name(self) -> str:
        return self._table

    def _query(self) -> SyncRequestBuilder:
        return self.supabase.table(self._table)

    def _execute_write(
        self,
        op: Callable[[str], T],
        *,
        operation_name: str,
    ) -> StorageResult[T]:
        """Run a mutation for the current user.

        ``op`` receives the resolved user id.  Without a user the call
        fails with ``UNAUTHENTICATED`` before any request is issued;
        backend failures are logged and returned, never raised.
        """
        user_id = self._identity.get_current_user_id()
        if user_id is None:
            self._logger.warning(
                "%s rejected: user not authenticated.", operation_name
            )
            return StorageResult.failure(StorageError.unauthenticated())

        try:
            return StorageResult.success(op(user_id))
        except BACKEND_ERRORS as exc:
            self._logger.error("%s failed: %s", operation_name, exc)
            return StorageResult.failure(StorageError.from_exception(exc))

    def _execute_read(
        self,
        op: Callable[[str], list[T]],
        *,
        operation_name: str,
    ) -> StorageResult[list[T]]:
        """Same envelope as :meth:`_execute_write` for queries.

        An unauthenticated read is not logged: "nobody signed in yet" is
        the normal state before login.
        """
        user_id = self._identity.get_current_user_id()
        if user_id is None:
            return StorageResult.failure(StorageError.unauthenticated())

        try:
            rows = op(user_id)
        except BACKEND_ERRORS as exc:
            return StorageResult.failure(StorageError.from_exception(exc))
        self._logger.debug("%s returned %d rows.", operation_name, len(rows))
        return StorageResult.success(rows)

    def _unwrap_read(
        self,
        result: StorageResult[list[T]],
        *,
        operation_name: str,
    ) -> list[T]:
        """Collapse a read result into a list, logging swallowed failures.

        Callers of the list-returning API cannot tell "no rows" from
        "load failed"; the log is the only trace of the latter.
        """
        if result.error is None:
            return result.data or []
        if result.error.kind == StorageErrorKind.BACKEND:
            self._logger.error(
                "Error loading %s: %s", operation_name, result.error.message,
                extra={"code": result.error.code or ""},
            )
        return []

    @staticmethod
    def _single_row(response: APIResponse, operation_name: str) -> Row:
        """Return the only row of *response* the way ``.single()`` would.

        Raises:
            APIError: PostgREST's ``PGRST116`` when no row came back.
        """
        rows = response.data or []
        if len(rows) != 1:
            raise APIError({
                "message": "JSON object requested, multiple (or no) rows returned",
                "code": "PGRST116",
                "details": f"{operation_name}: the result contains {len(rows)} rows",
                "hint": None,
            })
        return rows[0]
