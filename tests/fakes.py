"""
In-memory stand-in for the Supabase client.

Implements the slice of the PostgREST query builder the repositories use
(insert / select / update / delete / upsert with eq / gte / lte / order)
over plain lists of dicts, and records every executed request so tests
can assert call counts and filters.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Optional, Union

from postgrest.exceptions import APIError

Row = dict[str, object]


@dataclass
class ExecutedCall:
    table: str
    operation: str
    payload: Union[Row, list[Row], None]
    filters: list[tuple[str, str, object]]
    order: Optional[tuple[str, bool]] = None
    on_conflict: Optional[str] = None

    @property
    def is_mutation(self) -> bool:
        return self.operation != "select"


@dataclass
class FakeResponse:
    data: list[Row]
    count: Optional[int] = None


@dataclass
class FakeUser:
    id: str
    email: Optional[str] = None


@dataclass
class FakeUserResponse:
    user: Optional[FakeUser]


class FakeAuth:
    def __init__(self) -> None:
        self.user: Optional[FakeUser] = None
        self.error: Optional[Exception] = None
        self.calls: int = 0

    def get_user(self, jwt: Optional[str] = None) -> Optional[FakeUserResponse]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        if self.user is None:
            return None
        return FakeUserResponse(user=self.user)


class FakeQuery:
    """One request being built; runs against the owning client on execute()."""

    def __init__(self, client: FakeSupabaseClient, table: str) -> None:
        self._client = client
        self._table = table
        self._operation: Optional[str] = None
        self._payload: Union[Row, list[Row], None] = None
        self._filters: list[tuple[str, str, object]] = []
        self._order: Optional[tuple[str, bool]] = None
        self._on_conflict: Optional[str] = None

    # -- operations --

    def select(self, *columns: str, count: Optional[str] = None) -> FakeQuery:
        self._operation = "select"
        return self

    def insert(self, payload: Union[Row, list[Row]]) -> FakeQuery:
        self._operation = "insert"
        self._payload = payload
        return self

    def upsert(
        self, payload: Union[Row, list[Row]], on_conflict: str = ""
    ) -> FakeQuery:
        self._operation = "upsert"
        self._payload = payload
        self._on_conflict = on_conflict
        return self

    def update(self, payload: Row) -> FakeQuery:
        self._operation = "update"
        self._payload = payload
        return self

    def delete(self) -> FakeQuery:
        self._operation = "delete"
        return self

    # -- filters / modifiers --

    def eq(self, column: str, value: object) -> FakeQuery:
        self._filters.append(("eq", column, value))
        return self

    def gte(self, column: str, value: object) -> FakeQuery:
        self._filters.append(("gte", column, value))
        return self

    def lte(self, column: str, value: object) -> FakeQuery:
        self._filters.append(("lte", column, value))
        return self

    def order(self, column: str, desc: bool = False) -> FakeQuery:
        self._order = (column, desc)
        return self

    # -- execution --

    def execute(self) -> FakeResponse:
        assert self._operation is not None, "no operation chosen"
        call = ExecutedCall(
            table=self._table,
            operation=self._operation,
            payload=self._payload,
            filters=list(self._filters),
            order=self._order,
            on_conflict=self._on_conflict,
        )
        self._client.calls.append(call)
        self._client.raise_if_scheduled(call)
        handler = getattr(self, f"_run_{self._operation}")
        return FakeResponse(data=handler())

    def _matches(self, row: Row) -> bool:
        for op, column, value in self._filters:
            current = row.get(column)
            if op == "eq" and current != value:
                return False
            if op == "gte" and (current is None or current < value):
                return False
            if op == "lte" and (current is None or current > value):
                return False
        return True

    def _rows(self) -> list[Row]:
        return self._client.tables.setdefault(self._table, [])

    def _as_list(self) -> list[Row]:
        payload = self._payload
        return list(payload) if isinstance(payload, list) else [payload]

    def _run_select(self) -> list[Row]:
        rows = [dict(r) for r in self._rows() if self._matches(r)]
        if self._order is not None:
            column, desc = self._order
            # NULLs sort first when descending, as in Postgres
            rows.sort(
                key=lambda r: (r.get(column) is None, r.get(column) or ""),
                reverse=desc,
            )
        return rows

    def _run_insert(self) -> list[Row]:
        created = []
        for row in self._as_list():
            stored = dict(row)
            stored.setdefault("id", self._client.next_id(self._table))
            self._rows().append(stored)
            created.append(dict(stored))
        return created

    def _run_upsert(self) -> list[Row]:
        keys = [k for k in (self._on_conflict or "id").split(",") if k]
        result = []
        for row in self._as_list():
            existing = next(
                (r for r in self._rows() if all(r.get(k) == row.get(k) for k in keys)),
                None,
            )
            if existing is None:
                existing = dict(row)
                existing.setdefault("id", self._client.next_id(self._table))
                self._rows().append(existing)
            else:
                existing.update(row)
            result.append(dict(existing))
        return result

    def _run_update(self) -> list[Row]:
        updated = []
        for row in self._rows():
            if self._matches(row):
                row.update(self._payload)
                updated.append(dict(row))
        return updated

    def _run_delete(self) -> list[Row]:
        kept, removed = [], []
        for row in self._rows():
            (removed if self._matches(row) else kept).append(row)
        self._client.tables[self._table] = kept
        return [dict(r) for r in removed]


@dataclass
class ScheduledFailure:
    table: str
    operation: str
    error: Exception
    remaining: int = 1


class FakeSupabaseClient:
    """Duck-typed replacement for ``supabase.Client``."""

    def __init__(self) -> None:
        self.tables: dict[str, list[Row]] = {}
        self.calls: list[ExecutedCall] = []
        self.auth = FakeAuth()
        self._failures: list[ScheduledFailure] = []
        self._ids = itertools.count(1)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    # -- test helpers --

    def next_id(self, table: str) -> str:
        return f"{table}-{next(self._ids)}"

    def seed(self, table: str, *rows: Row) -> None:
        for row in rows:
            stored = dict(row)
            stored.setdefault("id", self.next_id(table))
            self.tables.setdefault(table, []).append(stored)

    def rows(self, table: str) -> list[Row]:
        return [dict(r) for r in self.tables.get(table, [])]

    def fail(
        self,
        table: str,
        operation: str,
        error: Optional[Exception] = None,
        times: int = 1,
    ) -> None:
        """Make the next *times* matching requests raise *error*."""
        self._failures.append(
            ScheduledFailure(table, operation, error or api_error(), times)
        )

    def raise_if_scheduled(self, call: ExecutedCall) -> None:
        for failure in self._failures:
            if (
                failure.remaining > 0
                and failure.table == call.table
                and failure.operation == call.operation
            ):
                failure.remaining -= 1
                raise failure.error

    def calls_to(self, table: str, operation: Optional[str] = None) -> list[ExecutedCall]:
        return [
            c for c in self.calls
            if c.table == table and (operation is None or c.operation == operation)
        ]

    @property
    def mutations(self) -> list[ExecutedCall]:
        return [c for c in self.calls if c.is_mutation]


def api_error(
    message: str = "duplicate key value violates unique constraint",
    code: str = "23505",
) -> APIError:
    return APIError({
        "message": message,
        "code": code,
        "details": "Key (id)=(1) already exists.",
        "hint": None,
    })
