"""
Storage Result Models.

Every write returns a ``StorageResult``: a payload on success or a
``StorageError`` on failure, never both.  Callers check ``ok`` (or
``error``) before trusting ``data``.
"""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

import httpx
from postgrest.exceptions import APIError
from pydantic import BaseModel, ValidationError

from spendwise.models.enums import StorageErrorKind

T = TypeVar("T")

UNAUTHENTICATED_MESSAGE: str = "User not authenticated"


class StorageError(BaseModel):
    """Structured failure passed back to the caller.

    Backend errors keep PostgREST's ``code``, ``details`` and ``hint``
    unchanged so callers can react to constraint violations.
    """

    kind: StorageErrorKind
    message: str
    code: Optional[str] = None
    details: Optional[str] = None
    hint: Optional[str] = None

    @classmethod
    def unauthenticated(cls: type[StorageError]) -> StorageError:
        return cls(kind=StorageErrorKind.UNAUTHENTICATED, message=UNAUTHENTICATED_MESSAGE)

    @classmethod
    def from_exception(cls: type[StorageError], exc: Exception) -> StorageError:
        """Wrap a PostgREST, transport or row validation exception."""
        if isinstance(exc, APIError):
            return cls(
                kind=StorageErrorKind.BACKEND,
                message=exc.message or str(exc),
                code=exc.code,
                details=_as_text(exc.details),
                hint=_as_text(exc.hint),
            )
        if isinstance(exc, httpx.HTTPError):
            return cls(
                kind=StorageErrorKind.BACKEND,
                message=str(exc) or type(exc).__name__,
                code=type(exc).__name__,
            )
        if isinstance(exc, ValidationError):
            return cls(
                kind=StorageErrorKind.BACKEND,
                message=f"Stored {exc.title} row is malformed",
                code="ValidationError",
                details=str(exc),
            )
        return cls(kind=StorageErrorKind.BACKEND, message=str(exc))


class StorageResult(BaseModel, Generic[T]):
    """Discriminated (payload, error) pair returned by storage operations."""

    data: Optional[T] = None
    error: Optional[StorageError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: Optional[T] = None) -> StorageResult[T]:
        return cls(data=data)

    @classmethod
    def failure(cls, error: StorageError) -> StorageResult[T]:
        return cls(error=error)


def _as_text(value: object) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)
