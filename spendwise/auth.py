"""
Identity Resolution.

Every storage call is scoped to "the current user".  Where that user
comes from is a pluggable ``IdentityProvider``:

- ``SupabaseIdentityProvider`` asks the Supabase auth API for the user
  attached to the client's session (the usual setup).
- ``SessionManager`` is an in-process holder the application sets after
  its own login flow (also handy as a test double).

Usage::

    from spendwise.auth import SessionManager
    from spendwise.models.user import User

    session = SessionManager()
    session.set_current_user(User(id="abc-123", email="user@example.com"))
    session.get_current_user_id()  # "abc-123"
"""

from __future__ import annotations

import threading
from typing import Optional, Protocol, runtime_checkable

import httpx
from supabase import AuthError

from spendwise.database import DatabaseManager
from spendwise.logger import StructuredLogger
from spendwise.models.user import User


@runtime_checkable
class IdentityProvider(Protocol):
    """Anything that can name the currently authenticated user."""

    def get_current_user_id(self) -> Optional[str]:
        """Return the user's id, or ``None`` when nobody is signed in."""
        ...


class SessionManager:
    """Injectable holder for the current authenticated user.

    Each instance maintains its own session state, eliminating the
    need for module-level globals.
    """

    def __init__(self, user: Optional[User] = None) -> None:
        self._lock: threading.RLock = threading.RLock()
        self._current_user: Optional[User] = user

    def set_current_user(self, user: User) -> None:
        """Record *user* as the authenticated session user."""
        with self._lock:
            self._current_user = user

    def get_current_user(self) -> User:
        """Return the authenticated user.

        Raises:
            RuntimeError: If no user is currently authenticated.
        """
        with self._lock:
            if self._current_user is None:
                raise RuntimeError(
                    "No user is currently authenticated. Login required."
                )
            return self._current_user

    def get_current_user_id(self) -> Optional[str]:
        with self._lock:
            return self._current_user.id if self._current_user else None

    def clear(self) -> None:
        """Remove the current user, ending the session."""
        with self._lock:
            self._current_user = None

    @property
    def is_authenticated(self) -> bool:
        """``True`` when a user is currently logged in."""
        with self._lock:
            return self._current_user is not None


class SupabaseIdentityProvider:
    """Resolves the current user through ``supabase.auth.get_user()``.

    A missing session, an auth API error or a network failure all mean
    "no user"; the cause is logged so the resulting
    ``UNAUTHENTICATED`` errors can be traced.

    Parameters
    ----------
    db:
        Database manager owning the Supabase client.
    logger:
        Structured JSON logger.
    """

    def __init__(self, db: DatabaseManager, logger: StructuredLogger) -> None:
        self._db: DatabaseManager = db
        self._logger: StructuredLogger = logger

    def get_current_user(self) -> Optional[User]:
        try:
            response = self._db.supabase.auth.get_user()
        except RuntimeError as exc:
            self._logger.warning("Cannot resolve current user: %s", exc)
            return None
        except (AuthError, httpx.HTTPError) as exc:
            self._logger.warning("Supabase auth lookup failed: %s", exc)
            return None

        if response is None or response.user is None:
            return None
        return User(id=response.user.id, email=response.user.email)

    def get_current_user_id(self) -> Optional[str]:
        user = self.get_current_user()
        return user.id if user else None
