"""
Backend Connection Layer.

Owns the Supabase (cloud PostgreSQL) client used by every repository.
Data access is performed through the Repository pattern; this module only
manages the *connection* and contains no query logic.

There is no local store: every operation is a round trip to
Supabase and a missing connection surfaces as an error on the call.

Usage (dependency injection at startup)::

    from spendwise.database import DatabaseManager
    from spendwise.logger import StructuredLogger

    db = DatabaseManager(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        logger=StructuredLogger(name="spendwise.database"),
    )
"""

from __future__ import annotations

from typing import Optional

from supabase import Client as SupabaseClient
from supabase import create_client

from spendwise.logger import StructuredLogger


class DatabaseManager:
    """Holds the Supabase client for the lifetime of the process.

    Either builds the client from ``supabase_url`` / ``supabase_key`` or
    adopts a ready-made ``client`` (custom transports, test doubles).
    When neither is usable the manager stays offline and the ``supabase``
    property raises ``RuntimeError``.

    Parameters
    ----------
    supabase_url:
        The Supabase project URL (e.g. ``https://xyz.supabase.co``).
    supabase_key:
        The Supabase anonymous key.
    logger:
        A ``StructuredLogger`` instance for structured JSON log output.
    client:
        Optional pre-built client; takes precedence over the credentials.
    """

    def __init__(
        self,
        supabase_url: str,
        supabase_key: str,
        logger: StructuredLogger,
        client: Optional[SupabaseClient] = None,
    ) -> None:
        self._logger: StructuredLogger = logger
        self._supabase: Optional[SupabaseClient] = client

        if self._supabase is not None:
            self._logger.debug("Using injected Supabase client.")
        elif supabase_url and supabase_key:
            try:
                self._supabase = create_client(supabase_url, supabase_key)
                self._logger.info("Supabase client initialized.")
            except (ValueError, TypeError) as exc:
                self._logger.warning(
                    "Supabase credential format error: %s. Storage is offline.",
                    exc,
                )
            except Exception as exc:
                self._logger.error(
                    "Unexpected Supabase initialization failure: %s. "
                    "Storage is offline.",
                    exc,
                    exc_info=True,
                )
        else:
            self._logger.warning(
                "Supabase credentials not configured; storage is offline."
            )

    @property
    def supabase(self) -> SupabaseClient:
        """Return the initialised Supabase client.

        Raises
        ------
        RuntimeError
            If the client was not initialised.
        """
        if self._supabase is None:
            raise RuntimeError(
                "Supabase client is not initialised. "
                "Set SUPABASE_URL and SUPABASE_ANON_KEY."
            )
        return self._supabase

    @property
    def is_online(self) -> bool:
        """``True`` when the Supabase client is available."""
        return self._supabase is not None
