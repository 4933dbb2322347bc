"""Shared fixtures: a fake Supabase backend, a session, and the adapter."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Keep the package importable when the tests run from a plain checkout.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from spendwise.auth import SessionManager
from spendwise.config import AppConfig, reset_config
from spendwise.database import DatabaseManager
from spendwise.logger import StructuredLogger
from spendwise.models.user import User
from spendwise.storage import StorageAdapter

from tests.fakes import FakeSupabaseClient

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Read settings from a clean environment and keep log files in tmp."""
    monkeypatch.chdir(tmp_path)
    for name in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "STORAGE_TIMEZONE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "logs" / "spendwise.log"))
    reset_config()
    yield
    reset_config()


@pytest.fixture()
def logger(tmp_path) -> StructuredLogger:
    return StructuredLogger(name="spendwise.tests", log_file=str(tmp_path / "test.log"))


@pytest.fixture()
def client() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture()
def db(client, logger) -> DatabaseManager:
    return DatabaseManager(supabase_url="", supabase_key="", logger=logger, client=client)


@pytest.fixture()
def session() -> SessionManager:
    return SessionManager(User(id=USER_ID, email="owner@example.com"))


@pytest.fixture()
def anonymous() -> SessionManager:
    return SessionManager()


@pytest.fixture()
def storage(db, session, logger) -> StorageAdapter:
    return StorageAdapter(db, session, logger)


@pytest.fixture()
def anonymous_storage(db, anonymous, logger) -> StorageAdapter:
    return StorageAdapter(db, anonymous, logger)


@pytest.fixture()
def config() -> AppConfig:
    return AppConfig(SUPABASE_URL="", SUPABASE_ANON_KEY="")
