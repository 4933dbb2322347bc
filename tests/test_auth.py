from __future__ import annotations

import logging

import httpx
import pytest
from supabase import AuthApiError

from spendwise.auth import IdentityProvider, SessionManager, SupabaseIdentityProvider
from spendwise.database import DatabaseManager
from spendwise.models import Budget, User
from spendwise.storage import StorageAdapter

from tests.fakes import FakeUser


def test_session_manager_holds_current_user():
    session = SessionManager()
    assert not session.is_authenticated
    assert session.get_current_user_id() is None
    with pytest.raises(RuntimeError):
        session.get_current_user()

    session.set_current_user(User(id="abc-123", email="user@example.com"))
    assert session.is_authenticated
    assert session.get_current_user().email == "user@example.com"
    assert session.get_current_user_id() == "abc-123"

    session.clear()
    assert session.get_current_user_id() is None


def test_identity_providers_satisfy_protocol(db, logger):
    assert isinstance(SessionManager(), IdentityProvider)
    assert isinstance(SupabaseIdentityProvider(db, logger), IdentityProvider)


def test_supabase_provider_reads_auth_session(db, client, logger):
    provider = SupabaseIdentityProvider(db, logger)
    client.auth.user = FakeUser(id="uuid-1", email="a@example.com")

    assert provider.get_current_user_id() == "uuid-1"
    assert provider.get_current_user() == User(id="uuid-1", email="a@example.com")


def test_supabase_provider_without_session(db, client, logger):
    provider = SupabaseIdentityProvider(db, logger)

    assert provider.get_current_user_id() is None
    assert client.auth.calls == 1


@pytest.mark.parametrize(
    "error",
    [
        AuthApiError("Invalid JWT", 401, "bad_jwt"),
        httpx.ConnectTimeout("timed out"),
    ],
)
def test_supabase_provider_treats_failures_as_signed_out(db, client, logger, caplog, error):
    provider = SupabaseIdentityProvider(db, logger)
    client.auth.error = error

    with caplog.at_level(logging.WARNING):
        assert provider.get_current_user_id() is None

    assert "auth lookup failed" in caplog.text


def test_supabase_provider_offline(logger, caplog):
    offline = DatabaseManager(supabase_url="", supabase_key="", logger=logger)
    provider = SupabaseIdentityProvider(offline, logger)

    with caplog.at_level(logging.WARNING):
        assert provider.get_current_user_id() is None

    assert "Cannot resolve current user" in caplog.text


def test_writes_with_supabase_identity_are_scoped(db, client, logger):
    storage = StorageAdapter(db, SupabaseIdentityProvider(db, logger), logger)
    client.auth.user = FakeUser(id="uuid-9")

    storage.update_budget(Budget(category="Food", amount=10, month="2024-01"))

    assert client.rows("budgets")[0]["user_id"] == "uuid-9"
