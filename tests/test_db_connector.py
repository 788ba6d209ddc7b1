"""
Unit Tests for the Supabase Handler
===================================
Auth wrapping and table payloads, using a mock supabase client.
"""

import pytest
from datetime import date
from types import SimpleNamespace
from unittest.mock import Mock, patch

from db_connector import (
    PREDICTIONS_TABLE,
    PROFILES_TABLE,
    AuthError,
    SupabaseHandler,
    get_db_handler,
)


@pytest.fixture
def client():
    client = Mock()
    client.auth.get_session.return_value = SimpleNamespace(
        user=SimpleNamespace(id="user-1", email="owner@store.com")
    )
    return client


@pytest.fixture
def handler(settings, client):
    return SupabaseHandler(settings, client=client)


class TestAuth:
    """Test suite for auth calls."""

    def test_sign_in(self, handler, client):
        client.auth.sign_in_with_password.return_value = SimpleNamespace(
            user=SimpleNamespace(id="user-1", email="owner@store.com")
        )

        user = handler.sign_in("owner@store.com", "secret123")

        assert user.id == "user-1"
        client.auth.sign_in_with_password.assert_called_once_with(
            {"email": "owner@store.com", "password": "secret123"}
        )

    def test_sign_in_error_wrapped(self, handler, client):
        client.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

        with pytest.raises(AuthError, match="Invalid login credentials"):
            handler.sign_in("owner@store.com", "wrong")

    def test_sign_up_without_user_raises(self, handler, client):
        client.auth.sign_up.return_value = SimpleNamespace(user=None)

        with pytest.raises(AuthError):
            handler.sign_up("owner@store.com", "secret123")

    def test_current_user_none_without_session(self, handler, client):
        client.auth.get_session.return_value = None
        assert handler.get_current_user() is None

    def test_current_user(self, handler):
        user = handler.get_current_user()
        assert user.id == "user-1"
        assert user.email == "owner@store.com"

    def test_session_tokens(self, handler, client):
        client.auth.get_session.return_value = SimpleNamespace(
            user=SimpleNamespace(id="user-1"), access_token="access", refresh_token="refresh"
        )
        assert handler.get_session_tokens() == ("access", "refresh")

    def test_session_tokens_none_without_session(self, handler, client):
        client.auth.get_session.return_value = None
        assert handler.get_session_tokens() is None

    def test_restore_session(self, handler, client):
        client.auth.set_session.return_value = SimpleNamespace(
            user=SimpleNamespace(id="user-1", email="owner@store.com")
        )

        user = handler.restore_session("access", "refresh")

        client.auth.set_session.assert_called_once_with("access", "refresh")
        assert user.id == "user-1"
        assert user.email == "owner@store.com"

    def test_restore_session_error_wrapped(self, handler, client):
        client.auth.set_session.side_effect = Exception("Invalid Refresh Token")

        with pytest.raises(AuthError, match="Invalid Refresh Token"):
            handler.restore_session("access", "stale")


class TestBusinessProfiles:
    """Test suite for the business_profiles table."""

    def test_upsert_payload(self, handler, client, sample_profile):
        table = client.table.return_value
        table.upsert.return_value.execute.return_value = SimpleNamespace(data=[{"id": "profile-123"}])

        row = handler.upsert_business_profile(sample_profile)

        assert row == {"id": "profile-123"}
        client.table.assert_called_with(PROFILES_TABLE)
        payload = table.upsert.call_args.args[0]
        assert payload["user_id"] == "user-1"
        assert payload["avg_ticket"] == 120.0
        assert payload["niche"] == "Sustainable fashion"
        assert "updated_at" in payload
        assert table.upsert.call_args.kwargs["on_conflict"] == "user_id"

    def test_upsert_requires_user(self, handler, client, sample_profile):
        client.auth.get_session.return_value = None

        with pytest.raises(AuthError):
            handler.upsert_business_profile(sample_profile)

        client.table.assert_not_called()

    def test_get_business_profile_empty(self, handler, client):
        query = client.table.return_value.select.return_value.eq.return_value
        query.order.return_value.limit.return_value.execute.return_value = SimpleNamespace(data=[])

        assert handler.get_business_profile("user-1") is None


class TestDailyPredictions:
    """Test suite for the daily_predictions table."""

    def test_insert_payload(self, handler, client, sample_prediction):
        handler.insert_daily_prediction(sample_prediction, "profile-123")

        client.table.assert_called_with(PREDICTIONS_TABLE)
        payload = client.table.return_value.insert.call_args.args[0]
        assert payload["user_id"] == "user-1"
        assert payload["business_profile_id"] == "profile-123"
        assert payload["prediction_date"] == date.today().isoformat()
        assert payload["predicted_revenue"] == 8400.5
        assert payload["confidence_score"] == 88
        assert payload["factors"][0] == {"name": "Black Friday week", "impact": "High", "positive": True}
        assert "chartData" not in payload

    def test_insert_explicit_date(self, handler, client, sample_prediction):
        handler.insert_daily_prediction(sample_prediction, prediction_date=date(2025, 11, 28))

        payload = client.table.return_value.insert.call_args.args[0]
        assert payload["prediction_date"] == "2025-11-28"
        assert payload["business_profile_id"] is None


class TestGetDbHandler:
    def test_unconfigured_returns_none(self, settings):
        assert get_db_handler(settings) is None

    def test_init_failure_returns_none(self, settings):
        from dataclasses import replace

        configured = replace(settings, supabase_url="https://x.supabase.co", supabase_key="anon")
        with patch("db_connector.create_client", side_effect=Exception("bad url")):
            assert get_db_handler(configured) is None

    def test_configured(self, settings):
        from dataclasses import replace

        configured = replace(settings, supabase_url="https://x.supabase.co", supabase_key="anon")
        with patch("db_connector.create_client", return_value=Mock()) as create:
            handler = get_db_handler(configured)

        assert isinstance(handler, SupabaseHandler)
        create.assert_called_once_with("https://x.supabase.co", "anon")
