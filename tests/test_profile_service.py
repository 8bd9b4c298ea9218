# tests/test_profile_service.py
"""Unit tests for profile bootstrap and settings."""

import pytest
from app.exceptions import AuthenticationRequiredError
from app.services.gateway import DataGateway
from app.services.identity_provider import Identity
from app.services.profile_service import ensure_profile, get_profile, register_profile_bootstrap, update_profile


class TestEnsureProfile:
    def test_creates_empty_profile_on_first_sight(self, gateway):
        profile = ensure_profile(gateway, "new-user-1", email="new@example.com")

        assert profile.id == "new-user-1"
        assert profile.full_name == ""
        assert profile.avatar_url == ""
        assert profile.role == "customer"
        assert profile.created_at is not None

    def test_sequential_calls_create_one_row(self, gateway):
        ensure_profile(gateway, "new-user-1")
        ensure_profile(gateway, "new-user-1")

        assert len(gateway.select("profiles", {"id": "new-user-1"})) == 1

    def test_existing_profile_returned_unchanged(self, gateway):
        gateway.insert("profiles", {"id": "known-user", "full_name": "Kim Lee"})
        assert ensure_profile(gateway, "known-user", full_name="ignored").full_name == "Kim Lee"

    def test_duplicate_insert_is_benign(self, gateway):
        # Another path (e.g. the webhook) wins the race between our read and our insert
        gateway.insert("profiles", {"id": "raced-user", "full_name": "From webhook"})
        row = gateway.upsert("profiles", {"id": "raced-user", "full_name": ""}, ignore_duplicates=True)

        assert row.full_name == "From webhook"
        assert len(gateway.select("profiles", {"id": "raced-user"})) == 1


class TestProfileBootstrapListener:
    def test_binding_new_identity_creates_profile(self, db):
        gateway = DataGateway(db)
        register_profile_bootstrap(gateway)

        gateway.bind_identity(Identity(id="login-1", email="login@example.com", role="vendor"))

        profile = gateway.select_one("profiles", {"id": "login-1"})
        assert profile.email == "login@example.com"
        assert profile.role == "vendor"

    def test_logout_does_not_touch_profiles(self, db):
        gateway = DataGateway(db, identity=Identity(id="login-1"))
        register_profile_bootstrap(gateway)

        gateway.bind_identity(None)

        assert gateway.select("profiles") == []


class TestProfileSettings:
    def test_get_profile_requires_login(self, gateway):
        with pytest.raises(AuthenticationRequiredError):
            get_profile(gateway, None)

    def test_update_profile(self, gateway, customer):
        profile = update_profile(gateway, customer, {"full_name": "Carol King", "postal_code": "94107",
                                                     "role": "vendor"})

        assert profile.full_name == "Carol King"
        assert profile.postal_code == "94107"
        assert profile.role == "customer"
