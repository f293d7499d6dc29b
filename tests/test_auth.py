"""
Authentication tests for DentSync.
"""

import sys
from pathlib import Path
from types import SimpleNamespace

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest


class TestBindAuth:
    """Session changes folded into the store."""

    def test_loading_until_first_report(self, store, auth_provider):
        from dentsync.auth import bind_auth

        bind_auth(store, auth_provider)

        assert store.state.is_auth_loading is True
        assert store.state.is_authenticated is False

    def test_user_report_signs_in(self, store, auth_provider):
        from dentsync.auth import bind_auth
        from dentsync.models import User

        bind_auth(store, auth_provider)
        auth_provider.emit(User(uid="u1", email="dr@clinic.in"))

        assert store.state.is_authenticated is True
        assert store.state.is_auth_loading is False
        assert store.state.user.email == "dr@clinic.in"

    def test_none_report_signs_out(self, store, auth_provider):
        from dentsync.auth import bind_auth
        from dentsync.models import User

        bind_auth(store, auth_provider)
        auth_provider.emit(User(uid="u1"))
        auth_provider.emit(None)

        assert store.state.is_authenticated is False
        assert store.state.is_auth_loading is False
        assert store.state.user is None
        # Clinic data is untouched by the session
        assert store.state.get_patient("p1") is not None

    def test_first_report_without_session_ends_loading(self, store, auth_provider):
        from dentsync.auth import bind_auth

        bind_auth(store, auth_provider)
        auth_provider.emit(None)

        assert store.state.is_auth_loading is False
        assert store.state.is_authenticated is False

    def test_unsubscribe(self, store, auth_provider):
        from dentsync.auth import bind_auth
        from dentsync.models import User

        unsubscribe = bind_auth(store, auth_provider)
        unsubscribe()
        auth_provider.emit(User(uid="u1"))

        assert store.state.is_authenticated is False

    def test_sign_in_failure_leaves_data_alone(self, store, auth_provider):
        from dentsync.auth import AuthError, bind_auth

        bind_auth(store, auth_provider)
        before = store.state

        with pytest.raises(AuthError) as exc_info:
            auth_provider.sign_in("dr@clinic.in", "wrong")

        assert exc_info.value.message == "Invalid email or password"
        assert store.state is before

    def test_sign_in_and_out_through_provider(self, store, auth_provider):
        from dentsync.auth import bind_auth
        from dentsync.models import User

        auth_provider.accounts[("dr@clinic.in", "secret")] = User(uid="u1", email="dr@clinic.in")
        bind_auth(store, auth_provider)

        user = auth_provider.sign_in("dr@clinic.in", "secret")
        assert store.state.user == user

        auth_provider.sign_out()
        assert store.state.user is None


class TestSupabaseProvider:
    """Mapping the Supabase client onto the provider interface."""

    def _raw_user(self, **metadata):
        return SimpleNamespace(id="abc-123", email="dr@clinic.in", user_metadata=metadata)

    def test_user_from_supabase(self):
        from dentsync.auth import user_from_supabase

        user = user_from_supabase(self._raw_user(full_name="Dr. Sharma", avatar_url="https://x/y.png"))

        assert user.uid == "abc-123"
        assert user.display_name == "Dr. Sharma"
        assert user.photo_url == "https://x/y.png"
        assert user.label == "Dr. Sharma"

    def test_user_without_metadata(self):
        from dentsync.auth import user_from_supabase

        user = user_from_supabase(SimpleNamespace(id="abc-123", email="dr@clinic.in", user_metadata=None))

        assert user.display_name is None
        assert user.label == "dr@clinic.in"
        assert user_from_supabase(None) is None

    def test_subscribe_maps_sessions(self):
        from dentsync.auth import SupabaseAuthProvider

        callbacks = []
        unsubscribed = []
        auth = SimpleNamespace(
            on_auth_state_change=lambda cb: callbacks.append(cb) or SimpleNamespace(
                unsubscribe=lambda: unsubscribed.append(True)
            ),
        )
        provider = SupabaseAuthProvider(SimpleNamespace(auth=auth))

        seen = []
        unsubscribe = provider.subscribe(seen.append)
        callbacks[0]("SIGNED_IN", SimpleNamespace(user=self._raw_user(name="Dr. Gupta")))
        callbacks[0]("SIGNED_OUT", None)
        unsubscribe()

        assert seen[0].display_name == "Dr. Gupta"
        assert seen[1] is None
        assert unsubscribed == [True]

    def test_sign_in_error_becomes_auth_error(self):
        from dentsync.auth import AuthError, SupabaseAuthProvider

        def reject(credentials):
            raise RuntimeError("Invalid login credentials")

        provider = SupabaseAuthProvider(SimpleNamespace(auth=SimpleNamespace(sign_in_with_password=reject)))

        with pytest.raises(AuthError, match="Invalid login credentials"):
            provider.sign_in("dr@clinic.in", "wrong")

    def test_sign_in_returns_user(self):
        from dentsync.auth import SupabaseAuthProvider

        response = SimpleNamespace(user=self._raw_user())
        provider = SupabaseAuthProvider(SimpleNamespace(
            auth=SimpleNamespace(sign_in_with_password=lambda credentials: response),
        ))

        assert provider.sign_in("dr@clinic.in", "secret").uid == "abc-123"

    def test_missing_configuration(self, monkeypatch):
        from dentsync.auth import SupabaseAuthProvider

        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)

        with pytest.raises(ValueError, match="SUPABASE_URL"):
            SupabaseAuthProvider.from_config()
