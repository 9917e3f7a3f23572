"""Auth session manager lifecycle tests against in-memory stores."""

from datetime import timedelta

import pytest

from soul_log.core.auth.constants import (
    SESSION_KEY_OAUTH_STATE,
    SESSION_KEY_RETURN_TO,
    SESSION_KEY_USER_ID,
    SESSION_STATE_ANONYMOUS,
    SESSION_STATE_AUTHENTICATED,
    SESSION_STATE_PENDING_CALLBACK,
)
from soul_log.core.auth.session_models import anonymous
from soul_log.core.auth.session_services import AuthSessionManager, hash_token
from soul_log.core.errors import DependencyUnavailable, OAuthCallbackError, OAuthProviderError
from soul_log.tests.helpers import (
    FakeClock,
    FakeIdentityStore,
    FakeOAuthClient,
    FakeSessionStore,
    google_profile,
    query_param,
)

pytestmark = pytest.mark.unit

LANDING = "http://localhost:5173/journal"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def identities():
    return FakeIdentityStore()


@pytest.fixture
def sessions():
    return FakeSessionStore()


@pytest.fixture
def oauth():
    return FakeOAuthClient()


@pytest.fixture
def manager(identities, sessions, oauth, clock):
    return AuthSessionManager(
        identities,
        sessions,
        oauth,
        default_landing_url=LANDING,
        login_url="http://localhost:5173/login",
        allowed_origins=["http://localhost:5173"],
        session_ttl=timedelta(days=7),
        clock=clock,
    )


def _start(manager, return_to=None, current=None):
    redirect = manager.initiate_login(current or anonymous(), return_to)
    pending = manager.resolve_session(redirect.token)
    return redirect, pending


def _sign_in(manager, profile=None, return_to=None):
    redirect, pending = _start(manager, return_to)
    state = query_param(redirect.url, "state")
    if profile is not None:
        manager.oauth_client.profile = profile
    return manager.complete_callback(pending, "code-1", state)


class TestInitiateLogin:
    def test_creates_pending_session_with_state(self, manager, sessions):
        redirect, pending = _start(manager)

        stored = sessions.rows[hash_token(redirect.token)]
        assert stored.data[SESSION_KEY_OAUTH_STATE] == query_param(redirect.url, "state")
        assert "prompt=select_account" in redirect.url
        assert pending.state == SESSION_STATE_PENDING_CALLBACK
        assert not pending.authenticated

    def test_raw_token_is_never_stored(self, manager, sessions):
        redirect, _ = _start(manager)

        assert redirect.token not in sessions.rows
        assert hash_token(redirect.token) in sessions.rows

    def test_reuses_existing_session_token(self, manager, sessions):
        first, pending = _start(manager)
        second = manager.initiate_login(pending)

        assert second.token == first.token
        assert len(sessions.rows) == 1

    def test_logs_the_session_state_login_starts_from(self, manager, caplog):
        caplog.set_level("INFO", logger="soul_log.core.auth.session_services")
        _, pending = _start(manager)
        manager.initiate_login(pending)

        messages = [record.getMessage() for record in caplog.records]
        assert f"Starting Google login from {SESSION_STATE_ANONYMOUS} session" in messages
        assert f"Starting Google login from {SESSION_STATE_PENDING_CALLBACK} session" in messages

    def test_does_not_touch_identity_store(self, manager, identities):
        identities.fail = True
        redirect, _ = _start(manager)
        assert redirect.url

    def test_keeps_relative_return_to(self, manager, sessions):
        redirect, _ = _start(manager, return_to="/journal")
        assert sessions.rows[hash_token(redirect.token)].data[SESSION_KEY_RETURN_TO] == "/journal"

    def test_accepts_allowed_absolute_origin(self, manager, sessions):
        redirect, _ = _start(manager, return_to="http://localhost:5173/soul")
        assert sessions.rows[hash_token(redirect.token)].data[SESSION_KEY_RETURN_TO] == "http://localhost:5173/soul"

    @pytest.mark.parametrize(
        "target",
        ["//evil.example.com/x", "https://evil.example.com/journal", "javascript:alert(1)", "journal", "/\\evil.com"],
    )
    def test_ignores_unsafe_return_to(self, manager, sessions, target):
        redirect, _ = _start(manager, return_to=target)
        assert SESSION_KEY_RETURN_TO not in sessions.rows[hash_token(redirect.token)].data


class TestCallback:
    def test_authenticates_and_lands_on_journal(self, manager):
        result = _sign_in(manager)

        assert result.redirect_to == LANDING
        resolved = manager.resolve_session(result.token)
        assert resolved.authenticated
        assert resolved.state == SESSION_STATE_AUTHENTICATED
        assert resolved.user.email == "ada@example.com"

    def test_same_profile_twice_keeps_one_user_with_latest_fields(self, manager, identities):
        _sign_in(manager, google_profile(email="old@example.com", name="Old Name"))
        _sign_in(manager, google_profile(email="new@example.com", name="New Name", photo="https://img/new.png"))

        assert len(identities.users) == 1
        (user,) = identities.users.values()
        assert user.email == "new@example.com"
        assert user.name == "New Name"
        assert user.avatar_url == "https://img/new.png"

    def test_return_to_is_consumed_once(self, manager):
        first = _sign_in(manager, return_to="/journal")
        assert first.redirect_to == "/journal"

        second = _sign_in(manager)
        assert second.redirect_to == LANDING

    def test_rotates_session_token(self, manager, sessions):
        redirect, pending = _start(manager)
        result = manager.complete_callback(pending, "code-1", query_param(redirect.url, "state"))

        assert result.token != redirect.token
        assert hash_token(redirect.token) not in sessions.rows
        assert sessions.rows[hash_token(result.token)].data[SESSION_KEY_USER_ID] == result.user.id

    def test_state_mismatch_is_rejected(self, manager):
        _, pending = _start(manager)
        with pytest.raises(OAuthCallbackError):
            manager.complete_callback(pending, "code-1", "forged-state")

    def test_callback_without_pending_session_is_rejected(self, manager):
        with pytest.raises(OAuthCallbackError):
            manager.complete_callback(anonymous(), "code-1", "any-state")

    def test_missing_code_is_rejected(self, manager, oauth):
        redirect, pending = _start(manager)
        with pytest.raises(OAuthCallbackError):
            manager.complete_callback(pending, None, query_param(redirect.url, "state"))
        assert oauth.codes == []

    def test_provider_error_param_is_rejected(self, manager):
        redirect, pending = _start(manager)
        with pytest.raises(OAuthCallbackError):
            manager.complete_callback(pending, "code-1", query_param(redirect.url, "state"), error="access_denied")

    def test_provider_failure_becomes_callback_error(self, manager, oauth):
        oauth.error = OAuthProviderError("token endpoint down")
        redirect, pending = _start(manager)
        with pytest.raises(OAuthCallbackError):
            manager.complete_callback(pending, "code-1", query_param(redirect.url, "state"))

    def test_identity_store_failure_issues_no_session(self, manager, identities, sessions):
        redirect, pending = _start(manager)
        identities.fail = True

        with pytest.raises(DependencyUnavailable):
            manager.complete_callback(pending, "code-1", query_param(redirect.url, "state"))
        assert all(SESSION_KEY_USER_ID not in row.data for row in sessions.rows.values())

    def test_degraded_session_raises_dependency_unavailable(self, manager):
        with pytest.raises(DependencyUnavailable):
            manager.complete_callback(anonymous(degraded=True), "code-1", "state")

    def test_login_error_url(self, manager):
        assert manager.login_error_url() == "http://localhost:5173/login?error=google_oauth_failed"


class TestResolveSession:
    def test_no_token_is_anonymous(self, manager):
        resolved = manager.resolve_session(None)
        assert resolved.state == SESSION_STATE_ANONYMOUS
        assert not resolved.degraded

    def test_unknown_token_is_anonymous(self, manager):
        resolved = manager.resolve_session("no-such-token")
        assert not resolved.authenticated
        assert resolved.token is None
        assert not resolved.degraded

    def test_expired_session_is_anonymous_and_removed(self, manager, sessions, clock):
        result = _sign_in(manager)
        clock.advance(days=8)

        resolved = manager.resolve_session(result.token)
        assert not resolved.authenticated
        assert hash_token(result.token) not in sessions.rows

    def test_missing_user_is_anonymous(self, manager, identities):
        result = _sign_in(manager)
        identities.users.clear()

        assert not manager.resolve_session(result.token).authenticated

    def test_session_store_failure_is_degraded_anonymous(self, manager, sessions):
        result = _sign_in(manager)
        sessions.fail = True

        resolved = manager.resolve_session(result.token)
        assert resolved.degraded
        assert not resolved.authenticated
        assert resolved.user is None

    def test_identity_store_failure_is_degraded_anonymous(self, manager, identities):
        result = _sign_in(manager)
        identities.fail = True

        resolved = manager.resolve_session(result.token)
        assert resolved.degraded
        assert not resolved.authenticated

    def test_resolving_slides_expiry_forward(self, manager, sessions, clock):
        result = _sign_in(manager)
        clock.advance(days=6)

        resolved = manager.resolve_session(result.token)
        assert resolved.authenticated
        assert sessions.rows[hash_token(result.token)].expiry == clock.now + timedelta(days=7)

        clock.advance(days=6)
        assert manager.resolve_session(result.token).authenticated

    def test_load_user_for_session(self, manager):
        result = _sign_in(manager)
        assert manager.load_user_for_session(result.token).id == result.user.id
        assert manager.load_user_for_session("bogus") is None

    def test_issue_session_binds_user(self, manager, identities):
        user = identities.upsert_by_external_id(google_profile())
        token = manager.issue_session(user.id, {"theme": "dawn"})

        resolved = manager.resolve_session(token)
        assert resolved.user.id == user.id
        assert resolved.payload == {"theme": "dawn"}


class TestStatusAndLogout:
    def test_status_projection(self, manager):
        result = _sign_in(manager, google_profile(photo="https://img/ada.png"))

        status = manager.get_status(manager.resolve_session(result.token))
        assert status == {
            "authenticated": True,
            "user": {
                "id": result.user.id,
                "email": "ada@example.com",
                "name": "Ada Lovelace",
                "avatarUrl": "https://img/ada.png",
            },
        }

    def test_logout_then_status_is_anonymous(self, manager, sessions):
        result = _sign_in(manager)
        manager.logout(manager.resolve_session(result.token))

        assert hash_token(result.token) not in sessions.rows
        assert manager.get_status(manager.resolve_session(result.token)) == {
            "authenticated": False,
            "user": None,
        }

    def test_logout_is_idempotent(self, manager):
        manager.logout(anonymous())
        result = _sign_in(manager)
        resolved = manager.resolve_session(result.token)
        manager.logout(resolved)
        manager.logout(resolved)

    def test_logout_store_failure_propagates(self, manager, sessions):
        result = _sign_in(manager)
        resolved = manager.resolve_session(result.token)
        sessions.fail = True

        with pytest.raises(DependencyUnavailable):
            manager.logout(resolved)

    def test_degraded_logout_raises_and_keeps_row(self, manager, sessions):
        result = _sign_in(manager)

        with pytest.raises(DependencyUnavailable):
            manager.logout(anonymous(degraded=True))
        assert hash_token(result.token) in sessions.rows
