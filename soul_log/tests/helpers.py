"""Shared test doubles and request helpers."""

from datetime import datetime, timedelta
from unittest.mock import patch
from urllib.parse import parse_qs, urlsplit

from soul_log.core.auth.google_oauth import GoogleOAuthClient
from soul_log.core.auth.schemas import ExternalProfile
from soul_log.core.auth.session_models import StoredSession
from soul_log.core.errors import DependencyUnavailable
from soul_log.core.users.schemas import UserProfile


def google_profile(external_id="google-123", email="ada@example.com", name="Ada Lovelace", photo=None):
    return ExternalProfile(
        id=external_id,
        emails=[email] if email else None,
        display_name=name,
        photos=[photo] if photo else None,
    )


LANDING_URL = "http://localhost:5173/journal"


def query_param(url, name):
    return parse_qs(urlsplit(url).query)[name][0]


def login(client, profile=None, return_to=None):
    """Drive the OAuth round trip with the provider exchange patched out."""
    start = client.get("/auth/google", query_string={"returnTo": return_to} if return_to else None)
    state = query_param(start.headers["Location"], "state")
    with patch.object(GoogleOAuthClient, "profile_for_code", return_value=profile or google_profile()):
        return client.get("/auth/google/callback", query_string={"code": "test-code", "state": state})


class FakeClock:
    def __init__(self, now=None):
        self.now = now or datetime(2026, 10, 19, 12, 0, 0)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class FakeIdentityStore:
    def __init__(self):
        self.users = {}
        self.fail = False

    def get(self, user_id):
        if self.fail:
            raise DependencyUnavailable()
        return self.users.get(user_id)

    def upsert_by_external_id(self, profile):
        if self.fail:
            raise DependencyUnavailable()
        existing = next((u for u in self.users.values() if u.external_provider_id == profile.id), None)
        user = UserProfile(
            id=existing.id if existing else f"user-{len(self.users) + 1}",
            external_provider_id=profile.id,
            email=profile.primary_email,
            name=profile.display_name,
            avatar_url=profile.primary_photo,
        )
        self.users[user.id] = user
        return user


class FakeSessionStore:
    def __init__(self):
        self.rows = {}
        self.fail = False

    def _check(self):
        if self.fail:
            raise DependencyUnavailable()

    def create(self, token, data, expiry):
        self._check()
        self.rows[token] = StoredSession(token=token, data=dict(data), expiry=expiry)
        return self.rows[token]

    def get(self, token):
        self._check()
        row = self.rows.get(token)
        return StoredSession(token=row.token, data=dict(row.data), expiry=row.expiry) if row else None

    def save(self, token, data, expiry):
        self._check()
        self.rows[token] = StoredSession(token=token, data=dict(data), expiry=expiry)

    def touch(self, token, expiry):
        self._check()
        if token in self.rows:
            self.rows[token].expiry = expiry

    def destroy(self, token):
        self._check()
        return self.rows.pop(token, None) is not None


class FakeOAuthClient:
    def __init__(self, profile=None):
        self.profile = profile or google_profile()
        self.error = None
        self.codes = []

    def authorization_url(self, state):
        return f"https://accounts.example.test/auth?state={state}&prompt=select_account"

    def profile_for_code(self, code):
        self.codes.append(code)
        if self.error:
            raise self.error
        return self.profile
