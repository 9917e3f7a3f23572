"""Google OAuth 2.0 / OpenID Connect client for login."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable
from urllib.parse import urlencode

import requests
from pydantic import ValidationError

from soul_log.core.auth.schemas import ExternalProfile
from soul_log.core.errors import OAuthProviderError

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"


class GoogleOAuthClient:
    """Builds the consent URL, exchanges codes, and fetches the asserted profile."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scopes: Iterable[str] = ("openid", "profile", "email"),
        timeout: int = 10,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.scopes = list(scopes)
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> "GoogleOAuthClient":
        return cls(
            client_id=config["GOOGLE_CLIENT_ID"],
            client_secret=config["GOOGLE_CLIENT_SECRET"],
            redirect_uri=config["GOOGLE_CALLBACK_URL"],
            scopes=config.get("GOOGLE_SCOPES") or ("openid", "profile", "email"),
            timeout=config.get("OAUTH_HTTP_TIMEOUT_SECONDS", 10),
        )

    def authorization_url(self, state: str) -> str:
        """
        Generate the consent screen URL.

        Args:
            state: Anti-forgery value echoed back on the callback

        Returns:
            URL to redirect the user agent to
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.scopes),
            "prompt": "select_account",  # Always let the user pick an account
            "state": state,
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    def exchange_code(self, code: str) -> Dict[str, Any]:
        """
        Exchange an authorization code for tokens.

        Raises:
            OAuthProviderError: If the token endpoint fails or omits an access token
        """
        payload = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
            "grant_type": "authorization_code",
            "code": code,
        }
        try:
            resp = requests.post(GOOGLE_TOKEN_URL, data=payload, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Token exchange failed: %s", e.__class__.__name__)
            raise OAuthProviderError(f"Failed to exchange code: {e.__class__.__name__}") from e
        if not data.get("access_token"):
            raise OAuthProviderError("Token response did not include an access token")
        return data

    def fetch_profile(self, access_token: str) -> ExternalProfile:
        """Fetch the userinfo document and narrow it to an ExternalProfile."""
        try:
            resp = requests.get(
                GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Userinfo request failed: %s", e.__class__.__name__)
            raise OAuthProviderError(f"Failed to fetch profile: {e.__class__.__name__}") from e
        try:
            return ExternalProfile.from_google_userinfo(data)
        except ValidationError as e:
            raise OAuthProviderError("Provider returned an unusable profile") from e

    def profile_for_code(self, code: str) -> ExternalProfile:
        tokens = self.exchange_code(code)
        return self.fetch_profile(tokens["access_token"])


__all__ = ["GoogleOAuthClient", "GOOGLE_AUTH_URL", "GOOGLE_TOKEN_URL", "GOOGLE_USERINFO_URL"]
