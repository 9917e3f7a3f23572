"""Error taxonomy shared by services and HTTP handlers."""

from __future__ import annotations

from typing import Any, Iterable, Optional


class SoulLogError(Exception):
    """Base exception for Soul Log operations."""

    pass


class ConfigurationError(SoulLogError):
    """Raised at startup when required settings are absent."""

    def __init__(self, message: str, missing: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.missing = list(missing or [])


class DependencyUnavailable(SoulLogError):
    """The identity/session/entry store is unreachable or misconfigured.

    The message is safe to show to clients; the underlying driver error is
    chained as ``__cause__`` and only logged server-side.
    """

    def __init__(self, message: str = "The data store is temporarily unavailable."):
        super().__init__(message)
        self.message = message


class ValidationFailure(SoulLogError):
    """Input rejected before any store call."""

    def __init__(self, message: str = "validation_error", details: Optional[list[dict[str, Any]]] = None):
        super().__init__(message)
        self.details = details or []


class OAuthProviderError(SoulLogError):
    """Raised when the external identity provider cannot be reached or rejects us."""

    pass


class OAuthCallbackError(SoulLogError):
    """Raised when an OAuth callback cannot be completed."""

    pass
