"""
Error types for jwtmanager.

Every failure inside a lifecycle operation is routed to the manager's
``on_error`` signal instead of being raised. The classes below let listeners
tell the failure families apart.
"""

from typing import Any, Dict, Optional


class TokenError(Exception):
    """Base class for all jwtmanager errors."""


class ConfigurationError(TokenError, ValueError):
    """Raised when a manager or authority is constructed with invalid values."""


class EmptyTokenError(TokenError, ValueError):
    """Raised by ``verify`` when called without a token."""

    def __init__(self, message: str = "jwt must be provided"):
        super().__init__(message)


class SubjectError(TokenError, ValueError):
    """The subject resolver returned something that cannot become a claim set."""


class TokenSigningError(TokenError):
    """The codec failed to sign a claim set."""


class InvalidTokenError(TokenError):
    """
    Signature-class error.

    Covers both codec rejections (bad signature, expired, wrong audience...)
    and domain-level trust rejections raised by the manager itself.
    """

    def __init__(self, reason: str, claims: Optional[Dict[str, Any]] = None):
        super().__init__(reason)
        self.reason = reason
        self.claims = claims


class TokenVerificationError(InvalidTokenError):
    """The codec rejected the token structurally, cryptographically or on timing."""


class UntrustedTokenError(InvalidTokenError):
    """
    The token is well formed and correctly signed, but the identifier
    authority or the custom validator does not trust it.

    Only this error makes the manager invalidate the offending token.
    """


class AuthorityError(TokenError):
    """The identifier authority's backing store failed."""


__all__ = [
    "TokenError",
    "ConfigurationError",
    "EmptyTokenError",
    "SubjectError",
    "TokenSigningError",
    "InvalidTokenError",
    "TokenVerificationError",
    "UntrustedTokenError",
    "AuthorityError",
]
