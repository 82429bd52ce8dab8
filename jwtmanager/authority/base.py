"""Identifier authority interface."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional


class AuthorityPolicy(str, Enum):
    """How presence in the authority's store is interpreted."""
    ALLOW_LIST = "allow_list"  # present and live means trusted
    DENY_LIST = "deny_list"  # present means revoked


class IdentifierAuthority(ABC):
    """
    Tracks which token identifiers (``jti``) are currently trusted.

    Implementations must be safe to call from many in-flight operations and
    must make ``invalidate`` an atomic check-and-set, so that exactly one
    racing caller observes the state change.
    """

    policy: AuthorityPolicy = AuthorityPolicy.DENY_LIST

    async def register(self, identifier: str, expires_at: Optional[int] = None) -> None:
        """
        Record a freshly issued identifier.

        Called by the manager before a generated token is handed out.
        Deny-list authorities have nothing to record; allow-list authorities
        must override this.
        """

    @abstractmethod
    async def validate(self, identifier: str) -> bool:
        """Return True if ``identifier`` is currently trusted."""

    @abstractmethod
    async def invalidate(self, identifier: str, expires_at: Optional[int] = None) -> bool:
        """
        Stop trusting ``identifier``.

        Args:
            identifier: Token identifier
            expires_at: The token's own ``exp``; bounds how long a deny-list
                record has to be retained.

        Returns:
            True if this call changed the identifier from trusted to untrusted.
        """

    @abstractmethod
    async def clear(self) -> None:
        """Drop every record."""


__all__ = ["AuthorityPolicy", "IdentifierAuthority"]
