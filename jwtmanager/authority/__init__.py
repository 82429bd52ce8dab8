"""
Identifier authorities for jwtmanager.

An authority decides whether a token identifier is still trusted. The
in-memory authority is the default; the Redis authority shares revocations
between processes.
"""

from .base import AuthorityPolicy, IdentifierAuthority
from .memory import MemoryAuthority
from .redis import RedisAuthority


def create_authority(kind: str = "memory", **kwargs) -> IdentifierAuthority:
    """
    Factory function to create an identifier authority.

    Args:
        kind: ``"memory"`` or ``"redis"``
        **kwargs: Passed to the authority constructor

    Returns:
        Configured authority
    """
    if kind == "memory":
        return MemoryAuthority(**kwargs)
    if kind == "redis":
        return RedisAuthority(**kwargs)
    raise ValueError(f"Unknown authority kind: {kind}")


__all__ = [
    "AuthorityPolicy",
    "IdentifierAuthority",
    "MemoryAuthority",
    "RedisAuthority",
    "create_authority",
]
