"""
jwtmanager

Issue, verify and revoke JSON Web Tokens for a host application.
"""

__version__ = "0.1.0"

from .authority import (
    AuthorityPolicy,
    IdentifierAuthority,
    MemoryAuthority,
    RedisAuthority,
    create_authority,
)
from .config import JWTManagerConfig
from .errors import (
    AuthorityError,
    ConfigurationError,
    EmptyTokenError,
    InvalidTokenError,
    SubjectError,
    TokenError,
    TokenSigningError,
    TokenVerificationError,
    UntrustedTokenError,
)
from .manager import JWTManager, create_manager
from .signal import Signal
from .types import RESERVED_CLAIMS, ClaimSet, ResolvedSubject

__all__ = [
    "JWTManager",
    "JWTManagerConfig",
    "create_manager",
    "Signal",
    "ClaimSet",
    "ResolvedSubject",
    "RESERVED_CLAIMS",
    # Authorities
    "AuthorityPolicy",
    "IdentifierAuthority",
    "MemoryAuthority",
    "RedisAuthority",
    "create_authority",
    # Errors
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
