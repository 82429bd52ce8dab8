"""Manager configuration."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from .authority.base import IdentifierAuthority
from .clock import Clock, DurationLike, to_seconds
from .codec import SUPPORTED_ALGORITHMS
from .errors import ConfigurationError
from .types import RESERVED_CLAIMS, FindSubjectFunction, GenerateIDFunction, VerifySubjectFunction


def default_generate_id() -> str:
    return uuid.uuid4().hex


def _as_bytes(key: Union[str, bytes, None]) -> bytes:
    if key is None:
        return b""
    if isinstance(key, bytes):
        return key
    return key.encode("utf-8")


@dataclass(frozen=True)
class JWTManagerConfig:
    """
    Immutable configuration for :class:`~jwtmanager.manager.JWTManager`.

    Attributes:
        find_subject: Resolver mapping call arguments to a subject and extra claims.
        secret_or_public_key: HMAC secret, or PEM public key for RSA/ECDSA.
        secret_or_private_key: HMAC secret, or PEM private key. Defaults to
            ``secret_or_public_key``.
        algorithm: One of ``SUPPORTED_ALGORITHMS``.
        issuer: ``iss`` claim and the issuer required on verification.
        audience: Audience(s) written into tokens and required by default on
            verification. Defaults to the issuer.
        expire_time: Default token lifetime.
        clock_tolerance: Allowed clock skew in seconds.
        verify_subject: Optional extra check run on every verified claim set.
        generate_id: Produces ``jti`` values.
        properties: Declared application claim names; other resolver extras
            are dropped. ``None`` keeps all of them.
        authority: Identifier authority; the manager uses an in-memory one
            when omitted.
        clock: Source of epoch seconds.
    """
    find_subject: FindSubjectFunction
    secret_or_public_key: Union[str, bytes] = ""
    secret_or_private_key: Union[str, bytes, None] = None
    algorithm: str = "HS256"
    issuer: str = "localhost"
    audience: Union[str, Sequence[str], None] = None
    expire_time: DurationLike = 3600
    clock_tolerance: int = 10
    verify_subject: Optional[VerifySubjectFunction] = None
    generate_id: GenerateIDFunction = default_generate_id
    properties: Optional[Sequence[str]] = None
    authority: Optional[IdentifierAuthority] = None
    clock: Clock = time.time

    def __post_init__(self):
        if not callable(self.find_subject):
            raise ConfigurationError("find_subject must be callable")
        if self.algorithm not in SUPPORTED_ALGORITHMS:
            raise ConfigurationError(f"Unsupported algorithm: {self.algorithm}")
        if not self.issuer:
            raise ConfigurationError("issuer must not be empty")
        if isinstance(self.clock_tolerance, bool) or not isinstance(self.clock_tolerance, int) or self.clock_tolerance < 0:
            raise ConfigurationError("clock_tolerance must be a non-negative number of seconds")
        try:
            to_seconds(self.expire_time)
        except ValueError as e:
            raise ConfigurationError(f"Invalid expire_time: {e}") from e

        audience = self.audience if self.audience is not None else self.issuer
        audience = (audience,) if isinstance(audience, str) else tuple(audience)
        if not audience:
            raise ConfigurationError("audience must not be empty")
        object.__setattr__(self, "audience", audience)

        if self.properties is not None:
            properties = tuple(self.properties)
            reserved = RESERVED_CLAIMS.intersection(properties)
            if reserved:
                raise ConfigurationError(f"Declared properties use reserved claims: {', '.join(sorted(reserved))}")
            object.__setattr__(self, "properties", properties)

        public_key = _as_bytes(self.secret_or_public_key)
        private_key = public_key if self.secret_or_private_key is None else _as_bytes(self.secret_or_private_key)
        object.__setattr__(self, "secret_or_public_key", public_key)
        object.__setattr__(self, "secret_or_private_key", private_key)


__all__ = ["JWTManagerConfig", "default_generate_id"]
