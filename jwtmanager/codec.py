"""
PyJWT boundary: sign, verify and decode compact JSON Web Tokens.

The manager never inspects signatures or timestamps itself; signatures,
issuer and audience are checked by PyJWT, timing against the caller's clock.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import jwt

from .clock import DurationLike, expires_at, now as clock_now
from .errors import TokenSigningError, TokenVerificationError

logger = logging.getLogger(__name__)

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")
RSA_ALGORITHMS = ("RS256", "RS384", "RS512")
ECDSA_ALGORITHMS = ("ES256", "ES384", "ES512")
SUPPORTED_ALGORITHMS = HMAC_ALGORITHMS + RSA_ALGORITHMS + ECDSA_ALGORITHMS + ("none",)

REQUIRED_CLAIMS = ["jti", "sub", "iss", "aud", "exp", "iat"]

KeyMaterial = Union[str, bytes, None]


def _audience_list(audience: Union[str, Sequence[str]]) -> List[str]:
    if isinstance(audience, str):
        return [audience]
    return list(audience)


def sign(
    payload: Dict[str, Any],
    key: KeyMaterial,
    *,
    algorithm: str,
    audience: Union[str, Sequence[str]],
    expires_in: DurationLike,
    issuer: str,
    jwtid: str,
    subject: str,
    not_before: Optional[DurationLike] = None,
    now: Optional[int] = None,
) -> str:
    """Sign ``payload`` together with the registered claims.

    ``expires_in`` and ``not_before`` are relative to ``now`` (defaults to
    the current time).

    Raises:
        TokenSigningError: if PyJWT rejects the key or the payload.
    """
    issued_at = clock_now() if now is None else now
    claims = dict(payload)
    claims.update(
        sub=subject,
        iss=issuer,
        aud=_audience_list(audience),
        iat=issued_at,
        exp=expires_at(issued_at, expires_in),
        jti=jwtid,
    )
    if not_before is not None:
        claims["nbf"] = expires_at(issued_at, not_before)
    try:
        token = jwt.encode(claims, None if algorithm == "none" else key, algorithm=algorithm)
    except (jwt.PyJWTError, ValueError, TypeError) as e:
        raise TokenSigningError(f"JWT signing failed: {e}") from e
    if isinstance(token, bytes):
        token = token.decode("utf-8")
    return token


def _check_timing(claims: Dict[str, Any], current: int, leeway: int) -> None:
    for name in ("exp", "iat", "nbf"):
        value = claims.get(name)
        if name in claims and (isinstance(value, bool) or not isinstance(value, (int, float))):
            raise jwt.DecodeError(f"{name} claim must be a number")
    if claims["exp"] <= current - leeway:
        raise jwt.ExpiredSignatureError("Signature has expired")
    if claims["iat"] > current + leeway:
        raise jwt.ImmatureSignatureError("The token is not yet valid (iat)")
    if "nbf" in claims and claims["nbf"] > current + leeway:
        raise jwt.ImmatureSignatureError("The token is not yet valid (nbf)")


def verify(
    token: str,
    key: KeyMaterial,
    *,
    algorithm: str,
    audience: Union[str, Sequence[str]],
    issuer: str,
    clock_tolerance: int = 0,
    now: Optional[int] = None,
) -> Dict[str, Any]:
    """Verify signature, issuer, audience and timing, then return the claims.

    Timing claims are checked against ``now`` (defaults to the current time),
    so tokens signed with an injected clock verify against the same clock.

    Raises:
        TokenVerificationError: on any structural, cryptographic or timing
            violation.
    """
    current = clock_now() if now is None else now
    options = {
        "verify_exp": False,
        "verify_nbf": False,
        "verify_iat": False,
        "verify_aud": True,
        "verify_iss": True,
        "require": REQUIRED_CLAIMS,
    }
    try:
        if algorithm == "none":
            # Unsigned tokens: pin the header algorithm and still check claims.
            header = jwt.get_unverified_header(token)
            if header.get("alg") != "none":
                raise jwt.InvalidAlgorithmError("The specified alg value is not allowed")
            claims = jwt.decode(
                token,
                options=dict(options, verify_signature=False),
                audience=_audience_list(audience),
                issuer=issuer,
            )
        else:
            claims = jwt.decode(
                token,
                key,
                algorithms=[algorithm],
                audience=_audience_list(audience),
                issuer=issuer,
                options=options,
            )
        _check_timing(claims, current, clock_tolerance)
    except jwt.PyJWTError as e:
        logger.debug(f"JWT verification rejected token: {e}")
        raise TokenVerificationError(str(e)) from e
    return claims


def decode(token: str) -> Dict[str, Any]:
    """Decode the payload without verifying anything.

    Raises:
        TokenVerificationError: if the token is not a structurally valid JWT.
    """
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as e:
        raise TokenVerificationError(str(e)) from e


__all__ = [
    "HMAC_ALGORITHMS",
    "RSA_ALGORITHMS",
    "ECDSA_ALGORITHMS",
    "SUPPORTED_ALGORITHMS",
    "REQUIRED_CLAIMS",
    "sign",
    "verify",
    "decode",
]
