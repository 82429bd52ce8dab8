"""
JWT lifecycle manager.

Creates, verifies and invalidates JSON Web Tokens. Which principal a token is
issued to, and which extra claims it carries, is left to the application's
resolver; whether an identifier is still trusted is left to the identifier
authority.
"""

import logging
from typing import Any, Optional, Sequence, Union

from . import codec
from .authority.base import IdentifierAuthority
from .authority.memory import MemoryAuthority
from .clock import DurationLike, now
from .config import JWTManagerConfig
from .errors import EmptyTokenError, TokenVerificationError, UntrustedTokenError
from .signal import Signal
from .types import ClaimSet, resolve_subject, maybe_await

logger = logging.getLogger(__name__)


class JWTManager:
    """
    Issues, verifies and invalidates tokens.

    Lifecycle operations never raise: failures are dispatched on
    :attr:`on_error` together with whatever claims were available, and the
    operation returns ``None`` (or ``False`` for :meth:`invalidate`). The one
    exception is :meth:`verify` called without a token, which raises
    :class:`~jwtmanager.errors.EmptyTokenError`.

    Signals:
        on_generate(claims): a token was issued.
        on_verify(claims): a token passed every check.
        on_invalidate(claims): a token identifier was revoked by this call.
        on_error(error, claims): any failure, including listener failures.
    """

    def __init__(self, config: JWTManagerConfig):
        self.config = config
        self.authority: IdentifierAuthority = config.authority or MemoryAuthority(
            clock_tolerance=config.clock_tolerance, clock=config.clock
        )
        self.on_generate = Signal("on_generate")
        self.on_verify = Signal("on_verify")
        self.on_invalidate = Signal("on_invalidate")
        self.on_error = Signal("on_error")

    @property
    def issuer(self) -> str:
        return self.config.issuer

    @property
    def audience(self) -> Sequence[str]:
        return self.config.audience  # type: ignore[return-value]

    async def generate(
        self,
        *args: Any,
        not_before: Optional[DurationLike] = None,
        expires_in: Optional[DurationLike] = None,
    ) -> Optional[str]:
        """
        Create a new token for whoever the resolver finds for ``args``.

        Args:
            *args: Forwarded to the resolver.
            not_before: Token is not valid until this much time has passed.
            expires_in: Lifetime overriding the configured ``expire_time``.

        Returns:
            The signed token, or None if the resolver found nobody or
            anything failed.
        """
        claims: Optional[ClaimSet] = None
        try:
            result = await maybe_await(self.config.find_subject(*args))
            resolved = resolve_subject(result, self.config.properties)
            if resolved is None:
                logger.debug("Resolver found no subject; no token generated")
                return None

            token = codec.sign(
                resolved.properties,
                self.config.secret_or_private_key,
                algorithm=self.config.algorithm,
                audience=list(self.audience),
                expires_in=self.config.expire_time if expires_in is None else expires_in,
                issuer=self.issuer,
                jwtid=await maybe_await(self.config.generate_id()),
                subject=resolved.subject,
                not_before=not_before,
                now=now(self.config.clock),
            )
            claims = codec.decode(token)
            # The identifier must be tracked before the token leaves the manager.
            await self.authority.register(claims["jti"], claims.get("exp"))
        except Exception as e:
            logger.warning(f"JWT generation failed: {e}")
            await self._dispatch_error(e, claims)
            return None

        logger.debug("Generated token %s for subject %s", claims["jti"], claims["sub"])
        await self._dispatch(self.on_generate, claims)
        return token

    async def verify(
        self,
        token: Optional[str] = None,
        audience: Union[str, Sequence[str], None] = None,
    ) -> Optional[ClaimSet]:
        """
        Verify a token.

        Args:
            token: JSON Web Token to verify
            audience: Audience to check for. Defaults to the configured audience.

        Returns:
            The verified claim set, or None.

        Raises:
            EmptyTokenError: if ``token`` is empty.
        """
        if not token:
            raise EmptyTokenError()

        claims: Optional[ClaimSet] = None
        try:
            claims = codec.verify(
                token,
                self.config.secret_or_public_key,
                algorithm=self.config.algorithm,
                audience=list(self.audience) if audience is None else audience,
                issuer=self.issuer,
                clock_tolerance=self.config.clock_tolerance,
                now=now(self.config.clock),
            )
            if not await self.authority.validate(claims["jti"]):
                raise UntrustedTokenError("invalid identifier", claims)
            if self.config.verify_subject is not None and not await maybe_await(self.config.verify_subject(claims)):
                raise UntrustedTokenError("invalid subject", claims)
        except Exception as e:
            if isinstance(e, TokenVerificationError):
                logger.debug(f"JWT verification failed: {e}")
            else:
                logger.warning(f"JWT verification failed: {e}")
            await self._dispatch_error(e, claims)
            # Codec rejections never reach the authority.
            if isinstance(e, UntrustedTokenError):
                await self.invalidate(claims)
            return None

        await self._dispatch(self.on_verify, claims)
        return claims

    async def verify_header(
        self,
        header: Optional[str] = "",
        audience: Union[str, Sequence[str], None] = None,
    ) -> Optional[ClaimSet]:
        """
        Verify the token carried by an ``Authorization: Bearer <token>`` header value.

        Returns None without verifying anything when the scheme is not
        ``bearer`` or no token follows it.
        """
        parts = (header or "").split(" ")
        if len(parts) != 2 or parts[0].lower() != "bearer":
            return None
        return await self.verify(parts[1], audience)

    async def invalidate(self, jwt: Union[str, ClaimSet, None] = None) -> bool:
        """
        Invalidate a token.

        Args:
            jwt: Token string (decoded without verification) or claim set.

        Returns:
            True if the identifier became invalid because of this call.
        """
        claims = self.decode(jwt) if isinstance(jwt, str) else jwt
        if not claims or not claims.get("jti"):
            return False
        # The authority may throw
        try:
            changed = await self.authority.invalidate(claims["jti"], claims.get("exp"))
        except Exception as e:
            logger.warning(f"JWT invalidation failed: {e}")
            await self._dispatch_error(e, claims)
            return False
        if not changed:
            return False
        logger.info("Invalidated token %s", claims["jti"])
        await self._dispatch(self.on_invalidate, claims)
        return True

    def decode(self, token: Optional[str] = "") -> Optional[ClaimSet]:
        """Decode a token without verifying whether it is valid or safe to use."""
        if not token:
            return None
        try:
            return codec.decode(token)
        except TokenVerificationError as e:
            logger.debug(f"Could not decode token: {e}")
            return None

    async def _dispatch(self, signal: Signal, claims: ClaimSet) -> None:
        for error in await signal.dispatch(claims):
            await self._dispatch_error(error, claims)

    async def _dispatch_error(self, error: Exception, claims: Optional[ClaimSet]) -> None:
        for listener_error in await self.on_error.dispatch(error, claims):
            logger.error("on_error listener failed: %s", listener_error, exc_info=listener_error)


def create_manager(find_subject, **kwargs) -> JWTManager:
    """
    Factory function to create a JWT manager.

    Args:
        find_subject: Resolver callback
        **kwargs: Additional :class:`JWTManagerConfig` options

    Returns:
        Configured manager
    """
    return JWTManager(JWTManagerConfig(find_subject=find_subject, **kwargs))


__all__ = ["JWTManager", "create_manager"]
