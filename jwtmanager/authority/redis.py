"""Redis-backed deny-list identifier authority.

Each revoked identifier is stored at ``{prefix}:{jti}`` with a TTL covering
the token's remaining lifetime plus the clock tolerance, so Redis expires the
record once it no longer matters. ``SET NX`` makes invalidation atomic across
processes sharing the same Redis.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

try:  # Optional dependency
    import redis.asyncio as redis  # type: ignore
    from redis.exceptions import RedisError  # type: ignore
except Exception:  # pragma: no cover
    redis = None  # type: ignore
    RedisError = None  # type: ignore

from ..clock import Clock, now
from ..errors import AuthorityError
from .base import AuthorityPolicy, IdentifierAuthority

logger = logging.getLogger(__name__)


class RedisAuthority(IdentifierAuthority):
    policy = AuthorityPolicy.DENY_LIST

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        prefix: str = "jwtmanager:revoked",
        clock_tolerance: int = 10,
        client=None,
        clock: Clock = time.time,
        scan_page_size: int = 500,
    ):
        self.url = url
        self.prefix = prefix.rstrip(":")
        self.clock_tolerance = clock_tolerance
        self.scan_page_size = scan_page_size
        self._client = client
        self._clock = clock

    async def _get_client(self):
        if self._client is None:
            if redis is None:
                raise RuntimeError("redis.asyncio not installed; pip install 'jwtmanager[redis]'")
            self._client = redis.from_url(self.url, decode_responses=True)
        return self._client

    def _key(self, identifier: str) -> str:
        return f"{self.prefix}:{identifier}"

    def _ttl(self, expires_at: Optional[int]) -> Optional[int]:
        if expires_at is None:
            return None
        return expires_at + self.clock_tolerance - now(self._clock)

    async def validate(self, identifier: str) -> bool:
        client = await self._get_client()
        try:
            return await client.exists(self._key(identifier)) == 0
        except RedisError as e:
            raise AuthorityError(f"Redis validate failed: {e}") from e

    async def invalidate(self, identifier: str, expires_at: Optional[int] = None) -> bool:
        ttl = self._ttl(expires_at)
        if ttl is not None and ttl <= 0:
            # Already past retention; the token can no longer be accepted.
            return False
        client = await self._get_client()
        value = "" if expires_at is None else str(expires_at)
        try:
            stored = await client.set(self._key(identifier), value, nx=True, ex=ttl)
        except RedisError as e:
            raise AuthorityError(f"Redis invalidate failed: {e}") from e
        logger.debug("Revoked %s (stored=%s ttl=%s)", identifier, bool(stored), ttl)
        return bool(stored)

    async def clear(self) -> None:
        client = await self._get_client()
        pattern = f"{self.prefix}:*"
        cursor = 0
        deleted = 0
        try:
            while True:
                cursor, keys = await client.scan(cursor=cursor, match=pattern, count=self.scan_page_size)
                if keys:
                    deleted += await client.delete(*keys)
                if cursor == 0:
                    break
        except RedisError as e:
            raise AuthorityError(f"Redis clear failed: {e}") from e
        logger.debug("Cleared %d revocation records under %s", deleted, self.prefix)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


__all__ = ["RedisAuthority"]
