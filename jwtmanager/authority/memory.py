"""
In-memory deny-list identifier authority.

Suitable for tests and single-process deployments. Records live in a plain
dict guarded by a lock; state is lost when the process exits.
"""

import logging
import threading
import time
from typing import Dict, Optional

from ..clock import Clock, now, retention_elapsed
from .base import AuthorityPolicy, IdentifierAuthority

logger = logging.getLogger(__name__)


class MemoryAuthority(IdentifierAuthority):
    """Deny-list authority keeping revoked identifiers until their token expires."""

    policy = AuthorityPolicy.DENY_LIST

    def __init__(self, clock_tolerance: int = 10, clock: Clock = time.time):
        self.clock_tolerance = clock_tolerance
        self._clock = clock
        self._lock = threading.Lock()
        # identifier -> token exp (None keeps the record forever)
        self._revoked: Dict[str, Optional[int]] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._revoked)

    def _elapsed(self, identifier: str) -> bool:
        return retention_elapsed(self._revoked[identifier], self.clock_tolerance, now(self._clock))

    async def validate(self, identifier: str) -> bool:
        with self._lock:
            if identifier not in self._revoked:
                return True
            if self._elapsed(identifier):
                # Token has expired on its own; the record is no longer needed.
                del self._revoked[identifier]
                return True
            return False

    async def invalidate(self, identifier: str, expires_at: Optional[int] = None) -> bool:
        with self._lock:
            if retention_elapsed(expires_at, self.clock_tolerance, now(self._clock)):
                # The token can no longer be accepted; nothing to remember.
                self._revoked.pop(identifier, None)
                return False
            if identifier in self._revoked and not self._elapsed(identifier):
                return False
            self._revoked[identifier] = expires_at
            return True

    async def clear(self) -> None:
        with self._lock:
            self._revoked.clear()

    async def cleanup(self) -> int:
        """Evict every record whose retention window has passed.

        Returns:
            Number of records removed.
        """
        with self._lock:
            current = now(self._clock)
            stale = [
                key for key, exp in self._revoked.items()
                if retention_elapsed(exp, self.clock_tolerance, current)
            ]
            for key in stale:
                del self._revoked[key]
        if stale:
            logger.info(f"Cleaned up {len(stale)} expired revocation records")
        return len(stale)


__all__ = ["MemoryAuthority"]
