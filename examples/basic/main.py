#!/usr/bin/env python3
"""
jwtmanager walkthrough

Issues a token for a known user, verifies it from an Authorization header,
revokes it, and shows that the revoked token is refused afterwards.
"""

import asyncio
import logging

from jwtmanager import create_manager

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

USERS = {
    "alice@example.com": {"id": "user-1", "role": "admin"},
}


async def find_subject(email: str):
    user = USERS.get(email)
    if user is None:
        return None
    return user["id"], {"role": user["role"]}


async def main():
    manager = create_manager(
        find_subject,
        secret_or_public_key="demo-secret-key-that-is-long-enough",
        issuer="demo",
        expire_time="15 min",
        properties=["role"],
    )
    manager.on_error.add(lambda error, claims: print(f"✗ {type(error).__name__}: {error}"))

    print("\n=== Generate ===")
    token = await manager.generate("alice@example.com")
    print(f"✓ Token: {token[:20]}...")
    print(f"  Unknown user gets: {await manager.generate('mallory@example.com')}")

    print("\n=== Verify ===")
    claims = await manager.verify_header(f"Bearer {token}")
    print(f"✓ Subject {claims['sub']} role={claims['role']} expires={claims['exp']}")

    print("\n=== Invalidate ===")
    print(f"✓ Revoked: {await manager.invalidate(token)}")
    print(f"  Verify after revoke: {await manager.verify(token)}")


if __name__ == "__main__":
    asyncio.run(main())
