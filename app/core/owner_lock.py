"""Owner-scoped locking for multi-row booking transactions.

Two layers are used together:

- ``OwnerLockRegistry`` serialises coroutines of one worker process that
  touch the same owner's cancelled set.
- ``acquire_owner_xact_lock`` takes a PostgreSQL transaction-level advisory
  lock keyed by the owner, which serialises across worker processes and is
  released automatically on commit or rollback.
"""

import asyncio
import hashlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

# Namespaces the advisory key space so other features can use their own
ADVISORY_LOCK_NAMESPACE = b"bookings:cancelled-set:"


def advisory_lock_key(owner_id: str) -> int:
    """Stable signed 64-bit key for ``pg_advisory_xact_lock``."""
    digest = hashlib.blake2b(ADVISORY_LOCK_NAMESPACE + owner_id.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, byteorder="big", signed=True)


async def acquire_owner_xact_lock(db: AsyncSession, owner_id: str) -> bool:
    """Take the owner's advisory lock for the rest of the current transaction.

    Returns:
        bool: True if a database-level lock was taken, False when the
        backend has no advisory locks (the in-process lock still applies)
    """
    if db.get_bind().dialect.name != "postgresql":
        return False

    await db.execute(
        text("SELECT pg_advisory_xact_lock(:key)"),
        {"key": advisory_lock_key(owner_id)},
    )
    return True


class OwnerLockRegistry:
    """Per-owner asyncio locks, created on demand and dropped when idle."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, owner_id: str) -> AsyncIterator[None]:
        """Hold the owner's lock for the duration of the block."""
        lock = self._locks.get(owner_id)
        if lock is None:
            lock = self._locks[owner_id] = asyncio.Lock()
        self._waiters[owner_id] = self._waiters.get(owner_id, 0) + 1

        try:
            async with lock:
                yield
        finally:
            self._waiters[owner_id] -= 1
            if self._waiters[owner_id] == 0:
                del self._waiters[owner_id]
                del self._locks[owner_id]
