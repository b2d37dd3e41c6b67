"""
Per-entity mutual exclusion.

Each listing and each auction is its own unit of mutual exclusion: the
read-check-write sequence of a status transition or bid placement runs
while holding that entity's lock, so concurrent callers are serialized
and no update is lost.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog

logger = structlog.get_logger()


class KeyedLocks:
    """
    One ``asyncio.Lock`` per key, created on first use and dropped once
    no caller holds or waits for it.

    Usage:
        locks = KeyedLocks("auction")
        async with locks.hold(auction_id):
            ...  # read, validate, write
    """

    def __init__(self, name: str):
        self.name = name
        self._locks: dict[str, asyncio.Lock] = {}
        # Callers currently holding or waiting for each key
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncGenerator[None, None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        elif lock.locked():
            logger.debug("lock_contended", scope=self.name, key=key)
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def is_held(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
