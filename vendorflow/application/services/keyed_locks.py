"""Per-key asyncio locks (one per document, one per grant pair).

Serializes read-check-write sequences that must see each other's results,
e.g. two relays racing on the same parent or two grants for the same pair.
Locks are process-local and dropped once nobody holds or awaits them.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager


class KeyedLockRegistry:
    """Hand out one asyncio.Lock per key."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def document(self, document_id: str) -> AbstractAsyncContextManager[None]:
        """Lock scoped to every chain mutation of one document."""
        return self.hold(f"document:{document_id}")

    def grant_pair(
        self, granter_user_id: str, grantee_user_id: str
    ) -> AbstractAsyncContextManager[None]:
        return self.hold(f"grant:{granter_user_id}:{grantee_user_id}")

    def __len__(self) -> int:
        return len(self._locks)
