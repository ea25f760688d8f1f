"""Per-seller critical sections."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class SellerLocks:
    """asyncio.Lock per seller id, dropped once nobody holds or waits on it."""

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, seller_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(seller_id, asyncio.Lock())
        self._users[seller_id] = self._users.get(seller_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[seller_id] -= 1
            if not self._users[seller_id]:
                del self._users[seller_id]
                del self._locks[seller_id]

    def __len__(self) -> int:
        return len(self._locks)
