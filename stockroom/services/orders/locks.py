"""
Per-product asyncio locks.

Serializes stock read-check-write sequences for the same product inside one
process. The row lock taken by ``ProductStore.find_by_id(for_update=True)``
covers writers in other processes.
"""

import asyncio
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from uuid import UUID


class ProductLockRegistry:
    """
    Hands out one ``asyncio.Lock`` per product id.

    Locks are held weakly: a lock disappears once no coroutine holds or
    waits on it.
    """

    def __init__(self) -> None:
        self._locks: "weakref.WeakValueDictionary[UUID, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, product_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(product_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[product_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, product_id: Optional[UUID]) -> AsyncIterator[None]:
        if product_id is None:
            yield
            return

        lock = self._lock_for(product_id)
        async with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)


product_locks = ProductLockRegistry()
