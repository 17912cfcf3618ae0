"""Per-account mutual exclusion for the loyalty use cases."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict


class AccountLockRegistry:
    """
    Hands out one ``asyncio.Lock`` per customer.

    Guarantees at most one in-flight mutation per account within a single
    event loop. Locks are dropped once nobody holds or waits on them, so
    the registry does not grow with the number of customers seen.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    @asynccontextmanager
    async def acquire(self, customer_id: str) -> AsyncGenerator[None, None]:
        lock = self._locks.get(customer_id)
        if lock is None:
            lock = self._locks[customer_id] = asyncio.Lock()
        self._users[customer_id] = self._users.get(customer_id, 0) + 1

        try:
            async with lock:
                yield
        finally:
            self._users[customer_id] -= 1
            if self._users[customer_id] == 0:
                del self._users[customer_id]
                del self._locks[customer_id]

    def is_locked(self, customer_id: str) -> bool:
        lock = self._locks.get(customer_id)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
