import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional


class SessionLocks:
    """
    One asyncio.Lock per thread id, so turns on the same thread run one at a time.

    A lock is dropped as soon as nobody holds or waits on it. Process-local only.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, thread_id: Optional[str]) -> AsyncIterator[None]:
        if not thread_id:
            yield
            return

        lock = self._locks.setdefault(thread_id, asyncio.Lock())
        self._users[thread_id] = self._users.get(thread_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[thread_id] -= 1
            if self._users[thread_id] == 0:
                del self._users[thread_id]
                del self._locks[thread_id]
