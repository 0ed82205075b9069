"""Per-market asyncio locks.

Serializes pool-mutating operations (stake, resolve, claim) for one market
inside this process. Cross-process exclusion comes from the row lock taken by
`SELECT ... FOR UPDATE` inside the same transaction.

A market's lock lives only while someone holds or waits for it, so the
registry stays as small as the set of markets currently being mutated.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class MarketLocks:
    def __init__(self) -> None:
        self._locks: dict[int, asyncio.Lock] = {}
        self._users: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def for_market(self, market_id: int) -> AsyncIterator[None]:
        lock = self._locks.setdefault(market_id, asyncio.Lock())
        self._users[market_id] = self._users.get(market_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[market_id] -= 1
            if self._users[market_id] == 0:
                del self._users[market_id]
                del self._locks[market_id]


market_locks = MarketLocks()
