"""Per-key coordination of concurrent coroutines within one process."""
import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable, Hashable
from contextlib import asynccontextmanager
from typing import Any


class SingleFlight:
    """Coalesce concurrent calls sharing a key.

    The first caller starts ``fn`` as a task owned by the flight; every
    caller, the first included, awaits that task through a shield. A caller
    being cancelled never cancels the work or the other callers. Nothing is
    cached once the flight lands.
    """

    def __init__(self) -> None:
        self._flights: dict[Hashable, asyncio.Task] = {}

    def in_flight(self, key: Hashable) -> bool:
        return key in self._flights

    async def do(self, key: Hashable, fn: Callable[[], Awaitable[Any]]) -> Any:
        flight = self._flights.get(key)
        if flight is None:
            flight = asyncio.ensure_future(fn())
            self._flights[key] = flight
            flight.add_done_callback(lambda done: self._land(key, done))
        return await asyncio.shield(flight)

    def _land(self, key: Hashable, flight: asyncio.Task) -> None:
        if self._flights.get(key) is flight:
            del self._flights[key]
        if not flight.cancelled():
            # mark retrieved so a flight whose callers all left does not warn
            flight.exception()


class KeyedLocks:
    """asyncio.Lock per key, dropped again once nobody holds or waits for it."""

    def __init__(self) -> None:
        self._locks: dict[Hashable, list] = {}  # key -> [lock, users]

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        entry = self._locks.setdefault(key, [asyncio.Lock(), 0])
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


# Serializes read-modify-write of one user row.
user_locks = KeyedLocks()
