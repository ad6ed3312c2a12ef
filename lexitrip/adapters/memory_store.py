"""
In-process KeyValueStore — the fallback when Redis is unreachable.

Entries live in a dict guarded by a lock, with a heap of expiry instants
so the periodic sweep only touches entries that are actually due.
"""

import asyncio
import heapq
import logging
import threading
import time
from typing import Callable

from lexitrip.domain.hold_store import KeyValueStore

log = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL = 30.0


class InMemoryKeyValueStore(KeyValueStore):
    """
    Adapter: dict of key → (value, expires_at) with a monotonic clock.

    get() checks expiry on every read, so sweeping is memory reclamation
    only.  The lock is never held across an await.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self._expiry_index: list[tuple[float, str]] = []
        self._lock = threading.Lock()

    async def get(self, key: str) -> str | None:
        with self._lock:
            return self._read(key)

    async def set(self, key: str, value: str, ttl_seconds: float) -> None:
        expires_at = self._clock() + ttl_seconds
        with self._lock:
            self._entries[key] = (value, expires_at)
            heapq.heappush(self._expiry_index, (expires_at, key))

    async def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    async def delete_if_equals(self, key: str, expected: str) -> bool:
        with self._lock:
            if self._read(key) != expected:
                return False
            del self._entries[key]
            return True

    def sweep(self) -> int:
        """Evict every entry whose expiry has passed. Returns the number evicted."""
        now = self._clock()
        evicted = 0
        with self._lock:
            while self._expiry_index and self._expiry_index[0][0] <= now:
                expires_at, key = heapq.heappop(self._expiry_index)
                entry = self._entries.get(key)
                # Stale index entry: key was deleted or overwritten with a later expiry
                if entry is None or entry[1] != expires_at:
                    continue
                del self._entries[key]
                evicted += 1
            # Deleted keys leave dead index entries; rebuild when they dominate
            if len(self._expiry_index) > 2 * len(self._entries) + 64:
                self._expiry_index = [(exp, k) for k, (_, exp) in self._entries.items()]
                heapq.heapify(self._expiry_index)
        return evicted

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _read(self, key: str) -> str | None:
        # Caller holds the lock
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value


async def run_sweeper(
    store: InMemoryKeyValueStore,
    interval: float = DEFAULT_SWEEP_INTERVAL,
) -> None:
    """Sweep the fallback store every `interval` seconds until cancelled."""
    log.info("Fallback store sweeper started — interval=%.0fs", interval)
    while True:
        await asyncio.sleep(interval)
        evicted = store.sweep()
        if evicted:
            log.debug("Swept %d expired entr%s", evicted, "y" if evicted == 1 else "ies")
