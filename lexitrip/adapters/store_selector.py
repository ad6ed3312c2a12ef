"""
Store selection by connection health.

ConnectionHealth is the advisory liveness value for the Redis backend.
It is owned by whoever builds the stores and injected where needed, so
there is no process-wide flag.  Reads may be stale; callers treat it as
a fast-path hint.
"""

import logging

from lexitrip.domain.hold_store import KeyValueStore, StoreUnavailableError

log = logging.getLogger(__name__)


class ConnectionHealth:

    def __init__(self, up: bool = False):
        self._up = up

    @property
    def is_up(self) -> bool:
        return self._up

    def mark_up(self) -> None:
        if not self._up:
            log.info("Redis connection is up — routing to networked store")
        self._up = True

    def mark_down(self, reason: object = None) -> None:
        if self._up:
            log.warning("Redis connection lost (%s) — routing to in-process store", reason)
        self._up = False


class SelectingKeyValueStore(KeyValueStore):
    """
    Adapter: one logical store over a networked and a fallback backend.

    Every call goes to one backend, picked from health at call time.  If the
    networked backend cannot be reached, health is marked down and that same
    call runs on the fallback, so an outage never reaches the caller.
    Nothing is migrated when health flips: a value written to one backend
    reads as absent from the other.
    """

    def __init__(
        self,
        networked: KeyValueStore | None,
        fallback: KeyValueStore,
        health: ConnectionHealth,
    ):
        self._networked = networked
        self._fallback = fallback
        self._health = health

    async def _run(self, operation):
        if self._networked is None or not self._health.is_up:
            return await operation(self._fallback)
        try:
            return await operation(self._networked)
        except StoreUnavailableError as exc:
            self._health.mark_down(exc)
            return await operation(self._fallback)

    async def get(self, key: str) -> str | None:
        return await self._run(lambda store: store.get(key))

    async def set(self, key: str, value: str, ttl_seconds: float) -> None:
        await self._run(lambda store: store.set(key, value, ttl_seconds))

    async def delete(self, key: str) -> None:
        await self._run(lambda store: store.delete(key))

    async def delete_if_equals(self, key: str, expected: str) -> bool:
        return await self._run(lambda store: store.delete_if_equals(key, expected))
