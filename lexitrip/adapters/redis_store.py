"""
Redis adapter for KeyValueStore.

Connection-level failures flip the injected ConnectionHealth down and are
raised as StoreUnavailableError; any successful command flips it back up.
watch_connection() pings in the background so health recovers without
traffic.
"""

import asyncio
import logging

import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from lexitrip.adapters.store_selector import ConnectionHealth
from lexitrip.domain.hold_store import KeyValueStore, StoreUnavailableError

log = logging.getLogger(__name__)

DEFAULT_HEALTH_INTERVAL = 5.0

_CONNECTION_ERRORS = (RedisConnectionError, RedisTimeoutError, OSError)

# GET-compare-DEL in one server-side step
_DELETE_IF_EQUALS = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
end
return 0
"""


def create_redis_client(url: str) -> redis.Redis:
    return redis.Redis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=2,
        socket_timeout=2,
        health_check_interval=30,
    )


class RedisKeyValueStore(KeyValueStore):

    def __init__(self, client: redis.Redis, health: ConnectionHealth):
        self._client = client
        self._health = health
        self._delete_if_equals = client.register_script(_DELETE_IF_EQUALS)

    async def get(self, key: str) -> str | None:
        return await self._call(self._client.get(key))

    async def set(self, key: str, value: str, ttl_seconds: float) -> None:
        ttl_ms = int(ttl_seconds * 1000)
        if ttl_ms <= 0:
            # Redis rejects a non-positive expiry; an already-expired write is a delete
            await self._call(self._client.delete(key))
            return
        await self._call(self._client.set(key, value, px=ttl_ms))

    async def delete(self, key: str) -> None:
        await self._call(self._client.delete(key))

    async def delete_if_equals(self, key: str, expected: str) -> bool:
        deleted = await self._call(self._delete_if_equals(keys=[key], args=[expected]))
        return bool(deleted)

    async def _call(self, command):
        try:
            result = await command
        except _CONNECTION_ERRORS as exc:
            self._health.mark_down(exc)
            raise StoreUnavailableError(f"redis unreachable: {exc}") from exc
        self._health.mark_up()
        return result


async def probe(client: redis.Redis, health: ConnectionHealth) -> bool:
    """Ping once and record the outcome. Returns the new health."""
    try:
        await client.ping()
    except _CONNECTION_ERRORS as exc:
        health.mark_down(exc)
        return False
    health.mark_up()
    return True


async def watch_connection(
    client: redis.Redis,
    health: ConnectionHealth,
    interval: float = DEFAULT_HEALTH_INTERVAL,
) -> None:
    """Probe Redis every `interval` seconds until cancelled."""
    while True:
        await probe(client, health)
        await asyncio.sleep(interval)
