"""
Wiring: build the stores, the hold manager and the HTTP app from Config.

Kept apart from scripts/run.py so tests can build the same app with
simulators and no Redis.
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from lexitrip.adapters.memory_store import InMemoryKeyValueStore, run_sweeper
from lexitrip.adapters.ports import OfferGateway
from lexitrip.adapters.redis_store import (
    RedisKeyValueStore,
    create_redis_client,
    probe,
    watch_connection,
)
from lexitrip.adapters.store_selector import ConnectionHealth, SelectingKeyValueStore
from lexitrip.api import create_app
from lexitrip.config import Config
from lexitrip.holds import HoldManager, HoldManagerConfig

log = logging.getLogger(__name__)


def create_offer_gateway(config: Config) -> OfferGateway:
    """Factory: pick the offer adapter named by config.offer_gateway."""
    if config.offer_gateway == "amadeus":
        from lexitrip.adapters.amadeus_client import AmadeusClient

        if not config.amadeus_client_id or not config.amadeus_client_secret:
            raise ValueError("AMADEUS_CLIENT_ID and AMADEUS_CLIENT_SECRET are required for the amadeus gateway")
        return AmadeusClient(
            client_id=config.amadeus_client_id,
            client_secret=config.amadeus_client_secret,
            base_url=config.amadeus_base_url,
        )

    if config.offer_gateway == "simulator":
        from lexitrip.adapters.simulator_offers import SimulatorOfferGateway

        return SimulatorOfferGateway()

    raise ValueError(f"Unknown offer gateway: {config.offer_gateway!r}")


def build_app(config: Config, offers: OfferGateway | None = None):
    health = ConnectionHealth()
    fallback = InMemoryKeyValueStore()
    client = create_redis_client(config.redis_url) if config.redis_url else None
    networked = RedisKeyValueStore(client, health) if client is not None else None
    store = SelectingKeyValueStore(networked=networked, fallback=fallback, health=health)

    manager = HoldManager(HoldManagerConfig(
        store=store,
        hold_ttl=config.hold_ttl,
        markup_rate=config.markup_rate,
    ))

    @asynccontextmanager
    async def lifespan(app):
        tasks = [asyncio.create_task(run_sweeper(fallback, config.sweep_interval))]
        if client is not None:
            if await probe(client, health):
                log.info("Connected to Redis at %s", config.redis_url)
            else:
                log.warning("Redis at %s unreachable — starting on the in-process store", config.redis_url)
            tasks.append(asyncio.create_task(watch_connection(client, health, config.redis_health_interval)))
        else:
            log.info("REDIS_URL is empty — using the in-process store only")

        yield

        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if client is not None:
            await client.aclose()
        log.info("Background tasks stopped, connections closed")

    return create_app(manager, offers or create_offer_gateway(config), lifespan=lifespan)
