"""
Process configuration, read once from the environment at startup.

Environment variables (all optional):
    REDIS_URL               - Redis address (default: redis://127.0.0.1:6379,
                              empty string: run on the in-process store only)
    HOLD_TTL                - seconds a hold stays confirmable (default: 600)
    MARKUP_RATE             - fraction added to the supplier price (default: 0.15)
    SWEEP_INTERVAL          - seconds between fallback store sweeps (default: 30)
    REDIS_HEALTH_INTERVAL   - seconds between Redis liveness probes (default: 5)
    OFFER_GATEWAY           - "amadeus" or "simulator"
                              (default: amadeus when credentials are set)
    AMADEUS_CLIENT_ID, AMADEUS_CLIENT_SECRET, AMADEUS_BASE_URL
    PORT                    - HTTP port (default: 3000)
    LOG_LEVEL               - logging level name (default: INFO)
"""

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping

from lexitrip.adapters.amadeus_client import BASE_URL as AMADEUS_BASE_URL
from lexitrip.adapters.memory_store import DEFAULT_SWEEP_INTERVAL
from lexitrip.adapters.redis_store import DEFAULT_HEALTH_INTERVAL
from lexitrip.holds import DEFAULT_HOLD_TTL, DEFAULT_MARKUP_RATE

DEFAULT_REDIS_URL = "redis://127.0.0.1:6379"


def _number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except (ValueError, InvalidOperation):
        raise ValueError(f"environment variable {name!r} is not a valid number: {raw!r}")


@dataclass
class Config:
    redis_url: str = DEFAULT_REDIS_URL
    hold_ttl: int = DEFAULT_HOLD_TTL
    markup_rate: Decimal = DEFAULT_MARKUP_RATE
    sweep_interval: float = DEFAULT_SWEEP_INTERVAL
    redis_health_interval: float = DEFAULT_HEALTH_INTERVAL
    offer_gateway: str = "simulator"
    amadeus_client_id: str = ""
    amadeus_client_secret: str = ""
    amadeus_base_url: str = AMADEUS_BASE_URL
    port: int = 3000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Config":
        env = os.environ if env is None else env

        markup_rate = _number(env, "MARKUP_RATE", DEFAULT_MARKUP_RATE, Decimal)
        if not markup_rate.is_finite() or markup_rate < 0:
            raise ValueError(f"MARKUP_RATE must be a non-negative number, got {markup_rate}")

        hold_ttl = _number(env, "HOLD_TTL", DEFAULT_HOLD_TTL, int)
        if hold_ttl <= 0:
            raise ValueError(f"HOLD_TTL must be a positive number of seconds, got {hold_ttl}")

        client_id = env.get("AMADEUS_CLIENT_ID", "")
        client_secret = env.get("AMADEUS_CLIENT_SECRET", "")
        default_gateway = "amadeus" if client_id and client_secret else "simulator"

        return cls(
            redis_url=env.get("REDIS_URL", DEFAULT_REDIS_URL),
            hold_ttl=hold_ttl,
            markup_rate=markup_rate,
            sweep_interval=_number(env, "SWEEP_INTERVAL", DEFAULT_SWEEP_INTERVAL, float),
            redis_health_interval=_number(env, "REDIS_HEALTH_INTERVAL", DEFAULT_HEALTH_INTERVAL, float),
            offer_gateway=env.get("OFFER_GATEWAY", default_gateway) or default_gateway,
            amadeus_client_id=client_id,
            amadeus_client_secret=client_secret,
            amadeus_base_url=env.get("AMADEUS_BASE_URL", AMADEUS_BASE_URL) or AMADEUS_BASE_URL,
            port=_number(env, "PORT", 3000, int),
            log_level=env.get("LOG_LEVEL", "INFO") or "INFO",
        )
