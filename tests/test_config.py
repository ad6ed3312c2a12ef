from decimal import Decimal

import pytest

from lexitrip.adapters.amadeus_client import AmadeusClient
from lexitrip.adapters.simulator_offers import SimulatorOfferGateway
from lexitrip.config import DEFAULT_REDIS_URL, Config
from lexitrip.service import create_offer_gateway


def test_defaults():
    config = Config.from_env({})
    assert config.redis_url == DEFAULT_REDIS_URL
    assert config.hold_ttl == 600
    assert config.markup_rate == Decimal("0.15")
    assert config.sweep_interval == 30.0
    assert config.offer_gateway == "simulator"
    assert config.port == 3000


def test_overrides():
    config = Config.from_env({
        "REDIS_URL": "redis://cache:6380/1",
        "HOLD_TTL": "120",
        "MARKUP_RATE": "0.2",
        "SWEEP_INTERVAL": "5",
        "PORT": "8080",
    })
    assert config.redis_url == "redis://cache:6380/1"
    assert config.hold_ttl == 120
    assert config.markup_rate == Decimal("0.2")
    assert config.sweep_interval == 5.0
    assert config.port == 8080


def test_empty_redis_url_disables_redis():
    assert Config.from_env({"REDIS_URL": ""}).redis_url == ""


def test_amadeus_selected_when_credentials_present():
    config = Config.from_env({"AMADEUS_CLIENT_ID": "id", "AMADEUS_CLIENT_SECRET": "secret"})
    assert config.offer_gateway == "amadeus"
    assert isinstance(create_offer_gateway(config), AmadeusClient)


def test_simulator_gateway():
    assert isinstance(create_offer_gateway(Config(offer_gateway="simulator")), SimulatorOfferGateway)


def test_amadeus_without_credentials_rejected():
    with pytest.raises(ValueError):
        create_offer_gateway(Config(offer_gateway="amadeus"))


def test_unknown_gateway_rejected():
    with pytest.raises(ValueError):
        create_offer_gateway(Config(offer_gateway="carrier-pigeon"))


@pytest.mark.parametrize(
    "env",
    [{"HOLD_TTL": "ten"}, {"MARKUP_RATE": "abc"}, {"MARKUP_RATE": "-0.1"}, {"PORT": "80.5"}],
)
def test_invalid_numbers_rejected(env):
    with pytest.raises(ValueError):
        Config.from_env(env)


@pytest.mark.parametrize("ttl", ["0", "-30"])
def test_non_positive_hold_ttl_rejected(ttl):
    with pytest.raises(ValueError, match="HOLD_TTL"):
        Config.from_env({"HOLD_TTL": ttl})
