import time

import requests

from .ports import OfferGateway, OfferQuery

BASE_URL = "https://test.api.amadeus.com"

# Refresh the access token this many seconds before the provider expires it
_TOKEN_MARGIN = 30


class AmadeusClient(OfferGateway):
    """Adapter: Amadeus Self-Service flight offers search over HTTP."""

    def __init__(self, client_id: str, client_secret: str, base_url: str = BASE_URL):
        self._client_id = client_id
        self._client_secret = client_secret
        self._base_url = base_url.rstrip("/")
        self._token: str | None = None
        self._token_expires_at = 0.0
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def search_offers(self, query: OfferQuery) -> list[dict]:
        resp = self.session.get(
            f"{self._base_url}/v2/shopping/flight-offers",
            params={
                "originLocationCode": query.origin,
                "destinationLocationCode": query.destination,
                "departureDate": query.departure_date,
                "adults": query.adults,
                "max": query.max_results,
            },
            headers={"Authorization": f"Bearer {self._access_token()}"},
        )
        resp.raise_for_status()
        return resp.json().get("data", [])

    def _access_token(self) -> str:
        if self._token and time.monotonic() < self._token_expires_at:
            return self._token
        resp = self.session.post(
            f"{self._base_url}/v1/security/oauth2/token",
            data={
                "grant_type": "client_credentials",
                "client_id": self._client_id,
                "client_secret": self._client_secret,
            },
        )
        resp.raise_for_status()
        body = resp.json()
        self._token = body["access_token"]
        self._token_expires_at = time.monotonic() + max(int(body.get("expires_in", 0)) - _TOKEN_MARGIN, 0)
        return self._token
