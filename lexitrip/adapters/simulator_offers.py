from .ports import OfferGateway, OfferQuery


class SimulatorOfferGateway(OfferGateway):
    """
    In-memory fake for testing and local runs. No network, no credentials.

    Test helpers:
        inject_offer()  — register an offer payload for an origin/destination/date
        fail_with       — set to an exception to make the next searches raise
        queries         — list of OfferQuery objects received
    """

    def __init__(self):
        self._offers: dict[tuple[str, str, str], list[dict]] = {}
        self.queries: list[OfferQuery] = []
        self.fail_with: Exception | None = None

    def inject_offer(self, origin: str, destination: str, departure_date: str, offer: dict) -> None:
        self._offers.setdefault((origin, destination, departure_date), []).append(offer)

    def search_offers(self, query: OfferQuery) -> list[dict]:
        self.queries.append(query)
        if self.fail_with is not None:
            raise self.fail_with
        offers = self._offers.get((query.origin, query.destination, query.departure_date), [])
        return list(offers[: query.max_results])
