"""
Adapter contract for OfferGateway.

Any implementation (Amadeus HTTP client, in-memory simulator, ...) must
pass these tests.
"""

from abc import ABC, abstractmethod

from lexitrip.adapters.ports import OfferGateway, OfferQuery


class OfferGatewayContract(ABC):

    @abstractmethod
    def create_gateway(self) -> OfferGateway:
        """Return a fresh instance of the adapter under test."""
        ...

    @abstractmethod
    def get_test_query(self) -> OfferQuery:
        """Return a query that the adapter can answer."""
        ...

    def test_search_returns_list_of_dicts(self):
        gw = self.create_gateway()
        offers = gw.search_offers(self.get_test_query())
        assert isinstance(offers, list)
        assert all(isinstance(o, dict) for o in offers)

    def test_search_respects_max_results(self):
        gw = self.create_gateway()
        query = self.get_test_query()
        query.max_results = 1
        assert len(gw.search_offers(query)) <= 1
