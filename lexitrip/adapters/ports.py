from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class OfferQuery:
    """A flight-offer search as received from the caller."""

    origin: str            # IATA code, e.g. "PAR"
    destination: str       # IATA code, e.g. "NYC"
    departure_date: str    # ISO date YYYY-MM-DD
    adults: int = 1
    max_results: int = 5


class OfferGateway(ABC):
    """
    Port: how we look up priced flight offers.

    The route layer depends ONLY on this interface.  The hold lifecycle
    never calls it: offers are opaque payloads passed back to the caller,
    who later quotes an offer id and price when placing a hold.
    """

    @abstractmethod
    def search_offers(self, query: OfferQuery) -> list[dict]:
        """Return priced offers for the query (raw provider payloads)."""
        ...
