"""
Hold lifecycle: create a pending hold, confirm it into a booking.

Flow:
  1. create(): validate, price, write `hold:{id}` with TTL
  --- caller pays ---
  2. confirm(): read, check HELD, mark BOOKED, compare-and-delete

The store holds the only copy of a pending hold.  Confirmation removes it,
so a second confirm on the same id reads nothing and reports expiry.
"""

import logging
import secrets
import time
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable

from lexitrip.domain.errors import HoldExpiredError, InvalidHoldStateError, ValidationError
from lexitrip.domain.hold import (
    Hold,
    HoldStatus,
    compute_markup,
    compute_total,
    hold_key,
    to_decimal,
)
from lexitrip.domain.hold_store import KeyValueStore

log = logging.getLogger(__name__)

DEFAULT_HOLD_TTL = 600
DEFAULT_MARKUP_RATE = Decimal("0.15")
BOOKING_REF_PREFIX = "LXT-"


def random_booking_ref() -> str:
    return f"{BOOKING_REF_PREFIX}{secrets.randbelow(900000) + 100000}"


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class HoldManagerConfig:
    store: KeyValueStore
    hold_ttl: int = DEFAULT_HOLD_TTL
    markup_rate: Decimal = DEFAULT_MARKUP_RATE
    booking_ref_factory: Callable[[], str] = random_booking_ref
    clock_ms: Callable[[], int] = _now_ms


@dataclass
class HoldReceipt:
    hold_id: str
    total: int
    expires_in: int


@dataclass
class BookingConfirmation:
    booking_ref: str
    success: bool = True


class HoldManager:
    """
    Owns Hold construction and the single HELD → BOOKED transition.

    The store only enforces record lifetime; every state decision is made here.
    """

    def __init__(self, config: HoldManagerConfig):
        self._cfg = config

    async def create(self, offer_id, user_id, supplier_price) -> HoldReceipt:
        """Price and store a new pending hold. Exactly one store write."""
        if not offer_id or not isinstance(offer_id, str):
            raise ValidationError("offerId & supplierPrice required (number)")
        price = to_decimal(supplier_price)
        if price is None or price < 0:
            raise ValidationError("offerId & supplierPrice required (number)")

        markup = compute_markup(price, self._cfg.markup_rate)
        hold = Hold(
            hold_id=str(uuid.uuid4()),
            user_id=user_id,
            offer_id=offer_id,
            supplier_price=price,
            markup=markup,
            total=compute_total(price, markup),
            status=HoldStatus.HELD,
            created_at=self._cfg.clock_ms(),
        )

        await self._cfg.store.set(hold_key(hold.hold_id), hold.to_json(), self._cfg.hold_ttl)
        log.info(
            "hold=%s offer=%s created price=%s markup=%s total=%d ttl=%ds",
            hold.hold_id, offer_id, price, markup, hold.total, self._cfg.hold_ttl,
        )
        return HoldReceipt(hold_id=hold.hold_id, total=hold.total, expires_in=self._cfg.hold_ttl)

    async def confirm(self, hold_id, payment_reference) -> BookingConfirmation:
        """Finalize a HELD hold after payment succeeded."""
        if not hold_id or not payment_reference:
            raise ValidationError("holdId & paymentId required")

        key = hold_key(str(hold_id))
        raw = await self._cfg.store.get(key)
        if raw is None:
            log.info("hold=%s confirm: not found or expired", hold_id)
            raise HoldExpiredError("hold expired")

        hold = Hold.from_json(raw)
        if hold.status != HoldStatus.HELD:
            log.warning("hold=%s confirm: status=%s, leaving record untouched", hold_id, hold.status.value)
            raise InvalidHoldStateError("invalid hold state")

        hold.booking_ref = self._cfg.booking_ref_factory()
        hold.status = HoldStatus.BOOKED

        # Only the caller whose delete succeeds owns the booking
        if not await self._cfg.store.delete_if_equals(key, raw):
            log.warning("hold=%s confirm: consumed by a concurrent confirmation", hold_id)
            raise HoldExpiredError("hold expired")

        log.info("hold=%s booked ref=%s payment=%s", hold_id, hold.booking_ref, payment_reference)
        return BookingConfirmation(booking_ref=hold.booking_ref)
