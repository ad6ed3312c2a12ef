"""
Hold — a provisional, time-bounded reservation of a priced offer.

Pricing is pure code: the markup is a fixed percentage of the supplier
price, rounded to cents, and the customer-facing total is rounded up to
a whole currency unit.
"""

import json
import math
from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal, localcontext
from enum import Enum

KEY_PREFIX = "hold:"

_CENTS = Decimal("0.01")


class HoldStatus(str, Enum):
    HELD = "HELD"
    BOOKED = "BOOKED"


def hold_key(hold_id: str) -> str:
    """Storage key for a hold. The prefix is stable for operators inspecting the store."""
    return f"{KEY_PREFIX}{hold_id}"


def _digits(amount: Decimal) -> int:
    return len(amount.as_tuple().digits)


def compute_markup(supplier_price: Decimal, markup_rate: Decimal) -> Decimal:
    with localcontext() as ctx:
        # Exact product, and room for every integer digit plus cents after quantize
        ctx.prec = max(
            ctx.prec,
            _digits(supplier_price) + _digits(markup_rate),
            supplier_price.adjusted() + markup_rate.adjusted() + 4,
        )
        return (supplier_price * markup_rate).quantize(_CENTS, rounding=ROUND_HALF_UP)


def compute_total(supplier_price: Decimal, markup: Decimal) -> int:
    with localcontext() as ctx:
        lowest = min(supplier_price.as_tuple().exponent, markup.as_tuple().exponent, 0)
        ctx.prec = max(ctx.prec, max(supplier_price.adjusted(), markup.adjusted()) + 2 - lowest)
        return int((supplier_price + markup).to_integral_value(rounding=ROUND_CEILING))


def to_decimal(value) -> Decimal | None:
    """Return value as a finite Decimal, or None if it is not a usable number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            return None
        # repr() keeps the shortest round-tripping form: 19.99 stays 19.99
        amount = Decimal(repr(value))
    else:
        return None
    if not amount.is_finite():
        return None
    return amount


@dataclass
class Hold:
    hold_id: str
    offer_id: str
    supplier_price: Decimal
    markup: Decimal
    total: int
    status: HoldStatus
    created_at: int              # epoch milliseconds
    user_id: str | None = None
    booking_ref: str | None = None

    def to_json(self) -> str:
        record = {
            "holdId": self.hold_id,
            "userId": self.user_id,
            "offerId": self.offer_id,
            "supplierPrice": str(self.supplier_price),
            "markup": str(self.markup),
            "total": self.total,
            "status": self.status.value,
            "createdAt": self.created_at,
        }
        if self.booking_ref is not None:
            record["bookingRef"] = self.booking_ref
        return json.dumps(record, separators=(",", ":"))

    @classmethod
    def from_json(cls, raw: str) -> "Hold":
        data = json.loads(raw)
        return cls(
            hold_id=data["holdId"],
            user_id=data.get("userId"),
            offer_id=data["offerId"],
            supplier_price=Decimal(data["supplierPrice"]),
            markup=Decimal(data["markup"]),
            total=int(data["total"]),
            status=HoldStatus(data["status"]),
            created_at=int(data["createdAt"]),
            booking_ref=data.get("bookingRef"),
        )
