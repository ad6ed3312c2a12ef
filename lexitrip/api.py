"""
HTTP routes for flight search, hold creation and payment confirmation.

Domain outcomes map to distinct status codes; anything unexpected is
logged with its traceback and collapsed to a generic 500.
"""

import logging
import re

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from lexitrip.adapters.ports import OfferGateway, OfferQuery
from lexitrip.domain.errors import (
    HoldError,
    HoldExpiredError,
    InvalidHoldStateError,
    ValidationError,
)
from lexitrip.holds import HoldManager

log = logging.getLogger(__name__)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_STATUS_BY_ERROR = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    HoldExpiredError: status.HTTP_410_GONE,
    InvalidHoldStateError: status.HTTP_409_CONFLICT,
}

router = APIRouter(prefix="/api")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _hold_error(exc: HoldError) -> JSONResponse:
    return _error(_STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST), str(exc))


def _internal(exc: Exception, action: str) -> JSONResponse:
    log.error("%s failed: %s", action, exc, exc_info=True)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal")


async def _json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("request body must be a JSON object")
    if not isinstance(body, dict):
        raise ValidationError("request body must be a JSON object")
    return body


@router.get("/flights")
def search_flights(
    request: Request,
    origin: str | None = None,
    destination: str | None = None,
    date: str | None = None,
):
    """Look up priced offers. Runs in the threadpool: the gateway is blocking."""
    if not origin or not destination or not date:
        return _error(status.HTTP_400_BAD_REQUEST, "origin, destination, and date are required")
    if not _DATE_RE.match(date):
        return _error(status.HTTP_400_BAD_REQUEST, "date must be YYYY-MM-DD")

    offers: OfferGateway = request.app.state.offers
    try:
        return offers.search_offers(OfferQuery(origin=origin, destination=destination, departure_date=date))
    except Exception as exc:
        log.error("Offer search %s→%s on %s failed: %s", origin, destination, date, exc, exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "offer lookup error")


@router.post("/hold")
async def create_hold(request: Request):
    manager: HoldManager = request.app.state.holds
    try:
        body = await _json_body(request)
        receipt = await manager.create(
            offer_id=body.get("offerId"),
            user_id=body.get("userId"),
            supplier_price=body.get("supplierPrice"),
        )
    except HoldError as exc:
        return _hold_error(exc)
    except Exception as exc:
        return _internal(exc, "Create hold")
    return {"holdId": receipt.hold_id, "total": receipt.total, "expiresIn": receipt.expires_in}


@router.post("/payment/webhook")
async def confirm_payment(request: Request):
    """Payment succeeded upstream: convert the hold into a booking."""
    manager: HoldManager = request.app.state.holds
    try:
        body = await _json_body(request)
        confirmation = await manager.confirm(
            hold_id=body.get("holdId"),
            payment_reference=body.get("paymentId") or body.get("paymentReference"),
        )
    except HoldError as exc:
        return _hold_error(exc)
    except Exception as exc:
        return _internal(exc, "Confirm hold")
    return {"success": confirmation.success, "bookingRef": confirmation.booking_ref}


def create_app(manager: HoldManager, offers: OfferGateway, lifespan=None) -> FastAPI:
    app = FastAPI(title="LexiTrip", lifespan=lifespan)
    app.state.holds = manager
    app.state.offers = offers

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "LexiTrip backend running"

    app.include_router(router)
    return app
