from typing import Optional

from fastapi import APIRouter, Query, Request

from src.checkout import checkout_logger as logger
from src.checkout.services import CheckoutSessionService
from src.utils.response_format import json_response
from src.utils.urls import CHECKOUT_URLS

router = APIRouter(tags=["Checkout Session"])


def _service(request: Request) -> CheckoutSessionService:
    return request.app.state.checkout_service


async def _read_json(request: Request):
    try:
        return await request.json()
    except ValueError:
        logger.warning("Request body is not valid JSON, treating it as empty")
        return {}


@router.get(CHECKOUT_URLS.health)
async def health():
    return {"status": "ok"}


@router.post(CHECKOUT_URLS.create_session)
async def create_checkout_session(request: Request):
    """
    Create a hosted checkout session for the submitted cart.

    Accepts either `{"cart": [{"sku", "qty"}]}` (priced from the catalog)
    or `{"items": [{"nom", "prix", "quantite"}], "livraison", "taxes"}`.
    Returns `{"url": ...}` to redirect the shopper to.
    """
    payload = await _read_json(request)
    status_code, body = await _service(request).create_session(payload)
    return json_response(status_code, body)


@router.get(CHECKOUT_URLS.verify_session)
async def verify_session(request: Request, session_id: Optional[str] = Query(default=None)):
    """Report whether the checkout session was paid, with its correlation token."""
    status_code, body = await _service(request).verify_session(session_id)
    return json_response(status_code, body)
