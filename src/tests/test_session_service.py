from __future__ import annotations

from dataclasses import replace

import pytest

from src.checkout.exceptions import PaymentGatewayError
from src.checkout.services import CheckoutSessionService

CATALOG_PAYLOAD = {"cart": [{"sku": "livraison_locale", "qty": 2}]}


def _service(gateway, settings, token: str = "tok-fixed") -> CheckoutSessionService:
    return CheckoutSessionService(gateway=gateway, settings=settings, token_factory=lambda: token)


@pytest.mark.asyncio
async def test_create_session_returns_provider_url(gateway, settings) -> None:
    status, body = await _service(gateway, settings).create_session(CATALOG_PAYLOAD)

    assert status == 200
    assert body == {"url": "https://checkout.stripe.test/c/pay/cs_test_1"}

    call = gateway.created[0]
    assert call["order_token"] == "tok-fixed"
    assert call["success_url"] == "https://livremagog.vercel.app/success.html?session_id={CHECKOUT_SESSION_ID}"
    assert call["cancel_url"] == "https://livremagog.vercel.app/cancel.html"
    assert [(line.currency, line.unit_amount, line.quantity) for line in call["line_items"]] == [("cad", 599, 2)]


@pytest.mark.asyncio
async def test_create_session_strips_trailing_slash_from_frontend_url(gateway, settings) -> None:
    service = _service(gateway, replace(settings, frontend_url="https://shop.example.com/"))

    await service.create_session(CATALOG_PAYLOAD)

    assert gateway.created[0]["cancel_url"] == "https://shop.example.com/cancel.html"


@pytest.mark.asyncio
async def test_create_session_rejects_invalid_cart(gateway, settings) -> None:
    status, body = await _service(gateway, settings).create_session({"cart": [{"sku": "nope", "qty": 1}]})

    assert status == 400
    assert body == {"error": "Unknown sku"}
    assert gateway.created == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"frontend_url": ""}, "Missing FRONTEND_URL"),
        ({"stripe_secret_key": ""}, "Missing STRIPE_SECRET_KEY"),
    ],
)
async def test_create_session_missing_configuration(gateway, settings, overrides, message) -> None:
    service = _service(gateway, replace(settings, **overrides))

    status, body = await service.create_session(CATALOG_PAYLOAD)

    assert status == 500
    assert body == {"error": message}
    assert gateway.created == []


@pytest.mark.asyncio
async def test_create_session_hides_provider_error_by_default(gateway, settings) -> None:
    gateway.create_error = PaymentGatewayError("Invalid API Key provided: sk_test_***123")

    status, body = await _service(gateway, settings).create_session(CATALOG_PAYLOAD)

    assert status == 500
    assert body == {"error": "Stripe error"}


@pytest.mark.asyncio
async def test_create_session_exposes_provider_error_when_enabled(gateway, settings) -> None:
    gateway.create_error = PaymentGatewayError("Amount must be at least $0.50 cad")
    service = _service(gateway, replace(settings, expose_provider_errors=True))

    status, body = await service.create_session(CATALOG_PAYLOAD)

    assert status == 500
    assert body == {"error": "Amount must be at least $0.50 cad"}


@pytest.mark.asyncio
async def test_create_session_unexpected_error(gateway, settings) -> None:
    gateway.create_error = RuntimeError("boom")

    status, body = await _service(gateway, settings).create_session(CATALOG_PAYLOAD)

    assert status == 500
    assert body == {"error": "Internal server error"}


@pytest.mark.asyncio
async def test_default_order_tokens_are_unique(gateway, settings) -> None:
    service = CheckoutSessionService(gateway=gateway, settings=settings)

    await service.create_session(CATALOG_PAYLOAD)
    await service.create_session(CATALOG_PAYLOAD)

    first, second = (call["order_token"] for call in gateway.created)
    assert first and second and first != second


@pytest.mark.asyncio
@pytest.mark.parametrize("session_id", [None, "", "   "])
async def test_verify_session_requires_id(gateway, settings, session_id) -> None:
    status, body = await _service(gateway, settings).verify_session(session_id)

    assert status == 400
    assert body == {"error": "Missing session_id"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("payment_status", "paid"),
    [("paid", True), ("unpaid", False), ("no_payment_required", False), ("PAID", False)],
)
async def test_verify_session_paid_only_for_paid_status(gateway, settings, payment_status, paid) -> None:
    gateway.add_session("cs_1", payment_status, "tok-1")

    status, body = await _service(gateway, settings).verify_session("cs_1")

    assert status == 200
    assert body == {"paid": paid, "payment_status": payment_status, "orderToken": "tok-1"}


@pytest.mark.asyncio
async def test_verify_session_without_token_returns_null(gateway, settings) -> None:
    gateway.add_session("cs_legacy", "paid")

    status, body = await _service(gateway, settings).verify_session("cs_legacy")

    assert status == 200
    assert body["orderToken"] is None


@pytest.mark.asyncio
async def test_order_token_round_trips_through_verification(gateway, settings) -> None:
    service = _service(gateway, settings, token="tok-roundtrip")

    await service.create_session(CATALOG_PAYLOAD)
    status, body = await service.verify_session("cs_test_1")

    assert status == 200
    assert body["orderToken"] == "tok-roundtrip"
    assert body["paid"] is False


@pytest.mark.asyncio
async def test_verify_session_failure_is_generic(gateway, settings) -> None:
    service = _service(gateway, replace(settings, expose_provider_errors=True))

    status, body = await service.verify_session("cs_missing")

    assert status == 400
    assert body == {"error": "Unable to verify session"}


@pytest.mark.asyncio
async def test_verify_session_missing_secret_key(gateway, settings) -> None:
    service = _service(gateway, replace(settings, stripe_secret_key=""))

    status, body = await service.verify_session("cs_1")

    assert status == 500
    assert body == {"error": "Missing STRIPE_SECRET_KEY"}
