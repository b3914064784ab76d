from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

import stripe

from src.checkout import checkout_logger as logger
from src.checkout.exceptions import PaymentGatewayError
from src.checkout.schemas import CheckoutSessionRef, LineItem, SessionStatus

ORDER_TOKEN_KEY = "orderToken"

# Stripe substitutes the real session id into this placeholder on redirect
SESSION_ID_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


def _metadata_value(stripe_object: Any, key: str) -> Optional[str]:
    metadata = getattr(stripe_object, "metadata", None)
    if not metadata:
        return None
    value = metadata.get(key)
    return str(value) if value else None


@runtime_checkable
class PaymentGateway(Protocol):
    """What the checkout service needs from a payment provider."""

    def create_checkout_session(
        self,
        line_items: List[LineItem],
        success_url: str,
        cancel_url: str,
        order_token: str,
    ) -> CheckoutSessionRef: ...

    def retrieve_checkout_session(self, session_id: str) -> SessionStatus: ...


class StripeGateway:
    """
    Thin wrapper over the Stripe Checkout Session API.

    Built once per app with its own credential and passed to the service,
    so the module-level `stripe.api_key` is never touched.
    """

    def __init__(self, api_key: str, session_api: Any = None):
        self._api_key = api_key
        self._session_api = session_api or stripe.checkout.Session

    def create_checkout_session(
        self,
        line_items: List[LineItem],
        success_url: str,
        cancel_url: str,
        order_token: str,
    ) -> CheckoutSessionRef:
        metadata: Dict[str, str] = {ORDER_TOKEN_KEY: order_token}
        try:
            session = self._session_api.create(
                api_key=self._api_key,
                mode="payment",
                payment_method_types=["card"],
                line_items=[item.to_price_data() for item in line_items],
                success_url=success_url,
                cancel_url=cancel_url,
                metadata=metadata,
                payment_intent_data={"metadata": metadata},
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe session error: {e}")
            raise PaymentGatewayError(e.user_message or str(e), original_exception=e) from e

        logger.info(f"Created checkout session {session.id} (orderToken={order_token})")
        return CheckoutSessionRef(id=session.id, url=session.url)

    def retrieve_checkout_session(self, session_id: str) -> SessionStatus:
        try:
            session = self._session_api.retrieve(session_id, api_key=self._api_key)
        except stripe.StripeError as e:
            logger.error(f"Stripe retrieve error for {session_id}: {e}")
            raise PaymentGatewayError(e.user_message or str(e), original_exception=e) from e

        return SessionStatus(
            payment_status=session.payment_status,
            order_token=_metadata_value(session, ORDER_TOKEN_KEY),
        )


__all__ = ["ORDER_TOKEN_KEY", "PaymentGateway", "SESSION_ID_PLACEHOLDER", "StripeGateway"]
