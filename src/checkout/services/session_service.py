from __future__ import annotations

import uuid
from typing import Any, Callable, Mapping, Optional

from starlette.concurrency import run_in_threadpool

from src.checkout import checkout_logger as logger
from src.checkout.cart import build_line_items, parse_cart
from src.checkout.catalog import CATALOG, CatalogEntry
from src.checkout.exceptions import (
    CartValidationError,
    MissingConfigurationError,
    PaymentGatewayError,
)
from src.checkout.gateway import SESSION_ID_PLACEHOLDER, PaymentGateway
from src.config import Settings
from src.utils.response_format import ErrorFormat
from src.utils.urls import FRONTEND_PAGES

GENERIC_PROVIDER_ERROR = "Stripe error"
GENERIC_INTERNAL_ERROR = "Internal server error"
VERIFY_FAILED_ERROR = "Unable to verify session"


def new_order_token() -> str:
    return str(uuid.uuid4())


class CheckoutSessionService:
    """Creates and verifies checkout sessions. Results are `(status_code, body)` pairs."""

    def __init__(
        self,
        gateway: PaymentGateway,
        settings: Settings,
        catalog: Mapping[str, CatalogEntry] = CATALOG,
        token_factory: Callable[[], str] = new_order_token,
    ):
        self._gateway = gateway
        self._settings = settings
        self._catalog = catalog
        self._token_factory = token_factory

    def _require(self, name: str, value: str) -> str:
        if not value:
            raise MissingConfigurationError(name)
        return value

    def _redirect_urls(self) -> tuple[str, str]:
        base = self._require("FRONTEND_URL", self._settings.frontend_url).rstrip("/")
        success_url = f"{base}{FRONTEND_PAGES.success}?session_id={SESSION_ID_PLACEHOLDER}"
        cancel_url = f"{base}{FRONTEND_PAGES.cancel}"
        return success_url, cancel_url

    async def create_session(self, payload: Optional[Mapping[str, Any]]) -> tuple[int, Any]:
        try:
            cart = parse_cart(payload, self._catalog)
            line_items = build_line_items(cart, self._settings.currency, self._catalog)

            success_url, cancel_url = self._redirect_urls()
            self._require("STRIPE_SECRET_KEY", self._settings.stripe_secret_key)

            order_token = self._token_factory()
            logger.debug(f"create_session: kind={cart.kind}, lines={len(line_items)}, orderToken={order_token}")

            session = await run_in_threadpool(
                self._gateway.create_checkout_session,
                line_items,
                success_url,
                cancel_url,
                order_token,
            )
        except CartValidationError as e:
            logger.warning(f"Rejected cart: {e.message}")
            return 400, ErrorFormat(e.message).to_dict()
        except MissingConfigurationError as e:
            logger.error(f"Checkout misconfigured: {e}")
            return 500, ErrorFormat(str(e)).to_dict()
        except PaymentGatewayError as e:
            message = e.message if self._settings.expose_provider_errors else GENERIC_PROVIDER_ERROR
            return 500, ErrorFormat(message).to_dict()
        except Exception as e:
            logger.exception(f"Unexpected error creating checkout session: {e}")
            return 500, ErrorFormat(GENERIC_INTERNAL_ERROR).to_dict()

        logger.info(f"Checkout session {session.id} ready")
        return 200, {"url": session.url}

    async def verify_session(self, session_id: Optional[str]) -> tuple[int, Any]:
        session_id = (session_id or "").strip()
        if not session_id:
            return 400, ErrorFormat("Missing session_id").to_dict()

        try:
            self._require("STRIPE_SECRET_KEY", self._settings.stripe_secret_key)
        except MissingConfigurationError as e:
            logger.error(f"Checkout misconfigured: {e}")
            return 500, ErrorFormat(str(e)).to_dict()

        try:
            status = await run_in_threadpool(self._gateway.retrieve_checkout_session, session_id)
        except Exception as e:
            # Not-found and transient failures look the same to the caller
            logger.error(f"Unable to verify session {session_id}: {e}")
            return 400, ErrorFormat(VERIFY_FAILED_ERROR).to_dict()

        logger.info(f"Verified session {session_id}: payment_status={status.payment_status}")
        return 200, status.to_response()


__all__ = ["CheckoutSessionService", "new_order_token"]
