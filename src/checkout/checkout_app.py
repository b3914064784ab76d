from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config import CHECKOUT_SERVICE_HOST, CHECKOUT_SERVICE_PORT, Settings
from src.checkout import checkout_logger
from src.checkout.api import session_router
from src.checkout.cors import CorsGateMiddleware, CorsPolicy
from src.checkout.gateway import PaymentGateway, StripeGateway
from src.checkout.services import CheckoutSessionService
from src.utils.response_format import error_response
from src.utils.urls import CHECKOUT_URLS

ROUTE_METHODS = {
    CHECKOUT_URLS.create_session: "POST,OPTIONS",
    CHECKOUT_URLS.verify_session: "GET,OPTIONS",
}


@asynccontextmanager
async def lifespan(_: FastAPI):
    checkout_logger.info("Checkout Session Service starting")
    yield
    checkout_logger.info("Checkout Session Service shutting down")


async def http_exception_handler(_request, exc: StarletteHTTPException):
    message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


def create_app(gateway: Optional[PaymentGateway] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the checkout app.

    Args:
        gateway: Payment gateway exposing `create_checkout_session` and
            `retrieve_checkout_session`. Defaults to a `StripeGateway` for the
            configured secret key.
        settings: Deployment configuration. Defaults to `Settings.from_env()`.
    """
    settings = settings or Settings.from_env()
    gateway = gateway or StripeGateway(settings.stripe_secret_key)

    app = FastAPI(
        title="Checkout Session Service",
        description="Creates Stripe Checkout sessions for a cart and verifies their payment status",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.checkout_service = CheckoutSessionService(gateway=gateway, settings=settings)

    app.add_middleware(
        CorsGateMiddleware,
        policy=CorsPolicy(
            allowed_origin=settings.allowed_origin,
            allowed_suffix=settings.allowed_origin_suffix,
        ),
        route_methods=ROUTE_METHODS,
    )
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.include_router(session_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    checkout_logger.info(f"Starting Checkout Session Service on {CHECKOUT_SERVICE_HOST}:{CHECKOUT_SERVICE_PORT}")
    uvicorn.run(app, host=CHECKOUT_SERVICE_HOST, port=CHECKOUT_SERVICE_PORT)
