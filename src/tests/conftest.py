"""Pytest plugin to execute asyncio marked tests, plus checkout service fixtures."""

from __future__ import annotations

import asyncio
import inspect
from typing import Optional

import pytest
from httpx import ASGITransport, AsyncClient

from src.checkout.exceptions import PaymentGatewayError
from src.checkout.schemas import CheckoutSessionRef, SessionStatus
from src.config import Settings

TEST_ORIGIN = "https://livremagog.vercel.app"
TEST_SUFFIX = ".vercel.app"


@pytest.hookimpl
def pytest_configure(config: pytest.Config) -> None:  # pragma: no cover - pytest hook
    config.addinivalue_line(
        "markers",
        "asyncio: mark test to run inside an event loop",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> Optional[bool]:  # pragma: no cover - pytest hook
    if "asyncio" not in pyfuncitem.keywords:
        return None

    test_function = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_function):
        return None

    kwargs = {name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames}
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(test_function(**kwargs))
    finally:
        loop.close()
    return True


class FakeGateway:
    """In-memory stand-in for StripeGateway that remembers the sessions it created."""

    def __init__(self) -> None:
        self.created: list[dict] = []
        self.sessions: dict[str, SessionStatus] = {}
        self.create_error: Optional[Exception] = None
        self.retrieve_error: Optional[Exception] = None

    def add_session(self, session_id: str, payment_status: str, order_token: Optional[str] = None) -> None:
        self.sessions[session_id] = SessionStatus(payment_status=payment_status, order_token=order_token)

    def create_checkout_session(self, line_items, success_url, cancel_url, order_token) -> CheckoutSessionRef:
        if self.create_error is not None:
            raise self.create_error
        session_id = f"cs_test_{len(self.created) + 1}"
        self.created.append({
            "line_items": line_items,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "order_token": order_token,
        })
        self.add_session(session_id, "unpaid", order_token)
        return CheckoutSessionRef(id=session_id, url=f"https://checkout.stripe.test/c/pay/{session_id}")

    def retrieve_checkout_session(self, session_id: str) -> SessionStatus:
        if self.retrieve_error is not None:
            raise self.retrieve_error
        if session_id not in self.sessions:
            raise PaymentGatewayError(f"No such checkout.session: '{session_id}'")
        return self.sessions[session_id]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        stripe_secret_key="sk_test_123",
        frontend_url="https://livremagog.vercel.app",
        allowed_origin=TEST_ORIGIN,
        allowed_origin_suffix=TEST_SUFFIX,
        currency="cad",
        expose_provider_errors=False,
    )


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def make_client(gateway: FakeGateway, settings: Settings):
    """Return a factory building an httpx client over a fresh app; settings can be overridden."""
    from src.checkout.checkout_app import create_app

    def _make(app_settings: Optional[Settings] = None) -> AsyncClient:
        app = create_app(gateway=gateway, settings=app_settings or settings)
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")

    return _make
