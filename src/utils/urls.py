"""Centralised URL definitions for service endpoints."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CheckoutURLs:
    """URL mapping for the checkout session service."""

    health: str = "/healthz"
    create_session: str = "/create-checkout-session"
    verify_session: str = "/verify-session"


@dataclass(frozen=True)
class FrontendPages:
    """Pages on the storefront the payment provider redirects back to."""

    success: str = "/success.html"
    cancel: str = "/cancel.html"


CHECKOUT_URLS = CheckoutURLs()
FRONTEND_PAGES = FrontendPages()

__all__ = ["CHECKOUT_URLS", "FRONTEND_PAGES", "CheckoutURLs", "FrontendPages"]
