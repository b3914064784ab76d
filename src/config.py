import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "")
FRONTEND_URL = os.getenv("FRONTEND_URL", "")

ALLOWED_ORIGIN = os.getenv("ALLOWED_ORIGIN", "https://livremagog.vercel.app")
ALLOWED_ORIGIN_SUFFIX = os.getenv("ALLOWED_ORIGIN_SUFFIX", ".vercel.app")

CHECKOUT_CURRENCY = os.getenv("CHECKOUT_CURRENCY", "cad").lower()
EXPOSE_PROVIDER_ERRORS = os.getenv("EXPOSE_PROVIDER_ERRORS", "false").lower() == "true"

CHECKOUT_SERVICE_HOST = os.getenv("CHECKOUT_SERVICE_HOST", "0.0.0.0")
CHECKOUT_SERVICE_PORT = int(os.getenv("CHECKOUT_SERVICE_PORT", "8086"))

LOG_DIR = os.getenv("LOG_DIR", "logs")


@dataclass(frozen=True)
class Settings:
    """Deployment configuration handed to the checkout app factory."""

    stripe_secret_key: str = ""
    frontend_url: str = ""
    allowed_origin: str = ""
    allowed_origin_suffix: str = ""
    currency: str = "cad"
    expose_provider_errors: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            stripe_secret_key=STRIPE_SECRET_KEY,
            frontend_url=FRONTEND_URL,
            allowed_origin=ALLOWED_ORIGIN,
            allowed_origin_suffix=ALLOWED_ORIGIN_SUFFIX,
            currency=CHECKOUT_CURRENCY,
            expose_provider_errors=EXPOSE_PROVIDER_ERRORS,
        )
