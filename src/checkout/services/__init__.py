from src.checkout.services.session_service import CheckoutSessionService, new_order_token

__all__ = ["CheckoutSessionService", "new_order_token"]
