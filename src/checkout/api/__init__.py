from src.checkout.api.session_router import router as session_router

__all__ = ["session_router"]
