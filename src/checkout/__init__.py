from src.utils.logger import setup_logger

checkout_logger = setup_logger("checkout", log_file="checkout.log")

__all__ = ["checkout_logger"]
