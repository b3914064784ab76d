class CheckoutError(Exception):
    """Base class for failures the checkout service turns into HTTP errors."""


class CartValidationError(CheckoutError):
    """Raised when the submitted cart cannot be priced. The message is shown to the caller."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingConfigurationError(CheckoutError):
    def __init__(self, name: str):
        super().__init__(f"Missing {name}")
        self.name = name


class PaymentGatewayError(CheckoutError):
    """Raised by the gateway when the payment provider call fails."""

    def __init__(self, message: str, original_exception: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception
