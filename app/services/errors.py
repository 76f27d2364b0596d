"""Domain exceptions raised by the StyleSwap services.

Routes never build error payloads for these by hand; the errors blueprint
maps each class to its HTTP status through ``http_status``.
"""


class StyleSwapError(Exception):
    http_status = 400

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(StyleSwapError):
    http_status = 400


class AuthorizationError(StyleSwapError):
    http_status = 403


class NotFoundError(StyleSwapError):
    http_status = 404


class IllegalTransitionError(StyleSwapError):
    http_status = 409

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot move order from {current} to {requested}")
        self.current = current
        self.requested = requested


class DuplicateCheckoutError(StyleSwapError):
    http_status = 409


class PartialCheckoutFailure(StyleSwapError):
    """A per-vendor order could not be placed; the whole checkout was rolled back."""

    http_status = 409

    def __init__(self, vendor_id: str, staged_orders: int, cause: Exception = None):
        super().__init__(
            f"Checkout failed while placing the order for vendor {vendor_id}; "
            f"{staged_orders} staged order(s) were rolled back"
        )
        self.vendor_id = vendor_id
        self.staged_orders = staged_orders
        self.cause = cause


__all__ = [
    "StyleSwapError",
    "ValidationError",
    "AuthorizationError",
    "NotFoundError",
    "IllegalTransitionError",
    "DuplicateCheckoutError",
    "PartialCheckoutFailure",
]
