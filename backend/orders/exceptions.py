"""
Custom exceptions for the order orchestration layer.

Each exception carries the HTTP status it maps to so the API exception
handler can translate it without knowing the individual classes.
"""


class OrderError(Exception):
    """Base exception for order-related errors."""

    status_code = 400
    default_message = "Order request could not be processed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class PricingError(OrderError):
    """Raised when a cart references a product, dimension or option missing from the price cache."""

    def __init__(self, product_id, dimension=None, option=None, message=None):
        self.product_id = product_id
        self.dimension = dimension
        self.option = option
        if message is None:
            if dimension is None:
                message = f"No cached pricing found for product '{product_id}'"
            elif option is None:
                message = f"Product '{product_id}' has no cached price dimension '{dimension}'"
            else:
                message = (
                    f"Product '{product_id}' has no cached price for "
                    f"option '{option}' of '{dimension}'"
                )
        super().__init__(message)


class CustomerNotFoundError(OrderError):
    default_message = "No customer found."


class OrderNotFoundError(OrderError):
    status_code = 404
    default_message = "Order not found."

    def __init__(self, order_id=None, message=None):
        self.order_id = order_id
        super().__init__(message)


class OrderPermissionError(OrderError):
    status_code = 403
    default_message = "Not allowed."


class InvalidStatusTransitionError(OrderError):
    def __init__(self, current_status, requested_status, message=None):
        self.current_status = current_status
        self.requested_status = requested_status
        if message is None:
            message = f"Cannot transition order from {current_status} to {requested_status}."
        super().__init__(message)


class InvalidProjectionError(OrderError):
    def __init__(self, fields, message=None):
        self.fields = sorted(fields)
        if message is None:
            message = f"Unknown order field(s) requested: {', '.join(self.fields)}"
        super().__init__(message)


class OrderPersistenceError(OrderError):
    """Raised when the creation transaction fails. Never exposes database details to clients."""

    status_code = 500
    default_message = "Unable to place the order. Please try again."


class PaymentSessionError(OrderError):
    """Raised when the payment gateway cannot open a session for a persisted order."""

    status_code = 502
    default_message = "Payment gateway is unavailable. The order was saved; please retry."
