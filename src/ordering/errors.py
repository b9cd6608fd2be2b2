"""Error taxonomy of the Order Engine.

Every failure the engine reports is an ``OrderingError`` subclass with a stable
``code`` and the HTTP ``status_code`` the API layer renders it with.
"""


class OrderingError(Exception):
    code = "ORDERING_ERROR"
    status_code = 500
    default_message = "Order engine failure"

    def __init__(self, message: str | None = None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        payload = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFound(OrderingError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


class MaterialNotFound(NotFound):
    default_message = "Material not found"


class OrderNotFound(NotFound):
    default_message = "Order not found"


class Forbidden(OrderingError):
    code = "FORBIDDEN"
    status_code = 403
    default_message = "Requesting user is not a party to this order"


class InsufficientQuantity(OrderingError):
    code = "INSUFFICIENT_QUANTITY"
    status_code = 409
    default_message = "Insufficient material quantity"


class InvalidInput(OrderingError):
    code = "INVALID_INPUT"
    status_code = 422
    default_message = "Invalid input"


class InvalidStatus(OrderingError):
    code = "INVALID_STATUS"
    status_code = 422
    default_message = "Invalid order status"


class InvalidTransition(OrderingError):
    code = "INVALID_TRANSITION"
    status_code = 409
    default_message = "Invalid status transition"


class Conflict(OrderingError):
    """A concurrent write was detected and the unit of work was aborted."""

    code = "CONFLICT"
    status_code = 409
    default_message = "Concurrent modification detected, retry the operation"
