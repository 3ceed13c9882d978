"""
ParuShop - Custom Exceptions
=============================
Business-level exceptions. Each carries the HTTP status it is converted to
by the exception handler registered in main.create_app().
"""


class ShopError(Exception):
    """Base exception for all business logic errors."""
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidArgumentError(ShopError):
    """Raised for malformed or missing request fields."""
    status_code = 400
    default_message = "Invalid request"


class InsufficientStockError(ShopError):
    """Raised when a product variant does not have enough stock."""
    status_code = 400
    default_message = "Not enough stock available"


class UnauthenticatedError(ShopError):
    """Raised when a request cannot be tied to a valid user."""
    status_code = 401
    default_message = "Unauthorized request"


class NotFoundError(ShopError):
    """Raised when a requested resource doesn't exist."""
    status_code = 404
    default_message = "Resource not found"


class DuplicateError(ShopError):
    """Raised for unique constraint violations at the business level."""
    status_code = 409
    default_message = "Resource already exists"


class ConflictError(ShopError):
    """Raised when a record was changed by a concurrent request."""
    status_code = 409
    default_message = "Resource was modified by another request, please retry"


class InternalError(ShopError):
    """Raised for unexpected persistence failures."""
    status_code = 500
    default_message = "Internal server error"


class InvalidTokenError(Exception):
    """Token failed verification (bad signature, malformed, expired). Never sent to clients as-is."""
    pass
