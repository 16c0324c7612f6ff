"""App-wide exception hierarchy.

This module provides a unified exception system with automatic HTTP status code
mapping. Every exception is rendered as the standard response envelope by
``app.core.exception_handlers``.
"""


class AppException(Exception):
    """Base exception for all application errors.

    All custom exceptions inherit from this class and define their own
    status_code and error_type for consistent API responses.
    """

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(message)


# Validation errors (400)
class ValidationError(AppException):
    """Raised when one or more field constraints are violated.

    ``errors`` always holds the complete list of violations, in field
    declaration order.
    """

    status_code = 400
    error_type = "validation_error"

    def __init__(
        self,
        errors: list[str] | None = None,
        message: str = "Validation Error",
    ):
        self.errors = list(errors or [])
        super().__init__(message)


class BadRequestError(ValidationError):
    """Raised for general bad request errors."""

    error_type = "bad_request"

    def __init__(self, message: str = "Bad request", errors: list[str] | None = None):
        super().__init__(errors, message)


# Not found errors (404)
class NotFoundError(AppException):
    """Base class for resource not found errors."""

    status_code = 404
    error_type = "not_found"

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


# Conflict errors (409)
class ConflictError(AppException):
    """Base class for resource conflict errors."""

    status_code = 409
    error_type = "conflict"

    def __init__(self, message: str = "Resource conflict"):
        super().__init__(message)
