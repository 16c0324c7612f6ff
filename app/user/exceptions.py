"""User domain exceptions.

User-related exceptions for not found, conflict and invalid status scenarios.
"""

from app.core.exceptions import ConflictError, NotFoundError, ValidationError

INVALID_STATUS_MESSAGE = "Invalid status. Must be Active or InActive"


class UserNotFoundError(NotFoundError):
    """Raised when an identifier does not resolve to a user."""

    error_type = "user_not_found"

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class EmailExistsError(ConflictError):
    """Raised when another user already holds the email."""

    error_type = "email_exists"

    def __init__(self, message: str = "Email already registered"):
        super().__init__(message)


class InvalidStatusError(ValidationError):
    """Raised by the status-only update for a missing or unknown status."""

    error_type = "invalid_status"

    def __init__(self, message: str = INVALID_STATUS_MESSAGE):
        super().__init__([message], message)
