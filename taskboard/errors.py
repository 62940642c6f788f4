"""Domain errors raised by the task/auth core.

Each error carries the HTTP status the API layer answers with; the mapping to
the JSON envelope lives in ``taskboard.api.errors``.
"""

from typing import Any


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """One or more input fields are invalid; ``errors`` lists every one of them."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: list[dict[str, Any]], message: str | None = None):
        super().__init__(message)
        self.errors = errors


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Not authorized, token failed"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Not authorized to access this task"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Task not found"


class ConflictError(AppError):
    # Duplicate signup is reported as a plain bad request, like other input errors.
    status_code = 400
    default_message = "User already exists with this email"
