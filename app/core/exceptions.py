"""
Typed application errors.

Each error carries the HTTP status and the stable, user-facing message it is
rendered with; the single handler in app.core.errors does the translation.
"""
from typing import Dict, Optional


class AppError(Exception):
    """Base class for expected, business-level failures."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        self.detail = detail or self.default_detail
        self.headers = headers
        super().__init__(self.detail)


class Unauthenticated(AppError):
    status_code = 401
    default_detail = "Not authenticated"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class InvalidToken(Unauthenticated):
    default_detail = "Invalid or expired token"


class Unauthorized(AppError):
    status_code = 403
    default_detail = "Access denied"


class AccountInactive(Unauthorized):
    default_detail = "Account is deactivated. Please contact support."


class ValidationFailed(AppError):
    status_code = 422
    default_detail = "Validation failed"


class Conflict(AppError):
    status_code = 409
    default_detail = "Conflict"


class EmailAlreadyRegistered(Conflict):
    default_detail = "User with this email already exists"


# Duplicate check-in/check-out are conflicts but keep the 400 status clients already handle.
class AlreadyCheckedIn(Conflict):
    status_code = 400
    default_detail = "You have already checked in today"


class AlreadyCheckedOut(Conflict):
    status_code = 400
    default_detail = "You have already checked out today"


class NotFound(AppError):
    status_code = 404
    default_detail = "Not found"


class NoCheckInFound(NotFound):
    default_detail = "No check-in record found for today. Please check in first."


class UserNotFound(NotFound):
    default_detail = "User not found"


class TaskNotFound(NotFound):
    default_detail = "Task not found"


class Internal(AppError):
    status_code = 500
    default_detail = "Internal server error"
