# cleanup_tracker/errors.py
"""
Domain error taxonomy.

Every failure the core raises is a TrackerError subclass carrying the HTTP
status the API layer renders it with. main.py registers a single handler for
the base class, so services never import FastAPI.
"""

from typing import Optional


class TrackerError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, **extra):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message, **self.extra}


class BadInput(TrackerError):
    status_code = 400
    default_message = "Bad request"


class InvalidCredentials(TrackerError):
    status_code = 401
    default_message = "Invalid credentials"


class TokenExpired(TrackerError):
    status_code = 401
    default_message = "Token expired"


class TokenInvalid(TrackerError):
    status_code = 401
    default_message = "Invalid token"


class Forbidden(TrackerError):
    status_code = 403
    default_message = "Access forbidden"


class NotFound(TrackerError):
    status_code = 404
    default_message = "Not found"


class Conflict(TrackerError):
    status_code = 409
    default_message = "Conflict"


class IllegalTransition(TrackerError):
    """Raised when the state graph does not allow the requested move."""

    status_code = 409

    def __init__(self, current_status, requested_status, action: str):
        self.current_status = current_status
        self.requested_status = requested_status
        self.action = action
        super().__init__(
            f"Cannot {action} a job in status '{current_status.value}'",
            currentStatus=current_status.value,
            requestedStatus=requested_status.value,
        )
