"""
Application exceptions for the trip planner.

Services raise these instead of HTTP errors so they can be exercised without a
web layer. ``main.py`` turns them into JSON responses carrying the
client-facing ``user_message`` and the error code; the internal ``message`` is
only logged.

Usage:
    from planit.core.errors import NotFoundError, ErrorCode

    raise NotFoundError("Trip not found", code=ErrorCode.TRIP_NOT_FOUND)
"""

from enum import Enum
from typing import Optional

from postgrest.exceptions import APIError


class ErrorCode(str, Enum):
    """Error codes for client-facing error messages."""

    # Authentication errors
    AUTH_FAILED = "AUTH_FAILED"
    INVALID_CODE = "INVALID_CODE"

    # Lookup / ownership errors
    TRIP_NOT_FOUND = "TRIP_NOT_FOUND"
    PAYMENT_NOT_FOUND = "PAYMENT_NOT_FOUND"
    INVITE_NOT_FOUND = "INVITE_NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"

    # Invite claim
    EMAIL_MISMATCH = "EMAIL_MISMATCH"

    # Input
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Collaborators
    DELIVERY_FAILED = "DELIVERY_FAILED"
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"

    # System
    INTERNAL_ERROR = "INTERNAL_ERROR"


USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.AUTH_FAILED: "Please sign in to continue.",
    ErrorCode.INVALID_CODE: "That code is invalid or has expired. Request a new one and try again.",
    ErrorCode.TRIP_NOT_FOUND: "Trip not found.",
    ErrorCode.PAYMENT_NOT_FOUND: "Payment not found.",
    ErrorCode.INVITE_NOT_FOUND: "This invite link is invalid or has expired.",
    ErrorCode.FORBIDDEN: "You are not allowed to do that.",
    ErrorCode.EMAIL_MISMATCH: (
        "This invite was sent to a different email address. "
        "Sign out and sign in with the invited address."
    ),
    ErrorCode.VALIDATION_ERROR: "Your request contains invalid information. Please check and try again.",
    ErrorCode.DELIVERY_FAILED: "We could not send that email. Please try again later.",
    ErrorCode.CONSTRAINT_VIOLATION: "That conflicts with an existing record.",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Please try again.",
}

# Postgres SQLSTATEs surfaced by PostgREST that are normal outcomes, not crashes
_CONSTRAINT_CODES = {"23505", "23503", "23502", "23514"}
# Malformed ids (e.g. not a uuid) are lookups of something that does not exist
_NOT_FOUND_CODES = {"22P02", "PGRST116"}


class PlanitError(Exception):
    """Base exception for all application errors."""

    status_code: int = 500
    default_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return USER_MESSAGES.get(self.code, USER_MESSAGES[ErrorCode.INTERNAL_ERROR])


class NotFoundError(PlanitError):
    """Record is absent or not owned by the caller. The two are never distinguished."""

    status_code = 404
    default_code = ErrorCode.TRIP_NOT_FOUND


class UnauthorizedError(PlanitError):
    """Authenticated but not permitted."""

    status_code = 403
    default_code = ErrorCode.FORBIDDEN


class AuthenticationError(PlanitError):
    """No session, or the passcode handshake failed."""

    status_code = 401
    default_code = ErrorCode.AUTH_FAILED


class ValidationError(PlanitError):
    status_code = 422
    default_code = ErrorCode.VALIDATION_ERROR


class EmailMismatchError(PlanitError):
    """Invite claimed by an account whose email differs from the invited address."""

    status_code = 403
    default_code = ErrorCode.EMAIL_MISMATCH


class DeliveryFailure(PlanitError):
    """Notification dispatch raised."""

    status_code = 502
    default_code = ErrorCode.DELIVERY_FAILED


class ConstraintViolation(PlanitError):
    """Uniqueness or foreign-key violation reported by the backend."""

    status_code = 409
    default_code = ErrorCode.CONSTRAINT_VIOLATION


def translate_api_error(exc: APIError, not_found_code: Optional[ErrorCode] = None) -> PlanitError:
    """Map a PostgREST error onto the application taxonomy.

    not_found_code names what was being looked up, so a malformed payment id
    reads as a missing payment rather than a missing trip.
    """
    code = str(getattr(exc, "code", "") or "")
    message = getattr(exc, "message", None) or str(exc)
    if code in _NOT_FOUND_CODES:
        return NotFoundError(message, code=not_found_code)
    if code in _CONSTRAINT_CODES:
        return ConstraintViolation(message)
    return PlanitError(message)
