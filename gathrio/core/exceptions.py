"""Domain errors raised by services and rendered by the API layer."""

from fastapi import status


class GathrioError(Exception):
    """Base exception for domain failures surfaced to API callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateEmail(GathrioError):
    """Raised when registering an email that already exists."""

    default_message = "User with this email already exists"


class InvalidCredentials(GathrioError):
    """Raised for an unknown email or a wrong password, indistinguishably."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class UserNotFound(GathrioError):
    """Raised when a password reset is requested for an unknown email."""

    default_message = "User not found"


class InvalidOrExpiredToken(GathrioError):
    """Raised when a reset token is unknown or past its expiry, indistinguishably."""

    default_message = "Invalid or expired reset token"


class ValidationError(GathrioError):
    """Raised when input fails field-level checks."""

    default_message = "Validation failed"

    def __init__(self, errors: list[str], message: str | None = None):
        self.errors = list(errors)
        super().__init__(message or (self.errors[0] if len(self.errors) == 1 else None))


class InvalidToken(GathrioError):
    """Raised when a bearer token fails verification."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid or expired token"


class EventNotFound(GathrioError):
    """Raised when an event does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Event not found"


class NotEventOwner(GathrioError):
    """Raised when a user modifies an event they do not organize."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Unauthorized: You can only modify your own events"
