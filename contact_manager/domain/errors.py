"""Error taxonomy shared by the services and mapped to HTTP responses."""

from __future__ import annotations


class ContactManagerError(Exception):
    """Base class for failures that are safe to report to API clients."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ContactManagerError):
    status_code = 400
    default_message = "Missing or invalid fields"


class ConflictError(ContactManagerError):
    status_code = 400
    default_message = "User already exists"


class InvalidCredentialsError(ContactManagerError):
    status_code = 400
    default_message = "Invalid email or password"


class NotFoundError(ContactManagerError):
    status_code = 404
    default_message = "User not found"


class InvalidOrExpiredOTPError(ContactManagerError):
    status_code = 400
    default_message = "Invalid or expired OTP"


class UnauthorizedError(ContactManagerError):
    status_code = 401
    default_message = "Token is invalid or expired"


class DeliveryFailureError(ContactManagerError):
    status_code = 500
    default_message = "Failed to send OTP"


class ServerError(ContactManagerError):
    status_code = 500
