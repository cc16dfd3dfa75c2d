# common/exceptions.py

"""
APPLICATION ERRORS

Centralized domain errors raised by services.

Every error carries:
- status_code: HTTP status the global handler responds with
- code: stable machine-readable identifier for clients

Services raise these; views never build error responses by hand.
See common.exception_handler.api_exception_handler.
"""

from __future__ import annotations

from typing import Optional


class ApplicationError(Exception):
    """Base exception for all domain failures."""

    status_code = 400
    code = "APPLICATION_ERROR"
    default_message = "Request could not be processed."

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        field_errors: Optional[dict] = None,
    ):
        self.message = message or self.default_message
        self.field_errors = field_errors or None
        super().__init__(self.message)


class BadRequestError(ApplicationError):
    """Raised when input is well-formed but violates a business rule."""

    status_code = 400
    code = "BAD_REQUEST"
    default_message = "Bad request."


class ResourceNotFoundError(ApplicationError):
    """Raised when a referenced entity does not exist."""

    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found."


class DuplicateResourceError(ApplicationError):
    """Raised when a unique business key is already taken."""

    status_code = 409
    code = "DUPLICATE_RESOURCE"
    default_message = "Resource already exists."


class InvalidCredentialsError(ApplicationError):
    status_code = 401
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid email or password."


class UserDisabledError(ApplicationError):
    status_code = 403
    code = "USER_DISABLED"
    default_message = "User account is disabled."


class InvalidRefreshTokenError(ApplicationError):
    status_code = 401
    code = "INVALID_REFRESH_TOKEN"
    default_message = "Invalid refresh token."


class InvalidResetTokenError(ApplicationError):
    status_code = 400
    code = "INVALID_RESET_TOKEN"
    default_message = "Invalid or expired reset token."


class OldPasswordIncorrectError(ApplicationError):
    status_code = 400
    code = "OLD_PASSWORD_INCORRECT"
    default_message = "Old password is incorrect."


class DomainAccessDeniedError(ApplicationError):
    """Raised by services when the caller does not own the resource."""

    status_code = 403
    code = "ACCESS_DENIED"
    default_message = "You do not have permission to perform this action."


class OrderStatusTransitionError(ApplicationError):
    status_code = 400
    code = "ORDER_STATUS_TRANSITION_ILLEGAL"
    default_message = "Illegal order status transition."
