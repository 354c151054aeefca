"""Errors raised by the credential workflow and its collaborators.

Each error is a werkzeug ``HTTPException`` so the application's JSON error
handler can render it with the right status code. Descriptions are kept
generic: they never carry hashes, codes or secrets, and authentication
failures do not say which part of the credential was wrong.
"""

from __future__ import annotations

from werkzeug.exceptions import (
    BadGateway,
    BadRequest,
    Conflict,
    NotFound,
    ServiceUnavailable,
    Unauthorized,
)


class ValidationError(BadRequest):
    """Missing or malformed input."""

    description = "The request payload is invalid."


class InvalidOrExpiredError(BadRequest):
    """A verification code, reset code or reset token is unknown or expired."""

    description = "Invalid or expired code."


class InvalidCredentialError(Unauthorized):
    """The supplied password does not match."""

    description = "Invalid credentials."


class RoleMismatchError(InvalidCredentialError):
    """The password matched but the account has a different role."""

    code = 403
    name = "Forbidden"


class NotFoundError(NotFound):
    """No record matches the lookup."""

    description = "No matching account."


class ConflictError(Conflict):
    """An account with that email already exists."""

    description = "A user with that email already exists."


class GatewayError(BadGateway):
    """The notification gateway could not deliver a message."""

    description = "Message delivery failed."


class StoreError(ServiceUnavailable):
    """The credential store failed to complete an operation."""

    description = "The account store is unavailable."


class DuplicateRecordError(StoreError):
    """The store rejected a write that violates the unique email constraint."""
