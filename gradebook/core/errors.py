# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error taxonomy shared by every layer of the gradebook.

Each domain service declares its own concrete exceptions, but every one of
them derives from exactly one of the kind bases below:

- ValidationError: malformed or out-of-range input (HTTP 400)
- ForbiddenError: authorization scope check failed (HTTP 403)
- NotFoundError: referenced entity absent (HTTP 404)
- ConflictError: uniqueness violation (HTTP 409)
- InternalError: storage/transaction failure or unexpected fault (HTTP 500)

The API layer maps the kind to a status code and renders ``{"message": ...}``.
Only InternalError is safe to retry without changing the request.
"""


class GradebookError(Exception):
    """Base exception for all gradebook errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
        status_code: HTTP status code associated with the error kind.
        retryable: Whether the same request may succeed if retried.
    """

    status_code: int = 500
    retryable: bool = False

    def __init__(self, message: str, details: dict | None = None):
        """Initialize gradebook error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ValidationError(GradebookError):
    """Malformed or out-of-range input."""

    status_code = 400


class ForbiddenError(GradebookError):
    """Caller lacks management rights for the target."""

    status_code = 403


class NotFoundError(GradebookError):
    """Referenced entity does not exist."""

    status_code = 404


class ConflictError(GradebookError):
    """Uniqueness violation, e.g. a duplicate assignment."""

    status_code = 409


class InternalError(GradebookError):
    """Storage or transaction failure."""

    status_code = 500
    retryable = True
