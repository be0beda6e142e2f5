# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain exceptions.

The router maps each class to one HTTP status: ValidationError to 422,
ConflictError to 409, NotFoundError to 404, PersistenceError to 503.
"""

from typing import Optional


class EnrollmentServiceError(Exception):
    """Base exception for enrollment service errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(EnrollmentServiceError):
    """Raised for malformed input or a computed invariant violation.

    Attributes:
        field: Name of the offending request field, if any.
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class ConflictError(EnrollmentServiceError):
    """Raised when an identity is already bound to a different student."""

    pass


class NotFoundError(EnrollmentServiceError):
    """Raised when a referenced course, student or enrollment is missing."""

    pass


class PersistenceError(EnrollmentServiceError):
    """Raised when the unit of work cannot be written.

    Attributes:
        original_error: The underlying SQLAlchemy error, if any.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message
