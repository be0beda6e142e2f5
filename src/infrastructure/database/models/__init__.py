# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the back office database.

Importing this package registers every table on ``Base.metadata``.
"""

from src.infrastructure.database.models.audit import AuditLog
from src.infrastructure.database.models.base import (
    Base,
    SoftDeleteMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from src.infrastructure.database.models.course import Course
from src.infrastructure.database.models.enrollment import Enrollment
from src.infrastructure.database.models.identity import Student, User
from src.infrastructure.database.models.ledger import (
    LedgerTransaction,
    PaymentHistoryEntry,
    TransactionCategory,
)

__all__ = [
    "Base",
    "SoftDeleteMixin",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "User",
    "Student",
    "Course",
    "Enrollment",
    "TransactionCategory",
    "LedgerTransaction",
    "PaymentHistoryEntry",
    "AuditLog",
]
