# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain package.

This package provides course enrollment and fee ledger functionality:
- Fee calculation with discounts, accommodation and GST
- Student identity resolution and student code generation
- Ledger writing for initial and top-up payments
- The transactional enrollment service
"""

from src.domains.enrollment.exceptions import (
    ConflictError,
    EnrollmentServiceError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from src.domains.enrollment.fees import (
    CourseFeeSnapshot,
    FeeBreakdown,
    FeeOptions,
    TaxRates,
    check_extra_discount,
    compute_fees,
    round_money,
    snapshot_from_course,
)
from src.domains.enrollment.identity import IdentityResolver, ResolvedIdentity, StudentProfile
from src.domains.enrollment.ledger import LedgerEntry, LedgerWriter, PayerInfo
from src.domains.enrollment.sequence import StudentCodeGenerator, format_student_code, next_student_code
from src.domains.enrollment.service import EnrollmentService, EnrollmentState

__all__ = [
    "EnrollmentService",
    "EnrollmentState",
    "EnrollmentServiceError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "PersistenceError",
    "CourseFeeSnapshot",
    "FeeOptions",
    "TaxRates",
    "FeeBreakdown",
    "compute_fees",
    "check_extra_discount",
    "snapshot_from_course",
    "round_money",
    "IdentityResolver",
    "ResolvedIdentity",
    "StudentProfile",
    "LedgerWriter",
    "LedgerEntry",
    "PayerInfo",
    "StudentCodeGenerator",
    "format_student_code",
    "next_student_code",
]
