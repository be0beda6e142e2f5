# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared enumerations and base schemas used across API models."""

from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer

# Serialized as a 2-decimal string so amounts survive JSON untouched.
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: f"{v:.2f}", return_type=str, when_used="json"),
]


class UserRole(str, Enum):
    """Roles an identity can hold."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    ACCOUNT = "account"
    EMPLOYEE = "employee"
    TRAINER = "trainer"
    WARDEN = "warden"
    STUDENT = "student"
    MARKETING = "marketing"


STAFF_ROLES = frozenset({UserRole.SUPER_ADMIN.value, UserRole.ADMIN.value})


class EnrollmentStatus(str, Enum):
    """Lifecycle of a course enrollment."""

    NOT_STARTED = "not_started"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    ABORTED = "aborted"
    EXPELLED = "expelled"


class PaymentMethod(str, Enum):
    """Ways a fee payment can be collected."""

    CASH = "cash"
    CHEQUE = "cheque"
    UPI = "upi"
    BANK_TRANSFER = "bank_transfer"
    CARD = "card"
    NET_BANKING = "net_banking"
    PAYMENT_GATEWAY = "payment_gateway"


class TransactionType(str, Enum):
    """Direction of a ledger transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class PaymentType(str, Enum):
    """What a payment history entry was collected for."""

    COURSE_FEE = "course_fee"
    ACCOMMODATION_FEE = "accommodation_fee"
    PENALTY = "penalty"
    MISCELLANEOUS = "miscellaneous"


class FeeStatus(str, Enum):
    """Whether a student still owes money across enrollments."""

    DUE = "Due"
    PAID = "Paid"


class Gender(str, Enum):
    """Gender recorded on the student profile."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ORMModel(BaseModel):
    """Base for response models built from ORM rows."""

    model_config = ConfigDict(from_attributes=True)
