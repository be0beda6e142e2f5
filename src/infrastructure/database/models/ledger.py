# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""General ledger and payment history models.

Ledger transactions and payment history entries are append-only. They are
created by the enrollment ledger writer and never edited afterwards.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import (
    Base,
    SoftDeleteMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from src.infrastructure.database.models.enrollment import Enrollment


class TransactionCategory(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    """Income or expense category for ledger transactions."""

    __tablename__ = "transaction_categories"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class LedgerTransaction(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    """Institution-wide income or expense record."""

    __tablename__ = "transactions"
    __table_args__ = (CheckConstraint("amount > 0", name="amount_positive"),)

    type: Mapped[str] = mapped_column(String(10), nullable=False)
    category_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("transaction_categories.id"), nullable=False
    )
    student_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False), ForeignKey("students.id"), nullable=True, index=True
    )
    course_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False), ForeignKey("courses.id"), nullable=True
    )
    enrollment_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False), ForeignKey("student_enrollments.id"), nullable=True, index=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)
    payment_mode: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    payment_ref_num: Mapped[str | None] = mapped_column(String(100), nullable=True)
    payer_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    payer_contact: Mapped[str | None] = mapped_column(String(20), nullable=True)
    created_by: Mapped[str | None] = mapped_column(UUID(as_uuid=False), nullable=True)

    category: Mapped[TransactionCategory] = relationship()


class PaymentHistoryEntry(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    """One payment event against one enrollment.

    ``previous_due_amount`` and ``remaining_due_amount`` capture the balance
    at the instant of the payment, making this table the audit trail of how
    an enrollment's due amount evolved.
    """

    __tablename__ = "student_payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="amount_positive"),
        CheckConstraint(
            "remaining_due_amount = previous_due_amount - amount",
            name="remaining_due_derived",
        ),
    )

    student_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("students.id"), nullable=False, index=True
    )
    course_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("courses.id"), nullable=False
    )
    enrollment_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("student_enrollments.id"), nullable=False, index=True
    )
    transaction_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False), ForeignKey("transactions.id"), nullable=True
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="course_fee")
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    previous_due_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    remaining_due_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    created_by: Mapped[str | None] = mapped_column(UUID(as_uuid=False), nullable=True)

    enrollment: Mapped[Enrollment] = relationship()
