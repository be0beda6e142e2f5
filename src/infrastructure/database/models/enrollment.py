# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment model: a course fee snapshot plus the amounts paid against it."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, Date, ForeignKey, Index, Numeric, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import (
    Base,
    SoftDeleteMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)

if TYPE_CHECKING:
    from src.infrastructure.database.models.course import Course
    from src.infrastructure.database.models.identity import Student

ZERO = Decimal("0.00")


def _money(nullable: bool = False, default: Decimal | None = ZERO):
    return mapped_column(Numeric(10, 2), nullable=nullable, default=default)


class Enrollment(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    """Enrollment of a student in a course.

    Fee columns are copied from the course when the row is created and are
    never rewritten afterwards. Only ``paid_amount`` and ``due_amount`` move,
    and ``due_amount`` is always ``total_payable_fee - paid_amount``.
    """

    __tablename__ = "student_enrollments"
    __table_args__ = (
        CheckConstraint(
            "total_payable_fee = taxable_amount + total_tax_amount + hostel_fee + mess_fee",
            name="total_payable_balanced",
        ),
        CheckConstraint(
            "due_amount = total_payable_fee - paid_amount",
            name="due_amount_derived",
        ),
        CheckConstraint("taxable_amount >= 0", name="taxable_amount_non_negative"),
        # One open enrollment per student and course
        Index(
            "uq_student_enrollments_open_course",
            "student_id",
            "course_id",
            unique=True,
            postgresql_where=text(
                "deleted_at IS NULL AND status IN ('not_started', 'ongoing')"
            ),
        ),
    )

    student_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("students.id"), nullable=False, index=True
    )
    course_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("courses.id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="not_started")
    enrollment_date: Mapped[date] = mapped_column(Date, nullable=False)
    completion_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Course fee snapshot
    base_course_fee: Mapped[Decimal] = _money(default=None)
    course_discount_amount: Mapped[Decimal] = _money()
    course_discount_percentage: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=ZERO
    )
    discounted_course_fee: Mapped[Decimal] = _money(default=None)

    # Accommodation, never taxed
    is_hostel_opted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    hostel_fee: Mapped[Decimal] = _money()
    is_mess_opted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    mess_fee: Mapped[Decimal] = _money()

    pre_tax_total_fee: Mapped[Decimal] = _money()
    extra_discount_amount: Mapped[Decimal] = _money()

    # Taxation
    taxable_amount: Mapped[Decimal] = _money()
    igst_applicable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sgst_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=ZERO)
    cgst_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=ZERO)
    igst_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=ZERO)
    sgst_amount: Mapped[Decimal] = _money()
    cgst_amount: Mapped[Decimal] = _money()
    igst_amount: Mapped[Decimal] = _money()
    total_tax_amount: Mapped[Decimal] = _money()

    total_payable_fee: Mapped[Decimal] = _money(default=None)
    paid_amount: Mapped[Decimal] = _money()
    due_amount: Mapped[Decimal] = _money(default=None)

    remark: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str | None] = mapped_column(UUID(as_uuid=False), nullable=True)

    student: Mapped[Student] = relationship(back_populates="enrollments")
    course: Mapped[Course] = relationship()

    def apply_payment(self, amount: Decimal) -> tuple[Decimal, Decimal]:
        """Add a payment to the running totals.

        Args:
            amount: Amount collected.

        Returns:
            Tuple of (due before the payment, due after the payment).
        """
        previous_due = self.total_payable_fee - self.paid_amount
        self.paid_amount = self.paid_amount + amount
        self.due_amount = self.total_payable_fee - self.paid_amount
        return previous_due, self.due_amount
