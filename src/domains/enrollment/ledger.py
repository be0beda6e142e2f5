# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Ledger writer for money collected against an enrollment.

Every payment produces exactly one income LedgerTransaction and one
PaymentHistoryEntry, and moves the enrollment's paid and due amounts. All
three writes happen in the caller's unit of work; nothing here commits.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.enrollment.exceptions import PersistenceError, ValidationError
from src.infrastructure.database.models.enrollment import Enrollment
from src.infrastructure.database.models.ledger import (
    LedgerTransaction,
    PaymentHistoryEntry,
    TransactionCategory,
)
from src.models.common import PaymentType, TransactionType

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class PayerInfo:
    """Who handed over the money."""

    name: str | None = None
    contact: str | None = None


@dataclass
class LedgerEntry:
    """Rows written for one payment."""

    transaction: LedgerTransaction
    payment: PaymentHistoryEntry
    previous_due: Decimal
    remaining_due: Decimal


class LedgerWriter:
    """Books enrollment payments into the general ledger.

    Attributes:
        db: Async database session of the enclosing unit of work.
        category_slug: Slug of the income category fees are booked against.
    """

    def __init__(self, db: AsyncSession, category_slug: str) -> None:
        self.db = db
        self.category_slug = category_slug
        self._category_id: str | None = None

    async def record_initial_payment(
        self,
        enrollment: Enrollment,
        amount: Decimal,
        method: str,
        payer: PayerInfo,
        course_title: str,
        recorded_by: str | None = None,
    ) -> LedgerEntry:
        """Record the payment collected while enrolling.

        Args:
            enrollment: Freshly persisted enrollment with nothing paid yet.
            amount: Amount collected, greater than zero.
            method: Payment method.
            payer: Payer name and contact.
            course_title: Course title for the transaction description.
            recorded_by: ID of the staff user collecting the money.

        Returns:
            The ledger rows and the due balance before and after.
        """
        return await self._record(
            enrollment,
            amount,
            method,
            payer,
            description=f"Course fee payment for {course_title}",
            payment_date=enrollment.enrollment_date,
            recorded_by=recorded_by,
        )

    async def record_top_up_payment(
        self,
        enrollment: Enrollment,
        amount: Decimal,
        method: str,
        payer: PayerInfo,
        course_title: str,
        payment_date: date,
        recorded_by: str | None = None,
    ) -> LedgerEntry:
        """Record an additional payment against an existing enrollment.

        The caller must hold the enrollment row lock.
        """
        return await self._record(
            enrollment,
            amount,
            method,
            payer,
            description=f"Additional payment for {course_title}",
            payment_date=payment_date,
            recorded_by=recorded_by,
        )

    async def _record(
        self,
        enrollment: Enrollment,
        amount: Decimal,
        method: str,
        payer: PayerInfo,
        description: str,
        payment_date: date,
        recorded_by: str | None,
    ) -> LedgerEntry:
        if amount <= ZERO:
            raise ValidationError("Payment amount must be greater than zero", field="paid_amount")

        category_id = await self._get_category_id()
        previous_due, remaining_due = enrollment.apply_payment(amount)

        transaction = LedgerTransaction(
            type=TransactionType.INCOME.value,
            category_id=category_id,
            student_id=enrollment.student_id,
            course_id=enrollment.course_id,
            enrollment_id=enrollment.id,
            amount=amount,
            transaction_date=payment_date,
            payment_mode=method,
            description=description,
            payer_name=payer.name,
            payer_contact=payer.contact,
            created_by=recorded_by,
        )
        self.db.add(transaction)
        await self.db.flush()

        payment = PaymentHistoryEntry(
            student_id=enrollment.student_id,
            course_id=enrollment.course_id,
            enrollment_id=enrollment.id,
            transaction_id=transaction.id,
            type=PaymentType.COURSE_FEE.value,
            amount=amount,
            payment_date=payment_date,
            payment_method=method,
            previous_due_amount=previous_due,
            remaining_due_amount=remaining_due,
            created_by=recorded_by,
        )
        self.db.add(payment)
        await self.db.flush()

        logger.info(
            "Payment recorded: enrollment=%s, amount=%s, due %s -> %s",
            enrollment.id,
            amount,
            previous_due,
            remaining_due,
        )

        return LedgerEntry(
            transaction=transaction,
            payment=payment,
            previous_due=previous_due,
            remaining_due=remaining_due,
        )

    async def _get_category_id(self) -> str:
        if self._category_id is None:
            result = await self.db.execute(
                select(TransactionCategory.id).where(
                    TransactionCategory.slug == self.category_slug,
                    TransactionCategory.is_active.is_(True),
                )
            )
            category_id = result.scalar_one_or_none()
            if category_id is None:
                raise PersistenceError(
                    f"Ledger category '{self.category_slug}' is not configured"
                )
            self._category_id = category_id
        return self._category_id
