# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for course enrollments and fee payments.

This module provides the EnrollmentService class for:
- Enrolling a student (new or existing) in a course
- Fee previews
- Payment top-ups and enrollment updates
- Read-side lookups used by the enrollment form and the student list

EnrollmentService is the only place that commits or rolls back. An
enrollment walks START, IDENTITY_RESOLVED, FEES_COMPUTED,
ENROLLMENT_PERSISTED, LEDGER_WRITTEN (when money was collected) and
COMMITTED. Any failure rolls the whole unit of work back and is logged as
ABORTED with the last state reached.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, AsyncIterator

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.config.settings import get_settings
from src.domains.audit.service import AuditAction, AuditService
from src.domains.auth.password import PasswordHasher
from src.domains.enrollment.exceptions import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from src.domains.enrollment.fees import (
    FeeBreakdown,
    FeeOptions,
    TaxRates,
    check_extra_discount,
    compute_fees,
    snapshot_from_course,
)
from src.domains.enrollment.identity import IdentityResolver, StudentProfile
from src.domains.enrollment.ledger import LedgerWriter, PayerInfo
from src.domains.enrollment.sequence import StudentCodeGenerator
from src.infrastructure.database.models.base import new_uuid
from src.infrastructure.database.models.course import Course
from src.infrastructure.database.models.enrollment import Enrollment
from src.infrastructure.database.models.identity import Student, User
from src.infrastructure.database.models.ledger import PaymentHistoryEntry
from src.models.common import EnrollmentStatus, FeeStatus
from src.models.enrollment import (
    CheckNationalIdResponse,
    CourseOption,
    EnrollmentDetail,
    EnrollmentResult,
    EnrollmentSummary,
    EnrollRequest,
    FeeBreakdownResponse,
    FeeCalculationRequest,
    PaymentEntryResponse,
    PaymentHistoryResponse,
    StudentCourseStatus,
    StudentDetailResponse,
    StudentListItem,
    StudentSummary,
    ToggleLoginResponse,
    TopUpResult,
    UpdateEnrollmentRequest,
    UpdateEnrollmentResponse,
)
from src.utils.datetime import utc_today

if TYPE_CHECKING:
    from src.core.config.settings import Settings

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
OPEN_STATUSES = (EnrollmentStatus.NOT_STARTED.value, EnrollmentStatus.ONGOING.value)


class EnrollmentState(str, Enum):
    """Progress of one unit of work."""

    START = "START"
    IDENTITY_RESOLVED = "IDENTITY_RESOLVED"
    FEES_COMPUTED = "FEES_COMPUTED"
    ENROLLMENT_PERSISTED = "ENROLLMENT_PERSISTED"
    LEDGER_WRITTEN = "LEDGER_WRITTEN"
    COMMITTED = "COMMITTED"
    ABORTED = "ABORTED"


class _Progress:
    """Tracks and logs how far a unit of work got."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        self.state = EnrollmentState.START

    def advance(self, state: EnrollmentState) -> None:
        self.state = state
        logger.debug("%s: %s", self.operation, state.value)


class EnrollmentService:
    """Service for enrollments and their fee ledger.

    Attributes:
        db: Async database session. The service owns its transaction.
    """

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings | None = None,
        hasher: PasswordHasher | None = None,
    ) -> None:
        """Initialize enrollment service.

        Args:
            db: Async database session.
            settings: Application settings. Defaults to the cached settings.
            hasher: Password hasher for new identities.
        """
        settings = settings or get_settings()
        self.db = db
        self._settings = settings.enrollment
        self._rates = TaxRates.from_settings(settings.tax)

        codes = StudentCodeGenerator(db, self._settings.student_code_prefix)
        self.identity = IdentityResolver(
            db,
            codes,
            hasher or PasswordHasher(),
            max_attempts=self._settings.student_code_max_attempts,
        )
        self.ledger = LedgerWriter(db, self._settings.fee_income_category_slug)
        self.audit = AuditService(db)

    # =========================================================================
    # Enrollment
    # =========================================================================

    async def enroll(
        self,
        request: EnrollRequest,
        enrolled_by: str | None = None,
    ) -> EnrollmentResult:
        """Enroll a student in a course.

        Creates or reuses the student, snapshots the course fees into a new
        enrollment and books the initial payment, all in one transaction.

        Args:
            request: Enrollment request data.
            enrolled_by: ID of the staff user performing the enrollment.

        Returns:
            Enrollment result with the student code and balances.

        Raises:
            NotFoundError: If the course does not exist or is inactive.
            ValidationError: If the options or payment are invalid.
            ConflictError: If the identity belongs to another student, or
                the student already has an open enrollment in the course.
            PersistenceError: If the transaction could not be written.
        """
        # Preconditions, nothing written yet
        course = await self._get_active_course(str(request.course_id))
        snapshot = snapshot_from_course(course)
        check_extra_discount(snapshot, request.extra_discount_amount)
        self._check_accommodation(course, request.is_hostel_opted, request.is_mess_opted)

        enrollment_date = request.enrollment_date or utc_today()
        options = FeeOptions(
            extra_discount_amount=request.extra_discount_amount,
            hostel_opted=request.is_hostel_opted,
            mess_opted=request.is_mess_opted,
            igst_applicable=request.igst_applicable,
        )

        async with self._unit_of_work("enroll") as progress:
            resolved = await self.identity.resolve(
                request.national_id_number,
                request.contact_number,
                self._profile_from_request(request, enrollment_date),
                created_by=enrolled_by,
            )
            student = resolved.student
            progress.advance(EnrollmentState.IDENTITY_RESOLVED)

            breakdown = compute_fees(snapshot, options, self._rates)
            self._check_overpayment(breakdown.total_payable_fee, ZERO, request.paid_amount)
            progress.advance(EnrollmentState.FEES_COMPUTED)

            if not resolved.is_new:
                await self._check_no_open_enrollment(student.id, course.id)

            enrollment = Enrollment(
                id=new_uuid(),
                student_id=student.id,
                course_id=course.id,
                status=request.status.value,
                enrollment_date=enrollment_date,
                completion_date=(
                    utc_today() if request.status == EnrollmentStatus.COMPLETED else None
                ),
                base_course_fee=snapshot.base_course_fee,
                course_discount_percentage=snapshot.course_discount_percentage,
                course_discount_amount=snapshot.course_discount_amount,
                discounted_course_fee=snapshot.discounted_course_fee,
                is_hostel_opted=request.is_hostel_opted,
                is_mess_opted=request.is_mess_opted,
                remark=request.remark,
                created_by=enrolled_by,
                **self._breakdown_columns(breakdown),
                paid_amount=ZERO,
                due_amount=breakdown.total_payable_fee,
            )
            self.db.add(enrollment)
            await self.db.flush()
            progress.advance(EnrollmentState.ENROLLMENT_PERSISTED)

            if request.paid_amount > ZERO:
                await self.ledger.record_initial_payment(
                    enrollment,
                    request.paid_amount,
                    request.payment_method.value,
                    PayerInfo(name=student.name_on_id, contact=request.contact_number),
                    course_title=course.title,
                    recorded_by=enrolled_by,
                )
                progress.advance(EnrollmentState.LEDGER_WRITTEN)

            if resolved.is_new:
                self.audit.record(
                    "student",
                    student.id,
                    AuditAction.CREATED,
                    enrolled_by,
                    {"student_code": student.student_code},
                )
            self.audit.record(
                "enrollment",
                enrollment.id,
                AuditAction.CREATED,
                enrolled_by,
                {
                    "course_id": course.id,
                    "total_payable_fee": enrollment.total_payable_fee,
                    "paid_amount": enrollment.paid_amount,
                },
            )

        logger.info(
            "Enrolled student: code=%s, enrollment=%s, course=%s, total=%s, paid=%s, by=%s",
            student.student_code,
            enrollment.id,
            course.id,
            enrollment.total_payable_fee,
            enrollment.paid_amount,
            enrolled_by,
        )

        return EnrollmentResult(
            enrollment_id=enrollment.id,
            student_id=student.id,
            student_code=student.student_code,
            is_new_student=resolved.is_new,
            total_fee=enrollment.total_payable_fee,
            paid_amount=enrollment.paid_amount,
            due_amount=enrollment.due_amount,
        )

    async def calculate_fees(self, request: FeeCalculationRequest) -> FeeBreakdownResponse:
        """Preview the fee breakdown for a course. Nothing is persisted.

        Raises:
            NotFoundError: If the course does not exist or is inactive.
            ValidationError: If the options are invalid for the course.
        """
        course = await self._get_active_course(str(request.course_id))
        self._check_accommodation(course, request.is_hostel_opted, request.is_mess_opted)
        snapshot = snapshot_from_course(course)
        breakdown = compute_fees(
            snapshot,
            FeeOptions(
                extra_discount_amount=request.extra_discount_amount,
                hostel_opted=request.is_hostel_opted,
                mess_opted=request.is_mess_opted,
                igst_applicable=request.igst_applicable,
            ),
            self._rates,
        )
        return FeeBreakdownResponse(
            course_id=course.id,
            base_course_fee=snapshot.base_course_fee,
            course_discount_percentage=snapshot.course_discount_percentage,
            course_discount_amount=snapshot.course_discount_amount,
            discounted_course_fee=breakdown.discounted_course_fee,
            **self._breakdown_columns(breakdown),
        )

    # =========================================================================
    # Payments and updates
    # =========================================================================

    async def apply_top_up(
        self,
        enrollment_id: str,
        amount: Decimal,
        method: str | None = None,
        paid_by: str | None = None,
    ) -> TopUpResult:
        """Record an additional payment against an enrollment.

        Args:
            enrollment_id: Enrollment identifier.
            amount: Amount collected.
            method: Payment method. Defaults to the configured method.
            paid_by: ID of the staff user collecting the money.

        Returns:
            New paid and due amounts.

        Raises:
            NotFoundError: If the enrollment does not exist.
            ValidationError: If the amount is not positive or overpays.
        """
        async with self._unit_of_work("top_up"):
            enrollment = await self._lock_enrollment(enrollment_id)
            result = await self._top_up(enrollment, amount, method, paid_by)
            self.audit.record(
                "enrollment",
                enrollment.id,
                AuditAction.PAYMENT_RECORDED,
                paid_by,
                {"amount": amount, "due_amount": result.new_due_amount},
            )
        return result

    async def update_enrollment(
        self,
        enrollment_id: str,
        request: UpdateEnrollmentRequest,
        updated_by: str | None = None,
    ) -> UpdateEnrollmentResponse:
        """Update status, dates and remark, optionally with a top-up.

        Args:
            enrollment_id: Enrollment identifier.
            request: Fields to change. Only explicitly set fields are applied.
            updated_by: ID of the staff user making the change.

        Returns:
            The enrollment state after the update.

        Raises:
            NotFoundError: If the enrollment does not exist.
            ValidationError: If the top-up is invalid.
        """
        fields_set = request.model_fields_set

        async with self._unit_of_work("update_enrollment"):
            enrollment = await self._lock_enrollment(enrollment_id)
            changes: dict[str, object] = {}

            if request.status is not None and request.status.value != enrollment.status:
                changes["status"] = request.status.value
                enrollment.status = request.status.value

            if "completion_date" in fields_set:
                changes["completion_date"] = request.completion_date
                enrollment.completion_date = request.completion_date
            elif (
                enrollment.status == EnrollmentStatus.COMPLETED.value
                and enrollment.completion_date is None
            ):
                enrollment.completion_date = utc_today()
                changes["completion_date"] = enrollment.completion_date

            if "remark" in fields_set:
                changes["remark"] = request.remark
                enrollment.remark = request.remark

            top_up = None
            # A zero amount means no payment was collected
            if request.paid_amount:
                method = request.payment_method.value if request.payment_method else None
                top_up = await self._top_up(enrollment, request.paid_amount, method, updated_by)
                changes["paid_amount"] = enrollment.paid_amount
                changes["due_amount"] = enrollment.due_amount

            if changes:
                self.audit.record(
                    "enrollment", enrollment.id, AuditAction.UPDATED, updated_by, changes
                )

        logger.info(
            "Updated enrollment: enrollment=%s, fields=%s, by=%s",
            enrollment.id,
            ", ".join(sorted(changes)) or "none",
            updated_by,
        )

        return UpdateEnrollmentResponse(
            enrollment_id=enrollment.id,
            status=enrollment.status,
            completion_date=enrollment.completion_date,
            paid_amount=enrollment.paid_amount,
            due_amount=enrollment.due_amount,
            top_up=top_up,
        )

    async def _top_up(
        self,
        enrollment: Enrollment,
        amount: Decimal,
        method: str | None,
        paid_by: str | None,
    ) -> TopUpResult:
        self._check_overpayment(enrollment.total_payable_fee, enrollment.paid_amount, amount)

        entry = await self.ledger.record_top_up_payment(
            enrollment,
            amount,
            method or self._settings.default_payment_method,
            PayerInfo(
                name=enrollment.student.name_on_id,
                contact=enrollment.student.user.contact_number,
            ),
            course_title=enrollment.course.title,
            payment_date=utc_today(),
            recorded_by=paid_by,
        )
        return TopUpResult(
            payment_id=entry.payment.id,
            new_paid_amount=enrollment.paid_amount,
            new_due_amount=entry.remaining_due,
        )

    # =========================================================================
    # Read side
    # =========================================================================

    async def check_national_id(self, national_id_number: str) -> CheckNationalIdResponse:
        """Look up a student by national ID number."""
        result = await self.db.execute(
            select(Student)
            .where(Student.national_id_number == national_id_number)
            .options(selectinload(Student.user), selectinload(Student.enrollments))
        )
        student = result.scalar_one_or_none()
        if student is None:
            return CheckNationalIdResponse(exists=False)

        return CheckNationalIdResponse(
            exists=True,
            student=StudentSummary(
                id=student.id,
                student_code=student.student_code,
                name_on_id=student.name_on_id,
                contact_number=student.user.contact_number,
                email=student.user.email,
                enrollments=[EnrollmentSummary.model_validate(e) for e in student.enrollments],
            ),
        )

    async def list_courses(self) -> list[CourseOption]:
        """List active courses with their fee templates."""
        result = await self.db.execute(
            select(Course)
            .where(Course.is_active.is_(True))
            .order_by(Course.display_order, Course.title)
        )
        return [CourseOption.model_validate(c) for c in result.scalars().all()]

    async def list_students(
        self,
        search: str | None = None,
        status: EnrollmentStatus | None = None,
        course_id: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[StudentListItem], int]:
        """List enrolled students with their courses and dues.

        Only students with at least one enrollment matching ``status`` and
        ``course_id`` are listed, and only those enrollments are reported.

        Args:
            search: Search in name, student code or contact number.
            status: Filter by enrollment status.
            course_id: Filter by course.
            limit: Maximum results.
            offset: Pagination offset.

        Returns:
            Tuple of (list of students, total count).
        """
        enrollment_conditions = []
        if status is not None:
            enrollment_conditions.append(Enrollment.status == status.value)
        if course_id:
            enrollment_conditions.append(Enrollment.course_id == course_id)

        query = (
            select(Student)
            .join(Student.user)
            .where(
                Student.id.in_(
                    select(Enrollment.student_id).where(*enrollment_conditions)
                )
            )
        )

        if search:
            search_pattern = f"%{search}%"
            query = query.where(
                or_(
                    Student.name_on_id.ilike(search_pattern),
                    Student.student_code.ilike(search_pattern),
                    User.first_name.ilike(search_pattern),
                    User.last_name.ilike(search_pattern),
                    User.contact_number.ilike(search_pattern),
                )
            )

        total_result = await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )
        total = total_result.scalar() or 0

        result = await self.db.execute(
            query.options(
                selectinload(Student.user),
                selectinload(Student.enrollments).selectinload(Enrollment.course),
            )
            .order_by(Student.enrollment_date.desc(), Student.student_code.desc())
            .limit(limit)
            .offset(offset)
        )

        items = []
        for student in result.scalars().all():
            enrollments = sorted(
                (
                    e
                    for e in student.enrollments
                    if (status is None or e.status == status.value)
                    and (not course_id or e.course_id == course_id)
                ),
                key=lambda e: e.enrollment_date,
                reverse=True,
            )
            total_due = sum((e.due_amount for e in enrollments), ZERO)
            items.append(
                StudentListItem(
                    student_id=student.id,
                    student_code=student.student_code,
                    name_on_id=student.name_on_id,
                    contact_number=student.user.contact_number,
                    courses=[
                        StudentCourseStatus(
                            enrollment_id=e.id,
                            course_id=e.course_id,
                            title=e.course.title,
                            status=e.status,
                        )
                        for e in enrollments
                    ],
                    fee_status=FeeStatus.DUE if total_due > ZERO else FeeStatus.PAID,
                    total_due_amount=total_due,
                    login_enabled=student.login_enabled,
                )
            )

        return items, total

    async def get_student(self, student_id: str) -> StudentDetailResponse:
        """Get a student profile with all enrollments.

        Raises:
            NotFoundError: If the student does not exist.
        """
        student = await self._get_student(student_id)
        return StudentDetailResponse(
            id=student.id,
            user_id=student.user_id,
            student_code=student.student_code,
            name_on_id=student.name_on_id,
            father_name=student.father_name,
            mother_name=student.mother_name,
            date_of_birth=student.date_of_birth,
            gender=student.gender,
            address=student.address,
            state=student.state,
            city=student.city,
            pincode=student.pincode,
            national_id_number=student.national_id_number,
            pan_number=student.pan_number,
            contact_number=student.user.contact_number,
            email=student.user.email,
            login_enabled=student.login_enabled,
            enrollment_date=student.enrollment_date,
            enrollments=[EnrollmentDetail.model_validate(e) for e in student.enrollments],
        )

    async def get_payment_history(
        self,
        student_id: str,
        enrollment_id: str | None = None,
    ) -> PaymentHistoryResponse:
        """Get payments of a student, optionally for one enrollment.

        Raises:
            NotFoundError: If the student does not exist, or the enrollment
                does not belong to the student.
        """
        student = await self._get_student(student_id)

        stmt = select(PaymentHistoryEntry).where(PaymentHistoryEntry.student_id == student.id)
        if enrollment_id is not None:
            if not any(e.id == enrollment_id for e in student.enrollments):
                raise NotFoundError(
                    f"Enrollment {enrollment_id} not found for student {student_id}"
                )
            stmt = stmt.where(PaymentHistoryEntry.enrollment_id == enrollment_id)

        result = await self.db.execute(
            stmt.order_by(
                PaymentHistoryEntry.payment_date.desc(),
                PaymentHistoryEntry.created_at.desc(),
            )
        )
        payments = list(result.scalars().all())

        return PaymentHistoryResponse(
            student_id=student.id,
            payments=[PaymentEntryResponse.model_validate(p) for p in payments],
            total_paid=sum((p.amount for p in payments), ZERO),
        )

    async def toggle_student_login(
        self,
        student_id: str,
        login_enabled: bool,
        updated_by: str | None = None,
    ) -> ToggleLoginResponse:
        """Enable or disable a student's login.

        Raises:
            NotFoundError: If the student does not exist.
        """
        async with self._unit_of_work("toggle_student_login"):
            student = await self._get_student(student_id)
            if student.login_enabled != login_enabled:
                student.login_enabled = login_enabled
                self.audit.record(
                    "student",
                    student.id,
                    AuditAction.LOGIN_TOGGLED,
                    updated_by,
                    {"login_enabled": login_enabled},
                )

        logger.info(
            "Student login %s: student=%s, by=%s",
            "enabled" if login_enabled else "disabled",
            student_id,
            updated_by,
        )
        return ToggleLoginResponse(student_id=student.id, login_enabled=student.login_enabled)

    # =========================================================================
    # Helpers
    # =========================================================================

    @asynccontextmanager
    async def _unit_of_work(self, operation: str) -> AsyncIterator[_Progress]:
        """Run a block as one transaction and commit it.

        Raises:
            PersistenceError: If the database rejected the work.
        """
        progress = _Progress(operation)
        try:
            yield progress
            await self.db.commit()
        except SQLAlchemyError as e:
            await self._abort(progress, e)
            raise PersistenceError(f"Could not complete {operation}", e) from e
        except Exception as e:
            await self._abort(progress, e)
            raise
        progress.advance(EnrollmentState.COMMITTED)

    async def _abort(self, progress: _Progress, error: Exception) -> None:
        await self.db.rollback()
        logger.warning(
            "%s %s after %s: %s",
            progress.operation,
            EnrollmentState.ABORTED.value,
            progress.state.value,
            error,
        )

    async def _get_active_course(self, course_id: str) -> Course:
        result = await self.db.execute(select(Course).where(Course.id == course_id))
        course = result.scalar_one_or_none()
        if course is None:
            raise NotFoundError(f"Course {course_id} not found")
        if not course.is_active:
            raise NotFoundError(f"Course {course_id} is not active")
        return course

    async def _get_student(self, student_id: str) -> Student:
        result = await self.db.execute(
            select(Student)
            .where(Student.id == student_id)
            .options(selectinload(Student.user), selectinload(Student.enrollments))
        )
        student = result.scalar_one_or_none()
        if student is None:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    async def _lock_enrollment(self, enrollment_id: str) -> Enrollment:
        """Load an enrollment with a row lock and fresh balances."""
        result = await self.db.execute(
            select(Enrollment)
            .where(Enrollment.id == enrollment_id)
            .options(
                selectinload(Enrollment.student).selectinload(Student.user),
                selectinload(Enrollment.course),
            )
            .with_for_update(of=Enrollment)
            .execution_options(populate_existing=True)
        )
        enrollment = result.scalar_one_or_none()
        if enrollment is None or enrollment.student is None:
            raise NotFoundError(f"Enrollment {enrollment_id} not found")
        return enrollment

    async def _check_no_open_enrollment(self, student_id: str, course_id: str) -> None:
        result = await self.db.execute(
            select(Enrollment.id).where(
                Enrollment.student_id == student_id,
                Enrollment.course_id == course_id,
                Enrollment.status.in_(OPEN_STATUSES),
            )
        )
        if result.first() is not None:
            raise ConflictError("Student already has an open enrollment in this course")

    @staticmethod
    def _check_accommodation(course: Course, hostel_opted: bool, mess_opted: bool) -> None:
        if hostel_opted and not course.hostel_available:
            raise ValidationError("Hostel is not available for this course", field="is_hostel_opted")
        if mess_opted and not course.mess_available:
            raise ValidationError("Mess is not available for this course", field="is_mess_opted")

    def _check_overpayment(self, total_payable: Decimal, paid: Decimal, amount: Decimal) -> None:
        """Reject a payment that would push the due amount below the tolerance."""
        if amount < ZERO:
            raise ValidationError("Payment amount cannot be negative", field="paid_amount")
        if self._settings.allow_overpayment:
            return
        due_after = total_payable - paid - amount
        if due_after < -self._settings.overpayment_tolerance:
            raise ValidationError(
                f"Payment of {amount} exceeds the due amount of {total_payable - paid}",
                field="paid_amount",
            )

    @staticmethod
    def _breakdown_columns(breakdown: FeeBreakdown) -> dict[str, object]:
        return {
            "hostel_fee": breakdown.hostel_fee,
            "mess_fee": breakdown.mess_fee,
            "pre_tax_total_fee": breakdown.pre_tax_total_fee,
            "extra_discount_amount": breakdown.extra_discount_amount,
            "taxable_amount": breakdown.taxable_amount,
            "igst_applicable": breakdown.igst_applicable,
            "sgst_percentage": breakdown.sgst_percentage,
            "cgst_percentage": breakdown.cgst_percentage,
            "igst_percentage": breakdown.igst_percentage,
            "sgst_amount": breakdown.sgst_amount,
            "cgst_amount": breakdown.cgst_amount,
            "igst_amount": breakdown.igst_amount,
            "total_tax_amount": breakdown.total_tax_amount,
            "total_payable_fee": breakdown.total_payable_fee,
        }

    @staticmethod
    def _profile_from_request(request: EnrollRequest, enrollment_date: date) -> StudentProfile:
        return StudentProfile(
            name_on_id=request.name_on_id,
            father_name=request.father_name,
            mother_name=request.mother_name,
            date_of_birth=request.date_of_birth,
            gender=request.gender.value,
            address=request.address,
            state=request.state,
            city=request.city,
            pincode=request.pincode,
            enrollment_date=enrollment_date,
            email=request.email,
            pan_number=request.pan_number,
        )
