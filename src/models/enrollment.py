# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment and fee ledger API schemas.

This module defines request/response schemas for the student enrollment
API: enrolling, fee previews, payment top-ups and the read-side helpers
used by the enrollment form.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.models.common import (
    EnrollmentStatus,
    FeeStatus,
    Gender,
    Money,
    ORMModel,
    PaymentMethod,
)

NATIONAL_ID_PATTERN = r"^\d{12}$"
CONTACT_NUMBER_PATTERN = r"^\d{10}$"


class FeeOptionsMixin(BaseModel):
    """Enrollment choices that change the fee."""

    extra_discount_amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        decimal_places=2,
        description="Discretionary discount on the discounted course fee",
    )
    is_hostel_opted: bool = False
    is_mess_opted: bool = False
    igst_applicable: bool = Field(
        default=False,
        description="Inter-state enrollment: charge IGST instead of SGST + CGST",
    )


class EnrollRequest(FeeOptionsMixin):
    """Request to enroll a student in a course.

    The student is matched on ``national_id_number``. When a student with
    that number exists the profile fields are ignored and the existing
    record is reused.
    """

    # Identity
    national_id_number: str = Field(pattern=NATIONAL_ID_PATTERN)
    contact_number: str = Field(pattern=CONTACT_NUMBER_PATTERN)
    email: str | None = Field(default=None, max_length=255)

    # Profile
    name_on_id: str = Field(min_length=1, max_length=200)
    father_name: str | None = Field(default=None, max_length=200)
    mother_name: str | None = Field(default=None, max_length=200)
    date_of_birth: date
    gender: Gender
    address: str = Field(min_length=1)
    state: str = Field(min_length=1, max_length=100)
    city: str = Field(min_length=1, max_length=100)
    pincode: str = Field(pattern=r"^\d{6}$")
    pan_number: str | None = Field(default=None, pattern=r"^[A-Z]{5}\d{4}[A-Z]$")

    # Enrollment
    course_id: UUID
    enrollment_date: date | None = Field(
        default=None,
        description="Defaults to today",
    )
    status: EnrollmentStatus = EnrollmentStatus.NOT_STARTED
    remark: str | None = None

    # Initial payment
    paid_amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    payment_method: PaymentMethod = PaymentMethod.CASH


class EnrollmentResult(BaseModel):
    """Response for a successful enrollment."""

    enrollment_id: str
    student_id: str
    student_code: str
    is_new_student: bool
    total_fee: Money
    paid_amount: Money
    due_amount: Money


class UpdateEnrollmentRequest(BaseModel):
    """Request to update an enrollment.

    Fee snapshot fields and ``due_amount`` are not accepted. ``paid_amount``
    is an additional payment, not the new total. Zero books nothing.
    """

    model_config = ConfigDict(extra="forbid")

    status: EnrollmentStatus | None = None
    completion_date: date | None = None
    remark: str | None = None
    paid_amount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    payment_method: PaymentMethod | None = None


class TopUpRequest(BaseModel):
    """Additional payment against an existing enrollment."""

    amount: Decimal = Field(gt=0, decimal_places=2)
    payment_method: PaymentMethod | None = None


class TopUpResult(BaseModel):
    """Balance after a top-up payment."""

    payment_id: str | None
    new_paid_amount: Money
    new_due_amount: Money


class UpdateEnrollmentResponse(BaseModel):
    """Response for an enrollment update."""

    enrollment_id: str
    status: EnrollmentStatus
    completion_date: date | None
    paid_amount: Money
    due_amount: Money
    top_up: TopUpResult | None = None


class FeeCalculationRequest(FeeOptionsMixin):
    """Fee preview request."""

    course_id: UUID


class FeeBreakdownResponse(BaseModel):
    """Fee preview for a course and set of options."""

    course_id: str
    base_course_fee: Money
    course_discount_percentage: Money
    course_discount_amount: Money
    discounted_course_fee: Money
    extra_discount_amount: Money
    hostel_fee: Money
    mess_fee: Money
    pre_tax_total_fee: Money
    taxable_amount: Money
    igst_applicable: bool
    sgst_percentage: Money
    cgst_percentage: Money
    igst_percentage: Money
    sgst_amount: Money
    cgst_amount: Money
    igst_amount: Money
    total_tax_amount: Money
    total_payable_fee: Money


class CheckNationalIdRequest(BaseModel):
    """Request to look up a student by national ID number."""

    national_id_number: str = Field(pattern=NATIONAL_ID_PATTERN)


class EnrollmentSummary(ORMModel):
    """Short enrollment info."""

    id: str
    course_id: str
    status: EnrollmentStatus
    enrollment_date: date
    total_payable_fee: Money
    paid_amount: Money
    due_amount: Money


class StudentSummary(BaseModel):
    """Short student info shown when a national ID is already known."""

    id: str
    student_code: str
    name_on_id: str
    contact_number: str
    email: str | None
    enrollments: list[EnrollmentSummary]


class CheckNationalIdResponse(BaseModel):
    """Result of a national ID lookup."""

    exists: bool
    student: StudentSummary | None = None


class CourseOption(ORMModel):
    """Active course with its fee template."""

    id: str
    title: str
    slug: str
    duration: int | None
    base_course_fee: Money
    discount_percentage: Money
    discounted_course_fee: Money
    hostel_available: bool
    hostel_fee: Money
    mess_available: bool
    mess_fee: Money
    total_fee: Money


class EnrollmentDetail(ORMModel):
    """Full enrollment snapshot."""

    id: str
    course_id: str
    status: EnrollmentStatus
    enrollment_date: date
    completion_date: date | None
    base_course_fee: Money
    course_discount_percentage: Money
    course_discount_amount: Money
    discounted_course_fee: Money
    is_hostel_opted: bool
    hostel_fee: Money
    is_mess_opted: bool
    mess_fee: Money
    pre_tax_total_fee: Money
    extra_discount_amount: Money
    taxable_amount: Money
    igst_applicable: bool
    sgst_percentage: Money
    cgst_percentage: Money
    igst_percentage: Money
    sgst_amount: Money
    cgst_amount: Money
    igst_amount: Money
    total_tax_amount: Money
    total_payable_fee: Money
    paid_amount: Money
    due_amount: Money
    remark: str | None


class StudentDetailResponse(BaseModel):
    """Student profile with enrollments."""

    id: str
    user_id: str
    student_code: str
    name_on_id: str
    father_name: str | None
    mother_name: str | None
    date_of_birth: date
    gender: str
    address: str
    state: str
    city: str
    pincode: str
    national_id_number: str
    pan_number: str | None
    contact_number: str
    email: str | None
    login_enabled: bool
    enrollment_date: date
    enrollments: list[EnrollmentDetail]


class PaymentEntryResponse(ORMModel):
    """One payment history entry."""

    id: str
    enrollment_id: str
    course_id: str
    transaction_id: str | None
    type: str
    amount: Money
    payment_date: date
    payment_method: str
    previous_due_amount: Money
    remaining_due_amount: Money
    created_at: datetime


class PaymentHistoryResponse(BaseModel):
    """Payment history of a student, newest first."""

    student_id: str
    payments: list[PaymentEntryResponse]
    total_paid: Money


class ToggleLoginRequest(BaseModel):
    """Request to enable or disable a student's login."""

    login_enabled: bool


class ToggleLoginResponse(BaseModel):
    """Login state after a toggle."""

    student_id: str
    login_enabled: bool


class StudentCourseStatus(BaseModel):
    """Course title and enrollment status shown in the student list."""

    enrollment_id: str
    course_id: str
    title: str
    status: EnrollmentStatus


class StudentListItem(BaseModel):
    """One student row of the student list."""

    student_id: str
    student_code: str
    name_on_id: str
    contact_number: str
    courses: list[StudentCourseStatus]
    fee_status: FeeStatus
    total_due_amount: Money
    login_enabled: bool


class StudentListResponse(BaseModel):
    """Response for the student list endpoint."""

    students: list[StudentListItem]
    total: int
    limit: int
    offset: int
