# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student enrollment API endpoints.

This module provides endpoints for enrolling students and collecting fees:
- POST /enroll - Enroll a new or existing student in a course
- PUT /enrollments/{enrollment_id} - Update an enrollment, optionally with a payment
- POST /enrollments/{enrollment_id}/payments - Record an additional payment
- POST /calculate-fees - Preview the fee breakdown (also GET with query params)

Lookups used by the enrollment form and the student list:
- GET / - List enrolled students with courses and dues
- POST /check-national-id - Check whether a national ID is already registered
- GET /courses - List active courses with fee templates
- GET /{student_id} - Get a student with all enrollments
- GET /{student_id}/payments - Get payment history
- PATCH /{student_id}/toggle-login - Enable or disable a student's login

All endpoints require a staff user (super_admin or admin).
"""

import logging
from typing import Annotated, NoReturn
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import DbSession, StaffUser
from src.domains.enrollment.exceptions import (
    ConflictError,
    EnrollmentServiceError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from src.domains.enrollment.service import EnrollmentService
from src.models.common import EnrollmentStatus
from src.models.enrollment import (
    CheckNationalIdRequest,
    CheckNationalIdResponse,
    CourseOption,
    EnrollmentResult,
    EnrollRequest,
    FeeBreakdownResponse,
    FeeCalculationRequest,
    PaymentHistoryResponse,
    StudentDetailResponse,
    StudentListResponse,
    ToggleLoginRequest,
    ToggleLoginResponse,
    TopUpRequest,
    TopUpResult,
    UpdateEnrollmentRequest,
    UpdateEnrollmentResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession) -> EnrollmentService:
    """Get enrollment service instance.

    Args:
        db: Database session.

    Returns:
        Configured EnrollmentService instance.
    """
    return EnrollmentService(db=db)


def _raise_http_error(error: EnrollmentServiceError) -> NoReturn:
    """Translate a service error into an HTTPException.

    Raises:
        HTTPException: Always.
    """
    if isinstance(error, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"field": error.field, "message": error.message},
        ) from error
    if isinstance(error, ConflictError):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=error.message,
        ) from error
    if isinstance(error, NotFoundError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error.message,
        ) from error
    if isinstance(error, PersistenceError):
        logger.error("Persistence failure: %s", str(error))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="The request could not be saved, please retry",
        ) from error
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error.message,
    ) from error


# =========================================================================
# Enrollment
# =========================================================================


@router.post(
    "/enroll",
    response_model=EnrollmentResult,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll student",
    description="Enroll a new or existing student in a course and record the initial payment.",
)
async def enroll_student(
    data: EnrollRequest,
    current_user: StaffUser,
    db: DbSession,
) -> EnrollmentResult:
    """Enroll a student in a course.

    Args:
        data: Enrollment request.
        current_user: Authenticated staff user.
        db: Database session.

    Returns:
        The new enrollment with student code and balances.

    Raises:
        HTTPException: 422, 409, 404 or 503 depending on the failure.
    """
    logger.info("Enrolling student in course %s by %s", data.course_id, current_user.id)

    try:
        return await _get_service(db).enroll(data, enrolled_by=current_user.id)
    except EnrollmentServiceError as e:
        _raise_http_error(e)


@router.put(
    "/enrollments/{enrollment_id}",
    response_model=UpdateEnrollmentResponse,
    summary="Update enrollment",
    description="Change status, completion date or remark. A paid_amount is booked as an additional payment.",
)
async def update_enrollment(
    enrollment_id: UUID,
    data: UpdateEnrollmentRequest,
    current_user: StaffUser,
    db: DbSession,
) -> UpdateEnrollmentResponse:
    """Update an enrollment.

    Raises:
        HTTPException: If the enrollment is not found or the payment is invalid.
    """
    try:
        return await _get_service(db).update_enrollment(
            str(enrollment_id), data, updated_by=current_user.id
        )
    except EnrollmentServiceError as e:
        _raise_http_error(e)


@router.post(
    "/enrollments/{enrollment_id}/payments",
    response_model=TopUpResult,
    status_code=status.HTTP_201_CREATED,
    summary="Record payment",
    description="Record an additional payment against an enrollment's due amount.",
)
async def record_payment(
    enrollment_id: UUID,
    data: TopUpRequest,
    current_user: StaffUser,
    db: DbSession,
) -> TopUpResult:
    """Record a top-up payment.

    Raises:
        HTTPException: If the enrollment is not found or the amount overpays.
    """
    method = data.payment_method.value if data.payment_method else None
    try:
        return await _get_service(db).apply_top_up(
            str(enrollment_id), data.amount, method, paid_by=current_user.id
        )
    except EnrollmentServiceError as e:
        _raise_http_error(e)


@router.post(
    "/calculate-fees",
    response_model=FeeBreakdownResponse,
    summary="Calculate fees",
    description="Preview the fee breakdown for a course. Nothing is saved.",
)
async def calculate_fees(
    data: FeeCalculationRequest,
    current_user: StaffUser,
    db: DbSession,
) -> FeeBreakdownResponse:
    """Preview fees from a JSON body."""
    try:
        return await _get_service(db).calculate_fees(data)
    except EnrollmentServiceError as e:
        _raise_http_error(e)


@router.get(
    "/calculate-fees",
    response_model=FeeBreakdownResponse,
    summary="Calculate fees (query)",
)
async def calculate_fees_query(
    params: Annotated[FeeCalculationRequest, Query()],
    current_user: StaffUser,
    db: DbSession,
) -> FeeBreakdownResponse:
    """Preview fees from query parameters."""
    try:
        return await _get_service(db).calculate_fees(params)
    except EnrollmentServiceError as e:
        _raise_http_error(e)


# =========================================================================
# Lookups
# =========================================================================


@router.get(
    "",
    response_model=StudentListResponse,
    summary="List students",
    description="List enrolled students with their courses, fee status and total due.",
)
async def list_students(
    current_user: StaffUser,
    db: DbSession,
    search: Annotated[str | None, Query(description="Search by name, code or contact number")] = None,
    enrollment_status: Annotated[
        EnrollmentStatus | None, Query(alias="status", description="Filter by enrollment status")
    ] = None,
    course_id: Annotated[UUID | None, Query(description="Filter by course")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Maximum results")] = 20,
    offset: Annotated[int, Query(ge=0, description="Pagination offset")] = 0,
) -> StudentListResponse:
    """List enrolled students.

    Args:
        current_user: Authenticated staff user.
        db: Database session.
        search: Optional search query.
        enrollment_status: Optional enrollment status filter.
        course_id: Optional course filter.
        limit: Maximum results.
        offset: Pagination offset.

    Returns:
        Students with pagination info.
    """
    students, total = await _get_service(db).list_students(
        search=search,
        status=enrollment_status,
        course_id=str(course_id) if course_id else None,
        limit=limit,
        offset=offset,
    )

    return StudentListResponse(
        students=students,
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post(
    "/check-national-id",
    response_model=CheckNationalIdResponse,
    summary="Check national ID",
)
async def check_national_id(
    data: CheckNationalIdRequest,
    current_user: StaffUser,
    db: DbSession,
) -> CheckNationalIdResponse:
    """Check whether a student with this national ID already exists."""
    return await _get_service(db).check_national_id(data.national_id_number)


@router.get(
    "/courses",
    response_model=list[CourseOption],
    summary="List courses",
)
async def list_courses(
    current_user: StaffUser,
    db: DbSession,
) -> list[CourseOption]:
    """List active courses for the enrollment form."""
    return await _get_service(db).list_courses()


@router.get(
    "/{student_id}",
    response_model=StudentDetailResponse,
    summary="Get student",
)
async def get_student(
    student_id: UUID,
    current_user: StaffUser,
    db: DbSession,
) -> StudentDetailResponse:
    """Get a student profile with all enrollments.

    Raises:
        HTTPException: If the student is not found.
    """
    try:
        return await _get_service(db).get_student(str(student_id))
    except EnrollmentServiceError as e:
        _raise_http_error(e)


@router.get(
    "/{student_id}/payments",
    response_model=PaymentHistoryResponse,
    summary="Get payment history",
)
async def get_payment_history(
    student_id: UUID,
    current_user: StaffUser,
    db: DbSession,
    enrollment_id: UUID | None = Query(None, description="Only payments for this enrollment"),
) -> PaymentHistoryResponse:
    """Get payments of a student, newest first.

    Raises:
        HTTPException: If the student or enrollment is not found.
    """
    try:
        return await _get_service(db).get_payment_history(
            str(student_id),
            str(enrollment_id) if enrollment_id else None,
        )
    except EnrollmentServiceError as e:
        _raise_http_error(e)


@router.patch(
    "/{student_id}/toggle-login",
    response_model=ToggleLoginResponse,
    summary="Toggle student login",
)
async def toggle_student_login(
    student_id: UUID,
    data: ToggleLoginRequest,
    current_user: StaffUser,
    db: DbSession,
) -> ToggleLoginResponse:
    """Enable or disable a student's login.

    Raises:
        HTTPException: If the student is not found.
    """
    try:
        return await _get_service(db).toggle_student_login(
            str(student_id), data.login_enabled, updated_by=current_user.id
        )
    except EnrollmentServiceError as e:
        _raise_http_error(e)
