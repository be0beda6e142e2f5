# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Enrollment service."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from src.domains.auth.password import PasswordHasher
from src.domains.enrollment.exceptions import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from src.domains.enrollment.sequence import format_student_code
from src.domains.enrollment.service import EnrollmentService
from src.infrastructure.database.models.audit import AuditLog
from src.infrastructure.database.models.enrollment import Enrollment
from src.infrastructure.database.models.identity import Student, User
from src.models.common import EnrollmentStatus
from src.models.enrollment import (
    EnrollRequest,
    FeeCalculationRequest,
    UpdateEnrollmentRequest,
)
from src.utils.datetime import utc_today

CATEGORY_ID = str(uuid4())
THIS_YEAR = utc_today().year


@pytest.fixture
def enrollment_service(mock_db, test_settings) -> EnrollmentService:
    """Create enrollment service with mock database."""
    return EnrollmentService(
        db=mock_db,
        settings=test_settings,
        hasher=PasswordHasher(rounds=4),
    )


@pytest.fixture
def existing_student() -> Student:
    """Student already on file with the enrollment payload's national ID."""
    user = User(
        id=str(uuid4()),
        first_name="Asha",
        last_name="Kumari Verma",
        contact_number="9876543210",
        password_hash="x",
        role="student",
    )
    student = Student(
        id=str(uuid4()),
        user_id=user.id,
        student_code="STI202400019",
        name_on_id="Asha Kumari Verma",
        date_of_birth=date(2004, 5, 17),
        gender="female",
        address="12 Station Road",
        state="Bihar",
        city="Patna",
        pincode="800001",
        enrollment_date=date(2024, 6, 1),
        national_id_number="123412341234",
        login_enabled=True,
    )
    student.user = user
    return student


@pytest.fixture
def open_enrollment(existing_student, sample_course) -> Enrollment:
    """Ongoing enrollment with 14800 payable and 5000 paid."""
    enrollment = Enrollment(
        id=str(uuid4()),
        student_id=existing_student.id,
        course_id=sample_course.id,
        status="ongoing",
        enrollment_date=date(2025, 7, 1),
        total_payable_fee=Decimal("14800.00"),
        paid_amount=Decimal("5000.00"),
        due_amount=Decimal("9800.00"),
    )
    enrollment.student = existing_student
    enrollment.course = sample_course
    return enrollment


def _added(mock_db, model) -> list:
    return [c.args[0] for c in mock_db.add.call_args_list if isinstance(c.args[0], model)]


class TestEnroll:
    """Tests for enrolling students."""

    @pytest.mark.asyncio
    async def test_enroll_new_student(
        self, enrollment_service, mock_db, make_result, sample_course, enroll_payload
    ) -> None:
        """A new student is created, enrolled and the payment booked."""
        mock_db.execute.side_effect = [
            make_result(sample_course),
            make_result(None),  # national ID
            make_result(None),  # contact number
            make_result(format_student_code("STI", THIS_YEAR, 6)),  # last code
            make_result(CATEGORY_ID),
        ]

        result = await enrollment_service.enroll(EnrollRequest(**enroll_payload), enrolled_by="staff-1")

        assert result.is_new_student is True
        assert result.student_code == format_student_code("STI", THIS_YEAR, 7)
        assert result.total_fee == Decimal("14800.00")
        assert result.paid_amount == Decimal("5000.00")
        assert result.due_amount == Decimal("9800.00")

        enrollment = _added(mock_db, Enrollment)[0]
        assert enrollment.base_course_fee == Decimal("10000.00")
        assert enrollment.sgst_amount == Decimal("900.00")
        assert enrollment.cgst_amount == Decimal("900.00")
        assert enrollment.due_amount == enrollment.total_payable_fee - enrollment.paid_amount

        actions = [(e.entity_type, e.action) for e in _added(mock_db, AuditLog)]
        assert actions == [("student", "created"), ("enrollment", "created")]

        mock_db.commit.assert_awaited_once()
        mock_db.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_enroll_without_payment_skips_ledger(
        self, enrollment_service, mock_db, make_result, sample_course, enroll_payload
    ) -> None:
        """Nothing is booked when no money was collected."""
        enroll_payload["paid_amount"] = "0"
        mock_db.execute.side_effect = [
            make_result(sample_course),
            make_result(None),
            make_result(None),
            make_result(None),
        ]

        result = await enrollment_service.enroll(EnrollRequest(**enroll_payload))

        assert result.paid_amount == Decimal("0.00")
        assert result.due_amount == Decimal("14800.00")
        assert mock_db.execute.await_count == 4
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_enroll_existing_student_reuses_identity(
        self, enrollment_service, mock_db, make_result, sample_course, enroll_payload, existing_student
    ) -> None:
        """A repeat national ID enrolls the stored student."""
        mock_db.execute.side_effect = [
            make_result(sample_course),
            make_result(existing_student),
            make_result(None),  # no open enrollment
            make_result(CATEGORY_ID),
        ]

        result = await enrollment_service.enroll(EnrollRequest(**enroll_payload))

        assert result.is_new_student is False
        assert result.student_id == existing_student.id
        assert result.student_code == "STI202400019"
        assert _added(mock_db, Student) == []
        assert _added(mock_db, User) == []

    @pytest.mark.asyncio
    async def test_enroll_open_enrollment_conflicts(
        self, enrollment_service, mock_db, make_result, sample_course, enroll_payload, existing_student
    ) -> None:
        """A student cannot hold two open enrollments in one course."""
        mock_db.execute.side_effect = [
            make_result(sample_course),
            make_result(existing_student),
            make_result((str(uuid4()),)),
        ]

        with pytest.raises(ConflictError):
            await enrollment_service.enroll(EnrollRequest(**enroll_payload))

        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_enroll_contact_of_other_student_persists_nothing(
        self, enrollment_service, mock_db, make_result, sample_course, enroll_payload, existing_student
    ) -> None:
        """A contact number owned by another student aborts before any write."""
        enroll_payload["national_id_number"] = "999988887777"
        mock_db.execute.side_effect = [
            make_result(sample_course),
            make_result(None),  # national ID
            make_result(existing_student.user),  # contact number
        ]

        with pytest.raises(ConflictError, match="another student"):
            await enrollment_service.enroll(EnrollRequest(**enroll_payload))

        mock_db.add.assert_not_called()
        mock_db.begin_nested.assert_not_called()
        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_enroll_completed_stamps_completion_date(
        self, enrollment_service, mock_db, make_result, sample_course, enroll_payload, existing_student
    ) -> None:
        """Enrolling straight into completed records today as completion date."""
        enroll_payload["status"] = "completed"
        enroll_payload["paid_amount"] = "0"
        mock_db.execute.side_effect = [
            make_result(sample_course),
            make_result(existing_student),
            make_result(None),
        ]

        await enrollment_service.enroll(EnrollRequest(**enroll_payload))

        enrollment = _added(mock_db, Enrollment)[0]
        assert enrollment.status == "completed"
        assert enrollment.completion_date == utc_today()

    @pytest.mark.asyncio
    async def test_enroll_open_status_leaves_completion_date_empty(
        self, enrollment_service, mock_db, make_result, sample_course, enroll_payload, existing_student
    ) -> None:
        """Open enrollments have no completion date."""
        enroll_payload["paid_amount"] = "0"
        mock_db.execute.side_effect = [
            make_result(sample_course),
            make_result(existing_student),
            make_result(None),
        ]

        await enrollment_service.enroll(EnrollRequest(**enroll_payload))

        assert _added(mock_db, Enrollment)[0].completion_date is None

    @pytest.mark.asyncio
    async def test_enroll_course_not_found(
        self, enrollment_service, mock_db, make_result, enroll_payload
    ) -> None:
        """Unknown courses are rejected before anything is written."""
        mock_db.execute.return_value = make_result(None)

        with pytest.raises(NotFoundError):
            await enrollment_service.enroll(EnrollRequest(**enroll_payload))

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_enroll_inactive_course(
        self, enrollment_service, mock_db, make_result, sample_course, enroll_payload
    ) -> None:
        """Inactive courses cannot be enrolled in."""
        sample_course.is_active = False
        mock_db.execute.return_value = make_result(sample_course)

        with pytest.raises(NotFoundError):
            await enrollment_service.enroll(EnrollRequest(**enroll_payload))

    @pytest.mark.asyncio
    async def test_enroll_extra_discount_above_fee(
        self, enrollment_service, mock_db, make_result, sample_course, enroll_payload
    ) -> None:
        """An extra discount of 12000 on a 10000 fee writes nothing."""
        enroll_payload["extra_discount_amount"] = "12000.00"
        mock_db.execute.return_value = make_result(sample_course)

        with pytest.raises(ValidationError) as exc_info:
            await enrollment_service.enroll(EnrollRequest(**enroll_payload))

        assert exc_info.value.field == "extra_discount_amount"
        mock_db.add.assert_not_called()
        mock_db.begin_nested.assert_not_called()
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_enroll_hostel_unavailable(
        self, enrollment_service, mock_db, make_result, sample_course, enroll_payload
    ) -> None:
        """Hostel cannot be opted for a course without one."""
        sample_course.hostel_available = False
        mock_db.execute.return_value = make_result(sample_course)

        with pytest.raises(ValidationError) as exc_info:
            await enrollment_service.enroll(EnrollRequest(**enroll_payload))

        assert exc_info.value.field == "is_hostel_opted"

    @pytest.mark.asyncio
    async def test_enroll_overpayment_rolls_back(
        self, enrollment_service, mock_db, make_result, sample_course, enroll_payload
    ) -> None:
        """Paying more than the total aborts the whole enrollment."""
        enroll_payload["paid_amount"] = "15000.00"
        mock_db.execute.side_effect = [
            make_result(sample_course),
            make_result(None),
            make_result(None),
            make_result(None),
        ]

        with pytest.raises(ValidationError) as exc_info:
            await enrollment_service.enroll(EnrollRequest(**enroll_payload))

        assert exc_info.value.field == "paid_amount"
        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_enroll_overpayment_allowed_by_settings(
        self, mock_db, make_result, sample_course, enroll_payload, test_settings
    ) -> None:
        """Overpayment can be switched on for refund workflows."""
        test_settings.enrollment.allow_overpayment = True
        service = EnrollmentService(mock_db, settings=test_settings, hasher=PasswordHasher(rounds=4))
        enroll_payload["paid_amount"] = "15000.00"
        mock_db.execute.side_effect = [
            make_result(sample_course),
            make_result(None),
            make_result(None),
            make_result(None),
            make_result(CATEGORY_ID),
        ]

        result = await service.enroll(EnrollRequest(**enroll_payload))

        assert result.due_amount == Decimal("-200.00")

    @pytest.mark.asyncio
    async def test_enroll_ledger_failure_rolls_back(
        self, enrollment_service, mock_db, make_result, sample_course, enroll_payload
    ) -> None:
        """A failed ledger write leaves no student or enrollment behind."""
        mock_db.execute.side_effect = [
            make_result(sample_course),
            make_result(None),
            make_result(None),
            make_result(None),
            make_result(None),  # ledger category missing
        ]

        with pytest.raises(PersistenceError):
            await enrollment_service.enroll(EnrollRequest(**enroll_payload))

        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_enroll_database_error_becomes_persistence_error(
        self, enrollment_service, mock_db, make_result, sample_course, enroll_payload
    ) -> None:
        """Driver errors are wrapped and the transaction rolled back."""
        mock_db.execute.side_effect = [
            make_result(sample_course),
            make_result(None),
            make_result(None),
            make_result(None),
        ]
        mock_db.flush.side_effect = [
            None,  # identity savepoint
            OperationalError("INSERT INTO student_enrollments", {}, Exception("connection lost")),
        ]

        with pytest.raises(PersistenceError) as exc_info:
            await enrollment_service.enroll(EnrollRequest(**enroll_payload))

        assert isinstance(exc_info.value.original_error, OperationalError)
        mock_db.rollback.assert_awaited_once()


class TestCalculateFees:
    """Tests for fee previews."""

    @pytest.mark.asyncio
    async def test_calculate_fees_igst(
        self, enrollment_service, mock_db, make_result, sample_course
    ) -> None:
        """Preview returns the IGST split without writing anything."""
        mock_db.execute.return_value = make_result(sample_course)

        result = await enrollment_service.calculate_fees(
            FeeCalculationRequest(
                course_id=sample_course.id,
                is_hostel_opted=True,
                is_mess_opted=True,
                igst_applicable=True,
            )
        )

        assert result.igst_amount == Decimal("1800.00")
        assert result.sgst_amount == Decimal("0.00")
        assert result.total_payable_fee == Decimal("14800.00")
        mock_db.add.assert_not_called()
        mock_db.commit.assert_not_awaited()


class TestTopUp:
    """Tests for additional payments."""

    @pytest.mark.asyncio
    async def test_apply_top_up(
        self, enrollment_service, mock_db, make_result, open_enrollment
    ) -> None:
        """A top-up reduces the due amount and is audited."""
        mock_db.execute.side_effect = [
            make_result(open_enrollment),
            make_result(CATEGORY_ID),
        ]

        result = await enrollment_service.apply_top_up(
            open_enrollment.id, Decimal("800.00"), "cash", paid_by="staff-1"
        )

        assert result.new_paid_amount == Decimal("5800.00")
        assert result.new_due_amount == Decimal("9000.00")
        assert [e.action for e in _added(mock_db, AuditLog)] == ["payment_recorded"]
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_top_up_exceeding_due_rejected(
        self, enrollment_service, mock_db, make_result, open_enrollment
    ) -> None:
        """Top-ups cannot push the due amount below zero."""
        mock_db.execute.return_value = make_result(open_enrollment)

        with pytest.raises(ValidationError):
            await enrollment_service.apply_top_up(open_enrollment.id, Decimal("9800.01"))

        assert open_enrollment.paid_amount == Decimal("5000.00")
        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_top_up_unknown_enrollment(
        self, enrollment_service, mock_db, make_result
    ) -> None:
        """Missing enrollments are reported as not found."""
        mock_db.execute.return_value = make_result(None)

        with pytest.raises(NotFoundError):
            await enrollment_service.apply_top_up(str(uuid4()), Decimal("100"))


class TestUpdateEnrollment:
    """Tests for enrollment updates."""

    @pytest.mark.asyncio
    async def test_complete_stamps_completion_date(
        self, enrollment_service, mock_db, make_result, open_enrollment
    ) -> None:
        """Completing without a date records today."""
        mock_db.execute.return_value = make_result(open_enrollment)

        result = await enrollment_service.update_enrollment(
            open_enrollment.id, UpdateEnrollmentRequest(status="completed")
        )

        assert result.status == "completed"
        assert result.completion_date is not None
        assert result.top_up is None
        assert [e.action for e in _added(mock_db, AuditLog)] == ["updated"]

    @pytest.mark.asyncio
    async def test_update_with_payment_books_top_up(
        self, enrollment_service, mock_db, make_result, open_enrollment
    ) -> None:
        """paid_amount on update is an additional payment, not a new total."""
        mock_db.execute.side_effect = [
            make_result(open_enrollment),
            make_result(CATEGORY_ID),
        ]

        result = await enrollment_service.update_enrollment(
            open_enrollment.id,
            UpdateEnrollmentRequest(remark="Second installment", paid_amount=Decimal("1000.00")),
        )

        assert result.paid_amount == Decimal("6000.00")
        assert result.due_amount == Decimal("8800.00")
        assert result.top_up is not None
        assert result.top_up.new_due_amount == Decimal("8800.00")
        assert open_enrollment.remark == "Second installment"

    @pytest.mark.asyncio
    async def test_unset_fields_left_alone(
        self, enrollment_service, mock_db, make_result, open_enrollment
    ) -> None:
        """Fields not in the request are not cleared."""
        open_enrollment.remark = "Keep me"
        mock_db.execute.return_value = make_result(open_enrollment)

        await enrollment_service.update_enrollment(
            open_enrollment.id, UpdateEnrollmentRequest(status="ongoing")
        )

        assert open_enrollment.remark == "Keep me"
        assert _added(mock_db, AuditLog) == []

    @pytest.mark.asyncio
    async def test_zero_payment_books_nothing(
        self, enrollment_service, mock_db, make_result, open_enrollment
    ) -> None:
        """paid_amount of zero is accepted and leaves the ledger alone."""
        mock_db.execute.return_value = make_result(open_enrollment)

        result = await enrollment_service.update_enrollment(
            open_enrollment.id,
            UpdateEnrollmentRequest(remark="Called about dues", paid_amount=Decimal("0")),
        )

        assert result.top_up is None
        assert result.paid_amount == Decimal("5000.00")
        assert result.due_amount == Decimal("9800.00")
        assert mock_db.execute.await_count == 1
        changes = _added(mock_db, AuditLog)[0].changes
        assert "paid_amount" not in changes


class TestReadSide:
    """Tests for lookups."""

    @pytest.mark.asyncio
    async def test_check_national_id_unknown(
        self, enrollment_service, mock_db, make_result
    ) -> None:
        """Unknown national IDs report exists=False."""
        mock_db.execute.return_value = make_result(None)

        result = await enrollment_service.check_national_id("111122223333")

        assert result.exists is False
        assert result.student is None

    @pytest.mark.asyncio
    async def test_payment_history_rejects_foreign_enrollment(
        self, enrollment_service, mock_db, make_result, existing_student
    ) -> None:
        """An enrollment of another student is not found."""
        mock_db.execute.return_value = make_result(existing_student)

        with pytest.raises(NotFoundError):
            await enrollment_service.get_payment_history(existing_student.id, str(uuid4()))

    @pytest.mark.asyncio
    async def test_toggle_login(
        self, enrollment_service, mock_db, make_result, existing_student
    ) -> None:
        """Disabling login is persisted and audited."""
        mock_db.execute.return_value = make_result(existing_student)

        result = await enrollment_service.toggle_student_login(
            existing_student.id, False, updated_by="staff-1"
        )

        assert result.login_enabled is False
        assert existing_student.login_enabled is False
        assert [e.action for e in _added(mock_db, AuditLog)] == ["login_toggled"]
        mock_db.commit.assert_awaited_once()


class TestListStudents:
    """Tests for the student list."""

    @pytest.fixture
    def settled_enrollment(self, existing_student, sample_course) -> Enrollment:
        """Completed, fully paid enrollment of the same student."""
        enrollment = Enrollment(
            id=str(uuid4()),
            student_id=existing_student.id,
            course_id=sample_course.id,
            status="completed",
            enrollment_date=date(2024, 6, 1),
            total_payable_fee=Decimal("11800.00"),
            paid_amount=Decimal("11800.00"),
            due_amount=Decimal("0.00"),
        )
        enrollment.student = existing_student
        enrollment.course = sample_course
        return enrollment

    @pytest.mark.asyncio
    async def test_groups_enrollments_per_student(
        self, enrollment_service, mock_db, make_result, existing_student, open_enrollment, settled_enrollment
    ) -> None:
        """Each student is listed once with all courses and the summed due."""
        mock_db.execute.side_effect = [make_result(1), make_result([existing_student])]

        students, total = await enrollment_service.list_students()

        assert total == 1
        assert len(students) == 1
        item = students[0]
        assert item.student_code == "STI202400019"
        assert item.contact_number == "9876543210"
        assert [c.status for c in item.courses] == ["ongoing", "completed"]
        assert item.courses[0].title == "Welding Technician"
        assert item.total_due_amount == Decimal("9800.00")
        assert item.fee_status == "Due"
        assert item.login_enabled is True

    @pytest.mark.asyncio
    async def test_status_filter_limits_reported_courses(
        self, enrollment_service, mock_db, make_result, existing_student, open_enrollment, settled_enrollment
    ) -> None:
        """Only enrollments matching the filter are reported and summed."""
        mock_db.execute.side_effect = [make_result(1), make_result([existing_student])]

        students, _ = await enrollment_service.list_students(status=EnrollmentStatus.COMPLETED)

        item = students[0]
        assert [c.enrollment_id for c in item.courses] == [settled_enrollment.id]
        assert item.total_due_amount == Decimal("0.00")
        assert item.fee_status == "Paid"

    @pytest.mark.asyncio
    async def test_filters_and_pagination_reach_query(
        self, enrollment_service, mock_db, make_result
    ) -> None:
        """Search, course filter and paging are applied in SQL."""
        mock_db.execute.side_effect = [make_result(0), make_result([])]
        course_id = str(uuid4())

        students, total = await enrollment_service.list_students(
            search="asha", course_id=course_id, limit=5, offset=10
        )

        assert students == []
        assert total == 0
        statement = mock_db.execute.await_args_list[1].args[0]
        params = statement.compile().params
        assert "%asha%" in params.values()
        assert course_id in params.values()
        assert {5, 10} <= set(params.values())
