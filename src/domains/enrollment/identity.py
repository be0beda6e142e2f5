# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identity resolution for enrollments.

The national ID number is the dedup key: a person never gets two student
records. A contact number belongs to at most one student. New identities
get the bcrypt hash of their contact number as their first credential.

The resolver never commits. It runs inside the enrollment unit of work and
leaves commit or rollback to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.domains.auth.password import PasswordHasher
from src.domains.enrollment.exceptions import ConflictError, PersistenceError
from src.domains.enrollment.sequence import StudentCodeGenerator
from src.infrastructure.database.models.base import new_uuid
from src.infrastructure.database.models.identity import Student, User
from src.models.common import UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StudentProfile:
    """Profile fields used when a new student has to be created."""

    name_on_id: str
    date_of_birth: date
    gender: str
    address: str
    state: str
    city: str
    pincode: str
    enrollment_date: date
    father_name: str | None = None
    mother_name: str | None = None
    email: str | None = None
    pan_number: str | None = None


@dataclass
class ResolvedIdentity:
    """Outcome of identity resolution."""

    user: User
    student: Student
    is_new: bool


def split_name(name_on_id: str) -> tuple[str, str]:
    """Split a full name into (first name, rest)."""
    parts = name_on_id.split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


class IdentityResolver:
    """Finds or creates the User and Student behind an enrollment.

    Attributes:
        db: Async database session of the enclosing unit of work.
    """

    def __init__(
        self,
        db: AsyncSession,
        codes: StudentCodeGenerator,
        hasher: PasswordHasher,
        max_attempts: int = 5,
    ) -> None:
        self.db = db
        self._codes = codes
        self._hasher = hasher
        self._max_attempts = max_attempts

    async def resolve(
        self,
        national_id_number: str,
        contact_number: str,
        profile: StudentProfile,
        created_by: str | None = None,
    ) -> ResolvedIdentity:
        """Resolve the identity for an enrollment.

        Args:
            national_id_number: Dedup key of the person.
            contact_number: Login contact number.
            profile: Fields for a new student profile.
            created_by: ID of the staff user performing the enrollment.

        Returns:
            The existing student untouched, or a newly created one.

        Raises:
            ConflictError: If the national ID belongs to an archived student,
                or the contact number belongs to another student or to staff.
            PersistenceError: If no free student code could be minted.
        """
        existing = await self._find_by_national_id(national_id_number)
        if existing is not None:
            return self._reuse(existing)

        user = await self._find_reusable_user(contact_number)
        return await self._create(national_id_number, contact_number, profile, user, created_by)

    async def _find_by_national_id(self, national_id_number: str) -> Student | None:
        result = await self.db.execute(
            select(Student)
            .where(Student.national_id_number == national_id_number)
            .options(selectinload(Student.user))
            .execution_options(include_deleted=True)
        )
        return result.scalar_one_or_none()

    def _reuse(self, student: Student) -> ResolvedIdentity:
        if student.is_deleted:
            raise ConflictError(
                "National ID number belongs to an archived student; restore it instead"
            )
        logger.info(
            "Reusing student: student_id=%s, code=%s",
            student.id,
            student.student_code,
        )
        return ResolvedIdentity(user=student.user, student=student, is_new=False)

    async def _find_reusable_user(self, contact_number: str) -> User | None:
        """Look up the contact number and decide whether it can be reused."""
        # An archived profile still owns its contact number
        result = await self.db.execute(
            select(User)
            .where(User.contact_number == contact_number)
            .options(selectinload(User.student))
            .execution_options(include_deleted=True)
        )
        user = result.scalar_one_or_none()
        if user is None:
            return None

        if user.student is not None:
            raise ConflictError("Contact number already registered with another student")
        if user.role != UserRole.STUDENT.value:
            raise ConflictError("Contact number already registered with a staff account")
        return user

    async def _create(
        self,
        national_id_number: str,
        contact_number: str,
        profile: StudentProfile,
        user: User | None,
        created_by: str | None,
    ) -> ResolvedIdentity:
        for attempt in range(1, self._max_attempts + 1):
            code = await self._codes.next_code()
            new_user = user is None
            if new_user:
                user = self._new_user(contact_number, profile, created_by)
            student = self._new_student(user.id, code, national_id_number, profile, created_by)

            try:
                async with self.db.begin_nested():
                    if new_user:
                        self.db.add(user)
                    self.db.add(student)
                    await self.db.flush()
            except IntegrityError as e:
                logger.warning(
                    "Student insert collided: attempt=%d, code=%s, error=%s",
                    attempt,
                    code,
                    e.orig,
                )
                if new_user:
                    user = None

                # A duplicate submission for the same person may have won
                existing = await self._find_by_national_id(national_id_number)
                if existing is not None:
                    return self._reuse(existing)

                user = await self._find_reusable_user(contact_number) or user
                continue

            logger.info(
                "Created student: student_id=%s, code=%s, new_user=%s",
                student.id,
                code,
                new_user,
            )
            return ResolvedIdentity(user=user, student=student, is_new=True)

        raise PersistenceError(
            f"Could not mint a unique student code after {self._max_attempts} attempts"
        )

    def _new_user(
        self,
        contact_number: str,
        profile: StudentProfile,
        created_by: str | None,
    ) -> User:
        first_name, last_name = split_name(profile.name_on_id)
        return User(
            id=new_uuid(),
            first_name=first_name,
            last_name=last_name,
            contact_number=contact_number,
            email=profile.email,
            password_hash=self._hasher.default_credential(contact_number),
            role=UserRole.STUDENT.value,
            is_active=True,
            created_by=created_by,
        )

    @staticmethod
    def _new_student(
        user_id: str,
        code: str,
        national_id_number: str,
        profile: StudentProfile,
        created_by: str | None,
    ) -> Student:
        return Student(
            id=new_uuid(),
            user_id=user_id,
            student_code=code,
            name_on_id=profile.name_on_id,
            father_name=profile.father_name,
            mother_name=profile.mother_name,
            date_of_birth=profile.date_of_birth,
            gender=profile.gender,
            address=profile.address,
            state=profile.state,
            city=profile.city,
            pincode=profile.pincode,
            enrollment_date=profile.enrollment_date,
            national_id_number=national_id_number,
            pan_number=profile.pan_number,
            login_enabled=True,
            created_by=created_by,
        )
