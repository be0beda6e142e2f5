# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student code generation.

Codes look like ``STI202500007``: prefix, four-digit year, five-digit
counter. The counter restarts at 00001 every year.

Reading the highest code and adding one is not safe on its own when two
enrollments run at once. ``students.student_code`` carries a unique
constraint, and the identity resolver inserts the student inside a
SAVEPOINT, re-asking for a code when the insert collides. Codes are
collision-free but may skip numbers when a transaction rolls back.

The year is always the current UTC year, never the enrollment date, and
only codes of that year are read back.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.enrollment.exceptions import PersistenceError
from src.infrastructure.database.models.identity import Student
from src.utils.datetime import utc_today

logger = logging.getLogger(__name__)

YEAR_DIGITS = 4
COUNTER_DIGITS = 5
MAX_COUNTER = 10**COUNTER_DIGITS - 1


def format_student_code(prefix: str, year: int, counter: int) -> str:
    """Render a student code.

    Raises:
        PersistenceError: If the counter no longer fits in five digits.
    """
    if counter > MAX_COUNTER:
        raise PersistenceError(f"Student code counter exhausted for year {year}")
    return f"{prefix}{year:0{YEAR_DIGITS}d}{counter:0{COUNTER_DIGITS}d}"


def parse_student_code(prefix: str, code: str) -> tuple[int, int] | None:
    """Split a student code into (year, counter).

    Returns:
        None when the code does not follow the prefix + year + counter layout.
    """
    body = code[len(prefix) :]
    if (
        not code.startswith(prefix)
        or len(body) != YEAR_DIGITS + COUNTER_DIGITS
        or not body.isdigit()
    ):
        return None
    return int(body[:YEAR_DIGITS]), int(body[YEAR_DIGITS:])


def next_student_code(prefix: str, last_code: str | None, year: int) -> str:
    """Compute the code that follows ``last_code`` in ``year``."""
    parsed = parse_student_code(prefix, last_code) if last_code else None
    if parsed is not None and parsed[0] == year:
        return format_student_code(prefix, year, parsed[1] + 1)
    return format_student_code(prefix, year, 1)


class StudentCodeGenerator:
    """Mints the next student code from the codes already stored.

    Attributes:
        db: Async database session of the enclosing unit of work.
        prefix: Code prefix, e.g. ``STI``.
    """

    def __init__(self, db: AsyncSession, prefix: str) -> None:
        self.db = db
        self.prefix = prefix

    async def next_code(self, year: int | None = None) -> str:
        """Get the next student code.

        Archived students are included so a code is never handed out twice.

        Args:
            year: Year to mint for. Defaults to the current UTC year.

        Returns:
            The next code for the year.
        """
        year = year or utc_today().year
        last_code = await self._last_code(year)
        code = next_student_code(self.prefix, last_code, year)
        logger.debug("Next student code: last=%s, next=%s", last_code, code)
        return code

    async def _last_code(self, year: int) -> str | None:
        # Fixed-width layout makes lexical order match counter order
        result = await self.db.execute(
            select(Student.student_code)
            .where(Student.student_code.like(f"{self.prefix}{year:0{YEAR_DIGITS}d}%"))
            .order_by(Student.student_code.desc())
            .limit(1)
            .execution_options(include_deleted=True)
        )
        return result.scalar_one_or_none()
