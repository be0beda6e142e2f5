# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for student code generation."""

import pytest

from src.domains.enrollment.exceptions import PersistenceError
from src.domains.enrollment.sequence import (
    StudentCodeGenerator,
    format_student_code,
    next_student_code,
    parse_student_code,
)


class TestStudentCodeFormat:
    """Tests for formatting and parsing codes."""

    def test_format_pads_year_and_counter(self) -> None:
        """Codes are prefix + 4-digit year + 5-digit counter."""
        assert format_student_code("STI", 2025, 7) == "STI202500007"

    def test_format_rejects_counter_overflow(self) -> None:
        """Counter cannot exceed five digits."""
        with pytest.raises(PersistenceError):
            format_student_code("STI", 2025, 100000)

    def test_parse_valid_code(self) -> None:
        """Valid codes split into year and counter."""
        assert parse_student_code("STI", "STI202500007") == (2025, 7)

    @pytest.mark.parametrize(
        "code",
        ["XYZ202500007", "STI2025007", "STI2025ABCDE", "STI2025000070"],
    )
    def test_parse_malformed_code(self, code: str) -> None:
        """Codes with a foreign prefix or wrong layout are ignored."""
        assert parse_student_code("STI", code) is None


class TestNextStudentCode:
    """Tests for next_student_code."""

    def test_first_code_of_empty_table(self) -> None:
        """No previous code starts the counter at 1."""
        assert next_student_code("STI", None, 2025) == "STI202500001"

    def test_increments_within_year(self) -> None:
        """The counter follows the last code of the same year."""
        assert next_student_code("STI", "STI202500006", 2025) == "STI202500007"

    def test_resets_on_new_year(self) -> None:
        """A new year restarts the counter."""
        assert next_student_code("STI", "STI202500412", 2026) == "STI202600001"

    def test_ignores_malformed_last_code(self) -> None:
        """A legacy code that does not parse restarts the counter."""
        assert next_student_code("STI", "STI-LEGACY", 2025) == "STI202500001"


class TestStudentCodeGenerator:
    """Tests for StudentCodeGenerator."""

    @pytest.mark.asyncio
    async def test_next_code_reads_highest_code(self, mock_db, make_result) -> None:
        """The next code follows the highest stored code."""
        mock_db.execute.return_value = make_result("STI202500041")
        generator = StudentCodeGenerator(mock_db, "STI")

        code = await generator.next_code(2025)

        assert code == "STI202500042"
        mock_db.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_next_code_includes_archived_students(self, mock_db, make_result) -> None:
        """Codes of soft-deleted students are never handed out again."""
        mock_db.execute.return_value = make_result(None)
        generator = StudentCodeGenerator(mock_db, "STI")

        await generator.next_code(2025)

        statement = mock_db.execute.await_args.args[0]
        assert statement.get_execution_options().get("include_deleted") is True
