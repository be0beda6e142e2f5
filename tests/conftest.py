# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

from datetime import date
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from pydantic import SecretStr

from src.core.config.settings import (
    EnrollmentSettings,
    JWTSettings,
    Settings,
    TaxSettings,
)
from src.infrastructure.database.models.course import Course


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Provide settings with fixed tax rates and a test JWT secret."""
    return Settings(
        environment="development",
        debug=True,
        tax=TaxSettings(
            sgst_percentage=Decimal("9"),
            cgst_percentage=Decimal("9"),
            igst_percentage=Decimal("18"),
        ),
        enrollment=EnrollmentSettings(),
        jwt=JWTSettings(secret_key=SecretStr("test-secret-key-for-jwt-testing")),
    )


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires services)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def mock_db() -> AsyncMock:
    """Create mock database session.

    ``begin_nested`` is a plain context manager stand-in so SAVEPOINT
    blocks run their body and let exceptions through.
    """
    db = AsyncMock()
    db.add = MagicMock()
    db.add_all = MagicMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.execute = AsyncMock()

    savepoint = MagicMock()
    savepoint.__aenter__ = AsyncMock(return_value=None)
    savepoint.__aexit__ = AsyncMock(return_value=False)
    db.begin_nested = MagicMock(return_value=savepoint)
    return db


def _make_result(value: Any) -> MagicMock:
    result = MagicMock()
    result.scalar.return_value = value
    result.scalar_one_or_none.return_value = value
    result.first.return_value = value
    result.scalars.return_value.all.return_value = value if isinstance(value, list) else []
    return result


@pytest.fixture
def make_result():
    """Provide a factory for mock execute() results.

    The result returns ``value`` from scalar, scalar_one_or_none, first
    and scalars().all().
    """
    return _make_result


@pytest.fixture
def sample_course() -> Course:
    """Provide a course: 10000 base fee, hostel 2000, mess 1000."""
    return Course(
        id=str(uuid4()),
        title="Welding Technician",
        slug="welding-technician",
        base_course_fee=Decimal("10000.00"),
        is_discounted=False,
        discount_percentage=Decimal("0.00"),
        discount_amount=Decimal("0.00"),
        discounted_course_fee=Decimal("10000.00"),
        hostel_available=True,
        hostel_fee=Decimal("2000.00"),
        mess_available=True,
        mess_fee=Decimal("1000.00"),
        total_fee=Decimal("13000.00"),
        is_active=True,
        display_order=1,
    )


@pytest.fixture
def enroll_payload(sample_course: Course) -> dict[str, Any]:
    """Provide a valid enrollment request body."""
    return {
        "national_id_number": "123412341234",
        "contact_number": "9876543210",
        "email": "asha@example.com",
        "name_on_id": "Asha Kumari Verma",
        "father_name": "Ravi Verma",
        "date_of_birth": "2004-05-17",
        "gender": "female",
        "address": "12 Station Road",
        "state": "Bihar",
        "city": "Patna",
        "pincode": "800001",
        "course_id": sample_course.id,
        "enrollment_date": date(2025, 7, 1).isoformat(),
        "is_hostel_opted": True,
        "is_mess_opted": True,
        "paid_amount": "5000.00",
        "payment_method": "upi",
    }
