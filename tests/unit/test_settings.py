# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for application settings."""

from decimal import Decimal

import pytest
from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from src.core.config.settings import (
    DatabaseSettings,
    EnrollmentSettings,
    JWTSettings,
    Settings,
    TaxSettings,
    clear_settings_cache,
    get_settings,
)


class TestSettings:
    """Tests for settings loading."""

    def test_tax_rates_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Tax rates are read from TAX_* variables."""
        monkeypatch.setenv("TAX_SGST_PERCENTAGE", "6")
        monkeypatch.setenv("TAX_CGST_PERCENTAGE", "6")
        monkeypatch.setenv("TAX_IGST_PERCENTAGE", "12")

        tax = TaxSettings()

        assert tax.sgst_percentage == Decimal("6")
        assert tax.igst_percentage == Decimal("12")

    def test_tax_rate_out_of_range_rejected(self) -> None:
        """Percentages above 100 are invalid."""
        with pytest.raises(PydanticValidationError):
            TaxSettings(igst_percentage=Decimal("180"))

    def test_enrollment_defaults(self) -> None:
        """Defaults match the STI code layout and strict overpayment."""
        enrollment = EnrollmentSettings()

        assert enrollment.student_code_prefix == "STI"
        assert enrollment.allow_overpayment is False
        assert enrollment.overpayment_tolerance == Decimal("0.00")
        assert enrollment.fee_income_category_slug == "course-fee"

    def test_database_url_built_from_parts(self) -> None:
        """The asyncpg URL is assembled from DB_* parts."""
        db = DatabaseSettings(
            user="u",
            password=SecretStr("p"),
            host="db",
            port=6543,
            database="institute",
        )

        assert db.url == "postgresql+asyncpg://u:p@db:6543/institute"
        assert db.sync_url == "postgresql://u:p@db:6543/institute"

    def test_production_requires_jwt_secret(self) -> None:
        """Production refuses the default JWT secret."""
        with pytest.raises(PydanticValidationError):
            Settings(environment="production")

        settings = Settings(
            environment="production",
            jwt=JWTSettings(secret_key=SecretStr("a-real-secret")),
        )
        assert settings.is_production is True

    def test_get_settings_is_cached(self) -> None:
        """get_settings returns a singleton until the cache is cleared."""
        clear_settings_cache()
        first = get_settings()

        assert get_settings() is first

        clear_settings_cache()
        assert get_settings() is not first
