# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for password hashing utilities.

Tests the PasswordHasher class.
"""

import pytest

from src.domains.auth.password import PasswordHasher


@pytest.fixture
def hasher() -> PasswordHasher:
    """Create a fast hasher with the minimum cost factor."""
    return PasswordHasher(rounds=4)


class TestPasswordHasher:
    """Tests for PasswordHasher class."""

    def test_hash_password_returns_bcrypt_hash(self, hasher: PasswordHasher) -> None:
        """Test that hashing returns a bcrypt hash string."""
        hashed = hasher.hash("test_password_123")

        assert isinstance(hashed, str)
        assert hashed.startswith("$2b$")  # bcrypt prefix
        assert len(hashed) == 60  # bcrypt hash length

    def test_hash_produces_different_hashes_for_same_password(self, hasher: PasswordHasher) -> None:
        """Test that hashing the same password produces different hashes (due to salt)."""
        assert hasher.hash("same") != hasher.hash("same")

    def test_verify_correct_password(self, hasher: PasswordHasher) -> None:
        """Test that verification succeeds with correct password."""
        hashed = hasher.hash("correct_password")

        assert hasher.verify("correct_password", hashed) is True

    def test_verify_wrong_password(self, hasher: PasswordHasher) -> None:
        """Test that verification fails with wrong password."""
        hashed = hasher.hash("correct_password")

        assert hasher.verify("wrong_password", hashed) is False

    def test_verify_malformed_hash(self, hasher: PasswordHasher) -> None:
        """Test that a malformed hash fails verification instead of raising."""
        assert hasher.verify("password", "not-a-bcrypt-hash") is False

    def test_hash_empty_password_raises(self, hasher: PasswordHasher) -> None:
        """Test that hashing an empty password raises ValueError."""
        with pytest.raises(ValueError):
            hasher.hash("")

    def test_default_credential_is_contact_number(self, hasher: PasswordHasher) -> None:
        """Test that new identities can log in with their contact number."""
        hashed = hasher.default_credential("9876543210")

        assert hasher.verify("9876543210", hashed) is True
