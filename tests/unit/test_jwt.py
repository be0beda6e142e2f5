# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for JWT token utilities.

Tests the JWTManager class and token operations.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from jose import jwt
from pydantic import SecretStr

from src.domains.auth.jwt import (
    InvalidTokenError,
    JWTManager,
    TokenExpiredError,
    TokenPayload,
)


@pytest.fixture
def jwt_settings() -> MagicMock:
    """Create mock JWT settings."""
    settings = MagicMock()
    settings.secret_key = SecretStr("test-secret-key-for-jwt-testing")
    settings.algorithm = "HS256"
    settings.access_token_expire_minutes = 30
    return settings


@pytest.fixture
def jwt_manager(jwt_settings: MagicMock) -> JWTManager:
    """Create JWT manager with test settings."""
    return JWTManager(jwt_settings)


class TestJWTManager:
    """Tests for JWTManager class."""

    def test_access_token_round_trips_claims(self, jwt_manager: JWTManager) -> None:
        """Test that a created token decodes to the same subject and roles."""
        user_id = str(uuid4())

        token = jwt_manager.create_access_token(user_id=user_id, roles=["admin"])
        payload = jwt_manager.decode_token(token)

        assert isinstance(payload, TokenPayload)
        assert payload.sub == user_id
        assert payload.type == "access"
        assert payload.roles == ["admin"]
        assert payload.exp - payload.iat == 30 * 60

    def test_expired_token_raises(self, jwt_settings: MagicMock) -> None:
        """Test that an expired token is rejected."""
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "sub": "user",
                "type": "access",
                "roles": [],
                "exp": int((now - timedelta(minutes=1)).timestamp()),
                "iat": int((now - timedelta(minutes=31)).timestamp()),
                "jti": "abc",
            },
            "test-secret-key-for-jwt-testing",
            algorithm="HS256",
        )

        with pytest.raises(TokenExpiredError):
            JWTManager(jwt_settings).decode_token(token)

    def test_wrong_signature_raises(self, jwt_manager: JWTManager, jwt_settings: MagicMock) -> None:
        """Test that a token signed with another key is rejected."""
        jwt_settings.secret_key = SecretStr("another-secret")
        token = JWTManager(jwt_settings).create_access_token(user_id="user")

        jwt_settings.secret_key = SecretStr("test-secret-key-for-jwt-testing")
        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token(token)

    def test_non_access_token_rejected(self) -> None:
        """Test that refresh or other token types are rejected."""
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "sub": "user",
                "type": "refresh",
                "exp": int((now + timedelta(minutes=5)).timestamp()),
                "iat": int(now.timestamp()),
                "jti": "abc",
            },
            "test-secret-key-for-jwt-testing",
            algorithm="HS256",
        )
        settings = MagicMock()
        settings.secret_key = SecretStr("test-secret-key-for-jwt-testing")
        settings.algorithm = "HS256"

        with pytest.raises(InvalidTokenError):
            JWTManager(settings).decode_token(token)

    def test_garbage_token_raises(self, jwt_manager: JWTManager) -> None:
        """Test that a malformed token is rejected."""
        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token("not-a-jwt")
