# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication helpers.

Exports:
    PasswordHasher: bcrypt hashing for identity credentials.
    JWTManager: JWT access token creation and validation.
"""

from src.domains.auth.jwt import (
    InvalidTokenError,
    JWTManager,
    TokenExpiredError,
    TokenPayload,
)
from src.domains.auth.password import PasswordHasher

__all__ = [
    "PasswordHasher",
    "JWTManager",
    "TokenPayload",
    "TokenExpiredError",
    "InvalidTokenError",
]
