# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for the institute back office.

This package contains domain services that encapsulate business logic.
Each domain module coordinates repositories inside a single unit of work.

Domains:
    enrollment: Fee calculation, student identity, enrollment and ledger.
    auth: Password hashing and JWT access tokens.
    audit: Append-only change events.
"""
