# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database migrations package.

Revisions live in ``versions/``. They can be applied with the alembic CLI
through ``env.py`` or programmatically with ``runner.run_migrations``.
"""
