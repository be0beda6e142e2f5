"""Institute back office.

Student enrollment with fee snapshots, GST breakdowns and an income ledger
for course fee payments.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
