# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities.

All timestamps are stored in UTC (PostgreSQL TIMESTAMPTZ) and all Python
datetimes are timezone-aware. Calendar dates (enrollment dates, payment
dates, the year embedded in student codes) are taken from the UTC clock.

Usage:
    from src.utils.datetime import utc_now, utc_today

    created_at = Column(DateTime(timezone=True), default=utc_now)
    enrollment.enrollment_date = utc_today()
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Example:
        >>> utc_now().tzinfo
        datetime.timezone.utc
    """
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Get the current UTC calendar date."""
    return utc_now().date()
