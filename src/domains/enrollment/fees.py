# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fee calculation for course enrollments.

This module is pure: no I/O, no clock, no settings lookups. Callers pass
the course fee snapshot, the enrollment options and the tax rates, and get
back a fully rounded FeeBreakdown.

Tax applies to the course fee after discounts only. Hostel and mess fees
are added on top untaxed. Exactly one tax regime is active per enrollment:
IGST for inter-state students, SGST plus CGST otherwise.

Example:
    >>> snapshot = CourseFeeSnapshot(
    ...     base_course_fee=Decimal("10000"),
    ...     course_discount_percentage=Decimal("0"),
    ...     course_discount_amount=Decimal("0"),
    ...     discounted_course_fee=Decimal("10000"),
    ...     hostel_fee=Decimal("2000"),
    ...     mess_fee=Decimal("1000"),
    ... )
    >>> options = FeeOptions(hostel_opted=True, mess_opted=True)
    >>> rates = TaxRates(Decimal("9"), Decimal("9"), Decimal("18"))
    >>> compute_fees(snapshot, options, rates).total_payable_fee
    Decimal('14800.00')
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from src.domains.enrollment.exceptions import ValidationError

if TYPE_CHECKING:
    from src.core.config.settings import TaxSettings
    from src.infrastructure.database.models.course import Course

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def round_money(value: Decimal) -> Decimal:
    """Round a currency value to 2 decimal places, half-up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _percent_of(amount: Decimal, percentage: Decimal) -> Decimal:
    return round_money(amount * percentage / HUNDRED)


@dataclass(frozen=True)
class CourseFeeSnapshot:
    """Fee template copied from a course at enrollment time."""

    base_course_fee: Decimal
    course_discount_percentage: Decimal
    course_discount_amount: Decimal
    discounted_course_fee: Decimal
    hostel_fee: Decimal
    mess_fee: Decimal


@dataclass(frozen=True)
class FeeOptions:
    """Enrollment-specific choices that affect the fee."""

    extra_discount_amount: Decimal = ZERO
    hostel_opted: bool = False
    mess_opted: bool = False
    igst_applicable: bool = False


@dataclass(frozen=True)
class TaxRates:
    """Tax percentages in effect."""

    sgst_percentage: Decimal
    cgst_percentage: Decimal
    igst_percentage: Decimal

    @classmethod
    def from_settings(cls, settings: TaxSettings) -> TaxRates:
        return cls(
            sgst_percentage=settings.sgst_percentage,
            cgst_percentage=settings.cgst_percentage,
            igst_percentage=settings.igst_percentage,
        )


@dataclass(frozen=True)
class FeeBreakdown:
    """Tax-inclusive fee breakdown for one enrollment.

    Percentages of the inactive regime are zero, so the breakdown records
    exactly the rates that were charged.
    """

    discounted_course_fee: Decimal
    extra_discount_amount: Decimal
    hostel_fee: Decimal
    mess_fee: Decimal
    pre_tax_total_fee: Decimal
    taxable_amount: Decimal
    igst_applicable: bool
    sgst_percentage: Decimal
    cgst_percentage: Decimal
    igst_percentage: Decimal
    sgst_amount: Decimal
    cgst_amount: Decimal
    igst_amount: Decimal
    total_tax_amount: Decimal
    total_payable_fee: Decimal


def snapshot_from_course(course: Course) -> CourseFeeSnapshot:
    """Copy the fee template of a course into an immutable snapshot.

    Args:
        course: Course row as currently stored.

    Returns:
        The snapshot to compute fees from and persist on the enrollment.
    """
    base_fee = round_money(course.base_course_fee)
    percentage = course.discount_percentage or ZERO

    return CourseFeeSnapshot(
        base_course_fee=base_fee,
        course_discount_percentage=percentage,
        course_discount_amount=_percent_of(base_fee, percentage),
        discounted_course_fee=round_money(course.discounted_course_fee),
        hostel_fee=round_money(course.hostel_fee or ZERO),
        mess_fee=round_money(course.mess_fee or ZERO),
    )


def check_extra_discount(snapshot: CourseFeeSnapshot, amount: Decimal) -> Decimal:
    """Validate an extra discount against the discounted course fee.

    Returns:
        The discount rounded to 2 decimal places.

    Raises:
        ValidationError: If the discount is negative or exceeds the fee.
    """
    extra_discount = round_money(amount)
    if extra_discount < ZERO:
        raise ValidationError(
            "Extra discount cannot be negative",
            field="extra_discount_amount",
        )
    if extra_discount > snapshot.discounted_course_fee:
        raise ValidationError(
            f"Extra discount {extra_discount} exceeds the discounted course fee "
            f"{snapshot.discounted_course_fee}",
            field="extra_discount_amount",
        )
    return extra_discount


def compute_fees(
    snapshot: CourseFeeSnapshot,
    options: FeeOptions,
    rates: TaxRates,
) -> FeeBreakdown:
    """Compute the fee breakdown for an enrollment.

    Args:
        snapshot: Course fee snapshot.
        options: Extra discount, accommodation choices and tax regime.
        rates: Tax percentages.

    Returns:
        The rounded breakdown. ``total_payable_fee`` always equals
        ``taxable_amount + total_tax_amount + hostel_fee + mess_fee``.

    Raises:
        ValidationError: If the extra discount is negative or larger than
            the discounted course fee.
    """
    extra_discount = check_extra_discount(snapshot, options.extra_discount_amount)

    hostel_fee = snapshot.hostel_fee if options.hostel_opted else ZERO
    mess_fee = snapshot.mess_fee if options.mess_opted else ZERO

    taxable_amount = snapshot.discounted_course_fee - extra_discount
    pre_tax_total = taxable_amount + hostel_fee + mess_fee

    if options.igst_applicable:
        sgst_pct = cgst_pct = ZERO
        igst_pct = rates.igst_percentage
    else:
        sgst_pct = rates.sgst_percentage
        cgst_pct = rates.cgst_percentage
        igst_pct = ZERO

    sgst_amount = _percent_of(taxable_amount, sgst_pct)
    cgst_amount = _percent_of(taxable_amount, cgst_pct)
    igst_amount = _percent_of(taxable_amount, igst_pct)
    total_tax = sgst_amount + cgst_amount + igst_amount

    return FeeBreakdown(
        discounted_course_fee=snapshot.discounted_course_fee,
        extra_discount_amount=extra_discount,
        hostel_fee=hostel_fee,
        mess_fee=mess_fee,
        pre_tax_total_fee=round_money(pre_tax_total),
        taxable_amount=round_money(taxable_amount),
        igst_applicable=options.igst_applicable,
        sgst_percentage=sgst_pct,
        cgst_percentage=cgst_pct,
        igst_percentage=igst_pct,
        sgst_amount=sgst_amount,
        cgst_amount=cgst_amount,
        igst_amount=igst_amount,
        total_tax_amount=round_money(total_tax),
        total_payable_fee=round_money(pre_tax_total + total_tax),
    )
