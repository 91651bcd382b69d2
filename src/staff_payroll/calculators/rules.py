"""Payroll rule tables: divisor, lateness schedule, tenure charge regimes.

Internal compute runs at full Decimal context precision; amounts are rounded
to cents only when a payslip is finalized.
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

from staff_payroll.calculators.types import (
    DefaultCharges,
    PayPeriod,
    StaffSnapshot,
    TenureBracket,
)

# Fixed monthly divisor used for daily rates and prorating, whatever the
# month's actual length.
MONTHLY_DIVISOR = Decimal("31")

OUTPUT_PRECISION = Decimal("0.01")
ZERO = Decimal("0")

# (max lateness count, penalty days), checked in order
LATENESS_PENALTY_SCHEDULE: tuple[tuple[int, int], ...] = (
    (2, 0),
    (4, 1),
    (7, 2),
    (10, 3),
    (15, 4),
)
MAX_LATENESS_PENALTY_DAYS = 5

NEW_STAFF_MAX_TENURE_MONTHS = 1
NEW_STAFF_STATUTORY_RATE = Decimal("0.25")

BANK_CHARGE = Decimal("50")
WATER_RATE = Decimal("150")
OLD_STAFF_STATUTORY_THRESHOLD = Decimal("60000")
OLD_STAFF_STATUTORY_HIGH = Decimal("1000")
OLD_STAFF_STATUTORY_LOW = Decimal("500")


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places."""
    return amount.quantize(OUTPUT_PRECISION, rounding=ROUND_HALF_UP)


def lateness_penalty_days(lateness_count: int) -> int:
    """Penalty days for the number of late arrivals in a period."""
    for max_count, days in LATENESS_PENALTY_SCHEDULE:
        if lateness_count <= max_count:
            return days
    return MAX_LATENESS_PENALTY_DAYS


def months_between(later: date, earlier: date) -> int:
    """Whole calendar months from ``earlier`` to ``later`` (negative if reversed)."""
    return (later.year - earlier.year) * 12 + (later.month - earlier.month)


def tenure_bracket(tenure_months: int) -> TenureBracket:
    if tenure_months <= NEW_STAFF_MAX_TENURE_MONTHS:
        return TenureBracket.NEW
    return TenureBracket.ESTABLISHED


def _new_staff_charges(gross: Decimal) -> DefaultCharges:
    return DefaultCharges(
        bank_charges=ZERO,
        water_rate=ZERO,
        old_staff_statutory=ZERO,
        new_staff_statutory=gross * NEW_STAFF_STATUTORY_RATE,
    )


def _established_staff_charges(gross: Decimal) -> DefaultCharges:
    if gross >= OLD_STAFF_STATUTORY_THRESHOLD:
        statutory = OLD_STAFF_STATUTORY_HIGH
    else:
        statutory = OLD_STAFF_STATUTORY_LOW
    return DefaultCharges(
        bank_charges=BANK_CHARGE,
        water_rate=WATER_RATE,
        old_staff_statutory=statutory,
        new_staff_statutory=ZERO,
    )


CHARGE_REGIMES: dict[TenureBracket, Callable[[Decimal], DefaultCharges]] = {
    TenureBracket.NEW: _new_staff_charges,
    TenureBracket.ESTABLISHED: _established_staff_charges,
}


def select_default_charges(bracket: TenureBracket, gross: Decimal) -> DefaultCharges:
    """Charges for a tenure bracket, computed against the (prorated) gross."""
    return CHARGE_REGIMES[bracket](gross)


def active_days_in_period(staff: StaffSnapshot, period: PayPeriod) -> int | None:
    """Days worked by an inactive staff member, or None when no prorating applies."""
    if staff.is_active or staff.last_active_date is None:
        return None

    last_active = staff.last_active_date
    if last_active < period.start:
        return 0
    if last_active >= period.end:
        return int(MONTHLY_DIVISOR)
    return last_active.day
