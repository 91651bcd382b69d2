"""Type definitions for the payslip calculation pipeline."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from staff_payroll.errors import ValidationError

MIN_YEAR = 1900
MAX_YEAR = 9999


class StaffStatus(str, Enum):
    """Employment status values."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class AbsenceType(str, Enum):
    """Absence kinds; unexcused absence costs double."""

    PERMISSION = "PERMISSION"
    NO_PERMISSION = "NO_PERMISSION"


class TenureBracket(str, Enum):
    """Statutory charge regime selected by tenure."""

    NEW = "NEW"
    ESTABLISHED = "ESTABLISHED"


@dataclass(frozen=True)
class PayPeriod:
    """A calendar month.

    ``end`` is the exclusive boundary, the first day of the next month.
    """

    month: int
    year: int

    def __post_init__(self) -> None:
        if isinstance(self.month, bool) or not isinstance(self.month, int):
            raise ValidationError("Month and year are required.", {"month": self.month})
        if isinstance(self.year, bool) or not isinstance(self.year, int):
            raise ValidationError("Month and year are required.", {"year": self.year})
        if not 1 <= self.month <= 12:
            raise ValidationError(
                f"Month must be between 1 and 12 (got {self.month})",
                {"month": self.month},
            )
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise ValidationError(
                f"Year must be between {MIN_YEAR} and {MAX_YEAR} (got {self.year})",
                {"year": self.year},
            )

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end(self) -> date:
        if self.month == 12:
            return date(self.year + 1, 1, 1)
        return date(self.year, self.month + 1, 1)

    def contains(self, day: date) -> bool:
        return self.start <= day < self.end

    def __str__(self) -> str:
        return f"{self.month}/{self.year}"


@dataclass(frozen=True)
class StaffSnapshot:
    """Read-only view of a staff record as of the query time."""

    staff_id: UUID
    full_name: str
    department: str
    position: str
    status: StaffStatus
    resumption_date: date
    last_active_date: date | None = None
    staff_code: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status == StaffStatus.ACTIVE


@dataclass(frozen=True)
class SalaryRecord:
    """Monthly gross salary effective from a date."""

    staff_id: UUID
    monthly_gross: Decimal
    effective_from: date


@dataclass(frozen=True)
class LatenessEvent:
    log_date: date
    arrival_time: str | None = None


@dataclass(frozen=True)
class AbsenceEvent:
    log_date: date
    type: AbsenceType


@dataclass(frozen=True)
class QueryEvent:
    log_date: date
    reason: str = ""
    surcharge_amount: Decimal | None = None
    penalty_days: int | None = None


@dataclass(frozen=True)
class MealTicketEvent:
    log_date: date
    amount: Decimal


@dataclass(frozen=True)
class ManualDeductionEvent:
    category: str
    amount: Decimal
    note: str | None = None


@dataclass(frozen=True)
class AllowanceEvent:
    reason: str
    amount: Decimal


@dataclass(frozen=True)
class PeriodLedger:
    """All events recorded for one staff member in one period."""

    lateness: tuple[LatenessEvent, ...] = ()
    absences: tuple[AbsenceEvent, ...] = ()
    queries: tuple[QueryEvent, ...] = ()
    meal_tickets: tuple[MealTicketEvent, ...] = ()
    manual_deductions: tuple[ManualDeductionEvent, ...] = ()
    allowances: tuple[AllowanceEvent, ...] = ()


@dataclass(frozen=True)
class DefaultCharges:
    """Charges selected by tenure bracket."""

    bank_charges: Decimal
    water_rate: Decimal
    old_staff_statutory: Decimal
    new_staff_statutory: Decimal

    @property
    def flat_total(self) -> Decimal:
        return self.bank_charges + self.water_rate + self.old_staff_statutory


@dataclass(frozen=True)
class Payslip:
    """Itemized payslip for one staff member in one period.

    All currency fields are rounded to cents. ``total_deductions`` is always
    ``gross_salary - net_salary``.
    """

    staff_id: UUID
    month: int
    year: int
    gross_salary: Decimal
    daily_rate: Decimal
    permission_absence_days: int
    no_permission_absence_days: int
    absence_deduction: Decimal
    lateness_count: int
    lateness_penalty_days: int
    lateness_deduction: Decimal
    manual_deductions_total: Decimal
    allowances_total: Decimal
    query_surcharge_total: Decimal
    query_penalty_days_total: int
    query_penalty_deduction: Decimal
    meal_ticket_total: Decimal
    tenure_months: int
    tenure_bracket: TenureBracket
    bank_charges: Decimal
    water_rate: Decimal
    old_staff_statutory: Decimal
    default_charges_total: Decimal
    new_staff_statutory: Decimal
    rounding_adjustment: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    warnings: tuple[str, ...] = field(default=(), compare=False)

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "staff_id": str(self.staff_id),
            "month": self.month,
            "year": self.year,
            "gross_salary": str(self.gross_salary),
            "daily_rate": str(self.daily_rate),
            "permission_absence_days": self.permission_absence_days,
            "no_permission_absence_days": self.no_permission_absence_days,
            "absence_deduction": str(self.absence_deduction),
            "lateness_count": self.lateness_count,
            "lateness_penalty_days": self.lateness_penalty_days,
            "lateness_deduction": str(self.lateness_deduction),
            "manual_deductions_total": str(self.manual_deductions_total),
            "allowances_total": str(self.allowances_total),
            "query_surcharge_total": str(self.query_surcharge_total),
            "query_penalty_days_total": self.query_penalty_days_total,
            "query_penalty_deduction": str(self.query_penalty_deduction),
            "meal_ticket_total": str(self.meal_ticket_total),
            "tenure_months": self.tenure_months,
            "tenure_bracket": self.tenure_bracket.value,
            "bank_charges": str(self.bank_charges),
            "water_rate": str(self.water_rate),
            "old_staff_statutory": str(self.old_staff_statutory),
            "default_charges_total": str(self.default_charges_total),
            "new_staff_statutory": str(self.new_staff_statutory),
            "rounding_adjustment": str(self.rounding_adjustment),
            "total_deductions": str(self.total_deductions),
            "net_salary": str(self.net_salary),
        }

    @property
    def fingerprint(self) -> str:
        """SHA-256 of the canonical form; equal inputs give equal fingerprints."""
        json_str = json.dumps(self.to_canonical_dict(), sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()
