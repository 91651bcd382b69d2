"""Conversion between computed payslips and persisted payroll lines."""

from __future__ import annotations

from uuid import UUID

from staff_payroll.calculators.types import Payslip, StaffSnapshot, TenureBracket
from staff_payroll.models import PayrollLine

# Payslip fields stored one-to-one on PayrollLine
_AMOUNT_FIELDS = (
    "gross_salary",
    "daily_rate",
    "permission_absence_days",
    "no_permission_absence_days",
    "absence_deduction",
    "lateness_count",
    "lateness_penalty_days",
    "lateness_deduction",
    "manual_deductions_total",
    "allowances_total",
    "query_surcharge_total",
    "query_penalty_days_total",
    "query_penalty_deduction",
    "meal_ticket_total",
    "tenure_months",
    "bank_charges",
    "water_rate",
    "old_staff_statutory",
    "default_charges_total",
    "new_staff_statutory",
    "rounding_adjustment",
    "total_deductions",
    "net_salary",
)


def line_from_payslip(
    payroll_run_id: UUID, staff: StaffSnapshot, payslip: Payslip
) -> PayrollLine:
    """Freeze a payslip as a payroll line."""
    return PayrollLine(
        payroll_run_id=payroll_run_id,
        staff_id=payslip.staff_id,
        staff_code=staff.staff_code,
        full_name=staff.full_name,
        department=staff.department,
        position=staff.position,
        tenure_bracket=payslip.tenure_bracket.value,
        fingerprint=payslip.fingerprint,
        **{name: getattr(payslip, name) for name in _AMOUNT_FIELDS},
    )


def payslip_from_line(line: PayrollLine, month: int, year: int) -> Payslip:
    """Rebuild the payslip frozen in a payroll line."""
    return Payslip(
        staff_id=line.staff_id,
        month=month,
        year=year,
        tenure_bracket=TenureBracket(line.tenure_bracket),
        **{name: getattr(line, name) for name in _AMOUNT_FIELDS},
    )
