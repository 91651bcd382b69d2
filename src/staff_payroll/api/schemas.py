"""Pydantic schemas for API request/response models."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from staff_payroll.calculators.types import TenureBracket


# ============================================================================
# Payslip schemas
# ============================================================================


class PayslipBreakdown(BaseModel):
    """Itemized deduction and charge amounts shared by payslip views."""

    model_config = ConfigDict(from_attributes=True)

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
    fingerprint: str


class PayslipResponse(PayslipBreakdown):
    """Schema for an individual payslip."""

    staff_id: UUID
    month: int
    year: int
    warnings: list[str] = []


class PayrollLineResponse(PayslipBreakdown):
    """Schema for a payslip frozen in a payroll run."""

    id: UUID
    payroll_run_id: UUID
    staff_id: UUID
    staff_code: str | None = None
    full_name: str
    department: str | None = None
    position: str | None = None


class PayrollLineListResponse(BaseModel):
    """Schema for listing the payslips of a payroll run."""

    items: list[PayrollLineResponse]
    total: int


# ============================================================================
# Payroll Run schemas
# ============================================================================


class PayrollRunCreate(BaseModel):
    """Schema for generating a payroll run.

    Month and year are range-checked by the service so that a missing or
    malformed period is reported as a validation error like any other.
    """

    month: int | None = None
    year: int | None = None


class PayrollRunResponse(BaseModel):
    """Schema for payroll run response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    month: int
    year: int
    status: str
    total_staff: int
    total_gross_salary: Decimal
    total_deductions: Decimal
    total_net_pay: Decimal
    created_by: UUID | None = None
    created_at: datetime
    approved_at: datetime | None = None
    approved_by: UUID | None = None
    locked_at: datetime | None = None
    locked_by: UUID | None = None
    allowed_actions: list[str] = []


class PayrollRunListResponse(BaseModel):
    """Schema for listing payroll runs."""

    items: list[PayrollRunResponse]
    total: int


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
