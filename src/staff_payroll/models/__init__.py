"""ORM models."""

from staff_payroll.models.base import Base, TimestampMixin
from staff_payroll.models.staff import SalaryHistory, Staff
from staff_payroll.models.attendance import (
    MANUAL_DEDUCTION_CATEGORIES,
    MEAL_TICKET_AMOUNT,
    AbsenceLog,
    LatenessLog,
    ManualDeduction,
    MonthlyAllowance,
    QueryLog,
    StaffMealTicket,
)
from staff_payroll.models.payroll import PayrollLine, PayrollRun

__all__ = [
    "Base",
    "TimestampMixin",
    "Staff",
    "SalaryHistory",
    "LatenessLog",
    "AbsenceLog",
    "QueryLog",
    "StaffMealTicket",
    "ManualDeduction",
    "MonthlyAllowance",
    "MANUAL_DEDUCTION_CATEGORIES",
    "MEAL_TICKET_AMOUNT",
    "PayrollRun",
    "PayrollLine",
]
