"""Payslip calculation engine."""

from staff_payroll.calculators.payslip_calculator import PayslipCalculator
from staff_payroll.calculators.salary_resolver import SalaryResolver
from staff_payroll.calculators.attendance_ledger import AttendanceLedger
from staff_payroll.calculators.staff_directory import StaffDirectory

__all__ = [
    "PayslipCalculator",
    "SalaryResolver",
    "AttendanceLedger",
    "StaffDirectory",
]
