"""Payroll services."""

from staff_payroll.services.state_machine import (
    InvalidTransitionError,
    PayrollRunStateMachine,
    PayrollRunStatus,
    RunAction,
)
from staff_payroll.services.payslip_service import PayslipService
from staff_payroll.services.payroll_run_service import PayrollRunService

__all__ = [
    "PayrollRunStateMachine",
    "PayrollRunStatus",
    "RunAction",
    "InvalidTransitionError",
    "PayslipService",
    "PayrollRunService",
]
