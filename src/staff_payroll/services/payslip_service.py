"""Payslip service - individual payslip views."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staff_payroll.calculators import (
    AttendanceLedger,
    PayslipCalculator,
    SalaryResolver,
    StaffDirectory,
)
from staff_payroll.calculators.types import PayPeriod, Payslip, StaffSnapshot
from staff_payroll.errors import NotFoundError
from staff_payroll.models import PayrollLine, PayrollRun
from staff_payroll.services.snapshots import payslip_from_line

logger = logging.getLogger(__name__)


class PayslipService:
    """Computes payslips for individual staff members.

    When a payroll run exists for the period and holds a line for the staff
    member, the frozen line is returned so the view agrees with the run
    totals. ``live=True`` always recomputes from the current ledger.
    """

    def __init__(self, session: AsyncSession, calculator: PayslipCalculator | None = None):
        self.session = session
        self.calculator = calculator or PayslipCalculator()
        self.staff_directory = StaffDirectory(session)
        self.salary_resolver = SalaryResolver(session)
        self.attendance_ledger = AttendanceLedger(session)

    async def compute_payslip(
        self,
        staff_id: UUID,
        month: int,
        year: int,
        live: bool = False,
    ) -> Payslip:
        period = PayPeriod(month, year)

        staff = await self.staff_directory.get(staff_id)
        if staff is None:
            raise NotFoundError("Staff", staff_id)

        if not live:
            snapshot = await self.get_snapshot(staff_id, period)
            if snapshot is not None:
                return snapshot

        return await self.compute_live(staff, period)

    async def compute_live(self, staff: StaffSnapshot, period: PayPeriod) -> Payslip:
        """Recompute a payslip from current salary and ledger data."""
        salary = await self.salary_resolver.resolve(staff.staff_id, period.end)
        ledger = await self.attendance_ledger.load(staff.staff_id, period)
        payslip = self.calculator.compute(staff, salary, ledger, period)

        for warning in payslip.warnings:
            logger.warning("Payslip for staff %s (%s): %s", staff.staff_id, period, warning)

        return payslip

    async def get_snapshot(self, staff_id: UUID, period: PayPeriod) -> Payslip | None:
        """Payslip frozen by the payroll run for the period, if any."""
        result = await self.session.execute(
            select(PayrollLine)
            .join(PayrollRun, PayrollLine.payroll_run_id == PayrollRun.id)
            .where(
                PayrollRun.month == period.month,
                PayrollRun.year == period.year,
                PayrollLine.staff_id == staff_id,
            )
        )
        line = result.scalar_one_or_none()
        if line is None:
            return None
        return payslip_from_line(line, period.month, period.year)
