"""Tests for individual payslip views backed by the database."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from staff_payroll.errors import NotFoundError, ValidationError
from staff_payroll.models import SalaryHistory
from staff_payroll.services import PayrollRunService, PayslipService
from tests.conftest import (
    add_absence,
    add_allowance,
    add_lateness,
    add_manual_deduction,
    add_meal_ticket,
    add_query,
    add_staff,
)


class TestComputePayslip:
    """Live payslip computation from the ledger."""

    async def test_unknown_staff(self, session):
        with pytest.raises(NotFoundError) as exc_info:
            await PayslipService(session).compute_payslip(uuid4(), 5, 2025)

        assert exc_info.value.code == "NOT_FOUND"

    async def test_missing_period(self, session):
        staff = await add_staff(session)

        with pytest.raises(ValidationError, match="Month and year are required"):
            await PayslipService(session).compute_payslip(staff.id, None, 2025)

    async def test_reads_only_events_inside_period(self, session):
        """Events dated outside the month do not count."""
        staff = await add_staff(session, monthly_salary="150000")
        await add_absence(session, staff.id, date(2025, 5, 2), "PERMISSION")
        await add_absence(session, staff.id, date(2025, 5, 3), "PERMISSION")
        await add_absence(session, staff.id, date(2025, 5, 31), "NO_PERMISSION")
        await add_absence(session, staff.id, date(2025, 4, 30), "NO_PERMISSION")
        await add_absence(session, staff.id, date(2025, 6, 1), "NO_PERMISSION")
        await add_lateness(session, staff.id, date(2025, 4, 29), date(2025, 4, 30), date(2025, 6, 2))

        payslip = await PayslipService(session).compute_payslip(staff.id, 5, 2025)

        assert payslip.permission_absence_days == 2
        assert payslip.no_permission_absence_days == 1
        assert payslip.absence_deduction == Decimal("19354.84")
        assert payslip.lateness_count == 0
        assert payslip.net_salary == Decimal("129445.16")

    async def test_ledger_amounts(self, session):
        staff = await add_staff(session, monthly_salary="31000")
        await add_query(session, staff.id, date(2025, 5, 4), surcharge_amount=Decimal("2000"), penalty_days=2)
        for day in (5, 6, 7):
            await add_meal_ticket(session, staff.id, date(2025, 5, day))
        await add_manual_deduction(session, staff.id, 5, 2025, Decimal("5000"))
        await add_manual_deduction(session, staff.id, 4, 2025, Decimal("9999"))
        await add_allowance(session, staff.id, 5, 2025, Decimal("3000"))

        payslip = await PayslipService(session).compute_payslip(staff.id, 5, 2025)

        assert payslip.meal_ticket_total == Decimal("1500.00")
        assert payslip.manual_deductions_total == Decimal("5000.00")
        assert payslip.allowances_total == Decimal("3000.00")
        assert payslip.net_salary == Decimal("22800.00")

    async def test_salary_effective_during_month(self, session):
        """A raise effective mid-month applies to that month."""
        staff = await add_staff(session, monthly_salary="100000")
        session.add(
            SalaryHistory(
                staff_id=staff.id,
                monthly_salary=Decimal("150000"),
                effective_from=date(2025, 5, 20),
            )
        )
        await session.flush()

        service = PayslipService(session)
        april = await service.compute_payslip(staff.id, 4, 2025)
        may = await service.compute_payslip(staff.id, 5, 2025)

        assert april.gross_salary == Decimal("100000.00")
        assert may.gross_salary == Decimal("150000.00")

    async def test_inactive_staff_prorated(self, session):
        staff = await add_staff(
            session,
            monthly_salary="31000",
            status="INACTIVE",
            last_active_date=date(2025, 5, 10),
        )

        payslip = await PayslipService(session).compute_payslip(staff.id, 5, 2025)

        assert payslip.gross_salary == Decimal("10000.00")

    async def test_repeat_computation_identical(self, session):
        staff = await add_staff(session)
        await add_lateness(session, staff.id, date(2025, 5, 5), date(2025, 5, 6), date(2025, 5, 7))

        service = PayslipService(session)
        first = await service.compute_payslip(staff.id, 5, 2025)
        second = await service.compute_payslip(staff.id, 5, 2025)

        assert first == second
        assert first.fingerprint == second.fingerprint


class TestPayslipSnapshot:
    """Once a run exists, the individual view matches the run's line."""

    async def test_snapshot_after_generation(self, session_factory):
        async with session_factory() as session:
            staff = await add_staff(session, monthly_salary="150000")
            staff_id = staff.id
            await PayrollRunService(session).generate_run(5, 2025)
            await session.commit()

        async with session_factory() as session:
            # Recorded after the run was generated
            await add_absence(session, staff_id, date(2025, 5, 12), "NO_PERMISSION")
            await session.commit()

        async with session_factory() as session:
            service = PayslipService(session)
            frozen = await service.compute_payslip(staff_id, 5, 2025)
            live = await service.compute_payslip(staff_id, 5, 2025, live=True)

        assert frozen.net_salary == Decimal("148800.00")
        assert frozen.no_permission_absence_days == 0
        assert live.no_permission_absence_days == 1
        assert live.net_salary < frozen.net_salary

    async def test_snapshot_matches_live_when_unchanged(self, session_factory):
        async with session_factory() as session:
            staff = await add_staff(session, monthly_salary="87654.32")
            staff_id = staff.id
            await add_lateness(session, staff_id, *(date(2025, 5, d) for d in range(1, 9)))
            await PayrollRunService(session).generate_run(5, 2025)
            await session.commit()

        async with session_factory() as session:
            service = PayslipService(session)
            frozen = await service.compute_payslip(staff_id, 5, 2025)
            live = await service.compute_payslip(staff_id, 5, 2025, live=True)

        assert frozen == live
        assert frozen.fingerprint == live.fingerprint
