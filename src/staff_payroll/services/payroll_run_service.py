"""Payroll run service - generation and approval lifecycle."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from staff_payroll.calculators import StaffDirectory
from staff_payroll.calculators.types import PayPeriod
from staff_payroll.errors import ConflictError, NotFoundError, ValidationError
from staff_payroll.models import PayrollLine, PayrollRun
from staff_payroll.services.payslip_service import PayslipService
from staff_payroll.services.snapshots import line_from_payslip
from staff_payroll.services.state_machine import (
    InvalidTransitionError,
    PayrollRunStateMachine,
    PayrollRunStatus,
    RunAction,
)

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PayrollRunService:
    """Service for managing the payroll run lifecycle.

    Operations:
    - generate_run: Compute every eligible payslip and persist a DRAFT run
    - approve_run: DRAFT → APPROVED, recording the approver
    - lock_run: APPROVED → LOCKED, final
    - reject_run: APPROVED → DRAFT, clearing approval
    - delete_run: Remove a DRAFT run and its lines

    Every transition is a conditional UPDATE on the expected source status,
    so of two concurrent callers acting on the same stale state only one
    succeeds. Callers own the transaction (see ``run_in_transaction``).
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = utcnow,
        payslip_service: PayslipService | None = None,
    ):
        self.session = session
        self.clock = clock
        self.payslip_service = payslip_service or PayslipService(session)
        self.staff_directory = StaffDirectory(session)

    async def get_run(self, run_id: UUID, load_lines: bool = False) -> PayrollRun:
        """Load a payroll run, raising NotFoundError if missing."""
        query = select(PayrollRun).where(PayrollRun.id == run_id)
        if load_lines:
            query = query.options(selectinload(PayrollRun.lines))
        result = await self.session.execute(query.execution_options(populate_existing=True))
        run = result.scalar_one_or_none()
        if run is None:
            raise NotFoundError("Payroll run", run_id)
        return run

    async def list_runs(self, status: str | None = None) -> list[PayrollRun]:
        """List payroll runs, newest period first."""
        query = select(PayrollRun)
        if status:
            try:
                status = PayrollRunStatus(status.upper()).value
            except ValueError:
                raise ValidationError(
                    f"Unknown payroll run status {status!r}", {"status": status}
                ) from None
            query = query.where(PayrollRun.status == status)
        query = query.order_by(
            PayrollRun.year.desc(), PayrollRun.month.desc(), PayrollRun.created_at.desc()
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_run_payslips(self, run_id: UUID) -> list[PayrollLine]:
        """Per-staff lines frozen when the run was generated."""
        run = await self.get_run(run_id, load_lines=True)
        return list(run.lines)

    async def generate_run(
        self,
        month: int,
        year: int,
        actor_user_id: UUID | None = None,
    ) -> PayrollRun:
        """Generate a DRAFT payroll run for a month.

        The run row is inserted first so the (month, year) unique constraint
        rejects duplicates before the roster is read, so an existing run is
        reported even when no staff are ACTIVE. The caller's transaction
        makes the run and its lines visible all at once.

        Raises:
            ValidationError: Invalid period, or no ACTIVE staff
            ConflictError: A run already exists for the period
        """
        period = PayPeriod(month, year)

        run = PayrollRun(
            month=period.month,
            year=period.year,
            status=PayrollRunStatus.DRAFT.value,
            created_by=actor_user_id,
            created_at=self.clock(),
        )
        self.session.add(run)
        try:
            await self.session.flush()
        except IntegrityError:
            raise ConflictError(
                f"Payroll run already exists for {period}",
                {"month": period.month, "year": period.year},
            ) from None

        roster = await self.staff_directory.active_roster()
        if not roster:
            raise ValidationError(
                "No active staff to generate payroll for.",
                {"month": month, "year": year},
            )

        total_staff = 0
        total_gross = Decimal("0")
        total_deductions = Decimal("0")
        total_net = Decimal("0")

        for staff in roster:
            payslip = await self.payslip_service.compute_live(staff, period)
            if payslip.gross_salary == 0:
                logger.warning(
                    "Skipping staff %s (%s) in payroll %s: no salary",
                    staff.staff_id,
                    staff.full_name,
                    period,
                )
                continue

            self.session.add(line_from_payslip(run.id, staff, payslip))
            total_staff += 1
            total_gross += payslip.gross_salary
            total_deductions += payslip.total_deductions
            total_net += payslip.net_salary

        run.total_staff = total_staff
        run.total_gross_salary = total_gross
        run.total_deductions = total_deductions
        run.total_net_pay = total_net
        await self.session.flush()

        logger.info(
            "Generated payroll run %s for %s: %d staff, gross %s, net %s",
            run.id,
            period,
            total_staff,
            total_gross,
            total_net,
        )
        return run

    async def approve_run(
        self,
        run_id: UUID,
        actor_user_id: UUID | None = None,
    ) -> PayrollRun:
        """Approve a DRAFT run."""
        return await self._apply(
            run_id,
            RunAction.APPROVE,
            approved_at=self.clock(),
            approved_by=actor_user_id,
        )

    async def lock_run(
        self,
        run_id: UUID,
        actor_user_id: UUID | None = None,
    ) -> PayrollRun:
        """Lock an APPROVED run. Locked runs accept no further action."""
        return await self._apply(
            run_id,
            RunAction.LOCK,
            locked_at=self.clock(),
            locked_by=actor_user_id,
        )

    async def reject_run(
        self,
        run_id: UUID,
        actor_user_id: UUID | None = None,
    ) -> PayrollRun:
        """Send an APPROVED run back to DRAFT, clearing approval."""
        run = await self._apply(
            run_id,
            RunAction.REJECT,
            approved_at=None,
            approved_by=None,
        )
        logger.info("Payroll run %s rejected by %s", run_id, actor_user_id)
        return run

    async def delete_run(self, run_id: UUID) -> None:
        """Delete a DRAFT run together with its lines."""
        run = await self.get_run(run_id)
        PayrollRunStateMachine.validate(run.status, RunAction.DELETE)
        period_label = run.period_label

        result = await self.session.execute(
            delete(PayrollRun)
            .where(
                PayrollRun.id == run_id,
                PayrollRun.status == PayrollRunStatus.DRAFT.value,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self._raise_stale(run_id, RunAction.DELETE)

        await self.session.execute(
            delete(PayrollLine)
            .where(PayrollLine.payroll_run_id == run_id)
            .execution_options(synchronize_session=False)
        )
        self.session.expunge(run)

        logger.info("Deleted payroll run %s for %s", run_id, period_label)

    async def _apply(
        self,
        run_id: UUID,
        action: RunAction,
        **values: Any,
    ) -> PayrollRun:
        """Apply a status transition with a conditional update.

        The UPDATE only matches while the run is still in the action's source
        status; zero matched rows means another caller moved it first.
        """
        run = await self.get_run(run_id)
        to_status = PayrollRunStateMachine.validate(run.status, action)
        from_status = PayrollRunStateMachine.required_status(action)

        result = await self.session.execute(
            update(PayrollRun)
            .where(
                PayrollRun.id == run_id,
                PayrollRun.status == from_status.value,
            )
            .values(status=to_status.value, **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self._raise_stale(run_id, action)

        run = await self.get_run(run_id)
        logger.info(
            "Payroll run %s (%s): %s → %s",
            run_id,
            run.period_label,
            from_status.value,
            to_status.value,
        )
        return run

    async def _raise_stale(self, run_id: UUID, action: RunAction) -> None:
        """Raise the error matching the run's current state after a lost race."""
        run = await self.get_run(run_id)
        PayrollRunStateMachine.validate(run.status, action)
        raise InvalidTransitionError(
            run.status, action, PayrollRunStateMachine.required_status(action)
        )
