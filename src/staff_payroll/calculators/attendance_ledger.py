"""Per-period attendance, charge and allowance lookup."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staff_payroll.calculators.types import (
    AbsenceEvent,
    AbsenceType,
    AllowanceEvent,
    LatenessEvent,
    ManualDeductionEvent,
    MealTicketEvent,
    PayPeriod,
    PeriodLedger,
    QueryEvent,
)
from staff_payroll.models import (
    AbsenceLog,
    LatenessLog,
    ManualDeduction,
    MonthlyAllowance,
    QueryLog,
    StaffMealTicket,
)


class AttendanceLedger:
    """Loads the events recorded for a staff member in a pay period.

    Dated logs (lateness, absence, queries, meal tickets) fall in the period
    when ``start <= date < end``. Manual deductions and allowances are booked
    against a month/year directly.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def load(self, staff_id: UUID, period: PayPeriod) -> PeriodLedger:
        return PeriodLedger(
            lateness=await self._get_lateness(staff_id, period),
            absences=await self._get_absences(staff_id, period),
            queries=await self._get_queries(staff_id, period),
            meal_tickets=await self._get_meal_tickets(staff_id, period),
            manual_deductions=await self._get_manual_deductions(staff_id, period),
            allowances=await self._get_allowances(staff_id, period),
        )

    async def _get_lateness(
        self, staff_id: UUID, period: PayPeriod
    ) -> tuple[LatenessEvent, ...]:
        result = await self.session.execute(
            select(LatenessLog)
            .where(
                LatenessLog.staff_id == staff_id,
                LatenessLog.log_date >= period.start,
                LatenessLog.log_date < period.end,
            )
            .order_by(LatenessLog.log_date)
        )
        return tuple(
            LatenessEvent(log_date=row.log_date, arrival_time=row.arrival_time)
            for row in result.scalars().all()
        )

    async def _get_absences(
        self, staff_id: UUID, period: PayPeriod
    ) -> tuple[AbsenceEvent, ...]:
        result = await self.session.execute(
            select(AbsenceLog)
            .where(
                AbsenceLog.staff_id == staff_id,
                AbsenceLog.log_date >= period.start,
                AbsenceLog.log_date < period.end,
            )
            .order_by(AbsenceLog.log_date)
        )
        return tuple(
            AbsenceEvent(log_date=row.log_date, type=AbsenceType(row.type))
            for row in result.scalars().all()
        )

    async def _get_queries(
        self, staff_id: UUID, period: PayPeriod
    ) -> tuple[QueryEvent, ...]:
        result = await self.session.execute(
            select(QueryLog)
            .where(
                QueryLog.staff_id == staff_id,
                QueryLog.log_date >= period.start,
                QueryLog.log_date < period.end,
            )
            .order_by(QueryLog.log_date)
        )
        return tuple(
            QueryEvent(
                log_date=row.log_date,
                reason=row.reason,
                surcharge_amount=row.surcharge_amount,
                penalty_days=row.penalty_days,
            )
            for row in result.scalars().all()
        )

    async def _get_meal_tickets(
        self, staff_id: UUID, period: PayPeriod
    ) -> tuple[MealTicketEvent, ...]:
        result = await self.session.execute(
            select(StaffMealTicket)
            .where(
                StaffMealTicket.staff_id == staff_id,
                StaffMealTicket.log_date >= period.start,
                StaffMealTicket.log_date < period.end,
            )
            .order_by(StaffMealTicket.log_date)
        )
        return tuple(
            MealTicketEvent(log_date=row.log_date, amount=row.amount or Decimal("0"))
            for row in result.scalars().all()
        )

    async def _get_manual_deductions(
        self, staff_id: UUID, period: PayPeriod
    ) -> tuple[ManualDeductionEvent, ...]:
        result = await self.session.execute(
            select(ManualDeduction)
            .where(
                ManualDeduction.staff_id == staff_id,
                ManualDeduction.month == period.month,
                ManualDeduction.year == period.year,
            )
            .order_by(ManualDeduction.created_at)
        )
        return tuple(
            ManualDeductionEvent(category=row.category, amount=row.amount, note=row.note)
            for row in result.scalars().all()
        )

    async def _get_allowances(
        self, staff_id: UUID, period: PayPeriod
    ) -> tuple[AllowanceEvent, ...]:
        result = await self.session.execute(
            select(MonthlyAllowance)
            .where(
                MonthlyAllowance.staff_id == staff_id,
                MonthlyAllowance.month == period.month,
                MonthlyAllowance.year == period.year,
            )
            .order_by(MonthlyAllowance.created_at)
        )
        return tuple(
            AllowanceEvent(reason=row.reason, amount=row.amount)
            for row in result.scalars().all()
        )
