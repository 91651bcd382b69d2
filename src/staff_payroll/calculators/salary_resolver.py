"""Salary resolution from effective-dated salary history."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staff_payroll.calculators.types import SalaryRecord
from staff_payroll.models import SalaryHistory


class SalaryResolver:
    """Resolves the monthly gross salary effective at a date.

    The applicable record is the one with the latest ``effective_from`` not
    after ``as_of_date``. Staff without such a record resolve to None, which
    the calculator treats as a zero gross.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def resolve(self, staff_id: UUID, as_of_date: date) -> SalaryRecord | None:
        result = await self.session.execute(
            select(SalaryHistory)
            .where(
                SalaryHistory.staff_id == staff_id,
                SalaryHistory.effective_from <= as_of_date,
            )
            .order_by(SalaryHistory.effective_from.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return SalaryRecord(
            staff_id=row.staff_id,
            monthly_gross=row.monthly_salary,
            effective_from=row.effective_from,
        )

