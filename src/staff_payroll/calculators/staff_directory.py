"""Staff snapshot lookup."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staff_payroll.calculators.types import StaffSnapshot, StaffStatus
from staff_payroll.models import Staff


def to_snapshot(staff: Staff) -> StaffSnapshot:
    return StaffSnapshot(
        staff_id=staff.id,
        staff_code=staff.staff_code,
        full_name=staff.full_name,
        department=staff.department,
        position=staff.position,
        status=StaffStatus(staff.status),
        resumption_date=staff.resumption_date,
        last_active_date=staff.last_active_date,
    )


class StaffDirectory:
    """Read-only access to the staff registry."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, staff_id: UUID) -> StaffSnapshot | None:
        staff = await self.session.get(Staff, staff_id)
        if staff is None:
            return None
        return to_snapshot(staff)

    async def active_roster(self) -> list[StaffSnapshot]:
        """All ACTIVE staff, ordered by name."""
        result = await self.session.execute(
            select(Staff)
            .where(Staff.status == StaffStatus.ACTIVE.value)
            .order_by(Staff.full_name, Staff.id)
        )
        return [to_snapshot(s) for s in result.scalars().all()]
