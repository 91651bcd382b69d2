"""Pytest fixtures for staff payroll tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator
from uuid import UUID, uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from staff_payroll.calculators.types import (
    AbsenceEvent,
    AbsenceType,
    LatenessEvent,
    PayPeriod,
    PeriodLedger,
    SalaryRecord,
    StaffSnapshot,
    StaffStatus,
)
from staff_payroll.database import create_session_factory, get_engine
from staff_payroll.models import (
    AbsenceLog,
    Base,
    LatenessLog,
    ManualDeduction,
    MonthlyAllowance,
    QueryLog,
    SalaryHistory,
    Staff,
    StaffMealTicket,
)


# A file database per test so that separate sessions see each other's commits
@pytest.fixture
async def engine(tmp_path):
    """Create test database engine."""
    engine = get_engine(f"sqlite+aiosqlite:///{tmp_path / 'payroll.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


# ============================================================================
# Seed helpers
# ============================================================================


async def add_staff(
    session: AsyncSession,
    full_name: str = "Ada Obi",
    monthly_salary: Decimal | str | None = "150000",
    resumption_date: date = date(2020, 1, 6),
    status: str = "ACTIVE",
    last_active_date: date | None = None,
    salary_effective_from: date = date(2020, 1, 1),
    department: str = "Operations",
    position: str = "Officer",
) -> Staff:
    """Insert a staff member with one salary record."""
    staff = Staff(
        full_name=full_name,
        department=department,
        position=position,
        status=status,
        resumption_date=resumption_date,
        last_active_date=last_active_date,
    )
    session.add(staff)
    await session.flush()

    if monthly_salary is not None:
        session.add(
            SalaryHistory(
                staff_id=staff.id,
                monthly_salary=Decimal(monthly_salary),
                effective_from=salary_effective_from,
            )
        )
        await session.flush()
    return staff


async def add_lateness(session: AsyncSession, staff_id: UUID, *days: date) -> None:
    for day in days:
        session.add(LatenessLog(staff_id=staff_id, log_date=day, arrival_time="09:15"))
    await session.flush()


async def add_absence(
    session: AsyncSession, staff_id: UUID, day: date, absence_type: str
) -> None:
    session.add(AbsenceLog(staff_id=staff_id, log_date=day, type=absence_type))
    await session.flush()


async def add_query(
    session: AsyncSession,
    staff_id: UUID,
    day: date,
    surcharge_amount: Decimal | None = None,
    penalty_days: int | None = None,
) -> None:
    session.add(
        QueryLog(
            staff_id=staff_id,
            log_date=day,
            reason="Insubordination",
            surcharge_amount=surcharge_amount,
            penalty_days=penalty_days,
        )
    )
    await session.flush()


async def add_meal_ticket(session: AsyncSession, staff_id: UUID, day: date) -> None:
    session.add(StaffMealTicket(staff_id=staff_id, log_date=day))
    await session.flush()


async def add_manual_deduction(
    session: AsyncSession,
    staff_id: UUID,
    month: int,
    year: int,
    amount: Decimal,
    category: str = "DEBT_DEDUCT",
) -> None:
    session.add(
        ManualDeduction(
            staff_id=staff_id, month=month, year=year, category=category, amount=amount
        )
    )
    await session.flush()


async def add_allowance(
    session: AsyncSession, staff_id: UUID, month: int, year: int, amount: Decimal
) -> None:
    session.add(
        MonthlyAllowance(
            staff_id=staff_id, month=month, year=year, reason="Overtime", amount=amount
        )
    )
    await session.flush()


# ============================================================================
# Pure-calculator fixtures
# ============================================================================


def make_snapshot(
    resumption_date: date = date(2020, 1, 6),
    status: StaffStatus = StaffStatus.ACTIVE,
    last_active_date: date | None = None,
) -> StaffSnapshot:
    return StaffSnapshot(
        staff_id=uuid4(),
        full_name="Ada Obi",
        department="Operations",
        position="Officer",
        status=status,
        resumption_date=resumption_date,
        last_active_date=last_active_date,
    )


def make_salary(staff: StaffSnapshot, amount: str) -> SalaryRecord:
    return SalaryRecord(
        staff_id=staff.staff_id,
        monthly_gross=Decimal(amount),
        effective_from=date(2020, 1, 1),
    )


def lateness_ledger(count: int, period: PayPeriod) -> PeriodLedger:
    return PeriodLedger(
        lateness=tuple(
            LatenessEvent(log_date=date(period.year, period.month, 1 + i % 28))
            for i in range(count)
        )
    )


def absence_ledger(permission: int, no_permission: int, period: PayPeriod) -> PeriodLedger:
    absences = [
        AbsenceEvent(date(period.year, period.month, 1 + i), AbsenceType.PERMISSION)
        for i in range(permission)
    ] + [
        AbsenceEvent(date(period.year, period.month, 15 + i), AbsenceType.NO_PERMISSION)
        for i in range(no_permission)
    ]
    return PeriodLedger(absences=tuple(absences))


@pytest.fixture
def may_2025() -> PayPeriod:
    return PayPeriod(5, 2025)
