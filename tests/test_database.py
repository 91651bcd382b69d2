"""Tests for transaction boundaries and retries."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from staff_payroll.database import run_in_transaction
from staff_payroll.errors import ValidationError
from staff_payroll.models import Staff
from tests.conftest import add_staff


def transient_failure() -> OperationalError:
    return OperationalError("UPDATE payroll_run", {}, Exception("database is locked"))


class TestRunInTransaction:
    async def test_commits_on_success(self, session_factory):
        async def work(session):
            staff = await add_staff(session)
            return staff.id

        staff_id = await run_in_transaction(session_factory, work)

        async with session_factory() as session:
            assert await session.get(Staff, staff_id) is not None

    async def test_rolls_back_business_errors(self, session_factory):
        calls = []

        async def work(session):
            calls.append(1)
            await add_staff(session)
            raise ValidationError("bad input")

        with pytest.raises(ValidationError):
            await run_in_transaction(session_factory, work)

        async with session_factory() as session:
            count = await session.scalar(select(func.count()).select_from(Staff))
        assert count == 0
        assert len(calls) == 1

    async def test_retries_transient_failures(self, session_factory):
        """The whole unit of work is re-run in a fresh session."""
        attempts = []

        async def work(session):
            attempts.append(session)
            await add_staff(session, full_name=f"Attempt {len(attempts)}")
            if len(attempts) < 3:
                raise transient_failure()
            return len(attempts)

        assert await run_in_transaction(session_factory, work, attempts=3) == 3
        assert len({id(s) for s in attempts}) == 3

        async with session_factory() as session:
            names = (await session.execute(select(Staff.full_name))).scalars().all()
        assert names == ["Attempt 3"]

    async def test_gives_up_after_max_attempts(self, session_factory):
        attempts = []

        async def work(session):
            attempts.append(1)
            raise transient_failure()

        with pytest.raises(OperationalError):
            await run_in_transaction(session_factory, work, attempts=2)
        assert len(attempts) == 2
