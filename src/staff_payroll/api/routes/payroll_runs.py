"""Payroll run API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from staff_payroll.api.dependencies import ActorId, DbSession, SessionFactory
from staff_payroll.api.schemas import (
    ErrorResponse,
    PayrollLineListResponse,
    PayrollLineResponse,
    PayrollRunCreate,
    PayrollRunListResponse,
    PayrollRunResponse,
)
from staff_payroll.database import run_in_transaction
from staff_payroll.models import PayrollRun
from staff_payroll.services import PayrollRunService, PayrollRunStateMachine

router = APIRouter(prefix="/payroll/runs", tags=["payroll-runs"])


def _run_response(run: PayrollRun) -> PayrollRunResponse:
    response = PayrollRunResponse.model_validate(run)
    response.allowed_actions = [
        action.value for action in PayrollRunStateMachine.get_allowed_actions(run.status)
    ]
    return response


# ============================================================================
# Generation and queries
# ============================================================================


@router.post(
    "",
    response_model=PayrollRunResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def generate_payroll_run(
    factory: SessionFactory,
    actor_id: ActorId,
    payload: PayrollRunCreate,
) -> PayrollRunResponse:
    """Generate a DRAFT payroll run for a month."""

    async def work(session: AsyncSession) -> PayrollRun:
        return await PayrollRunService(session).generate_run(
            payload.month, payload.year, actor_user_id=actor_id
        )

    run = await run_in_transaction(factory, work)
    return _run_response(run)


@router.get(
    "",
    response_model=PayrollRunListResponse,
    responses={400: {"model": ErrorResponse}},
)
async def list_payroll_runs(
    db: DbSession,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
) -> PayrollRunListResponse:
    """List payroll runs, newest period first."""
    runs = await PayrollRunService(db).list_runs(status=status_filter)
    return PayrollRunListResponse(
        items=[_run_response(run) for run in runs],
        total=len(runs),
    )


@router.get(
    "/{run_id}",
    response_model=PayrollRunResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll_run(
    db: DbSession,
    run_id: Annotated[UUID, Path()],
) -> PayrollRunResponse:
    """Get a specific payroll run by ID."""
    run = await PayrollRunService(db).get_run(run_id)
    return _run_response(run)


@router.get(
    "/{run_id}/payslips",
    response_model=PayrollLineListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def list_payroll_run_payslips(
    db: DbSession,
    run_id: Annotated[UUID, Path()],
) -> PayrollLineListResponse:
    """List the payslips frozen in a payroll run."""
    lines = await PayrollRunService(db).list_run_payslips(run_id)
    return PayrollLineListResponse(
        items=[PayrollLineResponse.model_validate(line) for line in lines],
        total=len(lines),
    )


# ============================================================================
# Lifecycle
# ============================================================================


@router.post(
    "/{run_id}/approve",
    response_model=PayrollRunResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def approve_payroll_run(
    factory: SessionFactory,
    actor_id: ActorId,
    run_id: Annotated[UUID, Path()],
) -> PayrollRunResponse:
    """Approve a DRAFT payroll run."""

    async def work(session: AsyncSession) -> PayrollRun:
        return await PayrollRunService(session).approve_run(run_id, actor_id)

    return _run_response(await run_in_transaction(factory, work))


@router.post(
    "/{run_id}/lock",
    response_model=PayrollRunResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def lock_payroll_run(
    factory: SessionFactory,
    actor_id: ActorId,
    run_id: Annotated[UUID, Path()],
) -> PayrollRunResponse:
    """Lock an APPROVED payroll run."""

    async def work(session: AsyncSession) -> PayrollRun:
        return await PayrollRunService(session).lock_run(run_id, actor_id)

    return _run_response(await run_in_transaction(factory, work))


@router.post(
    "/{run_id}/reject",
    response_model=PayrollRunResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def reject_payroll_run(
    factory: SessionFactory,
    actor_id: ActorId,
    run_id: Annotated[UUID, Path()],
) -> PayrollRunResponse:
    """Send an APPROVED payroll run back to DRAFT."""

    async def work(session: AsyncSession) -> PayrollRun:
        return await PayrollRunService(session).reject_run(run_id, actor_id)

    return _run_response(await run_in_transaction(factory, work))


@router.delete(
    "/{run_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_payroll_run(
    factory: SessionFactory,
    run_id: Annotated[UUID, Path()],
) -> Response:
    """Delete a DRAFT payroll run."""

    async def work(session: AsyncSession) -> None:
        await PayrollRunService(session).delete_run(run_id)

    await run_in_transaction(factory, work)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
