"""Payslip API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query

from staff_payroll.api.dependencies import DbSession
from staff_payroll.api.schemas import ErrorResponse, PayslipResponse
from staff_payroll.services import PayslipService

router = APIRouter(prefix="/payslips", tags=["payslips"])


@router.get(
    "/{staff_id}",
    response_model=PayslipResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_payslip(
    db: DbSession,
    staff_id: Annotated[UUID, Path()],
    month: int | None = None,
    year: int | None = None,
    live: Annotated[bool, Query()] = False,
) -> PayslipResponse:
    """Get a staff member's payslip for a month.

    Returns the payslip frozen by the month's payroll run when there is one,
    unless ``live`` asks for a recomputation from current records.
    """
    payslip = await PayslipService(db).compute_payslip(staff_id, month, year, live=live)
    return PayslipResponse.model_validate(payslip)
