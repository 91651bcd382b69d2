"""Payroll run and per-staff payslip snapshot models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staff_payroll.models.base import Base, TimestampMixin


class PayrollRun(Base, TimestampMixin):
    """Aggregate payroll figures for one month, with approval lifecycle."""

    __tablename__ = "payroll_run"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="DRAFT")

    created_by: Mapped[UUID | None] = mapped_column(nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by: Mapped[UUID | None] = mapped_column(nullable=True)
    locked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    locked_by: Mapped[UUID | None] = mapped_column(nullable=True)

    total_staff: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_gross_salary: Mapped[Decimal] = mapped_column(
        Numeric(16, 2), nullable=False, default=Decimal("0")
    )
    total_deductions: Mapped[Decimal] = mapped_column(
        Numeric(16, 2), nullable=False, default=Decimal("0")
    )
    total_net_pay: Mapped[Decimal] = mapped_column(
        Numeric(16, 2), nullable=False, default=Decimal("0")
    )

    __table_args__ = (
        UniqueConstraint("month", "year", name="payroll_run_period_unique"),
        CheckConstraint(
            "status IN ('DRAFT', 'APPROVED', 'LOCKED')",
            name="payroll_run_status_check",
        ),
        CheckConstraint("month BETWEEN 1 AND 12", name="payroll_run_month_check"),
    )

    # Relationships
    lines: Mapped[list[PayrollLine]] = relationship(
        back_populates="payroll_run",
        cascade="all, delete-orphan",
        order_by="PayrollLine.full_name",
    )

    @property
    def period_label(self) -> str:
        return f"{self.month}/{self.year}"


class PayrollLine(Base, TimestampMixin):
    """Payslip breakdown for one staff member, frozen at run generation."""

    __tablename__ = "payroll_line"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    payroll_run_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll_run.id", ondelete="CASCADE"),
        nullable=False,
    )
    staff_id: Mapped[UUID] = mapped_column(
        ForeignKey("staff.id", ondelete="RESTRICT"),
        nullable=False,
    )

    # Staff details as of generation
    staff_code: Mapped[str | None] = mapped_column(String, nullable=True)
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    department: Mapped[str] = mapped_column(String, nullable=False)
    position: Mapped[str] = mapped_column(String, nullable=False)

    gross_salary: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    daily_rate: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    permission_absence_days: Mapped[int] = mapped_column(Integer, nullable=False)
    no_permission_absence_days: Mapped[int] = mapped_column(Integer, nullable=False)
    absence_deduction: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    lateness_count: Mapped[int] = mapped_column(Integer, nullable=False)
    lateness_penalty_days: Mapped[int] = mapped_column(Integer, nullable=False)
    lateness_deduction: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    manual_deductions_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    allowances_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    query_surcharge_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    query_penalty_days_total: Mapped[int] = mapped_column(Integer, nullable=False)
    query_penalty_deduction: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    meal_ticket_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    tenure_months: Mapped[int] = mapped_column(Integer, nullable=False)
    tenure_bracket: Mapped[str] = mapped_column(String, nullable=False)
    bank_charges: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    water_rate: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    old_staff_statutory: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    default_charges_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    new_staff_statutory: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    rounding_adjustment: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    total_deductions: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    net_salary: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    fingerprint: Mapped[str] = mapped_column(String(64), nullable=False)

    __table_args__ = (
        UniqueConstraint("payroll_run_id", "staff_id", name="payroll_line_run_staff_unique"),
        CheckConstraint(
            "tenure_bracket IN ('NEW', 'ESTABLISHED')",
            name="payroll_line_tenure_bracket_check",
        ),
    )

    # Relationships
    payroll_run: Mapped[PayrollRun] = relationship(back_populates="lines")
