"""Staff and salary history models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staff_payroll.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from staff_payroll.models.attendance import (
        AbsenceLog,
        LatenessLog,
        ManualDeduction,
        MonthlyAllowance,
        QueryLog,
        StaffMealTicket,
    )


class Staff(Base, TimestampMixin):
    """Staff member record."""

    __tablename__ = "staff"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    staff_code: Mapped[str | None] = mapped_column(String, nullable=True, unique=True)
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    department: Mapped[str] = mapped_column(String, nullable=False)
    position: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="ACTIVE")
    resumption_date: Mapped[date] = mapped_column(Date, nullable=False)
    last_active_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    inactive_reason: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint("status IN ('ACTIVE', 'INACTIVE')", name="staff_status_check"),
    )

    # Relationships
    salary_history: Mapped[list[SalaryHistory]] = relationship(back_populates="staff")
    lateness_logs: Mapped[list[LatenessLog]] = relationship(back_populates="staff")
    absence_logs: Mapped[list[AbsenceLog]] = relationship(back_populates="staff")
    query_logs: Mapped[list[QueryLog]] = relationship(back_populates="staff")
    meal_tickets: Mapped[list[StaffMealTicket]] = relationship(back_populates="staff")
    manual_deductions: Mapped[list[ManualDeduction]] = relationship(back_populates="staff")
    allowances: Mapped[list[MonthlyAllowance]] = relationship(back_populates="staff")


class SalaryHistory(Base, TimestampMixin):
    """Monthly gross salary effective from a date."""

    __tablename__ = "salary_history"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    staff_id: Mapped[UUID] = mapped_column(
        ForeignKey("staff.id", ondelete="CASCADE"),
        nullable=False,
    )
    monthly_salary: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        UniqueConstraint("staff_id", "effective_from", name="salary_history_staff_effective_unique"),
        CheckConstraint("monthly_salary >= 0", name="salary_history_amount_check"),
    )

    # Relationships
    staff: Mapped[Staff] = relationship(back_populates="salary_history")
