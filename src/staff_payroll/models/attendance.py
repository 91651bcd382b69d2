"""Attendance, charge and allowance logs recorded against staff."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staff_payroll.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from staff_payroll.models.staff import Staff


MEAL_TICKET_AMOUNT = Decimal("500")

MANUAL_DEDUCTION_CATEGORIES = (
    "NEW_STAFF_STATUTORY_DEDUCTION",
    "ABSENCE_LATENESS_PERMISSION",
    "CITY_LEDGER_QUERY",
    "STAFF_MEAL_TICKET",
    "CONTROL_DEBT",
    "STAFF_RENT",
    "BANK_CHARGES",
    "OLD_STATUTORY_DEDUCTION",
    "PAYEE",
    "DEBT_DEDUCT",
    "MEETING_DEBIT",
    "CLEANING_DEBIT",
    "OTHER",
)


class LatenessLog(Base, TimestampMixin):
    """A late arrival on a given day."""

    __tablename__ = "lateness_log"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    staff_id: Mapped[UUID] = mapped_column(
        ForeignKey("staff.id", ondelete="CASCADE"),
        nullable=False,
    )
    log_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    arrival_time: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (Index("ix_lateness_log_staff_date", "staff_id", "date"),)

    staff: Mapped[Staff] = relationship(back_populates="lateness_logs")


class AbsenceLog(Base, TimestampMixin):
    """An absence, with or without permission."""

    __tablename__ = "absence_log"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    staff_id: Mapped[UUID] = mapped_column(
        ForeignKey("staff.id", ondelete="CASCADE"),
        nullable=False,
    )
    log_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        CheckConstraint("type IN ('PERMISSION', 'NO_PERMISSION')", name="absence_log_type_check"),
        Index("ix_absence_log_staff_date", "staff_id", "date"),
    )

    staff: Mapped[Staff] = relationship(back_populates="absence_logs")


class QueryLog(Base, TimestampMixin):
    """A disciplinary query with an optional surcharge and penalty days."""

    __tablename__ = "query_log"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    staff_id: Mapped[UUID] = mapped_column(
        ForeignKey("staff.id", ondelete="CASCADE"),
        nullable=False,
    )
    log_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False, default="")
    surcharge_amount: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    penalty_days: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (Index("ix_query_log_staff_date", "staff_id", "date"),)

    staff: Mapped[Staff] = relationship(back_populates="query_logs")


class StaffMealTicket(Base, TimestampMixin):
    """A meal ticket charged to staff."""

    __tablename__ = "staff_meal_ticket"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    staff_id: Mapped[UUID] = mapped_column(
        ForeignKey("staff.id", ondelete="CASCADE"),
        nullable=False,
    )
    log_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=MEAL_TICKET_AMOUNT
    )

    __table_args__ = (Index("ix_staff_meal_ticket_staff_date", "staff_id", "date"),)

    staff: Mapped[Staff] = relationship(back_populates="meal_tickets")


class ManualDeduction(Base, TimestampMixin):
    """An ad-hoc deduction booked against a payroll month."""

    __tablename__ = "manual_deduction"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    staff_id: Mapped[UUID] = mapped_column(
        ForeignKey("staff.id", ondelete="CASCADE"),
        nullable=False,
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "category IN ("
            + ", ".join(f"'{c}'" for c in MANUAL_DEDUCTION_CATEGORIES)
            + ")",
            name="manual_deduction_category_check",
        ),
        CheckConstraint("month BETWEEN 1 AND 12", name="manual_deduction_month_check"),
        Index("ix_manual_deduction_staff_period", "staff_id", "year", "month"),
    )

    staff: Mapped[Staff] = relationship(back_populates="manual_deductions")


class MonthlyAllowance(Base, TimestampMixin):
    """An allowance paid on top of salary for a payroll month."""

    __tablename__ = "monthly_allowance"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    staff_id: Mapped[UUID] = mapped_column(
        ForeignKey("staff.id", ondelete="CASCADE"),
        nullable=False,
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("month BETWEEN 1 AND 12", name="monthly_allowance_month_check"),
        Index("ix_monthly_allowance_staff_period", "staff_id", "year", "month"),
    )

    staff: Mapped[Staff] = relationship(back_populates="allowances")
