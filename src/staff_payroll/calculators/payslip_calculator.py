"""Pure payslip calculator."""

from __future__ import annotations

from decimal import Decimal

from staff_payroll.calculators.rules import (
    MONTHLY_DIVISOR,
    ZERO,
    active_days_in_period,
    lateness_penalty_days,
    months_between,
    round_to_cents,
    select_default_charges,
    tenure_bracket,
)
from staff_payroll.calculators.types import (
    AbsenceType,
    PayPeriod,
    Payslip,
    PeriodLedger,
    SalaryRecord,
    StaffSnapshot,
)


class PayslipCalculator:
    """Turns salary, attendance and charges into an itemized payslip.

    Calculation pipeline (stable order):
    1) Resolve gross (zero when no salary record applies)
    2) Daily rate = gross / 31
    3) Prorate gross for staff who went inactive during the period
    4) Absence, lateness and query penalty deductions priced at the daily rate
    5) Manual deductions, query surcharges and meal tickets
    6) Tenure bracket selects statutory and flat default charges
    7) Net = gross - deductions + allowances, rounded once to cents

    The calculator has no I/O and no clock: identical inputs always give an
    identical payslip.
    """

    def compute(
        self,
        staff: StaffSnapshot,
        salary: SalaryRecord | None,
        ledger: PeriodLedger,
        period: PayPeriod,
    ) -> Payslip:
        warnings: list[str] = []

        # 1) Gross
        if salary is None:
            base_gross = ZERO
            warnings.append(f"No salary record effective for {period}")
        else:
            base_gross = Decimal(salary.monthly_gross)

        # 2) Daily rate
        daily = base_gross / MONTHLY_DIVISOR

        # 3) Prorating, before any gross-based charge
        gross = base_gross
        active_days = active_days_in_period(staff, period)
        if active_days is not None:
            gross = daily * active_days

        # 4) Day-priced deductions
        permission_days = sum(
            1 for a in ledger.absences if a.type == AbsenceType.PERMISSION
        )
        no_permission_days = sum(
            1 for a in ledger.absences if a.type == AbsenceType.NO_PERMISSION
        )
        absence_deduction = permission_days * daily + no_permission_days * daily * 2

        lateness_count = len(ledger.lateness)
        penalty_days = lateness_penalty_days(lateness_count)
        lateness_deduction = penalty_days * daily

        query_surcharge_total = sum(
            (q.surcharge_amount or ZERO for q in ledger.queries), ZERO
        )
        query_penalty_days_total = sum(q.penalty_days or 0 for q in ledger.queries)
        query_penalty_deduction = query_penalty_days_total * daily

        # 5) Flat amounts
        manual_deductions_total = sum(
            (m.amount for m in ledger.manual_deductions), ZERO
        )
        allowances_total = sum((a.amount for a in ledger.allowances), ZERO)
        meal_ticket_total = sum((m.amount for m in ledger.meal_tickets), ZERO)

        # 6) Tenure charges
        tenure_months = months_between(period.start, staff.resumption_date)
        bracket = tenure_bracket(tenure_months)
        charges = select_default_charges(bracket, gross)

        # 7) Net
        deductions = (
            absence_deduction,
            lateness_deduction,
            manual_deductions_total,
            query_surcharge_total,
            query_penalty_deduction,
            meal_ticket_total,
            charges.flat_total,
            charges.new_staff_statutory,
        )
        net_exact = gross - sum(deductions, ZERO) + allowances_total
        net = round_to_cents(net_exact)
        gross_rounded = round_to_cents(gross)

        # Penny drift between rounded components and the rounded net
        components_net = (
            gross_rounded
            - sum((round_to_cents(d) for d in deductions), ZERO)
            + round_to_cents(allowances_total)
        )
        rounding_adjustment = net - components_net

        if net < 0:
            warnings.append(f"Negative net salary: {net}")

        return Payslip(
            staff_id=staff.staff_id,
            month=period.month,
            year=period.year,
            gross_salary=gross_rounded,
            daily_rate=round_to_cents(daily),
            permission_absence_days=permission_days,
            no_permission_absence_days=no_permission_days,
            absence_deduction=round_to_cents(absence_deduction),
            lateness_count=lateness_count,
            lateness_penalty_days=penalty_days,
            lateness_deduction=round_to_cents(lateness_deduction),
            manual_deductions_total=round_to_cents(manual_deductions_total),
            allowances_total=round_to_cents(allowances_total),
            query_surcharge_total=round_to_cents(query_surcharge_total),
            query_penalty_days_total=query_penalty_days_total,
            query_penalty_deduction=round_to_cents(query_penalty_deduction),
            meal_ticket_total=round_to_cents(meal_ticket_total),
            tenure_months=tenure_months,
            tenure_bracket=bracket,
            bank_charges=round_to_cents(charges.bank_charges),
            water_rate=round_to_cents(charges.water_rate),
            old_staff_statutory=round_to_cents(charges.old_staff_statutory),
            default_charges_total=round_to_cents(charges.flat_total),
            new_staff_statutory=round_to_cents(charges.new_staff_statutory),
            rounding_adjustment=rounding_adjustment,
            total_deductions=gross_rounded - net,
            net_salary=net,
            warnings=tuple(warnings),
        )
