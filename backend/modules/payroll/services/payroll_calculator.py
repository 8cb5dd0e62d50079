# backend/modules/payroll/services/payroll_calculator.py

"""
Payroll Calculator - salary breakdown for one staff member and one month.

Combines:
- The attendance summary (loss-of-pay days, working days)
- Base salary and the benefits/deductions in force at month end

into earnings, deductions and net pay. Nothing is written; the same inputs
always give the same breakdown.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from core.config import get_settings
from modules.staff.exceptions.staff_exceptions import StaffNotFoundError
from modules.staff.services.attendance_aggregator import (
    AttendanceAggregator,
    AttendanceSummary,
    WorkLogAttendanceAggregator,
)
from ..enums.payroll_enums import CalculationType
from ..exceptions import PayrollNotFoundError
from ..utils.money import HUNDRED, ZERO, round_money, to_decimal
from ..utils.period import last_day_of_month, salary_period, validate_period
from .compensation_resolver import CompensationResolver

logger = logging.getLogger(__name__)

LOSS_OF_PAY = "Loss of Pay"


@dataclass(frozen=True)
class PayLine:
    """One named amount on a slip (benefit or deduction)."""
    name: str
    amount: Decimal
    taxable_or_statutory: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "amount": str(self.amount),
            "taxable_or_statutory": self.taxable_or_statutory,
        }


@dataclass(frozen=True)
class LineGroup:
    """Breakdown lines and their total; the total is always the sum of the lines."""
    breakdown: Tuple[PayLine, ...] = field(default_factory=tuple)

    @property
    def total(self) -> Decimal:
        return sum((line.amount for line in self.breakdown), ZERO)

    def to_list(self) -> List[dict]:
        return [line.to_dict() for line in self.breakdown]


@dataclass(frozen=True)
class SalaryFigures:
    base_salary: Decimal
    per_day_salary: Decimal
    lop_deduction: Decimal
    total_earnings: Decimal
    total_deductions: Decimal
    net_salary: Decimal


@dataclass(frozen=True)
class PayrollBreakdown:
    """Complete salary calculation result for one staff member and month."""
    staff_member_id: int
    month: int
    year: int
    attendance: AttendanceSummary
    salary: SalaryFigures
    benefits: LineGroup
    deductions: LineGroup

    @property
    def salary_period(self) -> str:
        return salary_period(self.month, self.year)

    @property
    def is_negative(self) -> bool:
        return self.salary.net_salary < 0


class PayrollCalculator:
    """
    Pure payroll computation.

    Rounding happens at two fixed points only: the loss-of-pay amount, and a
    percentage line at the moment it is created. Totals are sums of already
    rounded lines, so a slip always adds up to its own displayed figures.
    """

    def __init__(
        self,
        attendance: AttendanceAggregator,
        resolver: CompensationResolver,
        minor_units: Optional[int] = None,
    ):
        self.attendance = attendance
        self.resolver = resolver
        self.minor_units = (
            get_settings().payroll_currency_minor_units if minor_units is None else minor_units
        )

    @classmethod
    def for_session(cls, db: Session) -> "PayrollCalculator":
        return cls(WorkLogAttendanceAggregator(db), CompensationResolver(db))

    def calculate(self, staff_member_id: int, month: int, year: int) -> PayrollBreakdown:
        """
        Calculate the salary breakdown for a staff member and month.

        Args:
            staff_member_id: Staff member ID
            month: Calendar month (1-12)
            year: Calendar year

        Returns:
            PayrollBreakdown; net salary is not clamped and may be negative

        Raises:
            PayrollValidationError: malformed period or compensation data
            PayrollNotFoundError: unknown staff member or referenced type
        """
        validate_period(month, year)

        try:
            attendance = self.attendance.get_attendance_summary(staff_member_id, month, year)
        except StaffNotFoundError:
            raise PayrollNotFoundError("Staff member", staff_member_id)

        compensation = self.resolver.resolve(staff_member_id, last_day_of_month(month, year))
        base_salary = compensation.base_salary

        per_day_salary = self.per_day_rate(base_salary, attendance.total_working_days)
        lop_days = attendance.lop_days
        lop_deduction = round_money(per_day_salary * lop_days, self.minor_units)

        benefits = LineGroup(tuple(
            PayLine(
                name=benefit.benefit_type.title,
                amount=self.line_amount(benefit.calculation_type, benefit.amount, base_salary),
                taxable_or_statutory=bool(benefit.benefit_type.is_taxable),
            )
            for benefit in compensation.benefits
        ))

        deduction_lines = [
            PayLine(
                name=deduction.withholding_type.title,
                amount=self.line_amount(deduction.calculation_type, deduction.amount, base_salary),
                taxable_or_statutory=bool(deduction.withholding_type.is_statutory),
            )
            for deduction in compensation.deductions
        ]
        if lop_days > 0:
            deduction_lines.append(PayLine(name=LOSS_OF_PAY, amount=lop_deduction))
        deductions = LineGroup(tuple(deduction_lines))

        total_earnings = base_salary + benefits.total
        total_deductions = deductions.total

        breakdown = PayrollBreakdown(
            staff_member_id=staff_member_id,
            month=month,
            year=year,
            attendance=attendance,
            salary=SalaryFigures(
                base_salary=base_salary,
                per_day_salary=round_money(per_day_salary, self.minor_units),
                lop_deduction=lop_deduction,
                total_earnings=total_earnings,
                total_deductions=total_deductions,
                net_salary=total_earnings - total_deductions,
            ),
            benefits=benefits,
            deductions=deductions,
        )
        if breakdown.is_negative:
            logger.warning(
                f"Deductions exceed earnings for staff {staff_member_id} in "
                f"{breakdown.salary_period}: net {breakdown.salary.net_salary}"
            )
        return breakdown

    @staticmethod
    def per_day_rate(base_salary: Decimal, total_working_days: int) -> Decimal:
        """Unrounded daily rate; zero for a month without working days."""
        if not total_working_days:
            return ZERO
        return to_decimal(base_salary) / Decimal(total_working_days)

    def line_amount(self, calculation_type, amount, base_salary: Decimal) -> Decimal:
        amount = to_decimal(amount)
        if CalculationType(calculation_type) == CalculationType.PERCENTAGE:
            return round_money(base_salary * amount / HUNDRED, self.minor_units)
        return amount

