"""Rules deciding whether a salary slip may be generated."""

import logging
from dataclasses import replace
from datetime import date

from ..enums.payroll_enums import NetPayPolicy
from ..exceptions import PayrollPolicyViolation
from ..schemas.error_schemas import PayrollErrorCodes
from ..utils.period import salary_period
from .payroll_calculator import LineGroup, PayLine, PayrollBreakdown

logger = logging.getLogger(__name__)

NET_PAY_ADJUSTMENT = "Net Pay Adjustment"


def check_generation_window(month: int, year: int, today: date, cutoff_day: int) -> None:
    """
    Past months are always open, future months never. The current month
    opens on ``cutoff_day`` so the whole month's attendance is in.
    """
    requested = (year, month)
    current = (today.year, today.month)
    period = salary_period(month, year)

    if requested > current:
        raise PayrollPolicyViolation(
            f"Cannot generate payroll for future period {period}",
            code=PayrollErrorCodes.FUTURE_PERIOD,
        )
    if requested == current and today.day < cutoff_day:
        raise PayrollPolicyViolation(
            f"Payroll for {period} can only be generated from day {cutoff_day} of the month",
            code=PayrollErrorCodes.GENERATION_NOT_OPEN,
        )


def apply_net_pay_policy(breakdown: PayrollBreakdown, policy) -> PayrollBreakdown:
    """
    Breakdown to store under the configured negative net pay policy.

    ``clamp`` appends a negative "Net Pay Adjustment" deduction equal to the
    deficit, so the stored lines still add up to a zero net payable.
    """
    net_salary = breakdown.salary.net_salary
    if net_salary >= 0:
        return breakdown

    staff_member_id = breakdown.staff_member_id
    policy = NetPayPolicy(policy)
    if policy == NetPayPolicy.REJECT:
        raise PayrollPolicyViolation(
            f"Deductions exceed earnings for staff member {staff_member_id} (net {net_salary})",
            code=PayrollErrorCodes.NEGATIVE_NET_PAY,
        )
    if policy == NetPayPolicy.ALLOW:
        return breakdown

    logger.warning(f"Clamping negative net pay {net_salary} to zero for staff member {staff_member_id}")
    deductions = LineGroup(
        breakdown.deductions.breakdown + (PayLine(name=NET_PAY_ADJUSTMENT, amount=net_salary),)
    )
    salary = replace(
        breakdown.salary,
        total_deductions=deductions.total,
        net_salary=breakdown.salary.total_earnings - deductions.total,
    )
    return replace(breakdown, deductions=deductions, salary=salary)
