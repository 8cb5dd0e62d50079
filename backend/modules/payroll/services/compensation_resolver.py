# backend/modules/payroll/services/compensation_resolver.py

"""
Compensation resolution.

Answers "what is this staff member paid, and which benefits and deductions
apply" for a given day. Payroll asks with the last day of the salary month,
so an assignment starting or ending mid-month is judged against month end.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from modules.staff.models.staff_models import StaffMember
from ..exceptions import PayrollNotFoundError, PayrollValidationError
from ..models.compensation_models import (
    RecurringDeduction,
    StaffBenefit,
    check_assignment_amount,
)
from ..utils.money import ZERO, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedCompensation:
    """Base salary and the assignments in force on ``as_of_date``."""
    staff_member_id: int
    as_of_date: date
    base_salary: Decimal
    benefits: List[StaffBenefit] = field(default_factory=list)
    deductions: List[RecurringDeduction] = field(default_factory=list)


class CompensationResolver:
    """Reads base salary plus active benefit and deduction assignments."""

    def __init__(self, db: Session):
        self.db = db

    def resolve(self, staff_member_id: int, as_of_date: date) -> ResolvedCompensation:
        """
        Resolve compensation for a staff member.

        Args:
            staff_member_id: Staff member ID
            as_of_date: Day the effective-date windows are evaluated on

        Returns:
            ResolvedCompensation with assignments ordered by id

        Raises:
            PayrollNotFoundError: unknown staff member, or an assignment
                pointing at a missing benefit/withholding type
            PayrollValidationError: negative base salary or an assignment
                amount outside its allowed range
        """
        staff = self.db.query(StaffMember).filter(StaffMember.id == staff_member_id).first()
        if not staff:
            raise PayrollNotFoundError("Staff member", staff_member_id)

        base_salary = to_decimal(staff.base_salary) if staff.base_salary is not None else ZERO
        if base_salary < 0:
            raise PayrollValidationError(
                f"Staff member {staff_member_id} has a negative base salary",
                field="base_salary",
            )

        benefits = self._active(StaffBenefit, staff_member_id, as_of_date)
        deductions = self._active(RecurringDeduction, staff_member_id, as_of_date)

        for benefit in benefits:
            if benefit.benefit_type is None:
                raise PayrollNotFoundError("Benefit type", benefit.benefit_type_id)
            self._check_amount(benefit, "benefit")
        for deduction in deductions:
            if deduction.withholding_type is None:
                raise PayrollNotFoundError("Withholding type", deduction.withholding_type_id)
            self._check_amount(deduction, "deduction")

        logger.debug(
            f"Resolved compensation for staff {staff_member_id} as of {as_of_date}: "
            f"{len(benefits)} benefits, {len(deductions)} deductions"
        )
        return ResolvedCompensation(
            staff_member_id=staff_member_id,
            as_of_date=as_of_date,
            base_salary=base_salary,
            benefits=benefits,
            deductions=deductions,
        )

    def _active(self, model, staff_member_id: int, as_of_date: date) -> list:
        return self.db.query(model).filter(
            model.staff_member_id == staff_member_id,
            model.is_active.is_(True),
            model.effective_from <= as_of_date,
            or_(model.effective_until.is_(None), model.effective_until >= as_of_date),
        ).order_by(model.id).all()

    @staticmethod
    def _check_amount(assignment, kind: str) -> None:
        # rows may have been written without going through the model validators
        try:
            check_assignment_amount(assignment.calculation_type, assignment.amount)
        except ValueError as e:
            raise PayrollValidationError(
                f"Invalid {kind} {assignment.id}: {e}", field="amount"
            )
