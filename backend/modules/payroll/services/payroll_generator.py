# backend/modules/payroll/services/payroll_generator.py

"""
Bulk salary slip generation.

Runs the calculator for each requested staff member and stores one slip per
member and period. Members are independent: one failing member is reported
in ``skipped`` and never prevents the others from being generated, and
re-running a generation never creates a second slip for the same period.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterable, List, Optional

from sqlalchemy.orm import Session

from core.config import Settings, get_settings
from modules.staff.enums.staff_enums import StaffStatus
from modules.staff.models.staff_models import StaffMember
from ..enums.payroll_enums import SkipReason
from ..exceptions import (
    DuplicateSlipError,
    PayrollNotFoundError,
    PayrollPolicyViolation,
)
from ..models.payroll_models import SalarySlip
from ..utils.period import salary_period, validate_period
from .generation_policy import apply_net_pay_policy, check_generation_window
from .payroll_calculator import PayrollCalculator
from .salary_slip_service import SalarySlipService

logger = logging.getLogger(__name__)


def is_payable(staff: StaffMember) -> bool:
    return bool(staff.is_active) and StaffStatus(staff.status) == StaffStatus.ACTIVE


@dataclass(frozen=True)
class SkippedEntry:
    staff_member_id: int
    reason: SkipReason
    message: str = ""


@dataclass
class GenerationResult:
    """Outcome of one generation run; every requested member lands in exactly one list."""
    salary_period: str
    created: List[SalarySlip] = field(default_factory=list)
    skipped: List[SkippedEntry] = field(default_factory=list)

    def skip(self, staff_member_id: int, reason: SkipReason, message: str = "") -> None:
        self.skipped.append(SkippedEntry(staff_member_id, reason, message))


class PayrollGenerator:
    """Generates and stores salary slips for a month."""

    def __init__(
        self,
        db: Session,
        calculator: Optional[PayrollCalculator] = None,
        slip_service: Optional[SalarySlipService] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], date] = date.today,
    ):
        self.db = db
        self.calculator = calculator or PayrollCalculator.for_session(db)
        self.slip_service = slip_service or SalarySlipService(db)
        self.settings = settings or get_settings()
        self.clock = clock

    def generate(
        self,
        employee_ids: Optional[Iterable[int]],
        month: int,
        year: int,
    ) -> GenerationResult:
        """
        Generate salary slips for ``employee_ids`` (all active staff when None or empty).

        Listed staff members who are inactive, or whose status is not
        active, are skipped with reason ``inactive``.

        Raises:
            PayrollValidationError: malformed month or year, before anything
                is read or written
        """
        validate_period(month, year)
        period = salary_period(month, year)
        staff_ids = self._target_staff_ids(employee_ids)
        result = GenerationResult(salary_period=period)

        try:
            check_generation_window(
                month, year, self.clock(), self.settings.payroll_generation_cutoff_day
            )
        except PayrollPolicyViolation as e:
            logger.info(f"Generation for {period} refused: {e.message}")
            for staff_id in staff_ids:
                result.skip(staff_id, SkipReason.POLICY, e.message)
            return result

        logger.info(f"Generating salary slips for {len(staff_ids)} staff members, period {period}")
        for staff_id in staff_ids:
            self._generate_one(staff_id, month, year, result)

        logger.info(
            f"Generation for {period} finished: {len(result.created)} created, "
            f"{len(result.skipped)} skipped"
        )
        return result

    def _generate_one(self, staff_id: int, month: int, year: int, result: GenerationResult) -> None:
        period = result.salary_period
        try:
            staff = self.db.get(StaffMember, staff_id)
            if staff is None:
                result.skip(staff_id, SkipReason.NOT_FOUND, f"Staff member with identifier {staff_id} not found")
                return
            if not is_payable(staff):
                status = StaffStatus(staff.status).value
                logger.info(f"Skipping staff member {staff_id} for {period}: not active ({status})")
                result.skip(staff_id, SkipReason.INACTIVE, f"Staff member {staff_id} is not active ({status})")
                return
            if self.slip_service.find_for_period(staff_id, period) is not None:
                result.skip(staff_id, SkipReason.DUPLICATE, f"Salary slip for {period} already exists")
                return

            breakdown = apply_net_pay_policy(
                self.calculator.calculate(staff_id, month, year),
                self.settings.negative_net_pay_policy,
            )
            slip = self.slip_service.create_from_breakdown(breakdown)
            result.created.append(slip)
        except DuplicateSlipError as e:
            # lost a race against a concurrent generation
            result.skip(staff_id, SkipReason.DUPLICATE, e.message)
        except PayrollPolicyViolation as e:
            result.skip(staff_id, SkipReason.POLICY, e.message)
        except PayrollNotFoundError as e:
            result.skip(staff_id, SkipReason.NOT_FOUND, e.message)
        except Exception as e:
            logger.exception(f"Salary slip generation failed for staff member {staff_id}, period {period}")
            self.db.rollback()
            result.skip(staff_id, SkipReason.ERROR, str(e))

    def _target_staff_ids(self, employee_ids: Optional[Iterable[int]]) -> List[int]:
        employee_ids = list(employee_ids or [])
        if not employee_ids:
            rows = self.db.query(StaffMember.id).filter(
                StaffMember.is_active.is_(True),
                StaffMember.status == StaffStatus.ACTIVE,
            ).order_by(StaffMember.id).all()
            return [row[0] for row in rows]

        # keep request order, drop repeats
        seen = set()
        ordered = []
        for staff_id in employee_ids:
            if staff_id not in seen:
                seen.add(staff_id)
                ordered.append(staff_id)
        return ordered
