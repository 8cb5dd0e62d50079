# backend/modules/payroll/services/salary_slip_service.py

"""
Salary slip storage.

Slips are created once from a calculated breakdown and afterwards only move
from generated to paid. The (staff member, period) unique constraint is the
single source of truth for "one slip per period"; a violation surfaces as
``DuplicateSlipError`` however the duplicate came about.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.auth_context import ActorContext
from core.config import get_settings
from modules.staff.models.staff_models import StaffMember
from ..enums.payroll_enums import PaymentMethod, SalarySlipStatus
from ..exceptions import (
    DuplicateSlipError,
    PayrollBusinessRuleError,
    PayrollNotFoundError,
)
from ..models.payroll_models import SalarySlip
from ..utils.money import ZERO, to_decimal
from ..utils.period import parse_salary_period, salary_period, validate_period
from .payroll_calculator import PayrollBreakdown

logger = logging.getLogger(__name__)


def slip_reference(staff_code: str, month: int, year: int) -> str:
    return f"SLIP-{staff_code}-{year:04d}{month:02d}"


class SalarySlipService:
    """Persistence, status transitions and reporting for salary slips."""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def find_for_period(self, staff_member_id: int, period: str) -> Optional[SalarySlip]:
        return self.db.query(SalarySlip).filter(
            SalarySlip.staff_member_id == staff_member_id,
            SalarySlip.salary_period == period,
        ).first()

    def create_from_breakdown(
        self,
        breakdown: PayrollBreakdown,
        generated_at: Optional[datetime] = None,
    ) -> SalarySlip:
        """
        Persist a breakdown as a new slip.

        Args:
            breakdown: Calculator output, after the net pay policy was applied
            generated_at: Generation timestamp, defaults to now (UTC)

        Raises:
            DuplicateSlipError: a slip for the staff member and period exists
        """
        staff = self.db.get(StaffMember, breakdown.staff_member_id)
        if staff is None:
            raise PayrollNotFoundError("Staff member", breakdown.staff_member_id)

        salary = breakdown.salary
        slip = SalarySlip(
            slip_reference=slip_reference(staff.staff_code, breakdown.month, breakdown.year),
            staff_member_id=breakdown.staff_member_id,
            salary_period=breakdown.salary_period,
            basic_salary=salary.base_salary,
            benefits_breakdown=breakdown.benefits.to_list(),
            deductions_breakdown=breakdown.deductions.to_list(),
            attendance_snapshot=breakdown.attendance.to_dict(),
            lop_days=breakdown.attendance.lop_days,
            total_earnings=salary.total_earnings,
            total_deductions=salary.total_deductions,
            net_payable=salary.net_salary,
            status=SalarySlipStatus.GENERATED,
            generated_at=generated_at or datetime.utcnow(),
        )
        self.db.add(slip)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateSlipError(breakdown.staff_member_id, breakdown.salary_period)

        self.db.refresh(slip)
        logger.info(f"Created salary slip {slip.slip_reference} (id={slip.id})")
        return slip

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_slip(self, slip_id: int, actor: Optional[ActorContext] = None) -> SalarySlip:
        slip = self.db.get(SalarySlip, slip_id)
        # slips of other staff members are reported as missing, not forbidden
        if slip is None or (actor is not None and not actor.can_view_staff(slip.staff_member_id)):
            raise PayrollNotFoundError("Salary slip", slip_id)
        return slip

    def list_slips(
        self,
        actor: Optional[ActorContext] = None,
        staff_member_id: Optional[int] = None,
        period_from: Optional[str] = None,
        period_to: Optional[str] = None,
        status: Optional[SalarySlipStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[SalarySlip], int]:
        """Slips ordered newest period first, plus the unpaginated total."""
        query = self.db.query(SalarySlip)

        if actor is not None and not actor.is_payroll_admin:
            if actor.staff_member_id is None:
                return [], 0
            query = query.filter(SalarySlip.staff_member_id == actor.staff_member_id)
        if staff_member_id is not None:
            query = query.filter(SalarySlip.staff_member_id == staff_member_id)
        if period_from:
            parse_salary_period(period_from)
            query = query.filter(SalarySlip.salary_period >= period_from)
        if period_to:
            parse_salary_period(period_to)
            query = query.filter(SalarySlip.salary_period <= period_to)
        if status is not None:
            query = query.filter(SalarySlip.status == SalarySlipStatus(status))

        total = query.count()
        items = query.order_by(
            SalarySlip.salary_period.desc(), SalarySlip.staff_member_id
        ).offset(offset).limit(limit).all()
        return items, total

    def staff_history(self, staff_member_id: int, limit: Optional[int] = None) -> List[SalarySlip]:
        limit = limit or get_settings().salary_history_limit
        return self.db.query(SalarySlip).filter(
            SalarySlip.staff_member_id == staff_member_id
        ).order_by(SalarySlip.salary_period.desc()).limit(limit).all()

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    def mark_paid(
        self,
        slip_id: int,
        payment_method: Optional[PaymentMethod] = None,
        payment_reference: Optional[str] = None,
        paid_at: Optional[datetime] = None,
    ) -> SalarySlip:
        slip = self.get_slip(slip_id)
        if slip.status == SalarySlipStatus.PAID:
            raise PayrollBusinessRuleError(
                f"Salary slip {slip_id} is already paid", rule="slip_already_paid"
            )

        slip.status = SalarySlipStatus.PAID
        slip.paid_at = paid_at or datetime.utcnow()
        slip.payment_method = payment_method
        slip.payment_reference = payment_reference
        self.db.commit()
        self.db.refresh(slip)
        logger.info(f"Salary slip {slip.slip_reference} marked as paid")
        return slip

    def bulk_mark_paid(
        self,
        slip_ids: Sequence[int],
        payment_method: Optional[PaymentMethod] = None,
        payment_reference: Optional[str] = None,
    ) -> int:
        """Mark the generated slips among ``slip_ids`` as paid; returns how many moved."""
        if not slip_ids:
            return 0
        updated = self.db.query(SalarySlip).filter(
            SalarySlip.id.in_(list(slip_ids)),
            SalarySlip.status == SalarySlipStatus.GENERATED,
        ).update(
            {
                SalarySlip.status: SalarySlipStatus.PAID,
                SalarySlip.paid_at: datetime.utcnow(),
                SalarySlip.payment_method: payment_method,
                SalarySlip.payment_reference: payment_reference,
            },
            synchronize_session=False,
        )
        self.db.commit()
        logger.info(f"Marked {updated} of {len(slip_ids)} salary slips as paid")
        return updated

    def delete_slip(self, slip_id: int) -> None:
        """Remove a generated slip so the period can be regenerated."""
        slip = self.get_slip(slip_id)
        if slip.status == SalarySlipStatus.PAID:
            raise PayrollBusinessRuleError(
                f"Salary slip {slip_id} is paid and cannot be deleted", rule="slip_already_paid"
            )
        reference = slip.slip_reference
        self.db.delete(slip)
        self.db.commit()
        logger.info(f"Deleted salary slip {reference}")

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def monthly_summary(self, month: int, year: int) -> Dict[str, Any]:
        validate_period(month, year)
        period = salary_period(month, year)
        totals = self._totals(SalarySlip.salary_period == period)
        return {
            "month": month,
            "year": year,
            "salary_period": period,
            "total_employees": totals["count"],
            "total_earnings": totals["total_earnings"],
            "total_deductions": totals["total_deductions"],
            "total_net_payable": totals["total_net_payable"],
            "paid_count": totals["paid_count"],
            "pending_count": totals["count"] - totals["paid_count"],
        }

    def statistics(self, today: Optional[date] = None) -> Dict[str, Any]:
        today = today or date.today()
        current = self._totals(SalarySlip.salary_period == salary_period(today.month, today.year))
        year_to_date = self._totals(SalarySlip.salary_period.like(f"{today.year:04d}-%"))
        return {
            "current_month": {
                "salary_period": salary_period(today.month, today.year),
                "total_salary": current["total_net_payable"],
                "employees_paid": current["paid_count"],
                "employees_pending": current["count"] - current["paid_count"],
            },
            "year_to_date": {
                "total_salary": year_to_date["total_net_payable"],
                "total_slips": year_to_date["count"],
            },
        }

    def _totals(self, criterion) -> Dict[str, Any]:
        row = self.db.query(
            func.count(SalarySlip.id),
            func.sum(SalarySlip.total_earnings),
            func.sum(SalarySlip.total_deductions),
            func.sum(SalarySlip.net_payable),
        ).filter(criterion).one()
        paid_count = self.db.query(func.count(SalarySlip.id)).filter(
            criterion, SalarySlip.status == SalarySlipStatus.PAID
        ).scalar()
        return {
            "count": row[0] or 0,
            "total_earnings": to_decimal(row[1]) if row[1] is not None else ZERO,
            "total_deductions": to_decimal(row[2]) if row[2] is not None else ZERO,
            "total_net_payable": to_decimal(row[3]) if row[3] is not None else ZERO,
            "paid_count": paid_count or 0,
        }
