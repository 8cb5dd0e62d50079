"""
Monthly attendance aggregation for payroll.

The clock-in/out subsystem writes one ``WorkLog`` per staff member per day.
Payroll only needs the month rolled up into day counts, so this module
defines the ``AttendanceAggregator`` interface the payroll calculator
depends on, plus the SQLAlchemy-backed implementation that reads work logs,
working-day configuration and approved time off.
"""

import calendar
import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from core.config import WEEKDAY_NAMES, get_settings
from ..enums.attendance_enums import LeaveApprovalStatus, WorkLogStatus
from ..exceptions.staff_exceptions import StaffNotFoundError
from ..models.attendance_models import TimeOffCategory, TimeOffRequest, WorkLog
from ..models.staff_models import StaffMember, WorkingDay

logger = logging.getLogger(__name__)

HALF_DAY_WEIGHT = Decimal("0.5")


@dataclass(frozen=True)
class AttendanceSummary:
    """Attendance for one staff member and one calendar month."""
    staff_member_id: int
    month: int
    year: int
    total_calendar_days: int
    total_working_days: int
    working_days: Tuple[str, ...] = field(default_factory=tuple)
    present_days: int = 0
    late_days: int = 0
    half_days: int = 0
    absent_days: int = 0
    no_show_days: int = 0
    leave_days: int = 0
    unpaid_leave_days: int = 0
    late_minutes: int = 0
    overtime_minutes: int = 0

    @property
    def lop_days(self) -> Decimal:
        """Loss-of-pay days, never more than the month's working days."""
        lop = (
            Decimal(self.absent_days + self.no_show_days + self.unpaid_leave_days)
            + HALF_DAY_WEIGHT * self.half_days
        )
        return min(lop, Decimal(self.total_working_days))

    def to_dict(self) -> dict:
        data = asdict(self)
        data["working_days"] = list(self.working_days)
        data["lop_days"] = str(self.lop_days)
        return data


class AttendanceAggregator(ABC):
    """Source of monthly attendance summaries (Strategy for payroll input)."""

    @abstractmethod
    def get_attendance_summary(
        self, staff_member_id: int, month: int, year: int
    ) -> AttendanceSummary:
        raise NotImplementedError


def month_bounds(month: int, year: int) -> Tuple[date, date]:
    """First and last calendar day of the month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def iter_dates(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


class WorkLogAttendanceAggregator(AttendanceAggregator):
    """
    Builds summaries from ``work_logs``, ``working_days`` and approved
    ``time_off_requests``.

    Every working date of the month is classified exactly once:

    * a work log decides the day, except that an ``absent`` log on a day of
      approved leave counts as leave;
    * a day without a log is unpaid leave, paid leave or a no-show, in that
      order of precedence.
    """

    def __init__(self, db: Session, default_working_days: Optional[Sequence[str]] = None):
        self.db = db
        self.default_working_days = tuple(
            default_working_days or get_settings().default_working_days
        )

    def get_attendance_summary(
        self, staff_member_id: int, month: int, year: int
    ) -> AttendanceSummary:
        staff = self.db.query(StaffMember).filter(StaffMember.id == staff_member_id).first()
        if not staff:
            raise StaffNotFoundError(staff_member_id)

        start_date, end_date = month_bounds(month, year)
        working_day_names = self.resolve_working_days(staff, start_date, end_date)
        working_dates = [
            d for d in iter_dates(start_date, end_date)
            if WEEKDAY_NAMES[d.weekday()] in working_day_names
        ]

        logs_by_date = self._logs_by_date(staff_member_id, start_date, end_date)
        paid_leave, unpaid_leave = self._approved_leave_dates(
            staff_member_id, start_date, end_date
        )

        counts = {
            "present_days": 0,
            "late_days": 0,
            "half_days": 0,
            "absent_days": 0,
            "no_show_days": 0,
            "leave_days": 0,
            "unpaid_leave_days": 0,
        }
        late_minutes = 0
        overtime_minutes = 0

        for work_date in working_dates:
            log = logs_by_date.get(work_date)
            if log is not None:
                late_minutes += log.late_minutes or 0
                overtime_minutes += log.overtime_minutes or 0
                if log.status == WorkLogStatus.ABSENT:
                    if work_date in unpaid_leave:
                        counts["unpaid_leave_days"] += 1
                    elif work_date in paid_leave:
                        counts["leave_days"] += 1
                    else:
                        counts["absent_days"] += 1
                elif log.status == WorkLogStatus.HALF_DAY:
                    counts["half_days"] += 1
                else:
                    counts["present_days"] += 1
                    if log.status == WorkLogStatus.LATE:
                        counts["late_days"] += 1
            elif work_date in unpaid_leave:
                counts["unpaid_leave_days"] += 1
            elif work_date in paid_leave:
                counts["leave_days"] += 1
            else:
                counts["no_show_days"] += 1

        summary = AttendanceSummary(
            staff_member_id=staff_member_id,
            month=month,
            year=year,
            total_calendar_days=(end_date - start_date).days + 1,
            total_working_days=len(working_dates),
            working_days=tuple(d for d in WEEKDAY_NAMES if d in working_day_names),
            late_minutes=late_minutes,
            overtime_minutes=overtime_minutes,
            **counts,
        )
        logger.debug(
            f"Attendance for staff {staff_member_id} {year}-{month:02d}: "
            f"{summary.total_working_days} working days, {summary.lop_days} LOP days"
        )
        return summary

    def resolve_working_days(self, staff: StaffMember, start_date: date, end_date: date) -> frozenset:
        """Staff-specific configuration first, then organization, then the default."""
        covering = self.db.query(WorkingDay).filter(
            or_(WorkingDay.from_date.is_(None), WorkingDay.from_date <= start_date),
            or_(WorkingDay.to_date.is_(None), WorkingDay.to_date >= end_date),
        )

        config = covering.filter(WorkingDay.staff_member_id == staff.id).order_by(
            WorkingDay.id.desc()
        ).first()
        if config is None and staff.org_id is not None:
            org_query = covering.filter(
                WorkingDay.staff_member_id.is_(None),
                WorkingDay.org_id == staff.org_id,
            )
            if staff.company_id is not None:
                org_query = org_query.filter(
                    or_(WorkingDay.company_id.is_(None), WorkingDay.company_id == staff.company_id)
                )
            config = org_query.order_by(WorkingDay.company_id.is_(None), WorkingDay.id.desc()).first()

        if config is None:
            return frozenset(self.default_working_days)
        return frozenset(name for name, enabled in config.weekday_flags().items() if enabled)

    def _logs_by_date(self, staff_member_id: int, start_date: date, end_date: date) -> Dict[date, WorkLog]:
        logs = self.db.query(WorkLog).filter(
            WorkLog.staff_member_id == staff_member_id,
            WorkLog.log_date >= start_date,
            WorkLog.log_date <= end_date,
        ).order_by(WorkLog.log_date, WorkLog.id).all()

        # the most recent correction for a day wins
        return {log.log_date: log for log in logs}

    def _approved_leave_dates(
        self, staff_member_id: int, start_date: date, end_date: date
    ) -> Tuple[set, set]:
        requests: List[TimeOffRequest] = self.db.query(TimeOffRequest).join(
            TimeOffCategory, TimeOffRequest.category_id == TimeOffCategory.id
        ).filter(
            TimeOffRequest.staff_member_id == staff_member_id,
            TimeOffRequest.approval_status == LeaveApprovalStatus.APPROVED,
            TimeOffRequest.start_date <= end_date,
            TimeOffRequest.end_date >= start_date,
        ).all()

        paid, unpaid = set(), set()
        for request in requests:
            first = max(request.start_date, start_date)
            last = min(request.end_date, end_date)
            target = paid if request.category.is_paid else unpaid
            target.update(iter_dates(first, last))
        # an overlap of paid and unpaid leave is not a loss of pay
        return paid, unpaid - paid
