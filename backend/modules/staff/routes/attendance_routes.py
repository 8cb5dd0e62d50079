from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.auth_context import ActorContext, get_actor_context
from core.database import get_db
from core.exceptions import NotFoundError, PermissionError
from ..exceptions.staff_exceptions import StaffNotFoundError
from ..services.attendance_aggregator import WorkLogAttendanceAggregator

router = APIRouter(prefix="/api/attendance", tags=["Attendance"])


@router.get("/summary/{staff_member_id}")
async def get_attendance_summary(
    staff_member_id: int,
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=1900, le=9999),
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_actor_context),
):
    """Monthly attendance roll-up used by payroll."""
    if not actor.can_view_staff(staff_member_id):
        raise PermissionError("Cannot view another staff member's attendance")
    try:
        summary = WorkLogAttendanceAggregator(db).get_attendance_summary(
            staff_member_id, month, year
        )
    except StaffNotFoundError as e:
        raise NotFoundError(str(e), error_code="STAFF_NOT_FOUND")
    return summary.to_dict()
