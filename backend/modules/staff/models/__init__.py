from .staff_models import StaffMember, WorkingDay
from .attendance_models import WorkLog, TimeOffCategory, TimeOffRequest

__all__ = [
    "StaffMember",
    "WorkingDay",
    "WorkLog",
    "TimeOffCategory",
    "TimeOffRequest",
]
