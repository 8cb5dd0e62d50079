from enum import Enum


class WorkLogStatus(str, Enum):
    """Daily status recorded by the attendance subsystem."""
    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    HALF_DAY = "half_day"


class LeaveApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
