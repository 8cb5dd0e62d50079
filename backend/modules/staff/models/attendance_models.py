from sqlalchemy import (
    Boolean,
    Column,
    Date,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import TimestampMixin
from ..enums.attendance_enums import LeaveApprovalStatus, WorkLogStatus


class WorkLog(Base, TimestampMixin):
    """Daily attendance outcome written by the clock-in/out subsystem."""

    __tablename__ = "work_logs"

    id = Column(Integer, primary_key=True, index=True)
    staff_member_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False)
    log_date = Column(Date, nullable=False)
    status = Column(
        Enum(WorkLogStatus, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
    )
    late_minutes = Column(Integer, default=0, nullable=False)
    overtime_minutes = Column(Integer, default=0, nullable=False)

    staff_member = relationship("StaffMember", back_populates="work_logs")

    __table_args__ = (
        Index("ix_work_logs_staff_date", "staff_member_id", "log_date"),
    )


class TimeOffCategory(Base, TimestampMixin):
    __tablename__ = "time_off_categories"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    is_paid = Column(Boolean, default=True, nullable=False)

    requests = relationship("TimeOffRequest", back_populates="category")


class TimeOffRequest(Base, TimestampMixin):
    __tablename__ = "time_off_requests"

    id = Column(Integer, primary_key=True, index=True)
    staff_member_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("time_off_categories.id"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    approval_status = Column(
        Enum(LeaveApprovalStatus, values_callable=lambda obj: [e.value for e in obj]),
        default=LeaveApprovalStatus.PENDING,
        nullable=False,
    )

    staff_member = relationship("StaffMember", back_populates="time_off_requests")
    category = relationship("TimeOffCategory", back_populates="requests")

    __table_args__ = (
        Index("ix_time_off_requests_staff_dates", "staff_member_id", "start_date", "end_date"),
    )
