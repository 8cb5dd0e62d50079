from sqlalchemy import Boolean, Column, Date, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import TimestampMixin
from ..enums.staff_enums import StaffStatus


class StaffMember(Base, TimestampMixin):
    __tablename__ = "staff_members"

    id = Column(Integer, primary_key=True, index=True)
    staff_code = Column(String(32), unique=True, nullable=False, index=True)
    full_name = Column(String(200), nullable=False)
    email = Column(String(200), unique=True)
    org_id = Column(Integer, index=True)
    company_id = Column(Integer, index=True)
    base_salary = Column(Numeric(12, 2), nullable=True)
    status = Column(
        Enum(StaffStatus, values_callable=lambda obj: [e.value for e in obj]),
        default=StaffStatus.ACTIVE,
        nullable=False,
    )
    is_active = Column(Boolean, default=True, nullable=False)

    work_logs = relationship("WorkLog", back_populates="staff_member")
    time_off_requests = relationship("TimeOffRequest", back_populates="staff_member")


class WorkingDay(Base, TimestampMixin):
    """Weekdays counted as working days for an organization, company or staff member."""

    __tablename__ = "working_days"

    id = Column(Integer, primary_key=True, index=True)
    org_id = Column(Integer, nullable=True, index=True)
    company_id = Column(Integer, nullable=True)
    staff_member_id = Column(Integer, ForeignKey("staff_members.id"), nullable=True, index=True)

    monday = Column(Boolean, default=True, nullable=False)
    tuesday = Column(Boolean, default=True, nullable=False)
    wednesday = Column(Boolean, default=True, nullable=False)
    thursday = Column(Boolean, default=True, nullable=False)
    friday = Column(Boolean, default=True, nullable=False)
    saturday = Column(Boolean, default=False, nullable=False)
    sunday = Column(Boolean, default=False, nullable=False)

    # Validity window, open-ended when null
    from_date = Column(Date, nullable=True)
    to_date = Column(Date, nullable=True)

    def weekday_flags(self) -> dict:
        return {
            "monday": self.monday,
            "tuesday": self.tuesday,
            "wednesday": self.wednesday,
            "thursday": self.thursday,
            "friday": self.friday,
            "saturday": self.saturday,
            "sunday": self.sunday,
        }
