from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import TimestampMixin
from modules.staff.models.staff_models import StaffMember  # noqa: F401  registers the mapper
from ..enums.payroll_enums import PaymentMethod, SalarySlipStatus


class SalarySlip(Base, TimestampMixin):
    """
    One staff member's pay for one month.

    Rows are written once by payroll generation. Afterwards only the
    generated -> paid transition touches them.
    """

    __tablename__ = "salary_slips"

    id = Column(Integer, primary_key=True, index=True)
    slip_reference = Column(String(64), nullable=False, unique=True)
    staff_member_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False)
    salary_period = Column(String(7), nullable=False)  # YYYY-MM

    basic_salary = Column(Numeric(12, 2), nullable=False)
    benefits_breakdown = Column(JSON, nullable=False, default=list)
    deductions_breakdown = Column(JSON, nullable=False, default=list)
    attendance_snapshot = Column(JSON, nullable=True)
    lop_days = Column(Numeric(5, 1), nullable=False, default=0)

    total_earnings = Column(Numeric(12, 2), nullable=False)
    total_deductions = Column(Numeric(12, 2), nullable=False)
    net_payable = Column(Numeric(12, 2), nullable=False)

    status = Column(
        Enum(SalarySlipStatus, values_callable=lambda obj: [e.value for e in obj]),
        default=SalarySlipStatus.GENERATED,
        nullable=False,
    )
    generated_at = Column(DateTime, nullable=False)
    paid_at = Column(DateTime, nullable=True)
    payment_method = Column(
        Enum(PaymentMethod, values_callable=lambda obj: [e.value for e in obj]),
        nullable=True,
    )
    payment_reference = Column(String(100), nullable=True)

    staff_member = relationship("StaffMember")

    __table_args__ = (
        UniqueConstraint("staff_member_id", "salary_period", name="uq_salary_slip_staff_period"),
        Index("ix_salary_slips_period_status", "salary_period", "status"),
    )
