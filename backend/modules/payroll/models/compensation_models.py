from decimal import Decimal, InvalidOperation

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship, validates

from core.database import Base
from core.mixins import TimestampMixin
from ..enums.payroll_enums import CalculationType

MAX_PERCENTAGE = Decimal("100")


def check_assignment_amount(calculation_type, amount) -> Decimal:
    """Amounts are positive; percentages also stay within 100."""
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, TypeError):
        raise ValueError(f"Amount {amount!r} is not a number")
    if value <= 0:
        raise ValueError("Amount must be greater than zero")
    if CalculationType(calculation_type) == CalculationType.PERCENTAGE and value > MAX_PERCENTAGE:
        raise ValueError("Percentage amount must be between 0 and 100")
    return value


class AssignmentMixin:
    """Calculation and effective-date shape shared by benefits and deductions."""

    calculation_type = Column(
        Enum(CalculationType, values_callable=lambda obj: [e.value for e in obj]),
        default=CalculationType.FIXED,
        nullable=False,
    )
    amount = Column(Numeric(12, 2), nullable=False)
    effective_from = Column(Date, nullable=False)
    effective_until = Column(Date, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    notes = Column(Text, nullable=True)

    @validates("amount")
    def validate_amount(self, key, value):
        return check_assignment_amount(self.calculation_type or CalculationType.FIXED, value)

    @validates("calculation_type")
    def validate_calculation_type(self, key, value):
        value = CalculationType(value)
        if self.amount is not None:
            check_assignment_amount(value, self.amount)
        return value


class BenefitType(Base, TimestampMixin):
    __tablename__ = "benefit_types"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    is_taxable = Column(Boolean, default=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)


class StaffBenefit(Base, TimestampMixin, AssignmentMixin):
    __tablename__ = "staff_benefits"

    id = Column(Integer, primary_key=True, index=True)
    staff_member_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False)
    benefit_type_id = Column(Integer, ForeignKey("benefit_types.id"), nullable=False)

    benefit_type = relationship("BenefitType")

    __table_args__ = (
        Index("ix_staff_benefits_staff_active", "staff_member_id", "is_active"),
    )


class WithholdingType(Base, TimestampMixin):
    __tablename__ = "withholding_types"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    is_statutory = Column(Boolean, default=False, nullable=False)  # tax, PF, etc.
    is_active = Column(Boolean, default=True, nullable=False)


class RecurringDeduction(Base, TimestampMixin, AssignmentMixin):
    __tablename__ = "recurring_deductions"

    id = Column(Integer, primary_key=True, index=True)
    staff_member_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False)
    withholding_type_id = Column(Integer, ForeignKey("withholding_types.id"), nullable=False)

    withholding_type = relationship("WithholdingType")

    __table_args__ = (
        Index("ix_recurring_deductions_staff_active", "staff_member_id", "is_active"),
    )
