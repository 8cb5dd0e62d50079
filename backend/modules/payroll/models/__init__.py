from .compensation_models import (
    BenefitType,
    StaffBenefit,
    WithholdingType,
    RecurringDeduction,
)
from .payroll_models import SalarySlip

__all__ = [
    "BenefitType",
    "StaffBenefit",
    "WithholdingType",
    "RecurringDeduction",
    "SalarySlip",
]
