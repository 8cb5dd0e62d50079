from enum import Enum


class CalculationType(str, Enum):
    """How a benefit or deduction amount is applied to base salary."""
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class SalarySlipStatus(str, Enum):
    GENERATED = "generated"
    PAID = "paid"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    CASH = "cash"


class SkipReason(str, Enum):
    """Why bulk generation did not create a slip for a staff member."""
    DUPLICATE = "duplicate"
    POLICY = "policy"
    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    ERROR = "error"


class NetPayPolicy(str, Enum):
    """What generation does with a slip whose deductions exceed earnings."""
    ALLOW = "allow"
    CLAMP = "clamp"
    REJECT = "reject"
