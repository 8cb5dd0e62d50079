# backend/modules/payroll/schemas/error_schemas.py

"""
Error response schemas for structured error handling.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class ErrorDetail(BaseModel):
    """Detailed error information"""

    field: Optional[str] = None
    message: str
    code: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standardized error response"""

    error: str = Field(..., description="Error type or category")
    message: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")
    details: Optional[List[ErrorDetail]] = Field(
        None, description="Additional error details"
    )
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        json_schema_extra = {
            "example": {
                "error": "PayrollValidationError",
                "message": "month must be between 1 and 12",
                "code": "PAYROLL_INVALID_PERIOD",
                "details": [
                    {
                        "field": "month",
                        "message": "month must be between 1 and 12",
                    }
                ],
                "timestamp": "2025-03-30T12:00:00Z",
            }
        }


class PayrollErrorCodes:
    """Centralized error codes for payroll module"""

    # Validation errors
    INVALID_AMOUNT = "PAYROLL_INVALID_AMOUNT"
    INVALID_PERIOD = "PAYROLL_INVALID_PERIOD"

    # Lookup errors
    RECORD_NOT_FOUND = "PAYROLL_RECORD_NOT_FOUND"

    # Generation policy errors
    GENERATION_NOT_OPEN = "PAYROLL_GENERATION_NOT_OPEN"
    FUTURE_PERIOD = "PAYROLL_FUTURE_PERIOD"
    NEGATIVE_NET_PAY = "PAYROLL_NEGATIVE_NET_PAY"
    DUPLICATE_SLIP = "PAYROLL_DUPLICATE_SLIP"

    # Slip lifecycle errors
    SLIP_ALREADY_PAID = "PAYROLL_RULE_SLIP_ALREADY_PAID"

    # Permission errors
    INSUFFICIENT_PERMISSIONS = "PAYROLL_INSUFFICIENT_PERMISSIONS"
