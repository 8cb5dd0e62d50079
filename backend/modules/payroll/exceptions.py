# backend/modules/payroll/exceptions.py

"""
Custom exceptions for payroll module.
"""

import logging
from typing import Any, List, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from .schemas.error_schemas import ErrorDetail, ErrorResponse, PayrollErrorCodes

logger = logging.getLogger(__name__)


class PayrollException(Exception):
    """Base exception for payroll module"""
    def __init__(
        self,
        message: str,
        code: str = PayrollErrorCodes.RECORD_NOT_FOUND,
        details: Optional[List[ErrorDetail]] = None,
        status_code: int = 400
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or []
        self.status_code = status_code


class PayrollValidationError(PayrollException):
    """Malformed period, amount or percentage; raised before any calculation"""
    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        code: str = PayrollErrorCodes.INVALID_AMOUNT,
    ):
        details = [ErrorDetail(field=field, message=message)] if field else None
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=422
        )


class PayrollNotFoundError(PayrollException):
    """Resource not found error"""
    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} with identifier {identifier} not found",
            code=PayrollErrorCodes.RECORD_NOT_FOUND,
            status_code=404
        )
        self.resource = resource
        self.identifier = identifier


class PayrollPolicyViolation(PayrollException):
    """Generation refused by the cutoff or net pay policy"""
    def __init__(self, message: str, code: str = PayrollErrorCodes.GENERATION_NOT_OPEN):
        super().__init__(
            message=message,
            code=code,
            status_code=409
        )


class DuplicateSlipError(PayrollException):
    """A salary slip already exists for the staff member and period"""
    def __init__(self, staff_member_id: int, salary_period: str):
        super().__init__(
            message=f"Salary slip for staff member {staff_member_id} and period {salary_period} already exists",
            code=PayrollErrorCodes.DUPLICATE_SLIP,
            status_code=409
        )
        self.staff_member_id = staff_member_id
        self.salary_period = salary_period


class PayrollBusinessRuleError(PayrollException):
    """Business rule violation errors"""
    def __init__(self, message: str, rule: str, details: Optional[List[ErrorDetail]] = None):
        super().__init__(
            message=message,
            code=f"PAYROLL_RULE_{rule.upper()}",
            details=details,
            status_code=400
        )


async def handle_payroll_exception(request: Request, exc: PayrollException) -> JSONResponse:
    """Render payroll errors as ``ErrorResponse`` bodies"""
    logger.warning(f"{type(exc).__name__} at {request.url.path}: {exc.message}")
    body = ErrorResponse(
        error=type(exc).__name__,
        message=exc.message,
        code=exc.code,
        details=exc.details or None,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


def register_payroll_exception_handlers(app):
    app.add_exception_handler(PayrollException, handle_payroll_exception)
