# backend/modules/payroll/schemas/payroll_schemas.py

"""
Pydantic schemas for payroll module API endpoints.

Provides request/response models for:
- Salary calculation previews
- Bulk salary slip generation
- Salary slips and their payment
- Monthly summaries and statistics
"""

from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..enums.payroll_enums import PaymentMethod, SalarySlipStatus, SkipReason


class PayrollPeriod(BaseModel):
    month: int = Field(..., ge=1, le=12, description="Calendar month (1-12)")
    year: int = Field(..., ge=1900, le=9999)


# Calculation


class PayrollCalculateRequest(PayrollPeriod):
    """Request model for a salary calculation preview"""

    staff_member_id: int = Field(..., gt=0)


class PayLineOut(BaseModel):
    name: str
    amount: Decimal
    taxable_or_statutory: bool = False


class AttendanceSummaryOut(BaseModel):
    staff_member_id: int
    month: int
    year: int
    total_calendar_days: int
    total_working_days: int
    working_days: List[str]
    present_days: int
    late_days: int
    half_days: int
    absent_days: int
    no_show_days: int
    leave_days: int
    unpaid_leave_days: int
    late_minutes: int
    overtime_minutes: int
    lop_days: Decimal


class SalaryFiguresOut(BaseModel):
    base_salary: Decimal
    per_day_salary: Decimal
    lop_deduction: Decimal
    total_earnings: Decimal
    total_deductions: Decimal
    net_salary: Decimal


class LineGroupOut(BaseModel):
    total: Decimal
    breakdown: List[PayLineOut]


class PayrollBreakdownResponse(BaseModel):
    """Response model for a calculated, unsaved salary breakdown"""

    staff_member_id: int
    month: int
    year: int
    salary_period: str
    attendance: AttendanceSummaryOut
    salary: SalaryFiguresOut
    benefits: LineGroupOut
    deductions: LineGroupOut

    @classmethod
    def from_breakdown(cls, breakdown) -> "PayrollBreakdownResponse":
        return cls(
            staff_member_id=breakdown.staff_member_id,
            month=breakdown.month,
            year=breakdown.year,
            salary_period=breakdown.salary_period,
            attendance=breakdown.attendance.to_dict(),
            salary=SalaryFiguresOut(**asdict(breakdown.salary)),
            benefits=LineGroupOut(
                total=breakdown.benefits.total, breakdown=breakdown.benefits.to_list()
            ),
            deductions=LineGroupOut(
                total=breakdown.deductions.total, breakdown=breakdown.deductions.to_list()
            ),
        )


# Generation


class BulkGenerateRequest(PayrollPeriod):
    """Request model for bulk slip generation; omit employee_ids or send an empty list for all active staff"""

    employee_ids: Optional[List[int]] = Field(None, description="Staff member IDs")

    @field_validator("employee_ids")
    @classmethod
    def validate_employee_ids(cls, v):
        if v is not None and any(staff_id <= 0 for staff_id in v):
            raise ValueError("employee_ids must be positive integers")
        return v


class SalarySlipResponse(BaseModel):
    """Response model for a stored salary slip"""

    id: int
    slip_reference: str
    staff_member_id: int
    salary_period: str
    basic_salary: Decimal
    benefits_breakdown: List[PayLineOut]
    deductions_breakdown: List[PayLineOut]
    attendance_snapshot: Optional[Dict[str, Any]] = None
    lop_days: Decimal
    total_earnings: Decimal
    total_deductions: Decimal
    net_payable: Decimal
    status: SalarySlipStatus
    generated_at: datetime
    paid_at: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    payment_reference: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SkippedEntryResponse(BaseModel):
    staff_member_id: int
    reason: SkipReason
    message: str = ""

    model_config = ConfigDict(from_attributes=True)


class BulkGenerateResponse(BaseModel):
    """Response model for bulk generation"""

    salary_period: str
    created: List[SalarySlipResponse]
    skipped: List[SkippedEntryResponse]
    created_count: int
    skipped_count: int

    @classmethod
    def from_result(cls, result) -> "BulkGenerateResponse":
        return cls(
            salary_period=result.salary_period,
            created=[SalarySlipResponse.model_validate(slip) for slip in result.created],
            skipped=[SkippedEntryResponse.model_validate(entry) for entry in result.skipped],
            created_count=len(result.created),
            skipped_count=len(result.skipped),
        )


class SalarySlipListResponse(BaseModel):
    items: List[SalarySlipResponse]
    total: int
    limit: int
    offset: int


# Payment


class MarkPaidRequest(BaseModel):
    payment_method: Optional[PaymentMethod] = None
    payment_reference: Optional[str] = Field(None, max_length=100)


class BulkMarkPaidRequest(MarkPaidRequest):
    slip_ids: List[int] = Field(..., min_length=1)


class BulkMarkPaidResponse(BaseModel):
    requested: int
    updated: int


# Reporting


class MonthlySummaryResponse(BaseModel):
    month: int
    year: int
    salary_period: str
    total_employees: int
    total_earnings: Decimal
    total_deductions: Decimal
    total_net_payable: Decimal
    paid_count: int
    pending_count: int


class CurrentMonthStatistics(BaseModel):
    salary_period: str
    total_salary: Decimal
    employees_paid: int
    employees_pending: int


class YearToDateStatistics(BaseModel):
    total_salary: Decimal
    total_slips: int


class PayrollStatisticsResponse(BaseModel):
    current_month: CurrentMonthStatistics
    year_to_date: YearToDateStatistics
