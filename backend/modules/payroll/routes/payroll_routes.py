# backend/modules/payroll/routes/payroll_routes.py

"""
Payroll API endpoints.

- Salary calculation previews
- Bulk salary slip generation
- Salary slip listing, payment and deletion
- Monthly summary, salary history and statistics

Running or settling payroll needs a payroll admin role; any identified
staff member may read their own slips.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from core.auth_context import ActorContext, get_actor_context, require_payroll_admin
from core.database import get_db
from core.exceptions import PermissionError
from ..enums.payroll_enums import SalarySlipStatus
from ..schemas.payroll_schemas import (
    BulkGenerateRequest,
    BulkGenerateResponse,
    BulkMarkPaidRequest,
    BulkMarkPaidResponse,
    MarkPaidRequest,
    MonthlySummaryResponse,
    PayrollBreakdownResponse,
    PayrollCalculateRequest,
    PayrollStatisticsResponse,
    SalarySlipListResponse,
    SalarySlipResponse,
)
from ..services.payroll_calculator import PayrollCalculator
from ..services.payroll_generator import PayrollGenerator
from ..services.salary_slip_service import SalarySlipService

router = APIRouter(prefix="/api/payroll", tags=["Payroll"])

PERIOD_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


@router.get("/health")
async def payroll_health_check():
    """
    Health check endpoint for payroll module.

    Returns:
        dict: Health status of payroll module
    """
    return {
        "status": "healthy",
        "module": "payroll",
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.post("/calculate", response_model=PayrollBreakdownResponse)
async def calculate_payroll(
    request: PayrollCalculateRequest,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(require_payroll_admin),
):
    """
    Calculate a staff member's salary for a month without saving it.

    ## Error Responses
    - **404**: Staff member, benefit type or withholding type not found
    - **422**: Invalid period or compensation data
    """
    calculator = PayrollCalculator.for_session(db)
    breakdown = calculator.calculate(request.staff_member_id, request.month, request.year)
    return PayrollBreakdownResponse.from_breakdown(breakdown)


@router.post("/bulk-generate", response_model=BulkGenerateResponse)
async def generate_salary_slips(
    request: BulkGenerateRequest,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(require_payroll_admin),
):
    """
    Generate salary slips for a month.

    Staff members who already have a slip, are not active, are blocked by
    the generation window or net pay policy, or fail individually are listed in
    ``skipped`` with a reason; the rest are created.
    """
    result = PayrollGenerator(db).generate(request.employee_ids, request.month, request.year)
    return BulkGenerateResponse.from_result(result)


@router.get("/slips", response_model=SalarySlipListResponse)
async def list_salary_slips(
    staff_member_id: Optional[int] = Query(None, gt=0),
    period_from: Optional[str] = Query(None, pattern=PERIOD_PATTERN, description="YYYY-MM"),
    period_to: Optional[str] = Query(None, pattern=PERIOD_PATTERN, description="YYYY-MM"),
    slip_status: Optional[SalarySlipStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_actor_context),
):
    """List salary slips visible to the caller, newest period first."""
    items, total = SalarySlipService(db).list_slips(
        actor=actor,
        staff_member_id=staff_member_id,
        period_from=period_from,
        period_to=period_to,
        status=slip_status,
        limit=limit,
        offset=offset,
    )
    return SalarySlipListResponse(
        items=[SalarySlipResponse.model_validate(slip) for slip in items],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post("/slips/bulk-mark-paid", response_model=BulkMarkPaidResponse)
async def bulk_mark_salary_slips_paid(
    request: BulkMarkPaidRequest,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(require_payroll_admin),
):
    """Mark several slips as paid; slips already paid are left unchanged."""
    updated = SalarySlipService(db).bulk_mark_paid(
        request.slip_ids, request.payment_method, request.payment_reference
    )
    return BulkMarkPaidResponse(requested=len(set(request.slip_ids)), updated=updated)


@router.get("/slips/{slip_id}", response_model=SalarySlipResponse)
async def get_salary_slip(
    slip_id: int,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_actor_context),
):
    return SalarySlipService(db).get_slip(slip_id, actor)


@router.post("/slips/{slip_id}/mark-paid", response_model=SalarySlipResponse)
async def mark_salary_slip_paid(
    slip_id: int,
    request: MarkPaidRequest,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(require_payroll_admin),
):
    """
    Mark a generated slip as paid.

    ## Error Responses
    - **404**: Slip not found
    - **400**: Slip is already paid
    """
    return SalarySlipService(db).mark_paid(
        slip_id, request.payment_method, request.payment_reference
    )


@router.delete("/slips/{slip_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_salary_slip(
    slip_id: int,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(require_payroll_admin),
):
    """Delete an unpaid slip so the period can be generated again."""
    SalarySlipService(db).delete_slip(slip_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/summary", response_model=MonthlySummaryResponse)
async def get_monthly_summary(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=1900, le=9999),
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(require_payroll_admin),
):
    return SalarySlipService(db).monthly_summary(month, year)


@router.get("/history/{staff_member_id}", response_model=List[SalarySlipResponse])
async def get_salary_history(
    staff_member_id: int,
    limit: Optional[int] = Query(None, ge=1, le=120),
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_actor_context),
):
    """Most recent slips of one staff member."""
    if not actor.can_view_staff(staff_member_id):
        raise PermissionError("Cannot view another staff member's salary history")
    return SalarySlipService(db).staff_history(staff_member_id, limit)


@router.get("/statistics", response_model=PayrollStatisticsResponse)
async def get_payroll_statistics(
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(require_payroll_admin),
):
    return SalarySlipService(db).statistics()
