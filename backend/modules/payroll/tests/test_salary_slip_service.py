"""
Unit tests for salary slip storage.

Tests cover:
- Slip status transitions (generated -> paid)
- Deletion and regeneration
- Actor scoping of slip queries
- Monthly summary, history and statistics
"""

from datetime import date
from decimal import Decimal

import pytest

from core.auth_context import ActorContext
from ..enums.payroll_enums import PaymentMethod, SalarySlipStatus
from ..exceptions import (
    DuplicateSlipError,
    PayrollBusinessRuleError,
    PayrollNotFoundError,
    PayrollValidationError,
)
from ..schemas.error_schemas import PayrollErrorCodes

APRIL, YEAR = 4, 2025
ADMIN = ActorContext(staff_member_id=None, roles=frozenset({"hr_manager"}))


@pytest.fixture
def april_slips(db_session, generator_factory, staff_factory, attendance_factory):
    """Two staff members with generated April 2025 slips."""
    staff = [staff_factory(base_salary=Decimal("30000")), staff_factory(base_salary=Decimal("20000"))]
    for member in staff:
        attendance_factory(member, APRIL, YEAR)
    result = generator_factory().generate([member.id for member in staff], APRIL, YEAR)
    assert len(result.created) == 2
    return result.created


class TestCreateFromBreakdown:

    def test_duplicate_insert_raises(self, calculator, slip_service, paid_staff):
        breakdown = calculator.calculate(paid_staff.id, APRIL, YEAR)
        slip_service.create_from_breakdown(breakdown)

        with pytest.raises(DuplicateSlipError) as exc_info:
            slip_service.create_from_breakdown(breakdown)

        assert exc_info.value.code == PayrollErrorCodes.DUPLICATE_SLIP
        assert exc_info.value.salary_period == "2025-04"

    def test_find_for_period(self, slip_service, april_slips):
        slip = april_slips[0]

        assert slip_service.find_for_period(slip.staff_member_id, "2025-04").id == slip.id
        assert slip_service.find_for_period(slip.staff_member_id, "2025-03") is None


class TestStatusTransitions:

    def test_mark_paid(self, slip_service, april_slips):
        slip = slip_service.mark_paid(
            april_slips[0].id, PaymentMethod.BANK_TRANSFER, "TRX-0001"
        )

        assert slip.status == SalarySlipStatus.PAID
        assert slip.paid_at is not None
        assert slip.payment_method == PaymentMethod.BANK_TRANSFER
        assert slip.payment_reference == "TRX-0001"

    def test_paid_slip_cannot_be_paid_again(self, slip_service, april_slips):
        slip_service.mark_paid(april_slips[0].id)

        with pytest.raises(PayrollBusinessRuleError) as exc_info:
            slip_service.mark_paid(april_slips[0].id)

        assert exc_info.value.code == PayrollErrorCodes.SLIP_ALREADY_PAID

    def test_mark_paid_unknown_slip(self, slip_service):
        with pytest.raises(PayrollNotFoundError):
            slip_service.mark_paid(999)

    def test_bulk_mark_paid_skips_paid_slips(self, db_session, slip_service, april_slips):
        first, second = april_slips
        slip_service.mark_paid(first.id)

        updated = slip_service.bulk_mark_paid([first.id, second.id, 999], PaymentMethod.CASH)

        assert updated == 1
        db_session.expire_all()
        assert slip_service.get_slip(second.id).status == SalarySlipStatus.PAID
        assert slip_service.get_slip(second.id).payment_method == PaymentMethod.CASH

    def test_generated_slip_can_be_deleted_and_regenerated(
        self, db_session, slip_service, generator_factory, april_slips
    ):
        slip_id = april_slips[0].id
        staff_id = april_slips[0].staff_member_id

        slip_service.delete_slip(slip_id)
        assert slip_service.find_for_period(staff_id, "2025-04") is None
        result = generator_factory().generate([staff_id], APRIL, YEAR)

        assert len(result.created) == 1
        assert slip_service.find_for_period(staff_id, "2025-04") is not None

    def test_paid_slip_cannot_be_deleted(self, slip_service, april_slips):
        slip_service.mark_paid(april_slips[0].id)

        with pytest.raises(PayrollBusinessRuleError):
            slip_service.delete_slip(april_slips[0].id)


class TestActorScoping:

    def test_admin_sees_all_slips(self, slip_service, april_slips):
        items, total = slip_service.list_slips(actor=ADMIN)

        assert total == 2
        assert {slip.id for slip in items} == {slip.id for slip in april_slips}

    def test_staff_member_sees_only_own_slips(self, slip_service, april_slips):
        own = april_slips[0]
        actor = ActorContext(staff_member_id=own.staff_member_id, roles=frozenset({"staff"}))

        items, total = slip_service.list_slips(actor=actor)

        assert total == 1
        assert items[0].id == own.id

    def test_staff_member_cannot_filter_into_other_slips(self, slip_service, april_slips):
        own, other = april_slips
        actor = ActorContext(staff_member_id=own.staff_member_id)

        items, total = slip_service.list_slips(actor=actor, staff_member_id=other.staff_member_id)

        assert (items, total) == ([], 0)

    def test_anonymous_actor_sees_nothing(self, slip_service, april_slips):
        assert slip_service.list_slips(actor=ActorContext()) == ([], 0)

    def test_other_staff_slip_is_not_found(self, slip_service, april_slips):
        own, other = april_slips
        actor = ActorContext(staff_member_id=own.staff_member_id)

        assert slip_service.get_slip(own.id, actor).id == own.id
        with pytest.raises(PayrollNotFoundError):
            slip_service.get_slip(other.id, actor)

    def test_filters_and_pagination(self, slip_service, april_slips):
        slip_service.mark_paid(april_slips[0].id)

        paid, paid_total = slip_service.list_slips(actor=ADMIN, status=SalarySlipStatus.PAID)
        page, total = slip_service.list_slips(actor=ADMIN, limit=1, offset=1)
        march, march_total = slip_service.list_slips(actor=ADMIN, period_to="2025-03")

        assert [slip.id for slip in paid] == [april_slips[0].id]
        assert paid_total == 1
        assert len(page) == 1 and total == 2
        assert march_total == 0

    def test_malformed_period_filter(self, slip_service):
        with pytest.raises(PayrollValidationError):
            slip_service.list_slips(actor=ADMIN, period_from="2025-13")


class TestReporting:

    def test_monthly_summary(self, slip_service, april_slips):
        slip_service.mark_paid(april_slips[0].id)

        summary = slip_service.monthly_summary(APRIL, YEAR)

        assert summary["salary_period"] == "2025-04"
        assert summary["total_employees"] == 2
        assert summary["total_net_payable"] == Decimal("50000.00")
        assert summary["paid_count"] == 1
        assert summary["pending_count"] == 1

    def test_monthly_summary_for_empty_period(self, slip_service):
        summary = slip_service.monthly_summary(1, 2020)

        assert summary["total_employees"] == 0
        assert summary["total_net_payable"] == 0

    def test_history_is_newest_first_and_limited(
        self, slip_service, generator_factory, paid_staff, attendance_factory
    ):
        attendance_factory(paid_staff, 3, YEAR)
        generator = generator_factory()
        generator.generate([paid_staff.id], 3, YEAR)
        generator.generate([paid_staff.id], APRIL, YEAR)

        history = slip_service.staff_history(paid_staff.id)
        latest = slip_service.staff_history(paid_staff.id, limit=1)

        assert [slip.salary_period for slip in history] == ["2025-04", "2025-03"]
        assert [slip.salary_period for slip in latest] == ["2025-04"]

    def test_statistics(self, slip_service, april_slips):
        slip_service.mark_paid(april_slips[1].id)

        stats = slip_service.statistics(today=date(2025, 4, 28))

        assert stats["current_month"]["salary_period"] == "2025-04"
        assert stats["current_month"]["total_salary"] == Decimal("50000.00")
        assert stats["current_month"]["employees_paid"] == 1
        assert stats["current_month"]["employees_pending"] == 1
        assert stats["year_to_date"]["total_slips"] == 2
