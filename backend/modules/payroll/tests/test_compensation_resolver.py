"""
Unit tests for compensation resolution.

Tests cover:
- Effective-date windows evaluated at a given day
- Inactive assignments
- Amount validation on the models and on stored rows
- Missing or invalid base salary
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import update

from ..enums.payroll_enums import CalculationType
from ..exceptions import PayrollNotFoundError, PayrollValidationError
from ..models.compensation_models import StaffBenefit
from ..services.compensation_resolver import CompensationResolver

MONTH_END = date(2025, 4, 30)


@pytest.fixture
def resolver(db_session):
    return CompensationResolver(db_session)


class TestEffectiveDates:

    def test_assignment_windows_are_judged_on_the_given_day(
        self, resolver, staff_factory, benefit_factory
    ):
        staff = staff_factory()
        benefit_factory(staff, title="Open Ended", effective_from=date(2024, 1, 1))
        benefit_factory(staff, title="Ends On Day", effective_from=date(2025, 1, 1), effective_until=MONTH_END)
        benefit_factory(staff, title="Starts On Day", effective_from=MONTH_END)
        benefit_factory(staff, title="Ended Mid Month", effective_from=date(2025, 1, 1), effective_until=date(2025, 4, 15))
        benefit_factory(staff, title="Starts Next Month", effective_from=date(2025, 5, 1))

        compensation = resolver.resolve(staff.id, MONTH_END)

        titles = [benefit.benefit_type.title for benefit in compensation.benefits]
        assert titles == ["Open Ended", "Ends On Day", "Starts On Day"]

    def test_inactive_assignments_are_ignored(self, resolver, staff_factory, benefit_factory, deduction_factory):
        staff = staff_factory()
        benefit_factory(staff, title="Transport", is_active=False)
        deduction_factory(staff, title="PF", is_active=False)

        compensation = resolver.resolve(staff.id, MONTH_END)

        assert compensation.benefits == []
        assert compensation.deductions == []

    def test_assignments_of_other_staff_are_not_returned(self, resolver, staff_factory, deduction_factory):
        staff, colleague = staff_factory(), staff_factory()
        deduction_factory(colleague, title="PF")

        assert resolver.resolve(staff.id, MONTH_END).deductions == []


class TestBaseSalary:

    def test_returns_base_salary(self, resolver, staff_factory):
        staff = staff_factory(base_salary=Decimal("42000.50"))

        compensation = resolver.resolve(staff.id, MONTH_END)

        assert compensation.base_salary == Decimal("42000.50")
        assert compensation.as_of_date == MONTH_END

    def test_missing_base_salary_is_zero(self, resolver, staff_factory):
        staff = staff_factory(base_salary=None)

        assert resolver.resolve(staff.id, MONTH_END).base_salary == 0

    def test_negative_base_salary_is_rejected(self, resolver, staff_factory):
        staff = staff_factory(base_salary=Decimal("-1"))

        with pytest.raises(PayrollValidationError):
            resolver.resolve(staff.id, MONTH_END)

    def test_unknown_staff_member(self, resolver):
        with pytest.raises(PayrollNotFoundError):
            resolver.resolve(12345, MONTH_END)


class TestAmountValidation:

    @pytest.mark.parametrize(
        "calculation_type, amount",
        [
            (CalculationType.FIXED, Decimal("0")),
            (CalculationType.FIXED, Decimal("-10")),
            (CalculationType.PERCENTAGE, Decimal("100.01")),
        ],
    )
    def test_model_rejects_invalid_amounts(self, calculation_type, amount):
        with pytest.raises(ValueError):
            StaffBenefit(
                staff_member_id=1,
                benefit_type_id=1,
                calculation_type=calculation_type,
                amount=amount,
                effective_from=date(2025, 1, 1),
            )

    def test_hundred_percent_is_allowed(self):
        benefit = StaffBenefit(
            calculation_type=CalculationType.PERCENTAGE,
            amount=Decimal("100"),
            effective_from=date(2025, 1, 1),
        )

        assert benefit.amount == Decimal("100")

    def test_stored_invalid_amount_is_rejected(self, db_session, resolver, staff_factory, benefit_factory):
        staff = staff_factory()
        benefit = benefit_factory(staff, title="Transport")
        # bypasses the ORM validators
        db_session.execute(
            update(StaffBenefit).where(StaffBenefit.id == benefit.id).values(amount=Decimal("-5"))
        )
        db_session.commit()

        with pytest.raises(PayrollValidationError):
            resolver.resolve(staff.id, MONTH_END)
