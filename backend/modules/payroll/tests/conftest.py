# backend/modules/payroll/tests/conftest.py

"""
Pytest fixtures and factories for payroll module tests.

Provides reusable compensation data and service wiring on top of the
database fixtures in ``backend/conftest.py``.
"""

from datetime import date
from decimal import Decimal

import pytest

from core.config import Settings
from modules.payroll.enums.payroll_enums import CalculationType
from modules.payroll.models.compensation_models import (
    BenefitType,
    RecurringDeduction,
    StaffBenefit,
    WithholdingType,
)
from modules.payroll.services.payroll_calculator import PayrollCalculator
from modules.payroll.services.payroll_generator import PayrollGenerator
from modules.payroll.services.salary_slip_service import SalarySlipService

# April 2025 has 22 Monday-Friday working days
APRIL = 4
YEAR = 2025
AFTER_APRIL = date(2025, 5, 3)


@pytest.fixture
def benefit_factory(db_session):
    """Factory for benefit assignments; creates the benefit type on first use of a title."""
    types = {}

    def create_benefit(
        staff,
        title: str = "Transport",
        amount=Decimal("2000.00"),
        calculation_type=CalculationType.FIXED,
        effective_from: date = date(2025, 1, 1),
        effective_until: date = None,
        is_active: bool = True,
        is_taxable: bool = True,
    ) -> StaffBenefit:
        if title not in types:
            benefit_type = BenefitType(title=title, is_taxable=is_taxable)
            db_session.add(benefit_type)
            db_session.commit()
            types[title] = benefit_type
        benefit = StaffBenefit(
            staff_member_id=staff.id,
            benefit_type_id=types[title].id,
            calculation_type=calculation_type,
            amount=amount,
            effective_from=effective_from,
            effective_until=effective_until,
            is_active=is_active,
        )
        db_session.add(benefit)
        db_session.commit()
        return benefit

    return create_benefit


@pytest.fixture
def deduction_factory(db_session):
    types = {}

    def create_deduction(
        staff,
        title: str = "PF",
        amount=Decimal("12"),
        calculation_type=CalculationType.PERCENTAGE,
        effective_from: date = date(2025, 1, 1),
        effective_until: date = None,
        is_active: bool = True,
        is_statutory: bool = True,
    ) -> RecurringDeduction:
        if title not in types:
            withholding_type = WithholdingType(title=title, is_statutory=is_statutory)
            db_session.add(withholding_type)
            db_session.commit()
            types[title] = withholding_type
        deduction = RecurringDeduction(
            staff_member_id=staff.id,
            withholding_type_id=types[title].id,
            calculation_type=calculation_type,
            amount=amount,
            effective_from=effective_from,
            effective_until=effective_until,
            is_active=is_active,
        )
        db_session.add(deduction)
        db_session.commit()
        return deduction

    return create_deduction


@pytest.fixture
def calculator(db_session):
    return PayrollCalculator.for_session(db_session)


@pytest.fixture
def slip_service(db_session):
    return SalarySlipService(db_session)


@pytest.fixture
def generator_factory(db_session):
    """Generator with a fixed clock (default: just after April 2025)."""
    def create_generator(today: date = AFTER_APRIL, **settings_overrides) -> PayrollGenerator:
        settings = Settings(**settings_overrides)
        return PayrollGenerator(db_session, settings=settings, clock=lambda: today)

    return create_generator


@pytest.fixture
def paid_staff(staff_factory, attendance_factory):
    """Staff member on 30000 with full April 2025 attendance."""
    staff = staff_factory(base_salary=Decimal("30000.00"))
    attendance_factory(staff, APRIL, YEAR)
    return staff
