"""
Pytest configuration file for backend testing.
"""
import itertools
import os
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

# Add the backend directory to Python path so imports work correctly
backend_dir = Path(__file__).parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# core.database builds its engine at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.database import Base  # noqa: E402

# Import all models to register them with SQLAlchemy
from modules.staff.models import (  # noqa: E402
    StaffMember,
    TimeOffCategory,
    TimeOffRequest,
    WorkingDay,
    WorkLog,
)
from modules.staff.enums.attendance_enums import LeaveApprovalStatus, WorkLogStatus  # noqa: E402
from modules.staff.services.attendance_aggregator import iter_dates, month_bounds  # noqa: E402
from modules.payroll.models import SalarySlip  # noqa: E402,F401

WEEKEND = (5, 6)


# Database fixtures
@pytest.fixture
def db_engine():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


# Staff and attendance factories
@pytest.fixture
def staff_factory(db_session):
    """Factory for persisted staff members."""
    counter = itertools.count(1)

    def create_staff(base_salary=Decimal("30000.00"), **kwargs) -> StaffMember:
        n = next(counter)
        kwargs.setdefault("staff_code", f"EMP{n:04d}")
        kwargs.setdefault("full_name", f"Test Employee {n}")
        kwargs.setdefault("email", f"employee{n}@example.com")
        staff = StaffMember(base_salary=base_salary, **kwargs)
        db_session.add(staff)
        db_session.commit()
        db_session.refresh(staff)
        return staff

    return create_staff


@pytest.fixture
def work_log_factory(db_session):
    def create_log(staff, log_date: date, status=WorkLogStatus.PRESENT, **kwargs) -> WorkLog:
        log = WorkLog(staff_member_id=staff.id, log_date=log_date, status=status, **kwargs)
        db_session.add(log)
        db_session.commit()
        return log

    return create_log


@pytest.fixture
def attendance_factory(db_session):
    """
    Log every Monday-Friday of a month as present, except the dates given
    in ``overrides`` (date -> status, or None to leave the day unlogged).
    """
    def log_month(staff, month: int, year: int, overrides=None):
        overrides = overrides or {}
        start, end = month_bounds(month, year)
        for day in iter_dates(start, end):
            if day.weekday() in WEEKEND:
                continue
            status = overrides.get(day, WorkLogStatus.PRESENT)
            if status is None:
                continue
            db_session.add(WorkLog(staff_member_id=staff.id, log_date=day, status=status))
        db_session.commit()

    return log_month


@pytest.fixture
def time_off_factory(db_session):
    categories = {}

    def create_time_off(
        staff,
        start_date: date,
        end_date: date,
        is_paid: bool = True,
        approval_status=LeaveApprovalStatus.APPROVED,
    ) -> TimeOffRequest:
        if is_paid not in categories:
            category = TimeOffCategory(title="Annual Leave" if is_paid else "Unpaid Leave", is_paid=is_paid)
            db_session.add(category)
            db_session.commit()
            categories[is_paid] = category
        request = TimeOffRequest(
            staff_member_id=staff.id,
            category_id=categories[is_paid].id,
            start_date=start_date,
            end_date=end_date,
            approval_status=approval_status,
        )
        db_session.add(request)
        db_session.commit()
        return request

    return create_time_off


@pytest.fixture
def working_day_factory(db_session):
    def create_working_days(**kwargs) -> WorkingDay:
        config = WorkingDay(**kwargs)
        db_session.add(config)
        db_session.commit()
        return config

    return create_working_days
