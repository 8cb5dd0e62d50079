"""Salary period helpers. Periods are stored as ``YYYY-MM`` strings."""

import calendar
import re
from datetime import date
from typing import Tuple

from ..exceptions import PayrollValidationError
from ..schemas.error_schemas import PayrollErrorCodes

MIN_YEAR = 1900
MAX_YEAR = 9999
PERIOD_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def validate_period(month, year) -> Tuple[int, int]:
    """Reject anything that is not a real calendar month."""
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise PayrollValidationError(
            "month must be an integer between 1 and 12",
            field="month",
            code=PayrollErrorCodes.INVALID_PERIOD,
        )
    if isinstance(year, bool) or not isinstance(year, int) or not MIN_YEAR <= year <= MAX_YEAR:
        raise PayrollValidationError(
            f"year must be an integer between {MIN_YEAR} and {MAX_YEAR}",
            field="year",
            code=PayrollErrorCodes.INVALID_PERIOD,
        )
    return month, year


def salary_period(month: int, year: int) -> str:
    return f"{year:04d}-{month:02d}"


def parse_salary_period(value: str) -> Tuple[int, int]:
    """``"2025-03"`` -> ``(3, 2025)``"""
    match = PERIOD_PATTERN.match(value or "")
    if not match:
        raise PayrollValidationError(
            f"Salary period {value!r} must use the YYYY-MM format",
            field="salary_period",
            code=PayrollErrorCodes.INVALID_PERIOD,
        )
    year, month = int(match.group(1)), int(match.group(2))
    return validate_period(month, year)


def last_day_of_month(month: int, year: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])
