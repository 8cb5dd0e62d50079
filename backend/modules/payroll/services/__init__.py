"""Payroll services module."""

from .compensation_resolver import CompensationResolver, ResolvedCompensation
from .payroll_calculator import PayrollCalculator, PayrollBreakdown, PayLine
from .payroll_generator import PayrollGenerator, GenerationResult
from .salary_slip_service import SalarySlipService

__all__ = [
    'CompensationResolver',
    'ResolvedCompensation',
    'PayrollCalculator',
    'PayrollBreakdown',
    'PayLine',
    'PayrollGenerator',
    'GenerationResult',
    'SalarySlipService',
]
