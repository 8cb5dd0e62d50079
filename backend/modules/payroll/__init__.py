# backend/modules/payroll/__init__.py

"""
Payroll module.

Turns a month of attendance plus active benefits and deductions into
salary slips:

- Compensation resolution by effective date
- Pure salary calculation with loss-of-pay handling
- Bulk slip generation with cutoff and one-slip-per-period rules
- Slip storage, payment status and reporting
"""

__version__ = "1.0.0"
