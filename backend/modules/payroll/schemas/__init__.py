"""Payroll schemas module."""
