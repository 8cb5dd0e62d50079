"""Payroll routes module."""
