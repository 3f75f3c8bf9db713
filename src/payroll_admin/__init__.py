"""Payroll admin - employee records, payroll runs and payslips."""

__version__ = "0.1.0"
