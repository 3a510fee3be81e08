"""Paystub Calc - payroll withholding and pay period calculations."""

__version__ = "0.3.0"
