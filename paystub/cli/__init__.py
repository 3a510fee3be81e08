"""Paystub Calc command-line interface."""
