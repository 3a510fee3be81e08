"""Rich renderers for CLI output."""

from .paystub_renderer import render_paystub, render_validation_errors

__all__ = ["render_paystub", "render_validation_errors"]
