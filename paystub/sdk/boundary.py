"""Request handling for the paystub API contract.

Mirrors POST /api/paystub without depending on a web framework: callers
(CLI, MCP server, an HTTP route) pass the decoded JSON body and get back an
HTTP-style status code and a JSON-ready payload.

    200 {"payPeriods": [...], "totals": {...}, "taxTableYear": 2024, "warnings": []}
    400 {"error": "...", "fieldErrors": {"hourlyRate": "..."}}
"""

import logging
from typing import Any, Dict, Optional, Tuple

from .calculator import InvalidInputError, PaystubCalculator, calculate
from .validation import validate_inputs

logger = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = "Invalid paystub inputs"


def error_response(message: str, field_errors: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    return {"error": message, "fieldErrors": dict(field_errors or {})}


def handle_paystub_request(
    body: Any,
    calculator: Optional[PaystubCalculator] = None,
) -> Tuple[int, Dict[str, Any]]:
    """Validate and calculate a decoded request body.

    Args:
        body: Decoded JSON body
        calculator: Calculator to use (defaults to the configured one)

    Returns:
        Tuple of (status_code, payload)
    """
    if not isinstance(body, dict):
        return 400, error_response("Request body must be a JSON object")

    validation = validate_inputs(body)
    if not validation.is_valid:
        logger.info(f"Rejected paystub request: {', '.join(sorted(validation.errors))}")
        return 400, error_response(INVALID_INPUT_MESSAGE, validation.errors)

    try:
        result = calculate(body, calculator)
    except InvalidInputError as e:
        return 400, error_response(str(e), e.errors)

    return 200, result.to_response()
