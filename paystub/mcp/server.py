"""Paystub Calc MCP Server - FastMCP implementation for paystub tools."""

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from paystub.sdk import (
    configure_logging,
    handle_paystub_request,
    load_state_rules,
    load_tax_tables,
    to_csv,
    validate_inputs,
    calculate,
)
from paystub.sdk.boundary import INVALID_INPUT_MESSAGE, error_response
from paystub.sdk.calculator import InvalidInputError

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("paystub-calc")

PARAMS_DESCRIPTION = (
    "Calculation parameters: hourlyRate, hoursPerPeriod, overtimeHours, overtimeRate, "
    "filingStatus, taxYear, state, payFrequency, additionalDeductions [{name, amount}], "
    "firstPayDate (optional, YYYY-MM-DD)"
)


# --- Tools ---

@mcp.tool()
async def validate_paystub_inputs(
    params: dict[str, Any] = Field(description=PARAMS_DESCRIPTION),
) -> dict[str, Any]:
    """Validate paystub parameters. Returns isValid and a map of field errors."""
    try:
        return validate_inputs(params).to_response()
    except Exception as e:
        logger.error(f"validate_paystub_inputs failed: {e}")
        return {"error": str(e), "isValid": False, "errors": {}}


@mcp.tool()
async def calculate_paystub(
    params: dict[str, Any] = Field(description=PARAMS_DESCRIPTION),
) -> dict[str, Any]:
    """Calculate every pay period of a tax year: gross pay, federal tax, Social Security, Medicare, state tax, other deductions and net pay, plus totals."""
    try:
        _status, payload = handle_paystub_request(params)
        return payload
    except Exception as e:
        logger.error(f"calculate_paystub failed: {e}")
        return {"error": str(e), "fieldErrors": {}}


@mcp.tool()
async def export_paystub_csv(
    params: dict[str, Any] = Field(description=PARAMS_DESCRIPTION),
) -> dict[str, Any]:
    """Calculate pay periods and return them as CSV text (one row per period)."""
    try:
        result = calculate(params)
        return {"csv": to_csv(result.pay_periods), "rows": len(result.pay_periods)}
    except InvalidInputError as e:
        return error_response(INVALID_INPUT_MESSAGE, e.errors)
    except Exception as e:
        logger.error(f"export_paystub_csv failed: {e}")
        return {"error": str(e), "csv": None}


@mcp.tool()
async def list_tax_tables() -> dict[str, Any]:
    """List tax years with federal tables and states with wage tax tables."""
    try:
        registry = load_tax_tables()
        state_rules = load_state_rules()
        return {
            "years": registry.years,
            "stateTables": sorted(state_rules.states),
            "noIncomeTax": sorted(state_rules.no_income_tax),
        }
    except Exception as e:
        logger.error(f"list_tax_tables failed: {e}")
        return {"error": str(e), "years": []}


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    configure_logging()
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
