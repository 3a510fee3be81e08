"""Business-rule validation of paystub calculation parameters.

SDK layer - pure logic, returns a ValidationResult. Never raises for bad
input: every violated field is reported together in a field-keyed map so a
form or a 400 response can show all problems at once.

Input may be untrusted JSON, so nothing about field presence or type is
assumed. Keys are read in camelCase (wire format) or snake_case (Python
callers); error keys are always camelCase.
"""

import math
import re
from datetime import date
from typing import Any, Dict, Mapping, Optional, Union

from .schedule import PERIOD_DAYS, first_cycle_bounds
from .schemas import (
    FILING_STATUSES,
    MAX_DEDUCTION_AMOUNT,
    MAX_DEDUCTION_NAME_LENGTH,
    MAX_HOURLY_RATE,
    MAX_HOURS_PER_PERIOD,
    MAX_OVERTIME_HOURS,
    MAX_OVERTIME_RATE,
    MIN_TAX_YEAR,
    PAY_FREQUENCIES,
    STATE_CODES,
    CalculationParameters,
    ValidationResult,
)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_MISSING = object()


def _snake(key: str) -> str:
    return re.sub(r"(?<!^)([A-Z])", r"_\1", key).lower()


def _get(params: Mapping[str, Any], key: str) -> Any:
    """Look up a camelCase key, falling back to its snake_case form."""
    if key in params:
        return params[key]
    return params.get(_snake(key), _MISSING)


def _quoted(value: Any) -> str:
    """Echo text back in quotes; name the type of anything else."""
    if isinstance(value, str):
        return f"'{value}'"
    return f"({type(value).__name__})"


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # JSON ints can exceed float range; compare them as ints, never convert
    return isinstance(value, int) or math.isfinite(value)


def _check_number(
    value: Any,
    label: str,
    *,
    positive: bool,
    maximum: float,
    currency: bool = False,
) -> Optional[str]:
    """Return an error message for value, or None if it is acceptable."""
    if value is _MISSING or value is None:
        return f"{label} is required"
    if not _is_number(value):
        return f"{label} must be a number"
    if positive and value <= 0:
        return f"{label} must be greater than {'$0' if currency else '0'}"
    if not positive and value < 0:
        return f"{label} cannot be negative"
    if value > maximum:
        return _too_high(label, maximum, currency)
    return None


def _too_high(label: str, maximum: float, currency: bool) -> str:
    limit = f"${maximum:,}" if currency else f"{maximum:,}"
    return f"{label} seems unusually high (over {limit})"


def _check_first_pay_date(value: Any, frequency: Any, tax_year: Any) -> Optional[str]:
    if isinstance(value, date):
        parsed = value
    elif isinstance(value, str) and _ISO_DATE.match(value):
        try:
            parsed = date.fromisoformat(value)
        except ValueError:
            return f"Invalid first pay date '{value}'"
    else:
        return "First pay date must be a date in YYYY-MM-DD format"

    if not isinstance(frequency, str) or frequency not in PERIOD_DAYS:
        return "First pay date only applies to weekly or biweekly schedules"
    if not (isinstance(tax_year, int) and not isinstance(tax_year, bool)):
        # Reported under taxYear
        return None
    if tax_year < MIN_TAX_YEAR or tax_year > 9999:
        return None

    earliest, latest = first_cycle_bounds(tax_year, frequency)
    if not earliest <= parsed <= latest:
        return f"First pay date must be between {earliest} and {latest}"
    return None


def _check_deductions(value: Any, errors: Dict[str, str]) -> None:
    if value is _MISSING or value is None:
        return
    if not isinstance(value, (list, tuple)):
        errors["additionalDeductions"] = "Additional deductions must be a list"
        return

    for index, item in enumerate(value):
        prefix = f"additionalDeductions.{index}"
        if hasattr(item, "model_dump"):
            item = item.model_dump()
        if not isinstance(item, Mapping):
            errors[prefix] = "Deduction must be an object with name and amount"
            continue

        name = item.get("name", _MISSING)
        if not isinstance(name, str) or not name.strip():
            errors[f"{prefix}.name"] = "Deduction name is required"
        elif len(name) > MAX_DEDUCTION_NAME_LENGTH:
            errors[f"{prefix}.name"] = (
                f"Deduction name must be {MAX_DEDUCTION_NAME_LENGTH} characters or fewer"
            )

        error = _check_number(
            item.get("amount", _MISSING), "Deduction amount",
            positive=False, maximum=MAX_DEDUCTION_AMOUNT, currency=True,
        )
        if error:
            errors[f"{prefix}.amount"] = error

        unknown = {str(k) for k in item} - {"name", "amount"}
        if unknown:
            errors[prefix] = f"Unknown deduction field(s): {', '.join(sorted(unknown))}"


def validate_inputs(
    params: Union[Mapping[str, Any], CalculationParameters],
) -> ValidationResult:
    """Validate candidate calculation parameters.

    Args:
        params: Raw mapping (camelCase or snake_case keys) or a
            CalculationParameters instance

    Returns:
        ValidationResult with is_valid and a camelCase field -> message map

    Raises:
        TypeError: If params is not a mapping (programmer error)
    """
    if isinstance(params, CalculationParameters):
        params = params.model_dump(by_alias=True)
    if not isinstance(params, Mapping):
        raise TypeError(
            f"params must be a mapping or CalculationParameters, got {type(params).__name__}"
        )

    errors: Dict[str, str] = {}

    error = _check_number(
        _get(params, "hourlyRate"), "Hourly rate",
        positive=True, maximum=MAX_HOURLY_RATE, currency=True,
    )
    if error:
        errors["hourlyRate"] = error

    error = _check_number(
        _get(params, "hoursPerPeriod"), "Hours per pay period",
        positive=True, maximum=MAX_HOURS_PER_PERIOD,
    )
    if error:
        errors["hoursPerPeriod"] = error

    overtime_hours = _get(params, "overtimeHours")
    if overtime_hours is not _MISSING and overtime_hours is not None:
        error = _check_number(
            overtime_hours, "Overtime hours", positive=False, maximum=MAX_OVERTIME_HOURS,
        )
        if error:
            errors["overtimeHours"] = error

    overtime_rate = _get(params, "overtimeRate")
    if overtime_rate is not _MISSING and overtime_rate is not None:
        error = _check_number(
            overtime_rate, "Overtime rate",
            positive=True, maximum=MAX_OVERTIME_RATE, currency=True,
        )
        if error:
            errors["overtimeRate"] = error

    filing_status = _get(params, "filingStatus")
    if filing_status is _MISSING or filing_status is None:
        errors["filingStatus"] = "Filing status is required"
    elif not isinstance(filing_status, str) or filing_status not in FILING_STATUSES:
        errors["filingStatus"] = (
            f"Invalid filing status {_quoted(filing_status)}. Must be one of: {', '.join(FILING_STATUSES)}"
        )

    tax_year = _get(params, "taxYear")
    if tax_year is _MISSING or tax_year is None:
        errors["taxYear"] = "Tax year is required"
    elif isinstance(tax_year, bool) or not isinstance(tax_year, int):
        errors["taxYear"] = "Tax year must be a whole number"
    elif tax_year < MIN_TAX_YEAR or tax_year > 9999:
        errors["taxYear"] = f"Tax year must be a 4-digit year no earlier than {MIN_TAX_YEAR}"

    state = _get(params, "state")
    if state is _MISSING or state is None:
        errors["state"] = "State is required"
    elif not isinstance(state, str) or state.strip().upper() not in STATE_CODES:
        errors["state"] = f"Invalid state code {_quoted(state)}. Must be a 2-letter US state code"

    frequency = _get(params, "payFrequency")
    if frequency is _MISSING or frequency is None:
        errors["payFrequency"] = "Pay frequency is required"
    elif not isinstance(frequency, str) or frequency not in PAY_FREQUENCIES:
        errors["payFrequency"] = (
            f"Invalid pay frequency {_quoted(frequency)}. Must be one of: {', '.join(PAY_FREQUENCIES)}"
        )

    _check_deductions(_get(params, "additionalDeductions"), errors)

    first_pay_date = _get(params, "firstPayDate")
    if first_pay_date is not _MISSING and first_pay_date is not None:
        error = _check_first_pay_date(first_pay_date, frequency, tax_year)
        if error:
            errors["firstPayDate"] = error

    known = {
        "hourlyRate", "hoursPerPeriod", "overtimeHours", "overtimeRate",
        "filingStatus", "taxYear", "state", "payFrequency",
        "additionalDeductions", "firstPayDate",
    }
    for key in params:
        if key not in known and key not in {_snake(k) for k in known}:
            errors[str(key)] = f"Unknown field {_quoted(key)}"

    return ValidationResult(is_valid=not errors, errors=errors)
