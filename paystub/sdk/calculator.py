"""Paystub calculation engine.

Turns validated CalculationParameters into a full year of pay periods with
federal, Social Security, Medicare and state withholding, plus totals.

The calculation is a pure function of its inputs and the injected tax
tables: no clock, no I/O, no state carried between calls.

Withholding policy:
- Federal: progressive brackets on annualized gross, spread per period
- Social Security: annualized wages capped at the wage base, spread per
  period; the running total never exceeds wage_base x rate
- Medicare: gross x rate, plus Additional Medicare on annualized wages over
  the filing-status threshold, spread per period
- State: delegated to a StateTaxProvider
- Other deductions: the full additionalDeductions total is taken from every
  period (amounts are already per-period figures, they are not divided)
- Net pay is never clamped; negative net pay is reported and warned about

Usage:
    from paystub.sdk import calculate

    result = calculate({
        "hourlyRate": 25, "hoursPerPeriod": 80, "filingStatus": "single",
        "taxYear": 2024, "state": "TX", "payFrequency": "biweekly",
    })
    result.pay_periods[0].gross_pay  # 2000.0
"""

import logging
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from .schedule import generate_pay_dates, get_pay_periods
from .schemas import (
    CalculationParameters,
    PayPeriod,
    PaystubResult,
    PaystubTotals,
)
from .taxes import (
    StateTaxProvider,
    StateTaxTables,
    TaxTableRegistry,
    apply_ss_cap,
    calc_federal_withholding,
    calc_medicare_withholding,
    calc_ss_withholding,
    load_state_rules,
    load_tax_tables,
    round_cents,
    sum_cents,
)
from .validation import validate_inputs

logger = logging.getLogger(__name__)

TOTAL_FIELDS = (
    "hours",
    "overtime_hours",
    "gross_pay",
    "federal_tax",
    "social_security",
    "medicare",
    "state_tax",
    "other_deductions",
    "net_pay",
)


class InvalidInputError(ValueError):
    """Raised when calculation is attempted with parameters that fail validation.

    Attributes:
        errors: camelCase field -> message map from validate_inputs()
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__(f"Invalid paystub inputs: {', '.join(self.errors.values())}")


class PaystubCalculator:
    """Payroll calculator bound to a set of tax tables.

    Args:
        tax_tables: Federal tables by year
        state_tax: Provider for per-period state withholding
    """

    def __init__(self, tax_tables: TaxTableRegistry, state_tax: StateTaxProvider):
        self.tax_tables = tax_tables
        self.state_tax = state_tax

    def parse(
        self,
        params: Union[Mapping[str, Any], CalculationParameters],
    ) -> CalculationParameters:
        """Validate raw parameters and convert them to CalculationParameters.

        Raises:
            InvalidInputError: If validation fails
        """
        validation = validate_inputs(params)
        if not validation.is_valid:
            error = InvalidInputError(validation.errors)
            logger.error(str(error))
            raise error

        if isinstance(params, CalculationParameters):
            return params
        try:
            return CalculationParameters.model_validate(dict(params))
        except ValidationError as e:
            errors = {}
            for err in e.errors():
                loc = ".".join(str(x) for x in err["loc"])
                errors[loc or "params"] = err["msg"]
            error = InvalidInputError(errors)
            logger.error(str(error))
            raise error

    def calculate(
        self,
        params: Union[Mapping[str, Any], CalculationParameters],
    ) -> PaystubResult:
        """Calculate every pay period of the tax year.

        Args:
            params: Raw mapping or CalculationParameters; validated again here
                even if the caller already ran validate_inputs()

        Returns:
            PaystubResult with pay_periods, totals, tax_table_year and warnings

        Raises:
            InvalidInputError: If params fail validation
        """
        p = self.parse(params)
        warnings: List[str] = []

        table, is_fallback = self.tax_tables.resolve(p.tax_year)
        if is_fallback:
            msg = (
                f"No tax table for {p.tax_year}; using {table.tax_year} brackets and limits"
            )
            logger.warning(msg)
            warnings.append(msg)

        periods = get_pay_periods(p.pay_frequency)
        pay_dates = generate_pay_dates(p.tax_year, p.pay_frequency, p.first_pay_date)

        regular_pay = p.hours_per_period * p.hourly_rate
        overtime_pay = p.overtime_hours * p.effective_overtime_rate if p.overtime_hours else 0.0
        gross = round_cents(regular_pay + overtime_pay)

        federal = calc_federal_withholding(gross, periods, p.filing_status, table)
        ss = calc_ss_withholding(gross, periods, table)
        medicare = calc_medicare_withholding(gross, periods, p.filing_status, table)["withheld"]
        other = round_cents(p.deductions_per_period)

        state_tax = self.state_tax.calc_period_tax(
            gross, periods, p.state, p.filing_status, p.tax_year,
        )
        if state_tax is None:
            msg = f"No state tax table for {p.state}; state tax not withheld"
            logger.warning(msg)
            warnings.append(msg)
            state_tax = 0.0

        pay_periods: List[PayPeriod] = []
        ss_to_date = 0.0
        negative_periods = 0

        for index, pay_date in enumerate(pay_dates):
            social_security = apply_ss_cap(ss["withheld"], ss_to_date, ss["max_annual"])
            ss_to_date = sum_cents([ss_to_date, social_security])

            net = sum_cents([gross, -federal, -social_security, -medicare, -state_tax, -other])
            if net < 0:
                negative_periods += 1

            pay_periods.append(PayPeriod(
                period=index + 1,
                pay_date=pay_date,
                hours=p.hours_per_period,
                overtime_hours=p.overtime_hours,
                gross_pay=gross,
                federal_tax=federal,
                social_security=social_security,
                medicare=medicare,
                state_tax=state_tax,
                other_deductions=other,
                net_pay=net,
            ))

        if negative_periods:
            msg = (
                f"Deductions exceed gross pay in {negative_periods} of {periods} periods; "
                f"net pay is reported as negative"
            )
            logger.warning(msg)
            warnings.append(msg)

        totals = PaystubTotals(**{
            field: sum_cents(getattr(pp, field) for pp in pay_periods)
            for field in TOTAL_FIELDS
        })

        logger.debug(
            f"Calculated {periods} {p.pay_frequency} periods for {p.tax_year} "
            f"(table {table.tax_year}): gross {totals.gross_pay:.2f}, net {totals.net_pay:.2f}"
        )

        return PaystubResult(
            pay_periods=pay_periods,
            totals=totals,
            tax_table_year=table.tax_year,
            warnings=warnings,
        )


def build_calculator(rules_dir=None) -> PaystubCalculator:
    """Build a calculator from tax_rules_dir (configured or bundled)."""
    return PaystubCalculator(
        tax_tables=load_tax_tables(rules_dir),
        state_tax=StateTaxTables(load_state_rules(rules_dir)),
    )


@lru_cache(maxsize=1)
def get_default_calculator() -> PaystubCalculator:
    """Process-wide calculator using the configured tax rules."""
    return build_calculator()


def calculate(
    params: Union[Mapping[str, Any], CalculationParameters],
    calculator: Optional[PaystubCalculator] = None,
) -> PaystubResult:
    """Calculate pay periods and totals with the default (or given) calculator.

    Raises:
        InvalidInputError: If params fail validation
    """
    if calculator is None:
        calculator = get_default_calculator()
    return calculator.calculate(params)
