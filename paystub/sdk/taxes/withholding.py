"""Per-period withholding calculations.

Annualized-wage method: per-period pay is annualized, annual tax is computed
from the year's TaxTable, then spread evenly across the pay periods.

Every monetary result is rounded to cents with round_cents(), the single
rounding rule used throughout the package (ROUND_HALF_UP).
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Sequence

from .schemas import TaxBracket, TaxTable

CENT = Decimal("0.01")


def to_decimal(amount: float) -> Decimal:
    """Convert a float to Decimal via its shortest repr (2.675 -> Decimal('2.675'))."""
    return Decimal(str(amount))


def round_cents(amount: float) -> float:
    """Round to cents, half up.

    Example: 402.045 -> 402.05, 0.004 -> 0.0
    """
    return float(to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP))


def sum_cents(amounts: Iterable[float]) -> float:
    """Sum cent amounts exactly (no float drift)."""
    total = sum((to_decimal(a) for a in amounts), Decimal("0"))
    return float(total.quantize(CENT, rounding=ROUND_HALF_UP))


def calculate_progressive_tax(income: float, brackets: Sequence[TaxBracket]) -> float:
    """Tax income across ascending brackets, each rate applying only to its slice."""
    tax = 0.0
    prev_limit = 0.0
    for bracket in brackets:
        if income <= prev_limit:
            break
        taxable_in_bracket = min(income, bracket.limit) - prev_limit
        tax += taxable_in_bracket * bracket.rate
        prev_limit = bracket.limit
    return tax


def calc_federal_withholding(
    gross: float,
    periods: int,
    filing_status: str,
    table: TaxTable,
) -> float:
    """Federal income tax per period.

    Args:
        gross: Gross pay for the period
        periods: Pay periods per year
        filing_status: Filing status key into the table's brackets
        table: Tax table for the year

    Returns:
        Per-period federal withholding, rounded to cents
    """
    annual_wages = gross * periods
    annual_tax = calculate_progressive_tax(annual_wages, table.brackets_for(filing_status))
    return round_cents(annual_tax / periods)


def calc_ss_withholding(gross: float, periods: int, table: TaxTable) -> Dict[str, float]:
    """Social Security share for one period, before the annual cap is applied.

    Returns:
        Dict with:
            - withheld: per-period SS tax (rounded)
            - annual_taxable: annualized wages subject to SS
            - max_annual: most SS tax that may be withheld in the year
            - capped: whether annualized wages exceed the wage base
    """
    rules = table.social_security
    annual_wages = gross * periods
    annual_taxable = min(annual_wages, rules.wage_base)
    return {
        "withheld": round_cents(annual_taxable * rules.rate / periods),
        "annual_taxable": annual_taxable,
        "max_annual": round_cents(rules.max_annual_tax),
        "capped": annual_wages > rules.wage_base,
    }


def apply_ss_cap(share: float, withheld_to_date: float, max_annual: float) -> float:
    """Limit a period's SS withholding so the year never exceeds max_annual."""
    remaining = to_decimal(max_annual) - to_decimal(withheld_to_date)
    if remaining <= 0:
        return 0.0
    return float(min(to_decimal(share), remaining))


def calc_medicare_withholding(
    gross: float,
    periods: int,
    filing_status: str,
    table: TaxTable,
) -> Dict[str, float]:
    """Medicare for one period, including Additional Medicare over the threshold.

    Returns:
        Dict with:
            - base_withheld: gross x Medicare rate (unrounded)
            - additional_withheld: per-period share of Additional Medicare (unrounded)
            - withheld: total, rounded to cents
            - over_threshold: whether annualized wages exceed the threshold
    """
    rules = table.medicare
    threshold = rules.additional_threshold[filing_status]
    annual_wages = gross * periods

    base = gross * rules.rate
    excess = max(0.0, annual_wages - threshold)
    additional = excess * rules.additional_rate / periods

    return {
        "base_withheld": base,
        "additional_withheld": additional,
        "withheld": round_cents(base + additional),
        "over_threshold": excess > 0,
    }
