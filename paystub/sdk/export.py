"""CSV export of pay periods.

Text cells are quoted (inner quotes doubled) and numeric cells are bare.
Text that a spreadsheet could read as a formula (leading =, +, -, @, tab or
carriage return) is prefixed with a single quote.
"""

import csv
import io
from decimal import Decimal
from pathlib import Path
from typing import Iterable, List

from .schemas import PayPeriod
from .taxes.withholding import CENT, to_decimal

CSV_HEADER = [
    "Period",
    "Pay Date",
    "Hours",
    "Gross Pay",
    "Federal Tax",
    "Social Security",
    "Medicare",
    "State Tax",
    "Other Deductions",
    "Net Pay",
]

FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")


def escape_formula(text: str) -> str:
    """Neutralize text a spreadsheet would evaluate as a formula."""
    if text.startswith(FORMULA_PREFIXES):
        return "'" + text
    return text


def _money(amount: float) -> Decimal:
    # Decimal keeps cents formatting ("2500.00") and counts as numeric for the writer
    return to_decimal(amount).quantize(CENT)


def _row(pp: PayPeriod) -> list:
    return [
        pp.period,
        escape_formula(pp.pay_date.isoformat()),
        _money(pp.hours),
        _money(pp.gross_pay),
        _money(pp.federal_tax),
        _money(pp.social_security),
        _money(pp.medicare),
        _money(pp.state_tax),
        _money(pp.other_deductions),
        _money(pp.net_pay),
    ]


def _write_rows(f, pay_periods: Iterable[PayPeriod]) -> None:
    # Header is written unquoted; data rows quote text cells only
    f.write(",".join(CSV_HEADER) + "\n")
    writer = csv.writer(f, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for pp in pay_periods:
        writer.writerow(_row(pp))


def to_csv(pay_periods: Iterable[PayPeriod]) -> str:
    """Serialize pay periods to CSV text.

    Args:
        pay_periods: Pay periods in output order

    Returns:
        CSV text: fixed header line, then one line per period
    """
    buffer = io.StringIO()
    _write_rows(buffer, pay_periods)
    return buffer.getvalue()


def write_csv(pay_periods: List[PayPeriod], output_path: Path) -> Path:
    """Write pay periods to a CSV file.

    Returns:
        Path to the written file
    """
    output_path = Path(output_path)
    with open(output_path, "w", newline="") as csvfile:
        _write_rows(csvfile, pay_periods)
    return output_path
