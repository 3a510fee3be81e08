"""Rich renderer for calculated paystubs.

Transforms SDK results into formatted Rich tables.
"""

from typing import Dict

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from paystub.sdk.schemas import CalculationParameters, PaystubResult


def _money(amount: float) -> str:
    if amount < 0:
        return f"-${abs(amount):,.2f}"
    return f"${amount:,.2f}"


def render_paystub(console: Console, params: CalculationParameters, result: PaystubResult) -> None:
    """Render a calculated pay schedule.

    Args:
        console: Rich Console instance
        params: Parameters the result was calculated from
        result: SDK output from calculate()
    """
    for warning in result.warnings:
        console.print(Panel(
            f"[yellow]{warning}[/yellow]",
            title="Note",
            border_style="yellow"
        ))

    console.print(f"\n[bold]Paystub Schedule: {params.tax_year}[/bold]")
    console.print(f"Filing status: {params.filing_status}")
    console.print(f"State: {params.state}")
    console.print(f"Pay frequency: {params.pay_frequency}")
    console.print(f"Periods: {len(result.pay_periods)}")
    if result.tax_table_year != params.tax_year:
        console.print(f"Tax table: [yellow]{result.tax_table_year}[/yellow]")
    console.print()

    table = Table(title=f"Pay Periods for {params.tax_year}", expand=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Pay Date", style="cyan")
    table.add_column("Hours", justify="right")
    table.add_column("Gross", justify="right")
    table.add_column("Federal", justify="right")
    table.add_column("SS", justify="right")
    table.add_column("Medicare", justify="right")
    table.add_column("State", justify="right")
    table.add_column("Other", justify="right")
    table.add_column("Net Pay", justify="right", style="yellow")

    for pp in result.pay_periods:
        table.add_row(
            str(pp.period),
            pp.pay_date.isoformat(),
            f"{pp.hours + pp.overtime_hours:,.2f}",
            _money(pp.gross_pay),
            _money(pp.federal_tax),
            _money(pp.social_security),
            _money(pp.medicare),
            _money(pp.state_tax),
            _money(pp.other_deductions),
            _money(pp.net_pay),
            style="red" if pp.net_pay < 0 else None,
        )

    totals = result.totals
    table.add_section()
    table.add_row(
        "",
        "TOTAL",
        f"{totals.hours + totals.overtime_hours:,.2f}",
        _money(totals.gross_pay),
        _money(totals.federal_tax),
        _money(totals.social_security),
        _money(totals.medicare),
        _money(totals.state_tax),
        _money(totals.other_deductions),
        _money(totals.net_pay),
        style="bold",
    )

    console.print(table)


def render_validation_errors(console: Console, errors: Dict[str, str]) -> None:
    """Render field errors as a table inside an error panel."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("field", style="bold")
    table.add_column("message", style="red")
    for field, message in errors.items():
        table.add_row(field, message)

    console.print(Panel(table, title="Invalid paystub inputs", border_style="red"))
