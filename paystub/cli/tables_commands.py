"""Tax table CLI commands.

Shows the tax tables the calculator will use (bundled or from the
configured tax_rules_dir).
"""

import json
import math

import click
from rich.console import Console
from rich.table import Table

from paystub.sdk import (
    FILING_STATUSES,
    ConfigError,
    TaxTableError,
    get_tax_rules_dir,
    load_state_rules,
    load_tax_tables,
)


def _limit(value: float) -> str:
    return "and up" if math.isinf(value) else f"${value:,.0f}"


@click.group()
def tables():
    """Inspect federal and state tax tables."""
    pass


@tables.command("list")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table",
              help="Output format (default: table)")
def tables_list(output_format):
    """List available tax years and state tables."""
    try:
        rules_dir = get_tax_rules_dir()
        registry = load_tax_tables(rules_dir)
        state_rules = load_state_rules(rules_dir)
    except (TaxTableError, ConfigError) as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps({
            "rules_dir": str(rules_dir),
            "years": registry.years,
            "state_tables": sorted(state_rules.states),
            "no_income_tax": sorted(state_rules.no_income_tax),
        }, indent=2))
        return

    console = Console(width=140)
    console.print(f"Tax rules: {rules_dir}\n")

    table = Table(title="Federal Tax Tables")
    table.add_column("Year", style="cyan")
    table.add_column("SS Wage Base", justify="right")
    table.add_column("SS Rate", justify="right")
    table.add_column("Medicare Rate", justify="right")
    for year in registry.years:
        t = registry.get(year)
        table.add_row(
            str(year),
            f"${t.social_security.wage_base:,.0f}",
            f"{t.social_security.rate:.2%}",
            f"{t.medicare.rate:.2%}",
        )
    console.print(table)

    console.print(f"\nState tables: {', '.join(sorted(state_rules.states)) or 'none'}")
    console.print(f"No state income tax: {', '.join(sorted(state_rules.no_income_tax)) or 'none'}")


@tables.command("show")
@click.argument("year", type=int)
@click.option("--filing-status", "-s", type=click.Choice(FILING_STATUSES), default="single",
              help="Filing status whose brackets to show (default: single)")
def tables_show(year, filing_status):
    """Show federal brackets and FICA limits for YEAR.

    Years without a table use the latest earlier one.
    """
    try:
        table, is_fallback = load_tax_tables().resolve(year)
    except (TaxTableError, ConfigError) as e:
        raise click.ClickException(str(e))

    console = Console(width=140)
    if is_fallback:
        console.print(f"[yellow]No {year} table; showing {table.tax_year}[/yellow]\n")

    ss = table.social_security
    medicare = table.medicare
    console.print(f"[bold]{table.tax_year} ({filing_status})[/bold]")
    console.print(f"Social Security: {ss.rate:.2%} up to ${ss.wage_base:,.0f} "
                  f"(max ${ss.max_annual_tax:,.2f})")
    console.print(f"Medicare: {medicare.rate:.2%}, plus {medicare.additional_rate:.2%} over "
                  f"${medicare.additional_threshold[filing_status]:,.0f}")
    console.print()

    brackets = Table(title="Federal Brackets")
    brackets.add_column("Over", justify="right")
    brackets.add_column("Up To", justify="right")
    brackets.add_column("Rate", justify="right", style="yellow")
    lower = 0.0
    for bracket in table.brackets_for(filing_status):
        brackets.add_row(f"${lower:,.0f}", _limit(bracket.limit), f"{bracket.rate:.0%}")
        lower = bracket.limit
    console.print(brackets)
