"""Calculation commands: calc and validate."""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
import yaml
from rich.console import Console

from paystub.sdk import (
    FILING_STATUSES,
    PAY_FREQUENCIES,
    CalculationParameters,
    ConfigError,
    InvalidInputError,
    TaxTableError,
    calculate,
    get_setting,
    to_csv,
    validate_inputs,
    write_csv,
)
from paystub.sdk.boundary import INVALID_INPUT_MESSAGE, error_response
from .renderers.paystub_renderer import render_paystub, render_validation_errors

OUTPUT_FORMATS = ["table", "json", "csv"]


def load_params_file(path: Path) -> Dict[str, Any]:
    """Load calculation parameters from a JSON or YAML file."""
    with open(path, "r") as f:
        try:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise click.ClickException(f"Could not parse {path}: {e}")

    if not isinstance(data, dict):
        raise click.ClickException(f"{path} must contain an object of parameters")
    return data


def parse_deduction(value: str) -> Dict[str, Any]:
    """Parse NAME=AMOUNT into a deduction dict."""
    name, sep, amount = value.rpartition("=")
    if not sep or not name:
        raise click.BadParameter(f"Expected NAME=AMOUNT, got '{value}'", param_hint="--deduction")
    try:
        return {"name": name, "amount": float(amount)}
    except ValueError:
        raise click.BadParameter(f"Invalid amount in '{value}'", param_hint="--deduction")


def build_params(input_file: Optional[str], deductions: Tuple[str, ...], **options) -> Dict[str, Any]:
    """Merge an optional parameters file with command-line options (options win)."""
    params = load_params_file(Path(input_file)) if input_file else {}

    option_keys = {
        "hourly_rate": "hourlyRate",
        "hours": "hoursPerPeriod",
        "overtime_hours": "overtimeHours",
        "overtime_rate": "overtimeRate",
        "filing_status": "filingStatus",
        "year": "taxYear",
        "state": "state",
        "frequency": "payFrequency",
        "first_pay_date": "firstPayDate",
    }
    for option, key in option_keys.items():
        value = options.get(option)
        if value is not None:
            params[key] = value

    if deductions:
        params["additionalDeductions"] = [parse_deduction(d) for d in deductions]

    return params


def paystub_options(func):
    """Options shared by calc and validate."""
    options = [
        click.option("--input", "-i", "input_file", type=click.Path(exists=True, dir_okay=False),
                     help="JSON or YAML file of parameters (options override it)"),
        click.option("--hourly-rate", "-r", type=float, help="Pay per regular hour"),
        click.option("--hours", "-h", type=float, help="Regular hours per pay period"),
        click.option("--overtime-hours", type=float, help="Overtime hours per pay period"),
        click.option("--overtime-rate", type=float, help="Pay per overtime hour (default: 1.5x rate)"),
        click.option("--filing-status", "-s", type=click.Choice(FILING_STATUSES),
                     help="Federal filing status"),
        click.option("--year", "-y", type=int, help="Tax year (2020 or later)"),
        click.option("--state", help="Two-letter state code"),
        click.option("--frequency", "-f", type=click.Choice(PAY_FREQUENCIES), help="Pay frequency"),
        click.option("--first-pay-date", help="First pay date for weekly/biweekly (YYYY-MM-DD)"),
        click.option("--deduction", "-d", "deductions", multiple=True, metavar="NAME=AMOUNT",
                     help="Per-period deduction (repeatable)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _fail_invalid(errors: Dict[str, str], output_format: str) -> None:
    if output_format == "json":
        click.echo(json.dumps(error_response(INVALID_INPUT_MESSAGE, errors), indent=2))
    else:
        render_validation_errors(Console(width=140, stderr=True), errors)
    click.get_current_context().exit(1)


@click.command("calc")
@paystub_options
@click.option("--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default=None,
              help="Output format (default: settings default_output_format or table)")
@click.option("--output", "-o", type=click.Path(dir_okay=False),
              help="Write json/csv output to a file instead of stdout")
def calc(input_file, deductions, output_format, output, **options):
    """Calculate a full year of pay periods.

    Shows each pay period's gross pay, federal tax, Social Security,
    Medicare, state tax, other deductions and net pay, with totals.

    \b
    Examples:
      paystub calc -r 25 -h 80 -s single -y 2024 --state TX -f biweekly
      paystub calc -i params.yaml --format csv -o pay-periods.csv
      paystub calc -i params.json -d "Health Insurance=150" --format json
    """
    try:
        if output_format is None:
            output_format = get_setting("default_output_format", "table")
        if output_format not in OUTPUT_FORMATS:
            raise click.ClickException(
                f"Invalid default_output_format '{output_format}' in settings"
            )
    except ConfigError as e:
        raise click.ClickException(str(e))

    params = build_params(input_file, deductions, **options)

    validation = validate_inputs(params)
    if not validation.is_valid:
        _fail_invalid(validation.errors, output_format)
        return

    try:
        result = calculate(params)
    except InvalidInputError as e:
        _fail_invalid(e.errors, output_format)
        return
    except (TaxTableError, ConfigError) as e:
        raise click.ClickException(str(e))

    if output_format == "table":
        if output:
            raise click.BadParameter("--output requires --format json or csv", param_hint="--output")
        render_paystub(Console(width=140), CalculationParameters.model_validate(params), result)
        return

    if output_format == "csv" and output:
        path = write_csv(result.pay_periods, Path(output))
        click.echo(f"Wrote {len(result.pay_periods)} pay periods to {path}")
        return

    text = json.dumps(result.to_response(), indent=2) if output_format == "json" else to_csv(result.pay_periods)
    if output:
        Path(output).write_text(text)
        click.echo(f"Wrote {len(result.pay_periods)} pay periods to {output}")
    else:
        click.echo(text, nl=output_format == "json")


@click.command("validate")
@paystub_options
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table",
              help="Output format (default: table)")
def validate(input_file, deductions, output_format, **options):
    """Check parameters without calculating.

    Reports every invalid field at once. Exits with status 1 when any
    field is invalid.
    """
    params = build_params(input_file, deductions, **options)
    validation = validate_inputs(params)

    if output_format == "json":
        click.echo(json.dumps(validation.to_response(), indent=2))
        if not validation.is_valid:
            click.get_current_context().exit(1)
        return

    if not validation.is_valid:
        _fail_invalid(validation.errors, output_format)
        return

    click.echo("Inputs are valid.")
