"""Settings CLI commands for Paystub Calc.

Manages settings.json - tax rules directory and output preferences.
"""

import click
from pathlib import Path

from paystub.sdk import (
    ConfigError,
    TaxTableError,
    get_default_calculator,
    get_setting,
    get_settings_path,
    get_tax_rules_dir,
    load_settings,
    load_tax_tables,
    save_settings,
    set_setting,
)
from paystub.sdk.taxes import clear_cache


def _reset_caches() -> None:
    clear_cache()
    get_default_calculator.cache_clear()


def _load_or_fail() -> dict:
    try:
        return load_settings()
    except ConfigError as e:
        raise click.ClickException(str(e))


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - tax_rules_dir: directory of replacement tax rule YAML files
    - default_output_format: table, json or csv for 'paystub calc'
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = _load_or_fail()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective values:")
    try:
        click.echo(f"  tax_rules_dir: {get_tax_rules_dir()}")
    except ConfigError as e:
        click.echo(f"  tax_rules_dir: ERROR - {e}")
    click.echo(f"  default_output_format: {current.get('default_output_format', 'table')}")


@settings.command("tax-rules-dir")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom tax_rules_dir, revert to bundled tables")
def settings_tax_rules_dir(path, clear):
    """Set or clear the custom tax rules directory.

    PATH must contain <year>.yaml files in the bundled format. A
    state_rules.yaml is optional; the bundled one is used when absent.

    Examples:
        paystub settings tax-rules-dir ~/tax-rules
        paystub settings tax-rules-dir --clear
    """
    if clear:
        current = _load_or_fail()
        if "tax_rules_dir" in current:
            del current["tax_rules_dir"]
            save_settings(current)
            _reset_caches()
            click.echo("Cleared tax_rules_dir setting.")
            click.echo(f"Tax rules are now: {get_tax_rules_dir()} (bundled)")
        else:
            click.echo("tax_rules_dir was not set.")
        return

    if not path:
        current_dir = _load_or_fail().get("tax_rules_dir")
        if current_dir:
            click.echo(f"Current tax_rules_dir: {current_dir}")
        else:
            click.echo(f"No custom tax_rules_dir set. Using bundled: {get_tax_rules_dir()}")
        return

    rules_path = Path(path).expanduser().resolve()
    if not rules_path.is_dir():
        raise click.ClickException(f"Not a directory: {rules_path}")

    # Refuse directories the calculator could not load
    try:
        registry = load_tax_tables(rules_path)
    except TaxTableError as e:
        raise click.ClickException(f"Invalid tax rules in {rules_path}:\n{e}")

    set_setting("tax_rules_dir", str(rules_path))
    _reset_caches()
    click.echo(f"Set tax_rules_dir: {rules_path}")
    click.echo(f"Tax years: {', '.join(str(y) for y in registry.years)}")
    click.echo(f"Saved to: {get_settings_path()}")


@settings.command("output-format")
@click.argument("output_format", required=False, type=click.Choice(["table", "json", "csv"]))
def settings_output_format(output_format):
    """Show or set the default output format for 'paystub calc'."""
    if not output_format:
        try:
            click.echo(f"default_output_format: {get_setting('default_output_format', 'table')}")
        except ConfigError as e:
            raise click.ClickException(str(e))
        return

    _load_or_fail()
    set_setting("default_output_format", output_format)
    click.echo(f"Set default_output_format: {output_format}")
