"""Paystub Calc CLI - Command-line interface for paystub calculations."""

import click

from paystub import __version__
from paystub.sdk import configure_logging

from .calc_commands import calc, validate
from .settings_commands import settings as settings_group
from .tables_commands import tables as tables_group


@click.group()
@click.version_option(version=__version__, prog_name="paystub")
def cli():
    """Paystub Calc - Hourly pay and withholding for a full tax year.

    Commands for validating inputs, calculating pay periods
    and exporting them as JSON or CSV.

    Configuration is loaded from (in order):

    \b
    1. PAYSTUB_CONFIG_PATH environment variable
    2. ~/.config/paystub-calc/settings.json (XDG default)

    Run 'paystub settings show' to see effective settings.
    """
    pass


cli.add_command(calc)
cli.add_command(validate)
cli.add_command(tables_group)
cli.add_command(settings_group)


def main():
    """Entry point for the CLI."""
    configure_logging()
    cli()


if __name__ == "__main__":
    main()
