"""propcontract CLI."""

import click

from propcontract.cli.check import check_command
from propcontract.cli.show_config import config_command
from propcontract.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="propcontract")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """propcontract - check that React component props declare their defaults."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(check_command, name="check")
cli.add_command(config_command, name="config")


if __name__ == "__main__":
    cli()
