"""propcontract config command - print the effective configuration."""

from pathlib import Path

import click
import yaml

from propcontract.config.loader import load_config
from propcontract.core.errors import ConfigError


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: .propcontract.yaml in the current directory)",
)
def config_command(config_path: Path | None) -> None:
    """Print the effective configuration as YAML.

    Shows the result of merging defaults, the global and project config
    files and PROPCONTRACT__* environment variables.
    """
    try:
        config = load_config(Path.cwd(), config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    click.echo(yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False), nl=False)
