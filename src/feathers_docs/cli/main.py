"""feathers-docs CLI."""

from pathlib import Path
from typing import Any

import click

from feathers_docs import __version__
from feathers_docs.cli.serve import serve_command
from feathers_docs.cli.sync import sync_command
from feathers_docs.config import DocsServerConfig, load_config
from feathers_docs.core.errors import ConfigError
from feathers_docs.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="feathers-docs")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file (default: ~/.config/feathers-docs/config.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """FeathersJS documentation catalog served over MCP."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config_path
    configure_logging(level="DEBUG" if verbose else "INFO")


def load_cli_config(ctx: click.Context, **overrides: Any) -> DocsServerConfig:
    """Load config for a subcommand, applying -v and per-command overrides."""
    obj = ctx.find_object(dict) or {}
    if obj.get("verbose"):
        overrides.setdefault("logging", {})["level"] = "DEBUG"
    try:
        return load_config(obj.get("config_path"), **overrides)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


cli.add_command(serve_command, name="serve")
cli.add_command(sync_command, name="sync")


if __name__ == "__main__":
    cli()
