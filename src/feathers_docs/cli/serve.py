"""feathers-docs serve command."""

import click

from feathers_docs.config.constants import PORT_MAX, PORT_MIN


@click.command()
@click.option(
    "--transport",
    type=click.Choice(["stdio", "http"]),
    default=None,
    help="MCP transport (default: from config, stdio)",
)
@click.option("--host", default=None, help="Bind address for http")
@click.option("--port", type=click.IntRange(PORT_MIN, PORT_MAX), default=None, help="Port for http")
@click.pass_context
def serve_command(
    ctx: click.Context,
    transport: str | None,
    host: str | None,
    port: int | None,
) -> None:
    """Sync the docs repository and serve the catalog over MCP.

    With stdio, stdout carries the protocol; all logs go to stderr.
    """
    from feathers_docs.cli.main import load_cli_config
    from feathers_docs.mcp.server import run_server

    server = {
        key: value
        for key, value in (("transport", transport), ("host", host), ("port", port))
        if value is not None
    }
    config = load_cli_config(ctx, **({"server": server} if server else {}))
    run_server(config)
