"""feathers-docs sync command."""

import asyncio
import json

import click


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def sync_command(ctx: click.Context, as_json: bool) -> None:
    """Refresh the local docs mirror once and print the index status."""
    from feathers_docs.cli.main import load_cli_config
    from feathers_docs.docs.index import DocsIndex
    from feathers_docs.mcp.errors import SyncError

    config = load_cli_config(ctx)
    index = DocsIndex(config)

    try:
        refresh = asyncio.run(index.refresh())
    except SyncError as e:
        raise click.ClickException(e.message) from e

    status = index.status()
    if as_json:
        click.echo(json.dumps({**status.to_dict(), "changed": refresh.changed}, indent=2))
        return

    click.echo(f"Repository: {status.repo_url} ({status.branch})")
    click.echo(f"Commit: {status.commit or '-'}{' (updated)' if refresh.changed else ''}")
    click.echo(f"Pages: {status.pages}")
    click.echo(f"Docs dir: {status.docs_dir_resolved}")
    for warning in status.discovery_warnings:
        click.echo(f"Warning: {warning}")
