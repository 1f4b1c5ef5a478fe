"""RoutePlane CLI - rpl command."""

import click

from routeplane.cli.scan import scan_command
from routeplane.cli.search import search_command
from routeplane.cli.watch import watch_command
from routeplane.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="rpl")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """RoutePlane - fuzzy-searchable index of decorated HTTP routes."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(scan_command, name="scan")
cli.add_command(search_command, name="search")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()
