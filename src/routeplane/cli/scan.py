"""rpl scan command - list discovered controllers and routes."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from routeplane.cli.utils import build_store, load_workspace_config, resolve_roots


@click.command()
@click.argument("roots", nargs=-1, type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def scan_command(roots: tuple[Path, ...], as_json: bool) -> None:
    """Scan workspace ROOTS (default: current directory) for routes."""
    resolved = resolve_roots(roots)
    store = build_store(resolved, load_workspace_config(resolved))

    if as_json:
        click.echo(json.dumps({"controllers": [c.to_dict() for c in store.controllers]}, indent=2))
        return

    console = Console()
    if not store.routes:
        console.print("No routes found.")
        return

    table = Table(title=f"{len(store.routes)} routes in {len(store.controllers)} controllers")
    table.add_column("Method", style="bold cyan")
    table.add_column("Path")
    table.add_column("Handler")
    table.add_column("Location", style="dim")
    for route in store.routes:
        table.add_row(
            route.http_method,
            route.full_path,
            f"{route.owner_name}.{route.handler_name}",
            f"{route.source_file}:{route.line}:{route.column + 1}",
        )
    console.print(table)
