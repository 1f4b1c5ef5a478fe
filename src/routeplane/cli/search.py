"""rpl search command - fuzzy search routes."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.text import Text

from routeplane.cli.utils import build_store, load_workspace_config, resolve_roots
from routeplane.index.models import DisplayMode, MatchedRoute
from routeplane.search import SearchSession


def _highlighted(matched: MatchedRoute) -> Text:
    text = Text(matched.route.full_path)
    for span in matched.highlight_spans:
        for start, end in span.ranges:
            text.stylize("bold yellow", start, end)
    return text


@click.command()
@click.argument("query")
@click.argument("roots", nargs=-1, type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--flat", is_flag=True, help="List matches without grouping by controller")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def search_command(query: str, roots: tuple[Path, ...], flat: bool, as_json: bool) -> None:
    """Fuzzy search route paths under ROOTS for QUERY."""
    resolved = resolve_roots(roots)
    store = build_store(resolved, load_workspace_config(resolved))
    session = SearchSession(store)
    if not flat:
        session.toggle_display_mode()
    session.set_search_query(query)
    result = session.search_with_grouping(query)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    console = Console()
    console.print(f"{result.total_matches} of {result.total_endpoints} routes match '{query}'")
    if result.display_mode is DisplayMode.FLAT:
        for matched in result.flat:
            console.print(Text(f"{matched.route.http_method:<8}"), _highlighted(matched))
        return

    for group in result.grouped:
        console.print(
            Text(f"{group.owner_name} ", style="bold"),
            Text(f"({len(group.matched_routes)}/{group.total_routes_in_owner})", style="dim"),
        )
        for matched in group.matched_routes:
            console.print(Text(f"  {matched.route.http_method:<8}"), _highlighted(matched))
