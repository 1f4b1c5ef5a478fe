"""rpl watch command - keep the route index fresh and report changes."""

import asyncio
import contextlib
from pathlib import Path

import click
import structlog

from routeplane.cli.utils import (
    build_store,
    load_workspace_config,
    resolve_roots,
    settings_from_config,
)
from routeplane.config import load_config
from routeplane.config.loader import REPO_CONFIG_DIR
from routeplane.core.errors import ConfigError
from routeplane.core.logging import configure_logging
from routeplane.daemon import ChangeNotifier, WorkspaceWatcher
from routeplane.index.models import RouteDescriptor

logger = structlog.get_logger()


async def _run(roots: list[Path]) -> None:
    config = load_workspace_config(roots)
    configure_logging(config=config.logging)

    store = build_store(roots, config)
    notifier = ChangeNotifier(store)

    def report(routes: tuple[RouteDescriptor, ...]) -> None:
        logger.info("route_set_changed", routes=[r.identity for r in routes])

    store.subscribe(report)
    report(store.routes)

    async def reload_settings() -> None:
        try:
            new_config = load_config(roots[0])
        except ConfigError as e:
            logger.error("config_reload_failed", error=e.error_name, reason=e.message)
            return
        await notifier.handle_config_change(settings_from_config(roots, new_config))

    watcher = WorkspaceWatcher(
        roots=roots,
        on_files_changed=notifier.handle_events,
        config_files=[roots[0] / REPO_CONFIG_DIR / "config.yaml"],
        on_config_changed=reload_settings,
        debounce_sec=config.watcher.debounce_sec,
    )
    await watcher.start()
    try:
        await watcher.wait()
    finally:
        await watcher.stop()
        store.dispose()


@click.command()
@click.argument("roots", nargs=-1, type=click.Path(exists=True, file_okay=False, path_type=Path))
def watch_command(roots: tuple[Path, ...]) -> None:
    """Watch ROOTS (default: current directory) and log route changes."""
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run(resolve_roots(roots)))
