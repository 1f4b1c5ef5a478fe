"""CLI utilities."""

from collections.abc import Sequence
from pathlib import Path

import click

from routeplane.config import RoutePlaneConfig, load_config
from routeplane.core.errors import ConfigError
from routeplane.index import FileIndex, RouteIndexStore, ScanSettings


def resolve_roots(roots: Sequence[Path]) -> list[Path]:
    """Absolute workspace roots; the current directory when none are given."""
    return [r.resolve() for r in roots] or [Path.cwd().resolve()]


def load_workspace_config(roots: Sequence[Path]) -> RoutePlaneConfig:
    """Load config from the first root's .routeplane/config.yaml.

    Raises:
        click.ClickException: On invalid configuration.
    """
    try:
        return load_config(roots[0])
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


def settings_from_config(roots: Sequence[Path], config: RoutePlaneConfig) -> ScanSettings:
    return ScanSettings.create(
        roots,
        config.scan.file_patterns,
        config.scan.exclude_patterns,
    )


def build_store(roots: Sequence[Path], config: RoutePlaneConfig) -> RouteIndexStore:
    """Create a store for the roots and run the initial scan."""
    store = RouteIndexStore(FileIndex(), settings_from_config(roots, config))
    store.refresh()
    return store
