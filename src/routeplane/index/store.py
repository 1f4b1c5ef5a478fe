"""Current route snapshot with change notification.

``RouteIndexStore.refresh()`` rescans the workspace and replaces the held
controller and route lists wholesale. Subscribers are notified with the new
route list when the *ordered* sequence of ``"METHOD /full/path"`` identities
differs from the previous snapshot. A pure reordering of the same routes
counts as a change; downstream consumers rebuild on every notification.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from routeplane.core.logging import clear_refresh_id, set_refresh_id
from routeplane.index._internal.discovery import FilePatternMatcher
from routeplane.index.file_index import FileIndex
from routeplane.index.models import ControllerDescriptor, RouteDescriptor

logger = structlog.get_logger()

RoutesChangedCallback = Callable[[tuple[RouteDescriptor, ...]], None]


@dataclass(frozen=True)
class ScanSettings:
    """Roots and glob patterns a refresh scans with."""

    root_folders: tuple[Path, ...] = ()
    include_globs: tuple[str, ...] = ()
    exclude_globs: tuple[str, ...] = ()

    @classmethod
    def create(
        cls,
        root_folders: Sequence[Path | str],
        include_globs: Sequence[str],
        exclude_globs: Sequence[str],
    ) -> ScanSettings:
        return cls(
            root_folders=tuple(Path(r).absolute() for r in root_folders),
            include_globs=tuple(include_globs),
            exclude_globs=tuple(exclude_globs),
        )

    def matcher(self) -> FilePatternMatcher:
        return FilePatternMatcher(self.root_folders, self.include_globs, self.exclude_globs)


@dataclass
class RouteIndexStore:
    """Holds the flattened route and controller lists for one session."""

    file_index: FileIndex
    settings: ScanSettings = field(default_factory=ScanSettings)

    _routes: tuple[RouteDescriptor, ...] = field(default=(), init=False)
    _controllers: tuple[ControllerDescriptor, ...] = field(default=(), init=False)
    _subscribers: list[RoutesChangedCallback] = field(default_factory=list, init=False)

    @property
    def routes(self) -> tuple[RouteDescriptor, ...]:
        return self._routes

    @property
    def controllers(self) -> tuple[ControllerDescriptor, ...]:
        return self._controllers

    def subscribe(self, callback: RoutesChangedCallback) -> Callable[[], None]:
        """Register a routes-changed callback. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def update_settings(self, settings: ScanSettings) -> None:
        self.settings = settings

    def refresh(self) -> bool:
        """Rescan and replace the snapshot.

        Returns:
            True if subscribers were notified of a route change.
        """
        set_refresh_id()
        try:
            result = self.file_index.scan_workspace(
                self.settings.root_folders,
                self.settings.include_globs,
                self.settings.exclude_globs,
            )

            old_identities = [r.identity for r in self._routes]
            new_identities = [r.identity for r in result.routes]

            self._routes = result.routes
            self._controllers = result.controllers

            changed = old_identities != new_identities
            logger.info(
                "routes_refreshed",
                controllers=len(self._controllers),
                routes=len(self._routes),
                changed=changed,
            )
            if changed:
                self._notify()
            return changed
        finally:
            clear_refresh_id()

    def _notify(self) -> None:
        routes = self._routes
        for callback in list(self._subscribers):
            try:
                callback(routes)
            except Exception as e:
                logger.error(
                    "routes_changed_subscriber_error",
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True,
                )

    def dispose(self) -> None:
        self._subscribers.clear()
        self.file_index.dispose()
