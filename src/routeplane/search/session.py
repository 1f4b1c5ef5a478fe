"""Search session wiring the route store to search and grouping.

One session is created per workspace session with an explicit store handle.
It subscribes to route changes and rebuilds the fuzzy index and the grouping
engine's controller list on each notification.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

import structlog

from routeplane.core.errors import NavigationError
from routeplane.index.models import MatchedRoute, RouteDescriptor, SearchResult, ViewState
from routeplane.index.store import RouteIndexStore
from routeplane.search.fuzzy import FuzzySearchEngine
from routeplane.search.grouping import GroupingEngine

logger = structlog.get_logger()


class Navigator(Protocol):
    """Host editor navigation."""

    def open(self, path: str, line: int | None = None, column: int | None = None) -> None:
        """Open ``path``; when given, place the cursor at 1-based line / 0-based column."""
        ...

    def show_error(self, message: str) -> None: ...


class SearchSession:
    """Search, grouping and navigation over one ``RouteIndexStore``."""

    def __init__(self, store: RouteIndexStore, navigator: Navigator | None = None) -> None:
        self._store = store
        self._navigator = navigator
        self._search = FuzzySearchEngine(store.routes)
        self._grouping = GroupingEngine(store.controllers)
        self._unsubscribe = store.subscribe(self._on_routes_changed)

    @property
    def search_engine(self) -> FuzzySearchEngine:
        return self._search

    @property
    def grouping(self) -> GroupingEngine:
        return self._grouping

    def _on_routes_changed(self, routes: tuple[RouteDescriptor, ...]) -> None:
        logger.debug("session_routes_changed", routes=len(routes))
        self._search.update_index(routes)
        self._grouping.update_controllers(self._store.controllers)

    def search_with_matches(self, query: str) -> list[MatchedRoute]:
        return self._search.search(query)

    def search_with_grouping(self, query: str) -> SearchResult:
        if not query.strip():
            return self._grouping.build_initial_result()
        return self._grouping.build_result(self._search.search(query), query)

    @property
    def view_state(self) -> ViewState:
        return self._grouping.view_state

    def toggle_display_mode(self) -> ViewState:
        return self._grouping.toggle_display_mode()

    def toggle_owner_expansion(self, owner_name: str) -> ViewState:
        return self._grouping.toggle_owner_expansion(owner_name)

    def set_search_query(self, query: str) -> ViewState:
        return self._grouping.update_view_state(search_query=query)

    def jump_to_route(self, route: RouteDescriptor) -> bool:
        """Open the route's handler. Returns False and reports when the file is gone."""
        return self._navigate(route.source_file, max(1, route.line), max(0, route.column))

    def jump_to_owner_file(self, file_path: str) -> bool:
        return self._navigate(file_path, None, None)

    def _navigate(self, path: str, line: int | None, column: int | None) -> bool:
        if self._navigator is None:
            return False
        try:
            if not Path(path).is_file():
                raise NavigationError.target_missing(path)
            self._navigator.open(path, line, column)
        except NavigationError as e:
            logger.warning("navigation_failed", path=path, error=e.error_name)
            self._navigator.show_error(e.message)
            return False
        except OSError as e:
            err = NavigationError.target_missing(path)
            logger.warning("navigation_failed", path=path, error=err.error_name, reason=str(e))
            self._navigator.show_error(err.message)
            return False
        return True

    def dispose(self) -> None:
        self._unsubscribe()
