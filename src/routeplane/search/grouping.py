"""Grouping of matched routes by owning controller, plus view state.

Expansion is driven only by explicit user intent: every owner is expanded
unless the user collapsed it. Search relevance ranks groups but never
expands or collapses them.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

import structlog

from routeplane.index.models import (
    ControllerDescriptor,
    DisplayMode,
    GroupedResult,
    MatchedRoute,
    SearchResult,
    ViewState,
)

logger = structlog.get_logger()


def calculate_match_score(matched_routes: Sequence[MatchedRoute]) -> float:
    """Average matched-character count per matched route (0 when empty)."""
    if not matched_routes:
        return 0.0
    total = sum(m.matched_count for m in matched_routes)
    return total / len(matched_routes)


class GroupingEngine:
    """Builds grouped search results and owns expand/collapse state."""

    def __init__(self, controllers: Sequence[ControllerDescriptor] = ()) -> None:
        self._controllers: tuple[ControllerDescriptor, ...] = tuple(controllers)
        self._view_state = ViewState()
        self._user_collapsed_owners: set[str] = set()

    @property
    def view_state(self) -> ViewState:
        """Immutable snapshot of the current view state."""
        return self._view_state

    @property
    def user_collapsed_owners(self) -> frozenset[str]:
        return frozenset(self._user_collapsed_owners)

    def update_controllers(self, controllers: Sequence[ControllerDescriptor]) -> None:
        self._controllers = tuple(controllers)

    def update_view_state(self, **changes: object) -> ViewState:
        """Apply field changes (e.g. ``search_query``) and return the new state."""
        self._view_state = replace(self._view_state, **changes)  # type: ignore[arg-type]
        return self._view_state

    def _expanded_owners(self) -> tuple[str, ...]:
        return tuple(
            c.name for c in self._controllers if c.name not in self._user_collapsed_owners
        )

    def _is_expanded(self, owner_name: str) -> bool:
        return owner_name not in self._user_collapsed_owners

    def toggle_display_mode(self) -> ViewState:
        mode = (
            DisplayMode.GROUPED
            if self._view_state.display_mode is DisplayMode.FLAT
            else DisplayMode.FLAT
        )
        return self.update_view_state(display_mode=mode)

    def toggle_owner_expansion(self, owner_name: str) -> ViewState:
        """Flip the user's collapse intent for one owner."""
        if owner_name in self._user_collapsed_owners:
            self._user_collapsed_owners.discard(owner_name)
        else:
            self._user_collapsed_owners.add(owner_name)

        expanded = self._is_expanded(owner_name)
        logger.debug(
            "owner_expansion_toggled",
            owner=owner_name,
            expanded=expanded,
            collapsed=sorted(self._user_collapsed_owners),
        )
        return self.update_view_state(
            expanded_owners=self._expanded_owners(),
            focused_owner=owner_name if expanded else None,
        )

    def build_result(self, matched_routes: Sequence[MatchedRoute], query: str) -> SearchResult:
        """Group matches by owner in controller order, ranking groups when searching."""
        searching = bool(query.strip())

        by_owner: dict[str, list[MatchedRoute]] = {}
        for matched in matched_routes:
            by_owner.setdefault(matched.route.owner_name, []).append(matched)

        grouped: list[GroupedResult] = []
        for controller in self._controllers:
            matches = by_owner.get(controller.name, [])
            if not matches and searching:
                continue
            grouped.append(
                GroupedResult(
                    owner_name=controller.name,
                    base_path=controller.base_path,
                    source_file=controller.source_file,
                    matched_routes=tuple(matches),
                    total_routes_in_owner=len(controller.routes),
                    is_expanded=self._is_expanded(controller.name),
                    match_score=calculate_match_score(matches),
                )
            )

        if searching:
            # Stable sort: equal scores keep controller order
            grouped.sort(key=lambda g: (not g.matched_routes, -g.match_score))

        self.update_view_state(expanded_owners=self._expanded_owners())
        return SearchResult(
            grouped=tuple(grouped),
            flat=tuple(matched_routes),
            display_mode=self._view_state.display_mode,
            total_matches=len(matched_routes),
            total_endpoints=sum(len(c.routes) for c in self._controllers),
        )

    def build_initial_result(self) -> SearchResult:
        """One group per known controller with all of its routes."""
        grouped = tuple(
            GroupedResult(
                owner_name=c.name,
                base_path=c.base_path,
                source_file=c.source_file,
                matched_routes=tuple(MatchedRoute(route=r) for r in c.routes),
                total_routes_in_owner=len(c.routes),
                is_expanded=self._is_expanded(c.name),
                match_score=0.0,
            )
            for c in self._controllers
        )
        flat = tuple(m for group in grouped for m in group.matched_routes)

        self.update_view_state(expanded_owners=self._expanded_owners())
        return SearchResult(
            grouped=grouped,
            flat=flat,
            display_mode=self._view_state.display_mode,
            total_matches=len(flat),
            total_endpoints=len(flat),
        )
