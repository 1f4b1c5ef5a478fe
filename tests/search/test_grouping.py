"""Tests for result grouping and view state."""

from __future__ import annotations

import pytest

from routeplane.index import (
    ControllerDescriptor,
    DisplayMode,
    HighlightSpan,
    MatchedRoute,
    RouteDescriptor,
)
from routeplane.search import FuzzySearchEngine, GroupingEngine, calculate_match_score


@pytest.fixture
def engine(controllers: tuple[ControllerDescriptor, ...]) -> GroupingEngine:
    return GroupingEngine(controllers)


class TestCalculateMatchScore:
    def test_empty(self) -> None:
        assert calculate_match_score([]) == 0.0

    def test_average_matched_count(self, routes: tuple[RouteDescriptor, ...]) -> None:
        matched = [
            MatchedRoute(routes[0], (HighlightSpan("fullPath", ((0, 4),), (0, 1, 2, 3)),)),
            MatchedRoute(routes[1], (HighlightSpan("fullPath", ((0, 1), (3, 4)), (0, 3)),)),
        ]
        assert calculate_match_score(matched) == 3.0

    def test_counts_positions_not_merged_range_length(
        self, routes: tuple[RouteDescriptor, ...]
    ) -> None:
        """A one-character gap joined for display does not add to the score."""
        span = HighlightSpan("fullPath", ((0, 3),), (0, 2))
        assert calculate_match_score([MatchedRoute(routes[0], (span,))]) == 2.0

    def test_uses_positions_from_search(self, routes: tuple[RouteDescriptor, ...]) -> None:
        (matched,) = FuzzySearchEngine(routes[:1]).search("cs")
        (span,) = matched.highlight_spans

        assert span.positions == (1, 4)
        assert calculate_match_score([matched]) == 2.0


class TestBuildInitialResult:
    """build_initial_result() tests."""

    def test_one_group_per_controller(
        self, engine: GroupingEngine, controllers: tuple[ControllerDescriptor, ...]
    ) -> None:
        result = engine.build_initial_result()

        assert [g.owner_name for g in result.grouped] == [c.name for c in controllers]
        assert [len(g.matched_routes) for g in result.grouped] == [3, 2, 1]
        assert all(g.is_expanded for g in result.grouped)
        assert result.total_matches == 6
        assert result.total_endpoints == 6
        assert result.display_mode is DisplayMode.FLAT

    def test_expanded_owners_lists_every_controller(self, engine: GroupingEngine) -> None:
        engine.build_initial_result()
        assert engine.view_state.expanded_owners == (
            "CatsController",
            "UsersController",
            "HealthController",
        )


class TestBuildResult:
    """build_result() tests."""

    def test_searching_drops_groups_without_matches(
        self, engine: GroupingEngine, routes: tuple[RouteDescriptor, ...]
    ) -> None:
        matched = FuzzySearchEngine(routes).search("users")
        result = engine.build_result(matched, "users")

        assert [g.owner_name for g in result.grouped] == ["UsersController"]
        assert result.grouped[0].total_routes_in_owner == 2
        assert result.total_matches == 2
        assert result.total_endpoints == 6
        assert result.flat == tuple(matched)

    def test_blank_query_keeps_empty_groups(
        self, engine: GroupingEngine, routes: tuple[RouteDescriptor, ...]
    ) -> None:
        result = engine.build_result([MatchedRoute(routes[0])], "")
        assert [len(g.matched_routes) for g in result.grouped] == [1, 0, 0]

    def test_groups_sorted_by_match_score(
        self, engine: GroupingEngine, routes: tuple[RouteDescriptor, ...]
    ) -> None:
        weak = MatchedRoute(routes[0], (HighlightSpan("fullPath", ((0, 1),), (0,)),))
        strong = MatchedRoute(routes[5], (HighlightSpan("fullPath", ((0, 5),), (0, 1, 2, 3, 4)),))

        result = engine.build_result([weak, strong], "q")

        assert [g.owner_name for g in result.grouped] == ["HealthController", "CatsController"]
        assert result.grouped[0].match_score == 5.0

    def test_equal_scores_keep_controller_order(
        self, engine: GroupingEngine, routes: tuple[RouteDescriptor, ...]
    ) -> None:
        span = (HighlightSpan("fullPath", ((0, 2),), (0, 1)),)
        result = engine.build_result(
            [MatchedRoute(routes[5], span), MatchedRoute(routes[0], span)], "q"
        )
        assert [g.owner_name for g in result.grouped] == ["CatsController", "HealthController"]


class TestViewState:
    """Display mode and expansion toggles."""

    def test_toggle_display_mode(self, engine: GroupingEngine) -> None:
        assert engine.toggle_display_mode().display_mode is DisplayMode.GROUPED
        assert engine.toggle_display_mode().display_mode is DisplayMode.FLAT

    def test_collapse_then_expand(self, engine: GroupingEngine) -> None:
        collapsed = engine.toggle_owner_expansion("CatsController")

        assert "CatsController" not in collapsed.expanded_owners
        assert collapsed.focused_owner is None
        assert engine.user_collapsed_owners == frozenset({"CatsController"})

        expanded = engine.toggle_owner_expansion("CatsController")

        assert "CatsController" in expanded.expanded_owners
        assert expanded.focused_owner == "CatsController"
        assert engine.user_collapsed_owners == frozenset()

    def test_collapse_survives_search(
        self, engine: GroupingEngine, routes: tuple[RouteDescriptor, ...]
    ) -> None:
        """Search relevance never re-expands a collapsed owner."""
        engine.toggle_owner_expansion("CatsController")
        result = engine.build_result(FuzzySearchEngine(routes).search("cats"), "cats")

        (cats,) = result.grouped
        assert cats.is_expanded is False

    def test_update_view_state(self, engine: GroupingEngine) -> None:
        state = engine.update_view_state(search_query="id")
        assert state.search_query == "id"
        assert engine.view_state is state

    def test_update_controllers(self, engine: GroupingEngine) -> None:
        engine.update_controllers([])
        assert engine.build_initial_result().grouped == ()
