"""Fuzzy route search, grouping and the search session."""

from routeplane.search.fuzzy import FuzzyMatch, FuzzySearchEngine, fuzzy_match, merge_positions
from routeplane.search.grouping import GroupingEngine, calculate_match_score
from routeplane.search.session import Navigator, SearchSession

__all__ = [
    "FuzzyMatch",
    "FuzzySearchEngine",
    "fuzzy_match",
    "merge_positions",
    "GroupingEngine",
    "calculate_match_score",
    "Navigator",
    "SearchSession",
]
