"""Fuzzy route search over full paths.

Scoring follows the fzf model: every matched character earns a base score
plus a positional bonus (path delimiters, word boundaries, camelCase humps),
consecutive matches earn a run bonus, and gaps between matches are penalized
(a start penalty plus a per-character extension penalty). The best alignment
is found with a Smith-Waterman style dynamic program in O(len(query) * len(text)).

Candidates containing the query as a contiguous substring form a separate,
higher tier: they always rank above sparse subsequence matches. Within a tier,
higher scores come first and ties keep store order.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

import structlog

from routeplane.index.models import HighlightSpan, MatchedRoute, RouteDescriptor

logger = structlog.get_logger()

FULL_PATH_KEY = "fullPath"

SCORE_MATCH = 16
SCORE_GAP_START = -3
SCORE_GAP_EXTENSION = -1
BONUS_BOUNDARY = SCORE_MATCH // 2
BONUS_BOUNDARY_DELIMITER = BONUS_BOUNDARY + 1
BONUS_NON_WORD = SCORE_MATCH // 2
BONUS_CAMEL = BONUS_BOUNDARY + SCORE_GAP_EXTENSION
BONUS_CONSECUTIVE = -(SCORE_GAP_START + SCORE_GAP_EXTENSION)
BONUS_FIRST_CHAR_MULTIPLIER = 2

_DELIMITERS = frozenset("/:.,-_")


class CharClass(IntEnum):
    WHITE = 0
    NON_WORD = 1
    DELIMITER = 2
    LOWER = 3
    UPPER = 4
    NUMBER = 5


def _char_class(ch: str) -> CharClass:
    if ch.islower():
        return CharClass.LOWER
    if ch.isupper():
        return CharClass.UPPER
    if ch.isdigit():
        return CharClass.NUMBER
    if ch.isspace():
        return CharClass.WHITE
    if ch in _DELIMITERS:
        return CharClass.DELIMITER
    return CharClass.NON_WORD


def _bonus_for(prev: CharClass, curr: CharClass) -> int:
    if curr > CharClass.DELIMITER:
        if prev == CharClass.WHITE:
            return BONUS_BOUNDARY + 2
        if prev == CharClass.DELIMITER:
            return BONUS_BOUNDARY_DELIMITER
        if prev == CharClass.NON_WORD:
            return BONUS_BOUNDARY
    if prev == CharClass.LOWER and curr == CharClass.UPPER:
        return BONUS_CAMEL
    if prev != CharClass.NUMBER and curr == CharClass.NUMBER:
        return BONUS_CAMEL
    if curr in (CharClass.NON_WORD, CharClass.DELIMITER):
        return BONUS_NON_WORD
    if curr == CharClass.WHITE:
        return BONUS_BOUNDARY + 2
    return 0


def _position_bonuses(text: str) -> list[int]:
    """Bonus per character; the first character is treated as after a delimiter."""
    bonuses: list[int] = []
    prev = CharClass.DELIMITER
    for ch in text:
        curr = _char_class(ch)
        bonuses.append(_bonus_for(prev, curr))
        prev = curr
    return bonuses


@dataclass(frozen=True, slots=True)
class FuzzyMatch:
    """Result of matching one query against one text."""

    score: int
    positions: tuple[int, ...]
    exact: bool


def _contiguous_score(bonuses: Sequence[int], start: int, length: int) -> int:
    score = SCORE_MATCH + bonuses[start] * BONUS_FIRST_CHAR_MULTIPLIER
    run_bonus = bonuses[start]
    for j in range(start + 1, start + length):
        bonus = bonuses[j]
        if bonus >= BONUS_BOUNDARY:
            run_bonus = bonus
        score += SCORE_MATCH + max(run_bonus, BONUS_CONSECUTIVE, bonus)
    return score


def _match_exact(text: str, pattern: str, bonuses: Sequence[int]) -> FuzzyMatch | None:
    """Best-scoring contiguous occurrence of pattern in text."""
    best: tuple[int, int] | None = None
    start = text.find(pattern)
    while start != -1:
        score = _contiguous_score(bonuses, start, len(pattern))
        if best is None or score > best[0]:
            best = (score, start)
        start = text.find(pattern, start + 1)
    if best is None:
        return None
    score, start = best
    return FuzzyMatch(score=score, positions=tuple(range(start, start + len(pattern))), exact=True)


def _is_subsequence(text: str, pattern: str) -> bool:
    it = iter(text)
    return all(ch in it for ch in pattern)


def _match_fuzzy(text: str, pattern: str, bonuses: Sequence[int]) -> FuzzyMatch | None:
    """Optimal-alignment subsequence match.

    ``score[i][j]`` is the best score of matching ``pattern[: i + 1]`` with
    ``pattern[i]`` placed at ``text[j]``; ``run[i][j]`` carries the bonus
    of the consecutive run ending there and ``back[i][j]`` the previous
    position for backtracking.
    """
    n, m = len(text), len(pattern)
    neg = float("-inf")
    score: list[list[float]] = [[neg] * n for _ in range(m)]
    run: list[list[int]] = [[0] * n for _ in range(m)]
    back: list[list[int]] = [[-1] * n for _ in range(m)]

    for j in range(n):
        if text[j] == pattern[0]:
            score[0][j] = SCORE_MATCH + bonuses[j] * BONUS_FIRST_CHAR_MULTIPLIER
            run[0][j] = bonuses[j]

    for i in range(1, m):
        prev_row = score[i - 1]
        # Running max of prev_row[k] - GAP_EXTENSION * k over k <= j - 2
        best_gap_base = neg
        best_gap_k = -1
        for j in range(i, n):
            k = j - 2
            if k >= 0 and prev_row[k] != neg:
                candidate = prev_row[k] - SCORE_GAP_EXTENSION * k
                if candidate > best_gap_base:
                    best_gap_base = candidate
                    best_gap_k = k
            if text[j] != pattern[i]:
                continue

            bonus = bonuses[j]
            best = neg
            if prev_row[j - 1] != neg:
                run_bonus = bonus if bonus >= BONUS_BOUNDARY else run[i - 1][j - 1]
                consecutive = prev_row[j - 1] + SCORE_MATCH + max(
                    run_bonus, BONUS_CONSECUTIVE, bonus
                )
                best = consecutive
                score[i][j] = consecutive
                run[i][j] = max(run_bonus, BONUS_CONSECUTIVE)
                back[i][j] = j - 1
            if best_gap_base != neg:
                gapped = (
                    best_gap_base
                    + SCORE_GAP_EXTENSION * (j - 2)
                    + SCORE_GAP_START
                    + SCORE_MATCH
                    + bonus
                )
                if gapped > best:
                    score[i][j] = gapped
                    run[i][j] = bonus
                    back[i][j] = best_gap_k

    last = score[m - 1]
    end = -1
    for j in range(n):
        if last[j] != neg and (end == -1 or last[j] > last[end]):
            end = j
    if end == -1:
        return None

    positions = [end]
    for i in range(m - 1, 0, -1):
        positions.append(back[i][positions[-1]])
    positions.reverse()
    return FuzzyMatch(score=int(last[end]), positions=tuple(positions), exact=False)


def fuzzy_match(text: str, query: str) -> FuzzyMatch | None:
    """Case-insensitive fuzzy match of query against text, or None."""
    pattern = query.strip().lower()
    if not pattern:
        return None
    lowered = text.lower()
    if not _is_subsequence(lowered, pattern):
        return None

    # Bonuses use the unlowered text so camelCase humps count
    bonuses = _position_bonuses(text)
    exact = _match_exact(lowered, pattern, bonuses)
    if exact is not None:
        return exact
    return _match_fuzzy(lowered, pattern, bonuses)


def merge_positions(positions: Sequence[int]) -> tuple[tuple[int, int], ...]:
    """Merge character positions into ``(start, end_exclusive)`` ranges.

    Ranges separated by at most one character are joined so highlighting
    does not fragment.
    """
    merged: list[list[int]] = []
    for pos in sorted(positions):
        if merged and merged[-1][1] >= pos - 1:
            merged[-1][1] = max(merged[-1][1], pos + 1)
        else:
            merged.append([pos, pos + 1])
    return tuple((start, end) for start, end in merged)


class FuzzySearchEngine:
    """Searches the current route list by full path.

    The engine keeps its own snapshot; it reflects a new route list only after
    ``update_index`` is called.
    """

    def __init__(self, routes: Sequence[RouteDescriptor] = ()) -> None:
        self._routes: tuple[RouteDescriptor, ...] = ()
        self.update_index(routes)

    @property
    def routes(self) -> tuple[RouteDescriptor, ...]:
        return self._routes

    def update_index(self, routes: Sequence[RouteDescriptor]) -> None:
        self._routes = tuple(routes)
        logger.debug("search_index_updated", routes=len(self._routes))

    def search(self, query: str) -> list[MatchedRoute]:
        """Return matching routes, best first.

        A blank query returns every route, unranked, without highlights.
        """
        if not query.strip():
            return [MatchedRoute(route=route) for route in self._routes]

        scored: list[tuple[FuzzyMatch, int, RouteDescriptor]] = []
        for index, route in enumerate(self._routes):
            match = fuzzy_match(route.full_path, query)
            if match is not None:
                scored.append((match, index, route))

        scored.sort(key=lambda item: (not item[0].exact, -item[0].score, item[1]))
        results = [
            MatchedRoute(
                route=route,
                highlight_spans=(
                    HighlightSpan(
                        field_key=FULL_PATH_KEY,
                        ranges=merge_positions(match.positions),
                        positions=match.positions,
                    ),
                ),
                score=match.score,
            )
            for match, _, route in scored
        ]
        logger.debug("search_completed", query=query, matches=len(results))
        return results
