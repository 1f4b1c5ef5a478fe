"""Route index data models.

Descriptors produced by the parser are frozen: a file's routes are replaced
wholesale on every re-parse, never mutated in place. Search and grouping
results are ephemeral and recomputed per query.

``to_dict()`` on the outbound models produces the camelCase payload consumed
by the UI layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ParameterKind(Enum):
    """Where a handler parameter is bound from."""

    PATH = "path"
    QUERY = "query"
    BODY = "body"


class DisplayMode(Enum):
    """How the UI lays out search results."""

    FLAT = "flat"
    GROUPED = "grouped"


@dataclass(frozen=True, slots=True)
class RouteParameter:
    """A handler parameter classified by its binding decorator."""

    name: str
    kind: ParameterKind
    declared_type: str | None = None  # Raw annotation source text
    optional: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "declaredType": self.declared_type,
            "optional": self.optional,
        }


@dataclass(frozen=True, slots=True)
class RouteDescriptor:
    """One HTTP method + path combination exposed by a handler method."""

    http_method: str  # Upper-case verb
    declared_path: str
    full_path: str  # Always starts with "/"
    source_file: str
    line: int  # 1-based, of the handler name token
    column: int  # 0-based, of the handler name token
    owner_name: str
    handler_name: str
    parameters: tuple[RouteParameter, ...] = ()
    path_parameters: tuple[str, ...] = ()

    @property
    def identity(self) -> str:
        """Identity string used for route-set change detection."""
        return f"{self.http_method} {self.full_path}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "httpMethod": self.http_method,
            "declaredPath": self.declared_path,
            "fullPath": self.full_path,
            "sourceFile": self.source_file,
            "line": self.line,
            "column": self.column,
            "ownerName": self.owner_name,
            "handlerName": self.handler_name,
            "parameters": [p.to_dict() for p in self.parameters],
            "pathParameters": list(self.path_parameters),
        }


@dataclass(frozen=True, slots=True)
class ControllerDescriptor:
    """A decorated controller class and the routes it declares."""

    name: str
    base_path: str
    source_file: str
    routes: tuple[RouteDescriptor, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "basePath": self.base_path,
            "sourceFile": self.source_file,
            "routes": [r.to_dict() for r in self.routes],
        }


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Aggregate of a workspace scan, in file enumeration order."""

    controllers: tuple[ControllerDescriptor, ...] = ()
    routes: tuple[RouteDescriptor, ...] = ()


@dataclass(frozen=True, slots=True)
class HighlightSpan:
    """Highlighted character ranges within one field of a route.

    ``positions`` are the matched characters; ``ranges`` merges them for
    display and may also cover the one-character gaps between them.
    """

    field_key: str
    ranges: tuple[tuple[int, int], ...]  # (start, end_exclusive)
    positions: tuple[int, ...] = ()

    @property
    def matched_count(self) -> int:
        return len(self.positions)

    def to_dict(self) -> dict[str, Any]:
        return {"fieldKey": self.field_key, "ranges": [list(r) for r in self.ranges]}


@dataclass(frozen=True, slots=True)
class MatchedRoute:
    """A route that matched a query, with highlight information."""

    route: RouteDescriptor
    highlight_spans: tuple[HighlightSpan, ...] = ()
    score: int = 0

    @property
    def matched_count(self) -> int:
        return sum(span.matched_count for span in self.highlight_spans)

    def to_dict(self) -> dict[str, Any]:
        return {
            "route": self.route.to_dict(),
            "highlightSpans": [s.to_dict() for s in self.highlight_spans],
            "score": self.score,
        }


@dataclass(frozen=True, slots=True)
class GroupedResult:
    """Matches for one owning controller."""

    owner_name: str
    base_path: str
    source_file: str
    matched_routes: tuple[MatchedRoute, ...]
    total_routes_in_owner: int
    is_expanded: bool
    match_score: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "ownerName": self.owner_name,
            "basePath": self.base_path,
            "sourceFile": self.source_file,
            "matchedRoutes": [m.to_dict() for m in self.matched_routes],
            "totalRoutesInOwner": self.total_routes_in_owner,
            "isExpanded": self.is_expanded,
            "matchScore": self.match_score,
        }


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Everything the UI needs to render one search."""

    grouped: tuple[GroupedResult, ...]
    flat: tuple[MatchedRoute, ...]
    display_mode: DisplayMode
    total_matches: int
    total_endpoints: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "grouped": [g.to_dict() for g in self.grouped],
            "flat": [m.to_dict() for m in self.flat],
            "displayMode": self.display_mode.value,
            "totalMatches": self.total_matches,
            "totalEndpoints": self.total_endpoints,
        }


@dataclass(frozen=True, slots=True)
class ViewState:
    """Snapshot of the search session's view state."""

    display_mode: DisplayMode = DisplayMode.FLAT
    expanded_owners: tuple[str, ...] = field(default_factory=tuple)
    focused_owner: str | None = None
    search_query: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "displayMode": self.display_mode.value,
            "expandedOwners": list(self.expanded_owners),
            "focusedOwner": self.focused_owner,
            "searchQuery": self.search_query,
        }
