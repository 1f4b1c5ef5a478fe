"""Index module - controller discovery and the route snapshot.

This module provides:
- SourceParser: tree-sitter extraction of decorated controllers and routes
- FileIndex: per-file descriptor cache and glob-driven workspace scans
- RouteIndexStore: flattened route snapshot with change notification

Internal implementations are in `routeplane.index._internal/`.
"""

from routeplane.index._internal.parsing.paths import combine_paths, extract_path_parameters
from routeplane.index.file_index import FileIndex
from routeplane.index.models import (
    ControllerDescriptor,
    DisplayMode,
    GroupedResult,
    HighlightSpan,
    MatchedRoute,
    ParameterKind,
    RouteDescriptor,
    RouteParameter,
    ScanResult,
    SearchResult,
    ViewState,
)
from routeplane.index.parser import SourceParser
from routeplane.index.store import RouteIndexStore, ScanSettings

__all__ = [
    # Components
    "SourceParser",
    "FileIndex",
    "RouteIndexStore",
    "ScanSettings",
    # Helpers
    "combine_paths",
    "extract_path_parameters",
    # Enums
    "ParameterKind",
    "DisplayMode",
    # Models
    "RouteParameter",
    "RouteDescriptor",
    "ControllerDescriptor",
    "ScanResult",
    "HighlightSpan",
    "MatchedRoute",
    "GroupedResult",
    "SearchResult",
    "ViewState",
]
