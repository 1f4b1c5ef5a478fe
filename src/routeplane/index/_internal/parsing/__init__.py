"""Tree-sitter parsing for controller extraction."""

from routeplane.index._internal.parsing.markers import MARKERS, Marker, MarkerKind, resolve_marker
from routeplane.index._internal.parsing.paths import combine_paths, extract_path_parameters
from routeplane.index._internal.parsing.sources import (
    OpenDocument,
    OpenDocumentProvider,
    SourceTextResolver,
)
from routeplane.index._internal.parsing.treesitter import ParseResult, TreeSitterParser

__all__ = [
    "TreeSitterParser",
    "ParseResult",
    "MARKERS",
    "Marker",
    "MarkerKind",
    "resolve_marker",
    "combine_paths",
    "extract_path_parameters",
    "OpenDocument",
    "OpenDocumentProvider",
    "SourceTextResolver",
]
