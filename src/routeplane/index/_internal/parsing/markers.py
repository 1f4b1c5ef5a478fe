"""Decorator marker vocabulary.

Markers are resolved once per decorator during tree traversal by looking up
the decorator's identifier text in a closed table. Matching is case-sensitive:
``@Get()`` is a verb marker, ``@get()`` is not.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from routeplane.index.models import ParameterKind


class MarkerKind(Enum):
    """Tag of a recognized marker."""

    CONTROLLER = "controller"
    HTTP_VERB = "http_verb"
    PARAM_SOURCE = "param_source"


@dataclass(frozen=True, slots=True)
class Marker:
    """A recognized decorator identifier.

    ``verb`` is set for HTTP_VERB markers, ``param_kind`` for PARAM_SOURCE.
    """

    kind: MarkerKind
    verb: str | None = None
    param_kind: ParameterKind | None = None


HTTP_VERB_MARKERS: tuple[str, ...] = (
    "Get",
    "Post",
    "Put",
    "Delete",
    "Patch",
    "Head",
    "Options",
    "All",
)

MARKERS: dict[str, Marker] = {
    "Controller": Marker(MarkerKind.CONTROLLER),
    **{name: Marker(MarkerKind.HTTP_VERB, verb=name.upper()) for name in HTTP_VERB_MARKERS},
    "Param": Marker(MarkerKind.PARAM_SOURCE, param_kind=ParameterKind.PATH),
    "Query": Marker(MarkerKind.PARAM_SOURCE, param_kind=ParameterKind.QUERY),
    "Body": Marker(MarkerKind.PARAM_SOURCE, param_kind=ParameterKind.BODY),
}


def resolve_marker(identifier: str | None, kind: MarkerKind | None = None) -> Marker | None:
    """Look up a decorator identifier, optionally requiring a marker kind."""
    if identifier is None:
        return None
    marker = MARKERS.get(identifier)
    if marker is None or (kind is not None and marker.kind is not kind):
        return None
    return marker
