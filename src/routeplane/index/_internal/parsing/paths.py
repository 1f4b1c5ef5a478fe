"""Route path helpers."""

from __future__ import annotations

import re

_PATH_PARAM_RE = re.compile(r":([A-Za-z_]\w*)")


def combine_paths(base_path: str, route_path: str) -> str:
    """Join a controller base path and a handler path into a full route path.

    The result always starts with ``/``. An empty handler path yields the
    base path itself, never a trailing separator.

    >>> combine_paths("users", "")
    '/users'
    >>> combine_paths("/", "/:id")
    '/:id'
    >>> combine_paths("cats", "friends/:id")
    '/cats/friends/:id'
    """
    base = base_path if base_path.startswith("/") else f"/{base_path}"
    route = route_path if route_path.startswith("/") else f"/{route_path}"

    if route_path == "":
        return base
    return route if base == "/" else f"{base}{route}"


def extract_path_parameters(full_path: str) -> list[str]:
    """Return every ``:token`` name in ``full_path``, in order, duplicates kept."""
    return _PATH_PARAM_RE.findall(full_path)
