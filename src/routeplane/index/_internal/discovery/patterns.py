"""Glob include/exclude matching and workspace file enumeration.

Patterns are matched against POSIX paths relative to a workspace root, one
path segment at a time: ``*`` and ``?`` stay inside a segment and a ``**``
segment matches zero or more segments, so ``**/*.controller.ts`` matches both
``cats.controller.ts`` and ``src/cats/cats.controller.ts`` while ``src/*.ts``
matches only direct children of ``src``.
"""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Iterator, Sequence
from pathlib import Path

# Never descended into, regardless of exclude patterns
HARDCODED_DIRS: frozenset[str] = frozenset({".git", ".svn", ".hg", ".bzr", ".routeplane"})


def _match_segments(parts: Sequence[str], segments: Sequence[str]) -> bool:
    if not segments:
        return not parts
    head, rest = segments[0], segments[1:]
    if head == "**":
        return any(_match_segments(parts[i:], rest) for i in range(len(parts) + 1))
    return bool(parts) and fnmatch.fnmatch(parts[0], head) and _match_segments(parts[1:], rest)


def matches_glob(rel_path: str, pattern: str) -> bool:
    """Check if a path matches a glob pattern, with ** support.

    A trailing ``/`` on ``rel_path`` marks a directory and is ignored, so
    ``node_modules/`` matches ``**/node_modules/**``.
    """
    parts = [p for p in rel_path.split("/") if p]
    segments = [s for s in pattern.split("/") if s]
    return _match_segments(parts, segments)


def matches_any(rel_path: str, patterns: Sequence[str]) -> bool:
    return any(matches_glob(rel_path, p) for p in patterns)


def _walk_with_pruning(root: Path, exclude_globs: Sequence[str]) -> Iterator[str]:
    """Yield relative POSIX paths of all files under root, sorted per directory.

    Directories matched by an exclude glob are pruned (``node_modules/`` is
    tested as ``node_modules/`` so ``**/node_modules/**`` prunes it).
    """
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        rel_dir = "" if rel_dir == "." else rel_dir
        dirnames[:] = sorted(
            d
            for d in dirnames
            if d not in HARDCODED_DIRS
            and not matches_any(f"{rel_dir}/{d}/" if rel_dir else f"{d}/", exclude_globs)
        )
        for filename in sorted(filenames):
            yield f"{rel_dir}/{filename}" if rel_dir else filename


def enumerate_files(
    root: Path,
    include_globs: Sequence[str],
    exclude_globs: Sequence[str],
) -> list[Path]:
    """Evaluate each include glob under root, minus excludes, de-duplicated.

    Order follows include-glob order, then walk order; a file matched by
    several include globs keeps its first position.
    """
    if not include_globs or not root.is_dir():
        return []

    rel_files = [
        rel for rel in _walk_with_pruning(root, exclude_globs) if not matches_any(rel, exclude_globs)
    ]
    seen: set[str] = set()
    ordered: list[Path] = []
    for pattern in include_globs:
        for rel in rel_files:
            if rel not in seen and matches_glob(rel, pattern):
                seen.add(rel)
                ordered.append(root / rel)
    return ordered


class FilePatternMatcher:
    """Decides whether a path is eligible for scanning.

    Eligible means: under one of the roots, matching an include glob and no
    exclude glob.
    """

    def __init__(
        self,
        roots: Sequence[Path],
        include_globs: Sequence[str],
        exclude_globs: Sequence[str],
    ) -> None:
        self._roots = [Path(r) for r in roots]
        self._include = list(include_globs)
        self._exclude = list(exclude_globs)

    def is_eligible(self, path: Path | str) -> bool:
        path = Path(path)
        for root in self._roots:
            try:
                rel = path.relative_to(root).as_posix()
            except ValueError:
                continue
            if any(part in HARDCODED_DIRS for part in Path(rel).parts):
                return False
            if matches_any(rel, self._exclude):
                return False
            return matches_any(rel, self._include)
        return False
