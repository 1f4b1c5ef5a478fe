"""Workspace file discovery."""

from routeplane.index._internal.discovery.patterns import (
    HARDCODED_DIRS,
    FilePatternMatcher,
    enumerate_files,
    matches_glob,
)

__all__ = [
    "HARDCODED_DIRS",
    "FilePatternMatcher",
    "enumerate_files",
    "matches_glob",
]
