"""Per-file controller descriptor cache.

The cache maps an absolute file path to the controller parsed from it. An
entry is replaced wholesale on every successful re-parse and removed on
invalidation; files without a controller have no entry. Entries never refer
to one another.

Mutation happens only through ``get_or_parse``, ``invalidate`` and
``dispose``, all on the caller's thread. Callers on a parallel runtime must
serialize access themselves.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from types import MappingProxyType

import structlog

from routeplane.core.errors import ScanError
from routeplane.index._internal.discovery import enumerate_files
from routeplane.index.models import ControllerDescriptor, RouteDescriptor, ScanResult
from routeplane.index.parser import SourceParser

logger = structlog.get_logger()


class FileIndex:
    """Caches parsed controllers and enumerates workspace files by glob."""

    def __init__(self, parser: SourceParser | None = None) -> None:
        self._parser = parser or SourceParser()
        self._cache: dict[str, ControllerDescriptor] = {}

    @property
    def cached_paths(self) -> Mapping[str, ControllerDescriptor]:
        """Read-only view of the cache."""
        return MappingProxyType(self._cache)

    def scan_workspace(
        self,
        root_folders: Sequence[Path | str],
        include_globs: Sequence[str],
        exclude_globs: Sequence[str],
    ) -> ScanResult:
        """Parse every eligible file under the roots, using cached results.

        Results follow file enumeration order. A missing root or a failing
        file contributes nothing; the scan always completes.
        """
        controllers: list[ControllerDescriptor] = []
        routes: list[RouteDescriptor] = []

        for folder in root_folders:
            root = Path(folder)
            if not root.is_dir():
                err = ScanError.root_missing(str(root))
                logger.warning("scan_root_skipped", root=str(root), error=err.error_name)
                continue

            files = enumerate_files(root, include_globs, exclude_globs)
            logger.debug(
                "scan_root_enumerated",
                root=str(root),
                files=len(files),
                include=list(include_globs),
                exclude=list(exclude_globs),
            )

            for file_path in files:
                controller = self._scan_file(str(file_path.absolute()))
                if controller is not None:
                    controllers.append(controller)
                    routes.extend(controller.routes)

        logger.info("workspace_scanned", controllers=len(controllers), routes=len(routes))
        return ScanResult(controllers=tuple(controllers), routes=tuple(routes))

    def _scan_file(self, file_path: str) -> ControllerDescriptor | None:
        try:
            return self.get_or_parse(file_path)
        except OSError as e:
            # The parser already recovers; this guards cache bookkeeping only
            err = ScanError.file_failed(file_path, str(e))
            logger.warning("scan_file_failed", path=file_path, error=err.error_name, reason=str(e))
            return None

    def get_or_parse(
        self, file_path: str, force_refresh: bool = False
    ) -> ControllerDescriptor | None:
        """Return the cached descriptor, or parse and cache the file."""
        if not force_refresh:
            cached = self._cache.get(file_path)
            if cached is not None:
                logger.debug("cache_hit", path=file_path)
                return cached

        self.invalidate(file_path)
        controller = self._parser.parse_path(file_path)
        if controller is not None:
            self._cache[file_path] = controller
        return controller

    def invalidate(self, file_path: str) -> None:
        """Drop the cache entry for a path. Idempotent."""
        if self._cache.pop(file_path, None) is not None:
            logger.debug("cache_invalidated", path=file_path)

    def dispose(self) -> None:
        """Clear the whole cache."""
        self._cache.clear()
