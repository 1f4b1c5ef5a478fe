"""File and configuration change handling.

Translates create/delete/save events into cache invalidation followed by a
single store refresh. Refreshes are serialized: triggers that arrive while a
refresh is pending or running coalesce into one follow-up refresh.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import structlog

from routeplane.index.store import RouteIndexStore, ScanSettings

logger = structlog.get_logger()


class FileChangeKind(Enum):
    """Kind of file change reported by the host."""

    CREATED = "created"
    DELETED = "deleted"
    SAVED = "saved"


@dataclass(frozen=True)
class FileChangeEvent:
    """A file change event, identified by absolute path."""

    path: Path
    kind: FileChangeKind


class ChangeNotifier:
    """Keeps a ``RouteIndexStore`` fresh under file-system mutation."""

    def __init__(self, store: RouteIndexStore) -> None:
        self._store = store
        self._matcher = store.settings.matcher()
        self._lock = asyncio.Lock()
        self._refresh_pending = False
        self._refresh_count = 0

    @property
    def refresh_count(self) -> int:
        """Number of refreshes performed (for diagnostics)."""
        return self._refresh_count

    def is_eligible(self, path: Path | str) -> bool:
        return self._matcher.is_eligible(path)

    async def handle_events(self, events: Sequence[FileChangeEvent]) -> bool:
        """Invalidate affected cache entries and refresh once if any were eligible.

        Returns:
            True if a refresh was triggered.
        """
        eligible = [e for e in events if self.is_eligible(e.path)]
        if not eligible:
            logger.debug("changes_ignored", count=len(events))
            return False

        for event in eligible:
            # A created file has no cache entry yet
            if event.kind in (FileChangeKind.DELETED, FileChangeKind.SAVED):
                self._store.file_index.invalidate(str(Path(event.path).absolute()))

        logger.info(
            "changes_detected",
            count=len(eligible),
            kinds=sorted({e.kind.value for e in eligible}),
        )
        await self.request_refresh()
        return True

    async def handle_config_change(self, settings: ScanSettings) -> None:
        """Apply new scan settings, drop the cache and rescan."""
        self._store.update_settings(settings)
        self._matcher = settings.matcher()
        self._store.file_index.dispose()
        logger.info(
            "scan_settings_changed",
            roots=[str(r) for r in settings.root_folders],
            include=list(settings.include_globs),
            exclude=list(settings.exclude_globs),
        )
        await self.request_refresh()

    async def request_refresh(self) -> None:
        """Refresh the store, coalescing concurrent requests."""
        self._refresh_pending = True
        if self._lock.locked():
            return

        async with self._lock:
            while self._refresh_pending:
                # Let queued handlers run first so their triggers coalesce
                await asyncio.sleep(0)
                self._refresh_pending = False
                try:
                    self._store.refresh()
                except Exception as e:
                    # The next trigger retries
                    logger.error(
                        "refresh_failed",
                        error=str(e),
                        error_type=type(e).__name__,
                        exc_info=True,
                    )
                self._refresh_count += 1
