"""Workspace watcher using watchfiles for async filesystem monitoring.

Design:
- One recursive ``awatch`` over all workspace roots
- watchfiles' own debounce batches save storms into one change set
- added -> created, modified -> saved, deleted -> deleted
- Changes to a watched config file are reported separately so the caller
  can reload scan settings instead of invalidating a source file
- Callback errors are logged; the watch loop keeps running
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from watchfiles import Change, awatch

from routeplane.daemon.notifier import FileChangeEvent, FileChangeKind

logger = structlog.get_logger()

_CHANGE_KINDS: dict[Change, FileChangeKind] = {
    Change.added: FileChangeKind.CREATED,
    Change.modified: FileChangeKind.SAVED,
    Change.deleted: FileChangeKind.DELETED,
}


def to_events(changes: Iterable[tuple[Change, str]]) -> list[FileChangeEvent]:
    """Convert a watchfiles change set to events, one per path (last kind wins)."""
    latest: dict[Path, FileChangeKind] = {}
    for change, path_str in sorted(changes, key=lambda c: c[1]):
        latest[Path(path_str).absolute()] = _CHANGE_KINDS[change]
    return [FileChangeEvent(path=path, kind=kind) for path, kind in latest.items()]


@dataclass
class WorkspaceWatcher:
    """
    Async watcher feeding file and config change callbacks.

    Usage::

        watcher = WorkspaceWatcher(
            roots=[Path("/repo")],
            on_files_changed=notifier.handle_events,
            config_files=[Path("/repo/.routeplane/config.yaml")],
            on_config_changed=reload_settings,
        )
        await watcher.start()
        ...
        await watcher.stop()
    """

    roots: Sequence[Path]
    on_files_changed: Callable[[list[FileChangeEvent]], Awaitable[object]]
    config_files: Sequence[Path] = ()
    on_config_changed: Callable[[], Awaitable[object]] | None = None
    debounce_sec: float = 0.5

    _stop_event: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    _watch_task: asyncio.Task[None] | None = field(default=None, init=False)

    @property
    def is_running(self) -> bool:
        return self._watch_task is not None and not self._watch_task.done()

    async def start(self) -> None:
        """Start watching for file changes."""
        if self._watch_task is not None:
            return
        self._stop_event.clear()
        self._watch_task = asyncio.create_task(self._watch_loop())
        logger.info(
            "file_watcher_started",
            roots=[str(r) for r in self.roots],
            debounce_sec=self.debounce_sec,
        )

    async def stop(self) -> None:
        """Stop watching for file changes."""
        self._stop_event.set()
        if self._watch_task is not None:
            self._watch_task.cancel()
            with contextlib.suppress(asyncio.CancelledError, asyncio.TimeoutError):
                await asyncio.wait_for(self._watch_task, timeout=2.0)
            self._watch_task = None
        logger.info("file_watcher_stopped")

    async def wait(self) -> None:
        """Block until the watcher stops."""
        if self._watch_task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._watch_task

    async def _watch_loop(self) -> None:
        roots = [r for r in self.roots if r.is_dir()]
        if not roots:
            logger.warning("no_watchable_dirs", roots=[str(r) for r in self.roots])
            return

        config_files = {p.absolute() for p in self.config_files}
        try:
            async for changes in awatch(
                *roots,
                debounce=int(self.debounce_sec * 1000),
                step=50,
                rust_timeout=10_000,
                stop_event=self._stop_event,
                ignore_permission_denied=True,
            ):
                await self.dispatch(to_events(changes), config_files)
        except asyncio.CancelledError:
            pass

    async def dispatch(
        self, events: list[FileChangeEvent], config_files: set[Path] | None = None
    ) -> None:
        """Route a batch to the config or file callback."""
        config_files = config_files or set()
        file_events = [e for e in events if e.path not in config_files]
        config_touched = len(file_events) != len(events)

        try:
            if config_touched and self.on_config_changed is not None:
                await self.on_config_changed()
            if file_events:
                await self.on_files_changed(file_events)
        except Exception as e:
            logger.error(
                "watch_callback_unexpected_error",
                error=str(e),
                error_type=type(e).__name__,
                paths=[str(ev.path) for ev in events],
                exc_info=True,
            )
