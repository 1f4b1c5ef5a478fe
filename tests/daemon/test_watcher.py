"""Tests for the watchfiles-based workspace watcher.

Tests cover:
- to_events() change conversion
- dispatch() routing between file and config callbacks
- start/stop lifecycle
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from watchfiles import Change

from routeplane.daemon import FileChangeEvent, FileChangeKind, WorkspaceWatcher, to_events


class Recorder:
    def __init__(self) -> None:
        self.file_batches: list[list[FileChangeEvent]] = []
        self.config_changes = 0

    async def on_files(self, events: list[FileChangeEvent]) -> None:
        self.file_batches.append(events)

    async def on_config(self) -> None:
        self.config_changes += 1


class TestToEvents:
    """to_events() tests."""

    def test_maps_change_kinds(self, tmp_path: Path) -> None:
        events = to_events(
            [
                (Change.added, str(tmp_path / "a.ts")),
                (Change.modified, str(tmp_path / "b.ts")),
                (Change.deleted, str(tmp_path / "c.ts")),
            ]
        )

        assert [(e.path.name, e.kind) for e in events] == [
            ("a.ts", FileChangeKind.CREATED),
            ("b.ts", FileChangeKind.SAVED),
            ("c.ts", FileChangeKind.DELETED),
        ]

    def test_one_event_per_path(self, tmp_path: Path) -> None:
        path = str(tmp_path / "a.ts")
        events = to_events([(Change.added, path), (Change.added, path)])
        assert len(events) == 1

    def test_paths_are_absolute(self) -> None:
        (event,) = to_events([(Change.modified, "relative.ts")])
        assert event.path.is_absolute()


class TestDispatch:
    """dispatch() tests."""

    @pytest.fixture
    def recorder(self) -> Recorder:
        return Recorder()

    @pytest.fixture
    def watcher(self, tmp_path: Path, recorder: Recorder) -> WorkspaceWatcher:
        return WorkspaceWatcher(
            roots=[tmp_path],
            on_files_changed=recorder.on_files,
            on_config_changed=recorder.on_config,
        )

    @pytest.mark.asyncio
    async def test_file_events_go_to_file_callback(
        self, watcher: WorkspaceWatcher, recorder: Recorder, tmp_path: Path
    ) -> None:
        event = FileChangeEvent(tmp_path / "a.controller.ts", FileChangeKind.SAVED)

        await watcher.dispatch([event])

        assert recorder.file_batches == [[event]]
        assert recorder.config_changes == 0

    @pytest.mark.asyncio
    async def test_config_events_go_to_config_callback(
        self, watcher: WorkspaceWatcher, recorder: Recorder, tmp_path: Path
    ) -> None:
        config = tmp_path / ".routeplane" / "config.yaml"
        source = FileChangeEvent(tmp_path / "a.controller.ts", FileChangeKind.SAVED)

        await watcher.dispatch(
            [FileChangeEvent(config, FileChangeKind.SAVED), source], {config}
        )

        assert recorder.config_changes == 1
        assert recorder.file_batches == [[source]]

    @pytest.mark.asyncio
    async def test_callback_errors_are_contained(self, tmp_path: Path) -> None:
        async def boom(_events: list[FileChangeEvent]) -> None:
            raise RuntimeError("callback failure")

        watcher = WorkspaceWatcher(roots=[tmp_path], on_files_changed=boom)

        await watcher.dispatch([FileChangeEvent(tmp_path / "a.ts", FileChangeKind.SAVED)])


class TestLifecycle:
    """start()/stop() tests."""

    @pytest.mark.asyncio
    async def test_start_and_stop(self, tmp_path: Path) -> None:
        recorder = Recorder()
        watcher = WorkspaceWatcher(roots=[tmp_path], on_files_changed=recorder.on_files)

        await watcher.start()
        assert watcher.is_running
        await asyncio.sleep(0.05)
        await watcher.stop()

        assert not watcher.is_running

    @pytest.mark.asyncio
    async def test_missing_roots_finish_immediately(self, tmp_path: Path) -> None:
        recorder = Recorder()
        watcher = WorkspaceWatcher(roots=[tmp_path / "missing"], on_files_changed=recorder.on_files)

        await watcher.start()
        await asyncio.wait_for(watcher.wait(), timeout=1.0)
        await watcher.stop()
