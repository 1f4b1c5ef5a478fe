"""Change notification: file events and config reloads drive index refreshes."""

from routeplane.daemon.notifier import ChangeNotifier, FileChangeEvent, FileChangeKind
from routeplane.daemon.watcher import WorkspaceWatcher, to_events

__all__ = [
    "ChangeNotifier",
    "FileChangeEvent",
    "FileChangeKind",
    "WorkspaceWatcher",
    "to_events",
]
