"""Source text resolution.

An open editor buffer wins over the file on disk, so a live edit is visible
before it is saved. Closed buffers are ignored.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from routeplane.core.errors import ParseError


class OpenDocument(Protocol):
    """An in-memory editor buffer."""

    @property
    def is_closed(self) -> bool: ...

    def get_text(self) -> str: ...


class OpenDocumentProvider(Protocol):
    """Host editor lookup of open buffers by absolute path."""

    def find(self, path: str) -> OpenDocument | None: ...


class SourceTextResolver:
    """Resolves the current text of a source file."""

    def __init__(self, documents: OpenDocumentProvider | None = None) -> None:
        self._documents = documents

    def read(self, path: str) -> tuple[str, str]:
        """Return ``(text, origin)`` where origin is ``"buffer"`` or ``"disk"``.

        Raises:
            ParseError: If the file cannot be read or decoded.
        """
        if self._documents is not None:
            document = self._documents.find(path)
            if document is not None and not document.is_closed:
                return document.get_text(), "buffer"

        try:
            return Path(path).read_text(encoding="utf-8"), "disk"
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError.unreadable(path, str(e)) from e
