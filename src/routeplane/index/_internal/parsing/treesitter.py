"""Tree-sitter parsing of TypeScript sources.

Grammars come from the ``tree_sitter_typescript`` bundle, which ships two
dialects behind non-standard language functions: ``language_typescript`` and
``language_tsx``. Each grammar is loaded once and cached on the parser.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tree_sitter

# language name -> (grammar module, language function)
_GRAMMARS: dict[str, tuple[str, str]] = {
    "typescript": ("tree_sitter_typescript", "language_typescript"),
    "tsx": ("tree_sitter_typescript", "language_tsx"),
}

_EXTENSIONS: dict[str, str] = {
    "ts": "typescript",
    "mts": "typescript",
    "cts": "typescript",
    "tsx": "tsx",
}


def detect_language(path: Path) -> str | None:
    """Map a file extension to a grammar name, or None if unsupported."""
    return _EXTENSIONS.get(path.suffix.lower().lstrip("."))


@dataclass
class ParseResult:
    """Result of parsing a file."""

    tree: Any  # Tree-sitter Tree (not serializable)
    language: str
    error_count: int
    total_nodes: int
    root_node: Any  # Tree-sitter Node
    source: bytes = b""


@dataclass
class TreeSitterParser:
    """
    Tree-sitter parser for TypeScript and TSX.

    Usage::

        parser = TreeSitterParser()
        result = parser.parse(Path("src/cats.controller.ts"), content)
        result.root_node  # walk from here
    """

    _parser: Any = field(default=None, repr=False)
    _languages: dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        """Initialize the parser."""
        self._parser = tree_sitter.Parser()
        self._languages = {}

    def _get_language(self, lang_name: str) -> Any:
        """Get or load a Tree-sitter language."""
        if lang_name in self._languages:
            return self._languages[lang_name]

        grammar = _GRAMMARS.get(lang_name)
        if grammar is None:
            raise ValueError(f"Language not available: {lang_name}")

        module_name, func_name = grammar
        try:
            mod = importlib.import_module(module_name)
            lang_fn = getattr(mod, func_name)
        except (ImportError, AttributeError) as err:
            raise ValueError(f"Language not available: {lang_name}") from err

        lang = tree_sitter.Language(lang_fn())
        self._languages[lang_name] = lang
        return lang

    def parse(self, path: Path, content: bytes) -> ParseResult:
        """
        Parse source content with Tree-sitter.

        Args:
            path: Path to file (used for language detection)
            content: File content as UTF-8 bytes.

        Returns:
            ParseResult with tree, language, and error info.

        Raises:
            ValueError: If the extension has no grammar.
        """
        language = detect_language(path)
        if language is None:
            raise ValueError(f"Unsupported file extension: {path.suffix}")

        self._parser.language = self._get_language(language)
        tree = self._parser.parse(content)

        error_count = 0
        total_nodes = 0

        def count_nodes(node: Any) -> None:
            nonlocal error_count, total_nodes
            total_nodes += 1
            if node.type == "ERROR" or node.is_missing:
                error_count += 1
            for child in node.children:
                count_nodes(child)

        count_nodes(tree.root_node)

        return ParseResult(
            tree=tree,
            language=language,
            error_count=error_count,
            total_nodes=total_nodes,
            root_node=tree.root_node,
            source=content,
        )


def node_text(node: Any) -> str:
    """Decode a node's source text."""
    return node.text.decode("utf-8", errors="replace") if node.text else ""


def char_column(source: bytes, node: Any) -> int:
    """0-based character column of a node's start.

    Tree-sitter reports byte columns; editors position by character.
    """
    byte_col = node.start_point[1]
    line_start = node.start_byte - byte_col
    return len(source[line_start : node.start_byte].decode("utf-8", errors="replace"))
