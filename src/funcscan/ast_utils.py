"""Shared helpers for locating, parsing and walking JavaScript sources."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple

from tree_sitter import Language, Parser
from tree_sitter_javascript import language as javascript_language
from tree_sitter_typescript import language_tsx, language_typescript

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".js", ".mjs", ".cjs", ".jsx", ".ts", ".mts", ".cts", ".tsx"}
DEFAULT_EXTENSIONS = {".js", ".mjs", ".cjs"}
DEFAULT_EXCLUDED_DIRS = {
    "node_modules",
    "dist",
    "build",
    ".git",
    "vendor",
    ".next",
    "coverage",
    "out",
}

_JS_LANGUAGE = Language(javascript_language())
_TS_LANGUAGE = Language(language_typescript())
_TSX_LANGUAGE = Language(language_tsx())

JS_PARSER = Parser()
JS_PARSER.language = _JS_LANGUAGE
TS_PARSER = Parser()
TS_PARSER.language = _TS_LANGUAGE
TSX_PARSER = Parser()
TSX_PARSER.language = _TSX_LANGUAGE


def node_text(node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def identifier_name(node, source: bytes) -> str | None:
    if node is None:
        return None
    if node.type in {"identifier", "property_identifier"}:
        return node_text(node, source)
    return None


def unwrap_parenthesized(node):
    while node is not None and node.type == "parenthesized_expression":
        inner = node.named_children
        if len(inner) != 1:
            return node
        node = inner[0]
    return node


def source_position(node, source: bytes) -> Tuple[int, int]:
    """Return the 1-based ``(line, column)`` where ``node`` starts.

    tree-sitter reports columns in bytes; the column returned here counts
    characters so that non-ASCII text earlier on the line does not shift it.
    """

    row, byte_column = node.start_point
    line_start = node.start_byte - byte_column
    prefix = source[line_start : node.start_byte].decode("utf-8", errors="ignore")
    return row + 1, len(prefix) + 1


def walk(node) -> Iterator:
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def parsers_for_extension(ext: str) -> List[Parser]:
    """Primary grammar first, then the single fallback grammar."""

    if ext in {".ts", ".mts", ".cts"}:
        return [TS_PARSER, TSX_PARSER]
    if ext == ".tsx":
        return [TSX_PARSER, TS_PARSER]
    if ext in {".js", ".mjs", ".cjs", ".jsx"}:
        return [JS_PARSER, TSX_PARSER]
    return []


def parse_source(source: bytes, ext: str):
    """Parse ``source`` and return a clean tree, or ``None`` when every grammar fails."""

    for parser in parsers_for_extension(ext):
        tree = parser.parse(source)
        if not tree.root_node.has_error:
            return tree
    return None


def _is_within(path: Path, excluded: Iterable[Path]) -> bool:
    for candidate in excluded:
        if path == candidate or candidate in path.parents:
            return True
    return False


def iter_source_files(
    root: Path,
    extensions: Iterable[str] | None = None,
    excluded_dirs: Iterable[str] | None = None,
    exclude: Iterable[Path] = (),
) -> Iterator[Path]:
    """Yield candidate files under ``root``, pruning excluded directory names."""

    extensions = set(DEFAULT_EXTENSIONS if extensions is None else extensions)
    skip_dirs = set(DEFAULT_EXCLUDED_DIRS if excluded_dirs is None else excluded_dirs)
    excluded = [Path(item).resolve() for item in exclude]

    def _on_error(exc: OSError) -> None:
        logger.debug("Skipping unreadable directory %s: %s", exc.filename, exc.strerror)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        current = Path(dirpath)
        dirnames[:] = sorted(
            name
            for name in dirnames
            if name not in skip_dirs and not _is_within((current / name).resolve(), excluded)
        )
        for name in sorted(filenames):
            path = current / name
            if path.suffix.lower() not in extensions:
                continue
            if excluded and _is_within(path.resolve(), excluded):
                continue
            yield path
