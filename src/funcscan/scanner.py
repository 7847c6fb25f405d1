"""Per-file detection pass and the cross-file aggregation step."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .ast_utils import iter_source_files, parse_source, walk
from .config import ScannerConfig
from .function_detection import FunctionFinding, detect_function
from .sink_detection import SinkFinding, detect_sink

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FileScan:
    """Findings produced by one file's traversal, in traversal order."""

    path: str
    functions: Tuple[FunctionFinding, ...] = ()
    sinks: Tuple[SinkFinding, ...] = ()


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Deduplicated, totally ordered findings for a whole run."""

    project_root: Path
    functions: Tuple[FunctionFinding, ...] = ()
    sinks: Tuple[SinkFinding, ...] = ()
    skipped: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, object]:
        return {
            "projectRoot": str(self.project_root),
            "functions": [finding.to_dict() for finding in self.functions],
            "sinks": [finding.to_dict() for finding in self.sinks],
            "parseFailures": list(self.skipped),
        }


def relative_path(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def detect(
    relative: str,
    tree,
    source: bytes,
    sink_rules: Mapping[str, str] | None = None,
) -> FileScan:
    """Walk ``tree`` once, collecting function definitions and sink calls."""

    functions: List[FunctionFinding] = []
    sinks: List[SinkFinding] = []
    seen_functions = set()
    seen_sinks = set()
    for node in walk(tree.root_node):
        function = detect_function(relative, node, source)
        if function is not None and function.key not in seen_functions:
            seen_functions.add(function.key)
            functions.append(function)
            continue
        sink = detect_sink(relative, node, source, sink_rules)
        if sink is not None and sink.key not in seen_sinks:
            seen_sinks.add(sink.key)
            sinks.append(sink)
    return FileScan(path=relative, functions=tuple(functions), sinks=tuple(sinks))


def scan_file(
    path: Path,
    root: Path,
    sink_rules: Mapping[str, str] | None = None,
) -> Optional[FileScan]:
    """Read, parse and scan one file; ``None`` means the file was skipped."""

    relative = relative_path(path, root)
    try:
        source_bytes = path.read_bytes()
    except OSError as exc:
        logger.debug("Skipping unreadable file %s: %s", relative, exc)
        return None
    tree = parse_source(source_bytes, path.suffix.lower())
    if tree is None:
        logger.debug("Skipping %s: parse failed in every grammar mode", relative)
        return None
    return detect(relative, tree, source_bytes, sink_rules)


def _dedupe(findings: Iterable, seen: set) -> List:
    unique = []
    for finding in findings:
        if finding.key in seen:
            continue
        seen.add(finding.key)
        unique.append(finding)
    return unique


def aggregate(
    file_scans: Iterable[FileScan],
    project_root: Path,
    skipped: Iterable[str] = (),
) -> ScanResult:
    """Merge per-file results; output order never depends on input order."""

    seen_functions: set = set()
    seen_sinks: set = set()
    functions: List[FunctionFinding] = []
    sinks: List[SinkFinding] = []
    for file_scan in file_scans:
        functions.extend(_dedupe(file_scan.functions, seen_functions))
        sinks.extend(_dedupe(file_scan.sinks, seen_sinks))
    functions.sort(key=lambda finding: finding.key)
    sinks.sort(key=lambda finding: finding.key)
    return ScanResult(
        project_root=project_root,
        functions=tuple(functions),
        sinks=tuple(sinks),
        skipped=tuple(sorted(set(skipped))),
    )


def scan_project(config: ScannerConfig, exclude: Iterable[Path] = ()) -> ScanResult:
    """Scan every candidate file under the configured project root."""

    root = config.project_root.expanduser().resolve()
    if not root.is_dir():
        raise NotADirectoryError(f"Scan root is not a directory: {root}")
    file_scans: List[FileScan] = []
    skipped: List[str] = []
    candidates = iter_source_files(
        root,
        extensions=config.extensions,
        excluded_dirs=config.exclude_dirs,
        exclude=exclude,
    )
    for path in candidates:
        file_scan = scan_file(path, root, config.sinks)
        if file_scan is None:
            skipped.append(relative_path(path, root))
            continue
        file_scans.append(file_scan)
    if skipped:
        logger.info("Skipped %d file(s) that could not be read or parsed", len(skipped))
    return aggregate(file_scans, root, skipped)
