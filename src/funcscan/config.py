"""Configuration loading helpers for the scanner."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable

from .ast_utils import DEFAULT_EXCLUDED_DIRS, DEFAULT_EXTENSIONS, SUPPORTED_EXTENSIONS
from .sink_detection import CALL_IDENTIFIER_RULES

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".funcscanrc.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    "exclude_dirs": sorted(DEFAULT_EXCLUDED_DIRS),
    "extensions": sorted(DEFAULT_EXTENSIONS),
    "sinks": dict(CALL_IDENTIFIER_RULES),
}


@dataclass(slots=True)
class ScannerConfig:
    """Represents the flattened scanner configuration."""

    project_root: Path
    exclude_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_CONFIG["exclude_dirs"]))
    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_CONFIG["extensions"]))
    sinks: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_CONFIG["sinks"]))


def _merge(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    merged = {**base}
    for key, value in updates.items():
        if (
            isinstance(value, dict)
            and isinstance(merged.get(key), dict)
        ):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_json_file(path: Path) -> Dict[str, Any]:
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc


def _config_sources(project_root: Path, user_config: Path | None) -> Iterable[Path]:
    default_file = project_root / CONFIG_FILENAME
    if default_file.exists():
        yield default_file
    if user_config is not None:
        user_file = user_config
        if not user_file.is_absolute():
            user_file = project_root / user_file
        if user_file.exists():
            yield user_file


def _normalize_extension(ext: str) -> str:
    ext = str(ext).strip().lower()
    if ext and not ext.startswith("."):
        ext = f".{ext}"
    return ext


def load_config(
    project_root: Path,
    config_path: Path | None = None,
    overrides: Dict[str, Any] | None = None,
) -> ScannerConfig:
    """Load configuration from defaults, files, and explicit overrides."""

    root = project_root.expanduser().resolve()
    config_data: Dict[str, Any] = {**DEFAULT_CONFIG}
    for path in _config_sources(root, config_path):
        config_data = _merge(config_data, _read_json_file(path))
    if overrides:
        config_data = _merge(config_data, overrides)
    extensions = [_normalize_extension(ext) for ext in config_data.get("extensions", [])]
    unsupported = sorted({ext for ext in extensions if ext and ext not in SUPPORTED_EXTENSIONS})
    if unsupported:
        logger.warning("Ignoring extensions without a grammar: %s", ", ".join(unsupported))
    return ScannerConfig(
        project_root=root,
        exclude_dirs=[str(name) for name in config_data.get("exclude_dirs", [])],
        extensions=[ext for ext in extensions if ext in SUPPORTED_EXTENSIONS],
        sinks={str(name): str(label) for name, label in dict(config_data.get("sinks", {})).items()},
    )
