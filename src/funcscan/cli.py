"""Command-line entry points for the scanner."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .config import load_config
from .reporters import render_human, render_json
from .scanner import scan_project

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
PACKAGE_DIR = Path(__file__).resolve().parent


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="funcscan",
        description="List function definitions and eval() calls in a JavaScript project",
    )
    parser.add_argument(
        "project",
        nargs="?",
        default=".",
        help="Project root to scan (defaults to cwd)",
    )
    parser.add_argument(
        "--config",
        help="Path to configuration file (.funcscanrc.json by default)",
    )
    parser.add_argument(
        "--format",
        choices=["human", "json"],
        default="human",
        help="Report format to emit (default: human)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log skipped files and directories to stderr",
    )
    return parser


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)
    project_root = Path(args.project)
    if not project_root.expanduser().is_dir():
        parser.error(f"Project root is not a directory: {project_root}")
    try:
        config = load_config(
            project_root=project_root,
            config_path=Path(args.config) if args.config else None,
        )
    except ValueError as exc:
        parser.error(str(exc))
    result = scan_project(config, exclude=[PACKAGE_DIR])
    renderer = render_json if args.format == "json" else render_human
    print(renderer(result))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
