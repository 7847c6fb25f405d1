"""Report renderers for the CLI output."""

from __future__ import annotations

import io
import json
from typing import Iterable, List, Tuple

from rich import box
from rich.console import Console
from rich.rule import Rule
from rich.table import Table

from .scanner import ScanResult

NO_FUNCTIONS_MESSAGE = "No functions found (or all files failed to parse)."
NO_SINKS_MESSAGE = "No sink calls found."
RENDER_WIDTH = 240
BANNER_WIDTH = 80
BANNER_TITLE = "funcscan: functions and eval() calls"


def render_json(result: ScanResult) -> str:
    return json.dumps(result.to_dict(), indent=2)


def _findings_table(title: str, label_header: str, rows: Iterable[Tuple[str, str, int, int]]) -> Table:
    table = Table(title=title, box=box.SQUARE, title_justify="left")
    table.add_column(label_header, no_wrap=True)
    table.add_column("Location", no_wrap=True)
    table.add_column("Line", justify="right", no_wrap=True)
    table.add_column("Column", justify="right", no_wrap=True)
    for label, location, line, column in rows:
        table.add_row(label, location, str(line), str(column))
    return table


def render_human(result: ScanResult) -> str:
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=RENDER_WIDTH,
        color_system=None,
        highlight=False,
        emoji=False,
        markup=False,
    )
    console.print(Rule(BANNER_TITLE), width=BANNER_WIDTH)
    console.print(f"Project: {result.project_root}")
    console.print()
    if result.functions:
        rows: List[Tuple[str, str, int, int]] = [
            (finding.name, finding.location, finding.line, finding.column)
            for finding in result.functions
        ]
        console.print(_findings_table("Functions", "Function Name", rows))
    else:
        console.print(NO_FUNCTIONS_MESSAGE)
    console.print()
    if result.sinks:
        rows = [
            (finding.kind, finding.location, finding.line, finding.column)
            for finding in result.sinks
        ]
        console.print(_findings_table("Sink Calls", "Sink", rows))
    else:
        console.print(NO_SINKS_MESSAGE)
    return buffer.getvalue().rstrip("\n")
