"""Dangerous call (sink) detection leveraging tree-sitter ASTs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

from .ast_utils import identifier_name, node_text, source_position

# Only bare-identifier callees match. ``obj.eval(x)`` and ``window["eval"](x)``
# are left alone on purpose.
CALL_IDENTIFIER_RULES = {
    "eval": "sink.eval.direct",
}


@dataclass(frozen=True, slots=True)
class SinkFinding:
    """Represents one call-site of a flagged operation."""

    kind: str
    path: str
    line: int
    column: int
    snippet: str

    @property
    def key(self) -> Tuple[str, str, int, int]:
        return (self.kind, self.path, self.line, self.column)

    @property
    def location(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"

    def to_dict(self) -> Dict[str, object]:
        return {
            "kind": self.kind,
            "path": self.path,
            "line": self.line,
            "column": self.column,
            "location": self.location,
            "snippet": self.snippet,
        }


def detect_sink(
    path: str,
    node,
    source: bytes,
    rules: Mapping[str, str] | None = None,
) -> SinkFinding | None:
    if node.type != "call_expression":
        return None
    func = node.child_by_field_name("function")
    if func is None or func.type != "identifier":
        return None
    # eval`...` is a tagged template, not a call that evaluates code.
    args = node.child_by_field_name("arguments")
    if args is None or args.type != "arguments":
        return None
    kind = (CALL_IDENTIFIER_RULES if rules is None else rules).get(identifier_name(func, source))
    if not kind:
        return None
    line, column = source_position(node, source)
    return SinkFinding(
        kind=kind,
        path=path,
        line=line,
        column=column,
        snippet=node_text(node, source).strip(),
    )
