"""Function definition detection over tree-sitter ASTs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from .ast_utils import identifier_name, source_position, unwrap_parenthesized

FUNCTION_VALUE_TYPES = {
    "function",
    "function_expression",
    "generator_function",
    "arrow_function",
}

KIND_DECLARATION = "declaration"
KIND_VARIABLE = "variable"
KIND_METHOD = "method"
KIND_PROPERTY = "property"


@dataclass(frozen=True, slots=True)
class FunctionFinding:
    """A name bound to a function value at one definition site."""

    name: str
    path: str
    line: int
    column: int
    kind: str

    @property
    def key(self) -> Tuple[str, str, int, int]:
        return (self.name, self.path, self.line, self.column)

    @property
    def location(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "path": self.path,
            "line": self.line,
            "column": self.column,
            "kind": self.kind,
            "location": self.location,
        }


def _finding(path: str, name_node, source: bytes, kind: str) -> FunctionFinding | None:
    name = identifier_name(name_node, source)
    if not name:
        return None
    line, column = source_position(name_node, source)
    return FunctionFinding(name=name, path=path, line=line, column=column, kind=kind)


def _is_function_value(node) -> bool:
    value = unwrap_parenthesized(node)
    return value is not None and value.type in FUNCTION_VALUE_TYPES


def _handle_declaration(path: str, node, source: bytes) -> FunctionFinding | None:
    return _finding(path, node.child_by_field_name("name"), source, KIND_DECLARATION)


def _handle_variable_declarator(path: str, node, source: bytes) -> FunctionFinding | None:
    # const foo = function () {}  /  const foo = () => {}
    name_node = node.child_by_field_name("name")
    if name_node is None or name_node.type != "identifier":
        return None
    if not _is_function_value(node.child_by_field_name("value")):
        return None
    return _finding(path, name_node, source, KIND_VARIABLE)


def _handle_method_definition(path: str, node, source: bytes) -> FunctionFinding | None:
    parent = node.parent
    if parent is None:
        return None
    name_node = node.child_by_field_name("name")
    if name_node is None or name_node.type != "property_identifier":
        return None
    if parent.type == "class_body":
        return _finding(path, name_node, source, KIND_METHOD)
    if parent.type == "object":
        # { foo() {} }
        return _finding(path, name_node, source, KIND_PROPERTY)
    return None


def _handle_pair(path: str, node, source: bytes) -> FunctionFinding | None:
    # { foo: function () {} }  /  { foo: () => {} }
    parent = node.parent
    if parent is None or parent.type != "object":
        return None
    key = node.child_by_field_name("key")
    if key is None or key.type != "property_identifier":
        return None
    if not _is_function_value(node.child_by_field_name("value")):
        return None
    return _finding(path, key, source, KIND_PROPERTY)


NODE_HANDLERS = {
    "function_declaration": _handle_declaration,
    "generator_function_declaration": _handle_declaration,
    "variable_declarator": _handle_variable_declarator,
    "method_definition": _handle_method_definition,
    "pair": _handle_pair,
}


def detect_function(path: str, node, source: bytes) -> FunctionFinding | None:
    """Classify one node; at most one handler applies per node type."""

    handler = NODE_HANDLERS.get(node.type)
    if handler is None:
        return None
    return handler(path, node, source)
