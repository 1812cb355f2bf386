"""Expression tree node types built by the parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class NumericLiteral:
    value: float


@dataclass(frozen=True)
class ConstantReference:
    name: str
    value: float


@dataclass(frozen=True)
class UnaryExpression:
    operator: str
    operand: "Expression"


@dataclass(frozen=True)
class BinaryExpression:
    operator: str
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True)
class CallExpression:
    name: str
    arguments: tuple["Expression", ...]


Expression = Union[
    NumericLiteral,
    ConstantReference,
    UnaryExpression,
    BinaryExpression,
    CallExpression,
]


def node_to_dict(node: Expression) -> dict[str, Any]:
    """Render an expression tree as nested JSON-friendly dicts."""
    if isinstance(node, NumericLiteral):
        return {"kind": "NumericLiteral", "value": node.value}
    if isinstance(node, ConstantReference):
        return {"kind": "ConstantReference", "name": node.name, "value": node.value}
    if isinstance(node, UnaryExpression):
        return {
            "kind": "UnaryExpression",
            "operator": node.operator,
            "operand": node_to_dict(node.operand),
        }
    if isinstance(node, BinaryExpression):
        return {
            "kind": "BinaryExpression",
            "operator": node.operator,
            "left": node_to_dict(node.left),
            "right": node_to_dict(node.right),
        }
    if isinstance(node, CallExpression):
        return {
            "kind": "CallExpression",
            "name": node.name,
            "arguments": [node_to_dict(arg) for arg in node.arguments],
        }
    raise TypeError(f"not an expression node: {type(node).__name__}")
