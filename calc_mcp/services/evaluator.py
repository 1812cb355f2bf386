"""Tree-walking evaluator for parsed expressions.

Arithmetic follows IEEE float semantics: division by zero yields a signed
infinity or NaN instead of raising.
"""

from __future__ import annotations

import logging
import math
from typing import Callable

from calc_mcp.services.errors import EvalError
from calc_mcp.services.nodes import (
    BinaryExpression,
    CallExpression,
    ConstantReference,
    Expression,
    NumericLiteral,
    UnaryExpression,
)
from calc_mcp.services.registry import CONSTANTS, FUNCTIONS

logger = logging.getLogger(__name__)


def _is_odd_integer(value: float) -> bool:
    return math.isfinite(value) and value.is_integer() and int(value) % 2 == 1


def divide(left: float, right: float) -> float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def remainder(left: float, right: float) -> float:
    """Floating-point remainder with the sign of the dividend."""
    try:
        return math.fmod(left, right)
    except ValueError:
        return math.nan


def power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        # zero to a negative power, or a negative base with a fractional exponent
        if base == 0 and exponent < 0:
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


BINARY_OPERATIONS: dict[str, Callable[[float, float], float]] = {
    "+": lambda left, right: left + right,
    "-": lambda left, right: left - right,
    "*": lambda left, right: left * right,
    "/": divide,
    "%": remainder,
    "^": power,
    "**": power,
}


def evaluate(node: Expression) -> float:
    """Evaluate an expression tree to a float.

    Raises:
        EvalError: On an unknown operator, an unknown function, a missing
            required argument or an unknown node type.
    """
    if isinstance(node, NumericLiteral):
        return node.value

    if isinstance(node, ConstantReference):
        return CONSTANTS.get(node.name, node.value)

    if isinstance(node, BinaryExpression):
        operation = BINARY_OPERATIONS.get(node.operator)
        if operation is None:
            raise EvalError(f"Unknown operator: {node.operator}")
        left = evaluate(node.left)
        right = evaluate(node.right)
        return operation(left, right)

    if isinstance(node, UnaryExpression):
        negative = False
        while isinstance(node, UnaryExpression):
            if node.operator != "-":
                raise EvalError(f"Unknown unary operator: {node.operator}")
            negative = not negative
            node = node.operand
        value = evaluate(node)
        return -value if negative else value

    if isinstance(node, CallExpression):
        return _evaluate_call(node)

    raise EvalError(f"Unknown expression node `{type(node).__name__}`")


def _evaluate_call(node: CallExpression) -> float:
    args = [evaluate(arg) for arg in node.arguments]

    spec = FUNCTIONS.get(node.name)
    if spec is None:
        raise EvalError(f"Unknown function: {node.name}")

    if len(args) < spec.required_count:
        raise EvalError(
            f"Function `{node.name}` expects at least {spec.required_count} "
            f"argument(s), got {len(args)}"
        )

    for param in spec.params[len(args):]:
        args.append(param.default)

    logger.debug("Calling %s with %s", node.name, args)
    return spec(*args)
