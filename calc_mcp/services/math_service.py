"""Expression evaluation facade.

Runs the lexer, parser and evaluator in sequence and folds any failure into
a ``Failure`` result carrying whatever the earlier stages produced. This is
the single catch boundary of the pipeline: ``evaluate_expression`` never
raises.
"""

from __future__ import annotations

import logging
import math
import traceback
from dataclasses import dataclass
from typing import Any, Optional, Union

from calc_mcp.services.errors import CalcError, NormalizationError
from calc_mcp.services.evaluator import evaluate
from calc_mcp.services.lexer import tokenize
from calc_mcp.services.nodes import Expression, node_to_dict
from calc_mcp.services.parser import parse
from calc_mcp.services.tokens import Token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Success:
    value: float
    expression: str
    tokens: tuple[Token, ...]
    ast: Expression

    status = "successful"
    ok = True

    def to_dict(self, include_tokens: bool = False, include_ast: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "status": self.status,
            "result": json_number(self.value),
            "expression": self.expression,
        }
        if include_tokens:
            data["tokens"] = [token.to_dict() for token in self.tokens]
        if include_ast:
            data["ast"] = node_to_dict(self.ast)
        return data


@dataclass(frozen=True)
class Failure:
    expression: str
    tokens: Optional[tuple[Token, ...]]
    ast: Optional[Expression]
    error: CalcError
    errors: tuple[BaseException, ...]

    status = "failed"
    ok = False

    def to_dict(self, include_tokens: bool = False, include_ast: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "status": self.status,
            "error": self.error.message,
            "error_type": type(self.error).__name__,
            "expression": self.expression,
        }
        if self.error.location is not None:
            data["location"] = self.error.location.to_dict()
        if include_tokens and self.tokens is not None:
            data["tokens"] = [token.to_dict() for token in self.tokens]
        if include_ast and self.ast is not None:
            data["ast"] = node_to_dict(self.ast)
        return data


EvaluationResult = Union[Success, Failure]


def json_number(value: float) -> Union[float, str]:
    """Render non-finite floats as strings so results stay valid JSON."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return value


def normalize_error(error: BaseException) -> CalcError:
    """Return ``error`` as a ``CalcError``, wrapping foreign exceptions.

    Foreign exceptions keep their message; their public non-callable
    attributes are lifted into ``extracted`` and their traceback text into
    ``stack``.
    """
    if isinstance(error, CalcError):
        return error

    extracted: dict[str, Any] = {
        "type": type(error).__name__,
        "args": [repr(arg) for arg in error.args],
    }
    for name, value in getattr(error, "__dict__", {}).items():
        if name.startswith("_") or callable(value):
            continue
        extracted[name] = value

    stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    normalized = NormalizationError(str(error) or type(error).__name__, extracted, stack)
    normalized.__cause__ = error
    return normalized


def evaluate_expression(expression: str, *, allow_trailing: bool = False) -> EvaluationResult:
    """Evaluate a math expression.

    Args:
        expression: Infix expression, e.g. ``"3 + 4 * 2"``, ``"sin(PI / 2)"``
            or ``"log(8, 2)"``.
        allow_trailing: Ignore tokens after the first complete expression
            instead of failing.

    Returns:
        ``Success`` with the value, tokens and tree, or ``Failure`` with the
        normalized error and whatever tokens/tree were produced before the
        failing stage.
    """
    tokens: Optional[tuple[Token, ...]] = None
    ast: Optional[Expression] = None
    stage = "lex"

    try:
        tokens = tuple(tokenize(expression))
        stage = "parse"
        ast = parse(tokens, allow_trailing=allow_trailing)
        stage = "evaluate"
        value = evaluate(ast)
    except Exception as e:
        error = normalize_error(e)
        logger.info("Evaluation of %r failed during %s: %s", expression, stage, error.message)
        if isinstance(error, NormalizationError):
            logger.debug("Unexpected fault during %s:\n%s", stage, error.stack)
        return Failure(
            expression=expression,
            tokens=tokens,
            ast=ast,
            error=error,
            errors=(e,),
        )

    return Success(value=value, expression=expression, tokens=tokens, ast=ast)
