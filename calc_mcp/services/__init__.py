"""Services module for calc-mcp."""

from calc_mcp.services.errors import CalcError, EvalError, LexError, NormalizationError, ParseError
from calc_mcp.services.legacy_service import evaluate_expression_legacy
from calc_mcp.services.math_service import EvaluationResult, Failure, Success, evaluate_expression

__all__ = [
    "CalcError",
    "EvalError",
    "LexError",
    "NormalizationError",
    "ParseError",
    "EvaluationResult",
    "Failure",
    "Success",
    "evaluate_expression",
    "evaluate_expression_legacy",
]
