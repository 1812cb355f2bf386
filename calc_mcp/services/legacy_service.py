"""Legacy expression evaluator kept for compatibility.

Validates parenthesis balance and the character set up front, tokenizes with
a regex, converts infix to postfix with the shunting-yard algorithm and
evaluates the postfix queue on a stack. Its function names differ from the
core registry (``log_two``/``log_ten``/``logn`` instead of ``log2``/``log10``).
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from calc_mcp.services.errors import CalcError, LexError, ParseError
from calc_mcp.services.evaluator import divide, power
from calc_mcp.services.math_service import json_number, normalize_error
from calc_mcp.services.registry import CONSTANTS, FUNCTIONS

logger = logging.getLogger(__name__)

LegacyToken = Union[str, float]


def _logn(x: float, base: float = 10.0) -> float:
    value = FUNCTIONS["log"](x, base)
    if not math.isfinite(value):
        return value
    # halves round up
    return float(math.floor(value * 10 + 0.5))


# name -> (callable, required args, max args)
LEGACY_FUNCTIONS: dict[str, tuple[Callable[..., float], int, int]] = {
    "sin": (FUNCTIONS["sin"], 1, 1),
    "cos": (FUNCTIONS["cos"], 1, 1),
    "tan": (FUNCTIONS["tan"], 1, 1),
    "atan": (FUNCTIONS["atan"], 1, 1),
    "asin": (FUNCTIONS["asin"], 1, 1),
    "acos": (FUNCTIONS["acos"], 1, 1),
    "abs": (FUNCTIONS["abs"], 1, 1),
    "sqrt": (FUNCTIONS["sqrt"], 1, 1),
    "ln": (FUNCTIONS["ln"], 1, 1),
    "log_two": (FUNCTIONS["log2"], 1, 1),
    "log_ten": (FUNCTIONS["log10"], 1, 1),
    "log": (FUNCTIONS["log"], 1, 2),
    "logn": (_logn, 1, 2),
    "exp": (FUNCTIONS["exp"], 1, 1),
}

SUPPORTED_LEGACY_FUNCTIONS: tuple[str, ...] = tuple(LEGACY_FUNCTIONS)

# symbol -> (precedence, right associative, operation)
_OPERATORS: dict[str, tuple[int, bool, Callable[[float, float], float]]] = {
    "+": (1, False, lambda a, b: a + b),
    "-": (1, False, lambda a, b: a - b),
    "*": (2, False, lambda a, b: a * b),
    "/": (2, False, divide),
    "^": (3, True, power),
}

# Unary minus, pushed when "-" follows an operator, "(" or "," or starts the input
_NEGATE = "neg"
_NEGATE_PRECEDENCE = 4

_TOKEN_RE = re.compile(r"\s*([()^*/+\-,]|\d+\.?\d*|\.\d+|[a-zA-Z_][a-zA-Z0-9_]*)\s*")
_KNOWN_NAMES_RE = re.compile(
    r"\b(" + "|".join(sorted(list(LEGACY_FUNCTIONS) + list(CONSTANTS), key=len, reverse=True)) + r")\b"
)
_VALID_CHARS_RE = re.compile(r"^[\d+\-*/^(),.\s]+$")


@dataclass(frozen=True)
class LegacySuccess:
    result: float
    expression: str
    tokens: tuple[LegacyToken, ...]

    status = "successful"
    ok = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "result": json_number(self.result),
            "expression": self.expression,
        }


@dataclass(frozen=True)
class LegacyFailure:
    expression: str
    tokens: Optional[tuple[LegacyToken, ...]]
    error: CalcError
    errors: tuple[BaseException, ...]

    status = "failed"
    ok = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "error": self.error.message,
            "error_type": type(self.error).__name__,
            "expression": self.expression,
        }


LegacyResult = Union[LegacySuccess, LegacyFailure]


def validate_expression(expression: str) -> None:
    """Check parenthesis balance and the allowed character set.

    Raises:
        ParseError: On unbalanced parentheses.
        LexError: When anything other than numbers, operators, parentheses,
            commas, whitespace and known names remains.
    """
    depth = 0
    for char in expression:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if depth < 0:
            raise ParseError("Mismatched parentheses - too many closing parentheses.")

    if depth > 0:
        raise ParseError("Mismatched parentheses - too many opening parentheses.")

    sanitized = _KNOWN_NAMES_RE.sub("", expression)
    if not _VALID_CHARS_RE.match(sanitized):
        raise LexError(f"Expression contains invalid characters or unsupported tokens '{sanitized}'")


def tokenize(expression: str) -> list[LegacyToken]:
    """Split into numbers (constants substituted) and symbol strings."""
    tokens: list[LegacyToken] = []

    for match in _TOKEN_RE.finditer(expression):
        token = match.group(1)
        if token[0].isdigit() or token[0] == ".":
            tokens.append(float(token))
        elif token in CONSTANTS:
            tokens.append(CONSTANTS[token])
        else:
            tokens.append(token)

    return tokens


def infix_to_postfix(tokens: list[LegacyToken]) -> list[tuple[LegacyToken, int]]:
    """Shunting-yard conversion.

    Returns the postfix queue as ``(token, argc)`` pairs, where ``argc`` is
    the number of arguments for function entries and 0 otherwise.
    """
    output: list[tuple[LegacyToken, int]] = []
    stack: list[str] = []
    # one argument counter per open function call
    arg_counts: list[int] = []
    previous: Optional[LegacyToken] = None

    for token in tokens:
        if isinstance(token, float):
            output.append((token, 0))
        elif token in LEGACY_FUNCTIONS:
            stack.append(token)
        elif token == ",":
            while stack and stack[-1] != "(":
                output.append((stack.pop(), 0))
            if arg_counts:
                arg_counts[-1] += 1
        elif token == "-" and (previous is None or previous in ("(", ",") or previous in _OPERATORS):
            stack.append(_NEGATE)
        elif token in _OPERATORS:
            precedence, right_assoc, _ = _OPERATORS[token]
            while stack and (stack[-1] in _OPERATORS or stack[-1] == _NEGATE):
                top_precedence = _NEGATE_PRECEDENCE if stack[-1] == _NEGATE else _OPERATORS[stack[-1]][0]
                if precedence < top_precedence or (not right_assoc and precedence == top_precedence):
                    output.append((stack.pop(), 0))
                else:
                    break
            stack.append(token)
        elif token == "(":
            if stack and stack[-1] in LEGACY_FUNCTIONS:
                arg_counts.append(1)
            stack.append(token)
        elif token == ")":
            while stack and stack[-1] != "(":
                output.append((stack.pop(), 0))
            if stack:
                stack.pop()
            if stack and stack[-1] in LEGACY_FUNCTIONS:
                output.append((stack.pop(), arg_counts.pop() if arg_counts else 1))
        else:
            raise LexError(f"Unsupported token '{token}'")
        previous = token

    while stack:
        token = stack.pop()
        if token == "(":
            continue
        output.append((token, arg_counts.pop() if token in LEGACY_FUNCTIONS and arg_counts else 0))

    return output


def evaluate_postfix(postfix: list[tuple[LegacyToken, int]]) -> float:
    stack: list[float] = []

    for token, argc in postfix:
        if isinstance(token, float):
            stack.append(token)
        elif token == _NEGATE:
            if not stack:
                raise ParseError("Malformed expression")
            stack.append(-stack.pop())
        elif token in _OPERATORS:
            if len(stack) < 2:
                raise ParseError("Malformed expression")
            right = stack.pop()
            left = stack.pop()
            stack.append(_OPERATORS[token][2](left, right))
        elif token in LEGACY_FUNCTIONS:
            func, required, maximum = LEGACY_FUNCTIONS[token]
            argc = max(required, min(argc, maximum))
            if len(stack) < argc:
                raise ParseError("Malformed expression")
            args = stack[len(stack) - argc:]
            del stack[len(stack) - argc:]
            stack.append(func(*args))

    if len(stack) != 1:
        raise ParseError("Malformed expression")
    return stack[0]


def evaluate_expression_legacy(expression: str) -> LegacyResult:
    """Evaluate ``expression`` with the legacy shunting-yard pipeline.

    Never raises; failures come back as ``LegacyFailure``.
    """
    tokens: Optional[tuple[LegacyToken, ...]] = None

    try:
        validate_expression(expression)
        tokens = tuple(tokenize(expression))
        result = evaluate_postfix(infix_to_postfix(list(tokens)))
    except Exception as e:
        error = normalize_error(e)
        logger.info("Legacy evaluation of %r failed: %s", expression, error.message)
        return LegacyFailure(expression=expression, tokens=tokens, error=error, errors=(e,))

    return LegacySuccess(result=result, expression=expression, tokens=tokens)
