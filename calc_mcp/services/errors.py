"""Error types raised by the expression pipeline.

Every stage raises a subclass of ``CalcError``. ``CalcError`` derives from
``ValueError`` so callers that already catch ``ValueError`` keep working.
"""

from __future__ import annotations

from typing import Any, Optional

from calc_mcp.services.tokens import Location


class CalcError(ValueError):
    """Base class for lexer, parser and evaluator failures."""

    def __init__(self, message: str, location: Optional[Location] = None):
        self.message = message
        self.location = location
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": type(self).__name__,
            "message": self.message,
        }
        if self.location is not None:
            data.update(self.location.to_dict())
        return data


class LexError(CalcError):
    """Unrecognized character, malformed number or unknown identifier."""


class ParseError(CalcError):
    """Token sequence does not form a valid expression."""


class EvalError(CalcError):
    """Expression tree cannot be evaluated."""


class NormalizationError(CalcError):
    """Wraps a fault that is not a ``CalcError``.

    Carries the original message, the public attributes of the original
    exception in ``extracted`` and its formatted traceback in ``stack``.
    """

    def __init__(self, message: str, extracted: dict[str, Any], stack: str = ""):
        super().__init__(message)
        self.extracted = extracted
        self.stack = stack

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["extracted"] = self.extracted
        return data
