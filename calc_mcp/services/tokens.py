"""Token model produced by the lexer and consumed by the parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class TokenKind(str, Enum):
    INTEGER = "integer"
    DECIMAL = "decimal"
    OPEN_PAREN = "open_paren"
    CLOSE_PAREN = "close_paren"
    COMMA = "comma"
    BINARY_OPERATOR = "binary_operator"
    CONSTANT = "constant"
    FUNCTION = "function"
    EOF = "eof"


NUMERIC_KINDS = frozenset({TokenKind.INTEGER, TokenKind.DECIMAL})

# Binary operator symbols; "**" is an alias of "^"
BINARY_OPERATORS: tuple[str, ...] = ("+", "-", "*", "/", "%", "^", "**")


@dataclass(frozen=True)
class Location:
    """Source position: 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "column": self.column, "offset": self.offset}

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


@dataclass(frozen=True)
class Token:
    """A classified lexical unit.

    Only the payload fields relevant to ``kind`` are set: numeric tokens carry
    ``value``, operator tokens ``operator``, constant tokens ``name`` and
    ``value``, function tokens ``name``.
    """

    kind: TokenKind
    location: Location
    value: Optional[float] = None
    operator: Optional[str] = None
    name: Optional[str] = None

    @property
    def is_numeric(self) -> bool:
        return self.kind in NUMERIC_KINDS

    def describe(self) -> str:
        """Short human-readable form used in error messages."""
        if self.kind is TokenKind.BINARY_OPERATOR:
            return f"operator `{self.operator}`"
        if self.kind in (TokenKind.CONSTANT, TokenKind.FUNCTION):
            return f"{self.kind.value} `{self.name}`"
        if self.is_numeric:
            return f"number `{self.value:g}`"
        return f"`{self.kind.value}`"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value, **self.location.to_dict()}
        if self.value is not None:
            data["value"] = self.value
        if self.operator is not None:
            data["operator"] = self.operator
        if self.name is not None:
            data["name"] = self.name
        return data
