"""Precedence-climbing parser: token sequence -> expression tree.

Unary minus is consumed while parsing a primary expression, so it binds
tighter than every binary operator: ``-2^2`` is ``(-2)^2``.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from calc_mcp.services.errors import ParseError
from calc_mcp.services.nodes import (
    BinaryExpression,
    CallExpression,
    ConstantReference,
    Expression,
    NumericLiteral,
    UnaryExpression,
)
from calc_mcp.services.tokens import Token, TokenKind

logger = logging.getLogger(__name__)

# Higher binds tighter; anything missing has precedence 0 and never matches
PRECEDENCE: dict[str, int] = {
    "^": 4,
    "**": 4,
    "*": 3,
    "/": 3,
    "%": 3,
    "+": 2,
    "-": 2,
}

RIGHT_ASSOCIATIVE = frozenset({"^", "**"})


class Parser:
    """Parses one token sequence into a single expression tree.

    With ``allow_trailing=False`` (the default) every token up to EOF must
    belong to the expression; ``allow_trailing=True`` ignores whatever
    follows the first complete expression.
    """

    def __init__(self, tokens: Sequence[Token], allow_trailing: bool = False):
        self._tokens = tokens
        self._position = 0
        self.allow_trailing = allow_trailing

    def parse(self) -> Expression:
        self._position = 0
        expression = self._parse_expression()

        if not self.allow_trailing:
            token = self._current()
            if token is not None and token.kind is not TokenKind.EOF:
                raise ParseError(
                    f"Unexpected {token.describe()} after end of expression at {token.location}",
                    token.location,
                )

        logger.debug("Parsed %d tokens into %s", len(self._tokens), type(expression).__name__)
        return expression

    def _parse_expression(self, min_precedence: int = 0) -> Expression:
        left = self._parse_primary()

        while True:
            token = self._current()
            precedence = _precedence(token)
            if precedence == 0 or precedence < min_precedence:
                break

            self._advance()
            operator = token.operator
            if operator in RIGHT_ASSOCIATIVE:
                next_precedence = precedence
            else:
                next_precedence = precedence + 1

            right = self._parse_expression(next_precedence)
            left = BinaryExpression(operator=operator, left=left, right=right)

        return left

    def _parse_primary(self) -> Expression:
        token = self._advance()

        if token is None or token.kind is TokenKind.EOF:
            location = token.location if token is not None else None
            raise ParseError("Unexpected end of input", location)

        if token.is_numeric:
            return NumericLiteral(value=token.value)

        if token.kind is TokenKind.CONSTANT:
            return ConstantReference(name=token.name, value=token.value)

        if token.kind is TokenKind.OPEN_PAREN:
            expression = self._parse_expression()
            self._expect(TokenKind.CLOSE_PAREN)
            return expression

        if token.kind is TokenKind.FUNCTION:
            return self._parse_call(token)

        if token.kind is TokenKind.BINARY_OPERATOR:
            if token.operator != "-":
                raise ParseError(
                    f"Unexpected operator `{token.operator}` at {token.location}",
                    token.location,
                )

            # consecutive signs are counted, not recursed into
            count = 1
            while _is_minus(self._current()):
                self._advance()
                count += 1

            expression = self._parse_primary()
            for _ in range(count):
                expression = UnaryExpression(operator="-", operand=expression)
            return expression

        raise ParseError(f"Unexpected {token.describe()} at {token.location}", token.location)

    def _parse_call(self, function: Token) -> CallExpression:
        self._expect(TokenKind.OPEN_PAREN)
        arguments: list[Expression] = []

        current = self._current()
        if current is not None and current.kind is TokenKind.CLOSE_PAREN:
            self._advance()
            return CallExpression(name=function.name, arguments=())

        while True:
            arguments.append(self._parse_expression())

            current = self._current()
            if current is not None and current.kind is TokenKind.COMMA:
                self._advance()
                continue
            break

        self._expect(TokenKind.CLOSE_PAREN)
        return CallExpression(name=function.name, arguments=tuple(arguments))

    def _expect(self, kind: TokenKind) -> Token:
        token = self._advance()

        if token is None or token.kind is not kind:
            got = token.describe() if token is not None else "end of input"
            location = token.location if token is not None else None
            where = f" at {location}" if location is not None else ""
            raise ParseError(f"Expected `{kind.value}` but got {got}{where}", location)

        return token

    def _current(self) -> Optional[Token]:
        if self._position < len(self._tokens):
            return self._tokens[self._position]
        return None

    def _advance(self) -> Optional[Token]:
        token = self._current()
        if token is not None:
            self._position += 1
        return token


def _is_minus(token: Optional[Token]) -> bool:
    return token is not None and token.kind is TokenKind.BINARY_OPERATOR and token.operator == "-"


def _precedence(token: Optional[Token]) -> int:
    if token is None or token.kind is not TokenKind.BINARY_OPERATOR:
        return 0
    return PRECEDENCE.get(token.operator, 0)


def parse(tokens: Sequence[Token], allow_trailing: bool = False) -> Expression:
    """Parse ``tokens`` into an expression tree; see ``Parser``."""
    return Parser(tokens, allow_trailing=allow_trailing).parse()
