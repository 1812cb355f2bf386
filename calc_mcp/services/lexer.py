"""Lexer: converts expression text into a token sequence.

Single forward scan with a cursor tracking offset, line and column.
Identifiers are resolved against the registries here, so an unknown name
fails during lexing rather than later in the pipeline.
"""

from __future__ import annotations

import logging
from typing import Optional

from calc_mcp.services.errors import LexError
from calc_mcp.services.registry import CONSTANTS, is_constant, is_function
from calc_mcp.services.tokens import Location, Token, TokenKind

logger = logging.getLogger(__name__)

_SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    ",": TokenKind.COMMA,
}

_OPERATOR_CHARS = frozenset("+-*/%^")

TAB_WIDTH = 4


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _is_alpha(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z")


def _is_alphanumeric(char: str) -> bool:
    return _is_alpha(char) or _is_digit(char)


class Lexer:
    """Tokenizer for a single expression string."""

    def __init__(self, source: str):
        self.source = source
        self._offset = 0
        self._line = 1
        self._column = 1

    def tokenize(self) -> list[Token]:
        """Scan the whole source and return its tokens, ending with EOF.

        Raises:
            LexError: On an unrecognized character, a malformed number or
                an identifier that is neither a constant nor a function.
        """
        self._offset = 0
        self._line = 1
        self._column = 1
        tokens: list[Token] = []

        while self._offset < len(self.source):
            char = self.source[self._offset]

            if char in " \t\r\n":
                self._skip_whitespace(char)
            elif char in _SINGLE_CHAR_TOKENS:
                tokens.append(Token(_SINGLE_CHAR_TOKENS[char], self._location()))
                self._advance()
            elif char == "*" and self._peek(1) == "*":
                tokens.append(Token(TokenKind.BINARY_OPERATOR, self._location(), operator="**"))
                self._advance(2)
            elif char in _OPERATOR_CHARS:
                tokens.append(Token(TokenKind.BINARY_OPERATOR, self._location(), operator=char))
                self._advance()
            elif _is_digit(char) or char == ".":
                tokens.append(self._read_number())
            elif _is_alpha(char):
                tokens.append(self._read_identifier())
            else:
                raise LexError(
                    f"Unrecognized character `{char}` at {self._location()}",
                    self._location(),
                )

        tokens.append(Token(TokenKind.EOF, self._location()))
        logger.debug("Tokenized %r into %d tokens", self.source, len(tokens))
        return tokens

    def _peek(self, ahead: int = 0) -> Optional[str]:
        index = self._offset + ahead
        if index < len(self.source):
            return self.source[index]
        return None

    def _advance(self, steps: int = 1) -> None:
        self._offset += steps
        self._column += steps

    def _location(self) -> Location:
        return Location(line=self._line, column=self._column, offset=self._offset)

    def _skip_whitespace(self, char: str) -> None:
        if char == "\r" and self._peek(1) == "\n":
            self._offset += 1
        if char in "\r\n":
            self._offset += 1
            self._line += 1
            self._column = 1
        elif char == "\t":
            self._offset += 1
            self._column += TAB_WIDTH
        else:
            self._advance()

    def _read_number(self) -> Token:
        start = self._location()
        seen_dot = False

        while self._offset < len(self.source):
            char = self.source[self._offset]
            if _is_digit(char):
                self._advance()
            elif char == "." and not seen_dot:
                seen_dot = True
                self._advance()
            else:
                break

        text = self.source[start.offset:self._offset]
        if text == ".":
            raise LexError(f"Malformed number `{text}` at {start}", start)

        kind = TokenKind.DECIMAL if seen_dot else TokenKind.INTEGER
        return Token(kind, start, value=float(text))

    def _read_identifier(self) -> Token:
        start = self._location()

        while self._offset < len(self.source) and _is_alphanumeric(self.source[self._offset]):
            self._advance()

        name = self.source[start.offset:self._offset]

        if is_constant(name):
            return Token(TokenKind.CONSTANT, start, name=name, value=CONSTANTS[name])
        if is_function(name):
            return Token(TokenKind.FUNCTION, start, name=name)

        raise LexError(f"Unknown identifier `{name}` at {start}", start)


def tokenize(source: str) -> list[Token]:
    """Tokenize ``source``; see ``Lexer.tokenize``."""
    return Lexer(source).tokenize()
