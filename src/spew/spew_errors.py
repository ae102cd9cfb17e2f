"""
Error taxonomy for the Spew front end.

Both stages fail fast: the first error aborts the whole lexing or parsing run
and surfaces as one of the exceptions below. They all derive from
`SpewSyntaxError`, itself a `SyntaxError`, so callers can catch malformed
input with a single `except SyntaxError`.

Lexing:
    UnexpectedCharacterError: a character that cannot continue the current lexeme.
    ExpectedError: input ended where a follow-up character was required.
    IncompleteLiteralError: a string literal ran to end of input (strict mode).

Parsing:
    UnexpectedTokenError: a token of the wrong kind, or `None` when the problem
        was only detected at end of input.
    IncompleteError: input ended while a required token was still expected.
    NotSupportedError: a construct the front end deliberately does not parse yet.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spew.spew_lexer import Token


class SpewSyntaxError(SyntaxError):
    """Base class for every lexing and parsing failure.

    Attributes:
        message (str): Human readable description without position.
        line (int | None): 1-based line of the offending input, if known.
        col (int | None): 1-based column of the offending input, if known.
    """

    def __init__(self, message: str, line: int | None = None, col: int | None = None):
        self.message = message
        self.line = line
        self.col = col
        super().__init__(self.format())

    def format(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.message} at line {self.line}, col {self.col}"


class LexError(SpewSyntaxError):
    """Raised by the lexer."""


class UnexpectedCharacterError(LexError):
    def __init__(self, char: str, context: str, line: int | None = None, col: int | None = None):
        self.char = char
        self.context = context
        super().__init__(f"Unexpected character {char!r}: {context}", line, col)


class ExpectedError(LexError):
    def __init__(self, context: str, line: int | None = None, col: int | None = None):
        self.context = context
        super().__init__(f"Expected {context}", line, col)


class IncompleteLiteralError(LexError):
    def __init__(self, context: str, line: int | None = None, col: int | None = None):
        self.context = context
        super().__init__(f"Incomplete literal: {context}", line, col)


class ParseError(SpewSyntaxError):
    """Raised by the parser."""


class UnexpectedTokenError(ParseError):
    """A token of the wrong kind was found.

    `token` is `None` when the error was only detected at end of input, for
    example a struct body that never sees its closing brace.
    """

    def __init__(self, token: Token | None, expected: str):
        self.token = token
        self.expected = expected
        if token is None:
            super().__init__(f"Expected {expected}, got end of input")
        else:
            super().__init__(f"Expected {expected}, got {token}", token.line, token.col)


class IncompleteError(ParseError):
    def __init__(self, expected: str):
        self.expected = expected
        super().__init__(f"Incomplete input: expected {expected}")


class NotSupportedError(ParseError):
    def __init__(self, construct: str, token: Token | None = None):
        self.construct = construct
        self.token = token
        line = token.line if token is not None else None
        col = token.col if token is not None else None
        super().__init__(f"{construct} is not yet supported", line, col)


__all__ = [
    "ExpectedError",
    "IncompleteError",
    "IncompleteLiteralError",
    "LexError",
    "NotSupportedError",
    "ParseError",
    "SpewSyntaxError",
    "UnexpectedCharacterError",
    "UnexpectedTokenError",
]
