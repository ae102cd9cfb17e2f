"""
Lexical analyzer for the Spew programming language.

This module turns raw source text into an ordered list of classified tokens.

Classes:
    CharacterStream: Character cursor with line/column tracking and one-step undo.
    Literal: Value carried by literal tokens.
    Token: A single classified token with its source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Skips whitespace; carriage returns are absorbed by the stream itself
    - Line (`//`) and block (`/* */`) comments become COMMENT tokens
    - Recognizes:
        * Reserved keywords and declaration modifiers
        * Identifiers
        * Literals: strings (single or double quoted), numbers, booleans,
          `null` and `ndef`
        * Single-character symbols (operators are never merged)

Raises:
    UnexpectedCharacterError: If `/` is followed by anything but `/` or `*`,
        or, in strict mode, on characters outside the symbol table.
    ExpectedError: If input ends right after a `/`, or, in strict mode,
        inside a block comment.
    IncompleteLiteralError: In strict mode, if a string literal is unterminated.

Example:
    >>> tokenize("let x")
    [Token(KEYWORD, LET), Token(IDENT, x)]

Exports:
    - CharacterStream
    - Literal
    - Token
    - TokenType
    - Lexer
    - tokenize
"""

from collections.abc import Callable
from enum import Enum
from typing import Any

from spew.spew_constants import (
    KeywordKind,
    LiteralKind,
    ModifierKind,
    SymbolKind,
    keyword_hashmap,
    literal_words,
    modifier_hashmap,
    symbol_hashmap,
)
from spew.spew_errors import (
    ExpectedError,
    IncompleteLiteralError,
    UnexpectedCharacterError,
)


class CharacterStream:
    """
    A cursor over source text with line and column tracking.

    Carriage returns are absorbed: they are skipped by `next_char`, never
    returned and never counted in the column. The most recently consumed
    character can be un-consumed with `step_back`, which restores offset, line
    and column. Only one level of undo is kept.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source, always `<= len(source)`.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.position = 0
        self.line = 1
        self.column = 1
        self._last_mark: tuple[int, int, int] | None = None

    def next_char(self) -> str | None:
        """
        Consumes and returns the next character in the stream.

        Returns:
            str | None: The next character, or None at end of input.
        """
        mark = (self.position, self.line, self.column)
        while self.position < len(self.source) and self.source[self.position] == "\r":
            self.position += 1
        if self.position >= len(self.source):
            return None

        char = self.source[self.position]
        self._last_mark = mark
        self.position += 1
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def step_back(self) -> None:
        """
        Un-consumes the most recently consumed character.

        Raises:
            IndexError: If no character was consumed since the last `step_back`
                (or since the stream was created).
        """
        if self._last_mark is None:
            raise IndexError(
                f"CharacterStreamError: Attempted to step back with no consumed character to undo at position=<{self.position}>"
            )
        self.position, self.line, self.column = self._last_mark
        self._last_mark = None

    def peek(self) -> str | None:
        """Returns the next character without consuming it, or None at end of input."""
        index = self.position
        while index < len(self.source) and self.source[index] == "\r":
            index += 1
        return self.source[index] if index < len(self.source) else None

    def end_of_file(self) -> bool:
        return self.peek() is None

    def take_while(self, predicate: Callable[[str], bool]) -> str:
        """
        Consumes the maximal run of characters satisfying `predicate`.

        The first character that fails the predicate is stepped back over, so
        it is still available to the caller.

        Args:
            predicate (Callable[[str], bool]): Test applied to each character.

        Returns:
            str: The consumed run, possibly empty.
        """
        out = []
        while True:
            char = self.next_char()
            if char is None:
                break
            if not predicate(char):
                self.step_back()
                break
            out.append(char)
        return "".join(out)

    def skip_while(self, predicate: Callable[[str], bool]) -> None:
        """Same as `take_while`, discarding the text."""
        while True:
            char = self.next_char()
            if char is None:
                return
            if not predicate(char):
                self.step_back()
                return


class TokenType(Enum):
    COMMENT = "comment"
    KEYWORD = "keyword"
    IDENT = "ident"
    SYMBOL = "symbol"
    LITERAL = "literal"


class Literal:
    """A literal value as written in the source.

    Numbers keep their source text; they are not converted at this stage.

    Attributes:
        kind (LiteralKind): STRING, NUMBER, BOOLEAN, NULL or UNDEFINED.
        value (str | bool | None): Text for strings and numbers, a bool for
            booleans, None for `null` and `ndef`.
    """

    __slots__ = ("kind", "value")

    def __init__(self, kind: LiteralKind, value: str | bool | None = None) -> None:
        self.kind = kind
        self.value = value

    @classmethod
    def string(cls, text: str) -> "Literal":
        return cls(LiteralKind.STRING, text)

    @classmethod
    def number(cls, text: str) -> "Literal":
        return cls(LiteralKind.NUMBER, text)

    @classmethod
    def boolean(cls, flag: bool) -> "Literal":
        return cls(LiteralKind.BOOLEAN, flag)

    def __repr__(self) -> str:
        if self.kind in (LiteralKind.NULL, LiteralKind.UNDEFINED):
            return f"Literal({self.kind.name})"
        return f"Literal({self.kind.name}, {self.value!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Literal)
            and self.kind == other.kind
            and self.value == other.value
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.value))

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "value": self.value}


TokenValue = str | KeywordKind | ModifierKind | SymbolKind | Literal


class Token:
    """Represents a single lexical token in the Spew language.

    Tokens are immutable once created.

    Attributes:
        type (TokenType): COMMENT, KEYWORD, IDENT, SYMBOL or LITERAL.
        value (TokenValue): Comment text, a KeywordKind or ModifierKind,
            identifier text, a SymbolKind, or a Literal.
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
    """

    __slots__ = ("type", "value", "line", "col")

    def __init__(self, type_: TokenType, value: TokenValue, line: int = 0, col: int = 0):
        object.__setattr__(self, "type", type_)
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "line", line)
        object.__setattr__(self, "col", col)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Token is immutable; cannot set {name!r}")

    @property
    def keyword_kind(self) -> KeywordKind | None:
        """The keyword kind, with modifiers folded into KeywordKind.MODIFIER."""
        if self.type is not TokenType.KEYWORD:
            return None
        if isinstance(self.value, ModifierKind):
            return KeywordKind.MODIFIER
        return self.value  # type: ignore[return-value]

    def is_symbol(self, kind: SymbolKind) -> bool:
        return self.type is TokenType.SYMBOL and self.value is kind

    def is_keyword(self, kind: KeywordKind) -> bool:
        return self.keyword_kind is kind

    def __repr__(self) -> str:
        value = self.value.name if isinstance(self.value, Enum) else self.value
        return f"Token({self.type.name}, {value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))

    def to_dict(self) -> dict[str, Any]:
        value: Any = self.value
        if isinstance(value, Literal):
            value = value.to_dict()
        elif isinstance(value, Enum):
            value = value.value
        return {"type": self.type.value, "value": value, "line": self.line, "col": self.col}


class Lexer:
    """Lexical analyzer for the Spew language.

    Reads a CharacterStream front to back and produces tokens. No recovery is
    attempted: the first error aborts the run.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        strict (bool): When True, unknown characters, unterminated strings and
            unterminated block comments raise instead of being tolerated.
    """

    def __init__(self, stream: CharacterStream, strict: bool = False) -> None:
        self.stream = stream
        self.strict = strict

    def tokenize(self) -> list[Token]:
        """Consumes the whole stream and returns its tokens in source order."""
        tokens = []
        while True:
            tok = self.next_token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens

    def next_token(self) -> Token | None:
        """
        Consumes and returns the next Token from the stream.

        Returns:
            Token | None: The next token, or None at end of input.
        """
        while True:
            line, col = self.stream.line, self.stream.column
            ch = self.stream.next_char()
            if ch is None:
                return None

            # 1. Whitespace
            if ch.isspace():
                self.stream.skip_while(str.isspace)
                continue

            # 2. Comment
            if ch == "/":
                return self.lex_comment(line, col)

            # 3. Identifier, keyword or word literal
            if ch.isalpha():
                self.stream.step_back()
                return self.lex_word(line, col)

            # 4. String
            if ch in ('"', "'"):
                return self.lex_string(ch, line, col)

            # 5. Number
            if ch.isnumeric():
                self.stream.step_back()
                return self.lex_number(line, col)

            # 6. Symbol
            symbol = symbol_hashmap.get(ch)
            if symbol is not None:
                return Token(TokenType.SYMBOL, symbol, line, col)

            if self.strict:
                raise UnexpectedCharacterError(
                    ch, "not part of the Spew character set", line, col
                )

    def lex_comment(self, line: int, col: int) -> Token:
        """Lex a comment; the leading `/` has already been consumed."""
        follower_line, follower_col = self.stream.line, self.stream.column
        ch = self.stream.next_char()
        if ch is None:
            raise ExpectedError(
                "'/' or '*' after '/' to start a comment", line, col
            )

        if ch == "/":
            text = self.stream.take_while(lambda c: c != "\n")
            return Token(TokenType.COMMENT, text, line, col)

        if ch == "*":
            chars = []
            while True:
                c = self.stream.next_char()
                if c is None:
                    if self.strict:
                        raise ExpectedError("'*/' to close block comment", line, col)
                    break
                if c == "*":
                    follower = self.stream.next_char()
                    if follower == "/":
                        break
                    if follower is not None:
                        self.stream.step_back()
                chars.append(c)
            return Token(TokenType.COMMENT, "".join(chars), line, col)

        raise UnexpectedCharacterError(
            ch,
            "expected '/' for line comment or '*' for multiline comment",
            follower_line,
            follower_col,
        )

    def lex_word(self, line: int, col: int) -> Token:
        word = self.stream.take_while(lambda c: c.isalnum() or c == "_")

        keyword = keyword_hashmap.get(word)
        if keyword is not None:
            return Token(TokenType.KEYWORD, keyword, line, col)

        modifier = modifier_hashmap.get(word)
        if modifier is not None:
            return Token(TokenType.KEYWORD, modifier, line, col)

        if word in literal_words:
            kind, value = literal_words[word]
            return Token(TokenType.LITERAL, Literal(kind, value), line, col)

        return Token(TokenType.IDENT, word, line, col)

    def lex_number(self, line: int, col: int) -> Token:
        chars = []
        has_dot = False
        while True:
            c = self.stream.next_char()
            if c is None:
                break
            if c.isnumeric():
                chars.append(c)
            elif c == "." and not has_dot:
                has_dot = True
                chars.append(c)
            else:
                self.stream.step_back()
                break
        return Token(TokenType.LITERAL, Literal.number("".join(chars)), line, col)

    def lex_string(self, quote: str, line: int, col: int) -> Token:
        """Lex a string literal; the opening quote has already been consumed.

        The literal closes on the same quote character when it is not escaped.
        Escapes are kept verbatim in the text.
        """
        chars = []
        escaped = False
        while True:
            c = self.stream.next_char()
            if c is None:
                if self.strict:
                    raise IncompleteLiteralError(
                        f"unterminated string, expected closing {quote}", line, col
                    )
                break
            if c == quote and not escaped:
                break
            chars.append(c)
            escaped = c == "\\" and not escaped
        return Token(TokenType.LITERAL, Literal.string("".join(chars)), line, col)


def tokenize(source: str, strict: bool = False) -> list[Token]:
    """Tokenize `source` and return its tokens in source order."""
    return Lexer(CharacterStream(source), strict=strict).tokenize()


__all__ = [
    "CharacterStream",
    "Lexer",
    "Literal",
    "Token",
    "TokenType",
    "TokenValue",
    "tokenize",
]
