"""
Token cursor for the Spew parser.

`TokenSet` wraps the token list produced by the lexer. The parser reads it
front to back; `peek` provides one-token lookahead without consuming and
`unread` gives back the token just read. `back` rewinds over several consumed
tokens. The cursor can never move before the first token.
"""

from collections.abc import Iterator

from spew.spew_lexer import Token


class TokenSet:
    """
    Read cursor over an immutable token sequence.

    Attributes:
        position (int): Number of tokens consumed so far.
    """

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens: tuple[Token, ...] = tuple(tokens)
        self.position: int = 0
        self._last_read: int | None = None

    def next_token(self) -> Token | None:
        """Returns and consumes the token at the cursor, or None at end of input."""
        if self.position >= len(self._tokens):
            return None
        tok = self._tokens[self.position]
        self._last_read = self.position
        self.position += 1
        return tok

    def peek(self) -> Token | None:
        """Returns the token at the cursor without consuming it."""
        if self.position >= len(self._tokens):
            return None
        return self._tokens[self.position]

    def unread(self) -> None:
        """
        Gives back the token returned by the latest `next_token` call.

        Only that single token can be given back, so the cursor always lands on
        a position it has already been at.

        Raises:
            IndexError: If no token was read since the last `unread` or `back`.
        """
        if self._last_read is None:
            raise IndexError("TokenSetError: No token to unread")
        self.position = self._last_read
        self._last_read = None

    def back(self, n: int = 1) -> None:
        """
        Moves the cursor back by `n` consumed tokens.

        Raises:
            ValueError: If `n` is negative.
            IndexError: If fewer than `n` tokens have been consumed; the cursor
                is left untouched.
        """
        if n < 0:
            raise ValueError(f"Cannot step back by a negative count: {n}")
        if n > self.position:
            raise IndexError(
                f"TokenSetError: Attempted to step back {n} tokens with only {self.position} consumed"
            )
        self.position -= n
        self._last_read = None

    def at_end(self) -> bool:
        return self.position >= len(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        """Iterates over the tokens that have not been consumed yet, without consuming them."""
        return iter(self._tokens[self.position :])

    def __repr__(self) -> str:
        return f"TokenSet(position={self.position}, size={len(self._tokens)})"


__all__ = ["TokenSet"]
