"""
Spew Language Parser

Parses Spew source tokens into a list of declaration nodes.

This module implements a recursive-descent parser over a `TokenSet`. Each
grammar construct has its own `parse_*` method that consumes tokens directly
and either returns a complete node or raises; there is no recovery and no
partial result.

Supported Constructs
--------------------
- Structs: `struct Point { x: num, pub y: num? }`
- Functions: `pub fun add(a: num, b: num) -> num` with an optional `{ ... }` body
- Variables: `let mut x: num = a + 1`, `const size = 10`
- Traits: `trait Shape {}` (empty bodies only)
- Comments anywhere between tokens are discarded

Not Supported
-------------
`impl` blocks, `for` loops, trait bodies and nested function declarations
raise `NotSupportedError`. Initializer expressions are folded strictly left
to right; there is no operator precedence.

Entry Points
------------
- `Parser.parse()`: Parse a full token stream into top-level nodes.
- `parse()`: Lex and parse a source string in one call.

Raises
------
UnexpectedTokenError
    A token of the wrong kind, or end of input inside a `{ }` body.
IncompleteError
    Input ended while a required token was still expected.
NotSupportedError
    A construct that is recognized but not parsed yet.
"""

from __future__ import annotations

from collections.abc import Callable

from spew.spew_ast import (
    ASTNode,
    Block,
    Function,
    FunctionArgument,
    FunctionStub,
    Identifier,
    Operation,
    Struct,
    StructProperty,
    Trait,
    Value,
    Variable,
)
from spew.spew_constants import (
    KeywordKind,
    ModifierKind,
    Operator,
    SymbolKind,
    operator_pairs,
    operator_symbols,
)
from spew.spew_errors import IncompleteError, NotSupportedError, UnexpectedTokenError
from spew.spew_lexer import Token, TokenType, tokenize
from spew.spew_tokenset import TokenSet
from spew.spew_types import BUILTIN_TYPES, DataType, TypeRegistry

# Declarations that accept leading modifiers.
MODIFIABLE = frozenset({KeywordKind.FUNCTION, KeywordKind.LET, KeywordKind.CONSTANT})


class Parser:
    """
    Spew Parser Class

    Transforms a token stream into a list of declaration nodes. Top-level
    keywords dispatch to a declaration parser; modifiers accumulate until the
    declaration they belong to.

    Attributes
    ----------
    tokens : TokenSet
        The cursor over the input tokens.
    registry : TypeRegistry
        Source of supertype information for every DataType built.
    strict : bool
        When True, identifiers, symbols and literals at top level raise
        instead of being ignored.
    result : list[ASTNode]
        Nodes produced so far, in source order.
    """

    def __init__(
        self,
        tokens: TokenSet | list[Token],
        registry: TypeRegistry = BUILTIN_TYPES,
        strict: bool = False,
    ) -> None:
        self.tokens: TokenSet = tokens if isinstance(tokens, TokenSet) else TokenSet(tokens)
        self.registry = registry
        self.strict = strict
        self.result: list[ASTNode] = []
        self._modifiers: list[ModifierKind] = []

        self._declarations: dict[KeywordKind, Callable[[Token], ASTNode]] = {
            KeywordKind.STRUCT: self.parse_struct,
            KeywordKind.FUNCTION: self.parse_function_stub,
            KeywordKind.TRAIT: self.parse_trait,
            KeywordKind.LET: self.parse_variable,
            KeywordKind.CONSTANT: self.parse_variable,
        }

    # ------------------------------------------------------------------
    # Token helpers
    # ------------------------------------------------------------------

    def _next(self) -> Token | None:
        """Consume the next non-comment token."""
        while True:
            tok = self.tokens.next_token()
            if tok is None or tok.type is not TokenType.COMMENT:
                return tok

    def _peek(self) -> Token | None:
        """Look at the next non-comment token; comments in front of it are dropped."""
        while True:
            tok = self.tokens.peek()
            if tok is None or tok.type is not TokenType.COMMENT:
                return tok
            self.tokens.next_token()

    def _at_symbol(self, kind: SymbolKind) -> bool:
        tok = self._peek()
        return tok is not None and tok.is_symbol(kind)

    def expect_token(self, expected: str) -> Token:
        tok = self._next()
        if tok is None:
            raise IncompleteError(expected)
        return tok

    def expect_ident(self, expected: str) -> Token:
        tok = self.expect_token(expected)
        if tok.type is not TokenType.IDENT:
            raise UnexpectedTokenError(tok, expected)
        return tok

    def expect_symbol(self, kind: SymbolKind, expected: str) -> Token:
        tok = self.expect_token(expected)
        if not tok.is_symbol(kind):
            raise UnexpectedTokenError(tok, expected)
        return tok

    def _take_modifiers(self) -> list[ModifierKind]:
        modifiers, self._modifiers = self._modifiers, []
        return modifiers

    # ------------------------------------------------------------------
    # Top level
    # ------------------------------------------------------------------

    def parse(self) -> list[ASTNode]:
        """Parse the whole token stream and return the top-level nodes."""
        while True:
            tok = self._next()
            if tok is None:
                break

            if tok.type is TokenType.KEYWORD:
                self.parse_keyword(tok)
                continue

            if self._modifiers:
                raise UnexpectedTokenError(tok, "a declaration after modifiers")
            if self.strict:
                raise UnexpectedTokenError(tok, "a declaration keyword")

        if self._modifiers:
            raise IncompleteError("a declaration after modifiers")
        return list(self.result)

    def parse_keyword(self, tok: Token) -> None:
        """Dispatch one top-level keyword token."""
        kind = tok.keyword_kind
        if kind is KeywordKind.MODIFIER:
            self._modifiers.append(tok.value)  # type: ignore[arg-type]
            return

        handler = self._declarations.get(kind)  # type: ignore[arg-type]
        if handler is None:
            raise NotSupportedError(f"'{tok.value.value}' declaration", tok)  # type: ignore[union-attr]
        if self._modifiers and kind not in MODIFIABLE:
            raise UnexpectedTokenError(tok, "a function or variable declaration after modifiers")
        self.result.append(handler(tok))

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def parse_datatype(self) -> DataType:
        """Parse `Name` or `Name?` into a fresh DataType."""
        tok = self._next()
        if tok is None:
            raise IncompleteError("a type name")
        if tok.type is not TokenType.IDENT:
            raise UnexpectedTokenError(tok, "a type name")

        nullable = self._at_symbol(SymbolKind.QUESTION)
        if nullable:
            self._next()
        return self.registry.make(tok.value, nullable)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def parse_struct(self, start: Token) -> Struct:
        """Parse a struct declaration; the `struct` keyword is already consumed."""
        name_tok = self.expect_ident("a struct name")
        self.expect_symbol(SymbolKind.OPEN_CURLY, "'{' after struct name")

        properties: list[StructProperty] = []
        while True:
            tok = self._next()
            if tok is None:
                raise UnexpectedTokenError(None, "'}' to close struct body")
            if tok.is_symbol(SymbolKind.CLOSE_CURLY):
                break

            modifiers: list[ModifierKind] = []
            while tok.keyword_kind is KeywordKind.MODIFIER:
                modifiers.append(tok.value)  # type: ignore[arg-type]
                nxt = self._next()
                if nxt is None:
                    raise UnexpectedTokenError(None, "'}' to close struct body")
                tok = nxt

            if tok.type is not TokenType.IDENT:
                raise UnexpectedTokenError(tok, "a property name or '}'")
            self.expect_symbol(SymbolKind.COLON, "':' after property name")
            type_of = self.parse_datatype()
            properties.append(
                StructProperty(tok.value, modifiers, type_of, line=tok.line, col=tok.col)  # type: ignore[arg-type]
            )

            if self._at_symbol(SymbolKind.COMMA):
                self._next()

        return Struct(name_tok.value, properties, line=start.line, col=start.col)  # type: ignore[arg-type]

    def parse_function_stub(self, start: Token) -> FunctionStub | Function:
        """Parse a function signature, and its body when one follows."""
        modifiers = self._take_modifiers()
        name_tok = self.expect_ident("a function name")
        self.expect_symbol(SymbolKind.OPEN_PAREN, "'(' after function name")

        arguments: list[FunctionArgument] = []
        tok = self.expect_token("an argument or ')'")
        if not tok.is_symbol(SymbolKind.CLOSE_PAREN):
            while True:
                if tok.type is not TokenType.IDENT:
                    raise UnexpectedTokenError(tok, "an argument name or ')'")
                self.expect_symbol(SymbolKind.COLON, "':' after argument name")
                data_type = self.parse_datatype()
                arguments.append(
                    FunctionArgument(tok.value, data_type, line=tok.line, col=tok.col)  # type: ignore[arg-type]
                )

                sep = self.expect_token("',' or ')' after argument")
                if sep.is_symbol(SymbolKind.CLOSE_PAREN):
                    break
                if not sep.is_symbol(SymbolKind.COMMA):
                    raise UnexpectedTokenError(sep, "',' or ')' after argument")
                tok = self.expect_token("an argument name")

        return_type: DataType | None = None
        if self._at_symbol(SymbolKind.MINUS):
            self._next()
            self.expect_symbol(SymbolKind.RIGHT, "'>' to complete '->'")
            return_type = self.parse_datatype()

        stub = FunctionStub(
            name_tok.value,  # type: ignore[arg-type]
            modifiers,
            arguments,
            return_type,
            line=start.line,
            col=start.col,
        )
        if self._at_symbol(SymbolKind.OPEN_CURLY):
            body = self.parse_block()
            return Function(stub, body.body, line=start.line, col=start.col)
        return stub

    def parse_variable(self, start: Token) -> Variable:
        """Parse a `let` or `const` declaration; the keyword is already consumed."""
        constant = start.is_keyword(KeywordKind.CONSTANT)
        modifiers = self._take_modifiers()

        tok = self.expect_token("a variable name")
        while tok.keyword_kind is KeywordKind.MODIFIER:
            modifiers.append(tok.value)  # type: ignore[arg-type]
            tok = self.expect_token("a variable name")
        if tok.type is not TokenType.IDENT:
            raise UnexpectedTokenError(tok, "a variable name")

        data_type: DataType | None = None
        if self._at_symbol(SymbolKind.COLON):
            self._next()
            data_type = self.parse_datatype()

        initializer: ASTNode | None = None
        if self._at_symbol(SymbolKind.EQUALS):
            self._next()
            initializer = self.parse_initializer()
        elif constant:
            nxt = self._peek()
            if nxt is None:
                raise IncompleteError("'=' and a value for const declaration")
            raise UnexpectedTokenError(nxt, "'=' and a value for const declaration")

        return Variable(
            tok.value,  # type: ignore[arg-type]
            modifiers,
            initializer,
            data_type,
            constant,
            line=start.line,
            col=start.col,
        )

    def parse_trait(self, start: Token) -> Trait:
        """Parse `trait Name {}`. Trait members are not supported yet."""
        name_tok = self.expect_ident("a trait name")
        self.expect_symbol(SymbolKind.OPEN_CURLY, "'{' after trait name")
        tok = self._next()
        if tok is None:
            raise UnexpectedTokenError(None, "'}' to close trait body")
        if not tok.is_symbol(SymbolKind.CLOSE_CURLY):
            raise NotSupportedError("trait body", tok)
        return Trait(name_tok.value, line=start.line, col=start.col)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Blocks and expressions
    # ------------------------------------------------------------------

    def parse_block(self) -> Block:
        """Parse a `{}`-enclosed block of variable declarations and nested blocks."""
        open_tok = self.expect_symbol(SymbolKind.OPEN_CURLY, "'{' to open block")

        body: list[ASTNode] = []
        while True:
            tok = self._peek()
            if tok is None:
                raise UnexpectedTokenError(None, "'}' to close block")

            if tok.is_symbol(SymbolKind.CLOSE_CURLY) or tok.is_symbol(SymbolKind.OPEN_CURLY):
                if self._modifiers:
                    raise UnexpectedTokenError(tok, "a declaration after modifiers")
                if tok.is_symbol(SymbolKind.CLOSE_CURLY):
                    self._next()
                    break
                body.append(self.parse_block())
                continue

            self._next()
            kind = tok.keyword_kind
            if kind is KeywordKind.MODIFIER:
                self._modifiers.append(tok.value)  # type: ignore[arg-type]
            elif kind in (KeywordKind.LET, KeywordKind.CONSTANT):
                body.append(self.parse_variable(tok))
            elif kind is not None:
                raise NotSupportedError(f"'{tok.value.value}' inside a block", tok)  # type: ignore[union-attr]
            else:
                raise UnexpectedTokenError(tok, "a variable declaration, a block or '}'")

        return Block(body, line=open_tok.line, col=open_tok.col)

    def parse_initializer(self) -> ASTNode:
        """Parse `operand (operator operand)*`, folded left to right."""
        left = self.parse_operand()
        while True:
            op_tok = self._peek()
            operator = self._match_operator()
            if operator is None:
                return left
            right = self.parse_operand()
            left = Operation(left, operator, right, line=op_tok.line, col=op_tok.col)  # type: ignore[union-attr]

    def _match_operator(self) -> Operator | None:
        """Consume a one- or two-symbol binary operator if one is next."""
        tok = self._peek()
        if tok is None or tok.type is not TokenType.SYMBOL:
            return None

        self.tokens.next_token()
        follower = self.tokens.peek()
        if follower is not None and follower.type is TokenType.SYMBOL:
            paired = operator_pairs.get((tok.value, follower.value))  # type: ignore[arg-type]
            if paired is not None:
                self.tokens.next_token()
                return paired

        single = operator_symbols.get(tok.value)  # type: ignore[arg-type]
        if single is None:
            self.tokens.unread()
        return single

    def parse_operand(self) -> ASTNode:
        tok = self.expect_token("an operand")
        if tok.type is TokenType.IDENT:
            return Identifier(tok.value, line=tok.line, col=tok.col)  # type: ignore[arg-type]
        if tok.type is TokenType.LITERAL:
            return Value(tok.value, line=tok.line, col=tok.col)  # type: ignore[arg-type]
        if tok.is_symbol(SymbolKind.MINUS):
            return Operation(self.parse_operand(), Operator.MINUS, None, line=tok.line, col=tok.col)
        raise UnexpectedTokenError(tok, "an identifier or literal")


def parse(
    source: str, strict: bool = False, registry: TypeRegistry = BUILTIN_TYPES
) -> list[ASTNode]:
    """Lex and parse `source`, returning its top-level nodes."""
    tokens = tokenize(source, strict=strict)
    return Parser(tokens, registry=registry, strict=strict).parse()


__all__ = ["MODIFIABLE", "Parser", "parse"]
