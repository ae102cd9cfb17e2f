"""
Lexeme vocabulary for the Spew language.

Every table the lexer and parser consult lives here so that both stages agree
on the spelling of the language.

Enums:
    KeywordKind: Reserved words recognized by the lexer.
    ModifierKind: Declaration modifiers, layered on top of keyword recognition.
    SymbolKind: Single-character punctuation and operators.
    LiteralKind: The literal value categories.
    Operator: Operators carried by `Operation` AST nodes.

Tables:
    keyword_hashmap: lexeme -> KeywordKind for reserved words.
    modifier_hashmap: lexeme -> ModifierKind.
    symbol_hashmap: character -> SymbolKind.
    literal_words: lexeme -> (LiteralKind, value) for word-shaped literals.
    operator_symbols: SymbolKind -> Operator for single-symbol operators.
    operator_pairs: (SymbolKind, SymbolKind) -> Operator for doubled operators.
"""

from enum import Enum


class KeywordKind(Enum):
    CONSTANT = "const"
    LET = "let"
    FUNCTION = "fun"
    STATIC = "static"
    STRUCT = "struct"
    IMPLEMENTATION = "impl"
    TRAIT = "trait"
    FOR = "for"
    MODIFIER = "modifier"
    UNKNOWN = "unknown"


class ModifierKind(Enum):
    PUBLIC = "pub"
    STATIC = "static"
    INLINE = "inline"
    COMPILE = "compile"
    MUTABLE = "mut"


class SymbolKind(Enum):
    OPEN_CURLY = "{"
    CLOSE_CURLY = "}"
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    OPEN_SQUARE = "["
    CLOSE_SQUARE = "]"
    PLUS = "+"
    MINUS = "-"
    LEFT = "<"
    RIGHT = ">"
    UNDERSCORE = "_"
    EXCLAMATION = "!"
    EQUALS = "="
    AND = "&"
    PIPE = "|"
    PERIOD = "."
    MULTIPLY = "*"
    PERCENT = "%"
    DIVIDE = "/"
    COLON = ":"
    COMMA = ","
    QUESTION = "?"


class LiteralKind(Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    UNDEFINED = "undefined"


class Operator(Enum):
    EQUALS = "=="
    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    OR = "|"
    XOR = "^"
    AND = "&"
    AND_AND = "&&"
    OR_OR = "||"


# `static` is deliberately absent: the lexeme resolves to ModifierKind.STATIC.
keyword_hashmap: dict[str, KeywordKind] = {
    "const": KeywordKind.CONSTANT,
    "let": KeywordKind.LET,
    "fun": KeywordKind.FUNCTION,
    "struct": KeywordKind.STRUCT,
    "impl": KeywordKind.IMPLEMENTATION,
    "trait": KeywordKind.TRAIT,
    "for": KeywordKind.FOR,
}

modifier_hashmap: dict[str, ModifierKind] = {m.value: m for m in ModifierKind}

symbol_hashmap: dict[str, SymbolKind] = {s.value: s for s in SymbolKind}

literal_words: dict[str, tuple[LiteralKind, bool | None]] = {
    "true": (LiteralKind.BOOLEAN, True),
    "false": (LiteralKind.BOOLEAN, False),
    "null": (LiteralKind.NULL, None),
    "ndef": (LiteralKind.UNDEFINED, None),
}

operator_symbols: dict[SymbolKind, Operator] = {
    SymbolKind.PLUS: Operator.PLUS,
    SymbolKind.MINUS: Operator.MINUS,
    SymbolKind.MULTIPLY: Operator.MULTIPLY,
    SymbolKind.DIVIDE: Operator.DIVIDE,
    SymbolKind.PIPE: Operator.OR,
    SymbolKind.AND: Operator.AND,
}

operator_pairs: dict[tuple[SymbolKind, SymbolKind], Operator] = {
    (SymbolKind.EQUALS, SymbolKind.EQUALS): Operator.EQUALS,
    (SymbolKind.AND, SymbolKind.AND): Operator.AND_AND,
    (SymbolKind.PIPE, SymbolKind.PIPE): Operator.OR_OR,
}

reserved_words: frozenset[str] = frozenset(
    set(keyword_hashmap) | set(modifier_hashmap) | set(literal_words)
)

__all__ = [
    "KeywordKind",
    "LiteralKind",
    "ModifierKind",
    "Operator",
    "SymbolKind",
    "keyword_hashmap",
    "literal_words",
    "modifier_hashmap",
    "operator_pairs",
    "operator_symbols",
    "reserved_words",
    "symbol_hashmap",
]
