import pytest
from hypothesis import given
from hypothesis import strategies as st
from hypothesis.strategies import composite

from spew.spew_ast import (
    Block,
    Function,
    FunctionStub,
    Identifier,
    Operation,
    Struct,
    Trait,
    Value,
    Variable,
)
from spew.spew_constants import ModifierKind, Operator, reserved_words
from spew.spew_errors import (
    IncompleteError,
    NotSupportedError,
    ParseError,
    UnexpectedTokenError,
)
from spew.spew_lexer import Literal, TokenType, tokenize
from spew.spew_parser import Parser, parse
from spew.spew_tokenset import TokenSet
from spew.spew_types import BUILTIN_TYPES, DataType

identifiers = st.from_regex(r"[A-Za-z][A-Za-z0-9_]{0,10}", fullmatch=True).filter(
    lambda s: s not in reserved_words
)


@composite
def struct_sources(draw: st.DrawFn) -> tuple[str, str, list[tuple[str, str, bool]]]:
    name = draw(identifiers)
    props = draw(
        st.lists(
            st.tuples(identifiers, identifiers, st.booleans()),
            min_size=1,
            max_size=6,
        )
    )
    body = ", ".join(f"{p}: {t}{'?' if nullable else ''}" for p, t, nullable in props)
    return f"struct {name} {{ {body} }}", name, props


# ----------------------------------------------------------------------
# Structs
# ----------------------------------------------------------------------


def test_struct_scenario() -> None:
    ast = parse("// a comment\nstruct Point { x: num, y: num? }")
    assert len(ast) == 1
    node = ast[0]
    assert isinstance(node, Struct)
    assert node.name == "Point"
    assert [(p.name, p.type_of.name, p.type_of.nullable) for p in node.properties] == [
        ("x", "num", False),
        ("y", "num", True),
    ]
    assert (node.line, node.col) == (2, 1)


@given(struct_sources())  # type: ignore[misc]
def test_struct_preserves_property_order(
    case: tuple[str, str, list[tuple[str, str, bool]]],
) -> None:
    source, name, props = case
    (node,) = parse(source)
    assert isinstance(node, Struct)
    assert node.name == name
    assert [(p.name, p.type_of.name, p.type_of.nullable) for p in node.properties] == props


def test_struct_properties_without_commas() -> None:
    (node,) = parse("struct A { x: num\n y: str }")
    assert [p.name for p in node.properties] == ["x", "y"]  # type: ignore[attr-defined]


def test_empty_struct() -> None:
    assert parse("struct Empty {}") == [Struct("Empty", [], line=1, col=1)]


def test_struct_property_modifiers() -> None:
    (node,) = parse("struct A { pub mut x: num }")
    assert node.properties[0].modifiers == [ModifierKind.PUBLIC, ModifierKind.MUTABLE]  # type: ignore[attr-defined]


def test_struct_property_types_come_from_registry() -> None:
    (node,) = parse("struct A { s: str }")
    assert node.properties[0].type_of == BUILTIN_TYPES.make("str")  # type: ignore[attr-defined]
    assert node.properties[0].type_of.inherits == frozenset({"obj", "any"})  # type: ignore[attr-defined]


def test_each_property_owns_its_type() -> None:
    (node,) = parse("struct A { a: num, b: num }")
    a, b = node.properties  # type: ignore[attr-defined]
    assert a.type_of == b.type_of
    assert a.type_of is not b.type_of


def test_struct_missing_type_and_brace_fails() -> None:
    with pytest.raises((UnexpectedTokenError, IncompleteError)):
        parse("struct Foo { bar")


def test_struct_unclosed_body_is_unexpected_none() -> None:
    with pytest.raises(UnexpectedTokenError) as excinfo:
        parse("struct Foo { bar: num")
    assert excinfo.value.token is None


@pytest.mark.parametrize("source", ["struct A { pub", "struct A { x: num, pub mut"])
def test_struct_body_ending_after_modifiers_is_unexpected_none(source: str) -> None:
    with pytest.raises(UnexpectedTokenError) as excinfo:
        parse(source)
    assert excinfo.value.token is None
    assert "'}' to close struct body" in str(excinfo.value)


def test_struct_bad_member_token() -> None:
    with pytest.raises(UnexpectedTokenError) as excinfo:
        parse("struct Foo { 1 }")
    assert excinfo.value.token is not None
    assert excinfo.value.token.type is TokenType.LITERAL
    assert (excinfo.value.line, excinfo.value.col) == (1, 14)


def test_struct_missing_name() -> None:
    with pytest.raises(IncompleteError):
        parse("struct")
    with pytest.raises(UnexpectedTokenError):
        parse("struct 5 {}")


def test_struct_missing_open_brace() -> None:
    with pytest.raises(UnexpectedTokenError, match="'\\{' after struct name"):
        parse("struct A x: num }")


def test_struct_missing_colon() -> None:
    with pytest.raises(UnexpectedTokenError, match="':' after property name"):
        parse("struct A { x num }")


def test_datatype_requires_identifier() -> None:
    with pytest.raises(UnexpectedTokenError, match="a type name"):
        parse("struct A { x: ? }")


def test_comments_inside_struct_are_ignored() -> None:
    (node,) = parse("struct A { // first\n x: num, /* second */ y: str }")
    assert [p.name for p in node.properties] == ["x", "y"]  # type: ignore[attr-defined]


# ----------------------------------------------------------------------
# Functions
# ----------------------------------------------------------------------


def test_function_stub_scenario() -> None:
    (node,) = parse("fun add(a: num) -> num")
    assert isinstance(node, FunctionStub)
    assert node.name == "add"
    assert [(a.name, a.data_type.name) for a in node.arguments] == [("a", "num")]
    assert node.return_type is not None
    assert node.return_type.name == "num"
    assert node.return_type.nullable is False


def test_function_stub_without_arguments_or_return() -> None:
    (node,) = parse("fun tick()")
    assert node == FunctionStub("tick", [], [], None, line=1, col=1)


def test_function_stub_multiple_arguments() -> None:
    (node,) = parse("fun mix(a: num, b: str?, c: Point) -> bool?")
    assert [(a.name, a.data_type.name, a.data_type.nullable) for a in node.arguments] == [  # type: ignore[attr-defined]
        ("a", "num", False),
        ("b", "str", True),
        ("c", "Point", False),
    ]
    assert node.return_type == DataType("bool", True, {"obj", "any"})  # type: ignore[attr-defined]


def test_function_modifiers() -> None:
    (node,) = parse("pub inline fun f()")
    assert node.modifiers == [ModifierKind.PUBLIC, ModifierKind.INLINE]  # type: ignore[attr-defined]


def test_modifiers_reset_between_declarations() -> None:
    first, second = parse("pub fun f() fun g()")
    assert first.modifiers == [ModifierKind.PUBLIC]  # type: ignore[attr-defined]
    assert second.modifiers == []  # type: ignore[attr-defined]


def test_arrow_requires_right_angle() -> None:
    with pytest.raises(UnexpectedTokenError, match="'>' to complete '->'"):
        parse("fun f() - num")


def test_arrow_without_type_is_incomplete() -> None:
    with pytest.raises(IncompleteError):
        parse("fun f() ->")


def test_function_argument_errors() -> None:
    with pytest.raises(UnexpectedTokenError):
        parse("fun f(1)")
    with pytest.raises(UnexpectedTokenError, match="',' or '\\)'"):
        parse("fun f(a: num b: num)")
    with pytest.raises(IncompleteError):
        parse("fun f(a: num")
    with pytest.raises(UnexpectedTokenError):
        parse("fun f(a: num,)")


def test_function_with_body() -> None:
    (node,) = parse("fun f(a: num) -> num { let x = a { let y = 2 } }")
    assert isinstance(node, Function)
    assert node.stub.name == "f"
    assert isinstance(node.body[0], Variable)
    assert isinstance(node.body[1], Block)
    assert node.body[1].body[0].name == "y"  # type: ignore[attr-defined]


def test_function_body_unclosed() -> None:
    with pytest.raises(UnexpectedTokenError) as excinfo:
        parse("fun f() { let x = 1")
    assert excinfo.value.token is None


def test_function_body_rejects_nested_function() -> None:
    with pytest.raises(NotSupportedError, match="'fun' inside a block"):
        parse("fun f() { fun g() }")


def test_function_body_rejects_stray_tokens() -> None:
    with pytest.raises(UnexpectedTokenError):
        parse("fun f() { x }")


def test_function_body_dangling_modifier() -> None:
    with pytest.raises(UnexpectedTokenError, match="after modifiers"):
        parse("fun f() { pub }")


# ----------------------------------------------------------------------
# Variables
# ----------------------------------------------------------------------


def test_let_without_initializer() -> None:
    (node,) = parse("let x")
    assert node == Variable("x", [], None, None, False, line=1, col=1)


def test_typed_let_with_modifiers() -> None:
    (node,) = parse("pub let mut count: num? = 0")
    assert isinstance(node, Variable)
    assert node.modifiers == [ModifierKind.PUBLIC, ModifierKind.MUTABLE]
    assert node.data_type == BUILTIN_TYPES.make("num", nullable=True)
    assert node.initializer == Value(Literal.number("0"), line=1, col=27)


def test_initializer_folds_left_to_right() -> None:
    (node,) = parse("let x = a + 1 * b")
    init = node.initializer  # type: ignore[attr-defined]
    assert isinstance(init, Operation)
    assert init.operator is Operator.MULTIPLY
    assert isinstance(init.left, Operation)
    assert init.left.operator is Operator.PLUS
    assert init.left.left == Identifier("a", line=1, col=9)
    assert init.right == Identifier("b", line=1, col=17)


@pytest.mark.parametrize(
    "source,operator",
    [
        ("a == b", Operator.EQUALS),
        ("a && b", Operator.AND_AND),
        ("a || b", Operator.OR_OR),
        ("a & b", Operator.AND),
        ("a | b", Operator.OR),
        ("a - b", Operator.MINUS),
    ],
)
def test_initializer_operators(source: str, operator: Operator) -> None:
    (node,) = parse(f"let x = {source}")
    assert node.initializer.operator is operator  # type: ignore[attr-defined]


def test_unary_minus() -> None:
    (node,) = parse("let x = -1")
    init = node.initializer  # type: ignore[attr-defined]
    assert isinstance(init, Operation)
    assert init.operator is Operator.MINUS
    assert init.right is None
    assert init.left == Value(Literal.number("1"), line=1, col=10)


def test_initializer_stops_before_next_declaration() -> None:
    first, second = parse("let a = 1\nlet b = true")
    assert first.initializer == Value(Literal.number("1"), line=1, col=9)  # type: ignore[attr-defined]
    assert second.initializer == Value(Literal.boolean(True), line=2, col=9)  # type: ignore[attr-defined]


def test_initializer_leaves_non_operator_symbol() -> None:
    (node,) = parse("fun f() { let a = b }")
    assert node.body[0].initializer == Identifier("b", line=1, col=19)  # type: ignore[attr-defined]


def test_const_requires_initializer() -> None:
    (node,) = parse("const size = 10")
    assert node.constant is True  # type: ignore[attr-defined]
    with pytest.raises(IncompleteError):
        parse("const size")
    with pytest.raises(UnexpectedTokenError):
        parse("const size struct A {}")


def test_initializer_requires_operand() -> None:
    with pytest.raises(IncompleteError):
        parse("let x =")
    with pytest.raises(UnexpectedTokenError, match="an identifier or literal"):
        parse("let x = (")


# ----------------------------------------------------------------------
# Traits, unsupported constructs and top level
# ----------------------------------------------------------------------


def test_empty_trait() -> None:
    assert parse("trait Shape {}") == [Trait("Shape", line=1, col=1)]


def test_trait_body_not_supported() -> None:
    with pytest.raises(NotSupportedError, match="trait body"):
        parse("trait Shape { fun area() -> num }")


def test_trait_unclosed() -> None:
    with pytest.raises(UnexpectedTokenError) as excinfo:
        parse("trait Shape {")
    assert excinfo.value.token is None


@pytest.mark.parametrize("source", ["impl Shape {}", "for x"])
def test_unsupported_keywords(source: str) -> None:
    with pytest.raises(NotSupportedError):
        parse(source)


def test_modifier_on_struct_is_rejected() -> None:
    with pytest.raises(UnexpectedTokenError, match="after modifiers"):
        parse("pub struct A {}")


def test_dangling_modifier_is_incomplete() -> None:
    with pytest.raises(IncompleteError):
        parse("struct A {} pub")
    with pytest.raises(UnexpectedTokenError):
        parse("pub x")


def test_top_level_stray_tokens_are_ignored() -> None:
    ast = parse('hello 42 "s" + struct A {}')
    assert [type(n) for n in ast] == [Struct]


def test_top_level_stray_tokens_strict() -> None:
    with pytest.raises(UnexpectedTokenError, match="a declaration keyword"):
        parse("hello struct A {}", strict=True)


def test_first_error_aborts_whole_parse() -> None:
    parser = Parser(tokenize("struct A {} struct B { x }"))
    with pytest.raises(ParseError):
        parser.parse()


def test_parser_accepts_token_set() -> None:
    ts = TokenSet(tokenize("let a let b"))
    assert [n.name for n in Parser(ts).parse()] == ["a", "b"]  # type: ignore[attr-defined]
    assert ts.at_end()


def test_parser_uses_given_registry() -> None:
    registry = BUILTIN_TYPES.extend({"Point": ("obj",)})
    (node,) = parse("fun origin() -> Point", registry=registry)
    assert node.return_type.compatible_with(registry.make("any"))  # type: ignore[attr-defined]


def test_parse_empty_source() -> None:
    assert parse("") == []
    assert parse("// only a comment") == []


def test_ordered_declarations() -> None:
    source = """
    struct Point { x: num, y: num }
    pub fun len(p: Point) -> num
    trait Shape {}
    let origin: Point
    """
    kinds = [n.kind for n in parse(source)]
    assert kinds == ["struct", "function_stub", "trait", "variable"]
