import json

import hypothesis.strategies as st
from hypothesis import given

from spew.spew_ast import (
    Block,
    ConditionBlock,
    Function,
    FunctionArgument,
    FunctionStub,
    Identifier,
    Implementation,
    Operation,
    Struct,
    StructProperty,
    Trait,
    Value,
    Variable,
)
from spew.spew_constants import ModifierKind, Operator
from spew.spew_lexer import Literal
from spew.spew_parser import parse
from spew.spew_types import BUILTIN_TYPES, DataType


def test_identifier_repr() -> None:
    assert repr(Identifier("x")) == "Identifier(name='x')"


def test_struct_repr() -> None:
    node = Struct("P", [StructProperty("x", [], DataType("num"))])
    assert repr(node) == (
        "Struct(name='P', properties=[StructProperty(name='x', modifiers=[], "
        "type_of=DataType(num))])"
    )


def test_eq_compares_fields_and_position() -> None:
    assert Identifier("x", 1, 2) == Identifier("x", 1, 2)
    assert Identifier("x", 1, 2) != Identifier("y", 1, 2)
    assert Identifier("x", 1, 2) != Identifier("x", 1, 3)


def test_eq_requires_same_node_type() -> None:
    assert Trait("A") != Struct("A")
    assert Identifier("x") != "x"


def test_nodes_are_unhashable() -> None:
    try:
        hash(Identifier("x"))
    except TypeError:
        pass
    else:
        raise AssertionError("ASTNode should not be hashable")


def test_unary_operation_has_no_right() -> None:
    node = Operation(Identifier("a"), Operator.MINUS)
    assert node.right is None
    assert node.to_dict()["right"] is None


def test_default_lists_are_not_shared() -> None:
    a, b = Block(), Block()
    a.body.append(Identifier("x"))
    assert b.body == []


def test_condition_block_to_dict() -> None:
    cond = Operation(Identifier("a"), Operator.EQUALS, Value(Literal.boolean(True)))
    node = ConditionBlock([cond], [Variable("x")])
    d = node.to_dict()
    assert d["kind"] == "condition_block"
    assert d["condition"][0]["operator"] == "=="
    assert d["condition"][0]["right"]["literal"] == {"kind": "boolean", "value": True}
    assert d["body"][0]["kind"] == "variable"


def test_function_to_dict() -> None:
    stub = FunctionStub(
        "f",
        [ModifierKind.PUBLIC],
        [FunctionArgument("a", BUILTIN_TYPES.make("num"))],
        BUILTIN_TYPES.make("str", nullable=True),
        line=1,
        col=1,
    )
    d = Implementation([Function(stub, [Block()])]).to_dict()
    func = d["functions"][0]
    assert func["stub"]["modifiers"] == ["pub"]
    assert func["stub"]["arguments"][0]["data_type"]["name"] == "num"
    assert func["stub"]["return_type"] == {
        "name": "str",
        "nullable": True,
        "inherits": ["any", "obj"],
    }
    assert func["body"] == [{"kind": "block", "line": 0, "col": 0, "body": []}]


def test_parsed_tree_is_json_serializable() -> None:
    source = """
    struct Point { pub x: num, y: num? }
    pub fun scale(p: Point, k: num) -> Point { let mut q = p * k }
    const origin: Point = null
    trait Shape {}
    """
    text = json.dumps([node.to_dict() for node in parse(source)])
    decoded = json.loads(text)
    assert [d["kind"] for d in decoded] == ["struct", "function", "variable", "trait"]
    assert decoded[2]["initializer"]["literal"] == {"kind": "null", "value": None}


@given(st.text(min_size=1), st.integers(0, 100), st.integers(0, 100))  # type: ignore[misc]
def test_identifier_eq_same_name(name: str, line: int, col: int) -> None:
    assert Identifier(name, line, col) == Identifier(name, line, col)


@given(st.text(min_size=1), st.text(min_size=1))  # type: ignore[misc]
def test_trait_eq_different_names(a: str, b: str) -> None:
    assert (Trait(a) == Trait(b)) == (a == b)
