"""
Defines the abstract syntax tree (AST) node structure for the Spew programming language.

Classes:
    ASTNode:
        Base class of every node. Tracks the source line/column and provides
        structural equality, a readable repr and `to_dict()` serialization
        driven by each subclass's `_fields`.

    Declarations:
        Variable, Struct, StructProperty, FunctionStub, FunctionArgument,
        Function, Implementation, Trait.

    Statements and expressions:
        Block, ConditionBlock, Operation, Identifier, Value.

    ASTDict:
        TypedDict shape of the common keys of a serialized node.

Every declaration site owns its own `DataType` values; nodes never share them.

Usage:
    The parser produces a list of these nodes. `to_dict()` gives a plain
    structure suitable for JSON output or for inspection in tests.

Example:
    node = Struct("Point", [StructProperty("x", [], BUILTIN_TYPES.make("num"))])
"""

from enum import Enum
from typing import Any, TypedDict

from spew.spew_constants import ModifierKind, Operator
from spew.spew_lexer import Literal
from spew.spew_types import DataType


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of the keys every serialized ASTNode carries.

    Fields:
        kind (str): The node kind (e.g., "struct", "function_stub").
        line (int): Line number in the source code where the node originates.
        col (int): Column number in the source code where the node originates.

    The remaining keys are the node's own fields, serialized recursively.
    """

    kind: str
    line: int
    col: int


def _serialize(value: Any) -> Any:
    if isinstance(value, (ASTNode, DataType, Literal)):
        return value.to_dict()
    if isinstance(value, list):
        return [_serialize(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    return value


class ASTNode:
    """
    Base class for nodes of the Spew syntax tree.

    Subclasses list their payload attributes in `_fields`; equality, repr and
    serialization are derived from that list.

    Attributes:
        kind (str): Name of the construct, set per subclass.
        line (int): Source line number (default is 0).
        col (int): Source column number (default is 0).
    """

    kind: str = "node"
    _fields: tuple[str, ...] = ()

    def __init__(self, line: int = 0, col: int = 0) -> None:
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        parts = [f"{name}={getattr(self, name)!r}" for name in self._fields]
        return f"{type(self).__name__}({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return False
        return (
            self.line == other.line
            and self.col == other.col
            and all(getattr(self, f) == getattr(other, f) for f in self._fields)
        )

    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> ASTDict:
        out: dict[str, Any] = {"kind": self.kind, "line": self.line, "col": self.col}
        for name in self._fields:
            out[name] = _serialize(getattr(self, name))
        return out  # type: ignore[return-value]


class Identifier(ASTNode):
    kind = "identifier"
    _fields = ("name",)

    def __init__(self, name: str, line: int = 0, col: int = 0) -> None:
        super().__init__(line, col)
        self.name = name


class Value(ASTNode):
    """A literal operand."""

    kind = "value"
    _fields = ("literal",)

    def __init__(self, literal: Literal, line: int = 0, col: int = 0) -> None:
        super().__init__(line, col)
        self.literal = literal


class Operation(ASTNode):
    """Binary operation, or unary when `right` is None."""

    kind = "operation"
    _fields = ("left", "operator", "right")

    def __init__(
        self,
        left: ASTNode,
        operator: Operator,
        right: ASTNode | None = None,
        line: int = 0,
        col: int = 0,
    ) -> None:
        super().__init__(line, col)
        self.left = left
        self.operator = operator
        self.right = right


class Variable(ASTNode):
    """
    A declared binding.

    Args:
        name (str): The bound name.
        modifiers (list[ModifierKind]): Modifiers in source order.
        initializer (ASTNode, optional): The assigned expression, if any.
        data_type (DataType, optional): The declared type, if written.
        constant (bool): True for `const` declarations.
    """

    kind = "variable"
    _fields = ("name", "modifiers", "data_type", "initializer", "constant")

    def __init__(
        self,
        name: str,
        modifiers: list[ModifierKind] | None = None,
        initializer: ASTNode | None = None,
        data_type: DataType | None = None,
        constant: bool = False,
        line: int = 0,
        col: int = 0,
    ) -> None:
        super().__init__(line, col)
        self.name = name
        self.modifiers: list[ModifierKind] = modifiers or []
        self.initializer = initializer
        self.data_type = data_type
        self.constant = constant


class Block(ASTNode):
    kind = "block"
    _fields = ("body",)

    def __init__(self, body: list[ASTNode] | None = None, line: int = 0, col: int = 0) -> None:
        super().__init__(line, col)
        self.body: list[ASTNode] = body or []


class ConditionBlock(ASTNode):
    """One if / elseif / else arm. Chaining arms together is left to later stages."""

    kind = "condition_block"
    _fields = ("condition", "body")

    def __init__(
        self,
        condition: list[Operation] | None = None,
        body: list[ASTNode] | None = None,
        line: int = 0,
        col: int = 0,
    ) -> None:
        super().__init__(line, col)
        self.condition: list[Operation] = condition or []
        self.body: list[ASTNode] = body or []


class StructProperty(ASTNode):
    kind = "property"
    _fields = ("name", "modifiers", "type_of")

    def __init__(
        self,
        name: str,
        modifiers: list[ModifierKind],
        type_of: DataType,
        line: int = 0,
        col: int = 0,
    ) -> None:
        super().__init__(line, col)
        self.name = name
        self.modifiers = modifiers
        self.type_of = type_of


class Struct(ASTNode):
    kind = "struct"
    _fields = ("name", "properties")

    def __init__(
        self,
        name: str,
        properties: list[StructProperty] | None = None,
        line: int = 0,
        col: int = 0,
    ) -> None:
        super().__init__(line, col)
        self.name = name
        self.properties: list[StructProperty] = properties or []


class FunctionArgument(ASTNode):
    kind = "argument"
    _fields = ("name", "data_type")

    def __init__(self, name: str, data_type: DataType, line: int = 0, col: int = 0) -> None:
        super().__init__(line, col)
        self.name = name
        self.data_type = data_type


class FunctionStub(ASTNode):
    """A function signature: name, modifiers, arguments and optional return type."""

    kind = "function_stub"
    _fields = ("name", "modifiers", "arguments", "return_type")

    def __init__(
        self,
        name: str,
        modifiers: list[ModifierKind] | None = None,
        arguments: list[FunctionArgument] | None = None,
        return_type: DataType | None = None,
        line: int = 0,
        col: int = 0,
    ) -> None:
        super().__init__(line, col)
        self.name = name
        self.modifiers: list[ModifierKind] = modifiers or []
        self.arguments: list[FunctionArgument] = arguments or []
        self.return_type = return_type


class Function(ASTNode):
    kind = "function"
    _fields = ("stub", "body")

    def __init__(
        self,
        stub: FunctionStub,
        body: list[ASTNode] | None = None,
        line: int = 0,
        col: int = 0,
    ) -> None:
        super().__init__(line, col)
        self.stub = stub
        self.body: list[ASTNode] = body or []


class Implementation(ASTNode):
    kind = "implementation"
    _fields = ("functions",)

    def __init__(
        self, functions: list[Function] | None = None, line: int = 0, col: int = 0
    ) -> None:
        super().__init__(line, col)
        self.functions: list[Function] = functions or []


class Trait(ASTNode):
    """A trait declaration. Only the empty body form is parsed."""

    kind = "trait"
    _fields = ("name",)

    def __init__(self, name: str, line: int = 0, col: int = 0) -> None:
        super().__init__(line, col)
        self.name = name


__all__ = [
    "ASTDict",
    "ASTNode",
    "Block",
    "ConditionBlock",
    "Function",
    "FunctionArgument",
    "FunctionStub",
    "Identifier",
    "Implementation",
    "Operation",
    "Struct",
    "StructProperty",
    "Trait",
    "Value",
    "Variable",
]
