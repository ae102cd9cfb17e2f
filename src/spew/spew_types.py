"""
Nominal type model for Spew declarations.

Classes:
    DataType: A named type with a nullable qualifier and a set of supertype names.
    TypeRegistry: Immutable mapping from type name to its flattened supertype names.

Compatibility between two types is a one-hop, symmetric test: the names
match, or either name appears in the other's `inherits` set. Transitive
supertypes are accounted for by flattening the set when the `DataType` is
built, which is the registry's job.

Example:
    >>> string = BUILTIN_TYPES.make("str")
    >>> string.compatible_with(BUILTIN_TYPES.make("obj"))
    True
    >>> string.compatible_with(BUILTIN_TYPES.make("num"))
    False
"""

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any


class DataType:
    """
    A nominal type as written at one declaration site.

    Each declaration owns its own instance; nothing is shared between sites.

    Attributes:
        name (str): The type name, never empty.
        nullable (bool): True when the declaration carries the `?` qualifier.
        inherits (frozenset[str]): Names of the supertypes of `name`.
    """

    __slots__ = ("name", "nullable", "inherits")

    def __init__(
        self, name: str, nullable: bool = False, inherits: Iterable[str] = ()
    ) -> None:
        if not name:
            raise ValueError("DataType name must not be empty")
        self.name = name
        self.nullable = nullable
        self.inherits: frozenset[str] = frozenset(inherits)

    def compatible_with(self, other: "DataType") -> bool:
        """Returns True when the two types are interchangeable."""
        return (
            self.name == other.name
            or other.name in self.inherits
            or self.name in other.inherits
        )

    def with_nullable(self, nullable: bool = True) -> "DataType":
        return DataType(self.name, nullable, self.inherits)

    def __repr__(self) -> str:
        suffix = "?" if self.nullable else ""
        return f"DataType({self.name}{suffix})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, DataType)
            and self.name == other.name
            and self.nullable == other.nullable
            and self.inherits == other.inherits
        )

    def __hash__(self) -> int:
        return hash((self.name, self.nullable, self.inherits))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "nullable": self.nullable,
            "inherits": sorted(self.inherits),
        }


def compatible(a: DataType, b: DataType) -> bool:
    return a.compatible_with(b)


class TypeRegistry(Mapping[str, frozenset[str]]):
    """
    Immutable table of known types and their flattened supertypes.

    Built once from a `{name: direct parents}` mapping. Every entry stores the
    transitive closure of its parents, so a `DataType` made from the registry
    satisfies compatibility with any ancestor in one hop.

    Args:
        parents (Mapping[str, Iterable[str]]): Direct supertypes per type name.

    Raises:
        ValueError: If a type lists itself as an ancestor, directly or not, or
            names a parent that is not declared.
    """

    def __init__(self, parents: Mapping[str, Iterable[str]]) -> None:
        direct = {name: tuple(ps) for name, ps in parents.items()}
        for name, ps in direct.items():
            for parent in ps:
                if parent not in direct:
                    raise ValueError(f"Type {name!r} inherits from unknown type {parent!r}")

        flattened: dict[str, frozenset[str]] = {}
        for name in direct:
            flattened[name] = self._flatten(name, direct, (name,))
        self._table: Mapping[str, frozenset[str]] = MappingProxyType(flattened)

    @staticmethod
    def _flatten(
        name: str, direct: dict[str, tuple[str, ...]], trail: tuple[str, ...]
    ) -> frozenset[str]:
        out: set[str] = set()
        for parent in direct[name]:
            if parent in trail:
                raise ValueError(f"Inheritance cycle: {' -> '.join(trail + (parent,))}")
            out.add(parent)
            out |= TypeRegistry._flatten(parent, direct, trail + (parent,))
        return frozenset(out)

    def make(self, name: str, nullable: bool = False) -> DataType:
        """Builds a fresh DataType; unknown names get an empty supertype set."""
        return DataType(name, nullable, self._table.get(name, frozenset()))

    def extend(self, parents: Mapping[str, Iterable[str]]) -> "TypeRegistry":
        """Returns a new registry holding these entries plus `parents`."""
        merged: dict[str, Iterable[str]] = {
            name: self._direct_parents(name) for name in self._table
        }
        merged.update(parents)
        return TypeRegistry(merged)

    def _direct_parents(self, name: str) -> frozenset[str]:
        # A parent is direct when no other ancestor of `name` already covers it.
        ancestors = self._table[name]
        return frozenset(
            p for p in ancestors if not any(p in self._table[q] for q in ancestors)
        )

    def __getitem__(self, name: str) -> frozenset[str]:
        return self._table[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"TypeRegistry({sorted(self._table)})"


BUILTIN_TYPES = TypeRegistry(
    {
        "any": (),
        "obj": ("any",),
        "str": ("obj",),
        "num": ("obj",),
        "bool": ("obj",),
        "arr": ("obj",),
    }
)

__all__ = ["BUILTIN_TYPES", "DataType", "TypeRegistry", "compatible"]
