"""
Type expressions of the language-neutral AST.

Expressions are frozen dataclasses, so structural equality and hashing come
for free. Every expression also exposes ``sort_key()``, a structural key
that gives all expressions one total order; unions and intersections are
stored deduplicated and sorted by it so rendering is deterministic.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, ClassVar


class PrimitiveKind(IntEnum):
    STRING = 0
    NUMBER = 1
    BOOLEAN = 2
    NULL = 3
    UNDEFINED = 4
    VOID = 5
    ANY = 6
    UNKNOWN = 7
    NEVER = 8

    @property
    def ts_name(self) -> str:
        return self.name.lower()


class TypeExpression:
    """Base class of all type expressions."""

    rank: ClassVar[int]

    def sort_key(self) -> tuple[Any, ...]:
        return (self.rank, self._payload_key())

    def _payload_key(self) -> tuple[Any, ...]:
        raise NotImplementedError

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, TypeExpression):
            return NotImplemented
        return self.sort_key() < other.sort_key()


@dataclass(frozen=True)
class Primitive(TypeExpression):
    kind: PrimitiveKind

    rank: ClassVar[int] = 0

    def _payload_key(self) -> tuple[Any, ...]:
        return (int(self.kind),)


@dataclass(frozen=True)
class Reference(TypeExpression):
    """Nominal reference to a named declaration, optionally applied to type arguments."""

    name: str
    type_arguments: tuple[TypeExpression, ...] = ()

    rank: ClassVar[int] = 1

    def _payload_key(self) -> tuple[Any, ...]:
        return (self.name, tuple(arg.sort_key() for arg in self.type_arguments))


@dataclass(frozen=True)
class ArrayType(TypeExpression):
    element: TypeExpression

    rank: ClassVar[int] = 2

    def _payload_key(self) -> tuple[Any, ...]:
        return (self.element.sort_key(),)


@dataclass(frozen=True)
class TupleType(TypeExpression):
    elements: tuple[TypeExpression, ...]

    rank: ClassVar[int] = 3

    def _payload_key(self) -> tuple[Any, ...]:
        return tuple(element.sort_key() for element in self.elements)


@dataclass(frozen=True)
class ObjectProperty:
    name: str
    type: TypeExpression
    optional: bool = False
    readonly: bool = False

    def sort_key(self) -> tuple[Any, ...]:
        return (self.name, self.type.sort_key(), self.optional, self.readonly)


@dataclass(frozen=True)
class ObjectType(TypeExpression):
    """Inline object literal type; property order is preserved."""

    properties: tuple[ObjectProperty, ...]

    rank: ClassVar[int] = 4

    def _payload_key(self) -> tuple[Any, ...]:
        return tuple(prop.sort_key() for prop in self.properties)


@dataclass(frozen=True)
class UnionType(TypeExpression):
    members: tuple[TypeExpression, ...]

    rank: ClassVar[int] = 5

    def _payload_key(self) -> tuple[Any, ...]:
        return tuple(member.sort_key() for member in self.members)


@dataclass(frozen=True)
class IntersectionType(TypeExpression):
    members: tuple[TypeExpression, ...]

    rank: ClassVar[int] = 6

    def _payload_key(self) -> tuple[Any, ...]:
        return tuple(member.sort_key() for member in self.members)


@dataclass(frozen=True)
class FunctionParameter:
    name: str
    type: TypeExpression
    optional: bool = False

    def sort_key(self) -> tuple[Any, ...]:
        return (self.name, self.type.sort_key(), self.optional)


@dataclass(frozen=True)
class FunctionType(TypeExpression):
    parameters: tuple[FunctionParameter, ...]
    return_type: TypeExpression | None = None

    rank: ClassVar[int] = 7

    def _payload_key(self) -> tuple[Any, ...]:
        return (
            tuple(param.sort_key() for param in self.parameters),
            self.return_type.sort_key() if self.return_type else (),
        )


@dataclass(frozen=True)
class Literal(TypeExpression):
    """Raw literal source text; string literals must already be quoted."""

    text: str

    rank: ClassVar[int] = 8

    def _payload_key(self) -> tuple[Any, ...]:
        return (self.text,)


@dataclass(frozen=True)
class Generic(TypeExpression):
    """Reference to an in-scope type parameter."""

    name: str

    rank: ClassVar[int] = 9

    def _payload_key(self) -> tuple[Any, ...]:
        return (self.name,)


@dataclass(frozen=True)
class IndexSignature(TypeExpression):
    key_type: str
    value: TypeExpression

    rank: ClassVar[int] = 10

    def _payload_key(self) -> tuple[Any, ...]:
        return (self.key_type, self.value.sort_key())


STRING = Primitive(PrimitiveKind.STRING)
NUMBER = Primitive(PrimitiveKind.NUMBER)
BOOLEAN = Primitive(PrimitiveKind.BOOLEAN)
NULL = Primitive(PrimitiveKind.NULL)
UNDEFINED = Primitive(PrimitiveKind.UNDEFINED)
VOID = Primitive(PrimitiveKind.VOID)
ANY = Primitive(PrimitiveKind.ANY)
UNKNOWN = Primitive(PrimitiveKind.UNKNOWN)
NEVER = Primitive(PrimitiveKind.NEVER)


def _ordered_members(members: Iterable[TypeExpression], flatten: type[TypeExpression]) -> list[TypeExpression]:
    unique: set[TypeExpression] = set()
    for member in members:
        if isinstance(member, flatten):
            unique.update(member.members)  # type: ignore[attr-defined]
        else:
            unique.add(member)
    return sorted(unique, key=lambda expr: expr.sort_key())


def union_of(members: Iterable[TypeExpression]) -> TypeExpression:
    """Build a union: nested unions are flattened, members deduplicated and sorted.

    A single member collapses to itself and an empty union is ``never``.

    Examples:
        >>> union_of([NULL, STRING, STRING])
        UnionType(members=(Primitive(kind=<PrimitiveKind.STRING: 0>), Primitive(kind=<PrimitiveKind.NULL: 3>)))
    """
    ordered = _ordered_members(members, UnionType)
    if not ordered:
        return NEVER
    if len(ordered) == 1:
        return ordered[0]
    return UnionType(tuple(ordered))


def intersection_of(members: Iterable[TypeExpression]) -> TypeExpression:
    """Build an intersection with the same flattening and ordering rules as ``union_of``."""
    ordered = _ordered_members(members, IntersectionType)
    if not ordered:
        return UNKNOWN
    if len(ordered) == 1:
        return ordered[0]
    return IntersectionType(tuple(ordered))


def contains_null(expr: TypeExpression) -> bool:
    if expr == NULL:
        return True
    return isinstance(expr, UnionType) and NULL in expr.members


def is_simple(expr: TypeExpression) -> bool:
    if isinstance(expr, Reference):
        return all(is_simple(arg) for arg in expr.type_arguments)
    return isinstance(expr, Primitive | Generic | Literal)


def is_complex(expr: TypeExpression) -> bool:
    """Layout predicate: complex expressions force multi-line enclosing declarations."""
    match expr:
        case ArrayType() | FunctionType():
            return True
        case UnionType(members=members) | IntersectionType(members=members):
            return not all(is_simple(member) for member in members)
        case TupleType(elements=elements):
            return len(elements) > 1
        case ObjectType(properties=properties):
            return len(properties) > 2 or any(is_complex(prop.type) for prop in properties)
        case IndexSignature(value=value):
            return is_complex(value)
        case _:
            return False


def referenced_names(expr: TypeExpression) -> set[str]:
    """Collect the names of every ``Reference`` inside an expression."""
    match expr:
        case Reference(name=name, type_arguments=arguments):
            return {name}.union(*(referenced_names(arg) for arg in arguments))
        case ArrayType(element=element):
            return referenced_names(element)
        case TupleType(elements=items) | UnionType(members=items) | IntersectionType(members=items):
            return set().union(*(referenced_names(item) for item in items))
        case ObjectType(properties=properties):
            return set().union(*(referenced_names(prop.type) for prop in properties))
        case FunctionType(parameters=parameters, return_type=return_type):
            names = set().union(*(referenced_names(param.type) for param in parameters))
            return names | (referenced_names(return_type) if return_type else set())
        case IndexSignature(value=value):
            return referenced_names(value)
        case _:
            return set()
