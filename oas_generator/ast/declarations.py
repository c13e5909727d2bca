"""Declaration nodes: interfaces, aliases, enums, classes and imports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from oas_generator.ast.expressions import IndexSignature, TypeExpression, referenced_names


@dataclass
class Property:
    name: str
    type: TypeExpression
    optional: bool = False
    readonly: bool = False
    documentation: str | None = None


@dataclass
class Interface:
    name: str
    properties: list[Property] = field(default_factory=list)
    generics: list[str] = field(default_factory=list)
    extends: list[str] = field(default_factory=list)
    index_signature: IndexSignature | None = None
    documentation: str | None = None

    @property
    def member_count(self) -> int:
        return len(self.properties) + (1 if self.index_signature else 0)

    def referenced_names(self) -> set[str]:
        names = set(self.extends)
        for prop in self.properties:
            names |= referenced_names(prop.type)
        if self.index_signature:
            names |= referenced_names(self.index_signature)
        return names


@dataclass
class TypeAlias:
    name: str
    expression: TypeExpression
    generics: list[str] = field(default_factory=list)
    documentation: str | None = None

    def referenced_names(self) -> set[str]:
        return referenced_names(self.expression)


@dataclass
class EnumVariant:
    """Enum member; ``value`` is literal source text (strings pre-quoted)."""

    name: str
    value: str | None = None


@dataclass
class Enum:
    name: str
    variants: list[EnumVariant] = field(default_factory=list)
    is_const: bool = False
    documentation: str | None = None

    def referenced_names(self) -> set[str]:
        return set()


@dataclass
class MethodParameter:
    name: str
    type: TypeExpression
    optional: bool = False
    default: str | None = None


@dataclass
class Method:
    """Class method; the body is rendered from ``body_template`` with ``body_data``."""

    name: str
    parameters: list[MethodParameter] = field(default_factory=list)
    return_type: TypeExpression | None = None
    is_async: bool = False
    visibility: str = "public"
    is_static: bool = False
    documentation: str | None = None
    body_template: str | None = None
    body_data: Any = None


@dataclass
class ClassProperty:
    name: str
    type: TypeExpression
    visibility: str = "public"
    readonly: bool = False
    optional: bool = False
    is_static: bool = False
    initializer: str | None = None


@dataclass
class ImportSpecifier:
    name: str
    alias: str | None = None
    is_type_only: bool = False


@dataclass
class Import:
    module_path: str
    specifiers: list[ImportSpecifier] = field(default_factory=list)
    is_type_only: bool = False


@dataclass
class Class:
    name: str
    extends: str | None = None
    implements: list[str] = field(default_factory=list)
    generics: list[str] = field(default_factory=list)
    properties: list[ClassProperty] = field(default_factory=list)
    methods: list[Method] = field(default_factory=list)
    imports: list[Import] = field(default_factory=list)
    documentation: str | None = None


Declaration = Interface | TypeAlias | Enum
