"""
Typed AST Module

Language-neutral type expressions and declaration nodes shared by the schema
mapper, the API-class builder and both emission modes.
"""

from .declarations import (
    Class,
    ClassProperty,
    Declaration,
    Enum,
    EnumVariant,
    Import,
    ImportSpecifier,
    Interface,
    Method,
    MethodParameter,
    Property,
    TypeAlias,
)
from .expressions import (
    ANY,
    BOOLEAN,
    NEVER,
    NULL,
    NUMBER,
    STRING,
    UNDEFINED,
    UNKNOWN,
    VOID,
    ArrayType,
    FunctionParameter,
    FunctionType,
    Generic,
    IndexSignature,
    IntersectionType,
    Literal,
    ObjectProperty,
    ObjectType,
    Primitive,
    PrimitiveKind,
    Reference,
    TupleType,
    TypeExpression,
    UnionType,
    contains_null,
    intersection_of,
    is_complex,
    referenced_names,
    union_of,
)

__all__ = [
    "ANY",
    "BOOLEAN",
    "NEVER",
    "NULL",
    "NUMBER",
    "STRING",
    "UNDEFINED",
    "UNKNOWN",
    "VOID",
    "ArrayType",
    "Class",
    "ClassProperty",
    "Declaration",
    "Enum",
    "EnumVariant",
    "FunctionParameter",
    "FunctionType",
    "Generic",
    "Import",
    "ImportSpecifier",
    "IndexSignature",
    "Interface",
    "IntersectionType",
    "Literal",
    "Method",
    "MethodParameter",
    "ObjectProperty",
    "ObjectType",
    "Primitive",
    "PrimitiveKind",
    "Property",
    "Reference",
    "TupleType",
    "TypeAlias",
    "TypeExpression",
    "UnionType",
    "contains_null",
    "intersection_of",
    "is_complex",
    "referenced_names",
    "union_of",
]
