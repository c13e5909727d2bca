"""
Schema to type lowering.

``SchemaMapper.map`` turns an OpenAPI schema object into a type expression;
``SchemaMapper.declare`` decides whether a named schema becomes an
interface, an enum or a type alias. Reference cycles are broken through the
resolution stack held by ``SchemaContext``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Final

from oas_generator.ast import (
    ANY,
    BOOLEAN,
    NEVER,
    NULL,
    NUMBER,
    STRING,
    UNDEFINED,
    UNKNOWN,
    ArrayType,
    Enum,
    EnumVariant,
    IndexSignature,
    Interface,
    Literal,
    ObjectProperty,
    ObjectType,
    Property,
    Reference,
    TupleType,
    TypeAlias,
    TypeExpression,
    intersection_of,
    union_of,
)
from oas_generator.ast.declarations import Declaration
from oas_generator.constants import MAX_SCHEMA_DEPTH, SCHEMA_REF_PREFIX
from oas_generator.utils.string_case import ts_enum_variant_name, ts_type_name

logger = logging.getLogger(__name__)

_PRIMITIVE_TYPES: Final[dict[str, TypeExpression]] = {
    "string": STRING,
    "integer": NUMBER,
    "number": NUMBER,
    "boolean": BOOLEAN,
    "null": NULL,
}
_COMPOSITION_KEYWORDS: Final = ("oneOf", "anyOf", "allOf")
_INDEX_KEY_TYPE: Final = "string"


def schema_ref_name(ref: str) -> str | None:
    """Return the component schema name a ``$ref`` points at, or ``None`` for other refs.

    Examples:
        >>> schema_ref_name("#/components/schemas/Pet")
        'Pet'
        >>> schema_ref_name("#/components/parameters/limit") is None
        True
    """
    if ref.startswith(SCHEMA_REF_PREFIX):
        return ref.removeprefix(SCHEMA_REF_PREFIX)
    return None


def _ref_display_name(ref: str) -> str:
    return schema_ref_name(ref) or ref.rsplit("/", 1)[-1]


def _schema_types(schema: Mapping[str, Any]) -> list[str]:
    schema_type = schema.get("type")
    if isinstance(schema_type, str):
        return [schema_type]
    if isinstance(schema_type, list):
        return [str(item) for item in schema_type]
    return []


def is_object_schema(schema: Mapping[str, Any]) -> bool:
    types = _schema_types(schema)
    if types:
        return "object" in types
    return "properties" in schema or "additionalProperties" in schema


def literal_text(value: Any) -> str:  # noqa: ANN401
    """Source text of a JSON value used as a TypeScript literal type."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return json.dumps(value)
    if isinstance(value, str):
        return json.dumps(value)
    return json.dumps(json.dumps(value, sort_keys=True))


def enum_value_text(value: Any) -> str:  # noqa: ANN401
    """Source text of an enum member initializer; booleans become strings."""
    if isinstance(value, bool):
        return json.dumps("true" if value else "false")
    return literal_text(value)


def schema_documentation(schema: Mapping[str, Any]) -> str | None:
    parts = []
    description = schema.get("description") or schema.get("title")
    if isinstance(description, str) and description.strip():
        parts.append(description.strip())
    if schema.get("deprecated") is True:
        parts.append("@deprecated")
    return "\n".join(parts) or None


@dataclass
class SchemaContext:
    """Per-run state for schema lowering.

    Holds the named schema map, the ordered stack of names currently being
    resolved and a depth counter bounding recursion into nested schemas.
    """

    schemas: Mapping[str, dict[str, Any]]
    max_depth: int = MAX_SCHEMA_DEPTH
    stack: dict[str, None] = field(default_factory=dict)
    depth: int = 0

    def lookup(self, name: str) -> dict[str, Any] | None:
        schema = self.schemas.get(name)
        return schema if isinstance(schema, dict) else None

    def is_resolving(self, name: str) -> bool:
        return name in self.stack

    def push(self, name: str) -> None:
        self.stack[name] = None

    def pop(self, name: str) -> None:
        self.stack.pop(name, None)

    @contextmanager
    def resolving(self, name: str) -> Iterator[None]:
        """Keep ``name`` on the resolution stack for the duration of the block."""
        already = self.is_resolving(name)
        if not already:
            self.push(name)
        try:
            yield
        finally:
            if not already:
                self.pop(name)

    @contextmanager
    def descend(self) -> Iterator[bool]:
        """Enter one nesting level; yields ``False`` once the depth limit is exceeded."""
        self.depth += 1
        try:
            yield self.depth <= self.max_depth
        finally:
            self.depth -= 1


class SchemaMapper:
    """Lowers OpenAPI schemas to TypeScript AST nodes."""

    def __init__(self) -> None:
        self.discriminators: dict[str, str] = {}

    def declare(self, name: str, schema: Any, context: SchemaContext) -> Declaration:  # noqa: ANN401
        """Build the declaration for a named schema.

        Args:
            name: Schema name under ``components.schemas``.
            schema: The schema object (possibly a bare ``$ref``).
            context: Shared schema context.

        Returns:
            An ``Enum``, ``Interface`` or ``TypeAlias`` node named after the schema.
        """
        with context.resolving(name):
            return self._declare(ts_type_name(name), schema, context)

    def _declare(  # noqa: ANN401
        self,
        type_name: str,
        schema: Any,
        context: SchemaContext,
        first_hop: str | None = None,
    ) -> Declaration:
        if not isinstance(schema, dict):
            return TypeAlias(type_name, self.map(schema, context))

        documentation = schema_documentation(schema)
        discriminator = schema.get("discriminator")
        if isinstance(discriminator, dict) and discriminator.get("propertyName"):
            self.discriminators[type_name] = str(discriminator["propertyName"])

        if "$ref" in schema:
            return self._declare_reference(type_name, str(schema["$ref"]), context, first_hop)

        enum_values = schema.get("enum")
        if isinstance(enum_values, list) and any(value is not None for value in enum_values):
            return self._declare_enum(type_name, enum_values, documentation)

        has_composition = any(keyword in schema for keyword in _COMPOSITION_KEYWORDS)
        if not has_composition and is_object_schema(schema) and (schema.get("properties") or "additionalProperties" in schema):
            return self._declare_interface(type_name, schema, documentation, context)

        return TypeAlias(type_name, self.map(schema, context), documentation=documentation)

    def _declare_reference(
        self,
        type_name: str,
        ref: str,
        context: SchemaContext,
        first_hop: str | None,
    ) -> Declaration:
        """Follow a bare ``$ref`` chain; ``first_hop`` is the first target seen from ``type_name``."""
        target = schema_ref_name(ref)
        display = _ref_display_name(ref)
        reference = Reference(ts_type_name(display))

        if target is not None and context.is_resolving(target):
            closing = first_hop or reference.name
            logger.warning("Circular reference from %s to %s", type_name, closing)
            # a schema that refers straight back to itself has no other name to alias
            aliased = UNKNOWN if closing == type_name else Reference(closing)
            return TypeAlias(type_name, aliased, documentation=f"Circular reference to {closing}")

        target_schema = context.lookup(target) if target is not None else None
        if target_schema is None:
            logger.warning("Unresolved reference %s in schema %s", ref, type_name)
            return TypeAlias(type_name, reference, documentation=f"Unresolved reference to {display}")

        with context.resolving(target):
            return self._declare(type_name, target_schema, context, first_hop or reference.name)

    @staticmethod
    def _declare_enum(type_name: str, values: list[Any], documentation: str | None) -> Enum:
        variants: list[EnumVariant] = []
        used: set[str] = set()
        for value in values:
            if value is None:
                continue
            base = ts_enum_variant_name(value)
            variant_name = base
            suffix = 2
            while variant_name in used:
                variant_name = f"{base}{suffix}"
                suffix += 1
            used.add(variant_name)
            variants.append(EnumVariant(name=variant_name, value=enum_value_text(value)))
        return Enum(name=type_name, variants=variants, documentation=documentation)

    def _declare_interface(
        self,
        type_name: str,
        schema: dict[str, Any],
        documentation: str | None,
        context: SchemaContext,
    ) -> Interface:
        required = set(schema.get("required") or [])
        properties: list[Property] = []
        for prop_name, prop_schema in (schema.get("properties") or {}).items():
            prop_doc = schema_documentation(prop_schema) if isinstance(prop_schema, dict) else None
            properties.append(
                Property(
                    name=str(prop_name),
                    type=self.map(prop_schema, context),
                    optional=prop_name not in required,
                    readonly=isinstance(prop_schema, dict) and prop_schema.get("readOnly") is True,
                    documentation=prop_doc,
                )
            )

        index_signature = None
        additional = schema.get("additionalProperties")
        if additional is True or additional == {}:
            index_signature = IndexSignature(_INDEX_KEY_TYPE, ANY)
        elif isinstance(additional, dict):
            value = self.map(additional, context)
            if properties:
                # the index type must accept every explicit property type
                members = [value, *(prop.type for prop in properties)]
                if any(prop.optional for prop in properties):
                    members.append(UNDEFINED)
                value = union_of(members)
            index_signature = IndexSignature(_INDEX_KEY_TYPE, value)

        return Interface(
            name=type_name,
            properties=properties,
            index_signature=index_signature,
            documentation=documentation,
        )

    def map(self, schema: Any, context: SchemaContext) -> TypeExpression:  # noqa: ANN401
        """Map a schema object to a type expression. Never raises on malformed input."""
        if schema is True:
            return ANY
        if schema is False:
            return NEVER
        if not isinstance(schema, dict):
            return ANY

        with context.descend() as within_limit:
            if not within_limit:
                logger.warning("Schema nesting exceeds depth %d; falling back to any", context.max_depth)
                return self._depth_fallback(schema, context)
            expr = self._map(schema, context)

        if schema.get("nullable") is True:
            expr = union_of([expr, NULL])
        return expr

    def _depth_fallback(self, schema: dict[str, Any], context: SchemaContext) -> TypeExpression:
        ref = schema.get("$ref")
        if isinstance(ref, str):
            target = schema_ref_name(ref)
            if target is not None and context.lookup(target) is not None:
                return Reference(ts_type_name(target))
        return ANY

    def _map(self, schema: dict[str, Any], context: SchemaContext) -> TypeExpression:
        ref = schema.get("$ref")
        if isinstance(ref, str):
            return self._map_reference(ref, context)

        if "const" in schema:
            value = schema["const"]
            return NULL if value is None else Literal(literal_text(value))

        enum_values = schema.get("enum")
        if isinstance(enum_values, list) and enum_values:
            return union_of(NULL if value is None else Literal(literal_text(value)) for value in enum_values)

        if any(keyword in schema for keyword in _COMPOSITION_KEYWORDS):
            return self._map_composition(schema, context)

        types = _schema_types(schema)
        if not types:
            if "properties" in schema or "additionalProperties" in schema:
                types = ["object"]
            elif "items" in schema or "prefixItems" in schema:
                types = ["array"]
            else:
                return ANY

        mapped = [self._map_single_type(schema_type, schema, context) for schema_type in types]
        return union_of(mapped)

    def _map_reference(self, ref: str, context: SchemaContext) -> TypeExpression:
        target = schema_ref_name(ref)
        if target is None or context.lookup(target) is None:
            logger.warning("Unresolved reference %s; using any", ref)
            return ANY
        return Reference(ts_type_name(target))

    def _map_composition(self, schema: dict[str, Any], context: SchemaContext) -> TypeExpression:
        parts: list[TypeExpression] = []
        for keyword in _COMPOSITION_KEYWORDS:
            items = schema.get(keyword)
            if not isinstance(items, list) or not items:
                continue
            mapped = [self.map(item, context) for item in items]
            parts.append(intersection_of(mapped) if keyword == "allOf" else union_of(mapped))

        base = {key: value for key, value in schema.items() if key not in _COMPOSITION_KEYWORDS}
        if base.get("properties") or isinstance(base.get("additionalProperties"), dict):
            parts.append(self._map_object(base, context))

        types = _schema_types(schema)
        expr = intersection_of(parts) if parts else ANY
        if "null" in types:
            expr = union_of([expr, NULL])
        return expr

    def _map_single_type(self, schema_type: str, schema: dict[str, Any], context: SchemaContext) -> TypeExpression:
        if schema_type in _PRIMITIVE_TYPES:
            # formats (int32, date-time, uuid, ...) widen to the base primitive
            return _PRIMITIVE_TYPES[schema_type]
        if schema_type == "array":
            return self._map_array(schema, context)
        if schema_type == "object":
            return self._map_object(schema, context)
        logger.warning("Unknown schema type '%s'; using any", schema_type)
        return ANY

    def _map_array(self, schema: dict[str, Any], context: SchemaContext) -> TypeExpression:
        prefix_items = schema.get("prefixItems")
        if isinstance(prefix_items, list) and prefix_items:
            return TupleType(tuple(self.map(item, context) for item in prefix_items))
        items = schema.get("items")
        if items is None or items is False:
            return ArrayType(ANY)
        return ArrayType(self.map(items, context))

    def _map_object(self, schema: dict[str, Any], context: SchemaContext) -> TypeExpression:
        properties = schema.get("properties") or {}
        additional = schema.get("additionalProperties")
        required = set(schema.get("required") or [])

        object_type = None
        if properties:
            object_type = ObjectType(
                tuple(
                    ObjectProperty(
                        name=str(prop_name),
                        type=self.map(prop_schema, context),
                        optional=prop_name not in required,
                        readonly=isinstance(prop_schema, dict) and prop_schema.get("readOnly") is True,
                    )
                    for prop_name, prop_schema in properties.items()
                )
            )

        index_signature = None
        if additional is True or additional == {}:
            index_signature = IndexSignature(_INDEX_KEY_TYPE, ANY)
        elif isinstance(additional, dict):
            index_signature = IndexSignature(_INDEX_KEY_TYPE, self.map(additional, context))

        if object_type and index_signature:
            return intersection_of([object_type, index_signature])
        if object_type:
            return object_type
        if index_signature:
            return index_signature
        if additional is False:
            return ObjectType(())
        return ANY
