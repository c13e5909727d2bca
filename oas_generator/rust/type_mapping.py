"""
OpenAPI schema to Rust type conversion.

Model records here feed the ``templates/rust`` templates: one struct, string
enum or type alias per component schema.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Final

from oas_generator.typescript.schema_mapper import schema_ref_name
from oas_generator.utils.string_case import (
    escape_rust_keyword,
    normalize_rust_identifier,
    rust_pascal_case,
    rust_snake_case,
)

logger = logging.getLogger(__name__)

# Type mapping constants for OpenAPI to Rust conversion
_OPENAPI_TYPE_MAPPING: Final = {
    "string": {
        None: "String",
        "date": "String",
        "date-time": "String",
        "byte": "String",
        "binary": "Vec<u8>",
    },
    "integer": {
        None: "i64",
        "int32": "i32",
        "int64": "i64",
        "uint32": "u32",
        "uint64": "u64",
    },
    "number": {
        None: "f64",
        "float": "f32",
        "double": "f64",
    },
    "boolean": {
        None: "bool",
    },
}

JSON_VALUE_TYPE: Final = "serde_json::Value"
HASH_MAP_TYPE: Final = "HashMap"
_COMPOSITION_KEYWORDS: Final = ("oneOf", "anyOf", "allOf")

MODEL_KIND_STRUCT: Final = "struct"
MODEL_KIND_ENUM: Final = "enum"
MODEL_KIND_ALIAS: Final = "alias"


def _get_openapi_type_mapping(schema_type: str, schema_format: str | None) -> str:
    """Get Rust type mapping for OpenAPI schema type and format.

    Examples:
        >>> _get_openapi_type_mapping("integer", "int32")
        'i32'
        >>> _get_openapi_type_mapping("string", "uuid")
        'String'
    """
    type_formats = _OPENAPI_TYPE_MAPPING.get(schema_type)
    if type_formats is None:
        return JSON_VALUE_TYPE
    return type_formats.get(schema_format, type_formats[None])


def rust_optional(rust_type: str) -> str:
    """Wrap Rust type in Option if not already optional."""
    return rust_type if rust_type.startswith("Option<") else f"Option<{rust_type}>"


def _schema_types(schema: Mapping[str, Any]) -> tuple[list[str], bool]:
    raw = schema.get("type")
    types = [raw] if isinstance(raw, str) else [t for t in raw or [] if isinstance(t, str)]
    nullable = "null" in types or schema.get("nullable") is True
    return [t for t in types if t != "null"], nullable


def rust_type_from_openapi(schema: Any, schemas: Mapping[str, Any]) -> str:  # noqa: ANN401
    """Convert OpenAPI schema type to Rust type string.

    Args:
        schema: The schema dictionary from the OpenAPI document.
        schemas: All available schemas for reference resolution.

    Returns:
        Rust type string. Nullable schemas come back wrapped in ``Option``.

    Examples:
        >>> rust_type_from_openapi({"type": "array", "items": {"type": "integer", "format": "int32"}}, {})
        'Vec<i32>'
        >>> rust_type_from_openapi({"type": ["string", "null"]}, {})
        'Option<String>'
    """
    if not isinstance(schema, dict):
        return JSON_VALUE_TYPE

    if "$ref" in schema:
        ref_name = schema_ref_name(str(schema["$ref"]))
        if ref_name is None or ref_name not in schemas:
            logger.warning("Unresolved reference %s; using %s", schema["$ref"], JSON_VALUE_TYPE)
            return JSON_VALUE_TYPE
        return rust_pascal_case(ref_name)

    if any(keyword in schema for keyword in _COMPOSITION_KEYWORDS):
        return JSON_VALUE_TYPE

    types, nullable = _schema_types(schema)
    if "const" in schema and not types:
        types = [_json_type_of(schema["const"])]
    if len(types) > 1:
        return JSON_VALUE_TYPE

    schema_type = types[0] if types else _infer_type(schema)
    rust_type = _map_single_type(schema_type, schema, schemas)
    return rust_optional(rust_type) if nullable else rust_type


def _json_type_of(value: Any) -> str:  # noqa: ANN401
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def _infer_type(schema: Mapping[str, Any]) -> str | None:
    if "properties" in schema or "additionalProperties" in schema:
        return "object"
    if "items" in schema:
        return "array"
    return None


def _map_single_type(schema_type: str | None, schema: dict[str, Any], schemas: Mapping[str, Any]) -> str:
    match schema_type:
        case "array":
            items = schema.get("items")
            items_type = rust_type_from_openapi(items, schemas) if isinstance(items, dict) else JSON_VALUE_TYPE
            return f"Vec<{items_type}>"
        case "object":
            additional = schema.get("additionalProperties")
            if not schema.get("properties") and isinstance(additional, dict):
                return f"{HASH_MAP_TYPE}<String, {rust_type_from_openapi(additional, schemas)}>"
            return JSON_VALUE_TYPE
        case None:
            return JSON_VALUE_TYPE
        case _:
            return _get_openapi_type_mapping(schema_type, schema.get("format"))


@dataclass
class RustField:
    """A struct field; ``rust_name`` is the escaped snake_case identifier."""

    name: str
    rust_type: str
    required: bool
    description: str | None = None
    rust_name: str = field(init=False)

    def __post_init__(self) -> None:
        self.rust_name = escape_rust_keyword(rust_snake_case(normalize_rust_identifier(self.name)) or "field")

    @property
    def needs_rename(self) -> bool:
        return self.rust_name.removeprefix("r#") != self.name

    @property
    def is_optional(self) -> bool:
        return self.rust_type.startswith("Option<")


@dataclass
class RustEnumVariant:
    name: str
    value: str


@dataclass
class RustModel:
    """One generated Rust module, named after a component schema."""

    name: str
    kind: str
    description: str | None = None
    fields: list[RustField] = field(default_factory=list)
    variants: list[RustEnumVariant] = field(default_factory=list)
    alias_type: str | None = None
    references: list[str] = field(default_factory=list)
    rust_struct_name: str = field(init=False)
    rust_file_name: str = field(init=False)

    def __post_init__(self) -> None:
        self.rust_struct_name = rust_pascal_case(self.name)
        self.rust_file_name = rust_snake_case(self.name)

    @property
    def rust_module_name(self) -> str:
        return escape_rust_keyword(self.rust_file_name)

    @property
    def uses_hash_map(self) -> bool:
        types = [f.rust_type for f in self.fields] + [self.alias_type or ""]
        return any(f"{HASH_MAP_TYPE}<" in rust_type for rust_type in types)

    @property
    def use_statements(self) -> list[str]:
        statements = []
        if self.kind != MODEL_KIND_ALIAS:
            statements.append("use serde::{Deserialize, Serialize};")
        if self.uses_hash_map:
            statements.append("use std::collections::HashMap;")
        statements.extend(f"use crate::models::{name};" for name in self.references)
        return statements


def _variant_name(value: str, used: set[str]) -> str:
    base = rust_pascal_case(normalize_rust_identifier(value)) or "Empty"
    if base[0].isdigit() or base.startswith("_"):
        base = f"Value{base.lstrip('_')}"
    candidate = base
    suffix = 2
    while candidate in used:
        candidate = f"{base}{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


def _referenced_models(rust_types: list[str], model_names: set[str], own_name: str) -> list[str]:
    tokens: set[str] = set()
    for rust_type in rust_types:
        for token in rust_type.replace("<", " ").replace(">", " ").replace(",", " ").split():
            if token in model_names and token != own_name:
                tokens.add(token)
    return sorted(tokens)


def build_model(name: str, schema: Any, schemas: Mapping[str, Any]) -> RustModel:  # noqa: ANN401
    """Lower one component schema to a ``RustModel``.

    Objects with properties become structs, string enums become Rust enums and
    everything else becomes a type alias. A field that refers back to its own
    struct is boxed.
    """
    model_names = {rust_pascal_case(key) for key in schemas}
    if not isinstance(schema, dict):
        return RustModel(name=name, kind=MODEL_KIND_ALIAS, alias_type=JSON_VALUE_TYPE)

    description = schema.get("description") or schema.get("title")
    types, _ = _schema_types(schema)
    enum_values = schema.get("enum")
    if isinstance(enum_values, list) and enum_values and all(isinstance(v, str) for v in enum_values):
        used: set[str] = set()
        variants = [RustEnumVariant(_variant_name(value, used), value) for value in dict.fromkeys(enum_values)]
        return RustModel(name=name, kind=MODEL_KIND_ENUM, description=description, variants=variants)

    properties = schema.get("properties")
    is_object = "object" in types or (not types and isinstance(properties, dict))
    has_composition = any(keyword in schema for keyword in _COMPOSITION_KEYWORDS)
    if is_object and isinstance(properties, dict) and properties and not has_composition:
        required = set(schema.get("required") or [])
        own_type = rust_pascal_case(name)
        fields = []
        for prop_name, prop_schema in properties.items():
            rust_type = rust_type_from_openapi(prop_schema, schemas)
            if rust_type == own_type:
                rust_type = f"Box<{own_type}>"
            elif rust_type == rust_optional(own_type):
                rust_type = rust_optional(f"Box<{own_type}>")
            if prop_name not in required:
                rust_type = rust_optional(rust_type)
            prop_description = prop_schema.get("description") if isinstance(prop_schema, dict) else None
            fields.append(RustField(prop_name, rust_type, prop_name in required, prop_description))
        references = _referenced_models([f.rust_type for f in fields], model_names, own_type)
        return RustModel(
            name=name,
            kind=MODEL_KIND_STRUCT,
            description=description,
            fields=fields,
            references=references,
        )

    alias_type = rust_type_from_openapi(schema, schemas)
    return RustModel(
        name=name,
        kind=MODEL_KIND_ALIAS,
        description=description,
        alias_type=alias_type,
        references=_referenced_models([alias_type], model_names, rust_pascal_case(name)),
    )
