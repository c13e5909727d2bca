"""
Transform passes run on a parsed document before code generation.

Each pass mutates the document it receives; the driver hands every language
its own copy.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

from oas_generator.constants import SCHEMA_REF_PREFIX
from oas_generator.errors import InputError
from oas_generator.parser.oas_parser import OpenApiDocument
from oas_generator.utils.string_case import ts_type_name

logger = logging.getLogger(__name__)


class TransformPass(Protocol):
    name: str

    def apply(self, document: OpenApiDocument) -> None: ...


def walk_refs(node: Any, visit: Callable[[dict[str, Any]], None]) -> None:  # noqa: ANN401
    """Call ``visit`` on every mapping below ``node`` that carries a ``$ref``."""
    if isinstance(node, dict):
        if isinstance(node.get("$ref"), str):
            visit(node)
        for value in node.values():
            walk_refs(value, visit)
    elif isinstance(node, list):
        for item in node:
            walk_refs(item, visit)


class ValidationPass:
    """Checks the document carries the fields generation depends on."""

    name = "validation"

    def apply(self, document: OpenApiDocument) -> None:
        if not document.info.title:
            msg = "info.title is required"
            raise InputError(msg, element="info")
        if not document.info.version:
            msg = "info.version is required"
            raise InputError(msg, element="info")
        if not document.paths:
            logger.warning("Document '%s' declares no paths; only models will be generated", document.info.title)
        for name, schema in document.schemas.items():
            if not isinstance(schema, dict):
                msg = "schema must be a mapping"
                raise InputError(msg, element=f"{SCHEMA_REF_PREFIX}{name}")


class ReferenceResolutionPass:
    """Reports schema references that point at nothing.

    Unresolved references are left in place; the schema mapper emits a
    nominal fallback for them.
    """

    name = "reference-resolution"

    def apply(self, document: OpenApiDocument) -> None:
        known = set(document.schemas)
        unresolved: list[str] = []

        def visit(node: dict[str, Any]) -> None:
            ref = node["$ref"]
            if not ref.startswith("#"):
                logger.warning("External reference %s is not supported and will not be resolved", ref)
                return
            if ref.startswith(SCHEMA_REF_PREFIX) and ref.removeprefix(SCHEMA_REF_PREFIX) not in known:
                unresolved.append(ref)

        for root in document.iter_schema_roots():
            walk_refs(root, visit)
        for ref in unresolved:
            logger.warning("Unresolved schema reference %s", ref)


class NamingConventionPass:
    """Normalises component schema names to PascalCase and rewrites references."""

    name = "naming-convention"

    def apply(self, document: OpenApiDocument) -> None:
        renames: dict[str, str] = {}
        taken: set[str] = set()
        for original in document.schemas:
            candidate = ts_type_name(original)
            new_name = candidate
            suffix = 2
            while new_name in taken:
                new_name = f"{candidate}{suffix}"
                suffix += 1
            if new_name != candidate:
                logger.warning("Schema name '%s' collides after normalisation; renamed to '%s'", original, new_name)
            taken.add(new_name)
            renames[original] = new_name

        if all(old == new for old, new in renames.items()):
            return

        for old, new in renames.items():
            if old != new:
                logger.debug("Renaming schema %s -> %s", old, new)

        rewritten: set[int] = set()

        def visit(node: dict[str, Any]) -> None:
            # shared YAML anchors may reach the same node twice
            if id(node) in rewritten:
                return
            rewritten.add(id(node))
            ref = node["$ref"]
            if ref.startswith(SCHEMA_REF_PREFIX):
                target = ref.removeprefix(SCHEMA_REF_PREFIX)
                if target in renames:
                    node["$ref"] = f"{SCHEMA_REF_PREFIX}{renames[target]}"

        for root in list(document.iter_schema_roots()):
            walk_refs(root, visit)
        document.components.schemas = {renames[name]: schema for name, schema in document.schemas.items()}


class SchemaNormalizationPass:
    """Rewrites ``nullable: true`` into a ``null`` type member and collapses singleton type lists."""

    name = "schema-normalization"

    def apply(self, document: OpenApiDocument) -> None:
        for root in document.iter_schema_roots():
            self._normalize(root)

    def _normalize(self, node: Any) -> None:  # noqa: ANN401
        if isinstance(node, list):
            for item in node:
                self._normalize(item)
            return
        if not isinstance(node, dict):
            return

        # untyped nodes (bare $ref) keep the flag for the schema mapper
        if node.get("nullable") is True and "type" in node:
            del node["nullable"]
            schema_type = node.get("type")
            if isinstance(schema_type, str):
                node["type"] = [schema_type, "null"]
            elif isinstance(schema_type, list) and "null" not in schema_type:
                node["type"] = [*schema_type, "null"]
        schema_type = node.get("type")
        if isinstance(schema_type, list) and len(schema_type) == 1:
            node["type"] = schema_type[0]

        for value in node.values():
            self._normalize(value)


class TransformPipeline:
    """Ordered list of passes applied to a document."""

    def __init__(self, passes: list[TransformPass] | None = None) -> None:
        self.passes: list[TransformPass] = list(passes or [])

    @classmethod
    def default(cls) -> TransformPipeline:
        return cls(
            [
                ValidationPass(),
                ReferenceResolutionPass(),
                NamingConventionPass(),
                SchemaNormalizationPass(),
            ]
        )

    def apply(self, document: OpenApiDocument) -> OpenApiDocument:
        for transform in self.passes:
            logger.debug("Running transform pass %s", transform.name)
            transform.apply(document)
        return document
