"""Sorts operation parameters into path, query, header and body buckets."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Final

from oas_generator.ast import STRING, TypeExpression
from oas_generator.constants import PARAM_IN_HEADER, PARAM_IN_PATH, PARAM_IN_QUERY
from oas_generator.parser.oas_parser import Operation
from oas_generator.typescript.schema_mapper import SchemaContext, SchemaMapper
from oas_generator.utils.string_case import ts_identifier

logger = logging.getLogger(__name__)

_PATH_PARAM_PATTERN: Final = re.compile(r"\{([^{}]+)\}")
BODY_PARAM_NAME: Final = "body"


def path_template_names(path: str) -> list[str]:
    """Return the placeholder names of a path template, left to right.

    Examples:
        >>> path_template_names("/store/{storeId}/pet/{petId}")
        ['storeId', 'petId']
    """
    return _PATH_PARAM_PATTERN.findall(path)


@dataclass
class ParameterInfo:
    """A single extracted parameter.

    ``original_name`` is the name on the wire; ``identifier`` is the
    TypeScript name used in the method signature.
    """

    original_name: str
    type_expr: TypeExpression
    required: bool
    description: str | None = None
    default: Any = None
    identifier: str = field(init=False)

    def __post_init__(self) -> None:
        self.identifier = ts_identifier(self.original_name)

    @property
    def name(self) -> str:
        return self.identifier

    @property
    def optional(self) -> bool:
        return not self.required


@dataclass
class ExtractedParameters:
    path: list[ParameterInfo] = field(default_factory=list)
    query: list[ParameterInfo] = field(default_factory=list)
    header: list[ParameterInfo] = field(default_factory=list)
    body: ParameterInfo | None = None

    def signature_order(self) -> list[ParameterInfo]:
        """Parameters in method-signature order: path, query, header, body."""
        ordered = [*self.path, *self.query, *self.header]
        if self.body:
            ordered.append(self.body)
        return ordered


class ParameterExtractor:
    def __init__(self, mapper: SchemaMapper) -> None:
        self.mapper = mapper

    def extract(self, operation: Operation, context: SchemaContext) -> ExtractedParameters:
        """Categorise an operation's parameters and request body.

        Path parameters missing from the path template are demoted to query
        parameters; cookie parameters are dropped with a warning.
        """
        template_names = set(path_template_names(operation.path))
        extracted = ExtractedParameters()
        used_identifiers: set[str] = set()

        for parameter in operation.parameters:
            type_expr = self.mapper.map(parameter.schema, context) if parameter.schema is not None else STRING
            info = ParameterInfo(
                original_name=parameter.name,
                type_expr=type_expr,
                required=parameter.required,
                description=parameter.description,
                default=(parameter.schema or {}).get("default"),
            )

            if parameter.location == PARAM_IN_PATH and parameter.name in template_names:
                info.required = True
                extracted.path.append(info)
            elif parameter.location in (PARAM_IN_PATH, PARAM_IN_QUERY):
                if parameter.location == PARAM_IN_PATH:
                    logger.debug("Path parameter %s not in template %s; treating as query", parameter.name, operation.path)
                extracted.query.append(info)
            elif parameter.location == PARAM_IN_HEADER:
                extracted.header.append(info)
            else:
                logger.warning(
                    "Dropping %s parameter '%s' of %s %s",
                    parameter.location,
                    parameter.name,
                    operation.method,
                    operation.path,
                )
                continue
            self._dedupe_identifier(info, used_identifiers)

        body = operation.request_body
        media = body.json_media if body else None
        if body and media and media.schema is not None:
            info = ParameterInfo(
                original_name=BODY_PARAM_NAME,
                type_expr=self.mapper.map(media.schema, context),
                required=body.required,
                description=body.description,
            )
            self._dedupe_identifier(info, used_identifiers)
            extracted.body = info

        return extracted

    @staticmethod
    def _dedupe_identifier(info: ParameterInfo, used: set[str]) -> None:
        base = info.identifier
        candidate = base
        suffix = 2
        while candidate in used:
            candidate = f"{base}{suffix}"
            suffix += 1
        info.identifier = candidate
        used.add(candidate)
