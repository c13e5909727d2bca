"""
Operation to API-class lowering.

Operations are grouped by tag; every group becomes one ``{Tag}Api`` class
extending the runtime ``BaseAPI`` with a ``{name}Raw``/``{name}`` method pair
per operation. Method bodies are left to the templates, which receive an
``ApiMethodData`` record per operation.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Final

from oas_generator.ast import (
    ANY,
    VOID,
    Class,
    Import,
    ImportSpecifier,
    Method,
    MethodParameter,
    Reference,
    TypeExpression,
    UnionType,
    referenced_names,
)
from oas_generator.constants import DEFAULT_TAG, MODELS_MODULE_PREFIX, RUNTIME_MODULE
from oas_generator.emission.pretty_printer import EmissionContext, TsPrettyPrinter
from oas_generator.parser.oas_parser import OpenApiDocument, Operation, Response
from oas_generator.typescript.parameter_extractor import ExtractedParameters, ParameterExtractor, ParameterInfo
from oas_generator.typescript.schema_mapper import SchemaContext, SchemaMapper
from oas_generator.utils.string_case import camelcase, pascalcase, ts_type_name

logger = logging.getLogger(__name__)

BASE_API_CLASS: Final = "BaseAPI"
RESPONSE_KIND_JSON: Final = "json"
RESPONSE_KIND_VOID: Final = "void"
INIT_OVERRIDES_PARAM: Final = "initOverrides"
# members kept in their conventional order instead of the sorted union order
INIT_OVERRIDES_TYPE: Final = UnionType((Reference("RequestInit"), Reference("InitOverrideFunction")))

_RUNTIME_VALUE_IMPORTS: Final = ("BaseAPI", "JSONApiResponse", "VoidApiResponse", "ResponseError")
_RUNTIME_TYPE_IMPORTS: Final = ("Configuration", "InitOverrideFunction")


def promise_of(value: TypeExpression) -> Reference:
    return Reference("Promise", (value,))


def api_class_name(tag: str) -> str:
    return f"{ts_type_name(tag)}Api"


def operation_method_name(operation: Operation) -> str:
    """Derive the lowerCamelCase method name of an operation.

    Uses ``operationId`` when present, otherwise the verb followed by the
    non-parameter path segments.

    Examples:
        >>> operation_method_name(Operation(method="GET", path="/pet/{petId}", operation_id="get_pet_by_id"))
        'getPetById'
        >>> operation_method_name(Operation(method="GET", path="/store/inventory"))
        'getStoreInventory'
    """
    name = camelcase(operation.operation_id) if operation.operation_id else ""
    if not name:
        segments = [pascalcase(seg) for seg in operation.path.split("/") if seg and not seg.startswith("{")]
        name = camelcase(operation.method.lower() + "".join(segments))
    if name[:1].isdigit():
        name = f"_{name}"
    return name


def _status_sort_key(status_code: str) -> tuple[int, str]:
    return (0, status_code) if status_code.isdigit() else (1, status_code)


def success_response(operation: Operation) -> Response | None:
    """First 2xx response, explicit codes before the ``2XX`` wildcard."""
    successes = sorted(
        (response for response in operation.responses.values() if response.is_success),
        key=lambda response: _status_sort_key(response.status_code),
    )
    return successes[0] if successes else None


@dataclass
class ParameterData:
    """Per-parameter view handed to the method-body templates."""

    name: str
    original_name: str
    type_expr: str
    optional: bool


@dataclass
class ApiMethodData:
    """Everything a method-body template needs to render one operation."""

    method_name: str
    http_method: str
    path: str
    path_params: list[ParameterData] = field(default_factory=list)
    query_params: list[ParameterData] = field(default_factory=list)
    header_params: list[ParameterData] = field(default_factory=list)
    body_param: ParameterData | None = None
    return_type: str = "any"
    response_kind: str = RESPONSE_KIND_JSON
    has_auth: bool = False
    has_error_handling: bool = False
    summary: str | None = None
    description: str | None = None
    deprecated: bool = False

    @property
    def raw_method_name(self) -> str:
        return f"{self.method_name}Raw"

    @property
    def call_arguments(self) -> list[str]:
        """Argument names forwarded from the convenience method to the raw one."""
        params = [*self.path_params, *self.query_params, *self.header_params]
        if self.body_param:
            params.append(self.body_param)
        return [param.name for param in params] + [INIT_OVERRIDES_PARAM]

    @property
    def is_void(self) -> bool:
        return self.response_kind == RESPONSE_KIND_VOID


class ApiClassBuilder:
    """Builds one ``Class`` node per operation tag."""

    def __init__(
        self,
        mapper: SchemaMapper,
        extractor: ParameterExtractor | None = None,
        printer: TsPrettyPrinter | None = None,
    ) -> None:
        self.mapper = mapper
        self.extractor = extractor or ParameterExtractor(mapper)
        self.printer = printer or TsPrettyPrinter(EmissionContext())

    @staticmethod
    def group_operations_by_tag(document: OpenApiDocument) -> dict[str, list[Operation]]:
        """Group operations under every tag they declare, tags sorted, operations in document order."""
        groups: dict[str, list[Operation]] = {}
        for operation in document.operations:
            for tag in operation.tags or [DEFAULT_TAG]:
                bucket = groups.setdefault(tag, [])
                if operation not in bucket:
                    bucket.append(operation)
        return {tag: groups[tag] for tag in sorted(groups)}

    def build(
        self,
        tag: str,
        operations: list[Operation],
        document: OpenApiDocument,
        context: SchemaContext,
        model_modules: Mapping[str, str],
    ) -> Class:
        """Build the API class for one tag.

        Args:
            tag: The operation tag.
            operations: Operations carrying the tag.
            document: The whole document, for global security requirements.
            context: Shared schema context.
            model_modules: Declared model type name to model module base name.

        Returns:
            The ``{Tag}Api`` class node.
        """
        class_name = api_class_name(tag)
        methods = [self._constructor()]
        used_names: set[str] = set()
        referenced: set[str] = set()

        for operation in operations:
            method_name = self._unique_method_name(operation_method_name(operation), used_names, class_name)
            extracted = self.extractor.extract(operation, context)
            data, raw_return, value_type = self._method_data(method_name, operation, extracted, document, context)

            parameters = [
                MethodParameter(name=param.identifier, type=param.type_expr, optional=not param.required)
                for param in extracted.signature_order()
            ]
            parameters.append(MethodParameter(name=INIT_OVERRIDES_PARAM, type=INIT_OVERRIDES_TYPE, optional=True))

            for param in extracted.signature_order():
                referenced |= referenced_names(param.type_expr)
            referenced |= referenced_names(value_type)

            documentation = self._method_documentation(operation, data)
            methods.append(
                Method(
                    name=data.raw_method_name,
                    parameters=parameters,
                    return_type=raw_return,
                    is_async=True,
                    documentation=documentation,
                    body_data=data,
                )
            )
            methods.append(
                Method(
                    name=method_name,
                    parameters=list(parameters),
                    return_type=promise_of(VOID if data.is_void else value_type),
                    is_async=True,
                    documentation=documentation,
                    body_template="api_method_convenience",
                    body_data=data,
                )
            )

        return Class(
            name=class_name,
            extends=BASE_API_CLASS,
            methods=methods,
            imports=self._imports(referenced, model_modules),
            documentation=f"{class_name} - operations tagged '{tag}'",
        )

    @staticmethod
    def _constructor() -> Method:
        return Method(
            name="constructor",
            parameters=[MethodParameter(name="configuration", type=Reference("Configuration"), optional=True)],
            body_template="constructor_base_api",
        )

    @staticmethod
    def _unique_method_name(base: str, used: set[str], class_name: str) -> str:
        candidate = base
        suffix = 2
        while candidate in used or f"{candidate}Raw" in used:
            candidate = f"{base}{suffix}"
            suffix += 1
        if candidate != base:
            logger.warning("Method name %s already used in %s; renamed to %s", base, class_name, candidate)
        used.update({candidate, f"{candidate}Raw"})
        return candidate

    def _parameter_data(self, param: ParameterInfo) -> ParameterData:
        return ParameterData(
            name=param.identifier,
            original_name=param.original_name,
            type_expr=self.printer.format_type_expr(param.type_expr),
            optional=not param.required,
        )

    def _method_data(
        self,
        method_name: str,
        operation: Operation,
        extracted: ExtractedParameters,
        document: OpenApiDocument,
        context: SchemaContext,
    ) -> tuple[ApiMethodData, TypeExpression, TypeExpression]:
        response = success_response(operation)
        media = response.json_media if response else None
        value_type: TypeExpression = ANY
        if response is None:
            kind = RESPONSE_KIND_JSON
        elif operation.method.upper() == "DELETE" or media is None:
            kind = RESPONSE_KIND_VOID
            value_type = VOID
        else:
            kind = RESPONSE_KIND_JSON
            if media.schema is not None:
                value_type = self.mapper.map(media.schema, context)

        value_text = self.printer.format_type_expr(value_type)
        if kind == RESPONSE_KIND_VOID:
            raw_return = promise_of(Reference("VoidApiResponse"))
        else:
            raw_return = promise_of(Reference("JSONApiResponse", (value_type,)))

        security = operation.security if operation.security is not None else document.security
        data = ApiMethodData(
            method_name=method_name,
            http_method=operation.method.upper(),
            path=operation.path,
            path_params=[self._parameter_data(p) for p in extracted.path],
            query_params=[self._parameter_data(p) for p in extracted.query],
            header_params=[self._parameter_data(p) for p in extracted.header],
            body_param=self._parameter_data(extracted.body) if extracted.body else None,
            return_type=value_text,
            response_kind=kind,
            has_auth=any(bool(requirement) for requirement in security or []),
            has_error_handling=any(
                code.upper() == "DEFAULT" or code[:1] in {"4", "5"} for code in operation.responses
            ),
            summary=operation.summary,
            description=operation.description,
            deprecated=operation.deprecated,
        )
        return data, raw_return, value_type

    @staticmethod
    def _method_documentation(operation: Operation, data: ApiMethodData) -> str | None:
        lines = [text.strip() for text in (operation.summary, operation.description) if text and text.strip()]
        if data.has_error_handling:
            lines.append("@throws {ResponseError} when the server answers with an error status")
        if operation.deprecated:
            lines.append("@deprecated")
        return "\n".join(lines) or None

    @staticmethod
    def _imports(referenced: set[str], model_modules: Mapping[str, str]) -> list[Import]:
        runtime = Import(
            module_path=RUNTIME_MODULE,
            specifiers=[
                *(ImportSpecifier(name) for name in _RUNTIME_VALUE_IMPORTS),
                *(ImportSpecifier(name, is_type_only=True) for name in _RUNTIME_TYPE_IMPORTS),
            ],
        )
        models = [
            Import(
                module_path=f"{MODELS_MODULE_PREFIX}{model_modules[name]}",
                specifiers=[ImportSpecifier(name)],
                is_type_only=True,
            )
            for name in sorted(referenced)
            if name in model_modules
        ]
        return [runtime, *models]

