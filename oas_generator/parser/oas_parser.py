"""
OpenAPI Specification Parser.

This module reads OpenAPI 3.1 documents from JSON or YAML and builds the
typed document model consumed by the transform pipeline and the language
backends. Schema objects are kept as plain dictionaries.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

import yaml

from oas_generator.constants import (
    HTTP_METHODS,
    JSON_MEDIA_TYPE,
    JSON_SUFFIX,
    SUPPORTED_OPENAPI_PREFIX,
)
from oas_generator.errors import InputError

logger = logging.getLogger(__name__)

_JSON_EXTENSIONS: Final = frozenset({".json"})
_YAML_EXTENSIONS: Final = frozenset({".yaml", ".yml"})

FORMAT_JSON: Final = "json"
FORMAT_YAML: Final = "yaml"


@dataclass
class Info:
    title: str
    version: str
    description: str | None = None


@dataclass
class Server:
    url: str
    description: str | None = None


@dataclass
class MediaType:
    schema: dict[str, Any] | None = None


@dataclass
class Parameter:
    """Represents an OpenAPI parameter."""

    name: str
    location: str
    required: bool = False
    description: str | None = None
    schema: dict[str, Any] | None = None
    deprecated: bool = False


@dataclass
class RequestBody:
    content: dict[str, MediaType] = field(default_factory=dict)
    required: bool = False
    description: str | None = None

    @property
    def json_media(self) -> MediaType | None:
        """The ``application/json`` media type, falling back to any ``+json`` one."""
        return _json_media(self.content)


@dataclass
class Response:
    """Represents an OpenAPI response."""

    status_code: str
    description: str = ""
    content: dict[str, MediaType] = field(default_factory=dict)

    @property
    def json_media(self) -> MediaType | None:
        return _json_media(self.content)

    @property
    def is_success(self) -> bool:
        return self.status_code.upper() == "2XX" or (len(self.status_code) == 3 and self.status_code.startswith("2"))


@dataclass
class Operation:
    """Represents an OpenAPI operation."""

    method: str
    path: str
    operation_id: str | None = None
    tags: list[str] = field(default_factory=list)
    summary: str | None = None
    description: str | None = None
    parameters: list[Parameter] = field(default_factory=list)
    request_body: RequestBody | None = None
    responses: dict[str, Response] = field(default_factory=dict)
    deprecated: bool = False
    security: list[dict[str, Any]] | None = None


@dataclass
class PathItem:
    path: str
    operations: dict[str, Operation] = field(default_factory=dict)


@dataclass
class Components:
    schemas: dict[str, dict[str, Any]] = field(default_factory=dict)
    security_schemes: dict[str, Any] = field(default_factory=dict)


@dataclass
class OpenApiDocument:
    """Represents a parsed OpenAPI specification."""

    openapi: str
    info: Info
    servers: list[Server] = field(default_factory=list)
    paths: dict[str, PathItem] = field(default_factory=dict)
    components: Components = field(default_factory=Components)
    security: list[dict[str, Any]] = field(default_factory=list)

    @property
    def schemas(self) -> dict[str, dict[str, Any]]:
        return self.components.schemas

    @property
    def operations(self) -> list[Operation]:
        """All operations in document order."""
        return [operation for item in self.paths.values() for operation in item.operations.values()]

    def iter_schema_roots(self) -> Iterator[dict[str, Any]]:
        """Yield every top-level schema object the document holds.

        Component schemas come first, then parameter, request-body and response
        schemas of each operation. The yielded dictionaries are the live objects.
        """
        yield from self.components.schemas.values()
        for operation in self.operations:
            for parameter in operation.parameters:
                if parameter.schema is not None:
                    yield parameter.schema
            if operation.request_body:
                for media in operation.request_body.content.values():
                    if media.schema is not None:
                        yield media.schema
            for response in operation.responses.values():
                for media in response.content.values():
                    if media.schema is not None:
                        yield media.schema


def _json_media(content: dict[str, MediaType]) -> MediaType | None:
    if JSON_MEDIA_TYPE in content:
        return content[JSON_MEDIA_TYPE]
    for media_type, media in content.items():
        if media_type.split(";")[0].strip().endswith(JSON_SUFFIX):
            return media
    return None


def detect_format(path: Path, text: str) -> str:
    """Detect the input format by extension, then by sniffing the content.

    Args:
        path: Input file path.
        text: Input file content.

    Returns:
        ``"json"`` or ``"yaml"``.
    """
    suffix = path.suffix.lower()
    if suffix in _JSON_EXTENSIONS:
        return FORMAT_JSON
    if suffix in _YAML_EXTENSIONS:
        return FORMAT_YAML
    return FORMAT_JSON if text.lstrip().startswith("{") else FORMAT_YAML


class OASParser:
    """Parser for OpenAPI 3.1 specifications."""

    def __init__(self) -> None:
        self.spec_data: dict[str, Any] | None = None

    def parse_file(self, file_path: str | Path) -> OpenApiDocument:
        """Parse OpenAPI specification from a JSON or YAML file."""
        path = Path(file_path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            msg = f"cannot read specification file: {e}"
            raise InputError(msg, element=str(path)) from e
        return self.parse_text(text, detect_format(path, text), source=str(path))

    def parse_text(self, text: str, fmt: str, source: str | None = None) -> OpenApiDocument:
        """Parse OpenAPI specification text in the given format."""
        try:
            if fmt == FORMAT_JSON:
                data = json.loads(text)
            else:
                data = yaml.safe_load(text)
        except json.JSONDecodeError as e:
            msg = f"invalid JSON: {e}"
            raise InputError(msg, element=source) from e
        except yaml.YAMLError as e:
            msg = f"invalid YAML: {e}"
            raise InputError(msg, element=source) from e

        if not isinstance(data, dict):
            msg = "specification root must be a mapping"
            raise InputError(msg, element=source)
        return self.parse_dict(data)

    def parse_dict(self, spec_dict: dict[str, Any]) -> OpenApiDocument:
        """Parse OpenAPI specification from dictionary."""
        self.spec_data = spec_dict
        return self._parse_spec()

    def _parse_spec(self) -> OpenApiDocument:
        """Parse the loaded specification."""
        if not self.spec_data:
            msg = "No specification data loaded"
            raise InputError(msg)

        version = str(self.spec_data.get("openapi", ""))
        if not version.startswith(SUPPORTED_OPENAPI_PREFIX):
            msg = f"unsupported OpenAPI version '{version or 'missing'}', expected {SUPPORTED_OPENAPI_PREFIX}.x"
            raise InputError(msg, element="openapi")

        info = self.spec_data.get("info") or {}
        components = self.spec_data.get("components") or {}

        return OpenApiDocument(
            openapi=version,
            info=Info(
                title=str(info.get("title") or ""),
                version=str(info.get("version") or ""),
                description=info.get("description"),
            ),
            servers=[
                Server(url=str(server.get("url", "")), description=server.get("description"))
                for server in self.spec_data.get("servers") or []
                if isinstance(server, dict)
            ],
            paths=self._parse_paths(),
            components=Components(
                schemas={str(name): schema for name, schema in (components.get("schemas") or {}).items()},
                security_schemes=dict(components.get("securitySchemes") or {}),
            ),
            security=list(self.spec_data.get("security") or []),
        )

    def _parse_paths(self) -> dict[str, PathItem]:
        """Parse all path items, keeping document order."""
        paths: dict[str, PathItem] = {}
        if not self.spec_data:
            return paths

        for path, path_data in (self.spec_data.get("paths") or {}).items():
            if not isinstance(path_data, dict):
                msg = "path item must be a mapping"
                raise InputError(msg, element=str(path))
            if "$ref" in path_data:
                path_data = self._resolve_reference(path_data["$ref"])

            shared_parameters = path_data.get("parameters") or []
            item = PathItem(path=str(path))
            for method, operation_data in path_data.items():
                if method.lower() in HTTP_METHODS and isinstance(operation_data, dict):
                    item.operations[method.lower()] = self._parse_operation(
                        str(path), method.upper(), operation_data, shared_parameters
                    )
            paths[str(path)] = item
        return paths

    def _parse_operation(
        self,
        path: str,
        method: str,
        operation_data: dict[str, Any],
        shared_parameters: list[dict[str, Any]],
    ) -> Operation:
        """Parse a single operation, merging path-level parameters."""
        merged: dict[tuple[str, str], Parameter] = {}
        for param_data in [*shared_parameters, *(operation_data.get("parameters") or [])]:
            param = self._parse_parameter(param_data)
            if param:
                merged[(param.name, param.location)] = param

        request_body = None
        if operation_data.get("requestBody"):
            request_body = self._parse_request_body(operation_data["requestBody"])

        responses = {}
        for status_code, response_data in (operation_data.get("responses") or {}).items():
            responses[str(status_code)] = self._parse_response(str(status_code), response_data)

        security = operation_data.get("security")
        return Operation(
            method=method,
            path=path,
            operation_id=operation_data.get("operationId"),
            tags=[str(tag) for tag in operation_data.get("tags") or []],
            summary=operation_data.get("summary"),
            description=operation_data.get("description"),
            parameters=list(merged.values()),
            request_body=request_body,
            responses=responses,
            deprecated=bool(operation_data.get("deprecated", False)),
            security=list(security) if security is not None else None,
        )

    def _parse_parameter(self, param_data: dict[str, Any]) -> Parameter | None:
        """Parse a parameter."""
        if "$ref" in param_data:
            param_data = self._resolve_reference(param_data["$ref"])

        name = param_data.get("name")
        if not name:
            logger.warning("Skipping parameter without a name: %s", param_data)
            return None

        location = param_data.get("in", "query")
        return Parameter(
            name=str(name),
            location=location,
            required=bool(param_data.get("required", location == "path")),
            description=param_data.get("description"),
            schema=param_data.get("schema"),
            deprecated=bool(param_data.get("deprecated", False)),
        )

    def _parse_request_body(self, body_data: dict[str, Any]) -> RequestBody:
        if "$ref" in body_data:
            body_data = self._resolve_reference(body_data["$ref"])
        return RequestBody(
            content=self._parse_content(body_data.get("content") or {}),
            required=bool(body_data.get("required", False)),
            description=body_data.get("description"),
        )

    def _parse_response(self, status_code: str, response_data: dict[str, Any]) -> Response:
        """Parse a response."""
        if "$ref" in response_data:
            response_data = self._resolve_reference(response_data["$ref"])
        return Response(
            status_code=status_code,
            description=response_data.get("description", ""),
            content=self._parse_content(response_data.get("content") or {}),
        )

    @staticmethod
    def _parse_content(content_data: dict[str, Any]) -> dict[str, MediaType]:
        return {
            str(media_type): MediaType(schema=(media or {}).get("schema"))
            for media_type, media in content_data.items()
        }

    def _resolve_reference(self, ref: str) -> dict[str, Any]:
        """Resolve a local JSON reference, returning an empty mapping when it does not resolve."""
        if not self.spec_data:
            return {}

        ref_path = ref.split("/")
        resolved: Any = self.spec_data
        for part in ref_path[1:]:  # Skip '#'
            if not isinstance(resolved, dict):
                resolved = None
                break
            resolved = resolved.get(part.replace("~1", "/").replace("~0", "~"))
        if not isinstance(resolved, dict):
            logger.warning("Unresolved reference %s", ref)
            return {}
        return resolved
