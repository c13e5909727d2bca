"""
OpenAPI Parser Module

This module provides parsing of OpenAPI 3.1 documents into a typed document
model and the transform passes applied before generation.
"""

from .oas_parser import (
    Components,
    Info,
    MediaType,
    OASParser,
    OpenApiDocument,
    Operation,
    Parameter,
    PathItem,
    RequestBody,
    Response,
    Server,
    detect_format,
)
from .transforms import (
    NamingConventionPass,
    ReferenceResolutionPass,
    SchemaNormalizationPass,
    TransformPipeline,
    ValidationPass,
)

__all__ = [
    "Components",
    "Info",
    "MediaType",
    "NamingConventionPass",
    "OASParser",
    "OpenApiDocument",
    "Operation",
    "Parameter",
    "PathItem",
    "ReferenceResolutionPass",
    "RequestBody",
    "Response",
    "SchemaNormalizationPass",
    "Server",
    "TransformPipeline",
    "ValidationPass",
    "detect_format",
]
