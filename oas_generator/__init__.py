"""
OpenAPI Client Generator

A Jinja2-based generator that produces TypeScript (and partial Rust) API
clients from OpenAPI 3.1 specifications.
"""

from .driver import GeneratorDriver, GeneratorRegistry, default_registry
from .parser import OASParser, OpenApiDocument

__version__ = "0.1.0"

__all__ = [
    "GeneratorDriver",
    "GeneratorRegistry",
    "OASParser",
    "OpenApiDocument",
    "default_registry",
]
