"""Constants shared across the generator."""

from __future__ import annotations

from enum import Enum
from typing import Final

# Supported OpenAPI versions
SUPPORTED_OPENAPI_PREFIX: Final = "3.1"

# HTTP verbs that may appear on a path item, in emission order
HTTP_METHODS: Final = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

# Parameter locations
PARAM_IN_PATH: Final = "path"
PARAM_IN_QUERY: Final = "query"
PARAM_IN_HEADER: Final = "header"
PARAM_IN_COOKIE: Final = "cookie"

# Media types
JSON_MEDIA_TYPE: Final = "application/json"
JSON_SUFFIX: Final = "+json"

# Schema traversal
MAX_SCHEMA_DEPTH: Final = 64
SCHEMA_REF_PREFIX: Final = "#/components/schemas/"

# Tag used for operations that declare none
DEFAULT_TAG: Final = "default"

# Emission defaults
DEFAULT_MAX_LINE_WIDTH: Final = 80
INDENT_WIDTH: Final = 2
TS_EXTENSION: Final = ".ts"
DEFAULT_BASE_PATH: Final = "http://localhost"
DEFAULT_TS_TARGET: Final = "es2020"
DEFAULT_PACKAGE_VERSION: Final = "0.1.0"

RUNTIME_MODULE: Final = "../runtime/runtime"
MODELS_MODULE_PREFIX: Final = "../models/"

DO_NOT_EDIT_HEADER: Final = "// DO NOT EDIT - This file is automatically generated"
TEMPLATE_HEADER: Final = (
    "// DO NOT EDIT - This file is automatically generated.\n"
    "// Any manual changes will be overwritten on the next generation.\n"
    "// To make changes, modify the source code and regenerate this file.\n"
)

# Response status codes that count as success, checked in this order
SUCCESS_STATUS_WILDCARD: Final = "2XX"


class FileCategory(str, Enum):
    """Category of a generated file; decides its output subdirectory."""

    APIS = "apis"
    MODELS = "models"
    RUNTIME = "runtime"
    PROJECT_FILES = "project_files"

    @property
    def subdirectory(self) -> str:
        return "" if self is FileCategory.PROJECT_FILES else self.value


class NamingConvention(str, Enum):
    """Filename convention for model files."""

    CAMEL = "camel"
    KEBAB = "kebab"
    SNAKE = "snake"
    PASCAL = "pascal"


class TypeScriptModule(str, Enum):
    COMMONJS = "commonjs"
    ESNEXT = "esnext"


# TypeScript reserved words that cannot be used as bare identifiers
TS_RESERVED_WORDS: Final = frozenset(
    {
        "break",
        "case",
        "catch",
        "class",
        "const",
        "continue",
        "debugger",
        "default",
        "delete",
        "do",
        "else",
        "enum",
        "export",
        "extends",
        "false",
        "finally",
        "for",
        "function",
        "if",
        "import",
        "in",
        "instanceof",
        "new",
        "null",
        "return",
        "super",
        "switch",
        "this",
        "throw",
        "true",
        "try",
        "typeof",
        "var",
        "void",
        "while",
        "with",
        "implements",
        "interface",
        "let",
        "package",
        "private",
        "protected",
        "public",
        "static",
        "yield",
        "await",
    }
)
