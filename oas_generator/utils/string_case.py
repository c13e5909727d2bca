"""
String case conversion utilities for client generation.

This module provides the case conversions used for file names, TypeScript
identifiers and Rust identifiers, plus reserved-word handling for both
target languages.
"""

import re
from collections.abc import Callable
from typing import Final

from oas_generator.constants import TS_RESERVED_WORDS, NamingConvention

# Regex patterns for case conversion
_SNAKE_CASE_DELIMITER_PATTERN: Final = re.compile(r"[^a-zA-Z0-9]+")
_ACRONYM_PATTERN: Final = re.compile(r"([A-Z])([A-Z][a-z])")
_LOWER_UPPER_PATTERN: Final = re.compile(r"([a-z0-9])([A-Z])")
_NON_IDENTIFIER_PATTERN: Final = re.compile(r"[^a-zA-Z0-9_]")
_TS_IDENTIFIER_PATTERN: Final = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

RUST_KEYWORDS: Final = frozenset(
    {
        "as",
        "break",
        "const",
        "continue",
        "crate",
        "else",
        "enum",
        "extern",
        "false",
        "fn",
        "for",
        "if",
        "impl",
        "in",
        "let",
        "loop",
        "match",
        "mod",
        "move",
        "mut",
        "pub",
        "ref",
        "return",
        "self",
        "Self",
        "static",
        "struct",
        "super",
        "trait",
        "true",
        "type",
        "unsafe",
        "use",
        "where",
        "while",
        "async",
        "await",
        "dyn",
        "abstract",
        "become",
        "box",
        "do",
        "final",
        "macro",
        "override",
        "priv",
        "typeof",
        "unsized",
        "virtual",
        "yield",
        "try",
    }
)


def _convert_if_not_empty(string: str | None, conversion_func: Callable[[str], str]) -> str:
    """Safely convert a string, returning empty string if input is None or empty."""
    return conversion_func(string) if string else ""


def snakecase(string: str | None) -> str:
    """Convert string into snake_case.

    Every run of non-alphanumeric characters becomes a single underscore and
    camelCase boundaries (including acronyms) are split.

    Args:
        string: String to convert.

    Returns:
        Snake case string.

    Examples:
        >>> snakecase("HelloWorld")
        'hello_world'
        >>> snakecase("hello-world")
        'hello_world'
        >>> snakecase("getHTTPResponse")
        'get_http_response'
    """

    def _snakecase(s: str) -> str:
        s = _ACRONYM_PATTERN.sub(r"\1_\2", s)
        s = _LOWER_UPPER_PATTERN.sub(r"\1_\2", s)
        s = _SNAKE_CASE_DELIMITER_PATTERN.sub("_", s)
        return s.strip("_").lower()

    return _convert_if_not_empty(string, _snakecase)


def camelcase(string: str | None) -> str:
    """Convert string into camel case.

    Examples:
        >>> camelcase("hello_world")
        'helloWorld'
        >>> camelcase("GetPetById")
        'getPetById'
    """

    def _camelcase(s: str) -> str:
        words = [word for word in snakecase(s).split("_") if word]
        if not words:
            return ""
        return words[0] + "".join(word.capitalize() for word in words[1:])

    return _convert_if_not_empty(string, _camelcase)


def pascalcase(string: str | None) -> str:
    """Convert string into PascalCase.

    Examples:
        >>> pascalcase("hello_world")
        'HelloWorld'
        >>> pascalcase("pet-status")
        'PetStatus'
    """

    def _pascalcase(s: str) -> str:
        return "".join(word.capitalize() for word in snakecase(s).split("_"))

    return _convert_if_not_empty(string, _pascalcase)


def spinalcase(string: str | None) -> str:
    """Convert string into spinal-case (kebab-case).

    Examples:
        >>> spinalcase("PetStatus")
        'pet-status'
    """
    return snakecase(string).replace("_", "-")


def constcase(string: str | None) -> str:
    """Convert string into CONSTANT_CASE (upper snake case)."""
    return snakecase(string).upper()


kebabcase = spinalcase


def apply_naming_convention(name: str, convention: NamingConvention) -> str:
    """Convert a declaration name into a file base name.

    Args:
        name: The declaration name (e.g. ``PetStatus``).
        convention: The configured naming convention.

    Returns:
        The converted name without extension.
    """
    match convention:
        case NamingConvention.CAMEL:
            return camelcase(name)
        case NamingConvention.SNAKE:
            return snakecase(name)
        case NamingConvention.PASCAL:
            return pascalcase(name)
        case _:
            return spinalcase(name)


# TypeScript naming utilities


def ts_type_name(name: str | None) -> str:
    """PascalCase a schema or tag name into a valid TypeScript type identifier.

    Examples:
        >>> ts_type_name("pet_status")
        'PetStatus'
        >>> ts_type_name("2fa-settings")
        '_2faSettings'
    """
    converted = pascalcase(name)
    if not converted:
        return "Unnamed"
    if converted[0].isdigit():
        converted = f"_{converted}"
    return converted


def ts_identifier(name: str | None) -> str:
    """lowerCamelCase a wire name into a TypeScript value identifier.

    Reserved words get a trailing underscore.

    Examples:
        >>> ts_identifier("pet-id")
        'petId'
        >>> ts_identifier("delete")
        'delete_'
    """
    converted = camelcase(name)
    if not converted:
        return "param"
    if converted[0].isdigit():
        converted = f"_{converted}"
    if converted in TS_RESERVED_WORDS:
        converted = f"{converted}_"
    return converted


def is_ts_identifier(name: str) -> bool:
    """Check whether ``name`` can be used unquoted as a property key."""
    return bool(_TS_IDENTIFIER_PATTERN.match(name))


def ts_enum_variant_name(value: object) -> str:
    """Derive a PascalCase enum member name from an enum literal value.

    Purely numeric values get a leading underscore.

    Examples:
        >>> ts_enum_variant_name("available")
        'Available'
        >>> ts_enum_variant_name(404)
        '_404'
    """
    text = str(value).lower() if isinstance(value, bool) else str(value)
    converted = pascalcase(text)
    if not converted:
        return "Empty"
    if converted[0].isdigit():
        converted = f"_{converted}"
    return converted


# Rust naming utilities

rust_snake_case = snakecase
rust_pascal_case = pascalcase


def normalize_rust_identifier(name: str | None) -> str:
    """Normalize name to be a valid Rust identifier.

    Examples:
        >>> normalize_rust_identifier("123invalid")
        '_123invalid'
        >>> normalize_rust_identifier("valid@name")
        'valid_name'
    """

    def _normalize(s: str) -> str:
        normalized = _NON_IDENTIFIER_PATTERN.sub("_", s)
        if normalized and normalized[0].isdigit():
            normalized = f"_{normalized}"
        return normalized

    return _convert_if_not_empty(name, _normalize)


def escape_rust_keyword(name: str) -> str:
    """Escape Rust keywords with r# prefix if necessary.

    Examples:
        >>> escape_rust_keyword("type")
        'r#type'
        >>> escape_rust_keyword("name")
        'name'
    """
    return f"r#{name}" if name in RUST_KEYWORDS else name
