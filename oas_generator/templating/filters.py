"""
Jinja2 filters for TypeScript and Rust code generation.

The filters here are plain functions; the filters bound to a pretty printer
(``format_type_expr`` and friends) are registered by the template engine.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from typing import Any, Final

from oas_generator.emission.pretty_printer import format_doc_comment

_DEFAULT_VERSION: Final = "0.1.0"
_MAX_SEMVER_PARTS: Final = 3
_PATH_PARAM_PATTERN: Final = re.compile(r"\{([^{}]+)\}")

_DOC_BULLET_PREFIXES: Final = ("* ", "- ", "+ ")
_DOC_INDENT_PREFIX: Final = "///   "
_DOC_NORMAL_PREFIX: Final = "/// "


def indent(text: str, width: int = 2, first: bool = True) -> str:
    """Indent every non-blank line of ``text`` by ``width`` spaces.

    Unlike the Jinja builtin, the first line is indented by default and blank
    lines stay empty.

    Examples:
        >>> indent("a\\n\\nb", 2)
        '  a\\n\\n  b'
    """
    if not text:
        return ""
    pad = " " * width
    lines = text.split("\n")
    out = []
    for index, line in enumerate(lines):
        if not line.strip() or (index == 0 and not first):
            out.append(line if line.strip() else "")
        else:
            out.append(f"{pad}{line}")
    return "\n".join(out)


def ts_string_literal(text: str) -> str:
    """Single-quoted TypeScript string literal.

    Examples:
        >>> ts_string_literal("it's")
        "'it\\\\'s'"
    """
    escaped = text.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


def path_template_literal(path: str, path_params: Iterable[Any]) -> str:
    """Render a path template as a TypeScript template literal.

    Placeholders whose wire name matches a path parameter are replaced by the
    URI-encoded parameter identifier.

    Args:
        path: OpenAPI path template, e.g. ``/pet/{petId}``.
        path_params: Parameters exposing ``original_name`` and ``name``.

    Returns:
        The template literal source, backticks included.

    Examples:
        >>> from types import SimpleNamespace as P
        >>> path_template_literal("/pet/{pet-id}", [P(original_name="pet-id", name="petId")])
        '`/pet/${encodeURIComponent(String(petId))}`'
    """
    identifiers = {param.original_name: param.name for param in path_params}
    parts: list[str] = []
    last = 0
    for match in _PATH_PARAM_PATTERN.finditer(path):
        parts.append(_escape_template_text(path[last : match.start()]))
        name = match.group(1)
        if name in identifiers:
            parts.append(f"${{encodeURIComponent(String({identifiers[name]}))}}")
        else:
            parts.append(_escape_template_text(match.group(0)))
        last = match.end()
    parts.append(_escape_template_text(path[last:]))
    return f"`{''.join(parts)}`"


def _escape_template_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def json_value(value: Any) -> str:  # noqa: ANN401
    return json.dumps(value)


def ensure_semver(version_str: str) -> str:
    """Ensure version string is valid semantic versioning format.

    Examples:
        >>> ensure_semver("1")
        '1.0.0'
        >>> ensure_semver("v1.2.3")
        '1.2.3'
    """
    if not version_str:
        return _DEFAULT_VERSION

    cleaned_version = version_str.strip().lstrip("v").split("-")[0].split("+")[0]
    parts = [part if part.isdigit() else "0" for part in cleaned_version.split(".") if part.strip()]
    if not parts:
        return _DEFAULT_VERSION

    match len(parts):
        case 1:
            parts.extend(["0", "0"])
        case 2:
            parts.append("0")
        case n if n > _MAX_SEMVER_PARTS:
            parts = parts[:_MAX_SEMVER_PARTS]

    return ".".join(parts)


def rust_doc_comment(text: str | None, indent: int = 0) -> str:
    """Convert text to Rust doc comment format, indenting bullet lines.

    Examples:
        >>> rust_doc_comment("A pet")
        '/// A pet'
    """
    if not text:
        return ""

    lines = text.strip().split("\n")
    indent_str = " " * indent
    result = []
    for line in lines:
        stripped_line = line.strip()
        prefix = _DOC_INDENT_PREFIX if stripped_line.startswith(_DOC_BULLET_PREFIXES) else _DOC_NORMAL_PREFIX
        result.append(f"{indent_str}{prefix}{stripped_line}".rstrip())
    return "\n".join(result)


def rust_string_literal(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


# Register filters that will be available in Jinja templates
FILTERS = {
    "indent": indent,
    "format_doc_comment": format_doc_comment,
    "ts_string_literal": ts_string_literal,
    "path_template_literal": path_template_literal,
    "json_value": json_value,
    "ensure_semver": ensure_semver,
    "rust_doc_comment": rust_doc_comment,
    "rust_string_literal": rust_string_literal,
}
