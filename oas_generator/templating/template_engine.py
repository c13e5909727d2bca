"""
TypeScript Template Engine for OpenAPI Client Generation

Jinja2 templates render everything the pretty printer does not: API class
bodies, the runtime module, project files and the Rust backend sources.
"""

from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, TemplateNotFound, select_autoescape

from oas_generator.ast import Method
from oas_generator.constants import DO_NOT_EDIT_HEADER, TEMPLATE_HEADER
from oas_generator.emission.pretty_printer import EmissionContext, TsPrettyPrinter
from oas_generator.errors import EmissionError
from oas_generator.templating.filters import FILTERS
from oas_generator.utils.string_case import camelcase, pascalcase, rust_pascal_case, rust_snake_case, snakecase

logger = logging.getLogger(__name__)

METHOD_BODY_DIR = "api/method_bodies"
_BODY_VERBS = frozenset({"POST", "PUT", "PATCH"})

_COMMENT_STYLES = {
    "ts": ("// ", "//"),
    "rust": ("// ", "//"),
    "toml": ("# ", "#"),
}


def select_method_template(http_method: str) -> str:
    """Choose the method-body template for an HTTP verb.

    Examples:
        >>> select_method_template("patch")
        'api_method_post_put'
        >>> select_method_template("HEAD")
        'default'
    """
    verb = http_method.upper()
    if verb == "GET":
        return "api_method_get"
    if verb in _BODY_VERBS:
        return "api_method_post_put"
    if verb == "DELETE":
        return "api_method_delete"
    return "default"


def file_header(title: str | None = None, version: str | None = None, style: str = "ts") -> str:
    """Banner placed at the top of template-rendered files.

    Examples:
        >>> print(file_header("Petstore", "1.0.0"))  # doctest: +NORMALIZE_WHITESPACE
        // DO NOT EDIT - This file is automatically generated.
        // Any manual changes will be overwritten on the next generation.
        // To make changes, modify the source code and regenerate this file.
        //
        // Petstore 1.0.0
    """
    banner = [line.removeprefix("// ") for line in TEMPLATE_HEADER.splitlines()]
    if style == "markdown":
        lines = [f"<!-- {line} -->" for line in banner]
        return "\n".join(lines)
    prefix, bare = _COMMENT_STYLES.get(style, _COMMENT_STYLES["ts"])
    lines = [f"{prefix}{line}" for line in banner]
    if title:
        lines.append(bare)
        lines.append(f"{prefix}{title} {version}".rstrip() if version else f"{prefix}{title}")
    return "\n".join(lines)


class TemplateEngine:
    """Renders every bundled template: TypeScript API classes, the runtime, package files and Rust modules."""

    def __init__(self, template_dir: Path | None = None, context: EmissionContext | None = None) -> None:
        if template_dir is None:
            current_dir = Path(__file__).parent
            template_dir = current_dir.parent / "templates"

        self.template_dir = Path(template_dir)
        self.context = context or EmissionContext()
        self.printer = TsPrettyPrinter(self.context)
        self.member_printer = TsPrettyPrinter(self.context.indented())
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

        self._register_filters()
        self._register_globals()

    def _register_filters(self) -> None:
        """Register custom Jinja2 filters for code generation."""
        printer_filters = {
            "format_type_expr": self.printer.format_type_expr,
            "format_import": self.printer.format_import,
            "format_interface_signature": self.printer.format_interface_signature,
            "format_class_signature": self.printer.format_class_signature,
            "format_ts_property": self.member_printer.format_ts_property,
            "format_ts_class_property": self.member_printer.format_ts_class_property,
            "format_method_signature": self.member_printer.format_method_signature,
        }
        case_filters = {
            "camel_case": camelcase,
            "pascal_case": pascalcase,
            "snake_case": snakecase,
            "rust_snake_case": rust_snake_case,
            "rust_pascal_case": rust_pascal_case,
        }

        self.env.filters.update(case_filters)
        self.env.filters.update(FILTERS)
        self.env.filters.update(printer_filters)

    def _register_globals(self) -> None:
        """Register global functions available in templates."""
        globals_map: dict[str, Any] = {
            "do_not_edit": lambda: DO_NOT_EDIT_HEADER,
            "file_header": file_header,
            "markdown_header": partial(file_header, style="markdown"),
            "http_method_body": self.http_method_body,
            "method_body": self.method_body,
        }
        self.env.globals.update(globals_map)

    def render_template(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a template with the given context.

        Raises:
            EmissionError: If the template is missing or fails to render.
        """
        try:
            template = self.env.get_template(template_name)
            return template.render(**context)
        except TemplateNotFound as exc:
            msg = f"template not found: {exc.name}"
            raise EmissionError(msg, element=template_name) from exc
        except TemplateError as exc:
            msg = f"template rendering failed: {exc}"
            raise EmissionError(msg, element=template_name) from exc

    def http_method_body(self, http_method: str, data: Any) -> str:  # noqa: ANN401
        """Render the request-issuing body for an operation's raw method."""
        template_name = f"{METHOD_BODY_DIR}/{select_method_template(http_method)}.j2"
        logger.debug("Rendering %s for %s", template_name, getattr(data, "method_name", http_method))
        return self.render_template(template_name, {"data": data}).rstrip("\n")

    def method_body(self, method: Method) -> str:
        """Render a method body from the template named on the method node."""
        if method.body_template is None:
            return self.http_method_body(method.body_data.http_method, method.body_data)
        template_name = f"{METHOD_BODY_DIR}/{method.body_template}.j2"
        return self.render_template(template_name, {"data": method.body_data, "method": method}).rstrip("\n")
