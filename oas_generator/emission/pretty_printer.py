"""
Pretty-printer emission mode.

Renders AST declarations whose layout depends on line width (interfaces,
type aliases, enums, imports and signatures) as TypeScript source.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import Final

from oas_generator.ast import (
    UNDEFINED,
    ArrayType,
    Class,
    ClassProperty,
    Enum,
    FunctionType,
    Generic,
    Import,
    IndexSignature,
    Interface,
    IntersectionType,
    Literal,
    Method,
    MethodParameter,
    ObjectProperty,
    ObjectType,
    Primitive,
    Property,
    Reference,
    TupleType,
    TypeAlias,
    TypeExpression,
    UnionType,
    is_complex,
    union_of,
)
from oas_generator.ast.declarations import Declaration
from oas_generator.constants import DEFAULT_MAX_LINE_WIDTH, INDENT_WIDTH
from oas_generator.emission.doc import (
    Doc,
    concat,
    group,
    hardline,
    if_break,
    intersperse,
    line,
    nest,
    render,
    softline,
    text,
)
from oas_generator.utils.string_case import is_ts_identifier

_MAX_INLINE_MEMBERS: Final = 2
_INDEX_KEY_NAME: Final = "key"


@dataclass(frozen=True)
class EmissionContext:
    """Layout state shared by both emission modes."""

    indent_level: int = 0
    max_line_width: int = DEFAULT_MAX_LINE_WIDTH

    @property
    def available_width(self) -> int:
        return max(self.max_line_width - self.indent_level * INDENT_WIDTH, 1)

    def indented(self, levels: int = 1) -> EmissionContext:
        return replace(self, indent_level=self.indent_level + levels)


def format_doc_comment(documentation: str | None, indent: int = 0) -> str:
    """Format text as a JSDoc comment.

    Args:
        documentation: Comment text; may span several lines.
        indent: Number of spaces to prefix every line with.

    Returns:
        ``/** text */`` for one line, a block comment otherwise, or an empty
        string when there is no text.

    Examples:
        >>> format_doc_comment("A pet")
        '/** A pet */'
        >>> format_doc_comment("A pet\\nin the store")
        '/**\\n * A pet\\n * in the store\\n */'
    """
    if not documentation or not documentation.strip():
        return ""

    pad = " " * indent
    lines = [raw.rstrip().replace("*/", "*\\/") for raw in documentation.strip().split("\n")]
    if len(lines) == 1:
        return f"{pad}/** {lines[0]} */"
    body = "\n".join(f"{pad} * {content}".rstrip() for content in lines)
    return f"{pad}/**\n{body}\n{pad} */"


def property_key(name: str) -> str:
    """Quote a property name unless it is a plain identifier."""
    return name if is_ts_identifier(name) else json.dumps(name)


def _comment_doc(documentation: str | None) -> Doc | None:
    comment = format_doc_comment(documentation)
    if not comment:
        return None
    return intersperse(hardline(), [text(part) for part in comment.split("\n")])


class TsPrettyPrinter:
    """Renders AST nodes as TypeScript with width-sensitive layout."""

    def __init__(self, context: EmissionContext | None = None) -> None:
        self.context = context or EmissionContext()

    def _render(self, doc: Doc) -> str:
        return render(doc, self.context.available_width)

    # Type expressions

    def type_doc(self, expr: TypeExpression) -> Doc:
        match expr:
            case Primitive(kind=kind):
                return text(kind.ts_name)
            case Reference(name=name, type_arguments=arguments) if arguments:
                return concat(
                    text(f"{name}<"),
                    intersperse(text(", "), [self.type_doc(arg) for arg in arguments]),
                    text(">"),
                )
            case Reference(name=name) | Generic(name=name):
                return text(name)
            case Literal(text=value):
                return text(value)
            case ArrayType(element=element):
                return concat(text("Array<"), self.type_doc(element), text(">"))
            case TupleType(elements=elements):
                return concat(text("["), intersperse(text(", "), [self.type_doc(e) for e in elements]), text("]"))
            case UnionType(members=members):
                return intersperse(text(" | "), [self._operand_doc(m, in_union=True) for m in members])
            case IntersectionType(members=members):
                return intersperse(text(" & "), [self._operand_doc(m, in_union=False) for m in members])
            case FunctionType(parameters=parameters, return_type=return_type):
                params = [
                    concat(text(param.name), text("?: " if param.optional else ": "), self.type_doc(param.type))
                    for param in parameters
                ]
                return concat(
                    text("("),
                    intersperse(text(", "), params),
                    text(") => "),
                    self.type_doc(return_type) if return_type else text("void"),
                )
            case ObjectType(properties=properties):
                return self._object_doc(properties, force_break=is_complex(expr))
            case IndexSignature():
                return concat(text("{ "), self._index_member_doc(expr), text(" }"))
        msg = f"Unsupported type expression: {expr!r}"
        raise TypeError(msg)

    def _operand_doc(self, expr: TypeExpression, *, in_union: bool) -> Doc:
        needs_parens = isinstance(expr, FunctionType) or (not in_union and isinstance(expr, UnionType))
        inner = self.type_doc(expr)
        return concat(text("("), inner, text(")")) if needs_parens else inner

    def _index_member_doc(self, signature: IndexSignature) -> Doc:
        return concat(
            text(f"[{_INDEX_KEY_NAME}: {signature.key_type}]: "),
            self.type_doc(signature.value),
        )

    def _property_doc(self, prop: Property | ObjectProperty) -> Doc:
        modifier = "readonly " if prop.readonly else ""
        marker = "?: " if prop.optional else ": "
        return concat(text(f"{modifier}{property_key(prop.name)}{marker}"), self.type_doc(prop.type))

    def _members_block(self, members: list[Doc], *, force_break: bool) -> Doc:
        """Brace-delimited member list, one member per line when broken."""
        if not members:
            return text("{}")
        if force_break:
            body = concat(*[concat(hardline(), member, text(";")) for member in members])
            return concat(text("{"), nest(INDENT_WIDTH, body), hardline(), text("}"))
        return group(
            text("{"),
            nest(INDENT_WIDTH, line(), intersperse(concat(text(";"), line()), members), if_break(text(";"))),
            line(),
            text("}"),
        )

    def _object_doc(self, properties: tuple[ObjectProperty, ...], *, force_break: bool) -> Doc:
        return self._members_block([self._property_doc(prop) for prop in properties], force_break=force_break)

    def format_type_expr(self, expr: TypeExpression) -> str:
        return self._render(self.type_doc(expr))

    # Declarations

    @staticmethod
    def _generics(generics: list[str]) -> str:
        return f"<{', '.join(generics)}>" if generics else ""

    def format_interface_signature(self, interface: Interface) -> str:
        signature = f"export interface {interface.name}{self._generics(interface.generics)}"
        if interface.extends:
            signature += f" extends {', '.join(interface.extends)}"
        return signature

    def interface_is_multiline(self, interface: Interface) -> bool:
        if interface.member_count > _MAX_INLINE_MEMBERS:
            return True
        if any(prop.documentation for prop in interface.properties):
            return True
        types = [prop.type for prop in interface.properties]
        if interface.index_signature:
            types.append(interface.index_signature.value)
        return any(is_complex(expr) for expr in types)

    def interface_doc(self, interface: Interface) -> Doc:
        members: list[Doc] = []
        for prop in interface.properties:
            member = self._property_doc(prop)
            comment = _comment_doc(prop.documentation)
            members.append(concat(comment, hardline(), member) if comment else member)
        if interface.index_signature:
            members.append(self._index_member_doc(interface.index_signature))

        parts: list[Doc] = []
        comment = _comment_doc(interface.documentation)
        if comment:
            parts.extend([comment, hardline()])
        parts.append(text(f"{self.format_interface_signature(interface)} "))
        parts.append(self._members_block(members, force_break=self.interface_is_multiline(interface)))
        return concat(*parts)

    def format_interface(self, interface: Interface) -> str:
        return self._render(self.interface_doc(interface))

    def format_type_alias(self, alias: TypeAlias) -> str:
        parts: list[Doc] = []
        comment = _comment_doc(alias.documentation)
        if comment:
            parts.extend([comment, hardline()])
        parts.append(text(f"export type {alias.name}{self._generics(alias.generics)} = "))
        parts.append(self.type_doc(alias.expression))
        parts.append(text(";"))
        return self._render(concat(*parts))

    def format_enum(self, enum: Enum) -> str:
        keyword = "export const enum" if enum.is_const else "export enum"
        variants = [
            text(f"{variant.name} = {variant.value}" if variant.value is not None else variant.name)
            for variant in enum.variants
        ]
        parts: list[Doc] = []
        comment = _comment_doc(enum.documentation)
        if comment:
            parts.extend([comment, hardline()])
        parts.append(text(f"{keyword} {enum.name} "))
        if not variants:
            parts.append(text("{}"))
        elif len(variants) > _MAX_INLINE_MEMBERS:
            body = concat(*[concat(hardline(), variant, text(",")) for variant in variants])
            parts.append(concat(text("{"), nest(INDENT_WIDTH, body), hardline(), text("}")))
        else:
            parts.append(
                group(
                    text("{"),
                    nest(INDENT_WIDTH, line(), intersperse(concat(text(","), line()), variants), if_break(text(","))),
                    line(),
                    text("}"),
                )
            )
        return self._render(concat(*parts))

    def format_declaration(self, declaration: Declaration) -> str:
        match declaration:
            case Interface():
                return self.format_interface(declaration)
            case TypeAlias():
                return self.format_type_alias(declaration)
            case Enum():
                return self.format_enum(declaration)
        msg = f"Unsupported declaration: {declaration!r}"
        raise TypeError(msg)

    def format_import(self, import_node: Import) -> str:
        """Render an import statement, one specifier per line when it does not fit."""
        specifiers: list[Doc] = []
        for spec in import_node.specifiers:
            prefix = "type " if spec.is_type_only and not import_node.is_type_only else ""
            alias = f" as {spec.alias}" if spec.alias else ""
            specifiers.append(text(f"{prefix}{spec.name}{alias}"))
        keyword = "import type " if import_node.is_type_only else "import "
        doc = concat(
            text(keyword),
            group(
                text("{"),
                nest(INDENT_WIDTH, line(), intersperse(concat(text(","), line()), specifiers), if_break(text(","))),
                line(),
                text("}"),
            ),
            text(f" from '{import_node.module_path}';"),
        )
        return self._render(doc)

    # Class members

    def format_ts_property(self, prop: Property) -> str:
        return self._render(concat(self._property_doc(prop), text(";")))

    def format_ts_class_property(self, prop: ClassProperty) -> str:
        modifiers = []
        if prop.visibility != "public":
            modifiers.append(prop.visibility)
        if prop.is_static:
            modifiers.append("static")
        if prop.readonly:
            modifiers.append("readonly")
        prefix = " ".join([*modifiers, ""])
        marker = "?: " if prop.optional else ": "
        initializer = f" = {prop.initializer}" if prop.initializer is not None else ""
        return self._render(
            concat(text(f"{prefix}{prop.name}{marker}"), self.type_doc(prop.type), text(f"{initializer};"))
        )

    def _parameter_docs(self, parameters: list[MethodParameter]) -> list[Doc]:
        docs: list[Doc] = []
        for index, param in enumerate(parameters):
            # an optional parameter may not precede a required one
            later_required = any(not later.optional for later in parameters[index + 1 :])
            if param.optional and later_required:
                expr = union_of([param.type, UNDEFINED])
                docs.append(concat(text(f"{param.name}: "), self.type_doc(expr)))
                continue
            marker = "?: " if param.optional else ": "
            default = f" = {param.default}" if param.default is not None else ""
            docs.append(concat(text(f"{param.name}{marker}"), self.type_doc(param.type), text(default)))
        return docs

    def method_signature_doc(self, method: Method) -> Doc:
        modifiers = []
        if method.visibility != "public":
            modifiers.append(method.visibility)
        if method.is_static:
            modifiers.append("static")
        if method.is_async:
            modifiers.append("async")
        prefix = " ".join([*modifiers, ""])
        params = self._parameter_docs(method.parameters)
        param_list: Doc = text("()")
        if params:
            param_list = group(
                text("("),
                nest(INDENT_WIDTH, softline(), intersperse(concat(text(","), line()), params), if_break(text(","))),
                softline(),
                text(")"),
            )
        return_doc = concat(text(": "), self.type_doc(method.return_type)) if method.return_type else text("")
        return concat(text(f"{prefix}{method.name}"), param_list, return_doc)

    def format_method_signature(self, method: Method) -> str:
        return self._render(self.method_signature_doc(method))

    def format_class_signature(self, class_node: Class) -> str:
        signature = f"export class {class_node.name}{self._generics(class_node.generics)}"
        if class_node.extends:
            signature += f" extends {class_node.extends}"
        if class_node.implements:
            signature += f" implements {', '.join(class_node.implements)}"
        return signature

