"""
Document combinators for width-aware layout.

A small Wadler-style pretty-printing algebra: documents are built from
``text``, ``line`` and friends, and ``group`` marks a region that is laid out
on one line when it fits in the available width and broken at its ``line``
points otherwise.

Example:
    >>> doc = group(text("{"), nest(2, line(), text("a: string")), line(), text("}"))
    >>> render(doc, 80)
    '{ a: string }'
    >>> render(doc, 5)
    '{\\n  a: string\\n}'
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Line:
    """A break point: ``flat`` when its group is flat, a newline otherwise."""

    flat: str = " "
    hard: bool = False


@dataclass(frozen=True)
class Nest:
    indent: int
    doc: Doc


@dataclass(frozen=True)
class Concat:
    parts: tuple[Doc, ...]


@dataclass(frozen=True)
class Group:
    doc: Doc


@dataclass(frozen=True)
class IfBreak:
    """Renders ``broken`` when the enclosing group is broken, ``flat`` otherwise."""

    broken: Doc
    flat: Doc


Doc = Union[Text, Line, Nest, Concat, Group, IfBreak]

NIL = Concat(())


def text(value: str) -> Doc:
    return Text(value)


def space() -> Doc:
    return Text(" ")


def line() -> Doc:
    """Break point rendered as a space when flat."""
    return Line(" ")


def softline() -> Doc:
    """Break point rendered as nothing when flat."""
    return Line("")


def hardline() -> Doc:
    """Unconditional newline; forces every enclosing group to break."""
    return Line("", hard=True)


def concat(*docs: Doc) -> Doc:
    return Concat(tuple(docs))


def nest(indent: int, *docs: Doc) -> Doc:
    return Nest(indent, concat(*docs))


def group(*docs: Doc) -> Doc:
    return Group(concat(*docs))


def if_break(broken: Doc, flat: Doc = NIL) -> Doc:
    return IfBreak(broken, flat)


def intersperse(separator: Doc, docs: Iterable[Doc]) -> Doc:
    parts: list[Doc] = []
    for index, doc in enumerate(docs):
        if index:
            parts.append(separator)
        parts.append(doc)
    return Concat(tuple(parts))


class _Mode(Enum):
    FLAT = 0
    BREAK = 1


_Item = tuple[int, _Mode, Doc]


def _fits(width: int, items: list[_Item]) -> bool:
    """Check whether ``items`` up to the next broken line fit in ``width`` columns.

    ``items`` is consumed front to back.
    """
    remaining = width
    stack = list(reversed(items))
    while stack:
        if remaining < 0:
            return False
        indent, mode, doc = stack.pop()
        match doc:
            case Text(text=value):
                remaining -= len(value)
            case Line(flat=flat, hard=hard):
                if mode is _Mode.BREAK:
                    return True
                if hard:
                    return False
                remaining -= len(flat)
            case Nest(indent=extra, doc=inner):
                stack.append((indent + extra, mode, inner))
            case Concat(parts=parts):
                stack.extend((indent, mode, part) for part in reversed(parts))
            case Group(doc=inner):
                stack.append((indent, mode, inner))
            case IfBreak(broken=broken, flat=flat_doc):
                stack.append((indent, mode, broken if mode is _Mode.BREAK else flat_doc))
    return remaining >= 0


def render(doc: Doc, width: int) -> str:
    """Lay out ``doc`` for a page ``width`` columns wide.

    Args:
        doc: Document to render.
        width: Maximum line width available to the document.

    Returns:
        The rendered text, without trailing whitespace on broken lines.
    """
    out: list[str] = []
    column = 0
    stack: list[_Item] = [(0, _Mode.BREAK, doc)]
    while stack:
        indent, mode, current = stack.pop()
        match current:
            case Text(text=value):
                out.append(value)
                column += len(value)
            case Line(flat=flat, hard=hard):
                if mode is _Mode.FLAT and not hard:
                    out.append(flat)
                    column += len(flat)
                else:
                    if out:
                        out[-1] = out[-1].rstrip(" ")
                    out.append("\n" + " " * indent)
                    column = indent
            case Nest(indent=extra, doc=inner):
                stack.append((indent + extra, mode, inner))
            case Concat(parts=parts):
                stack.extend((indent, mode, part) for part in reversed(parts))
            case Group(doc=inner):
                if mode is _Mode.FLAT:
                    stack.append((indent, _Mode.FLAT, inner))
                else:
                    rest = list(reversed(stack))
                    flat_item: _Item = (indent, _Mode.FLAT, inner)
                    next_mode = _Mode.FLAT if _fits(width - column, [flat_item, *rest]) else _Mode.BREAK
                    stack.append((indent, next_mode, inner))
            case IfBreak(broken=broken, flat=flat_doc):
                stack.append((indent, mode, broken if mode is _Mode.BREAK else flat_doc))
    return "".join(out)
