"""Tag records and parsing of tag bodies.

A tag body such as ``{(string|number)=} [label="x"] - The label.`` is parsed
into a :class:`TagValue` with type names, name, optional/default flags and a
description. Which parts are parsed depends on the tag's definition.
"""

from __future__ import annotations

import re
import textwrap
from dataclasses import dataclass

from docletkit.models import TypeSpec

__all__ = [
    "Tag",
    "TagValue",
    "TypeExpression",
    "parse_tag_value",
    "parse_type_expression",
    "split_type_names",
    "trim_text",
]

_BRACKETS = {"(": ")", "<": ">", "{": "}", "[": "]"}
_CLOSERS = frozenset(_BRACKETS.values())
_DESCRIPTION_HYPHEN = re.compile(r"^\s*-\s+")
_EDGE_NEWLINES = re.compile(r"^[\n\r\f]+|[\n\r\f]+$")


@dataclass(slots=True)
class TypeExpression:
    """A parsed ``{...}`` type expression with its modifiers."""

    names: list[str]
    optional: bool | None = None
    nullable: bool | None = None
    variable: bool | None = None


@dataclass(slots=True)
class TagValue:
    """Structured value of a tag whose definition accepts a type and/or name."""

    type: TypeSpec | None = None
    name: str | None = None
    optional: bool | None = None
    nullable: bool | None = None
    variable: bool | None = None
    defaultvalue: str | None = None
    description: str | None = None


@dataclass(slots=True)
class Tag:
    """A tag applied to a doclet.

    ``title`` is the canonical title after synonym resolution;
    ``original_title`` is what the author wrote.
    """

    original_title: str
    title: str
    text: str | None = None
    value: TagValue | str | None = None

    @property
    def string_value(self) -> str | None:
        """The value as plain text, using the description for structured values."""
        if isinstance(self.value, TagValue):
            return self.value.description
        return self.value


def trim_text(text: str | None, *, keep_whitespace: bool = False, remove_indent: bool = False) -> str:
    """Trim a tag body, optionally keeping inner whitespace and dedenting."""
    if not text:
        return ""
    if keep_whitespace:
        trimmed = _EDGE_NEWLINES.sub("", text)
        if remove_indent:
            trimmed = textwrap.dedent(trimmed)
        return trimmed
    return text.strip()


def _matching_close(text: str, start: int) -> int:
    """Index of the bracket closing ``text[start]``, or -1 when unbalanced."""
    depth = 0
    opener = text[start]
    closer = _BRACKETS[opener]
    for index in range(start, len(text)):
        char = text[index]
        if char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return index
    return -1


def split_type_names(expression: str) -> list[str]:
    """Split ``a|b<c|d>|e`` on top-level pipes only."""
    names: list[str] = []
    depth = 0
    current: list[str] = []
    for char in expression:
        if char in _BRACKETS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
        if char == "|" and depth == 0:
            names.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    names.append("".join(current).strip())
    return [name for name in names if name]


def parse_type_expression(expression: str) -> TypeExpression:
    """Parse the contents of a ``{...}`` type expression.

    >>> parse_type_expression("?(string|number)=").names
    ['string', 'number']
    """
    expr = expression.strip()
    result = TypeExpression(names=[])
    if expr.startswith("..."):
        result.variable = True
        expr = expr[3:].lstrip()
    if expr.startswith("?"):
        result.nullable = True
        expr = expr[1:]
    elif expr.startswith("!"):
        result.nullable = False
        expr = expr[1:]
    if expr.endswith("="):
        result.optional = True
        expr = expr[:-1].rstrip()
    if expr.startswith("(") and _matching_close(expr, 0) == len(expr) - 1:
        expr = expr[1:-1]
    result.names = split_type_names(expr)
    return result


def _extract_type(text: str) -> tuple[str | None, str]:
    stripped = text.lstrip()
    if not stripped.startswith("{"):
        return None, text
    end = _matching_close(stripped, 0)
    if end < 0:
        return None, text
    return stripped[1:end], stripped[end + 1 :]


def _extract_name(text: str) -> tuple[str | None, bool | None, str | None, str]:
    stripped = text.lstrip()
    if not stripped:
        return None, None, None, ""
    if stripped.startswith("["):
        end = _matching_close(stripped, 0)
        if end > 0:
            inner = stripped[1:end]
            name, _, default = inner.partition("=")
            return name.strip() or None, True, default.strip() or None, stripped[end + 1 :]
    parts = stripped.split(None, 1)
    rest = parts[1] if len(parts) > 1 else ""
    return parts[0], None, None, rest


def parse_tag_value(
    text: str,
    *,
    can_have_type: bool,
    can_have_name: bool,
    bare_type: bool = False,
) -> TagValue:
    """Parse a trimmed tag body into a :class:`TagValue`.

    ``bare_type`` treats an unbraced body as the type expression itself, as in
    ``@type string``.
    """
    value = TagValue()
    remaining = text
    if can_have_type:
        expression, remaining = _extract_type(remaining)
        if expression is None and bare_type and remaining.strip():
            expression, remaining = remaining, ""
        if expression is not None:
            parsed = parse_type_expression(expression)
            value.type = TypeSpec(names=parsed.names)
            value.optional = parsed.optional
            value.nullable = parsed.nullable
            value.variable = parsed.variable
    if can_have_name:
        name, optional, default, remaining = _extract_name(remaining)
        value.name = name
        if optional:
            value.optional = True
        value.defaultvalue = default
    description = _DESCRIPTION_HYPHEN.sub("", remaining).strip()
    value.description = description or None
    return value
