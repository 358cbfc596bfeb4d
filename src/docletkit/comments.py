"""Comment normalisation and tag tokenisation.

Raw ``/** ... */`` text is reduced to canonical prose-plus-tags text by
:func:`unwrap`, given an implicit leading tag by :func:`infer_description`
and split into ordered ``(title, text)`` records by :func:`to_tags`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = [
    "CLASS_DECLARATION_TYPES",
    "RawTag",
    "infer_description",
    "parse_comment",
    "to_tags",
    "unwrap",
]

CLASS_DECLARATION_TYPES = frozenset({"ClassDeclaration", "ClassExpression"})

_END_MARKER = "\\Z"
_OPENING = re.compile(r"^/\*\*+")
_CLOSING = re.compile(r"\**\*/\Z")
# The margin may swallow blank lines above a starred line; ``\s`` spans newlines.
_MARGIN = re.compile(r"^\s*(\* ?|\\Z)", re.MULTILINE)
_TRAILING_END = re.compile(r"\s*\\Z\Z")

_TAG_START = re.compile(r"^(\s*)@(\S)", re.MULTILINE)
_SPLITTER = "\\@"
_TAG_PARTS = re.compile(r"^(\S+)(?:\s+(\S[\s\S]*))?")
_LEADING_TAG = re.compile(r"^\s*@")


@dataclass(slots=True, frozen=True)
class RawTag:
    """A tag as written: its title and untrimmed body (``None`` when absent)."""

    title: str
    text: str | None = None


def unwrap(source: str | None) -> str:
    """Strip comment delimiters and left margins, keeping trailing whitespace.

    >>> unwrap("/**\\n * Hello.\\n * @since 1.0\\n */")
    'Hello.\\n@since 1.0\\n'
    """
    if not source:
        return ""
    text = _OPENING.sub("", source, count=1)
    text = _CLOSING.sub(lambda _match: _END_MARKER, text, count=1)
    text = _MARGIN.sub("", text)
    return _TRAILING_END.sub("", text)


def infer_description(text: str, code_type: str | None = None) -> str:
    """Prefix untagged leading prose with ``@description`` or ``@classdesc``."""
    if _LEADING_TAG.match(text) or not re.sub(r"\s", "", text):
        return text
    title = "classdesc" if code_type in CLASS_DECLARATION_TYPES else "description"
    return f"@{title} {text}"


def to_tags(text: str) -> list[RawTag]:
    """Split canonical text into tags in source order."""
    tags: list[RawTag] = []
    marked = _TAG_START.sub(lambda match: f"{match.group(1)}{_SPLITTER}{match.group(2)}", text)
    for chunk in marked.split(_SPLITTER):
        if not chunk:
            continue
        match = _TAG_PARTS.match(chunk)
        if match is None:
            continue
        tags.append(RawTag(title=match.group(1), text=match.group(2)))
    return tags


def parse_comment(source: str | None, code_type: str | None = None) -> list[RawTag]:
    """Run the full normalise, infer and tokenise sequence over a raw comment."""
    return to_tags(infer_description(unwrap(source), code_type))
