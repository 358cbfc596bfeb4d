"""Tag application engine.

Every tag first passes through a fixed baseline layer (``name``, ``sort``,
``kind``, ``description``), so dictionary hooks always see a doclet whose
identity fields are populated. One handler is then selected from
:class:`HandlerKind`: the definition's ``on_tagged`` hook, the fallback tag
list for unknown titles, or nothing for known titles without a hook.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from enum import StrEnum
from typing import TYPE_CHECKING

from docletkit_common.logging import get_logger

if TYPE_CHECKING:
    from docletkit.dictionary import TagDefinition, TagDictionary
    from docletkit.doclet import Doclet
    from docletkit.tags import Tag

__all__ = ["BASELINE_HANDLERS", "HandlerKind", "apply_tag", "select_handler"]

logger = get_logger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class HandlerKind(StrEnum):
    """How a tag is applied after the baseline layer."""

    HOOK = "hook"
    FALLBACK = "fallback"
    IGNORE = "ignore"


def _apply_name(doclet: Doclet, tag: Tag) -> None:
    doclet.name = tag.string_value


def _apply_sort(doclet: Doclet, tag: Tag) -> None:
    match = _LEADING_INT.match(tag.string_value or "")
    if match is None:
        logger.warning(
            "Ignoring non-numeric sort value",
            extra={"operation": "apply_tag", "status": "skipped", "value": tag.string_value},
        )
        return
    doclet.sort = int(match.group(1))


def _apply_kind(doclet: Doclet, tag: Tag) -> None:
    doclet.set_kind(tag.string_value)


def _apply_description(doclet: Doclet, tag: Tag) -> None:
    doclet.description = tag.string_value


BASELINE_HANDLERS: dict[str, Callable[[Doclet, Tag], None]] = {
    "name": _apply_name,
    "sort": _apply_sort,
    "kind": _apply_kind,
    "description": _apply_description,
}


def select_handler(definition: TagDefinition | None) -> HandlerKind:
    """Choose the handler variant for a looked-up definition."""
    if definition is None:
        return HandlerKind.FALLBACK
    if definition.on_tagged is not None:
        return HandlerKind.HOOK
    return HandlerKind.IGNORE


def apply_tag(doclet: Doclet, title: str, text: str | None, dictionary: TagDictionary) -> Tag:
    """Apply the tag ``@title text`` to ``doclet``.

    Parameters
    ----------
    doclet : Doclet
        Doclet being assembled; mutated in place.
    title : str
        Tag title as written.
    text : str | None
        Untrimmed tag body, or None.
    dictionary : TagDictionary
        Definitions used to parse the tag and pick its handler.

    Returns
    -------
    Tag
        The tag that was applied.
    """
    definition = dictionary.look_up(title)
    tag = dictionary.make_tag(title, text)

    baseline = BASELINE_HANDLERS.get(tag.title)
    if baseline is not None:
        baseline(doclet, tag)

    handler = select_handler(definition)
    if handler is HandlerKind.HOOK and definition is not None and definition.on_tagged is not None:
        definition.on_tagged(doclet, tag)
    elif handler is HandlerKind.FALLBACK:
        if doclet.tags is None:
            doclet.tags = []
        doclet.tags.append(tag)
    return tag
