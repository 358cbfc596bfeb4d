"""Tag dictionary: the explicit table of known tag titles and their hooks.

A :class:`TagDictionary` is constructed up front and passed to the engine
through :class:`~docletkit.context.DocletContext`; definitions are never
patched at runtime. Titles are matched case-insensitively and synonyms map to
one canonical title.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, MutableMapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from docletkit.tags import Tag, TagValue, parse_tag_value, trim_text
from docletkit_common.errors import TagDefinitionError

if TYPE_CHECKING:
    from docletkit.doclet import Doclet

__all__ = ["PropertyHook", "TagDefinition", "TagDictionary", "TagHook"]

TagHook: TypeAlias = Callable[["Doclet", Tag], None]
PropertyHook: TypeAlias = Callable[["Doclet", MutableMapping[str, object], Tag], None]


@dataclass(slots=True, frozen=True)
class TagDefinition:
    """How one tag title is parsed and what it does to a doclet.

    Parameters
    ----------
    title : str
        Canonical title, stored lower-case.
    synonyms : tuple[str, ...], optional
        Alternative titles resolving to ``title``.
    can_have_type : bool, optional
        Parse a leading ``{type}`` expression.
    can_have_name : bool, optional
        Parse a name (``name`` or ``[name=default]``) after the type.
    bare_type : bool, optional
        Accept an unbraced body as the type expression.
    keeps_whitespace : bool, optional
        Keep inner whitespace of the body instead of trimming it.
    removes_indent : bool, optional
        Dedent a whitespace-preserving body.
    is_namespace : bool, optional
        Doclets of this kind get a ``title:`` longname prefix.
    on_tagged : TagHook | None, optional
        Mutates the doclet the tag is applied to.
    on_property_tagged : PropertyHook | None, optional
        Records the tag on an interface member's side table.
    """

    title: str
    synonyms: tuple[str, ...] = ()
    can_have_type: bool = False
    can_have_name: bool = False
    bare_type: bool = False
    keeps_whitespace: bool = False
    removes_indent: bool = False
    is_namespace: bool = False
    on_tagged: TagHook | None = None
    on_property_tagged: PropertyHook | None = None


class TagDictionary:
    """Lookup table from tag titles (and synonyms) to :class:`TagDefinition`."""

    def __init__(self, definitions: Iterable[TagDefinition] = ()) -> None:
        self._definitions: dict[str, TagDefinition] = {}
        self._synonyms: dict[str, str] = {}
        for definition in definitions:
            self.define(definition)

    def __contains__(self, title: object) -> bool:
        return isinstance(title, str) and self.look_up(title) is not None

    def __iter__(self) -> Iterator[TagDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    def define(self, definition: TagDefinition, *, replace: bool = False) -> TagDefinition:
        """Add ``definition`` to the table.

        Raises
        ------
        TagDefinitionError
            If the title or a synonym is already taken and ``replace`` is false.
        """
        title = definition.title.lower()
        synonyms = tuple(synonym.lower() for synonym in definition.synonyms)
        if not replace:
            taken = [name for name in (title, *synonyms) if name in self._definitions or name in self._synonyms]
            if taken:
                msg = f"Tag title already defined: {', '.join(taken)}"
                raise TagDefinitionError(msg, context={"title": title, "conflicts": taken})
        self._definitions[title] = definition
        for synonym in synonyms:
            self._synonyms[synonym] = title
        return definition

    def normalise(self, title: str) -> str:
        """Return the canonical title for ``title``."""
        canonical = title.lower()
        return self._synonyms.get(canonical, canonical)

    def look_up(self, title: str) -> TagDefinition | None:
        return self._definitions.get(self.normalise(title))

    def is_namespace(self, kind: str | None) -> bool:
        """Whether doclets of ``kind`` carry a namespace longname prefix."""
        if not kind:
            return False
        definition = self._definitions.get(kind.lower())
        return bool(definition and definition.is_namespace)

    def make_tag(self, title: str, text: str | None = None) -> Tag:
        """Build a :class:`Tag`, parsing its value according to the definition."""
        definition = self.look_up(title)
        canonical = self.normalise(title)
        if definition is None:
            trimmed = trim_text(text)
            return Tag(original_title=title, title=canonical, text=trimmed or None, value=trimmed or None)

        trimmed = trim_text(
            text,
            keep_whitespace=definition.keeps_whitespace,
            remove_indent=definition.removes_indent,
        )
        value: TagValue | str | None
        if definition.can_have_type or definition.can_have_name:
            value = parse_tag_value(
                trimmed,
                can_have_type=definition.can_have_type,
                can_have_name=definition.can_have_name,
                bare_type=definition.bare_type,
            )
        else:
            value = trimmed or None
        return Tag(original_title=title, title=canonical, text=trimmed or None, value=value)
