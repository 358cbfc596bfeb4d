"""Default tag definitions for the common JSDoc tags.

Each definition pairs parsing flags with an ``on_tagged`` hook that mutates
the doclet, and optionally an ``on_property_tagged`` hook used when the tag
appears in an interface member's own comment.
"""

from __future__ import annotations

import re
from collections.abc import Callable, MutableMapping
from typing import TYPE_CHECKING

from docletkit.dictionary import TagDefinition, TagDictionary
from docletkit.models import ExceptionDoc, ParamDoc, PropertyDoc, ReturnDoc
from docletkit.names import LONGNAME_GLOBAL, Scope
from docletkit.tags import Tag, TagValue
from docletkit_common.logging import get_logger

if TYPE_CHECKING:
    from docletkit.doclet import Doclet

__all__ = ["ACCESS_LEVELS", "default_definitions", "default_dictionary"]

logger = get_logger(__name__)

ACCESS_LEVELS = frozenset({"public", "private", "protected"})

_BORROWS = re.compile(r"^([\s\S]+?)(?:\s+as\s+([\s\S]+))?$")
_BRACED = re.compile(r"^\{([^}]*)\}")


def _structured(tag: Tag) -> TagValue:
    if isinstance(tag.value, TagValue):
        return tag.value
    return TagValue(description=tag.value)


def _first_word(text: str | None) -> str:
    """First word of ``text``, unwrapping a leading ``{Type}``."""
    stripped = (text or "").strip()
    braced = _BRACED.match(stripped)
    if braced:
        return braced.group(1).strip()
    return stripped.split(None, 1)[0] if stripped else ""


# Doclet hooks --------------------------------------------------------------


def _set_field(field_name: str) -> Callable[[Doclet, Tag], None]:
    def hook(doclet: Doclet, tag: Tag) -> None:
        setattr(doclet, field_name, tag.string_value)

    return hook


def _set_flag(field_name: str) -> Callable[[Doclet, Tag], None]:
    def hook(doclet: Doclet, tag: Tag) -> None:  # noqa: ARG001
        setattr(doclet, field_name, True)

    return hook


def _set_scope(scope: Scope) -> Callable[[Doclet, Tag], None]:
    def hook(doclet: Doclet, tag: Tag) -> None:  # noqa: ARG001
        doclet.set_scope(scope)

    return hook


def _set_access_level(level: str) -> Callable[[Doclet, Tag], None]:
    def hook(doclet: Doclet, tag: Tag) -> None:  # noqa: ARG001
        doclet.set_access(level)

    return hook


def _declare(kind: str, *, with_type: bool = False) -> Callable[[Doclet, Tag], None]:
    """Hook for tags that declare a symbol: set kind, name and (optionally) type."""

    def hook(doclet: Doclet, tag: Tag) -> None:
        doclet.set_kind(kind)
        value = tag.value
        if isinstance(value, TagValue):
            if value.name:
                doclet.name = value.name
            if with_type and value.type is not None and doclet.type is None:
                doclet.type = value.type
        elif value:
            doclet.name = value

    return hook


def _on_access(doclet: Doclet, tag: Tag) -> None:
    level = (tag.string_value or "").lower()
    if level not in ACCESS_LEVELS:
        logger.warning(
            "Ignoring unknown access level",
            extra={"operation": "apply_tag", "status": "skipped", "access": level},
        )
        return
    doclet.set_access(level)


def _on_augments(doclet: Doclet, tag: Tag) -> None:
    base = _first_word(tag.text)
    if base:
        doclet.augment(base)


def _on_implements(doclet: Doclet, tag: Tag) -> None:
    interface = _first_word(tag.text)
    if interface:
        if doclet.implements is None:
            doclet.implements = []
        doclet.implements.append(interface)


def _on_borrows(doclet: Doclet, tag: Tag) -> None:
    match = _BORROWS.match(tag.text or "")
    if match:
        doclet.borrow(match.group(1).strip(), match.group(2).strip() if match.group(2) else None)


def _on_memberof(doclet: Doclet, tag: Tag) -> None:
    parent = tag.string_value or ""
    if parent == LONGNAME_GLOBAL:
        doclet.set_scope(Scope.GLOBAL)
        doclet.memberof = None
        return
    doclet.set_memberof(parent)


def _on_global(doclet: Doclet, tag: Tag) -> None:  # noqa: ARG001
    doclet.set_scope(Scope.GLOBAL)
    doclet.memberof = None


def _on_mixes(doclet: Doclet, tag: Tag) -> None:
    source = _first_word(tag.text)
    if source:
        doclet.mix(source)


def _on_default(doclet: Doclet, tag: Tag) -> None:
    if tag.text:
        doclet.defaultvalue = tag.text
    elif doclet.meta.code.value is not None:
        doclet.defaultvalue = str(doclet.meta.code.value)


def _on_deprecated(doclet: Doclet, tag: Tag) -> None:
    doclet.deprecated = tag.text or True


def _on_enum(doclet: Doclet, tag: Tag) -> None:
    doclet.is_enum = True
    doclet.set_kind("member")
    value = _structured(tag)
    if value.type is not None and doclet.type is None:
        doclet.type = value.type


def _append_text(field_name: str) -> Callable[[Doclet, Tag], None]:
    def hook(doclet: Doclet, tag: Tag) -> None:
        if tag.text is None:
            return
        items = getattr(doclet, field_name)
        if items is None:
            items = []
            setattr(doclet, field_name, items)
        items.append(tag.text)

    return hook


def _on_param(doclet: Doclet, tag: Tag) -> None:
    value = _structured(tag)
    if doclet.params is None:
        doclet.params = []
    doclet.params.append(
        ParamDoc(
            name=value.name,
            type=value.type,
            description=value.description,
            optional=value.optional,
            defaultvalue=value.defaultvalue,
            nullable=value.nullable,
            variable=value.variable,
        )
    )


def _on_property(doclet: Doclet, tag: Tag) -> None:
    value = _structured(tag)
    if doclet.properties is None:
        doclet.properties = []
    doclet.properties.append(
        PropertyDoc(
            name=value.name,
            type=value.type,
            description=value.description,
            optional=value.optional,
            defaultvalue=value.defaultvalue,
            nullable=value.nullable,
        )
    )


def _on_returns(doclet: Doclet, tag: Tag) -> None:
    value = _structured(tag)
    if doclet.returns is None:
        doclet.returns = []
    doclet.returns.append(ReturnDoc(type=value.type, description=value.description))


def _on_throws(doclet: Doclet, tag: Tag) -> None:
    value = _structured(tag)
    if doclet.exceptions is None:
        doclet.exceptions = []
    doclet.exceptions.append(ExceptionDoc(type=value.type, description=value.description))


def _on_type(doclet: Doclet, tag: Tag) -> None:
    value = _structured(tag)
    if value.type is not None:
        doclet.type = value.type


# Property hooks ------------------------------------------------------------


def _property_type(doclet: Doclet, extra: MutableMapping[str, object], tag: Tag) -> None:  # noqa: ARG001
    value = _structured(tag)
    if value.type is not None:
        extra["type"] = value.type
    else:
        extra.pop("type", None)


def _property_readonly(doclet: Doclet, extra: MutableMapping[str, object], tag: Tag) -> None:  # noqa: ARG001
    extra["readonly"] = True


def _property_access(level: str | None) -> Callable[[Doclet, MutableMapping[str, object], Tag], None]:
    def hook(doclet: Doclet, extra: MutableMapping[str, object], tag: Tag) -> None:  # noqa: ARG001
        chosen = level or (tag.string_value or "").lower()
        if chosen in ACCESS_LEVELS:
            extra["access"] = chosen
        else:
            extra.pop("access", None)

    return hook


def default_definitions() -> list[TagDefinition]:
    """Return fresh definitions for the default dictionary."""
    return [
        TagDefinition("abstract", synonyms=("virtual",), on_tagged=_set_flag("virtual")),
        TagDefinition(
            "access",
            on_tagged=_on_access,
            on_property_tagged=_property_access(None),
        ),
        TagDefinition("alias", on_tagged=_set_field("alias")),
        TagDefinition("augments", synonyms=("extends",), on_tagged=_on_augments),
        TagDefinition("borrows", on_tagged=_on_borrows),
        TagDefinition(
            "callback",
            can_have_type=True,
            can_have_name=True,
            on_tagged=_declare("typedef"),
        ),
        TagDefinition(
            "class",
            synonyms=("constructor",),
            can_have_type=True,
            can_have_name=True,
            on_tagged=_declare("class"),
        ),
        TagDefinition("classdesc", on_tagged=_set_field("classdesc")),
        TagDefinition(
            "constant",
            synonyms=("const",),
            can_have_type=True,
            can_have_name=True,
            on_tagged=_declare("constant", with_type=True),
        ),
        TagDefinition("default", synonyms=("defaultvalue",), on_tagged=_on_default),
        TagDefinition("deprecated", on_tagged=_on_deprecated),
        TagDefinition("description", synonyms=("desc",)),
        TagDefinition("enum", can_have_type=True, on_tagged=_on_enum),
        TagDefinition(
            "event",
            can_have_name=True,
            is_namespace=True,
            on_tagged=_declare("event"),
        ),
        TagDefinition(
            "example",
            keeps_whitespace=True,
            removes_indent=True,
            on_tagged=_append_text("examples"),
        ),
        TagDefinition(
            "external",
            synonyms=("host",),
            can_have_type=True,
            can_have_name=True,
            is_namespace=True,
            on_tagged=_declare("external"),
        ),
        TagDefinition(
            "function",
            synonyms=("func", "method"),
            can_have_name=True,
            on_tagged=_declare("function"),
        ),
        TagDefinition("global", on_tagged=_on_global),
        TagDefinition("ignore", on_tagged=_set_flag("ignore")),
        TagDefinition("implements", on_tagged=_on_implements),
        TagDefinition("inner", on_tagged=_set_scope(Scope.INNER)),
        TagDefinition("instance", on_tagged=_set_scope(Scope.INSTANCE)),
        TagDefinition(
            "interface",
            can_have_name=True,
            on_tagged=_declare("interface"),
        ),
        TagDefinition("kind"),
        TagDefinition(
            "member",
            synonyms=("var",),
            can_have_type=True,
            can_have_name=True,
            on_tagged=_declare("member", with_type=True),
        ),
        TagDefinition("memberof", on_tagged=_on_memberof),
        TagDefinition("mixes", on_tagged=_on_mixes),
        TagDefinition("mixin", can_have_name=True, on_tagged=_declare("mixin")),
        TagDefinition(
            "module",
            can_have_type=True,
            can_have_name=True,
            is_namespace=True,
            on_tagged=_declare("module", with_type=True),
        ),
        TagDefinition("name"),
        TagDefinition(
            "namespace",
            can_have_type=True,
            can_have_name=True,
            on_tagged=_declare("namespace", with_type=True),
        ),
        TagDefinition(
            "param",
            synonyms=("arg", "argument"),
            can_have_type=True,
            can_have_name=True,
            on_tagged=_on_param,
        ),
        TagDefinition("private", on_tagged=_set_access_level("private")),
        TagDefinition(
            "property",
            synonyms=("prop",),
            can_have_type=True,
            can_have_name=True,
            on_tagged=_on_property,
        ),
        TagDefinition(
            "protected",
            on_tagged=_set_access_level("protected"),
            on_property_tagged=_property_access("protected"),
        ),
        TagDefinition("public", on_tagged=_set_access_level("public")),
        TagDefinition(
            "readonly",
            on_tagged=_set_flag("readonly"),
            on_property_tagged=_property_readonly,
        ),
        TagDefinition(
            "returns",
            synonyms=("return",),
            can_have_type=True,
            on_tagged=_on_returns,
        ),
        TagDefinition("see", on_tagged=_append_text("see")),
        TagDefinition("since", on_tagged=_set_field("since")),
        TagDefinition("sort"),
        TagDefinition("static", on_tagged=_set_scope(Scope.STATIC)),
        TagDefinition("summary", on_tagged=_set_field("summary")),
        TagDefinition("this", on_tagged=_set_field("this")),
        TagDefinition(
            "throws",
            synonyms=("exception",),
            can_have_type=True,
            on_tagged=_on_throws,
        ),
        TagDefinition("todo", on_tagged=_append_text("todo")),
        TagDefinition(
            "type",
            can_have_type=True,
            bare_type=True,
            on_tagged=_on_type,
            on_property_tagged=_property_type,
        ),
        TagDefinition(
            "typedef",
            can_have_type=True,
            can_have_name=True,
            on_tagged=_declare("typedef", with_type=True),
        ),
        TagDefinition("variation", on_tagged=_set_field("variation")),
        TagDefinition("version", on_tagged=_set_field("version")),
    ]


def default_dictionary() -> TagDictionary:
    """Build a new dictionary holding :func:`default_definitions`."""
    return TagDictionary(default_definitions())
