"""Longname construction, the default name resolver and the export index.

Longnames join a parent longname and a member name with scope punctuation:
``~`` for inner, ``#`` for instance and ``.`` for static members. Namespace
kinds (``module``, ``external``, ``event``) prefix the final name part with
``kind:``.

Examples
--------
>>> apply_namespace("Foo#change", "event")
'Foo#event:change'
>>> remove_global("<global>.foo")
'foo'
"""

from __future__ import annotations

import re
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from docletkit_common.logging import get_logger

if TYPE_CHECKING:
    from docletkit.doclet import Doclet

__all__ = [
    "LONGNAME_GLOBAL",
    "SCOPE_PUNC",
    "DefaultNameResolver",
    "ExportIndex",
    "ExportRegistry",
    "NameResolver",
    "Scope",
    "apply_namespace",
    "remove_global",
    "split_longname",
]

logger = get_logger(__name__)

LONGNAME_GLOBAL = "<global>"


class Scope(StrEnum):
    """Recognised doclet scopes."""

    GLOBAL = "global"
    INNER = "inner"
    INSTANCE = "instance"
    STATIC = "static"


SCOPE_PUNC: dict[str, str] = {
    Scope.INNER.value: "~",
    Scope.INSTANCE.value: "#",
    Scope.STATIC.value: ".",
}
_PUNC_SCOPE = {punc: scope for scope, punc in SCOPE_PUNC.items()}

_GLOBAL_PREFIX = re.compile(rf"^{re.escape(LONGNAME_GLOBAL)}\.?")
_NAMESPACED = re.compile(r"^[a-zA-Z]+?:.+$")
_PROTOTYPE = re.compile(r"\.prototype(?:\.|$)")
_OPENERS = {"(": ")", "[": "]", "<": ">", "{": "}"}


def remove_global(longname: str) -> str:
    """Strip the reserved ``<global>`` prefix."""
    return _GLOBAL_PREFIX.sub("", longname)


def split_longname(longname: str) -> tuple[str, str, str]:
    """Split at the rightmost scope punctuation outside brackets and quotes.

    Returns
    -------
    tuple[str, str, str]
        ``(parent, punctuation, name)``; parent and punctuation are empty for
        top-level names.

    Examples
    --------
    >>> split_longname('Foo#"a.b"')
    ('Foo', '#', '"a.b"')
    """
    depth = 0
    quote: str | None = None
    split_at = -1
    for index, char in enumerate(longname):
        if quote is not None:
            if char == quote:
                quote = None
            continue
        if char in "\"'":
            quote = char
        elif char in _OPENERS:
            depth += 1
        elif char in _OPENERS.values():
            depth = max(depth - 1, 0)
        elif depth == 0 and char in _PUNC_SCOPE and index > 0:
            split_at = index
    if split_at < 0:
        return "", "", longname
    return longname[:split_at], longname[split_at], longname[split_at + 1 :]


def apply_namespace(longname: str, namespace: str) -> str:
    """Prefix the last name part of ``longname`` with ``namespace:``."""
    parent, punc, name = split_longname(longname)
    if _NAMESPACED.match(name):
        return longname
    return f"{parent}{punc}{namespace}:{name}"


@runtime_checkable
class NameResolver(Protocol):
    """Computes ``longname``/``memberof``/``scope`` in place; must be idempotent."""

    def resolve(self, doclet: Doclet) -> None:
        """Resolve the names of ``doclet``."""
        ...


@runtime_checkable
class ExportRegistry(Protocol):
    """Receives ``(filename, name) -> longname`` mappings for cross-file lookup."""

    def register_export(self, filename: str, name: str, longname: str) -> None:
        """Record an exported symbol."""
        ...


class DefaultNameResolver:
    """Resolve names from ``memberof``, ``scope`` and qualified ``name`` values.

    A doclet with ``memberof`` gets ``memberof + punctuation + name``, where
    the punctuation follows its scope (static when unset). A doclet whose name
    is itself qualified (``Foo#bar`` or ``Foo.prototype.bar``) is split into
    parent, scope and short name. Without a name tag the code symbol name is
    used, and an ``alias`` replaces the name being resolved. Scope is only set
    when the doclet has none, so repeated calls give the same result.
    """

    def resolve(self, doclet: Doclet) -> None:
        name = doclet.alias or doclet.name or doclet.meta.code.name or ""
        name = _PROTOTYPE.sub(SCOPE_PUNC[Scope.INSTANCE.value], name)
        memberof = doclet.memberof or ""
        if not name:
            return

        if memberof and memberof[-1] in _PUNC_SCOPE:
            if doclet.scope is None:
                doclet.set_scope(_PUNC_SCOPE[memberof[-1]])
            memberof = memberof[:-1]
            doclet.memberof = memberof

        if memberof:
            for punc in _PUNC_SCOPE:
                prefix = f"{memberof}{punc}"
                if name.startswith(prefix) and len(name) > len(prefix):
                    name = name[len(prefix) :]
                    if doclet.scope is None:
                        doclet.set_scope(_PUNC_SCOPE[punc])
                    break
            if doclet.scope is None:
                doclet.set_scope(Scope.STATIC)
            punc = SCOPE_PUNC.get(doclet.scope or "", ".")
            longname = f"{memberof}{punc}{name}"
        else:
            parent, punc, short = split_longname(name)
            longname = name
            if parent:
                doclet.set_memberof(parent)
                if doclet.scope is None:
                    doclet.set_scope(_PUNC_SCOPE[punc])
                name = short

        doclet.name = name
        doclet.set_longname(longname)
        logger.debug(
            "Resolved longname",
            extra={"operation": "resolve", "longname": doclet.longname, "scope": doclet.scope},
        )


class ExportIndex:
    """In-memory :class:`ExportRegistry` keyed by ``(filename, name)``."""

    def __init__(self) -> None:
        self._exports: dict[tuple[str, str], str] = {}

    def __len__(self) -> int:
        return len(self._exports)

    def __contains__(self, key: object) -> bool:
        return key in self._exports

    def register_export(self, filename: str, name: str, longname: str) -> None:
        self._exports[(filename, name)] = longname

    def lookup(self, filename: str, name: str) -> str | None:
        """Return the longname exported as ``name`` from ``filename``."""
        return self._exports.get((filename, name))

    def items(self) -> list[tuple[tuple[str, str], str]]:
        return list(self._exports.items())
