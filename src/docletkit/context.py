"""Engine context: the dictionary, resolver, registry and settings in use.

The context is an explicit value passed to
:func:`~docletkit.doclet.create_doclet`. When omitted, the value held by a
:class:`contextvars.ContextVar` is used; :func:`use_context` swaps it for a
block (tests use this for isolation). A swap only affects doclets built while
it is active.

Examples
--------
>>> from docletkit.context import DocletContext, use_context
>>> with use_context(DocletContext()) as context:
...     assert current_context() is context
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field

from docletkit.definitions import default_dictionary
from docletkit.dictionary import TagDictionary
from docletkit.names import DefaultNameResolver, ExportIndex, ExportRegistry, NameResolver
from docletkit.settings import EngineSettings
from docletkit.syntax import FactTreeSyntax, TypeSyntax

__all__ = ["DocletContext", "current_context", "use_context"]


@dataclass(slots=True)
class DocletContext:
    """Collaborators consulted while doclets are built."""

    dictionary: TagDictionary = field(default_factory=default_dictionary)
    resolver: NameResolver = field(default_factory=DefaultNameResolver)
    exports: ExportRegistry = field(default_factory=ExportIndex)
    syntax: TypeSyntax = field(default_factory=FactTreeSyntax)
    settings: EngineSettings = field(default_factory=EngineSettings)


_CURRENT: ContextVar[DocletContext | None] = ContextVar("docletkit_context", default=None)


def current_context() -> DocletContext:
    """Return the active context, creating a default one on first use."""
    context = _CURRENT.get()
    if context is None:
        context = DocletContext()
        _CURRENT.set(context)
    return context


@contextmanager
def use_context(context: DocletContext) -> Iterator[DocletContext]:
    """Make ``context`` the active context for the duration of the block."""
    token = _CURRENT.set(context)
    try:
        yield context
    finally:
        _CURRENT.reset(token)
