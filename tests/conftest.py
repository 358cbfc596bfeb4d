"""Shared pytest fixtures for docletkit tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from docletkit.context import DocletContext, use_context
from docletkit.doclet import Doclet, SourceMeta, SymbolInfo, create_doclet


@pytest.fixture
def context() -> Iterator[DocletContext]:
    """A fresh engine context, active for the duration of the test."""
    fresh = DocletContext()
    with use_context(fresh):
        yield fresh


@pytest.fixture
def build(context: DocletContext) -> Callable[..., Doclet]:
    """Build a doclet in the test context from a comment and symbol facts.

    Keyword arguments are split between :class:`SymbolInfo` (``name``,
    ``type``, ``paramnames``, ``node``, ``extras``, ``value``) and
    :class:`SourceMeta` (everything else).
    """
    symbol_fields = {"name", "type", "paramnames", "node", "extras", "value", "funcscope"}

    def _build(comment: str | None, **fields: Any) -> Doclet:
        symbol = {key: fields.pop(key) for key in list(fields) if key in symbol_fields}
        meta = SourceMeta(code=SymbolInfo(**symbol) if symbol else None, **fields)
        return create_doclet(comment, meta, context=context)

    return _build
