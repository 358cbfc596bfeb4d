"""Combining two finished doclets into a new one."""

from __future__ import annotations

import copy
from dataclasses import fields
from typing import Any

from docletkit.doclet import Doclet

__all__ = ["combine"]

_SPECIAL_CASE = ("params", "properties")
_NOT_COPIED = frozenset({"context"})


def _shared_memo(*doclets: Doclet) -> dict[int, Any]:
    """Deep-copy memo that keeps non-owning references shared, not duplicated."""
    memo: dict[int, Any] = {}
    keep_alive: list[object] = []
    for doclet in doclets:
        meta = doclet.meta
        shared: list[object] = [doclet.context, meta.doclet, meta.code.node, meta.code.source]
        shared.extend(meta.extras or ())
        for item in shared:
            if item is not None:
                memo[id(item)] = item
                keep_alive.append(item)
    memo[id(memo)] = keep_alive
    return memo


def _copy(value: Any, memo: dict[int, Any]) -> Any:
    return copy.deepcopy(value, memo)


def combine(primary: Doclet, secondary: Doclet) -> Doclet:
    """Merge ``primary`` and ``secondary`` into a new doclet.

    General fields come from ``primary`` when present there and from
    ``secondary`` otherwise. ``params`` and ``properties`` are taken whole:
    a non-empty primary list wins, then a non-empty secondary list, then an
    empty primary list. Values are deep-copied, except references into the
    syntax tree, the twin doclet and the engine context.

    Examples
    --------
    >>> from docletkit.models import ParamDoc
    >>> merged = combine(Doclet(params=[]), Doclet(name="f", params=[ParamDoc(name="a")]))
    >>> merged.name, [param.name for param in merged.params]
    ('f', ['a'])
    """
    target = Doclet(context=primary.context if primary.context is not None else secondary.context)
    memo = _shared_memo(primary, secondary)

    for spec in fields(Doclet):
        name = spec.name
        if name in _SPECIAL_CASE or name in _NOT_COPIED:
            continue
        value = getattr(primary, name)
        if value is None or callable(value):
            value = getattr(secondary, name)
        if value is None or callable(value):
            continue
        setattr(target, name, _copy(value, memo))

    for name in _SPECIAL_CASE:
        primary_value = getattr(primary, name)
        secondary_value = getattr(secondary, name)
        use_primary = primary_value is not None and (not secondary_value or len(primary_value) > 0)
        if use_primary:
            setattr(target, name, _copy(primary_value, memo))
        elif secondary_value is not None:
            setattr(target, name, _copy(secondary_value, memo))
    return target
