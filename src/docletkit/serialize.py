"""Conversion of doclets to JSON-ready builtins and of input records to metadata.

Examples
--------
>>> from docletkit.doclet import create_doclet
>>> doclet_to_builtins(create_doclet("/** @function add */"))["longname"]
'add'
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import fields
from typing import Any

import msgspec

from docletkit.doclet import Doclet, DocletMeta, SourceMeta
from docletkit_common.errors import InputDecodeError

__all__ = ["decode_source_meta", "doclet_to_builtins", "encode_doclets"]

_OMITTED_FIELDS = frozenset({"context"})
_OMITTED_META = frozenset({"doclet"})
_OMITTED_CODE = frozenset({"node", "source"})
_SNAKE = re.compile(r"_([a-z])")


def _camel(key: str) -> str:
    return _SNAKE.sub(lambda match: match.group(1).upper(), key)


def _clean(value: Any) -> Any:
    """Drop ``None`` entries and camel-case keys, recursively."""
    if isinstance(value, dict):
        return {_camel(str(key)): _clean(item) for key, item in value.items() if item is not None}
    if isinstance(value, list):
        return [_clean(item) for item in value]
    return value


def _meta_to_builtins(meta: DocletMeta) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for spec in fields(meta):
        if spec.name in _OMITTED_META:
            continue
        value = getattr(meta, spec.name)
        if spec.name == "code":
            value = {
                code_field.name: getattr(value, code_field.name)
                for code_field in fields(value)
                if code_field.name not in _OMITTED_CODE
            }
        data[spec.name] = value
    return data


def doclet_to_builtins(doclet: Doclet) -> dict[str, Any]:
    """Return a JSON-ready mapping of ``doclet``; absent fields are dropped."""
    data: dict[str, Any] = {}
    for spec in fields(doclet):
        if spec.name in _OMITTED_FIELDS:
            continue
        value = getattr(doclet, spec.name)
        if spec.name == "meta":
            value = _meta_to_builtins(value)
        if value is None:
            continue
        data[spec.name] = value
    return _clean(msgspec.to_builtins(data, enc_hook=str))


def encode_doclets(doclets: Iterable[Doclet], *, pretty: bool = False) -> bytes:
    """Encode doclets as a JSON array."""
    payload = msgspec.json.encode([doclet_to_builtins(doclet) for doclet in doclets])
    if pretty:
        return msgspec.json.format(payload, indent=2)
    return payload


def decode_source_meta(data: Mapping[str, Any] | None) -> SourceMeta:
    """Validate a plain mapping (from JSON or YAML) into :class:`SourceMeta`.

    Raises
    ------
    InputDecodeError
        If the mapping does not match the expected shape, or carries a twin
        ``doclet`` that is not a :class:`~docletkit.doclet.Doclet`.
    """
    if data is None:
        return SourceMeta()
    try:
        meta = msgspec.convert(data, SourceMeta)
    except msgspec.ValidationError as exc:
        msg = f"Invalid source metadata: {exc}"
        raise InputDecodeError(msg, cause=exc, context={"error": str(exc)}) from exc
    if meta.doclet is not None and not isinstance(meta.doclet, Doclet):
        msg = "Twin doclets cannot be given as plain data"
        raise InputDecodeError(msg, context={"error": "meta.doclet must be a Doclet", "field": "doclet"})
    return meta
