"""Record types stored on doclets.

These are the parameter, return, property and relation records assembled by
tag hooks and enrichment passes. Absent values are ``None`` so that "not set"
stays distinguishable from "set to empty" during fill-if-absent merges.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from docletkit.facts import TypeParams, TypeRef

__all__ = [
    "BorrowedSymbol",
    "ExceptionDoc",
    "OverloadSignature",
    "ParamDoc",
    "PropertyDoc",
    "ReturnDoc",
    "TypeSpec",
]


@dataclass(slots=True)
class TypeSpec:
    """Ordered documentation type identifiers, e.g. ``["string", "number"]``."""

    names: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ParamDoc:
    """A documented parameter, index-aligned with the declared parameter order."""

    name: str | None = None
    type: TypeSpec | None = None
    description: str | None = None
    optional: bool | None = None
    defaultvalue: str | None = None
    nullable: bool | None = None
    variable: bool | None = None


@dataclass(slots=True)
class ReturnDoc:
    """A return-type fact with its description."""

    type: TypeSpec | None = None
    description: str | None = None


@dataclass(slots=True)
class PropertyDoc:
    """A member of an object- or interface-shaped type.

    ``extras`` holds facts recorded by dictionary tags that have no dedicated
    field (for example ``since``).
    """

    name: str | None = None
    type: TypeSpec | None = None
    description: str | None = None
    optional: bool | None = None
    defaultvalue: str | None = None
    nullable: bool | None = None
    deprecated: bool | None = None
    access: str | None = None
    readonly: bool | None = None
    extras: dict[str, object] = field(default_factory=dict)


@dataclass(slots=True)
class BorrowedSymbol:
    """A symbol borrowed from ``source``, optionally renamed to ``target``."""

    source: str
    target: str | None = None


@dataclass(slots=True)
class OverloadSignature:
    """One distinct call signature recorded by overload reconciliation."""

    string: str
    type_parameters: TypeParams
    return_type: TypeRef
    parameters: list[ParamDoc] = field(default_factory=list)


@dataclass(slots=True)
class ExceptionDoc:
    """An exception a function is documented to throw."""

    type: TypeSpec | None = None
    description: str | None = None
