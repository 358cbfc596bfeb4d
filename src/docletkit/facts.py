"""Static-type facts attached to documented symbols by the type-aware AST pass.

Facts are tagged ``msgspec`` structs keyed by ``nodeType`` so that the AST
layer (or a JSON/YAML fixture) can hand them over as plain data. Every fact
exposes its canonical ``string`` form; type references resolve to
documentation type identifiers through :meth:`TypeRef.type_id`.
"""

from __future__ import annotations

from typing import Any, TypeAlias

import msgspec

__all__ = [
    "CALLABLE_DECLARATION_TYPES",
    "OVERLOAD_SIGNATURE_TYPES",
    "AssignmentPatternParam",
    "CallableFact",
    "ClassDeclarationFact",
    "ClassPropertyFact",
    "DeclareFunctionFact",
    "DeclareMethodFact",
    "Fact",
    "FunctionDeclarationFact",
    "FunctionTypeFact",
    "IdentifierParam",
    "InterfaceDeclarationFact",
    "InterfaceMember",
    "IntersectionTypeFact",
    "MethodDefinitionFact",
    "ParamFact",
    "ParameterPropertyParam",
    "ParenthesizedTypeFact",
    "SyntaxNode",
    "TypeAliasDeclarationFact",
    "TypeAnnotationFact",
    "TypeParams",
    "TypeRef",
    "UnionTypeFact",
]


class TypeRef(msgspec.Struct, frozen=True, kw_only=True, omit_defaults=True, rename="camel"):
    """A type as written in source, optionally pre-resolved to an identifier."""

    string: str = ""
    id: str | None = None

    def type_id(self, filename: str = "") -> str:  # noqa: ARG002
        """Return the documentation type identifier for this reference."""
        if self.id is not None:
            return self.id
        return self.string


class TypeParams(msgspec.Struct, frozen=True, kw_only=True, omit_defaults=True, rename="camel"):
    """Generic parameter declaration carried opaquely onto doclets."""

    string: str = ""
    params: list[str] = msgspec.field(default_factory=list)


class _FactBase(
    msgspec.Struct,
    frozen=True,
    kw_only=True,
    omit_defaults=True,
    rename="camel",
    tag_field="nodeType",
):
    string: str = ""

    @property
    def node_type(self) -> str:
        """The syntax node type this fact was harvested from."""
        return str(self.__struct_config__.tag)


# Parameters ---------------------------------------------------------------


class IdentifierParam(_FactBase, tag="Identifier"):
    """A plain (possibly rest) parameter; rest parameters carry ``...`` in ``id``."""

    id: str = ""
    type_annotation: TypeRef | None = None
    optional: bool = False
    default: TypeRef | None = None


class AssignmentPatternParam(_FactBase, tag="AssignmentPattern"):
    """A parameter with a default value: ``left = right``."""

    left: IdentifierParam
    right: TypeRef | None = None


class ParameterPropertyParam(_FactBase, tag="TSParameterProperty"):
    """A constructor parameter that also declares a class property."""

    parameter: IdentifierParam | AssignmentPatternParam
    accessibility: str | None = None


ParamFact: TypeAlias = IdentifierParam | AssignmentPatternParam | ParameterPropertyParam


# Callables ----------------------------------------------------------------


class CallableFact(_FactBase, tag="Callable"):
    """Shared shape of function-like facts."""

    parameters: list[ParamFact] = msgspec.field(default_factory=list)
    return_type: TypeRef = msgspec.field(default_factory=TypeRef)
    type_parameters: TypeParams = msgspec.field(default_factory=TypeParams)
    accessibility: str | None = None


class FunctionDeclarationFact(CallableFact, tag="FunctionDeclaration"):
    """A function declaration with its implementation signature."""


class MethodDefinitionFact(CallableFact, tag="MethodDefinition"):
    """A class method definition."""


class FunctionTypeFact(CallableFact, tag="TSFunctionType"):
    """A function type such as ``(a: string) => number``."""


class DeclareFunctionFact(CallableFact, tag="TSDeclareFunction"):
    """An overload signature of a function."""


class DeclareMethodFact(CallableFact, tag="TSDeclareMethod"):
    """An overload signature of a method."""


# Type wrappers ------------------------------------------------------------


class TypeAnnotationFact(_FactBase, tag="TSTypeAnnotation"):
    """A ``: Type`` annotation wrapping another type fact."""

    type_annotation: Fact


class ParenthesizedTypeFact(_FactBase, tag="TSParenthesizedType"):
    """A parenthesised type wrapping another type fact."""

    type_annotation: Fact


class UnionTypeFact(_FactBase, tag="TSUnionType"):
    """``A | B`` over other type facts."""

    types: list[Fact] = msgspec.field(default_factory=list)


class IntersectionTypeFact(_FactBase, tag="TSIntersectionType"):
    """``A & B`` over other type facts."""

    types: list[Fact] = msgspec.field(default_factory=list)


# Classes and structural types ---------------------------------------------


class ClassDeclarationFact(_FactBase, tag="ClassDeclaration"):
    """A class with its heritage clauses."""

    implements: list[TypeRef] = msgspec.field(default_factory=list)
    super_class: TypeRef = msgspec.field(default_factory=TypeRef)


class ClassPropertyFact(_FactBase, tag="ClassProperty"):
    """A class field declaration."""

    accessibility: str | None = None
    type_annotation: TypeRef = msgspec.field(default_factory=TypeRef)
    static: bool = False


class InterfaceMember(msgspec.Struct, frozen=True, kw_only=True, omit_defaults=True, rename="camel"):
    """A directly declared interface member with its leading comments."""

    key: str = ""
    optional: bool = False
    type: str | None = None
    type_annotation: TypeRef = msgspec.field(default_factory=TypeRef)
    leading_comments: list[str] = msgspec.field(default_factory=list)


class InterfaceDeclarationFact(_FactBase, tag="TSInterfaceDeclaration"):
    """An interface declaration and its ordered members."""

    extends: list[TypeRef] = msgspec.field(default_factory=list)
    type_parameters: TypeParams = msgspec.field(default_factory=TypeParams)
    body: list[InterfaceMember] = msgspec.field(default_factory=list)


class TypeAliasDeclarationFact(_FactBase, tag="TSTypeAliasDeclaration"):
    """A ``type X = ...`` declaration."""

    type_parameters: TypeParams = msgspec.field(default_factory=TypeParams)
    type_annotation: TypeRef = msgspec.field(default_factory=TypeRef)


Fact: TypeAlias = (
    FunctionDeclarationFact
    | MethodDefinitionFact
    | FunctionTypeFact
    | DeclareFunctionFact
    | DeclareMethodFact
    | TypeAnnotationFact
    | ParenthesizedTypeFact
    | UnionTypeFact
    | IntersectionTypeFact
    | ClassDeclarationFact
    | ClassPropertyFact
    | InterfaceDeclarationFact
    | TypeAliasDeclarationFact
)

CALLABLE_DECLARATION_TYPES = frozenset({"FunctionDeclaration", "MethodDefinition"})
OVERLOAD_SIGNATURE_TYPES = frozenset({"TSFunctionType", "TSDeclareFunction", "TSDeclareMethod"})


class SyntaxNode(msgspec.Struct, kw_only=True, omit_defaults=True, rename="camel"):
    """Minimal syntax-tree node shape consumed by kind inference and type lookup.

    ``parent_type`` replaces a parent back-reference so nodes stay acyclic and
    serialisable. ``declaration``/``source``/``local`` mirror the fields of
    export nodes.
    """

    type: str
    kind: str | None = None
    parent_type: str | None = None
    fact: Fact | None = None
    children: list[SyntaxNode] = msgspec.field(default_factory=list)
    declaration: SyntaxNode | None = None
    source: SyntaxNode | None = None
    local: SyntaxNode | None = None
    value: Any = None
