"""The doclet entity and its construction pipeline.

A :class:`Doclet` is assembled synchronously by :func:`create_doclet`: the raw
comment is normalised, given an implicit description tag and tokenised; each
tag is applied; then post-processing resolves names, registers the export,
infers the kind, applies the variation suffix, synchronises with a twin
doclet and runs the static-type enrichment passes.

Examples
--------
>>> from docletkit.doclet import create_doclet
>>> doclet = create_doclet("/** Adds numbers.\\n * @function add */")
>>> doclet.kind, doclet.longname, doclet.description
('function', 'add', 'Adds numbers.')
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any

import msgspec

from docletkit.application import apply_tag
from docletkit.comments import CLASS_DECLARATION_TYPES, parse_comment
from docletkit.context import DocletContext, current_context
from docletkit.enrich import run_enrichment
from docletkit.facts import Fact, SyntaxNode, TypeParams
from docletkit.models import (
    BorrowedSymbol,
    ExceptionDoc,
    OverloadSignature,
    ParamDoc,
    PropertyDoc,
    ReturnDoc,
    TypeSpec,
)
from docletkit.names import Scope, apply_namespace, remove_global
from docletkit_common.errors import InvalidScopeError
from docletkit_common.logging import get_logger

if TYPE_CHECKING:
    from docletkit.tags import Tag

__all__ = [
    "FUNCTION_NODE_TYPES",
    "CodeMeta",
    "Doclet",
    "DocletMeta",
    "SourceMeta",
    "SymbolInfo",
    "create_doclet",
    "infer_kind",
]

logger = get_logger(__name__)

FUNCTION_NODE_TYPES = frozenset(
    {
        "ArrowFunctionExpression",
        "FunctionDeclaration",
        "FunctionExpression",
        "MethodDefinition",
        "TSDeclareFunction",
        "TSDeclareMethod",
    }
)
_ACCESSOR_KINDS = frozenset({"get", "set"})
_SCOPE_NAMES = tuple(scope.value for scope in Scope)


# Input records -------------------------------------------------------------


class SymbolInfo(msgspec.Struct, kw_only=True, omit_defaults=True, rename="camel"):
    """Shape of the documented symbol as reported by the syntax-tree walker."""

    name: str | None = None
    type: str | None = None
    value: Any = None
    paramnames: list[str] | None = None
    funcscope: str | None = None
    node: SyntaxNode | None = None
    extras: list[Fact] | None = None


class SourceMeta(msgspec.Struct, kw_only=True, omit_defaults=True, rename="camel"):
    """Source position and symbol facts handed to :func:`create_doclet`.

    ``doclet`` is an optional twin :class:`Doclet` describing the same symbol
    from a second declaration.
    """

    range: list[int] | None = None
    filename: str | None = None
    lineno: int | None = None
    columnno: int | None = None
    id: str | None = None
    code: SymbolInfo | None = None
    doclet: Any = None


# Doclet-side metadata ------------------------------------------------------


@dataclass(slots=True)
class CodeMeta:
    """Code facts copied onto the doclet.

    ``node`` and ``source`` are non-owning references into the syntax tree;
    they are left out of equality, repr, serialisation and combiner copies.
    """

    id: str | None = None
    name: str | None = None
    type: str | None = None
    value: object = None
    paramnames: list[str] | None = None
    funcscope: str | None = None
    source: SymbolInfo | None = field(default=None, repr=False, compare=False)
    node: SyntaxNode | None = field(default=None, repr=False, compare=False)


@dataclass(slots=True)
class DocletMeta:
    """Where the documented symbol lives and what is known about its code."""

    range: list[int] | None = None
    filename: str | None = None
    lineno: int | None = None
    columnno: int | None = None
    path: str | None = None
    code: CodeMeta = field(default_factory=CodeMeta)
    extras: list[Fact] | None = None
    doclet: Doclet | None = field(default=None, repr=False, compare=False)


def infer_kind(node_type: str | None, node: SyntaxNode | None = None) -> str:
    """Guess a doclet kind from the shape of the documented code.

    Examples
    --------
    >>> infer_kind("ArrowFunctionExpression")
    'function'
    >>> infer_kind("MethodDefinition", SyntaxNode(type="MethodDefinition", kind="get"))
    'member'
    """
    if node_type == "MethodDefinition":
        method_kind = node.kind if node is not None else None
        if method_kind == "constructor":
            return "class"
        if method_kind in _ACCESSOR_KINDS:
            return "member"
        return "function"
    if node_type in FUNCTION_NODE_TYPES:
        return "function"
    if node_type in CLASS_DECLARATION_TYPES:
        return "class"
    if node is not None:
        wrapped: SyntaxNode | None = None
        if node_type == "ExportAllDeclaration":
            wrapped = node.source
        elif node_type in {"ExportDefaultDeclaration", "ExportNamedDeclaration"}:
            wrapped = node.declaration
        elif node_type == "ExportSpecifier":
            wrapped = node.local
        else:
            return "param" if node.parent_type in FUNCTION_NODE_TYPES else "member"
        return infer_kind(wrapped.type if wrapped is not None else None, wrapped)
    return "member"


@dataclass(slots=True)
class Doclet:
    """Structured documentation of one source symbol.

    Every field is optional and ``None`` means absent. ``longname`` is only
    written through :meth:`set_longname`; ``access`` and ``kind`` are
    write-once.
    """

    comment: str | None = None
    name: str | None = None
    longname: str | None = None
    memberof: str | None = None
    scope: str | None = None
    kind: str | None = None
    alias: str | None = None
    variation: str | None = None
    description: str | None = None
    classdesc: str | None = None
    summary: str | None = None
    since: str | None = None
    version: str | None = None
    deprecated: str | bool | None = None
    defaultvalue: str | None = None
    readonly: bool | None = None
    virtual: bool | None = None
    ignore: bool | None = None
    is_enum: bool | None = None
    this: str | None = None
    examples: list[str] | None = None
    see: list[str] | None = None
    todo: list[str] | None = None
    exceptions: list[ExceptionDoc] | None = None
    params: list[ParamDoc] | None = None
    returns: list[ReturnDoc] | None = None
    properties: list[PropertyDoc] | None = None
    type: TypeSpec | None = None
    type_parameters: TypeParams | None = None
    augments: list[str] | None = None
    implements: list[str] | None = None
    mixes: list[str] | None = None
    borrowed: list[BorrowedSymbol] | None = None
    access: str | None = None
    tags: list[Tag] | None = None
    extras: list[OverloadSignature] | None = None
    meta: DocletMeta = field(default_factory=DocletMeta)
    filename: str | None = None
    sort: int | None = None
    context: DocletContext | None = field(default=None, repr=False, compare=False)

    @property
    def active_context(self) -> DocletContext:
        """The context this doclet was built with, or the current one."""
        return self.context if self.context is not None else current_context()

    def filepath(self) -> str:
        """``path/filename`` of the source file, or an empty string."""
        if not self.meta.filename:
            return ""
        return str(PurePosixPath(self.meta.path or "", self.meta.filename))

    # Identity --------------------------------------------------------------

    def set_scope(self, scope: str) -> None:
        """Set the scope relative to the parent symbol.

        Raises
        ------
        InvalidScopeError
            If ``scope`` is not one of ``global``, ``inner``, ``instance`` or
            ``static``.
        """
        if scope not in _SCOPE_NAMES:
            raise InvalidScopeError(scope, _SCOPE_NAMES, self.filepath() or None)
        self.scope = str(scope)

    def set_memberof(self, sid: str) -> None:
        """Set the parent longname, rewriting ``.prototype`` to ``#``."""
        self.memberof = remove_global(sid).replace(".prototype", "#")

    def set_longname(self, name: str) -> None:
        """Set the longname, applying the namespace prefix for namespace kinds."""
        longname = remove_global(name)
        if self.active_context.dictionary.is_namespace(self.kind):
            longname = apply_namespace(longname, str(self.kind))
        self.longname = longname

    def set_kind(self, kind: str | None) -> None:
        """Set the kind unless one has already been determined."""
        if not kind:
            return
        if self.kind:
            if kind != self.kind:
                logger.debug(
                    "Kind already determined",
                    extra={"operation": "set_kind", "status": "skipped", "kind": self.kind, "ignored": kind},
                )
            return
        self.kind = kind

    def set_access(self, access: str) -> None:
        """Set the access level unless one has already been set."""
        if self.access is None:
            self.access = access

    # Relations -------------------------------------------------------------

    def borrow(self, source: str, target: str | None = None) -> None:
        if self.borrowed is None:
            self.borrowed = []
        self.borrowed.append(BorrowedSymbol(source=source, target=target))

    def mix(self, source: str) -> None:
        if self.mixes is None:
            self.mixes = []
        self.mixes.append(source)

    def augment(self, base: str) -> None:
        if self.augments is None:
            self.augments = []
        self.augments.append(base)

    # Assembly --------------------------------------------------------------

    def add_tag(self, title: str, text: str | None = None) -> Tag:
        """Apply one tag using the active dictionary."""
        return apply_tag(self, title, text, self.active_context.dictionary)

    def set_meta(self, meta: SourceMeta) -> None:
        """Copy source position and code facts from ``meta``."""
        if meta.range is not None:
            self.meta.range = list(meta.range)
        if meta.lineno:
            source_path = PurePosixPath(meta.filename or "")
            self.meta.filename = source_path.name
            self.meta.lineno = meta.lineno
            self.meta.columnno = meta.columnno
            parent = str(source_path.parent)
            if parent and parent != ".":
                self.meta.path = parent
        if isinstance(meta.doclet, Doclet):
            self.meta.doclet = meta.doclet

        code = self.meta.code
        if meta.id:
            code.id = meta.id
        info = meta.code
        if info is None:
            return
        code.source = info
        if info.extras:
            self.meta.extras = list(info.extras)
        if info.name:
            code.name = info.name
        if info.type:
            code.type = info.type
        if info.node is not None:
            code.node = info.node
        if info.funcscope:
            code.funcscope = info.funcscope
        if info.value is not None:
            code.value = info.value
        if info.paramnames:
            code.paramnames = list(info.paramnames)

    def post_process(self) -> None:
        """Resolve names and derived fields, then run the enrichment passes."""
        context = self.active_context
        context.resolver.resolve(self)
        if self.name and not self.longname:
            self.set_longname(self.name)
        if self.memberof == "":
            self.memberof = None
        if self.comment and self.name and self.longname:
            context.exports.register_export(self.filename or "", self.name, self.longname)
        if not self.kind:
            self.add_tag("kind", infer_kind(self.meta.code.type, self.meta.code.node))
        if self.variation and self.longname and not self.longname.endswith(")"):
            self.longname = f"{self.longname}({self.variation})"
        self._sync_twin()
        run_enrichment(self)
        if context.settings.release_syntax_nodes:
            self.meta.code.node = None
            self.meta.code.source = None

    def _sync_twin(self) -> None:
        twin = self.meta.doclet
        if twin is None or not twin.name:
            return
        if self.name and self.name != twin.name:
            return
        if self.kind != twin.kind:
            return
        self.meta.extras = twin.meta.extras
        self.meta.code = twin.meta.code


def create_doclet(
    comment: str | None,
    meta: SourceMeta | None = None,
    *,
    context: DocletContext | None = None,
) -> Doclet:
    """Build a finished doclet from a raw comment and source metadata.

    Parameters
    ----------
    comment : str | None
        Raw ``/** ... */`` comment text. Empty or missing text is allowed.
    meta : SourceMeta | None, optional
        Source position and symbol facts. Defaults to an empty record.
    context : DocletContext | None, optional
        Collaborators to use. Defaults to :func:`~docletkit.context.current_context`.

    Returns
    -------
    Doclet
        The assembled doclet.

    Raises
    ------
    InvalidScopeError
        If a tag or pass sets an unrecognised scope.
    """
    active = context if context is not None else current_context()
    source = meta if meta is not None else SourceMeta()
    doclet = Doclet(comment=comment, sort=active.settings.sort_sentinel, context=active)
    doclet.set_meta(source)

    code_type = source.code.type if source.code is not None else None
    for raw in parse_comment(comment, code_type):
        apply_tag(doclet, raw.title, raw.text, active.dictionary)

    doclet.filename = doclet.filepath()
    doclet.post_process()
    return doclet
