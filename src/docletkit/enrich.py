"""Static-type enrichment passes.

The passes fill doclet fields that the comment tags left empty, using the
static-type facts in ``meta.extras`` and the syntax node in ``meta.code``.
Tag-declared values always win. :func:`run_enrichment` runs them in order:

1. :func:`function_backfill`
2. :func:`reconcile_overloads`
3. :func:`unroll_structural_type` (``typedef`` and ``interface`` kinds only)
4. :func:`class_backfill`
5. :func:`class_member_backfill`

Each pass is a no-op when the facts it needs are absent.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, MutableMapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from docletkit.comments import parse_comment
from docletkit.facts import (
    CALLABLE_DECLARATION_TYPES,
    OVERLOAD_SIGNATURE_TYPES,
    AssignmentPatternParam,
    CallableFact,
    ClassDeclarationFact,
    ClassPropertyFact,
    InterfaceDeclarationFact,
    InterfaceMember,
    IntersectionTypeFact,
    ParameterPropertyParam,
    ParenthesizedTypeFact,
    TypeAliasDeclarationFact,
    TypeAnnotationFact,
    TypeRef,
    UnionTypeFact,
)
from docletkit.models import OverloadSignature, ParamDoc, PropertyDoc, ReturnDoc, TypeSpec
from docletkit.names import Scope
from docletkit_common.logging import get_logger

if TYPE_CHECKING:
    from docletkit.doclet import Doclet
    from docletkit.facts import Fact, ParamFact

__all__ = [
    "STRUCTURAL_KINDS",
    "class_backfill",
    "class_member_backfill",
    "function_backfill",
    "reconcile_overloads",
    "run_enrichment",
    "unroll_structural_type",
]

logger = get_logger(__name__)

STRUCTURAL_KINDS = frozenset({"typedef", "interface"})
_RESTRICTED_ACCESS = frozenset({"private", "protected"})
_PROPERTY_FIELDS = frozenset(
    {"name", "type", "description", "optional", "defaultvalue", "nullable", "deprecated", "access", "readonly"}
)
_MEMBER_COMMENT_TITLES = frozenset({"description", "deprecated", "default", "private"})


@dataclass(slots=True)
class _DeclaredParam:
    """A parameter fact with its wrappers removed."""

    id: str = ""
    type_annotation: TypeRef | None = None
    optional: bool = False
    default: TypeRef | None = None


def _unwrap_param(fact: ParamFact | None) -> _DeclaredParam:
    if fact is None:
        return _DeclaredParam()
    if isinstance(fact, ParameterPropertyParam):
        fact = fact.parameter
    if isinstance(fact, AssignmentPatternParam):
        return _DeclaredParam(
            id=fact.left.id,
            type_annotation=fact.left.type_annotation,
            optional=True,
            default=fact.right,
        )
    return _DeclaredParam(
        id=fact.id,
        type_annotation=fact.type_annotation,
        optional=fact.optional,
        default=fact.default,
    )


def _has_type_names(type_spec: TypeSpec | None) -> bool:
    return type_spec is not None and bool(type_spec.names)


def _first_fact(doclet: Doclet, node_types: Iterable[str]) -> Fact | None:
    wanted = frozenset(node_types)
    for fact in doclet.meta.extras or ():
        if fact.node_type in wanted:
            return fact
    return None


# (a) Function backfill -----------------------------------------------------


def function_backfill(doclet: Doclet) -> None:
    """Fill access, type parameters, return type and params from the declaration."""
    if doclet.params is None:
        doclet.params = []
    if doclet.returns is None:
        doclet.returns = []

    info = _first_fact(doclet, CALLABLE_DECLARATION_TYPES)
    if not isinstance(info, CallableFact):
        return
    filename = doclet.filename or ""
    logger.debug("Function backfill", extra={"operation": "function_backfill", "longname": doclet.longname})

    if info.accessibility in _RESTRICTED_ACCESS:
        doclet.set_access(info.accessibility)
    if info.type_parameters.string and doclet.type_parameters is None:
        doclet.type_parameters = info.type_parameters

    returns = doclet.returns
    if info.return_type.string and not (returns and _has_type_names(returns[0].type)):
        if not returns:
            returns.append(ReturnDoc(type=TypeSpec()))
        first = returns[0]
        if first.type is None:
            first.type = TypeSpec()
        first.type.names.append(info.return_type.type_id(filename))

    paramnames = doclet.meta.code.paramnames or []
    params = doclet.params
    for index, declared_name in enumerate(paramnames):
        declared = _unwrap_param(info.parameters[index] if index < len(info.parameters) else None)
        name = declared.id or declared_name or ""
        type_ref = declared.type_annotation
        existing = params[index] if index < len(params) else None

        if existing is None:
            params.append(
                ParamDoc(
                    name=name,
                    type=TypeSpec(names=[type_ref.type_id(filename)] if type_ref is not None else []),
                    description="",
                    optional=True if declared.optional else None,
                    defaultvalue=declared.default.string if declared.default and declared.default.string else None,
                )
            )
            continue
        if not existing.name:
            existing.name = name
        if declared.optional:
            existing.optional = True
        if not existing.defaultvalue and declared.default and declared.default.string:
            existing.defaultvalue = declared.default.string
        if not _has_type_names(existing.type) and type_ref is not None:
            existing.type = TypeSpec(names=[type_ref.type_id(filename)])


# (b) Overload reconciliation -----------------------------------------------


def _overload_signatures(facts: Iterable[Fact]) -> Iterator[CallableFact]:
    for fact in facts:
        if fact.node_type in OVERLOAD_SIGNATURE_TYPES and isinstance(fact, CallableFact):
            yield fact
        elif isinstance(fact, (ParenthesizedTypeFact, TypeAnnotationFact)):
            yield from _overload_signatures([fact.type_annotation])
        elif isinstance(fact, (UnionTypeFact, IntersectionTypeFact)):
            yield from _overload_signatures(fact.types)


def _add_to_union(names: list[str], type_id: str, marker: str) -> bool:
    """Grow a union of at most two entries; a full single entry gets ``marker``.

    Returns True when ``type_id`` itself was added.
    """
    if type_id in names:
        return False
    if len(names) == 1:
        names.append(marker)
    elif len(names) < 2:
        names.append(type_id)
        return True
    return False


def reconcile_overloads(doclet: Doclet) -> None:
    """Merge call-signature facts into ``returns``, ``params`` and ``extras``."""
    extras = doclet.meta.extras
    if not extras:
        return
    settings = doclet.active_context.settings
    filename = doclet.filename or ""
    paramnames = doclet.meta.code.paramnames or []
    if doclet.params is None:
        doclet.params = []
    if doclet.returns is None:
        doclet.returns = []
    params = doclet.params
    already_returns = bool(doclet.returns) and _has_type_names(doclet.returns[0].type)

    for info in _overload_signatures(extras):
        logger.debug(
            "Reconciling overload",
            extra={"operation": "reconcile_overloads", "signature": info.string},
        )
        added = False
        if not already_returns:
            return_id = info.return_type.type_id(filename)
            if not doclet.returns:
                if info.return_type.string:
                    doclet.returns.append(ReturnDoc(type=TypeSpec(names=[return_id]), description=""))
                    added = True
            elif return_id:
                first = doclet.returns[0]
                if first.type is None:
                    first.type = TypeSpec()
                added = _add_to_union(first.type.names, return_id, settings.truncation_marker) or added

        for index, param in enumerate(info.parameters):
            declared = _unwrap_param(param)
            existing = params[index] if index < len(params) else None
            ident = (
                (existing.name if existing is not None else None)
                or (paramnames[index] if index < len(paramnames) else None)
                or declared.id
                or ""
            )
            if existing is None or settings.variadic_marker in ident:
                continue
            type_id = declared.type_annotation.type_id(filename) if declared.type_annotation else ""
            if not type_id:
                continue
            if existing.type is None:
                existing.type = TypeSpec()
            added = _add_to_union(existing.type.names, type_id, settings.truncation_marker) or added

        current_arity = len(doclet.type_parameters.params) if doclet.type_parameters else 0
        if added and info.type_parameters.string and current_arity < len(info.type_parameters.params):
            doclet.type_parameters = info.type_parameters

        _record_signature(doclet, info, filename)


def _record_signature(doclet: Doclet, info: CallableFact, filename: str) -> None:
    if doclet.extras is None:
        doclet.extras = []
    if any(signature.string == info.string for signature in doclet.extras):
        return
    parameters = []
    for param in info.parameters:
        declared = _unwrap_param(param)
        type_ref = declared.type_annotation
        parameters.append(
            ParamDoc(
                name=declared.id,
                optional=True if declared.optional else None,
                type=TypeSpec(names=[type_ref.type_id(filename)] if type_ref is not None and type_ref.string else []),
                description="",
            )
        )
    doclet.extras.append(
        OverloadSignature(
            string=info.string,
            type_parameters=info.type_parameters,
            return_type=info.return_type,
            parameters=parameters,
        )
    )


# (c) Structural-type unrolling --------------------------------------------


def _is_empty(value: object) -> bool:
    if value is None or value == "":
        return True
    if isinstance(value, TypeSpec):
        return not value.names
    return isinstance(value, (list, dict)) and not value


def _harvest_member_comments(doclet: Doclet, member: InterfaceMember) -> dict[str, object]:
    """Interpret the tags of a member's own comments into a side table."""
    dictionary = doclet.active_context.dictionary
    extra: dict[str, object] = {"deprecated": False, "access": "public"}
    for comment in member.leading_comments:
        for raw in parse_comment(comment):
            definition = dictionary.look_up(raw.title)
            tag = dictionary.make_tag(raw.title, raw.text)
            title = tag.title
            if title == "description":
                extra["description"] = tag.text
            elif title == "deprecated":
                extra["deprecated"] = True
            elif title == "default":
                extra["defaultvalue"] = tag.text
                extra["default"] = tag.text
            elif title == "private":
                extra["access"] = "private"
            if definition is None or title in _MEMBER_COMMENT_TITLES:
                continue
            extra[title] = tag.text
            if definition.on_property_tagged is not None:
                definition.on_property_tagged(doclet, extra, tag)
    return extra


def _merge_member(
    doclet: Doclet,
    previous: PropertyDoc | None,
    member: InterfaceMember,
    extra: MutableMapping[str, object],
) -> PropertyDoc:
    context = doclet.active_context
    merged = previous if previous is not None else PropertyDoc()
    if not merged.name and member.key:
        merged.name = member.key
    if member.optional:
        merged.optional = True
    for key, value in extra.items():
        if key in _PROPERTY_FIELDS:
            if _is_empty(getattr(merged, key)) and value is not None:
                setattr(merged, key, value)
        elif value is not None:
            merged.extras.setdefault(key, value)
    # A @type in the member comment outranks the declared annotation.
    type_text = member.type or member.type_annotation.string
    if not _has_type_names(merged.type) and type_text:
        merged.type = TypeSpec(names=[context.syntax.type_id(type_text, doclet.filename or "")])
    return merged


def _unroll_interface(doclet: Doclet, interface: InterfaceDeclarationFact) -> None:
    settings = doclet.active_context.settings
    filename = doclet.filename or ""
    if interface.extends and not doclet.augments:
        doclet.augments = [ref.type_id(filename) for ref in interface.extends]
    if interface.type_parameters.string:
        doclet.type_parameters = interface.type_parameters
    if doclet.type is None:
        doclet.type = TypeSpec(names=[settings.interface_type_name])
    if doclet.properties is None:
        doclet.properties = []
    properties = doclet.properties

    members = interface.body
    index = 0
    member_index = 0
    while member_index < len(members):
        previous = properties[index] if index < len(properties) else None
        if previous is not None and (previous.name or "").find(".") > 0:
            # Nested member collected from a property tag; not declared directly.
            member = InterfaceMember()
        else:
            member = members[member_index]
            member_index += 1
        extra = _harvest_member_comments(doclet, member)
        merged = _merge_member(doclet, previous, member, extra)
        if index < len(properties):
            properties[index] = merged
        else:
            properties.append(merged)
        index += 1


def unroll_structural_type(doclet: Doclet) -> None:
    """Expand an interface or type-alias declaration onto the doclet."""
    node = doclet.meta.code.node
    if node is None:
        return
    context = doclet.active_context
    interface = context.syntax.find("TSInterfaceDeclaration", node)
    if isinstance(interface, InterfaceDeclarationFact):
        logger.debug("Unrolling interface", extra={"operation": "unroll_structural_type", "longname": doclet.longname})
        _unroll_interface(doclet, interface)
        return
    alias = context.syntax.find("TSTypeAliasDeclaration", node)
    if isinstance(alias, TypeAliasDeclarationFact):
        logger.debug("Unrolling type alias", extra={"operation": "unroll_structural_type", "longname": doclet.longname})
        if alias.type_parameters.string:
            doclet.type_parameters = alias.type_parameters
        if doclet.type is None:
            aliased = alias.type_annotation.type_id(doclet.filename or "")
            doclet.type = TypeSpec(names=[aliased or context.settings.alias_type_name])


# (d) Class backfill ----------------------------------------------------------


def class_backfill(doclet: Doclet) -> None:
    """Adopt implemented interfaces and the superclass from the class declaration."""
    info = _first_fact(doclet, ("ClassDeclaration",))
    if not isinstance(info, ClassDeclarationFact):
        return
    filename = doclet.filename or ""
    logger.debug("Class backfill", extra={"operation": "class_backfill", "longname": doclet.longname})
    if not doclet.implements and info.implements:
        doclet.implements = [ref.type_id(filename) for ref in info.implements]
    if info.super_class.string and not doclet.augments:
        doclet.augments = [info.super_class.type_id(filename)]


# (e) Class-member backfill -------------------------------------------------


def class_member_backfill(doclet: Doclet) -> None:
    """Adopt access and type of a class field, correcting a static scope."""
    info = _first_fact(doclet, ("ClassProperty",))
    if not isinstance(info, ClassPropertyFact):
        return
    logger.debug("Class member backfill", extra={"operation": "class_member_backfill", "longname": doclet.longname})
    if info.accessibility in _RESTRICTED_ACCESS:
        doclet.set_access(info.accessibility)
    if doclet.type is None and info.type_annotation.string:
        doclet.type = TypeSpec(names=[info.type_annotation.type_id(doclet.filename or "")])
    if info.static and doclet.scope != Scope.STATIC:
        doclet.set_scope(Scope.STATIC)
        doclet.longname = None
        doclet.active_context.resolver.resolve(doclet)


def run_enrichment(doclet: Doclet) -> None:
    """Run the enrichment passes in their fixed order."""
    function_backfill(doclet)
    reconcile_overloads(doclet)
    if doclet.kind in STRUCTURAL_KINDS:
        unroll_structural_type(doclet)
    class_backfill(doclet)
    class_member_backfill(doclet)
