"""Tests for doclet assembly and post-processing."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from docletkit.context import DocletContext, use_context
from docletkit.doclet import Doclet, SourceMeta, SymbolInfo, create_doclet, infer_kind
from docletkit.facts import FunctionDeclarationFact, IdentifierParam, SyntaxNode, TypeRef
from docletkit.models import BorrowedSymbol, ParamDoc, TypeSpec
from docletkit.settings import EngineSettings
from docletkit_common.errors import ErrorCode, InvalidScopeError


class TestScope:
    """Scope validation."""

    def test_invalid_scope_raises_with_filepath(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/** @function run */", filename="/repo/lib/run.js", lineno=1)
        with pytest.raises(InvalidScopeError) as excinfo:
            doclet.set_scope("bogus")
        error = excinfo.value
        assert error.code == ErrorCode.INVALID_SCOPE
        assert error.filepath == "/repo/lib/run.js"
        assert '"bogus"' in error.message
        assert "(Source file: /repo/lib/run.js)" in error.message
        assert doclet.scope is None

    def test_valid_scopes(self) -> None:
        doclet = Doclet()
        for scope in ("global", "inner", "instance", "static"):
            doclet.set_scope(scope)
            assert doclet.scope == scope


class TestMeta:
    """Copying of source metadata."""

    def test_position_and_code_facts(self, build: Callable[..., Doclet]) -> None:
        doclet = build(
            "/** Adds. */",
            filename="/repo/src/math.js",
            lineno=12,
            columnno=4,
            range=[100, 180],
            id="astnode1",
            name="add",
            type="FunctionDeclaration",
            paramnames=["a", "b"],
            value="x",
        )
        meta = doclet.meta
        assert meta.filename == "math.js"
        assert meta.path == "/repo/src"
        assert meta.lineno == 12
        assert meta.columnno == 4
        assert meta.range == [100, 180]
        assert meta.code.id == "astnode1"
        assert meta.code.name == "add"
        assert meta.code.type == "FunctionDeclaration"
        assert meta.code.paramnames == ["a", "b"]
        assert meta.code.value == "x"
        assert doclet.filename == "/repo/src/math.js"

    def test_without_lineno_keeps_no_position(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/** @function f */", filename="/repo/a.js")
        assert doclet.meta.filename is None
        assert doclet.filename == ""

    def test_paramnames_are_copied(self) -> None:
        names = ["a"]
        doclet = create_doclet("/** @function f */", SourceMeta(code=SymbolInfo(paramnames=names)))
        names.append("b")
        assert doclet.meta.code.paramnames == ["a"]


class TestInferKind:
    """Kind inference from code shapes."""

    @pytest.mark.parametrize(
        ("node_type", "node", "expected"),
        [
            ("FunctionDeclaration", None, "function"),
            ("ArrowFunctionExpression", None, "function"),
            ("ClassDeclaration", None, "class"),
            ("MethodDefinition", SyntaxNode(type="MethodDefinition", kind="constructor"), "class"),
            ("MethodDefinition", SyntaxNode(type="MethodDefinition", kind="set"), "member"),
            ("MethodDefinition", SyntaxNode(type="MethodDefinition", kind="method"), "function"),
            ("Identifier", SyntaxNode(type="Identifier", parent_type="FunctionDeclaration"), "param"),
            ("Identifier", SyntaxNode(type="Identifier", parent_type="VariableDeclarator"), "member"),
            (
                "ExportNamedDeclaration",
                SyntaxNode(
                    type="ExportNamedDeclaration",
                    declaration=SyntaxNode(type="ClassDeclaration"),
                ),
                "class",
            ),
            (
                "ExportSpecifier",
                SyntaxNode(type="ExportSpecifier", local=SyntaxNode(type="FunctionExpression")),
                "function",
            ),
            ("ExportDefaultDeclaration", SyntaxNode(type="ExportDefaultDeclaration"), "member"),
            (None, None, "member"),
        ],
    )
    def test_infer_kind(self, node_type: str | None, node: SyntaxNode | None, expected: str) -> None:
        assert infer_kind(node_type, node) == expected

    def test_kind_tag_wins(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/** @kind constant */", name="LIMIT", type="FunctionDeclaration")
        assert doclet.kind == "constant"

    def test_kind_is_write_once(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/**\n * @class Widget\n * @function render\n */")
        assert doclet.kind == "class"
        assert doclet.name == "render"


class TestDescriptions:
    """Implicit description and classdesc tags."""

    def test_leading_prose_is_description(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/**\n * Adds two numbers.\n * @function add\n */")
        assert doclet.description == "Adds two numbers."

    def test_class_declaration_prose_is_classdesc(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/** A widget. */", name="Widget", type="ClassDeclaration")
        assert doclet.classdesc == "A widget."
        assert doclet.description is None
        assert doclet.kind == "class"

    def test_empty_comment(self, build: Callable[..., Doclet]) -> None:
        doclet = build("", name="x")
        assert doclet.comment == ""
        assert doclet.description is None
        assert doclet.longname == "x"
        assert doclet.kind == "member"

    def test_missing_comment(self) -> None:
        doclet = create_doclet(None)
        assert doclet.comment is None
        assert doclet.kind == "member"
        assert doclet.params == []
        assert doclet.returns == []


class TestDerivedFields:
    """Variation, sort, access and relations."""

    def test_variation_suffix(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/**\n * @function foo\n * @variation 2\n */")
        assert doclet.longname == "foo(2)"

    def test_default_sort(self, build: Callable[..., Doclet], context: DocletContext) -> None:
        doclet = build("/** @function f */")
        assert doclet.sort == context.settings.sort_sentinel == 9999999

    def test_sort_tag(self, build: Callable[..., Doclet]) -> None:
        assert build("/**\n * @function f\n * @sort 3\n */").sort == 3
        assert build("/**\n * @function f\n * @sort -2px\n */").sort == -2

    def test_non_numeric_sort_is_ignored(self, build: Callable[..., Doclet]) -> None:
        assert build("/**\n * @function f\n * @sort first\n */").sort == 9999999

    def test_access_is_write_once(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/**\n * @function f\n * @private\n * @access public\n */")
        assert doclet.access == "private"

    def test_unknown_access_level_is_ignored(self, build: Callable[..., Doclet]) -> None:
        assert build("/**\n * @function f\n * @access secret\n */").access is None

    def test_unknown_tags_are_kept(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/**\n * @function f\n * @customTag some value\n */")
        assert doclet.tags is not None
        assert [(tag.original_title, tag.title, tag.value) for tag in doclet.tags] == [
            ("customTag", "customtag", "some value")
        ]

    def test_known_tags_are_not_kept(self, build: Callable[..., Doclet]) -> None:
        assert build("/**\n * @function f\n * @since 1.2\n */").tags is None

    def test_relations(self, build: Callable[..., Doclet]) -> None:
        doclet = build(
            "/**\n * @class Child\n * @extends {Base}\n * @mixes Events\n"
            " * @borrows trstr as trim\n * @implements Drawable\n */"
        )
        assert doclet.augments == ["Base"]
        assert doclet.mixes == ["Events"]
        assert doclet.borrowed == [BorrowedSymbol(source="trstr", target="trim")]
        assert doclet.implements == ["Drawable"]

    def test_relation_helpers(self) -> None:
        doclet = Doclet()
        doclet.borrow("a")
        doclet.mix("M")
        doclet.augment("B")
        assert doclet.borrowed == [BorrowedSymbol(source="a")]
        assert doclet.mixes == ["M"]
        assert doclet.augments == ["B"]

    def test_params_returns_and_flags(self, build: Callable[..., Doclet]) -> None:
        doclet = build(
            "/**\n * @function clamp\n * @param {number} value - Input.\n"
            " * @param {number} [max=10] Upper bound.\n * @returns {number} Clamped.\n"
            " * @deprecated Use limit.\n * @since 2.1\n * @example\n *   clamp(3);\n */"
        )
        assert doclet.params == [
            ParamDoc(name="value", type=TypeSpec(names=["number"]), description="Input."),
            ParamDoc(
                name="max",
                type=TypeSpec(names=["number"]),
                description="Upper bound.",
                optional=True,
                defaultvalue="10",
            ),
        ]
        assert doclet.returns is not None
        assert doclet.returns[0].type == TypeSpec(names=["number"])
        assert doclet.returns[0].description == "Clamped."
        assert doclet.deprecated == "Use limit."
        assert doclet.since == "2.1"
        assert doclet.examples == ["clamp(3);"]


class TestTwinAndNodes:
    """Twin synchronisation and syntax-node release."""

    def test_twin_shares_code_facts(self, context: DocletContext) -> None:
        implementation = FunctionDeclarationFact(
            string="function add(a: number): number",
            parameters=[IdentifierParam(id="a", type_annotation=TypeRef(string="number"))],
            return_type=TypeRef(string="number"),
        )
        twin = create_doclet(
            "/** @function add */",
            SourceMeta(code=SymbolInfo(name="add", paramnames=["a"], extras=[implementation])),
            context=context,
        )
        doclet = create_doclet("/** @function add */", SourceMeta(doclet=twin), context=context)
        assert doclet.meta.doclet is twin
        assert doclet.meta.extras == [implementation]
        assert doclet.meta.code is twin.meta.code
        assert doclet.params == [ParamDoc(name="a", type=TypeSpec(names=["number"]), description="")]

    def test_twin_with_other_kind_is_ignored(self, context: DocletContext) -> None:
        twin = create_doclet("/** @class add */", context=context)
        doclet = create_doclet("/** @function add */", SourceMeta(doclet=twin), context=context)
        assert doclet.meta.code is not twin.meta.code

    def test_release_syntax_nodes(self) -> None:
        context = DocletContext(settings=EngineSettings(release_syntax_nodes=True))
        node = SyntaxNode(type="FunctionDeclaration")
        with use_context(context):
            doclet = create_doclet(
                "/** @function f */", SourceMeta(code=SymbolInfo(name="f", node=node))
            )
        assert doclet.meta.code.node is None
        assert doclet.meta.code.source is None

    def test_nodes_kept_by_default(self, build: Callable[..., Doclet]) -> None:
        node = SyntaxNode(type="FunctionDeclaration")
        doclet = build("/** @function f */", name="f", node=node)
        assert doclet.meta.code.node is node

    def test_twin_that_is_not_a_doclet_is_ignored(self, context: DocletContext) -> None:
        meta = SourceMeta(filename="a.js", lineno=1, doclet={"name": "f", "kind": "function"})
        doclet = create_doclet("/** @function f */", meta, context=context)
        assert doclet.meta.doclet is None
        assert doclet.longname == "f"
