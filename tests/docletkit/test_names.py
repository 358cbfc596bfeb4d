"""Tests for longname resolution and the export index."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from docletkit.combine import combine
from docletkit.context import DocletContext
from docletkit.doclet import Doclet, SourceMeta, SymbolInfo, create_doclet
from docletkit.names import (
    DefaultNameResolver,
    ExportIndex,
    ExportRegistry,
    NameResolver,
    apply_namespace,
    remove_global,
    split_longname,
)


class TestLongnameHelpers:
    """Pure helpers for longname strings."""

    @pytest.mark.parametrize(
        ("longname", "expected"),
        [("<global>.foo", "foo"), ("<global>", ""), ("Foo.<global>", "Foo.<global>")],
    )
    def test_remove_global(self, longname: str, expected: str) -> None:
        assert remove_global(longname) == expected

    @pytest.mark.parametrize(
        ("longname", "expected"),
        [
            ("foo", ("", "", "foo")),
            ("Foo#bar", ("Foo", "#", "bar")),
            ("a.b~c", ("a.b", "~", "c")),
            ('Foo."a.b"', ("Foo", ".", '"a.b"')),
            ("Foo#bar(baz.qux)", ("Foo", "#", "bar(baz.qux)")),
        ],
    )
    def test_split_longname(self, longname: str, expected: tuple[str, str, str]) -> None:
        assert split_longname(longname) == expected

    def test_apply_namespace(self) -> None:
        assert apply_namespace("utils", "module") == "module:utils"
        assert apply_namespace("Foo#change", "event") == "Foo#event:change"
        assert apply_namespace("module:utils", "module") == "module:utils"


class TestDefaultNameResolver:
    """Longname, memberof and scope resolution through create_doclet."""

    def test_memberof_and_instance(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/**\n * @function bar\n * @memberof Foo\n * @instance\n */")
        assert doclet.longname == "Foo#bar"
        assert doclet.memberof == "Foo"
        assert doclet.scope == "instance"
        assert doclet.name == "bar"

    def test_memberof_defaults_to_static(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/**\n * @function bar\n * @memberof Foo\n */")
        assert doclet.longname == "Foo.bar"
        assert doclet.scope == "static"

    def test_memberof_prefix_is_stripped(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/**\n * @name Foo~helper\n * @memberof Foo\n */")
        assert doclet.longname == "Foo~helper"
        assert doclet.scope == "inner"
        assert doclet.name == "helper"

    def test_prototype_memberof(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/**\n * @name bar\n * @memberof <global>.Foo.prototype\n */")
        assert doclet.memberof == "Foo"
        assert doclet.scope == "instance"
        assert doclet.longname == "Foo#bar"

    def test_code_name_with_prototype(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/** Bar method. */", name="Foo.prototype.bar", type="FunctionExpression")
        assert doclet.longname == "Foo#bar"
        assert doclet.memberof == "Foo"
        assert doclet.scope == "instance"
        assert doclet.kind == "function"

    def test_global_memberof(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/**\n * @function main\n * @memberof <global>\n */")
        assert doclet.scope == "global"
        assert doclet.memberof is None
        assert doclet.longname == "main"

    def test_alias_wins_over_name(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/** @alias Widget#render */", name="render")
        assert doclet.longname == "Widget#render"
        assert doclet.name == "render"

    def test_module_namespace(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/** @module utils */")
        assert doclet.kind == "module"
        assert doclet.longname == "module:utils"

    def test_event_namespace(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/** @event Foo#change */")
        assert doclet.longname == "Foo#event:change"
        assert doclet.memberof == "Foo"
        assert doclet.name == "change"

    def test_resolution_is_idempotent(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/**\n * @function bar\n * @memberof Foo\n * @instance\n */")
        before = (doclet.longname, doclet.memberof, doclet.scope, doclet.name)
        DefaultNameResolver().resolve(doclet)
        DefaultNameResolver().resolve(doclet)
        assert (doclet.longname, doclet.memberof, doclet.scope, doclet.name) == before

    def test_unnamed_doclet_has_no_longname(self, build: Callable[..., Doclet]) -> None:
        doclet = build("/** Just prose. */")
        assert doclet.longname is None
        assert doclet.memberof is None


class TestExportIndex:
    """The default export registry."""

    def test_protocols(self) -> None:
        assert isinstance(ExportIndex(), ExportRegistry)
        assert isinstance(DefaultNameResolver(), NameResolver)

    def test_register_and_lookup(self) -> None:
        index = ExportIndex()
        index.register_export("src/a.js", "add", "module:a.add")
        assert index.lookup("src/a.js", "add") == "module:a.add"
        assert index.lookup("src/a.js", "sub") is None
        assert ("src/a.js", "add") in index
        assert len(index) == 1
        assert index.items() == [(("src/a.js", "add"), "module:a.add")]

    def test_built_doclets_are_registered(
        self, build: Callable[..., Doclet], context: DocletContext
    ) -> None:
        build("/** Adds. */", name="add", filename="/src/math.js", lineno=3)
        assert isinstance(context.exports, ExportIndex)
        assert context.exports.lookup("/src/math.js", "add") == "add"

    def test_comment_less_doclet_is_not_registered(self, context: DocletContext) -> None:
        doclet = create_doclet(None, SourceMeta(code=SymbolInfo(name="helper")), context=context)
        assert doclet.longname == "helper"
        assert len(context.exports) == 0

    def test_anonymous_doclet_is_not_registered(self, build: Callable[..., Doclet], context: DocletContext) -> None:
        doclet = build("/** @since 1 */")
        assert doclet.name is None
        assert len(context.exports) == 0

    def test_combine_does_not_register(self, build: Callable[..., Doclet], context: DocletContext) -> None:
        primary = build("/** @function add */")
        secondary = build("/** Adds numbers. */", name="add")
        before = context.exports.items()
        merged = combine(primary, secondary)
        assert merged.longname == "add"
        assert context.exports.items() == before
        assert len(context.exports) == 1
