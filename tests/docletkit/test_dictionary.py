"""Tests for docletkit.dictionary and the default definitions."""

from __future__ import annotations

import pytest

from docletkit.definitions import default_dictionary
from docletkit.dictionary import TagDefinition, TagDictionary
from docletkit.tags import TagValue
from docletkit_common.errors import ErrorCode, TagDefinitionError


@pytest.fixture
def dictionary() -> TagDictionary:
    return default_dictionary()


class TestLookUp:
    """Title lookup and normalisation."""

    @pytest.mark.parametrize(
        ("title", "canonical"),
        [("arg", "param"), ("Return", "returns"), ("desc", "description"), ("extends", "augments")],
    )
    def test_synonyms_resolve(self, dictionary: TagDictionary, title: str, canonical: str) -> None:
        assert dictionary.normalise(title) == canonical
        definition = dictionary.look_up(title)
        assert definition is not None
        assert definition.title == canonical

    def test_unknown_title(self, dictionary: TagDictionary) -> None:
        assert dictionary.look_up("customtag") is None
        assert "customtag" not in dictionary
        assert "param" in dictionary

    def test_namespace_kinds(self, dictionary: TagDictionary) -> None:
        assert dictionary.is_namespace("module")
        assert dictionary.is_namespace("event")
        assert dictionary.is_namespace("external")
        assert not dictionary.is_namespace("function")
        assert not dictionary.is_namespace(None)


class TestDefine:
    """Building explicit dictionaries."""

    def test_conflicting_title_is_rejected(self) -> None:
        dictionary = TagDictionary([TagDefinition("since")])
        with pytest.raises(TagDefinitionError) as excinfo:
            dictionary.define(TagDefinition("version", synonyms=("since",)))
        assert excinfo.value.code == ErrorCode.TAG_DEFINITION_ERROR
        assert excinfo.value.context["conflicts"] == ["since"]

    def test_replace_overrides(self) -> None:
        dictionary = TagDictionary([TagDefinition("since")])
        replacement = TagDefinition("since", keeps_whitespace=True)
        dictionary.define(replacement, replace=True)
        assert dictionary.look_up("since") is replacement
        assert len(dictionary) == 1


class TestMakeTag:
    """Tag construction through definitions."""

    def test_unknown_tag_keeps_trimmed_text(self, dictionary: TagDictionary) -> None:
        tag = dictionary.make_tag("CustomTag", "  hello \n")
        assert tag.original_title == "CustomTag"
        assert tag.title == "customtag"
        assert tag.value == "hello"

    def test_param_is_parsed(self, dictionary: TagDictionary) -> None:
        tag = dictionary.make_tag("arg", "{number} x - The x.\n")
        assert tag.title == "param"
        assert isinstance(tag.value, TagValue)
        assert tag.value.name == "x"
        assert tag.value.description == "The x."

    def test_example_keeps_indentation(self, dictionary: TagDictionary) -> None:
        tag = dictionary.make_tag("example", "\n  run();\n    done();\n")
        assert tag.value == "run();\n  done();"

    def test_empty_body(self, dictionary: TagDictionary) -> None:
        tag = dictionary.make_tag("ignore")
        assert tag.text is None
        assert tag.value is None
