"""Tests for docletkit_common.errors and problem_details.

Tests cover error codes, exception context, and Problem Details
construction from exceptions.
"""

from __future__ import annotations

import json
import logging

import pytest

from docletkit_common.errors import (
    BASE_TYPE_URI,
    ConfigurationError,
    DocletKitError,
    ErrorCode,
    InputDecodeError,
    InvalidScopeError,
    TagDefinitionError,
    get_type_uri,
)
from docletkit_common.problem_details import build_problem_details, render_problem


class TestErrorCodes:
    """Tests for ErrorCode and type URIs."""

    def test_codes_are_kebab_case(self) -> None:
        """Every code value is a lower-case kebab-case string."""
        for code in ErrorCode:
            assert code.value == code.value.lower()
            assert "_" not in code.value
            assert str(code) == code.value

    def test_type_uri(self) -> None:
        """get_type_uri appends the code to the base URI."""
        assert get_type_uri(ErrorCode.INVALID_INPUT) == f"{BASE_TYPE_URI}/invalid-input"


class TestDocletKitError:
    """Tests for the base exception."""

    def test_defaults(self) -> None:
        """Base errors default to runtime-error with status 500."""
        error = DocletKitError("Something broke")
        assert error.code == ErrorCode.RUNTIME_ERROR
        assert error.http_status == 500
        assert error.log_level == logging.ERROR
        assert error.context == {}
        assert str(error) == "DocletKitError[runtime-error]: Something broke"

    def test_cause_is_chained(self) -> None:
        """A cause is exposed as __cause__ and named in str()."""
        cause = ValueError("bad")
        error = ConfigurationError("Invalid settings", cause=cause)
        assert error.__cause__ is cause
        assert str(error).endswith("(caused by: ValueError)")

    def test_subclass_codes(self) -> None:
        """Each subclass carries its own code and status."""
        assert ConfigurationError("x").code == ErrorCode.CONFIGURATION_ERROR
        assert TagDefinitionError("x").code == ErrorCode.TAG_DEFINITION_ERROR
        decode = InputDecodeError("x")
        assert decode.code == ErrorCode.INVALID_INPUT
        assert decode.http_status == 400
        assert decode.log_level == logging.WARNING


class TestInvalidScopeError:
    """Tests for InvalidScopeError."""

    def test_message_lists_accepted_scopes(self) -> None:
        """The message names the rejected scope and every accepted one."""
        error = InvalidScopeError("bogus", ("global", "inner"))
        assert error.message == (
            'The scope name "bogus" is not recognized. Use one of the following values: ["global","inner"]'
        )
        assert error.http_status == 422
        assert error.context == {"scope": "bogus", "accepted": ["global", "inner"]}
        assert error.filepath is None

    def test_filepath_is_included(self) -> None:
        """A source file is appended to the message and context."""
        error = InvalidScopeError("bogus", ("global",), "/src/a.js")
        assert error.message.endswith("(Source file: /src/a.js)")
        assert error.context["filepath"] == "/src/a.js"


class TestProblemDetails:
    """Tests for Problem Details payloads."""

    def test_from_exception(self) -> None:
        """to_problem_details maps code, status and context."""
        error = InvalidScopeError("bogus", ("global",), "/src/a.js")
        problem = error.to_problem_details(instance="urn:docletkit:test")
        assert problem["type"] == f"{BASE_TYPE_URI}/invalid-scope"
        assert problem["title"] == "InvalidScopeError"
        assert problem["status"] == 422
        assert problem["code"] == "invalid-scope"
        assert problem["instance"] == "urn:docletkit:test"
        assert problem["extensions"]["accepted"] == ["global"]

    def test_default_instance(self) -> None:
        """Problems without an instance use the generic URN."""
        problem = DocletKitError("x").to_problem_details()
        assert problem["instance"] == "urn:docletkit:error"
        assert "extensions" not in problem

    def test_extensions_are_coerced(self) -> None:
        """Non-JSON extension values are converted to strings or lists."""
        problem = build_problem_details(
            problem_type="https://docletkit.dev/problems/runtime-error",
            title="Runtime Error",
            status=500,
            detail="Operation failed",
            instance="urn:docletkit:error",
            extensions={"scopes": ("a", "b"), "error": ValueError("bad")},
        )
        assert problem["extensions"] == {"scopes": ["a", "b"], "error": "bad"}
        assert "code" not in problem

    def test_render_is_sorted_json(self) -> None:
        """render_problem emits indented JSON with sorted keys."""
        problem = TagDefinitionError("Tag title already defined: since").to_problem_details()
        rendered = render_problem(problem)
        assert json.loads(rendered) == problem
        assert rendered.index('"code"') < rendered.index('"detail"')
        assert rendered.startswith("{\n  ")


@pytest.mark.parametrize(
    "error",
    [
        ConfigurationError("bad config"),
        InputDecodeError("bad input"),
        TagDefinitionError("bad tag"),
        InvalidScopeError("bogus", ("global",)),
    ],
)
def test_all_errors_are_docletkit_errors(error: DocletKitError) -> None:
    """Every exception derives from DocletKitError and converts cleanly."""
    assert isinstance(error, DocletKitError)
    assert error.to_problem_details()["detail"] == error.message
