"""RFC 9457 Problem Details helpers.

Examples
--------
>>> from docletkit_common.problem_details import build_problem_details, render_problem
>>> problem = build_problem_details(
...     problem_type="https://docletkit.dev/problems/invalid-scope",
...     title="InvalidScopeError",
...     status=422,
...     detail='The scope name "bogus" is not recognized.',
...     instance="urn:docletkit:doclet",
... )
>>> "invalid-scope" in render_problem(problem)
True
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, TypeAlias, TypedDict

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = [
    "JsonPrimitive",
    "JsonValue",
    "ProblemDetails",
    "build_problem_details",
    "render_problem",
]

JsonPrimitive: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = JsonPrimitive | list["JsonValue"] | dict[str, "JsonValue"]


class ProblemDetails(TypedDict, total=False):
    """TypedDict for RFC 9457 Problem Details payloads."""

    type: str
    title: str
    status: int
    detail: str
    instance: str
    code: str
    extensions: dict[str, JsonValue]


def _coerce_json(value: object) -> JsonValue:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_coerce_json(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _coerce_json(item) for key, item in value.items()}
    return str(value)


def build_problem_details(  # noqa: PLR0913
    *,
    problem_type: str,
    title: str,
    status: int,
    detail: str,
    instance: str,
    code: str | None = None,
    extensions: Mapping[str, object] | None = None,
) -> ProblemDetails:
    """Build an RFC 9457 Problem Details payload.

    Parameters
    ----------
    problem_type : str
        Type URI identifying the problem class.
    title : str
        Short human-readable summary.
    status : int
        HTTP-style status code.
    detail : str
        Human-readable explanation of this occurrence.
    instance : str
        URI identifying the occurrence.
    code : str | None, optional
        Stable error code. Defaults to None.
    extensions : Mapping[str, object] | None, optional
        Extra context; values are coerced to JSON-compatible data.
        Defaults to None.

    Returns
    -------
    ProblemDetails
        Problem Details payload.
    """
    problem: ProblemDetails = {
        "type": problem_type,
        "title": title,
        "status": status,
        "detail": detail,
        "instance": instance,
    }
    if code is not None:
        problem["code"] = code
    if extensions:
        problem["extensions"] = {str(key): _coerce_json(value) for key, value in extensions.items()}
    return problem


def render_problem(problem: ProblemDetails, *, indent: int | None = 2) -> str:
    """Render a Problem Details payload as JSON text."""
    return json.dumps(problem, indent=indent, sort_keys=True)
