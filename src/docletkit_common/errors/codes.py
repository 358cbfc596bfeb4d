"""Error code registry and type URIs for Problem Details.

Codes and URIs are stable identifiers surfaced in RFC 9457 Problem Details
payloads emitted by the docletkit CLI.

Examples
--------
>>> from docletkit_common.errors.codes import ErrorCode, get_type_uri
>>> get_type_uri(ErrorCode.INVALID_SCOPE)
'https://docletkit.dev/problems/invalid-scope'
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

__all__ = [
    "BASE_TYPE_URI",
    "ErrorCode",
    "get_type_uri",
]

BASE_TYPE_URI: Final[str] = "https://docletkit.dev/problems"


class ErrorCode(StrEnum):
    """Stable error codes for docletkit exceptions.

    Attributes
    ----------
    INVALID_SCOPE
        A doclet scope outside the recognised set was requested.
    INVALID_INPUT
        Input records do not match the expected shape.
    TAG_DEFINITION_ERROR
        A tag dictionary definition conflicts with an existing one.
    CONFIGURATION_ERROR
        Settings or configuration files are invalid.
    RUNTIME_ERROR
        Unclassified runtime failure.
    """

    INVALID_SCOPE = "invalid-scope"
    INVALID_INPUT = "invalid-input"
    TAG_DEFINITION_ERROR = "tag-definition-error"
    CONFIGURATION_ERROR = "configuration-error"
    RUNTIME_ERROR = "runtime-error"

    def __str__(self) -> str:
        """Return the code value as a string."""
        return self.value


def get_type_uri(code: ErrorCode) -> str:
    """Get the RFC 9457 type URI for an error code.

    Parameters
    ----------
    code : ErrorCode
        Error code enum value.

    Returns
    -------
    str
        Complete type URI (e.g., "https://docletkit.dev/problems/invalid-scope").
    """
    return f"{BASE_TYPE_URI}/{code.value}"
