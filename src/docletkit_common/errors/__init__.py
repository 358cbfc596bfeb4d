"""Exception hierarchy and error codes for docletkit.

Examples
--------
>>> from docletkit_common.errors import ErrorCode, InvalidScopeError
>>> error = InvalidScopeError("bogus", accepted=("global", "inner"))
>>> error.code == ErrorCode.INVALID_SCOPE
True
"""

from __future__ import annotations

from docletkit_common.errors.codes import BASE_TYPE_URI, ErrorCode, get_type_uri
from docletkit_common.errors.exceptions import (
    ConfigurationError,
    DocletKitError,
    InputDecodeError,
    InvalidScopeError,
    TagDefinitionError,
)

__all__ = [
    "BASE_TYPE_URI",
    "ConfigurationError",
    "DocletKitError",
    "ErrorCode",
    "InputDecodeError",
    "InvalidScopeError",
    "TagDefinitionError",
    "get_type_uri",
]
