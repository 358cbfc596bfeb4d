"""Shared logging, error and Problem Details helpers for docletkit."""

from __future__ import annotations

from docletkit_common.errors import (
    ConfigurationError,
    DocletKitError,
    ErrorCode,
    InputDecodeError,
    InvalidScopeError,
    TagDefinitionError,
)
from docletkit_common.logging import get_logger, setup_logging, with_fields

__all__ = [
    "ConfigurationError",
    "DocletKitError",
    "ErrorCode",
    "InputDecodeError",
    "InvalidScopeError",
    "TagDefinitionError",
    "get_logger",
    "setup_logging",
    "with_fields",
]
