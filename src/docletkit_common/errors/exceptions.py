"""Typed exception hierarchy with Problem Details support.

All docletkit exceptions inherit from :class:`DocletKitError`, which carries a
stable :class:`~docletkit_common.errors.codes.ErrorCode`, an HTTP-style status
and a context mapping, and converts to an RFC 9457 Problem Details payload.

Examples
--------
>>> from docletkit_common.errors import ConfigurationError, ErrorCode
>>> try:
...     raise ConfigurationError("Bad setting", context={"field": "sort_sentinel"})
... except ConfigurationError as e:
...     assert e.code == ErrorCode.CONFIGURATION_ERROR
...     details = e.to_problem_details(instance="urn:docletkit:settings")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docletkit_common.errors.codes import ErrorCode, get_type_uri
from docletkit_common.problem_details import build_problem_details

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from docletkit_common.problem_details import ProblemDetails

__all__ = [
    "ConfigurationError",
    "DocletKitError",
    "InputDecodeError",
    "InvalidScopeError",
    "TagDefinitionError",
]


class DocletKitError(Exception):
    """Base exception for all docletkit errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    code : ErrorCode, optional
        Stable error code. Defaults to ``ErrorCode.RUNTIME_ERROR``.
    http_status : int, optional
        Status used in Problem Details payloads. Defaults to 500.
    log_level : int, optional
        Level at which callers should log the error. Defaults to ``logging.ERROR``.
    cause : Exception | None, optional
        Underlying exception, chained as ``__cause__``. Defaults to None.
    context : Mapping[str, object] | None, optional
        Additional structured context. Defaults to None.
    """

    def __init__(  # noqa: PLR0913
        self,
        message: str,
        *,
        code: ErrorCode = ErrorCode.RUNTIME_ERROR,
        http_status: int = 500,
        log_level: int = logging.ERROR,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status
        self.log_level = log_level
        self.context: dict[str, object] = dict(context) if context else {}
        if cause is not None:
            self.__cause__ = cause

    def to_problem_details(
        self,
        instance: str | None = None,
        title: str | None = None,
    ) -> ProblemDetails:
        """Convert to an RFC 9457 Problem Details payload.

        Parameters
        ----------
        instance : str | None, optional
            URI identifying the occurrence. Defaults to ``urn:docletkit:error``.
        title : str | None, optional
            Short summary. Defaults to the exception class name.

        Returns
        -------
        ProblemDetails
            Problem Details object with type, title, status, detail, code,
            instance, and optional extensions.
        """
        return build_problem_details(
            problem_type=get_type_uri(self.code),
            title=title or self.__class__.__name__,
            status=self.http_status,
            detail=self.message,
            instance=instance or "urn:docletkit:error",
            code=self.code.value,
            extensions=self.context or None,
        )

    def __str__(self) -> str:
        """Return ``ClassName[code]: message`` with the cause type when chained."""
        base = f"{self.__class__.__name__}[{self.code.value}]: {self.message}"
        if self.__cause__:
            base += f" (caused by: {type(self.__cause__).__name__})"
        return base


class InvalidScopeError(DocletKitError):
    """Raised when a doclet is given a scope name outside the recognised set.

    Parameters
    ----------
    scope : object
        The rejected scope value.
    accepted : Iterable[str]
        Scope names that would have been accepted.
    filepath : str | None, optional
        Source file of the doclet, when known. Defaults to None.
    """

    def __init__(
        self,
        scope: object,
        accepted: Iterable[str],
        filepath: str | None = None,
    ) -> None:
        accepted_names = list(accepted)
        quoted = ",".join(f'"{name}"' for name in accepted_names)
        message = (
            f'The scope name "{scope}" is not recognized. '
            f"Use one of the following values: [{quoted}]"
        )
        if filepath:
            message += f" (Source file: {filepath})"
        context: dict[str, object] = {"scope": str(scope), "accepted": accepted_names}
        if filepath:
            context["filepath"] = filepath
        super().__init__(
            message,
            code=ErrorCode.INVALID_SCOPE,
            http_status=422,
            context=context,
        )
        self.scope = scope
        self.accepted = tuple(accepted_names)
        self.filepath = filepath


class ConfigurationError(DocletKitError):
    """Raised when settings or configuration files are invalid."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.CONFIGURATION_ERROR,
            http_status=500,
            cause=cause,
            context=context,
        )


class TagDefinitionError(DocletKitError):
    """Raised when a tag definition conflicts with the dictionary contents."""

    def __init__(
        self,
        message: str,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.TAG_DEFINITION_ERROR,
            http_status=500,
            context=context,
        )


class InputDecodeError(DocletKitError):
    """Raised when input records cannot be decoded into source metadata."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.INVALID_INPUT,
            http_status=400,
            log_level=logging.WARNING,
            cause=cause,
            context=context,
        )
