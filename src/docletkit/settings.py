"""Engine settings with typed configuration and fail-fast validation.

Settings come from ``DOCLETKIT_*`` environment variables and, optionally, the
``[tool.docletkit]`` table of a TOML file (usually ``pyproject.toml``).
Explicit keyword overrides win over the file, which wins over the
environment.

Examples
--------
>>> from docletkit.settings import EngineSettings
>>> EngineSettings().truncation_marker
'$ts:...'
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from docletkit_common.errors import ConfigurationError
from docletkit_common.logging import get_logger

__all__ = ["EngineSettings", "load_settings"]

logger = get_logger(__name__)

_TOOL_TABLE = ("tool", "docletkit")


class EngineSettings(BaseSettings):
    """Tunable constants of the doclet engine (``DOCLETKIT_*`` namespace)."""

    model_config = SettingsConfigDict(
        env_prefix="DOCLETKIT_",
        extra="forbid",
        case_sensitive=False,
        frozen=True,
    )

    sort_sentinel: int = Field(
        default=9999999, description="Default sort value of doclets without a sort tag"
    )
    truncation_marker: str = Field(
        default="$ts:...", description="Entry appended to a union that stops growing"
    )
    interface_type_name: str = Field(
        default="TSInterface", description="Default type name of interface doclets"
    )
    alias_type_name: str = Field(
        default="TSType", description="Fallback type name of type-alias doclets"
    )
    variadic_marker: str = Field(
        default="...", description="Marker identifying rest parameters by name"
    )
    release_syntax_nodes: bool = Field(
        default=False, description="Drop syntax-node references once enrichment completes"
    )
    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )


def _read_tool_table(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except OSError as exc:
        msg = f"Unable to read configuration file {path}"
        raise ConfigurationError(msg, cause=exc, context={"path": str(path)}) from exc
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in configuration file {path}: {exc}"
        raise ConfigurationError(msg, cause=exc, context={"path": str(path)}) from exc

    table: Any = document
    for key in _TOOL_TABLE:
        table = table.get(key, {}) if isinstance(table, dict) else {}
    if not isinstance(table, dict):
        msg = f"[tool.docletkit] in {path} must be a table"
        raise ConfigurationError(msg, context={"path": str(path)})
    return {str(key).replace("-", "_"): value for key, value in table.items()}


def load_settings(path: str | Path | None = None, **overrides: object) -> EngineSettings:
    """Load :class:`EngineSettings` from the environment and an optional TOML file.

    Parameters
    ----------
    path : str | Path | None, optional
        TOML file whose ``[tool.docletkit]`` table supplies values.
        Defaults to None (environment only).
    **overrides : object
        Explicit values that win over both the file and the environment.

    Returns
    -------
    EngineSettings
        Validated, frozen settings.

    Raises
    ------
    ConfigurationError
        If the file cannot be read or a value fails validation.
    """
    values: dict[str, Any] = {}
    if path is not None:
        values.update(_read_tool_table(Path(path)))
    values.update(overrides)
    try:
        return EngineSettings(**values)
    except ValidationError as exc:
        msg = f"Configuration validation failed: {exc.error_count()} error(s)"
        logger.exception(
            "Settings validation failed",
            extra={"operation": "load_settings", "status": "error", "error": str(exc)},
        )
        raise ConfigurationError(
            msg,
            cause=exc,
            context={"validation_error": str(exc), "path": str(path) if path else None},
        ) from exc
