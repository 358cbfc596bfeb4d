"""Command-line interface: build doclets from a JSON or YAML batch file.

The input is a list of entries ``{"comment": "/** ... */", "meta": {...}}``
where ``meta`` follows :class:`~docletkit.doclet.SourceMeta`. The doclets are
written as a JSON array to ``--output`` or stdout. Errors are reported on
stderr as RFC 9457 Problem Details with exit status 1.
"""

from __future__ import annotations

import argparse
import sys
import uuid
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import msgspec
import yaml

from docletkit.context import DocletContext, use_context
from docletkit.doclet import Doclet, create_doclet
from docletkit.serialize import decode_source_meta, encode_doclets
from docletkit.settings import load_settings
from docletkit_common.errors import DocletKitError, InputDecodeError
from docletkit_common.logging import get_logger, set_correlation_id, setup_logging, with_fields
from docletkit_common.problem_details import render_problem

__all__ = ["build_parser", "main"]

logger = get_logger(__name__)

_YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the ``docletkit`` command."""
    parser = argparse.ArgumentParser(prog="docletkit", description="Documentation comment enrichment")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse = subparsers.add_parser("parse", help="Build doclets from a JSON or YAML batch file")
    parse.add_argument("input", type=Path, help="Batch file of {comment, meta} entries")
    parse.add_argument("--output", "-o", type=Path, default=None, help="Write JSON here instead of stdout")
    parse.add_argument("--pretty", action="store_true", help="Indent the JSON output")
    parse.add_argument("--config", type=Path, default=None, help="TOML file with a [tool.docletkit] table")
    parse.add_argument("--log-level", default=None, help="Override the configured log level")
    return parser


def _load_entries(path: Path) -> list[Mapping[str, Any]]:
    try:
        raw = path.read_bytes()
    except OSError as exc:
        msg = f"Unable to read input file {path}"
        raise InputDecodeError(msg, cause=exc, context={"path": str(path)}) from exc

    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            document = yaml.safe_load(raw)
        else:
            document = msgspec.json.decode(raw)
    except (yaml.YAMLError, msgspec.DecodeError) as exc:
        msg = f"Input file {path} is not valid JSON or YAML"
        raise InputDecodeError(msg, cause=exc, context={"path": str(path)}) from exc

    if document is None:
        return []
    if not isinstance(document, list) or not all(isinstance(entry, Mapping) for entry in document):
        msg = f"Input file {path} must contain a list of {{comment, meta}} entries"
        raise InputDecodeError(msg, context={"path": str(path)})
    return document


def _build_doclets(entries: Sequence[Mapping[str, Any]], context: DocletContext) -> list[Doclet]:
    doclets: list[Doclet] = []
    with use_context(context):
        for entry in entries:
            comment = entry.get("comment")
            if comment is not None and not isinstance(comment, str):
                msg = "Entry comment must be a string"
                raise InputDecodeError(msg, context={"index": len(doclets)})
            doclets.append(create_doclet(comment, decode_source_meta(entry.get("meta")), context=context))
    return doclets


def _run_parse(args: argparse.Namespace, correlation_id: str) -> int:
    settings = load_settings(args.config)
    setup_logging(args.log_level or settings.log_level)
    context = DocletContext(settings=settings)

    with with_fields(logger, correlation_id=correlation_id, operation="parse") as log:
        entries = _load_entries(args.input)
        doclets = _build_doclets(entries, context)
        payload = encode_doclets(doclets, pretty=args.pretty)
        if args.output is not None:
            args.output.write_bytes(payload + b"\n")
        else:
            sys.stdout.write(payload.decode("utf-8") + "\n")
        log.info("Built doclets", extra={"count": len(doclets), "input": str(args.input)})
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return its exit status."""
    args = build_parser().parse_args(argv)
    correlation_id = uuid.uuid4().hex
    set_correlation_id(correlation_id)
    try:
        return _run_parse(args, correlation_id)
    except DocletKitError as exc:
        logger.log(exc.log_level, "Command failed", extra={"operation": args.command, "status": "error", "error": str(exc)})
        problem = exc.to_problem_details(instance=f"urn:docletkit:{args.command}:{correlation_id}")
        sys.stderr.write(render_problem(problem) + "\n")
        return 1
    finally:
        set_correlation_id(None)
