"""Command-line entry point: ``ocifkit validate`` and ``ocifkit convert``."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Any

from ocifkit import __version__
from ocifkit.models.errors import LocatedError
from ocifkit.parser.loader import DocumentLoader
from ocifkit.parser.schema import SchemaValidator
from ocifkit.parser.validator import DocumentValidator
from ocifkit.render.registry import RendererRegistry, UnsupportedFormatError
from ocifkit.service.converter import DocumentConverter, InvalidDocumentError
from ocifkit.settings import Settings

logger = logging.getLogger("ocifkit.cli")


def format_error(filename: str, error: LocatedError) -> list[str]:
    """Render one located error as ``file:line:col: path: message`` plus context."""
    line = f"{filename}:{error.line}:{error.column}: {error.path}: {error.message}"
    if error.details and error.details != error.message:
        line += f" ({error.details})"
    lines = [line]
    if error.context:
        lines.append(f"    {error.context}")
    return lines


def _print_errors(filename: str, errors: list[LocatedError]) -> None:
    for error in errors:
        for line in format_error(filename, error):
            print(line, file=sys.stderr)


def _make_validator(settings: Settings) -> DocumentValidator:
    loader = DocumentLoader(
        max_document_size=settings.max_document_size,
        max_depth=settings.max_depth,
    )
    return DocumentValidator(SchemaValidator(), loader=loader, locator=settings.locator)


def _read(path: Path) -> str:
    return DocumentLoader.read_text(path)


def cmd_validate(args: argparse.Namespace, settings: Settings) -> int:
    validator = _make_validator(settings)
    result = validator.validate(_read(args.input))
    if result.valid:
        logger.info("%s is valid", args.input)
        print(f"✅ {args.input} is valid")
        return 0
    logger.info("%s has %d error(s)", args.input, len(result.errors))
    _print_errors(str(args.input), result.errors)
    print(f"❌ {args.input}: {len(result.errors)} validation error(s)", file=sys.stderr)
    return 1


def _render_options(fmt: str, settings: Settings) -> dict[str, Any]:
    if fmt == "svg":
        return {"escape_text": settings.escape_text}
    if fmt == "tldraw":
        return {"timestamp": int(time.time() * 1000)}
    return {}


def cmd_convert(args: argparse.Namespace, settings: Settings) -> int:
    fmt = args.format or settings.default_format
    converter = DocumentConverter(_make_validator(settings))
    try:
        result = converter.convert(_read(args.input), fmt, **_render_options(fmt, settings))
    except UnsupportedFormatError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2
    except InvalidDocumentError as e:
        _print_errors(str(args.input), e.result.errors)
        print(f"❌ {args.input}: cannot convert an invalid document", file=sys.stderr)
        return 1

    if result.dropped_relations:
        print(
            f"⚠️  {result.dropped_relations} relation(s) skipped: endpoint node not found",
            file=sys.stderr,
        )
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(result.content)
        print(f"✅ Converted to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(result.content)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ocifkit",
        description="Validate OCIF canvas documents and convert them to other formats",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    p_validate = sub.add_parser("validate", help="Validate a JSON/JSON5 OCIF document")
    p_validate.add_argument("input", type=Path, help="OCIF document")

    p_convert = sub.add_parser("convert", help="Convert a valid OCIF document")
    p_convert.add_argument("input", type=Path, help="OCIF document")
    p_convert.add_argument(
        "-f", "--format",
        choices=RendererRegistry.available(),
        help="Output format (default: from settings, svg)",
    )
    p_convert.add_argument("-o", "--output", help="Output file (default: stdout)")
    return parser


def main(argv: list[str] | None = None) -> int:
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())

    args = build_parser().parse_args(argv)
    try:
        if args.command == "validate":
            return cmd_validate(args, settings)
        return cmd_convert(args, settings)
    except (OSError, UnicodeDecodeError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
