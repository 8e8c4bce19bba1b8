"""Command-line entry point: ``yamdocs values.yaml -o README.md --inject``.

Reads each input (``-`` is stdin), converts it and writes the markdown to
stdout or to ``--output``.  With ``--inject`` only the marked region of the
output file is replaced; with ``--check`` nothing is written and the exit
status says whether the file is up to date.

A document that fails to convert is reported with its ``line:column`` and
skipped; the remaining documents are still processed.

Exit status: 0 on success, 1 when a document failed or ``--check`` found
stale output, 2 for usage errors or an unusable output file.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from yamdocs import __version__
from yamdocs.converter import DocumentConverter
from yamdocs.errors import YamdocsError
from yamdocs.syntax.lexer import split_documents
from yamdocs.tables.config import RenderConfig
from yamdocs.writer import MarkerError, extract_region, inject

__all__ = ["build_parser", "main"]

logger = logging.getLogger("yamdocs")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

_DEFAULTS = RenderConfig()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yamdocs",
        description="Generate markdown tables from a commented YAML file "
        "(e.g. a Helm chart values.yaml).",
    )
    parser.add_argument(
        "inputs",
        nargs="+",
        metavar="FILE",
        help="YAML file(s) to document; '-' reads standard input",
    )
    parser.add_argument(
        "-o", "--output", type=Path, help="write to this file instead of stdout"
    )
    parser.add_argument(
        "--inject",
        action="store_true",
        help="replace only the region between the yamdocs markers of --output",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="do not write; exit 1 if --output is not up to date",
    )
    parser.add_argument(
        "--max-items",
        type=int,
        default=_DEFAULTS.max_inline_sequence_items,
        metavar="N",
        help="sequence items shown inline before '...' (default: %(default)s)",
    )
    parser.add_argument(
        "--always-split",
        action="store_true",
        help="give every nested mapping its own table, documented or not",
    )
    parser.add_argument(
        "--align", action="store_true", help="pad table columns to line up"
    )
    parser.add_argument(
        "--title",
        default=_DEFAULTS.root_title,
        help="heading of the top-level table (default: %(default)s)",
    )
    parser.add_argument(
        "--heading-level",
        type=int,
        default=_DEFAULTS.heading_level,
        metavar="N",
        help="markdown heading level of table titles (default: %(default)s)",
    )
    parser.add_argument(
        "--all-documents",
        action="store_true",
        help="convert every document of a multi-document stream, not just the first",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="errors only")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _read(name: str) -> bytes:
    if name == "-":
        return sys.stdin.buffer.read()
    return Path(name).read_bytes()


def _documents(name: str, data: bytes, all_documents: bool) -> list[tuple[str, str | bytes]]:
    if not all_documents:
        return [(name, data)]
    pieces = split_documents(data)
    if len(pieces) == 1:
        return [(name, pieces[0])]
    return [(f"{name}#{index + 1}", piece) for index, piece in enumerate(pieces)]


def _convert_all(args: argparse.Namespace, config: RenderConfig) -> tuple[list[str], bool]:
    """Convert every input document; returns the markdown parts and a failure flag."""
    documents: list[tuple[str, str | bytes]] = []
    failed = False
    for name in args.inputs:
        try:
            data = _read(name)
            documents.extend(_documents(name, data, args.all_documents))
        except OSError as exc:
            logger.error("%s: cannot read: %s", name, exc.strerror or exc)
            failed = True
        except YamdocsError as exc:
            logger.error("%s:%s: %s", name, exc.span or "?", exc.message)
            failed = True

    parts: list[str] = []
    for label, source in documents:
        document_config = config
        if len(documents) > 1:
            document_config = dataclasses.replace(
                config, root_title=f"{config.root_title} ({label})"
            )
        try:
            result = DocumentConverter(document_config).convert(source)
        except YamdocsError as exc:
            logger.error("%s:%s: %s", label, exc.span or "?", exc.message)
            failed = True
            continue
        for diagnostic in result.diagnostics:
            logger.warning("%s:%s", label, diagnostic)
        logger.info("%s: %d table(s)", label, len(result.plan.tables))
        parts.append(result.markdown)
    return parts, failed


def _emit(args: argparse.Namespace, markdown: str) -> int:
    if args.output is None:
        sys.stdout.write(markdown)
        return EXIT_OK

    output: Path = args.output
    try:
        existing = output.read_text(encoding="utf-8") if output.exists() else None
    except OSError as exc:
        logger.error("%s: cannot read: %s", output, exc.strerror or exc)
        return EXIT_USAGE

    stale = False
    updated = markdown
    try:
        if args.inject:
            if existing is None:
                logger.error("%s: --inject needs an existing file", output)
                return EXIT_USAGE
            if args.check:
                stale = extract_region(existing) != markdown.strip("\n")
            else:
                updated = inject(existing, markdown)
        else:
            stale = existing != markdown
    except MarkerError as exc:
        logger.error("%s: %s", output, exc)
        return EXIT_USAGE

    if args.check:
        if stale:
            logger.error("%s is out of date; re-run yamdocs without --check", output)
            return EXIT_FAILED
        logger.info("%s is up to date", output)
        return EXIT_OK

    if updated == existing:
        logger.info("%s unchanged", output)
        return EXIT_OK
    try:
        output.write_text(updated, encoding="utf-8")
    except OSError as exc:
        logger.error("%s: cannot write: %s", output, exc.strerror or exc)
        return EXIT_USAGE
    logger.info("wrote %s", output)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Run the command line; returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.inject or args.check) and args.output is None:
        parser.error("--inject and --check require --output")

    level = logging.WARNING
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logger.setLevel(level)

    try:
        config = RenderConfig(
            max_inline_sequence_items=args.max_items,
            documented_threshold=not args.always_split,
            heading_level=args.heading_level,
            root_title=args.title,
            align_columns=args.align,
        )
    except ValueError as exc:
        parser.error(str(exc))

    parts, failed = _convert_all(args, config)
    if not parts:
        return EXIT_FAILED
    status = _emit(args, "\n".join(parts))
    if status != EXIT_OK:
        return status
    return EXIT_FAILED if failed else EXIT_OK
