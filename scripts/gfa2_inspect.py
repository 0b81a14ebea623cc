#!/usr/bin/env python3
"""Parse a GFA2 file, intern its identifiers and report a JSON summary.

Writes the summary JSON to stdout and progress/diagnostics to stderr.
Exits 1 when the document cannot be parsed or translated.

Usage:
    python3 scripts/gfa2_inspect.py --input assembly.gfa2 \
      --name-map-out assembly.names.json --translated-out assembly.idx.gfa2
    python3 scripts/gfa2_inspect.py --input assembly.gfa2 --skip-errors \
      --permissive-tags
"""
from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Any

from gfa2codec.config import ParserConfig, config_to_dict, load_parser_config
from gfa2codec.errors import ParseError, diagnostic_to_dict
from gfa2codec.io_utils import dumps_json
from gfa2codec.name_map import NameMap
from gfa2codec.parser import parse_lines
from gfa2codec.writer import document_to_text

log = logging.getLogger(__name__)


def dump_json(obj: object) -> None:
    sys.stdout.buffer.write(dumps_json(obj, pretty=True))
    sys.stdout.buffer.write(b"\n")
    sys.stdout.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Parse a GFA2 file and intern its identifiers."
    )
    parser.add_argument(
        "--input", required=True, type=Path, help="GFA2 file to parse"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON parser config (on_error, tag_mode, ...)",
    )
    parser.add_argument(
        "--skip-errors",
        action="store_true",
        help="Skip malformed lines instead of aborting",
    )
    parser.add_argument(
        "--permissive-tags",
        action="store_true",
        help="Drop malformed optional fields instead of failing the record",
    )
    parser.add_argument(
        "--name-map-in",
        type=Path,
        default=None,
        help="Apply an existing name map instead of building one",
    )
    parser.add_argument(
        "--name-map-out",
        type=Path,
        default=None,
        help="Write the name map as JSON",
    )
    parser.add_argument(
        "--translated-out",
        type=Path,
        default=None,
        help="Write the index-form document as GFA2 text",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def resolve_config(args: argparse.Namespace) -> ParserConfig:
    """Config file first, then command-line flags on top."""
    config = load_parser_config(args.config) if args.config else ParserConfig()
    overrides: dict[str, Any] = {}
    if args.skip_errors:
        overrides["on_error"] = "skip"
    if args.permissive_tags:
        overrides["tag_mode"] = "permissive"
    return dataclasses.replace(config, **overrides) if overrides else config


def read_lines(path: Path) -> list[bytes]:
    lines = path.read_bytes().split(b"\n")
    if lines and not lines[-1]:
        lines.pop()
    return lines


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    if not args.input.exists():
        log.error("input not found: %s", args.input)
        return 1

    try:
        config = resolve_config(args)
    except ValueError as exc:
        log.error("invalid parser config: %s", exc)
        return 1

    summary: dict[str, Any] = {
        "input": str(args.input),
        "config": config_to_dict(config),
    }

    try:
        result = parse_lines(read_lines(args.input), config)
    except ParseError as exc:
        log.error("parse failed: %s", exc)
        summary["status"] = "parse_error"
        summary["error"] = diagnostic_to_dict(exc.diagnostic)
        dump_json(summary)
        return 1

    document = result.document
    log.info(
        "Parsed %d records from %s (%d skipped lines)",
        len(document), args.input, len(result.skipped_lines),
    )
    summary["record_counts"] = document.record_counts()
    summary["skipped_lines"] = list(result.skipped_lines)
    summary["diagnostics"] = [diagnostic_to_dict(d) for d in result.diagnostics]

    try:
        if args.name_map_in:
            name_map = NameMap.load_json(args.name_map_in)
            log.info("Loaded name map with %d names from %s", len(name_map), args.name_map_in)
        else:
            name_map = NameMap.build(document)
        indexed = name_map.translate_to_indices(document)
    except ValueError as exc:
        log.error("translation failed: %s", exc)
        summary["status"] = "translation_error"
        summary["error"] = str(exc)
        dump_json(summary)
        return 1

    summary["names"] = len(name_map)
    summary["content_hash"] = f"{name_map.content_hash:016x}"

    if args.name_map_out:
        name_map.save_json(args.name_map_out)
        log.info("Wrote name map to %s", args.name_map_out)
    if args.translated_out:
        args.translated_out.parent.mkdir(parents=True, exist_ok=True)
        args.translated_out.write_text(
            document_to_text(indexed, preserve_line_order=True), encoding="utf-8",
        )
        log.info("Wrote index-form document to %s", args.translated_out)

    summary["status"] = "ok" if result.ok else "ok_with_diagnostics"
    dump_json(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
