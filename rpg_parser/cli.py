"""
RPG Parser – command-line interface
===================================

Usage
-----
::

    python -m rpg_parser.cli SOURCE [OPTIONS]

Options
-------
--output, -o          Output file path (default: stdout).
--format, -f          Output format: ``json`` (default), ``text`` or ``html``.
--outline             Text format only: nest subfields / enum members under
                      their owner.
--encoding            Source file encoding (default: utf-8).
--verbose, -v         Enable DEBUG logging.

Examples
--------
::

    python -m rpg_parser.cli orders.rpgle
    python -m rpg_parser.cli orders.rpgle -f text --outline
    python -m rpg_parser.cli orders.rpgle -f html -o orders.html
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .output.report import ReportRenderer
from .pipeline.scanner import RpgScanner


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="rpg_parser",
        description="RPG Parser – scan free-format RPG source into a symbol table",
    )
    p.add_argument("source", help="RPG source file to scan")
    p.add_argument(
        "--output", "-o",
        default="-",
        metavar="FILE",
        help="Output file (default: stdout)",
    )
    p.add_argument(
        "--format", "-f",
        choices=["json", "text", "html"],
        default="json",
        help="Output format (default: json)",
    )
    p.add_argument(
        "--outline",
        action="store_true",
        help="With --format text, list members under their data structure / enum",
    )
    p.add_argument(
        "--encoding",
        default="utf-8",
        help="Source file encoding (default: utf-8)",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    source = Path(args.source)
    if not source.is_file():
        print(f"error: source file not found: {source}", file=sys.stderr)
        return 2

    document = RpgScanner(encoding=args.encoding).scan_file(source)
    renderer = ReportRenderer(document, title=source.name)

    if args.format == "text":
        output_text = renderer.to_text(outline=args.outline)
    elif args.format == "html":
        output_text = renderer.to_html()
    else:
        output_text = renderer.to_json_str()

    if args.output == "-":
        print(output_text)
    else:
        Path(args.output).write_text(output_text, encoding="utf-8")
        print(f"Output written to {args.output}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
