"""
export_symbols.py
=================
Scan one or more RPG source files (or directories of them) and write the
symbol table of each as ``<output-dir>/<source-stem>.json``.

Usage
-----
    python scripts/export_symbols.py \\
        --sources tests/fixtures/example1.rpgle tests/fixtures \\
        --output-dir outputs/symbols
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterator

# Allow running from the repo root without installing the package
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from rpg_parser.output.report import ReportRenderer
from rpg_parser.pipeline.scanner import RpgScanner

RPG_SUFFIXES = (".rpgle", ".sqlrpgle", ".rpginc")


def _iter_sources(paths: list[str]) -> Iterator[Path]:
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            for child in sorted(path.rglob("*")):
                if child.suffix.lower() in RPG_SUFFIXES:
                    yield child
        else:
            yield path


def export(sources: list[str], output_dir: Path) -> int:
    """Write one JSON file per source; returns the number written."""
    scanner = RpgScanner()
    written = 0
    for source in _iter_sources(sources):
        document = scanner.scan_file(source)
        out_file = output_dir / f"{source.stem}.json"
        out_file.write_text(ReportRenderer(document).to_json_str(), encoding="utf-8")
        metrics = document.metrics
        print(
            f"  wrote {out_file}  ({len(document.symbols)} symbols, "
            f"{metrics.control_blocks} control blocks, {metrics.to_dos} to-dos)"
        )
        written += 1
    return written


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Export RPG symbol tables as JSON"
    )
    parser.add_argument("--sources", nargs="+", required=True, metavar="PATH")
    parser.add_argument(
        "--output-dir", "-o", default="outputs/symbols", metavar="DIR"
    )
    args = parser.parse_args()

    out = Path(args.output_dir)
    out.mkdir(parents=True, exist_ok=True)
    export(args.sources, out)


if __name__ == "__main__":
    main()
