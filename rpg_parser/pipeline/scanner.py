"""
RpgScanner
==========

Single-pass scan of free-format RPG source into an
:class:`~rpg_parser.models.RpgDocument`.

Per line:

1. :class:`~rpg_parser.passes.line_split.LineSplitPass`
   – separate code from the trailing ``//`` comment.
2. :class:`~rpg_parser.pipeline.symbol_builder.SymbolBuilder`
   – run the declaration matchers against the code, threading the
   :class:`~rpg_parser.pipeline.scope.ScopeState` from line to line.
   Lines already consumed as the body of a ``dcl-ds`` / ``dcl-enum`` are
   not matched again for declarations.
3. To-do matcher against the comment (every line, body lines included).
4. Control-block opener count against the code (every line).

The scan holds no state between calls; the same text always yields an
equal document.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Union

from ..models import RpgDocument, RpgSymbol
from ..parser.matchers import CONTROL_BLOCK
from ..passes.line_split import LineSplitPass
from .scope import GLOBAL
from .symbol_builder import SymbolBuilder

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\r?\n")


def split_source(text: str) -> List[str]:
    """Split source text on ``\\n`` with an optional preceding ``\\r``."""
    return _LINE_BREAK_RE.split(text)


def scan(text: str) -> RpgDocument:
    """
    Scan RPG source text.

    Parameters
    ----------
    text:
        Complete source text.

    Returns
    -------
    RpgDocument
    """
    lines = split_source(text)
    parts = LineSplitPass().run(lines)
    builder = SymbolBuilder(lines)

    symbols: List[RpgSymbol] = []
    scope = GLOBAL
    control_blocks = 0
    body_end = -1  # Last line index consumed by a block body

    for index, line in enumerate(parts):
        if index > body_end:
            result = builder.declarations(index, line.code, scope)
            symbols.extend(result.symbols)
            scope = result.scope
            if result.consumed_to is not None:
                body_end = result.consumed_to

        todo = builder.todo(index, line.comment, scope.reach)
        if todo is not None:
            symbols.append(todo)

        if CONTROL_BLOCK.test(line.code):
            control_blocks += 1

    document = RpgDocument.assemble(symbols, control_blocks)
    logger.debug("Scanned %d lines: %r", len(lines), document)
    return document


class RpgScanner:
    """
    File-oriented facade over :func:`scan`.

    Parameters
    ----------
    encoding:
        Encoding used by :meth:`scan_file`.  Undecodable bytes are replaced.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def scan_text(self, source: str) -> RpgDocument:
        return scan(source)

    def scan_file(self, file_path: Union[str, Path]) -> RpgDocument:
        """
        Read and scan an RPG source file.

        Raises
        ------
        OSError
            When the file cannot be read.
        """
        logger.info("Scanning file: %s", file_path)
        text = Path(file_path).read_text(encoding=self.encoding, errors="replace")
        return scan(text)
