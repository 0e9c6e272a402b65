"""
BlockExtractPass
================

Collects the body of a ``dcl-ds`` or ``dcl-enum`` block.

Starting after the opening declaration, every raw line is taken until (but
excluding) the first line whose *code* portion matches the closing marker,
or until end of input when no closing marker exists.  Each collected line
is trimmed and blank lines are dropped.

Every kept line remembers its raw source index, so member ranges built from
it stay aligned with the source even when the block contains blank lines.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..parser.matchers import ConstructMatcher
from .line_split import split_line

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockLine:
    line: int        # 0-based raw source line index
    text: str        # Trimmed content
    raw_length: int  # Length of the untrimmed line


@dataclass(frozen=True)
class Block:
    lines: Tuple[BlockLine, ...]
    end_index: Optional[int]  # Index of the closing line, None if unterminated

    @property
    def terminated(self) -> bool:
        return self.end_index is not None

    def last_consumed(self, total_lines: int) -> int:
        """Index of the last raw line belonging to the body."""
        return (self.end_index if self.end_index is not None else total_lines) - 1


def extract_block(
    lines: Sequence[str],
    open_index: int,
    end_matcher: ConstructMatcher,
) -> Block:
    """
    Parameters
    ----------
    lines:
        All raw source lines.
    open_index:
        0-based index of the opening declaration line.
    end_matcher:
        Recogniser for the closing marker (``end-ds`` / ``end-enum``).

    Returns
    -------
    Block
        Non-blank trimmed body lines in source order.
    """
    body: List[BlockLine] = []
    for index in range(open_index + 1, len(lines)):
        raw = lines[index]
        if end_matcher.test(split_line(raw).code):
            return Block(lines=tuple(body), end_index=index)
        text = raw.strip()
        if text:
            body.append(BlockLine(line=index, text=text, raw_length=len(raw)))

    logger.warning(
        "Block opened on line %d has no %s marker; consuming to end of input",
        open_index + 1,
        end_matcher.name,
    )
    return Block(lines=tuple(body), end_index=None)


class BlockExtractPass:
    """Object wrapper around :func:`extract_block` for a fixed closing marker."""

    def __init__(self, end_matcher: ConstructMatcher) -> None:
        self._end_matcher = end_matcher

    def run(self, lines: Sequence[str], open_index: int) -> Block:
        return extract_block(lines, open_index, self._end_matcher)
