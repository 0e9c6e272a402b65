"""
LineSplitPass
=============

Splits each free-format RPG source line into its *code* portion and its
trailing ``//`` line comment.

Quote handling:
  * ``'`` and ``"`` each toggle their own flag, but only while the *other*
    flag is clear, so ``"`` inside ``'...'`` is inert and vice versa.
  * A ``//`` seen while inside either kind of literal is part of the
    literal, not a comment start.

The marker itself belongs to neither portion.  A line without a comment
yields its full text as ``code`` and ``""`` as ``comment``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

COMMENT_MARKER = "//"


@dataclass(frozen=True)
class SplitLine:
    code: str
    comment: str


def split_line(line: str) -> SplitLine:
    """Split one raw line at the first unquoted ``//``."""
    in_single = False
    in_double = False

    for i, ch in enumerate(line):
        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif (
            not in_single
            and not in_double
            and line.startswith(COMMENT_MARKER, i)
        ):
            return SplitLine(code=line[:i], comment=line[i + len(COMMENT_MARKER):])

    return SplitLine(code=line, comment="")


class LineSplitPass:
    """Applies :func:`split_line` to every line of a source."""

    def run(self, lines: List[str]) -> List[SplitLine]:
        """
        Parameters
        ----------
        lines:
            Raw source lines (line terminators already removed).

        Returns
        -------
        List[SplitLine]
            One entry per input line; no lines are dropped.
        """
        return [split_line(line) for line in lines]
