"""
SymbolBuilder
=============

Turns matcher output for one line into typed symbol records.

* Top-level symbols get a range from column 0 through the length of the
  code portion of their line and the reach of the ambient
  :class:`~rpg_parser.pipeline.scope.ScopeState`.
* ``dcl-ds`` / ``dcl-enum`` declarations pull their body through
  :class:`~rpg_parser.passes.block_extract.BlockExtractPass`; each body line
  matching ``NAME VALUE;`` becomes an :class:`~rpg_parser.models.ItemDS` or
  :class:`~rpg_parser.models.ItemEnum` whose reach names the owning block.
  Members are returned right after their owner.
* To-do markers come from the comment portion and span the comment.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..models import (
    Constant,
    DataStructure,
    DeclaredFile,
    Enum,
    ItemDS,
    ItemEnum,
    Procedure,
    Range,
    RpgSymbol,
    ScopeInfo,
    Subroutine,
    ToDo,
    Variable,
)
from ..parser.matchers import (
    BLOCK_ITEM,
    CONSTANT,
    DECLARED_FILE,
    DS_CLOSE,
    DS_OPEN,
    ENUM_CLOSE,
    ENUM_OPEN,
    PROC_CLOSE,
    PROC_OPEN,
    SUBR_OPEN,
    TODO,
    VARIABLE,
    classify_file,
    extract_tab,
    has_no_body,
    is_export,
)
from ..passes.block_extract import Block, BlockExtractPass
from .scope import ScopeState


@dataclass(frozen=True)
class LineResult:
    """Symbols produced by one line and the scope that follows it."""

    symbols: Tuple[RpgSymbol, ...]
    scope: ScopeState
    consumed_to: Optional[int] = None  # Last body line taken by a block


def _group(m: re.Match, index: int) -> str:
    return (m.group(index) or "").strip()


class SymbolBuilder:
    """
    Builds symbols for the lines of one source.

    Parameters
    ----------
    lines:
        All raw source lines; block bodies are read from here.
    """

    def __init__(self, lines: Sequence[str]) -> None:
        self._lines = lines
        self._ds_body = BlockExtractPass(DS_CLOSE)
        self._enum_body = BlockExtractPass(ENUM_CLOSE)

    # ------------------------------------------------------------------
    # Per-line entry points
    # ------------------------------------------------------------------

    def declarations(self, index: int, code: str, scope: ScopeState) -> LineResult:
        """Run every declaration matcher against the code portion of a line."""
        symbols: List[RpgSymbol] = []
        consumed_to: Optional[int] = None
        length = len(code)

        m = PROC_OPEN.match(code)
        if m:
            symbols.append(self.procedure(m, index, length))
            scope = scope.open_procedure(m.group(1))
        elif PROC_CLOSE.test(code):
            scope = scope.close_procedure()

        reach = scope.reach

        m = SUBR_OPEN.match(code)
        if m:
            symbols.append(Subroutine(m.group(1), Range.for_line(index, length), reach))

        m = CONSTANT.match(code)
        if m:
            symbols.append(
                Constant(m.group(1), _group(m, 2), Range.for_line(index, length), reach)
            )

        m = VARIABLE.match(code)
        if m:
            symbols.append(self.variable(m, index, length, reach))

        m = DS_OPEN.match(code)
        if m:
            block = None if has_no_body(code) else self._ds_body.run(self._lines, index)
            symbols.extend(self.data_structure(m, index, length, reach, block))
            if block is not None:
                consumed_to = block.last_consumed(len(self._lines))

        m = ENUM_OPEN.match(code)
        if m:
            block = self._enum_body.run(self._lines, index)
            symbols.extend(self.enum(m, index, length, reach, block))
            consumed_to = block.last_consumed(len(self._lines))

        m = DECLARED_FILE.match(code)
        if m:
            options = _group(m, 2)
            symbols.append(
                DeclaredFile(
                    m.group(1),
                    classify_file(options),
                    options,
                    Range.for_line(index, length),
                    reach,
                )
            )

        return LineResult(tuple(symbols), scope, consumed_to)

    def todo(self, index: int, comment: str, reach: ScopeInfo) -> Optional[ToDo]:
        m = TODO.match(comment)
        if not m:
            return None
        return ToDo(_group(m, 1), Range.for_line(index, len(comment)), reach)

    # ------------------------------------------------------------------
    # Variant builders
    # ------------------------------------------------------------------

    @staticmethod
    def procedure(m: re.Match, index: int, length: int) -> Procedure:
        return Procedure(
            name=m.group(1),
            is_export=is_export(m.group(2) or ""),
            range=Range.for_line(index, length),
        )

    @staticmethod
    def variable(m: re.Match, index: int, length: int, reach: ScopeInfo) -> Variable:
        dcl_type = _group(m, 2).lower()
        tab = extract_tab(dcl_type)
        return Variable(
            name=m.group(1),
            dcl_type=dcl_type,
            is_tab=tab.is_tab,
            tab_dim=tab.tab_dim,
            range=Range.for_line(index, length),
            reach=reach,
        )

    @staticmethod
    def data_structure(
        m: re.Match,
        index: int,
        length: int,
        reach: ScopeInfo,
        block: Optional[Block],
    ) -> List[RpgSymbol]:
        name = m.group(1)
        options = _group(m, 2).lower()
        tab = extract_tab(options)
        items = tuple(
            ItemDS(
                name=item_name,
                dcl_type=value,
                is_tab=extract_tab(value).is_tab,
                tab_dim=extract_tab(value).tab_dim,
                range=rng,
                reach=ScopeInfo("dataStructure", name),
            )
            for item_name, value, rng in _members(block)
        )
        ds = DataStructure(
            name=name,
            options=options,
            values=items,
            is_tab=tab.is_tab,
            tab_dim=tab.tab_dim,
            range=Range.for_line(index, length),
            reach=reach,
        )
        return [ds, *items]

    @staticmethod
    def enum(
        m: re.Match,
        index: int,
        length: int,
        reach: ScopeInfo,
        block: Block,
    ) -> List[RpgSymbol]:
        name = m.group(1)
        items = tuple(
            ItemEnum(
                name=item_name,
                value=value,
                range=rng,
                reach=ScopeInfo("enum", name),
            )
            for item_name, value, rng in _members(block)
        )
        enum = Enum(
            name=name,
            options=_group(m, 2).lower(),
            values=items,
            range=Range.for_line(index, length),
            reach=reach,
        )
        return [enum, *items]


def _members(block: Optional[Block]) -> List[Tuple[str, str, Range]]:
    """``(name, value, range)`` for every body line shaped like ``NAME VALUE;``."""
    if block is None:
        return []
    found: List[Tuple[str, str, Range]] = []
    for body_line in block.lines:
        m = BLOCK_ITEM.match(body_line.text)
        if m:
            found.append(
                (
                    m.group(1),
                    _group(m, 2),
                    Range.for_line(body_line.line, body_line.raw_length),
                )
            )
    return found
