"""
SymbolLookup
============

Hover-style resolution of a name at a source position.

Preference order for symbols whose name matches (case-insensitively):

1. reach owned by the procedure enclosing the position;
2. global reach;
3. the first match in document order.

Data-structure subfields and enum members are matched too; they are owned
by their block rather than a procedure, so they fall into rule 3 unless a
global or local declaration of the same name exists.
"""
from __future__ import annotations

from typing import List, Optional

from ..models import Position, RpgDocument, RpgSymbol
from ..parser.matchers import PROC_CLOSE, PROC_OPEN
from ..passes.line_split import LineSplitPass
from ..pipeline.scanner import split_source
from ..pipeline.scope import GLOBAL
from .outline import symbol_name


class SymbolLookup:
    """
    Parameters
    ----------
    document:
        Scan result for *source_text*.
    source_text:
        The text that was scanned; used to recover procedure extents.
    """

    def __init__(self, document: RpgDocument, source_text: str) -> None:
        self.document = document
        self._owners = self._line_owners(source_text)

    @staticmethod
    def _line_owners(source_text: str) -> List[Optional[str]]:
        owners: List[Optional[str]] = []
        scope = GLOBAL
        for line in LineSplitPass().run(split_source(source_text)):
            m = PROC_OPEN.match(line.code)
            if m:
                scope = scope.open_procedure(m.group(1))
            elif PROC_CLOSE.test(line.code):
                # The end-proc line still belongs to the procedure
                owners.append(scope.procedure)
                scope = scope.close_procedure()
                continue
            owners.append(scope.procedure)
        return owners

    def enclosing_procedure(self, line: int) -> Optional[str]:
        """Name of the procedure containing *line*, or None when global."""
        if 0 <= line < len(self._owners):
            return self._owners[line]
        return None

    def find(self, name: str, position: Position) -> Optional[RpgSymbol]:
        wanted = name.casefold()
        matches = [
            s for s in self.document.symbols
            if s.kind != "toDo" and symbol_name(s).casefold() == wanted
        ]
        if not matches:
            return None

        procedure = self.enclosing_procedure(position.line)
        if procedure is not None:
            for s in matches:
                if s.reach.scope_kind == "procedure" and s.reach.owner_name == procedure:
                    return s
        for s in matches:
            if s.reach.is_global:
                return s
        return matches[0]
