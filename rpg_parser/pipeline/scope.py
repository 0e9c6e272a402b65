"""
ScopeState
==========

The ambient scope while scanning: either global or inside one procedure.

Transitions::

    GLOBAL            --dcl-proc NAME-->  in_procedure(NAME)
    in_procedure(A)   --end-proc------->  GLOBAL
    in_procedure(A)   --dcl-proc B----->  in_procedure(B)   (implicit close)
    GLOBAL            --end-proc------->  GLOBAL            (no-op)

States are immutable values; the scanner threads the current one through
its line loop.  Data-structure and enum bodies never change it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..models import GLOBAL_REACH, ScopeInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScopeState:
    procedure: Optional[str] = None

    @property
    def in_procedure(self) -> bool:
        return self.procedure is not None

    @property
    def reach(self) -> ScopeInfo:
        """The reach stamped on symbols declared in this state."""
        if self.procedure is None:
            return GLOBAL_REACH
        return ScopeInfo("procedure", self.procedure)

    def open_procedure(self, name: str) -> ScopeState:
        if self.procedure is not None:
            logger.debug(
                "dcl-proc %s while %s is still open; closing %s implicitly",
                name, self.procedure, self.procedure,
            )
        return ScopeState(procedure=name)

    def close_procedure(self) -> ScopeState:
        if self.procedure is None:
            logger.debug("end-proc outside any procedure ignored")
        return GLOBAL


GLOBAL = ScopeState()
