"""
Outline
=======

Navigator view over a scanned :class:`~rpg_parser.models.RpgDocument`.

* :meth:`Outline.by_kind` groups the top-level symbols by kind, in
  declaration order or by name.  Member items are reached through
  :meth:`Outline.members` of their data structure / enum.
* :meth:`Outline.scope_graph` builds the scope containment tree as a
  ``networkx.DiGraph``::

      <global> ──► procedure ──► variable / constant / subroutine / …
               ──► dataStructure ──► itemDS
               ──► enum ──► itemEnum
               ──► (global declarations)

  Node ids are ``"<kind>:<name>@<line>"``; every node carries ``kind``,
  ``name``, ``line`` and ``symbol`` attributes (the root has kind
  ``"root"``).
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import networkx as nx

from ..models import (
    COMPOSITE_KINDS,
    MEMBER_KINDS,
    SYMBOL_KINDS,
    DataStructure,
    Enum,
    RpgDocument,
    RpgSymbol,
)

logger = logging.getLogger(__name__)

ROOT_NODE = "<global>"
ORDERS = ("declaration", "name")


def symbol_name(symbol: RpgSymbol) -> str:
    """Display name of any symbol; to-dos are named by their text."""
    if symbol.kind == "toDo":
        return symbol.text  # type: ignore[union-attr]
    if symbol.kind in SYMBOL_KINDS:
        return symbol.name  # type: ignore[union-attr]
    raise ValueError(f"Unknown symbol kind: {symbol.kind!r}")


def node_id(symbol: RpgSymbol) -> str:
    return f"{symbol.kind}:{symbol_name(symbol)}@{symbol.range.start.line}"


class Outline:
    """
    Parameters
    ----------
    document:
        The scan result to present.
    """

    def __init__(self, document: RpgDocument) -> None:
        self.document = document
        self._graph: Optional[nx.DiGraph] = None

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def top_level(self) -> List[RpgSymbol]:
        return [s for s in self.document.symbols if s.kind not in MEMBER_KINDS]

    def by_kind(self, order: str = "declaration") -> Dict[str, List[RpgSymbol]]:
        """
        Group top-level symbols by kind.

        Parameters
        ----------
        order:
            ``"declaration"`` keeps scan order; ``"name"`` sorts
            case-insensitively by name, ties broken by line.

        Returns
        -------
        Dict[str, List[RpgSymbol]]
            One (possibly empty) list per top-level kind, in the fixed
            :data:`~rpg_parser.models.SYMBOL_KINDS` order.
        """
        if order not in ORDERS:
            raise ValueError(f"Unknown order {order!r}; expected one of {ORDERS}")

        groups: Dict[str, List[RpgSymbol]] = {
            kind: [] for kind in SYMBOL_KINDS if kind not in MEMBER_KINDS
        }
        for symbol in self.top_level():
            groups[symbol.kind].append(symbol)

        if order == "name":
            for symbols in groups.values():
                symbols.sort(
                    key=lambda s: (symbol_name(s).casefold(), s.range.start.line)
                )
        return groups

    @staticmethod
    def members(composite: RpgSymbol) -> Tuple[RpgSymbol, ...]:
        """Member items of a data structure or enum (empty for other kinds)."""
        if isinstance(composite, (DataStructure, Enum)):
            return composite.values
        return ()

    # ------------------------------------------------------------------
    # Scope graph
    # ------------------------------------------------------------------

    def scope_graph(self) -> nx.DiGraph:
        """Containment tree rooted at :data:`ROOT_NODE` (built once, cached)."""
        if self._graph is not None:
            return self._graph

        g = nx.DiGraph()
        g.add_node(ROOT_NODE, kind="root", name=ROOT_NODE, line=-1, symbol=None)
        procedures: Dict[str, str] = {}  # name → node id of latest declaration

        for symbol in self.top_level():
            nid = node_id(symbol)
            g.add_node(
                nid,
                kind=symbol.kind,
                name=symbol_name(symbol),
                line=symbol.range.start.line,
                symbol=symbol,
            )
            parent = ROOT_NODE
            if symbol.reach.scope_kind == "procedure":
                parent = procedures.get(symbol.reach.owner_name or "", ROOT_NODE)
                if parent == ROOT_NODE:
                    logger.debug("No procedure node for %s; attaching to root", nid)
            g.add_edge(parent, nid)

            if symbol.kind == "procedure":
                procedures[symbol.name] = nid  # type: ignore[union-attr]
            if symbol.kind in COMPOSITE_KINDS:
                for member in self.members(symbol):
                    mid = node_id(member)
                    g.add_node(
                        mid,
                        kind=member.kind,
                        name=symbol_name(member),
                        line=member.range.start.line,
                        symbol=member,
                    )
                    g.add_edge(nid, mid)

        self._graph = g
        return g

    def symbols_in_scope(self, owner: str = ROOT_NODE) -> List[RpgSymbol]:
        """
        Every symbol contained (transitively) in *owner*, in line order.

        *owner* is a procedure, data-structure or enum name, or
        :data:`ROOT_NODE`.  Unknown owners yield an empty list.
        """
        g = self.scope_graph()
        if owner == ROOT_NODE:
            start = ROOT_NODE
        else:
            candidates = [
                n for n, attrs in g.nodes(data=True)
                if attrs["name"] == owner and attrs["kind"] in ("procedure", *COMPOSITE_KINDS)
            ]
            if not candidates:
                return []
            start = candidates[-1]

        found = [g.nodes[n]["symbol"] for n in nx.descendants(g, start)]
        return sorted(found, key=lambda s: (s.range.start.line, s.range.start.character))
