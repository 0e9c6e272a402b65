"""
report.py
=========

Render a scanned :class:`~rpg_parser.models.RpgDocument` for humans and
machines.

Outputs
-------
* **Text** – metrics block followed by one section per symbol kind.
* **JSON** – lossless: ``RpgDocument.from_dict(json.loads(s))`` rebuilds an
  equal document.
* **HTML** – standalone page with the metrics, one table per kind and the
  JSON serialisation in a ``<pre>`` block.
"""
from __future__ import annotations

import html
import json
from typing import Callable, Dict, List

from ..models import SYMBOL_KINDS, RpgDocument, RpgSymbol
from .outline import Outline, symbol_name

# ---------------------------------------------------------------------------
# Per-kind presentation
# ---------------------------------------------------------------------------

KIND_TITLES: Dict[str, str] = {
    "procedure":     "Procedures",
    "subroutine":    "Subroutines",
    "constant":      "Constants",
    "variable":      "Variables",
    "dataStructure": "Data structures",
    "itemDS":        "Data-structure subfields",
    "enum":          "Enums",
    "itemEnum":      "Enum members",
    "declaredFile":  "Declared files",
    "toDo":          "To-dos",
}


_DETAIL: Dict[str, Callable[[RpgSymbol], str]] = {
    "procedure":     lambda s: "export" if s.is_export else "",
    "subroutine":    lambda s: "",
    "constant":      lambda s: s.value,
    "variable":      lambda s: s.dcl_type,
    "dataStructure": lambda s: f"{s.options} ({len(s.values)} subfields)".strip(),
    "itemDS":        lambda s: s.dcl_type,
    "enum":          lambda s: f"{s.options} ({len(s.values)} members)".strip(),
    "itemEnum":      lambda s: s.value,
    "declaredFile":  lambda s: f"{s.file_type}: {s.file_options}",
    "toDo":          lambda s: "",
}


def symbol_detail(symbol: RpgSymbol) -> str:
    """Kind-specific one-line description of *symbol*."""
    render = _DETAIL.get(symbol.kind)
    if render is None:
        raise ValueError(f"Unknown symbol kind: {symbol.kind!r}")
    return render(symbol)


def _scope_text(symbol: RpgSymbol) -> str:
    reach = symbol.reach
    return reach.scope_kind if reach.is_global else f"{reach.scope_kind} {reach.owner_name}"


# ---------------------------------------------------------------------------
# ReportRenderer
# ---------------------------------------------------------------------------


class ReportRenderer:
    """Text / JSON / HTML renderings of one document."""

    def __init__(self, document: RpgDocument, title: str = "RPG analysis") -> None:
        self.document = document
        self.title = title

    def _sections(self) -> Dict[str, List[RpgSymbol]]:
        return {kind: list(self.document.of_kind(kind)) for kind in SYMBOL_KINDS}

    # ------------------------------------------------------------------
    # JSON
    # ------------------------------------------------------------------

    def to_json_str(self, indent: int = 2) -> str:
        return json.dumps(self.document.to_dict(), indent=indent)

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def to_text(self, outline: bool = False) -> str:
        """
        Plain-text report.

        Parameters
        ----------
        outline:
            List data-structure subfields and enum members indented under
            their owner instead of in sections of their own.
        """
        metrics = self.document.metrics
        lines = [
            f"{'═' * 60}",
            f"  {self.title}",
            f"{'═' * 60}",
            f"  Control blocks : {metrics.control_blocks}",
            f"  To-dos         : {metrics.to_dos}",
            f"  Symbols        : {len(self.document.symbols)}",
        ]

        if outline:
            groups = Outline(self.document).by_kind("declaration")
        else:
            groups = self._sections()

        for kind, symbols in groups.items():
            if not symbols:
                continue
            lines.append(f"\n{'─' * 60}\n  {KIND_TITLES[kind]} ({len(symbols)})")
            for s in symbols:
                lines.append(self._text_row(s, indent=4))
                if outline:
                    for member in Outline.members(s):
                        lines.append(self._text_row(member, indent=8))
        return "\n".join(lines)

    @staticmethod
    def _text_row(symbol: RpgSymbol, indent: int) -> str:
        line_no = symbol.range.start.line + 1
        detail = symbol_detail(symbol)
        row = f"{' ' * indent}{line_no:>5}  {symbol_name(symbol):<24} {_scope_text(symbol):<24}"
        return f"{row} {detail}".rstrip()

    # ------------------------------------------------------------------
    # HTML
    # ------------------------------------------------------------------

    def to_html(self) -> str:
        esc = html.escape
        metrics = self.document.metrics
        out = [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '<meta charset="utf-8">',
            f"<title>{esc(self.title)}</title>",
            "</head>",
            "<body>",
            f"<h1>{esc(self.title)}</h1>",
            '<ul class="metrics">',
            f"<li>Control blocks: {metrics.control_blocks}</li>",
            f"<li>To-dos: {metrics.to_dos}</li>",
            f"<li>Symbols: {len(self.document.symbols)}</li>",
            "</ul>",
        ]
        for kind, symbols in self._sections().items():
            if not symbols:
                continue
            out.append(f'<h2 id="{kind}">{esc(KIND_TITLES[kind])} ({len(symbols)})</h2>')
            out.append("<table>")
            out.append("<tr><th>Line</th><th>Name</th><th>Scope</th><th>Detail</th></tr>")
            for s in symbols:
                out.append(
                    "<tr>"
                    f"<td>{s.range.start.line + 1}</td>"
                    f"<td>{esc(symbol_name(s))}</td>"
                    f"<td>{esc(_scope_text(s))}</td>"
                    f"<td>{esc(symbol_detail(s))}</td>"
                    "</tr>"
                )
            out.append("</table>")
        out.append("<h2>JSON</h2>")
        out.append(f"<pre>{esc(self.to_json_str())}</pre>")
        out.append("</body>")
        out.append("</html>")
        return "\n".join(out)
