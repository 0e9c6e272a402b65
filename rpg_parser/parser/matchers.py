"""
Construct matchers
==================

One independent recogniser per free-format RPG construct.  Every matcher is
line-anchored, allows leading whitespace and matches keywords
case-insensitively.  All matchers look at the *code* portion of a line
except :data:`TODO`, which looks at the *comment* portion.

+-----------------+------------------------------------+--------------------------+
| Matcher         | Trigger                            | Groups                   |
+=================+====================================+==========================+
| PROC_OPEN       | ``dcl-proc NAME [options]``        | name, options            |
+-----------------+------------------------------------+--------------------------+
| PROC_CLOSE      | ``end-proc``                       |                          |
+-----------------+------------------------------------+--------------------------+
| SUBR_OPEN       | ``begsr NAME``                     | name                     |
+-----------------+------------------------------------+--------------------------+
| SUBR_CLOSE      | ``endsr``                          |                          |
+-----------------+------------------------------------+--------------------------+
| CONSTANT        | ``dcl-c NAME [VALUE];``            | name, value              |
+-----------------+------------------------------------+--------------------------+
| VARIABLE        | ``dcl-s NAME TYPE;``               | name, type               |
+-----------------+------------------------------------+--------------------------+
| DS_OPEN         | ``dcl-ds NAME [OPTIONS];``         | name, options            |
+-----------------+------------------------------------+--------------------------+
| DS_CLOSE        | ``end-ds``                         |                          |
+-----------------+------------------------------------+--------------------------+
| ENUM_OPEN       | ``dcl-enum NAME [OPTIONS];``       | name, options            |
+-----------------+------------------------------------+--------------------------+
| ENUM_CLOSE      | ``end-enum``                       |                          |
+-----------------+------------------------------------+--------------------------+
| DECLARED_FILE   | ``dcl-f NAME [OPTIONS];``          | name, options            |
+-----------------+------------------------------------+--------------------------+
| TODO            | ``to do[:] TEXT`` (comment)        | text                     |
+-----------------+------------------------------------+--------------------------+
| CONTROL_BLOCK   | ``if elseif else select when``     |                          |
|                 | ``other for dow do``               |                          |
+-----------------+------------------------------------+--------------------------+
| BLOCK_ITEM      | ``[dcl-subf] NAME VALUE;``         | name, value              |
+-----------------+------------------------------------+--------------------------+
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional

# RPG names may also use the national characters @ # $
_NAME = r"[a-z_@#$][a-z0-9_@#$]*"
_NAME_END = r"(?![a-z0-9_@#$])"


@dataclass(frozen=True)
class ConstructMatcher:
    """A named, line-anchored pattern applied to one portion of a line."""

    name: str
    pattern: re.Pattern
    source: str = "code"  # "code" | "comment"

    def match(self, text: str) -> Optional[re.Match]:
        return self.pattern.match(text)

    def test(self, text: str) -> bool:
        return self.pattern.match(text) is not None


def _matcher(name: str, regex: str, source: str = "code") -> ConstructMatcher:
    return ConstructMatcher(name, re.compile(regex, re.IGNORECASE), source)


# ---------------------------------------------------------------------------
# Declarations and block markers
# ---------------------------------------------------------------------------

PROC_OPEN = _matcher("procedure", rf"^\s*dcl-proc\s+({_NAME}){_NAME_END}(.*)$")
PROC_CLOSE = _matcher("end-procedure", r"^\s*end-proc\b")

SUBR_OPEN = _matcher("subroutine", rf"^\s*begsr\s+({_NAME}){_NAME_END}")
SUBR_CLOSE = _matcher("end-subroutine", r"^\s*endsr\b")

CONSTANT = _matcher("constant", rf"^\s*dcl-c\s+({_NAME})(?:\s+([^;]+))?;")
VARIABLE = _matcher("variable", rf"^\s*dcl-s\s+({_NAME})\s+([^;]+);")

DS_OPEN = _matcher("dataStructure", rf"^\s*dcl-ds\s+({_NAME})(?:\s+([^;]+))?;")
DS_CLOSE = _matcher("end-dataStructure", r"^\s*end-ds\b")

ENUM_OPEN = _matcher("enum", rf"^\s*dcl-enum\s+({_NAME})(?:\s+([^;]+))?;")
ENUM_CLOSE = _matcher("end-enum", r"^\s*end-enum\b")

DECLARED_FILE = _matcher("declaredFile", rf"^\s*dcl-f\s+({_NAME})(?:\s+([^;]+))?;")

BLOCK_ITEM = _matcher("blockItem", rf"^\s*(?:dcl-subf\s+)?({_NAME})\s+([^;]+);")

# ---------------------------------------------------------------------------
# Comment markers and metrics
# ---------------------------------------------------------------------------

TODO = _matcher("toDo", r"^\s*to\s*do\s*:?(.*)$", source="comment")

CONTROL_KEYWORDS = ("if", "elseif", "else", "select", "when", "other", "for", "dow", "do")
CONTROL_BLOCK = _matcher(
    "controlBlock", r"^\s*(" + "|".join(CONTROL_KEYWORDS) + r")\b"
)

#: Every construct recogniser, keyed by name (used for introspection / tests).
MATCHERS: Dict[str, ConstructMatcher] = {
    m.name: m
    for m in (
        PROC_OPEN, PROC_CLOSE, SUBR_OPEN, SUBR_CLOSE,
        CONSTANT, VARIABLE,
        DS_OPEN, DS_CLOSE, ENUM_OPEN, ENUM_CLOSE,
        DECLARED_FILE, BLOCK_ITEM, TODO, CONTROL_BLOCK,
    )
}

# ---------------------------------------------------------------------------
# Fragment helpers
# ---------------------------------------------------------------------------

_TABDIM_RE = re.compile(r"dim\s*\(\s*([^)]+)\s*\)", re.IGNORECASE)
_NO_BODY_RE = re.compile(r"\blike(?:ds|rec)\s*\(|\bend-ds\b", re.IGNORECASE)

DISPLAY_FILE = "Display file (DSPF)"
PRINTER_FILE = "Printer file (PRTF)"
DATA_FILE = "Data file (PF/LF)"


@dataclass(frozen=True)
class TabInfo:
    is_tab: bool
    tab_dim: str


def extract_tab(text: str) -> TabInfo:
    """Find a ``dim(N)`` fragment anywhere in a type or options string."""
    m = _TABDIM_RE.search(text)
    if m:
        return TabInfo(is_tab=True, tab_dim=m.group(1).strip())
    return TabInfo(is_tab=False, tab_dim="")


def classify_file(options: str) -> str:
    """Derive a ``dcl-f`` file type from its keywords."""
    lowered = options.lower()
    if "workstn" in lowered:
        return DISPLAY_FILE
    if "printer" in lowered:
        return PRINTER_FILE
    return DATA_FILE


def is_export(options: str) -> bool:
    return "export" in options.lower()


def has_no_body(ds_declaration: str) -> bool:
    """
    True when a ``dcl-ds`` statement is complete on its own line:
    ``likeds(...)`` / ``likerec(...)`` templates and one-line ``… end-ds;``.
    """
    return _NO_BODY_RE.search(ds_declaration) is not None
