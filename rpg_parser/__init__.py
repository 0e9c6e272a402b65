"""
RPG Parser
==========

A single-pass scanner for free-format RPG IV / ILE RPG source that builds a
symbol table annotated with lexical scope: which declarations are global
and which belong to a procedure, data structure or enum.

Quick start
-----------
>>> from rpg_parser import scan
>>> doc = scan("dcl-s counter int(10);")
>>> [(s.kind, s.name) for s in doc.symbols]
[('variable', 'counter')]
>>> doc.metrics.to_dos
0
"""

from .models import (
    Constant,
    DataStructure,
    DeclaredFile,
    Enum,
    ItemDS,
    ItemEnum,
    Metrics,
    Position,
    Procedure,
    Range,
    RpgDocument,
    RpgSymbol,
    ScopeInfo,
    Subroutine,
    ToDo,
    Variable,
)
from .pipeline.scanner import RpgScanner, scan
from .pipeline.cache import DocumentCache
from .output.outline import Outline
from .output.lookup import SymbolLookup
from .output.report import ReportRenderer

__version__ = "0.1.0"
__all__ = [
    "Constant",
    "DataStructure",
    "DeclaredFile",
    "Enum",
    "ItemDS",
    "ItemEnum",
    "Metrics",
    "Position",
    "Procedure",
    "Range",
    "RpgDocument",
    "RpgSymbol",
    "ScopeInfo",
    "Subroutine",
    "ToDo",
    "Variable",
    "scan",
    "RpgScanner",
    "DocumentCache",
    "Outline",
    "SymbolLookup",
    "ReportRenderer",
]
