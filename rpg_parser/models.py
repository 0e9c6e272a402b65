"""
Core data models for the RPG parser.

Every symbol variant is a frozen dataclass with a fixed ``kind`` tag, so a
scan result can be compared, hashed and shared between callers without
copying.  :data:`RpgSymbol` is the closed union of those variants.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple, Union


# ---------------------------------------------------------------------------
# Positions and ranges
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Position:
    """Zero-based (line, character) location."""

    line: int
    character: int

    def to_dict(self) -> Dict[str, Any]:
        return {"line": self.line, "character": self.character}


@dataclass(frozen=True)
class Range:
    """Start/end pair covering a single source line."""

    start: Position
    end: Position

    @classmethod
    def for_line(cls, line: int, length: int) -> Range:
        """Span column 0 through *length* on *line*."""
        return cls(Position(line, 0), Position(line, length))

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Range:
        return cls(
            Position(data["start"]["line"], data["start"]["character"]),
            Position(data["end"]["line"], data["end"]["character"]),
        )


# ---------------------------------------------------------------------------
# Scope ("reach")
# ---------------------------------------------------------------------------

SCOPE_KINDS = (
    "global",         # Outside any dcl-proc … end-proc pair
    "procedure",      # Inside a procedure body
    "dataStructure",  # Member of a dcl-ds block
    "enum",           # Member of a dcl-enum block
)


@dataclass(frozen=True)
class ScopeInfo:
    """Lexical visibility context attached to every symbol."""

    scope_kind: str = "global"
    owner_name: Optional[str] = None

    @property
    def is_global(self) -> bool:
        return self.scope_kind == "global"

    def to_dict(self) -> Dict[str, Any]:
        return {"scope_kind": self.scope_kind, "owner_name": self.owner_name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ScopeInfo:
        return cls(data["scope_kind"], data.get("owner_name"))


GLOBAL_REACH = ScopeInfo()


# ---------------------------------------------------------------------------
# Symbol variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Procedure:
    """``dcl-proc NAME [EXPORT]`` – procedures always have global reach."""

    name: str
    is_export: bool
    range: Range
    reach: ScopeInfo = GLOBAL_REACH
    kind: str = field(default="procedure", init=False)


@dataclass(frozen=True)
class Subroutine:
    """``begsr NAME``."""

    name: str
    range: Range
    reach: ScopeInfo
    kind: str = field(default="subroutine", init=False)


@dataclass(frozen=True)
class Constant:
    """``dcl-c NAME [VALUE];``."""

    name: str
    value: str
    range: Range
    reach: ScopeInfo
    kind: str = field(default="constant", init=False)


@dataclass(frozen=True)
class Variable:
    """``dcl-s NAME TYPE;``."""

    name: str
    dcl_type: str
    is_tab: bool
    tab_dim: str
    range: Range
    reach: ScopeInfo
    kind: str = field(default="variable", init=False)


@dataclass(frozen=True)
class ItemDS:
    """A subfield line inside a ``dcl-ds`` body."""

    name: str
    dcl_type: str
    is_tab: bool
    tab_dim: str
    range: Range
    reach: ScopeInfo
    kind: str = field(default="itemDS", init=False)


@dataclass(frozen=True)
class DataStructure:
    """``dcl-ds NAME [OPTIONS];`` with the subfields found in its body."""

    name: str
    options: str
    values: Tuple[ItemDS, ...]
    is_tab: bool
    tab_dim: str
    range: Range
    reach: ScopeInfo
    kind: str = field(default="dataStructure", init=False)


@dataclass(frozen=True)
class ItemEnum:
    """A ``NAME VALUE;`` line inside a ``dcl-enum`` body."""

    name: str
    value: str
    range: Range
    reach: ScopeInfo
    kind: str = field(default="itemEnum", init=False)


@dataclass(frozen=True)
class Enum:
    """``dcl-enum NAME [OPTIONS];`` with its members."""

    name: str
    options: str
    values: Tuple[ItemEnum, ...]
    range: Range
    reach: ScopeInfo
    kind: str = field(default="enum", init=False)


@dataclass(frozen=True)
class DeclaredFile:
    """``dcl-f NAME [OPTIONS];``."""

    name: str
    file_type: str
    file_options: str
    range: Range
    reach: ScopeInfo
    kind: str = field(default="declaredFile", init=False)


@dataclass(frozen=True)
class ToDo:
    """A ``// TODO: …`` marker found in a line comment."""

    text: str
    range: Range
    reach: ScopeInfo
    kind: str = field(default="toDo", init=False)


RpgSymbol = Union[
    Procedure,
    Subroutine,
    Constant,
    Variable,
    DataStructure,
    ItemDS,
    Enum,
    ItemEnum,
    DeclaredFile,
    ToDo,
]

_SYMBOL_CLASSES = (
    Procedure,
    Subroutine,
    Constant,
    Variable,
    DataStructure,
    ItemDS,
    Enum,
    ItemEnum,
    DeclaredFile,
    ToDo,
)

#: Kind tag → variant class, in declaration order.
SYMBOL_TYPES: Dict[str, type] = {
    cls.__dataclass_fields__["kind"].default: cls for cls in _SYMBOL_CLASSES
}
SYMBOL_KINDS: Tuple[str, ...] = tuple(SYMBOL_TYPES)

#: Kinds that own member items (``values``).
COMPOSITE_KINDS = ("dataStructure", "enum")
MEMBER_KINDS = ("itemDS", "itemEnum")


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------


def symbol_to_dict(symbol: RpgSymbol) -> Dict[str, Any]:
    """Serialise any symbol variant to a JSON-compatible dict."""
    data: Dict[str, Any] = {"kind": symbol.kind}
    for name in symbol.__dataclass_fields__:
        if name == "kind":
            continue
        value = getattr(symbol, name)
        if name == "values":
            data[name] = [symbol_to_dict(v) for v in value]
        elif isinstance(value, (Range, ScopeInfo)):
            data[name] = value.to_dict()
        else:
            data[name] = value
    return data


def symbol_from_dict(data: Dict[str, Any]) -> RpgSymbol:
    """Inverse of :func:`symbol_to_dict`.

    Raises
    ------
    ValueError
        When ``data["kind"]`` is not a known symbol kind.
    """
    kind = data.get("kind")
    cls = SYMBOL_TYPES.get(kind)  # type: ignore[arg-type]
    if cls is None:
        raise ValueError(f"Unknown symbol kind: {kind!r}")

    kwargs: Dict[str, Any] = {}
    for name, f in cls.__dataclass_fields__.items():
        if not f.init:
            continue
        value = data[name]
        if name == "range":
            value = Range.from_dict(value)
        elif name == "reach":
            value = ScopeInfo.from_dict(value)
        elif name == "values":
            value = tuple(symbol_from_dict(v) for v in value)
        kwargs[name] = value
    return cls(**kwargs)


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Metrics:
    control_blocks: int
    to_dos: int

    def to_dict(self) -> Dict[str, Any]:
        return {"control_blocks": self.control_blocks, "to_dos": self.to_dos}


@dataclass(frozen=True)
class RpgDocument:
    """
    Result of one scan.

    ``symbols`` is ordered by source line, with the member items of a data
    structure or enum placed right after their owner.  The to-do count in
    :attr:`metrics` is always derived from ``symbols``.
    """

    symbols: Tuple[RpgSymbol, ...] = ()
    control_blocks: int = 0

    @property
    def metrics(self) -> Metrics:
        to_dos = sum(1 for s in self.symbols if s.kind == "toDo")
        return Metrics(control_blocks=self.control_blocks, to_dos=to_dos)

    def of_kind(self, kind: str) -> Tuple[RpgSymbol, ...]:
        return tuple(s for s in self.symbols if s.kind == kind)

    def __repr__(self) -> str:
        return (
            f"RpgDocument(symbols={len(self.symbols)}, "
            f"metrics={self.metrics.to_dict()})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbols": [symbol_to_dict(s) for s in self.symbols],
            "metrics": self.metrics.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RpgDocument:
        return cls(
            symbols=tuple(symbol_from_dict(s) for s in data["symbols"]),
            control_blocks=data["metrics"]["control_blocks"],
        )

    @classmethod
    def assemble(cls, symbols: Iterable[RpgSymbol], control_blocks: int) -> RpgDocument:
        return cls(symbols=tuple(symbols), control_blocks=control_blocks)
