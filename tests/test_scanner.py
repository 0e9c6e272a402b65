"""
Tests for the scanner: scope tracking, symbol building, block bodies and
metrics, driven through :func:`rpg_parser.scan` on small inline sources.
"""
from __future__ import annotations

import textwrap

import pytest

from rpg_parser import scan
from rpg_parser.models import (
    DataStructure,
    Enum,
    ItemDS,
    ItemEnum,
    Position,
    Range,
    ScopeInfo,
    ToDo,
    Variable,
)
from rpg_parser.pipeline.scanner import split_source
from rpg_parser.pipeline.scope import GLOBAL, ScopeState


def _src(text: str) -> str:
    return textwrap.dedent(text).strip("\n")


def _names(doc, kind=None):
    return [s.name for s in doc.symbols if kind is None or s.kind == kind]


# ─────────────────────────────────────────────────────────────────────────────
# ScopeState
# ─────────────────────────────────────────────────────────────────────────────


class TestScopeState:
    def test_global_reach(self):
        assert GLOBAL.reach == ScopeInfo("global", None)
        assert not GLOBAL.in_procedure

    def test_open_and_close(self):
        state = GLOBAL.open_procedure("calc")
        assert state.reach == ScopeInfo("procedure", "calc")
        assert state.close_procedure() == GLOBAL

    def test_transitions_return_new_values(self):
        state = GLOBAL.open_procedure("calc")
        assert GLOBAL.procedure is None
        assert state is not GLOBAL

    def test_nested_open_replaces(self):
        state = GLOBAL.open_procedure("a").open_procedure("b")
        assert state == ScopeState("b")

    def test_close_when_global_is_noop(self):
        assert GLOBAL.close_procedure() == GLOBAL


# ─────────────────────────────────────────────────────────────────────────────
# Line handling
# ─────────────────────────────────────────────────────────────────────────────


class TestSplitSource:
    def test_lf(self):
        assert split_source("a\nb") == ["a", "b"]

    def test_crlf(self):
        assert split_source("a\r\nb\r\n") == ["a", "b", ""]

    def test_empty(self):
        assert split_source("") == [""]


class TestEmptyInput:
    def test_empty_text(self):
        doc = scan("")
        assert doc.symbols == ()
        assert doc.metrics.control_blocks == 0
        assert doc.metrics.to_dos == 0

    def test_unrecognised_lines_ignored(self):
        doc = scan("ctl-opt main(x);\n*inlr = *on;\nreturn;")
        assert doc.symbols == ()


# ─────────────────────────────────────────────────────────────────────────────
# Scope ("reach")
# ─────────────────────────────────────────────────────────────────────────────


class TestReach:
    SOURCE = _src("""
        dcl-s gFlag ind;
        dcl-proc first;
          dcl-s local1 int(10);
          begsr cleanup;
          endsr;
        end-proc;
        dcl-c AFTER 1;
        dcl-proc second export;
          dcl-c LOCAL2 'x';
        end-proc;
    """)

    @pytest.fixture
    def doc(self):
        return scan(self.SOURCE)

    def _by_name(self, doc, name):
        return next(s for s in doc.symbols if getattr(s, "name", None) == name)

    def test_global_before_procedures(self, doc):
        assert self._by_name(doc, "gFlag").reach == ScopeInfo("global", None)

    def test_locals_owned_by_procedure(self, doc):
        assert self._by_name(doc, "local1").reach == ScopeInfo("procedure", "first")
        assert self._by_name(doc, "cleanup").reach == ScopeInfo("procedure", "first")
        assert self._by_name(doc, "LOCAL2").reach == ScopeInfo("procedure", "second")

    def test_global_again_after_end_proc(self, doc):
        assert self._by_name(doc, "AFTER").reach.is_global

    def test_procedures_are_global(self, doc):
        for proc in doc.of_kind("procedure"):
            assert proc.reach.is_global

    def test_export_flag(self, doc):
        assert self._by_name(doc, "first").is_export is False
        assert self._by_name(doc, "second").is_export is True

    def test_nested_dcl_proc_resets_scope(self):
        doc = scan(_src("""
            dcl-proc outer;
              dcl-s a int(10);
            dcl-proc inner;
              dcl-s b int(10);
            end-proc;
            dcl-s c int(10);
        """))
        assert _names(doc, "procedure") == ["outer", "inner"]
        reaches = {s.name: s.reach for s in doc.of_kind("variable")}
        assert reaches["a"] == ScopeInfo("procedure", "outer")
        assert reaches["b"] == ScopeInfo("procedure", "inner")
        assert reaches["c"].is_global

    def test_stray_end_proc_keeps_global(self):
        doc = scan("end-proc;\ndcl-s x int(10);")
        assert doc.symbols[0].reach.is_global


# ─────────────────────────────────────────────────────────────────────────────
# Symbol building
# ─────────────────────────────────────────────────────────────────────────────


class TestSymbolFields:
    def test_variable_fields(self):
        doc = scan("dcl-s Totals Packed(7:2) DIM(10);")
        var = doc.symbols[0]
        assert isinstance(var, Variable)
        assert var.name == "Totals"
        assert var.dcl_type == "packed(7:2) dim(10)"
        assert var.is_tab is True
        assert var.tab_dim == "10"

    def test_scalar_variable_not_tab(self):
        var = scan("dcl-s n int(10);").symbols[0]
        assert var.is_tab is False
        assert var.tab_dim == ""

    def test_constant_value_trimmed(self):
        const = scan("dcl-c PI   3.14159  ;").symbols[0]
        assert const.value == "3.14159"

    def test_constant_default_empty(self):
        assert scan("dcl-c NOTHING;").symbols[0].value == ""

    def test_constant_with_slashes_in_literal(self):
        const = scan("dcl-c URL 'http://x//y';").symbols[0]
        assert const.value == "'http://x//y'"
        assert scan("dcl-c URL 'http://x//y';").metrics.to_dos == 0

    def test_declared_file_types(self):
        doc = scan(_src("""
            dcl-f CUSTPF keyed;
            dcl-f SCREEN workstn;
            dcl-f PRINT printer;
        """))
        types = {f.name: f.file_type for f in doc.of_kind("declaredFile")}
        assert types == {
            "CUSTPF": "Data file (PF/LF)",
            "SCREEN": "Display file (DSPF)",
            "PRINT": "Printer file (PRTF)",
        }
        assert doc.symbols[1].file_options == "workstn"

    def test_range_spans_code_portion(self):
        line = "dcl-s x int(10); // note"
        var = scan(line).symbols[0]
        assert var.range == Range(Position(0, 0), Position(0, len("dcl-s x int(10); ")))

    def test_todo_range_spans_comment(self):
        doc = scan("x = 1; // TODO: later")
        todo = doc.symbols[0]
        assert isinstance(todo, ToDo)
        assert todo.text == "later"
        assert todo.range == Range.for_line(0, len(" TODO: later"))

    def test_variable_and_todo_on_same_line(self):
        doc = scan("dcl-s x int(10); // to do rename")
        assert [s.kind for s in doc.symbols] == ["variable", "toDo"]

    def test_todo_on_procedure_line(self):
        doc = scan("dcl-proc p; // TODO split\nend-proc;")
        assert [s.kind for s in doc.symbols] == ["procedure", "toDo"]
        assert doc.symbols[1].reach == ScopeInfo("procedure", "p")

    def test_commented_out_declaration_ignored(self):
        assert scan("// dcl-s old int(10);").symbols == ()

    def test_kind_is_fixed(self):
        with pytest.raises(TypeError):
            Variable("x", "int(10)", False, "", Range.for_line(0, 1), ScopeInfo(), kind="constant")


# ─────────────────────────────────────────────────────────────────────────────
# Data structures and enums
# ─────────────────────────────────────────────────────────────────────────────


class TestBlocks:
    def test_ds_members_follow_owner(self):
        doc = scan(_src("""
            dcl-ds order qualified;
              id int(10);
              lines char(20) dim(5);
            end-ds;
            dcl-s after int(10);
        """))
        assert [s.kind for s in doc.symbols] == ["dataStructure", "itemDS", "itemDS", "variable"]
        ds = doc.symbols[0]
        assert isinstance(ds, DataStructure)
        assert ds.options == "qualified"
        assert [i.name for i in ds.values] == ["id", "lines"]
        assert ds.values == doc.symbols[1:3]

    def test_ds_member_fields_and_reach(self):
        doc = scan("dcl-ds order;\n  lines char(20) dim(5);\nend-ds;")
        item = doc.symbols[1]
        assert isinstance(item, ItemDS)
        assert item.dcl_type == "char(20) dim(5)"
        assert item.is_tab and item.tab_dim == "5"
        assert item.reach == ScopeInfo("dataStructure", "order")

    def test_ds_dim_in_options(self):
        ds = scan("dcl-ds rows dim(100) qualified;\n  a int(10);\nend-ds;").symbols[0]
        assert ds.is_tab is True
        assert ds.tab_dim == "100"

    def test_dcl_subf_member(self):
        doc = scan("dcl-ds d;\n  dcl-subf select char(1);\nend-ds;")
        assert _names(doc, "itemDS") == ["select"]

    def test_enum_members(self):
        doc = scan(_src("""
            dcl-enum colors qualified;
              RED 1;
              GREEN 2;
            end-enum;
        """))
        enum = doc.symbols[0]
        assert isinstance(enum, Enum)
        assert enum.options == "qualified"
        assert [(m.name, m.value) for m in enum.values] == [("RED", "1"), ("GREEN", "2")]
        assert all(isinstance(m, ItemEnum) for m in doc.symbols[1:])
        assert doc.symbols[1].reach == ScopeInfo("enum", "colors")

    def test_block_inside_procedure(self):
        doc = scan(_src("""
            dcl-proc p;
              dcl-ds work;
                n int(10);
              end-ds;
            end-proc;
        """))
        ds, item = doc.symbols[1], doc.symbols[2]
        assert ds.reach == ScopeInfo("procedure", "p")
        assert item.reach == ScopeInfo("dataStructure", "work")

    def test_member_ranges_use_source_lines(self):
        source = "dcl-ds d;\n\n  a int(10);\n\n\n  b char(1);\nend-ds;"
        doc = scan(source)
        a, b = doc.symbols[0].values
        assert a.range.start.line == 2
        assert b.range.start.line == 5
        assert b.range == Range.for_line(5, len("  b char(1);"))

    def test_unterminated_ds_consumes_rest(self):
        doc = scan(_src("""
            dcl-ds open;
              a int(10);
              b char(1);

              c ind;
        """))
        ds = doc.of_kind("dataStructure")
        assert len(ds) == 1
        assert [i.name for i in ds[0].values] == ["a", "b", "c"]
        assert ds[0].values[-1].range.start.line == 4

    def test_body_lines_not_rescanned(self):
        doc = scan(_src("""
            dcl-ds broken;
              a int(10);
              dcl-s notTopLevel int(10);
              dcl-c ALSO_NOT 1;
        """))
        assert doc.of_kind("variable") == ()
        assert doc.of_kind("constant") == ()

    def test_declaration_after_closing_marker_ignored(self):
        doc = scan("dcl-ds d;\n  a int(10);\nend-ds; dcl-s x int(10);")
        # end-ds anchors the line, so nothing else on it is a declaration
        assert _names(doc, "variable") == []

    def test_todo_inside_body_kept(self):
        doc = scan(_src("""
            dcl-ds d;
              a int(10); // TODO widen
            end-ds;
        """))
        assert [s.kind for s in doc.symbols] == ["dataStructure", "itemDS", "toDo"]
        assert doc.symbols[2].reach.is_global

    def test_likeds_has_no_body(self):
        doc = scan(_src("""
            dcl-ds copy likeds(order);
            dcl-s after int(10);
        """))
        ds = doc.symbols[0]
        assert ds.values == ()
        assert _names(doc, "variable") == ["after"]

    def test_enum_then_ds(self):
        doc = scan(_src("""
            dcl-enum e;
              A 1;
            end-enum;
            dcl-ds d;
              x int(10);
            end-ds;
        """))
        assert [s.kind for s in doc.symbols] == ["enum", "itemEnum", "dataStructure", "itemDS"]


# ─────────────────────────────────────────────────────────────────────────────
# Metrics
# ─────────────────────────────────────────────────────────────────────────────


class TestMetrics:
    def test_control_blocks(self):
        doc = scan(_src("""
            if a;
            endif;
            if b;
            endif;
            if c;
            endif;
            for i = 1 to 3;
            endfor;
        """))
        assert doc.metrics.control_blocks == 4

    def test_control_block_in_comment_not_counted(self):
        assert scan("// if a;").metrics.control_blocks == 0

    def test_control_blocks_counted_inside_block_body(self):
        doc = scan("dcl-ds d;\nif x;")
        assert doc.metrics.control_blocks == 1

    def test_todo_count_matches_symbols(self):
        doc = scan("// TODO one\nx = 1; // todo: two\n// not a marker")
        assert doc.metrics.to_dos == 2
        assert doc.metrics.to_dos == len(doc.of_kind("toDo"))


# ─────────────────────────────────────────────────────────────────────────────
# Whole-document properties
# ─────────────────────────────────────────────────────────────────────────────


class TestDocumentProperties:
    SOURCE = _src("""
        dcl-f F1 keyed;
        dcl-proc p;
          dcl-ds d;
            a int(10);

            b int(10);
          end-ds;
          dcl-s v int(10); // TODO v
        end-proc;
        dcl-enum e;
          X 1;
        end-enum;
    """)

    def test_idempotent(self):
        assert scan(self.SOURCE) == scan(self.SOURCE)

    def test_crlf_equivalent_to_lf(self):
        assert scan(self.SOURCE.replace("\n", "\r\n")) == scan(self.SOURCE)

    def test_top_level_order_by_line(self):
        doc = scan(self.SOURCE)
        lines = [s.range.start.line for s in doc.symbols if s.kind not in ("itemDS", "itemEnum")]
        assert lines == sorted(lines)

    def test_members_directly_after_owner(self):
        doc = scan(self.SOURCE)
        for i, s in enumerate(doc.symbols):
            if s.kind in ("dataStructure", "enum"):
                n = len(s.values)
                assert doc.symbols[i + 1:i + 1 + n] == s.values

    def test_document_is_immutable(self):
        doc = scan(self.SOURCE)
        assert isinstance(doc.symbols, tuple)
        with pytest.raises(AttributeError):
            doc.symbols[0].name = "other"
