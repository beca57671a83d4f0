"""Tests for parsing Go files into declarations and locating syntax errors."""

from __future__ import annotations

import pytest

from srcpatch.core.declarations import FuncDecl, ImportDecl, OtherDecl, TypeDecl, ValueDecl
from srcpatch.core.parser import LineIndex, parse_source
from srcpatch.errors import SourceSyntaxError
from srcpatch.models import Position

SOURCE = b"""package things

import (
\t"io"
\tfmtx "fmt"
)

// Widget does things.
// Two lines of doc.
type Widget struct{}

// not a doc comment, there is a blank line below

func New() *Widget { return nil }

func (w *Widget) Read(p []byte) (int, error) { return 0, io.EOF } // trailing

func (w Widget) String() string { return fmtx.Sprint("w") }

var (
\ta, b = 1, 2
\tc    int
)

const d = "d"
"""


class TestLineIndex:
    def test_position_and_offset_round_trip(self) -> None:
        lines = LineIndex(b"ab\ncd\n\nef")
        assert lines.line_count == 4
        assert lines.position(0) == Position(row=0, column=0)
        assert lines.position(4) == Position(row=1, column=1)
        assert lines.position(6) == Position(row=2, column=0)
        assert lines.offset(3, 1) == 8

    def test_offset_is_clamped_to_source(self) -> None:
        assert LineIndex(b"ab").offset(0, 10) == 2

    def test_out_of_range(self) -> None:
        lines = LineIndex(b"ab\n")
        with pytest.raises(IndexError):
            lines.offset(5, 0)
        with pytest.raises(IndexError):
            lines.position(10)


class TestParseSource:
    def test_package_name(self) -> None:
        parsed = parse_source("w.go", SOURCE)
        assert parsed.package_name == "things"
        assert SOURCE[: parsed.package_clause_end] == b"package things"

    def test_declarations_in_source_order(self) -> None:
        parsed = parse_source("w.go", SOURCE)
        kinds = [type(d) for d in parsed.declarations]
        assert kinds == [ImportDecl, TypeDecl, FuncDecl, FuncDecl, FuncDecl, ValueDecl, ValueDecl]

    def test_import_specs(self) -> None:
        (imp,) = parse_source("w.go", SOURCE).imports()
        assert [(s.name, s.path) for s in imp.specs] == [("", "io"), ("fmtx", "fmt")]
        assert imp.close_paren is not None
        assert SOURCE[imp.close_paren : imp.close_paren + 1] == b")"

    def test_single_line_import_has_no_paren(self) -> None:
        (imp,) = parse_source("a.go", b'package a\n\nimport _ "embed"\n').imports()
        assert imp.close_paren is None
        assert [(s.name, s.path) for s in imp.specs] == [("_", "embed")]

    def test_funcs_and_receivers(self) -> None:
        funcs = parse_source("w.go", SOURCE).funcs()
        assert [(f.receiver, f.name) for f in funcs] == [("", "New"), ("*Widget", "Read"), ("Widget", "String")]
        assert all(f.simple_receiver for f in funcs)

    def test_generic_receiver_is_not_simple(self) -> None:
        src = b"package a\n\nfunc (l *List[T]) Len() int { return 0 }\n"
        (func,) = parse_source("a.go", src).funcs()
        assert func.simple_receiver is False
        assert func.receiver not in ("", "*List", "List")

    def test_doc_comment_range(self) -> None:
        parsed = parse_source("w.go", SOURCE)
        (typ,) = parsed.types()
        assert typ.doc_start is not None
        assert SOURCE[typ.splice_start : typ.end].startswith(b"// Widget does things.\n// Two lines of doc.\ntype")

    def test_comment_separated_by_blank_line_is_not_doc(self) -> None:
        new = parse_source("w.go", SOURCE).funcs()[0]
        assert new.doc_start is None
        assert new.splice_start == new.start

    def test_trailing_comment_is_not_doc_of_next_decl(self) -> None:
        string = parse_source("w.go", SOURCE).funcs()[2]
        assert string.doc_start is None

    def test_value_groups(self) -> None:
        parsed = parse_source("w.go", SOURCE)
        assert [d.names for d in parsed.value_groups("var")] == [("a", "b", "c")]
        assert [d.names for d in parsed.value_groups("const")] == [("d",)]

    def test_grouped_types(self) -> None:
        src = b"package a\n\ntype (\n\tA int\n\tB = string\n)\n"
        (typ,) = parse_source("a.go", src).types()
        assert typ.names == ("A", "B")

    def test_statement_at_top_level_is_other_when_lenient(self) -> None:
        parsed = parse_source("a.go", b"package a\n\nx := 1\n", strict=False)
        assert any(isinstance(d, OtherDecl) for d in parsed.declarations)

    def test_escaped_import_path_keeps_utf8(self) -> None:
        src = 'package a\n\nimport "café/\\x61"\n'.encode("utf-8")
        (imp,) = parse_source("a.go", src).imports()
        assert imp.specs[0].path == "café/a"


class TestSyntaxErrors:
    def test_error_position(self) -> None:
        with pytest.raises(SourceSyntaxError) as exc_info:
            parse_source("bad.go", b"package a\n\nfunc A() {\n\treturn )\n}\n")
        err = exc_info.value
        assert err.filename == "bad.go"
        assert err.line in (3, 4)
        assert str(err).startswith(f"bad.go:{err.line}:{err.column}: ")

    @pytest.mark.parametrize("source", [b"package a\n\nx := 1\n", b"package a\n\nfmt.Println(1)\n"])
    def test_statement_at_top_level(self, source: bytes) -> None:
        with pytest.raises(SourceSyntaxError) as exc_info:
            parse_source("a.go", source)
        assert exc_info.value.line == 3
        assert exc_info.value.column == 1

    def test_invalid_utf8(self) -> None:
        with pytest.raises(SourceSyntaxError, match="UTF-8") as exc_info:
            parse_source("a.go", b'package a\n\nvar s = "\xff"\n')
        assert (exc_info.value.line, exc_info.value.column, exc_info.value.offset) == (3, 10, 20)

    def test_missing_package_clause(self) -> None:
        with pytest.raises(SourceSyntaxError, match="package"):
            parse_source("a.go", b"func A() {}\n")

    def test_shifted_clamps_line(self) -> None:
        err = SourceSyntaxError("a.go", 1, 4, 3, "boom").shifted(10, 2)
        assert (err.line, err.column, err.offset) == (1, 4, 0)
