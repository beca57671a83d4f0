"""Tests for decomposing headerless snippets into transforms."""

from __future__ import annotations

import pytest

from srcpatch.core.snippet import parse_transforms
from srcpatch.errors import SnippetParseError, SourceSyntaxError, UnsupportedConstructError
from srcpatch.models import (
    AddConstTransform,
    AddFuncTransform,
    AddTypeTransform,
    AddVarTransform,
    ImportTransform,
)


def test_imports() -> None:
    trs = parse_transforms("a.go", 'import "io"\nimport "os"\n')
    assert trs == [
        ImportTransform(filename="a.go", path="io"),
        ImportTransform(filename="a.go", path="os"),
    ]


def test_import_block() -> None:
    trs = parse_transforms("a.go", 'import (\n\t"io"\n\t"os"\n)\n')
    assert [t.path for t in trs] == ["io", "os"]


def test_import_local_name() -> None:
    (tr,) = parse_transforms("a.go", 'import _ "embed"\n')
    assert tr == ImportTransform(filename="a.go", name="_", path="embed")


def test_func_with_doc_comment() -> None:
    snippet = "// init does the thing\nfunc init() {}\n"
    (tr,) = parse_transforms("a.go", snippet)
    assert tr == AddFuncTransform(filename="a.go", name="init", text="// init does the thing\nfunc init() {}")


def test_func_receiver_value() -> None:
    (tr,) = parse_transforms("a.go", "func (a A) String() string { return \"\" }\n")
    assert isinstance(tr, AddFuncTransform)
    assert (tr.receiver_type, tr.name) == ("A", "String")


def test_func_receiver_pointer() -> None:
    (tr,) = parse_transforms("a.go", "func (a *A) Reset() { *a = A{} }\n")
    assert isinstance(tr, AddFuncTransform)
    assert tr.receiver_type == "*A"


def test_var_const_type() -> None:
    snippet = (
        "var (\n\tx = 1\n\ty = 2\n)\n\n"
        "// w is a var\nvar w = 3\n\n"
        "const (\n\tz = 1\n\ta = 2\n)\n\n"
        "type t struct{}\n"
    )
    trs = parse_transforms("a.go", snippet)
    assert trs == [
        AddVarTransform(filename="a.go", name_list=["x", "y"], text="var (\n\tx = 1\n\ty = 2\n)"),
        AddVarTransform(filename="a.go", name_list=["w"], text="// w is a var\nvar w = 3"),
        AddConstTransform(filename="a.go", name_list=["z", "a"], text="const (\n\tz = 1\n\ta = 2\n)"),
        AddTypeTransform(filename="a.go", name="t", text="type t struct{}"),
    ]


def test_every_transform_targets_filename() -> None:
    trs = parse_transforms("target.go", 'import "io"\nfunc F() {}\nvar v int\n')
    assert {t.filename for t in trs} == {"target.go"}


def test_syntax_error_position_is_relative_to_snippet() -> None:
    with pytest.raises(SourceSyntaxError) as exc_info:
        parse_transforms("parse_err.go", 'import "example123\n')
    assert exc_info.value.filename == "parse_err.go"
    assert exc_info.value.line == 1


def test_type_group_is_rejected() -> None:
    with pytest.raises(SnippetParseError, match="exactly 1"):
        parse_transforms("a.go", "type (\n\tA int\n\tB int\n)\n")


def test_unsupported_receiver() -> None:
    with pytest.raises(SnippetParseError, match="receiver"):
        parse_transforms("a.go", "func (l List[T]) Len() int { return 0 }\n")


def test_package_clause_is_rejected() -> None:
    with pytest.raises(UnsupportedConstructError):
        parse_transforms("a.go", "package other\n\nfunc F() {}\n")


def test_statement_is_rejected() -> None:
    with pytest.raises(UnsupportedConstructError):
        parse_transforms("a.go", "x := 1\n")
