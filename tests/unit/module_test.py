from __future__ import annotations

from pathlib import Path

import pytest

from srcpatch.core.module import find_module_dir, find_working_module, read_module_path
from srcpatch.errors import SrcPatchError
from srcpatch.fs import DirFS, MemoryFS


def _fs(go_mod: str) -> MemoryFS:
    fs = MemoryFS()
    fs.makedirs("proj/a/b")
    fs.write_file("proj/go.mod", go_mod.encode())
    return fs


def test_find_module_dir_walks_up() -> None:
    fs = _fs("module example.com/proj\n")

    assert find_module_dir(fs, "proj/a/b") == "proj"
    assert find_module_dir(fs, "proj") == "proj"


def test_find_module_dir_without_go_mod() -> None:
    fs = MemoryFS()
    fs.makedirs("x/y")

    with pytest.raises(SrcPatchError, match="go.mod"):
        find_module_dir(fs, "x/y")


def test_find_module_dir_missing_start() -> None:
    with pytest.raises(SrcPatchError, match="failed to open dir"):
        find_module_dir(MemoryFS(), "nope")


@pytest.mark.parametrize(
    "go_mod",
    [
        "module example.com/proj\n\ngo 1.21\n",
        '// comment\nmodule "example.com/proj"\n',
        "module `example.com/proj` // trailing\n",
    ],
)
def test_read_module_path(go_mod: str) -> None:
    assert read_module_path(_fs(go_mod), "proj") == "example.com/proj"


def test_read_module_path_without_directive() -> None:
    with pytest.raises(SrcPatchError, match="no module directive"):
        read_module_path(_fs("go 1.21\n"), "proj")


def test_find_working_module(go_module: Path) -> None:
    module = find_working_module("things", cwd=go_module)

    assert module.root == go_module.resolve()
    assert module.package_dir == "things"
    assert module.module_path == "example.com/things"
    assert DirFS(module.root).list_files(module.package_dir) == ["widget.go"]


def test_find_working_module_from_package_dir(go_module: Path) -> None:
    module = find_working_module(".", cwd=go_module / "things")

    assert module.package_dir == "things"


def test_find_working_module_outside_module(go_module: Path) -> None:
    with pytest.raises(SrcPatchError, match="outside of module"):
        find_working_module("..", cwd=go_module)
