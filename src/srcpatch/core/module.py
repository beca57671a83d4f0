import posixpath
import re
from dataclasses import dataclass
from pathlib import Path

from srcpatch.core.ports.filesystem import ReadableFS
from srcpatch.errors import SrcPatchError
from srcpatch.fs.dir import DirFS
from srcpatch.fs.paths import clean_path

_MODULE_RE = re.compile(r"""^\s*module\s+(?:"([^"]+)"|`([^`]+)`|(\S+))""", re.MULTILINE)


@dataclass(frozen=True)
class WorkingModule:
    root: Path
    package_dir: str
    module_path: str


def find_module_dir(fs: ReadableFS, start_dir: str) -> str:
    """Walk up from *start_dir* to the first directory holding a go.mod file."""
    directory = clean_path(start_dir)
    while True:
        if not fs.is_dir(directory):
            raise SrcPatchError(f"failed to open dir {directory!r}")
        if "go.mod" in fs.list_files(directory):
            return directory
        if directory == ".":
            raise SrcPatchError(f"unable to find go.mod at or above {start_dir!r}")
        directory = posixpath.dirname(directory) or "."


def read_module_path(fs: ReadableFS, module_dir: str) -> str:
    content = fs.read_bytes(posixpath.join(module_dir, "go.mod")).decode("utf-8")
    found = _MODULE_RE.search(content)
    if found is None:
        raise SrcPatchError(f"no module directive in {posixpath.join(module_dir, 'go.mod')}")
    return next(g for g in found.groups() if g)


def find_working_module(resolve: str = ".", cwd: Path | None = None) -> WorkingModule:
    """Locate the Go module around the working directory and resolve a package dir in it.

    For ``/home/joe/project/subpkg`` with go.mod in ``/home/joe/project``,
    ``find_working_module(".")`` returns root ``/home/joe/project``, package dir
    ``subpkg`` and the module path from go.mod.
    """
    cwd = (cwd or Path.cwd()).resolve()
    anchor = Path(cwd.anchor)
    root_fs = DirFS(anchor)
    relative_cwd = cwd.relative_to(anchor).as_posix()

    module_dir = find_module_dir(root_fs, relative_cwd)
    module_path = read_module_path(root_fs, module_dir)

    target = clean_path(posixpath.join(relative_cwd, resolve))
    package_dir = posixpath.relpath(target, module_dir)
    if package_dir == ".." or package_dir.startswith("../"):
        raise SrcPatchError(f"package path {resolve!r} is outside of module dir {module_dir!r}")

    root = anchor if module_dir == "." else anchor.joinpath(*module_dir.split("/"))
    return WorkingModule(root=root, package_dir=package_dir, module_path=module_path)
