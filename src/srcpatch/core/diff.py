import difflib
import posixpath
from collections.abc import Iterable

from srcpatch.core.ports.filesystem import ReadableFS
from srcpatch.fs.paths import clean_path


def diff_layers(input_fs: ReadableFS, output_fs: ReadableFS, directories: Iterable[str]) -> dict[str, str]:
    """Return a unified diff per file of *directories* that differs between the layers.

    Files missing from the input layer are diffed against empty content.
    """
    result: dict[str, str] = {}
    for directory in directories:
        try:
            names = output_fs.list_files(directory)
        except FileNotFoundError:
            continue
        for name in names:
            path = clean_path(posixpath.join(directory, name))
            after = output_fs.read_bytes(path)
            try:
                before = input_fs.read_bytes(path)
            except FileNotFoundError:
                before = b""
            if before == after:
                continue
            lines = difflib.unified_diff(
                before.decode("utf-8", errors="replace").splitlines(keepends=True),
                after.decode("utf-8", errors="replace").splitlines(keepends=True),
                fromfile=f"a/{path}",
                tofile=f"b/{path}",
            )
            result[path] = "".join(lines)
    return result
