"""Insert-or-replace appliers for import, func, const, var and type transforms.

Each applier runs against a freshly loaded package and writes through to the
output layer before returning, so the next transform sees its effect.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from srcpatch.core.declarations import Declaration
from srcpatch.errors import AmbiguousGroupError, SrcPatchError
from srcpatch.models import AddConstTransform, AddFuncTransform, AddTypeTransform, AddVarTransform, ImportTransform

if TYPE_CHECKING:
    from srcpatch.core.package import Package

logger = logging.getLogger(__name__)

_PACKAGE_LINE_RE = re.compile(rb"(?m)^\s*package\s*.*$")


def _append(pkg: Package, filename: str, text: str) -> None:
    pkg.write_file(filename, pkg.file_bytes_or_new(filename) + text.encode("utf-8") + b"\n")


def _remove(pkg: Package, filename: str, decl: Declaration) -> None:
    """Cut a declaration, leading doc comment included, out of the file it lives in."""
    source = pkg.file_bytes[filename]
    pkg.write_file(filename, source[: decl.splice_start] + source[decl.end :])


def apply_add_func(pkg: Package, t: AddFuncTransform) -> None:
    # the func may already exist in any file of the package
    match = pkg.index.find_func(t.receiver_type, t.name)
    if match is not None:
        if not t.replace:
            logger.debug("Func %s%s already exists in %s", _recv(t.receiver_type), t.name, match.filename)
            return
        _remove(pkg, match.filename, match.decl)
    _append(pkg, t.filename, t.text)


def _recv(receiver: str) -> str:
    return f"({receiver}) " if receiver else ""


def apply_add_value(pkg: Package, t: AddConstTransform | AddVarTransform) -> None:
    kind = "const" if isinstance(t, AddConstTransform) else "var"
    match = pkg.index.find_value_group(kind, t.name_list)
    if match is not None:
        # a group with names the transform doesn't mention can't be replaced by one splice
        if not set(match.decl.names).issubset(t.name_list):
            raise AmbiguousGroupError(kind, match.decl.names, t.name_list)
        if not t.replace:
            logger.debug("%s block %s already exists in %s", kind, list(match.decl.names), match.filename)
            return
        _remove(pkg, match.filename, match.decl)
    _append(pkg, t.filename, t.text)


def apply_add_type(pkg: Package, t: AddTypeTransform) -> None:
    match = pkg.index.find_type(t.name)
    if match is not None:
        if not t.replace:
            logger.debug("Type %s already exists in %s", t.name, match.filename)
            return
        if len(match.decl.names) != 1:
            raise AmbiguousGroupError("type", match.decl.names, [t.name])
        _remove(pkg, match.filename, match.decl)
    _append(pkg, t.filename, t.text)


def _import_spec(t: ImportTransform) -> bytes:
    name = f"{t.name} " if t.name else ""
    return f'{name}"{t.path}"'.encode("utf-8")


def apply_import(pkg: Package, t: ImportTransform) -> None:
    """Add an import spec after the last import of the file.

    The spec joins the last import block when it is parenthesized, becomes a
    new import statement after it otherwise, and goes right after the package
    clause when the file has no imports (or doesn't exist yet).
    """
    parsed = pkg.files.get(t.filename)
    imports = parsed.imports() if parsed else []
    last = imports[-1] if imports else None
    spec = _import_spec(t)

    if parsed is not None and last is not None and last.close_paren is not None:
        source = parsed.source
        head = source[: last.close_paren]
        if not head.endswith(b"\n"):
            head += b"\n"
        out = head + b"\t" + spec + b"\n" + source[last.close_paren :]
    elif parsed is not None and last is not None:
        source = parsed.source
        head = source[: last.end]
        if not head.endswith(b"\n"):
            head += b"\n"
        out = head + b"import " + spec + b"\n" + source[last.end :].removeprefix(b"\n")
    else:
        source = pkg.file_bytes_or_new(t.filename)
        if parsed is not None:
            # after the whole package line, trailing comment included
            at = source.find(b"\n", parsed.package_clause_end)
            if at == -1:
                at = len(source)
        else:
            found = _PACKAGE_LINE_RE.search(source)
            if found is None:
                raise SrcPatchError(f"unable to find package line in {t.filename!r}")
            at = found.end()
        out = source[:at] + b"\n\nimport " + spec + b"\n" + source[at:]

    pkg.write_file(t.filename, out)
