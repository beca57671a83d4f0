"""Package-level editing over an input layer and an output layer.

Reads always try the output layer first, so a file written by an earlier
transform (or left there by an earlier run) shadows the input file of the same
name entirely. All writes go to the output layer. Point the output layer at a
``MemoryFS`` for dry runs, then diff the two layers.
"""

import difflib
import logging
import posixpath
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from tree_sitter import Node

from srcpatch.config import Settings, get_settings
from srcpatch.core.apply import apply_add_func, apply_add_type, apply_add_value, apply_import
from srcpatch.core.declarations import TypeDecl
from srcpatch.core.dedup import apply_dedup_imports
from srcpatch.core.formatter import apply_format
from srcpatch.core.index import DeclarationIndex
from srcpatch.core.naming import lower_for_type
from srcpatch.core.parser import LineIndex, ParsedFile, parse_source
from srcpatch.core.ports.filesystem import ReadableFS, WritableFS
from srcpatch.errors import (
    AmbiguousPackageNameError,
    CapabilityError,
    InvalidPackageNameError,
    NotFoundError,
    SrcPatchError,
    TransformError,
)
from srcpatch.fs.paths import clean_path
from srcpatch.models import (
    AddConstTransform,
    AddFuncTransform,
    AddTypeTransform,
    AddVarTransform,
    DedupImportsTransform,
    FormatTransform,
    ImportTransform,
    Position,
    Transform,
)

logger = logging.getLogger(__name__)

GO_SUFFIX = ".go"
DEFAULT_FILE_MODE = 0o644
DEFAULT_DIR_MODE = 0o755

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_MAJOR_VERSION_RE = re.compile(r"^v[0-9]+$")

_APPLIERS: dict[type, Callable[["Package", Any], None]] = {
    ImportTransform: apply_import,
    AddFuncTransform: apply_add_func,
    AddConstTransform: apply_add_value,
    AddVarTransform: apply_add_value,
    AddTypeTransform: apply_add_type,
    DedupImportsTransform: apply_dedup_imports,
    FormatTransform: apply_format,
}


@dataclass(frozen=True)
class TypeInfo:
    """Where a type was found, with enough context to slice its source."""

    name: str
    filename: str
    decl: TypeDecl
    source: bytes
    lines: LineIndex

    @property
    def position(self) -> Position:
        return self.lines.position(self.decl.start)

    def node_source(self, node: Node | None = None) -> bytes:
        """Return the source of *node*, or of the whole declaration (doc comment included)."""
        if node is None:
            return self.source[self.decl.splice_start : self.decl.end]
        return self.source[node.start_byte : node.end_byte]


class Package:
    """One Go package directory spread across an input and an output filesystem layer."""

    def __init__(
        self,
        input_fs: ReadableFS,
        output_fs: ReadableFS,
        module_path: str,
        sub_dir: str = "",
        settings: Settings | None = None,
    ) -> None:
        if not isinstance(output_fs, WritableFS):
            raise CapabilityError(
                f"output filesystem {output_fs!r} does not implement write_file and makedirs, cannot write changes"
            )
        self.input_fs = input_fs
        self.output_fs: WritableFS = output_fs
        self.module_path = module_path
        self.sub_dir = clean_path(sub_dir or ".")
        self.settings = settings or get_settings()

        self.files: dict[str, ParsedFile] = {}
        self.file_bytes: dict[str, bytes] = {}
        self.local_name = ""

    def __repr__(self) -> str:
        return f"Package(module_path={self.module_path!r}, sub_dir={self.sub_dir!r})"

    @property
    def index(self) -> DeclarationIndex:
        return DeclarationIndex(self.files)

    def _path(self, filename: str) -> str:
        return clean_path(posixpath.join(self.sub_dir, filename))

    def file_names(self) -> list[str]:
        """Return the sorted union of Go file names found in either layer."""
        names: set[str] = set()
        for layer in (self.output_fs, self.input_fs):
            try:
                listing = layer.list_files(self.sub_dir)
            except FileNotFoundError:
                # the package dir doesn't need to exist yet in either layer
                continue
            names.update(name for name in listing if name.endswith(GO_SUFFIX))
        return sorted(names)

    def read_file(self, filename: str) -> bytes:
        path = self._path(filename)
        try:
            return self.output_fs.read_bytes(path)
        except FileNotFoundError:
            return self.input_fs.read_bytes(path)

    def load(self) -> None:
        """Re-read and re-parse every member file and re-derive the local package name."""
        files: dict[str, ParsedFile] = {}
        file_bytes: dict[str, bytes] = {}
        package_names: list[str] = []
        for filename in self.file_names():
            source = self.read_file(filename)
            parsed = parse_source(filename, source)
            files[filename] = parsed
            file_bytes[filename] = source
            if parsed.package_name not in package_names:
                package_names.append(parsed.package_name)

        self.files = files
        self.file_bytes = file_bytes
        self.local_name = self._derive_local_name(package_names)
        logger.debug("Loaded %d file(s) for package %s in %s", len(files), self.local_name, self.sub_dir)

    def _derive_local_name(self, package_names: list[str]) -> str:
        if not package_names:
            name = "" if self.sub_dir == "." else posixpath.basename(self.sub_dir)
            if not name:
                parts = [p for p in self.module_path.split("/") if p]
                if len(parts) > 1 and _MAJOR_VERSION_RE.match(parts[-1]):
                    parts.pop()
                name = parts[-1] if parts else ""
            name = name.replace("-", "")
        elif len(package_names) == 1:
            name = package_names[0]
        else:
            non_test = [n for n in package_names if not n.endswith("_test")]
            if len(non_test) > 1:
                raise AmbiguousPackageNameError(package_names)
            name = non_test[0] if non_test else ""

        if not _IDENT_RE.match(name):
            raise InvalidPackageNameError(name)
        return name

    def file_bytes_or_new(self, filename: str) -> bytes:
        source = self.file_bytes.get(filename)
        if source is None:
            # a brand new file starts with just a package clause
            source = f"package {self.local_name}\n\n".encode("utf-8")
        return source

    def _file_mode(self, path: str) -> int:
        for layer in (self.output_fs, self.input_fs):
            mode = layer.file_mode(path)
            if mode is not None:
                return mode
        return DEFAULT_FILE_MODE

    def write_file(self, filename: str, data: bytes) -> None:
        """Write a member file to the output layer, keeping its existing mode."""
        if "/" in filename or "\\" in filename:
            raise ValueError(f"name {filename!r} appears to have a directory, only plain file names are allowed")
        path = self._path(filename)
        self.output_fs.makedirs(self.sub_dir, DEFAULT_DIR_MODE)
        self.output_fs.write_file(path, data, self._file_mode(path))
        self.file_bytes[filename] = data
        logger.info("Wrote %s (%d bytes)", path, len(data))

    def apply_transform(self, transform: Transform) -> None:
        """Reload the package and apply one transform, writing changes to the output layer."""
        self.load()
        applier = _APPLIERS.get(type(transform))
        if applier is None:
            raise SrcPatchError(f"unknown transform type: {type(transform).__name__}")
        applier(self, transform)

    def apply_transforms(self, *transforms: Transform) -> None:
        """Apply transforms in order.

        Not transactional: when one fails, the ones before it stay written.
        Use a separate output layer if that matters.
        """
        total = len(transforms)
        for index, transform in enumerate(transforms):
            try:
                self.apply_transform(transform)
            except (SrcPatchError, OSError) as err:
                raise TransformError(
                    transform.kind, getattr(transform, "filename", ""), index, total, err
                ) from err
        logger.debug("Applied %d transform(s) to %s", total, self.sub_dir)

    def find_type(self, name: str) -> TypeInfo:
        """Reload the package and return the declaration of type *name*.

        Raises NotFoundError, carrying close matches, if there is none.
        """
        self.load()
        match = self.index.find_type(name)
        if match is None:
            suggestions = difflib.get_close_matches(name, self.index.type_names(), n=3)
            raise NotFoundError(name, suggestions)
        return self._type_info(name, match.filename, match.decl)

    def find_type_loose(self, search: str) -> TypeInfo:
        """Like find_type, but also accepts a different case or a file-name spelling.

        ``workspace`` and ``workspace-item`` find ``Workspace`` and ``WorkspaceItem``.
        """
        self.load()
        sep = self.settings.file_separator
        candidates = self.index.type_names()
        wanted = search.removesuffix(GO_SUFFIX)
        for matches in (
            lambda n: n == wanted,
            lambda n: n.lower() == wanted.lower(),
            lambda n: lower_for_type(n, sep) == wanted.lower(),
        ):
            for name in candidates:
                if matches(name):
                    match = self.index.find_type(name)
                    assert match is not None
                    return self._type_info(name, match.filename, match.decl)
        raise NotFoundError(search, difflib.get_close_matches(wanted, candidates, n=3))

    def _type_info(self, name: str, filename: str, decl: TypeDecl) -> TypeInfo:
        parsed = self.files[filename]
        return TypeInfo(name=name, filename=filename, decl=decl, source=parsed.source, lines=parsed.lines)
