from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from srcpatch.core.parser import ParsedFile
from srcpatch.models import DedupImportsTransform

if TYPE_CHECKING:
    from srcpatch.core.package import Package

logger = logging.getLogger(__name__)


@dataclass
class ImportLine:
    path: str
    start: int
    end: int
    keep: bool = False


@dataclass
class ImportBlock:
    start: int
    end: int
    lines: list[ImportLine] = field(default_factory=list)

    @property
    def keep_count(self) -> int:
        return sum(1 for line in self.lines if line.keep)


def _import_blocks(parsed: ParsedFile) -> list[ImportBlock]:
    seen: set[str] = set()
    blocks = []
    for decl in parsed.imports():
        block = ImportBlock(start=decl.start, end=decl.end)
        for spec in decl.specs:
            block.lines.append(ImportLine(path=spec.path, start=spec.start, end=spec.end, keep=spec.path not in seen))
            seen.add(spec.path)
        blocks.append(block)
    return blocks


def dedup_source(parsed: ParsedFile) -> bytes:
    """Drop every import spec whose path was already imported earlier in the file.

    Everything around the dropped specs is copied verbatim; an import statement
    left without specs is dropped as a whole.
    """
    source = parsed.source
    out = bytearray()
    pos = 0
    for block in _import_blocks(parsed):
        out += source[pos : block.start]
        pos = block.start
        if block.keep_count < 1:
            pos = block.end
            continue
        for line in block.lines:
            out += source[pos : line.start]
            if line.keep:
                out += source[line.start : line.end]
            pos = line.end
    out += source[pos:]
    return bytes(out)


def apply_dedup_imports(pkg: Package, t: DedupImportsTransform) -> None:
    names = sorted(pkg.files) if t.filename_list is None else list(dict.fromkeys(t.filename_list))
    for filename in names:
        parsed = pkg.files.get(filename)
        if parsed is None:
            continue
        out = dedup_source(parsed)
        if out == parsed.source:
            continue
        pkg.write_file(filename, out)
        logger.info("Removed duplicate imports from %s", filename)
