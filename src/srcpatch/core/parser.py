from bisect import bisect_right
from dataclasses import dataclass, field
from functools import lru_cache

from tree_sitter import Node, Parser, Tree
from tree_sitter_language_pack import get_parser

from srcpatch.core.declarations import (
    Declaration,
    FuncDecl,
    ImportDecl,
    TypeDecl,
    ValueDecl,
    collect_declarations,
    node_text,
)
from srcpatch.errors import SourceSyntaxError
from srcpatch.models import Position

_KNOWN_TOP_LEVEL = frozenset(
    {
        "comment",
        "package_clause",
        "import_declaration",
        "function_declaration",
        "method_declaration",
        "const_declaration",
        "var_declaration",
        "type_declaration",
    }
)


class LineIndex:
    """Maps byte offsets to (row, column) pairs and back, both zero based.

    Built once per parse from the offsets at which each line starts.
    """

    def __init__(self, source: bytes) -> None:
        starts = [0]
        pos = source.find(b"\n")
        while pos != -1:
            starts.append(pos + 1)
            pos = source.find(b"\n", pos + 1)
        self._starts = starts
        self._size = len(source)

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def offset(self, row: int, column: int) -> int:
        if row < 0 or row >= len(self._starts):
            raise IndexError(f"row {row} out of range")
        return min(self._starts[row] + column, self._size)

    def position(self, offset: int) -> Position:
        if offset < 0 or offset > self._size:
            raise IndexError(f"offset {offset} out of range")
        row = bisect_right(self._starts, offset) - 1
        return Position(row=row, column=offset - self._starts[row])


@dataclass
class ParsedFile:
    filename: str
    source: bytes
    tree: Tree
    package_name: str
    package_clause_end: int
    lines: LineIndex
    declarations: list[Declaration] = field(default_factory=list)

    def funcs(self) -> list[FuncDecl]:
        return [d for d in self.declarations if isinstance(d, FuncDecl)]

    def value_groups(self, kind: str) -> list[ValueDecl]:
        return [d for d in self.declarations if isinstance(d, ValueDecl) and d.kind == kind]

    def types(self) -> list[TypeDecl]:
        return [d for d in self.declarations if isinstance(d, TypeDecl)]

    def imports(self) -> list[ImportDecl]:
        return [d for d in self.declarations if isinstance(d, ImportDecl)]


@lru_cache(maxsize=1)
def _go_parser() -> Parser:
    return get_parser("go")


def _first_error(node: Node) -> Node | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    return None


def _error_node(root: Node) -> Node:
    for child in root.children:
        found = _first_error(child)
        if found is not None:
            return found
    # the whole file failed to parse into a source_file; blame the first construct we don't know
    for child in root.named_children:
        if child.type not in _KNOWN_TOP_LEVEL:
            return child
    return root


def _syntax_error(filename: str, source: bytes, lines: LineIndex, node: Node) -> SourceSyntaxError:
    if node.is_missing:
        message = f"expected {node.type!r}"
    else:
        token = source[node.start_byte : node.end_byte].split(b"\n", 1)[0][:32].decode("utf-8", errors="replace")
        message = f"syntax error: unexpected {token!r}" if token else "syntax error"
    pos = lines.position(node.start_byte)
    return SourceSyntaxError(filename, pos.row + 1, pos.column + 1, node.start_byte, message)


def parse_source(filename: str, source: bytes, *, strict: bool = True) -> ParsedFile:
    """Parse one Go file, raising SourceSyntaxError if it is not valid source.

    tree-sitter accepts statements at the top level; with ``strict`` they are
    syntax errors, otherwise they come back as ``OtherDecl``.
    """
    lines = LineIndex(source)
    try:
        source.decode("utf-8")
    except UnicodeDecodeError as err:
        pos = lines.position(err.start)
        raise SourceSyntaxError(filename, pos.row + 1, pos.column + 1, err.start, "illegal UTF-8 encoding") from None

    tree = _go_parser().parse(source)
    root = tree.root_node

    if root.has_error or root.type == "ERROR":
        raise _syntax_error(filename, source, lines, _error_node(root))

    clause = next((c for c in root.named_children if c.type == "package_clause"), None)
    if clause is None:
        raise SourceSyntaxError(filename, 1, 1, 0, "expected 'package' clause")
    if strict:
        stray = next((c for c in root.named_children if c.type not in _KNOWN_TOP_LEVEL), None)
        if stray is not None:
            raise _syntax_error(filename, source, lines, stray)
    name_node = next((c for c in clause.named_children if c.type == "package_identifier"), None)

    return ParsedFile(
        filename=filename,
        source=source,
        tree=tree,
        package_name=node_text(name_node, source) if name_node else "",
        package_clause_end=clause.end_byte,
        lines=lines,
        declarations=collect_declarations(root, source),
    )
