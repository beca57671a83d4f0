"""Top-level Go declarations extracted from a tree-sitter syntax tree.

Every declaration keeps the absolute byte range of its node in the original
buffer and, when a doc comment group sits directly above it, the offset where
that group starts. Splicing a declaration out of a file uses
``splice_start``..``end`` so the doc comment goes with it.
"""

from __future__ import annotations

import ast
from collections.abc import Iterator
from dataclasses import dataclass

from tree_sitter import Node


@dataclass(frozen=True, eq=False)
class Declaration:
    node: Node
    start: int
    end: int
    doc_start: int | None
    doc_end: int | None

    @property
    def splice_start(self) -> int:
        return self.doc_start if self.doc_start is not None else self.start


@dataclass(frozen=True, eq=False)
class FuncDecl(Declaration):
    name: str
    receiver: str
    # False when the receiver is neither "T" nor "*T"; ``receiver`` then holds its raw text.
    simple_receiver: bool = True


@dataclass(frozen=True, eq=False)
class ValueDecl(Declaration):
    kind: str
    names: tuple[str, ...]


@dataclass(frozen=True, eq=False)
class TypeDecl(Declaration):
    names: tuple[str, ...]


@dataclass(frozen=True)
class ImportSpec:
    name: str
    path: str
    start: int
    end: int


@dataclass(frozen=True, eq=False)
class ImportDecl(Declaration):
    specs: tuple[ImportSpec, ...]
    # offset of ")" for the parenthesized form, None for `import "x"`
    close_paren: int | None


@dataclass(frozen=True, eq=False)
class OtherDecl(Declaration):
    kind: str


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8")


def unquote_import_path(literal: str) -> str:
    if literal.startswith("`"):
        return literal[1:-1]
    inner = literal[1:-1]
    if "\\" in inner:
        return ast.literal_eval(literal)
    return inner


def receiver_type_expr(method: Node, source: bytes) -> tuple[str, bool]:
    """Return the receiver type of a method as ("T" | "*T", True), or (raw text, False)."""
    receiver = method.child_by_field_name("receiver")
    params = [c for c in receiver.named_children if c.type.endswith("parameter_declaration")] if receiver else []
    if len(params) != 1:
        return (node_text(receiver, source) if receiver else ""), False
    typ = params[0].child_by_field_name("type")
    if typ is None:
        return node_text(params[0], source), False
    if typ.type == "type_identifier":
        return node_text(typ, source), True
    if typ.type == "pointer_type":
        inner = typ.named_children
        if len(inner) == 1 and inner[0].type == "type_identifier":
            return "*" + node_text(inner[0], source), True
    return node_text(typ, source), False


def _specs(node: Node, spec_type: str) -> Iterator[Node]:
    for child in node.named_children:
        if child.type == spec_type:
            yield child
        elif child.type.endswith("_list"):
            yield from (c for c in child.named_children if c.type == spec_type)


def _doc_range(siblings: list[Node], index: int) -> tuple[int | None, int | None]:
    """Find the comment group ending on the line right above ``siblings[index]``."""
    boundary_row = siblings[index].start_point[0]
    doc_start = None
    j = index - 1
    while j >= 0 and siblings[j].type == "comment":
        comment = siblings[j]
        if comment.end_point[0] < boundary_row - 1:
            break
        # a comment sharing a line with the previous declaration belongs to that declaration
        if j > 0 and siblings[j - 1].type != "comment" and siblings[j - 1].end_point[0] == comment.start_point[0]:
            break
        doc_start = comment.start_byte
        boundary_row = comment.start_point[0]
        j -= 1
    if doc_start is None:
        return None, None
    return doc_start, siblings[index - 1].end_byte


def _import_decl(node: Node, source: bytes, doc_start: int | None, doc_end: int | None) -> ImportDecl:
    specs = []
    for spec in _specs(node, "import_spec"):
        name_node = spec.child_by_field_name("name")
        path_node = spec.child_by_field_name("path")
        specs.append(
            ImportSpec(
                name=node_text(name_node, source) if name_node else "",
                path=unquote_import_path(node_text(path_node, source)) if path_node else "",
                start=spec.start_byte,
                end=spec.end_byte,
            )
        )
    close_paren = None
    for child in node.named_children:
        if child.type == "import_spec_list":
            close_paren = next((c.start_byte for c in reversed(child.children) if c.type == ")"), None)
    return ImportDecl(
        node=node,
        start=node.start_byte,
        end=node.end_byte,
        doc_start=doc_start,
        doc_end=doc_end,
        specs=tuple(specs),
        close_paren=close_paren,
    )


def collect_declarations(root: Node, source: bytes) -> list[Declaration]:
    """Turn the top-level children of a ``source_file`` node into declarations, in source order."""
    siblings = root.named_children
    decls: list[Declaration] = []
    for index, node in enumerate(siblings):
        if node.type in ("comment", "package_clause"):
            continue
        doc_start, doc_end = _doc_range(siblings, index)
        common = {
            "node": node,
            "start": node.start_byte,
            "end": node.end_byte,
            "doc_start": doc_start,
            "doc_end": doc_end,
        }

        if node.type == "function_declaration":
            decls.append(FuncDecl(**common, name=node_text(node.child_by_field_name("name"), source), receiver=""))
        elif node.type == "method_declaration":
            receiver, simple = receiver_type_expr(node, source)
            decls.append(
                FuncDecl(
                    **common,
                    name=node_text(node.child_by_field_name("name"), source),
                    receiver=receiver,
                    simple_receiver=simple,
                )
            )
        elif node.type in ("const_declaration", "var_declaration"):
            kind = node.type.removesuffix("_declaration")
            names = [
                node_text(name, source)
                for spec in _specs(node, f"{kind}_spec")
                for name in spec.children_by_field_name("name")
            ]
            decls.append(ValueDecl(**common, kind=kind, names=tuple(names)))
        elif node.type == "type_declaration":
            names = [
                node_text(spec.child_by_field_name("name"), source)
                for spec in node.named_children
                if spec.type in ("type_spec", "type_alias")
            ]
            decls.append(TypeDecl(**common, names=tuple(names)))
        elif node.type == "import_declaration":
            decls.append(_import_decl(node, source, doc_start, doc_end))
        else:
            decls.append(OtherDecl(**common, kind=node.type))
    return decls
