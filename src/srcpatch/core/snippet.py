"""Turn headerless Go snippets (typically rendered templates) into transforms.

A template only has to print ``func F() {}`` and friends; the snippet parser
works out which transform each top-level declaration becomes.
"""

import logging

from srcpatch.core.declarations import FuncDecl, ImportDecl, OtherDecl, TypeDecl, ValueDecl
from srcpatch.core.parser import parse_source
from srcpatch.errors import SnippetParseError, SourceSyntaxError, UnsupportedConstructError
from srcpatch.models import (
    AddConstTransform,
    AddFuncTransform,
    AddTypeTransform,
    AddVarTransform,
    ImportTransform,
    Transform,
)

logger = logging.getLogger(__name__)

SNIPPET_HEADER = "package snippet__\n\n"
_HEADER_BYTES = len(SNIPPET_HEADER.encode("utf-8"))
_HEADER_LINES = SNIPPET_HEADER.count("\n")


def _declaration_text(source: bytes, start: int, end: int, doc_start: int | None, doc_end: int | None) -> str:
    code = source[start:end].decode("utf-8")
    if doc_start is None or doc_end is None:
        return code
    doc = source[doc_start:doc_end].decode("utf-8")
    if not doc.endswith("\n"):
        doc += "\n"
    return doc + code


def parse_transforms(filename: str, snippet: str) -> list[Transform]:
    """Parse *snippet* and return one transform per import spec and declaration, in source order.

    The snippet must not contain a package clause. Syntax errors are reported
    against the snippet's own lines, not the synthetic header added for parsing.
    Every transform targets *filename*.
    """
    source = (SNIPPET_HEADER + snippet).encode("utf-8")
    try:
        parsed = parse_source(filename, source, strict=False)
    except SourceSyntaxError as err:
        raise err.shifted(_HEADER_BYTES, _HEADER_LINES) from None

    clauses = [c for c in parsed.tree.root_node.named_children if c.type == "package_clause"]
    if len(clauses) > 1:
        raise UnsupportedConstructError(filename, "package_clause")

    transforms: list[Transform] = []
    for decl in parsed.declarations:
        if isinstance(decl, ImportDecl):
            transforms.extend(ImportTransform(filename=filename, name=s.name, path=s.path) for s in decl.specs)
            continue

        text = _declaration_text(source, decl.start, decl.end, decl.doc_start, decl.doc_end)

        if isinstance(decl, FuncDecl):
            if not decl.simple_receiver:
                raise SnippetParseError(f"{filename}: unexpected receiver type {decl.receiver!r} on {decl.name}")
            transforms.append(
                AddFuncTransform(filename=filename, name=decl.name, receiver_type=decl.receiver, text=text)
            )
        elif isinstance(decl, ValueDecl) and decl.kind == "const":
            transforms.append(AddConstTransform(filename=filename, name_list=list(decl.names), text=text))
        elif isinstance(decl, ValueDecl):
            transforms.append(AddVarTransform(filename=filename, name_list=list(decl.names), text=text))
        elif isinstance(decl, TypeDecl):
            if len(decl.names) != 1:
                raise SnippetParseError(
                    f"{filename}: type declaration must bind exactly 1 name, found {len(decl.names)}: "
                    f"{list(decl.names)}"
                )
            transforms.append(AddTypeTransform(filename=filename, name=decl.names[0], text=text))
        elif isinstance(decl, OtherDecl):
            raise UnsupportedConstructError(filename, decl.kind)

    logger.debug("Parsed %d transform(s) from snippet for %s", len(transforms), filename)
    return transforms
