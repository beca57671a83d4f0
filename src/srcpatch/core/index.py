from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Generic, TypeVar

from srcpatch.core.declarations import Declaration, FuncDecl, TypeDecl, ValueDecl
from srcpatch.core.parser import ParsedFile

D = TypeVar("D", bound=Declaration)


@dataclass(frozen=True)
class Match(Generic[D]):
    filename: str
    decl: D


class DeclarationIndex:
    """Answers "does this declaration exist in the package, and where".

    Lookups scan every member file's top-level declarations; the first match
    wins, in file-name order. Duplicates across files mean the package was
    already invalid, so which one comes back is not part of the contract.
    """

    def __init__(self, files: Mapping[str, ParsedFile]) -> None:
        self._files = files

    def _each(self) -> Iterable[tuple[str, ParsedFile]]:
        for filename in sorted(self._files):
            yield filename, self._files[filename]

    def find_func(self, receiver: str, name: str) -> Match[FuncDecl] | None:
        for filename, parsed in self._each():
            for decl in parsed.funcs():
                if decl.receiver == receiver and decl.name == name:
                    return Match(filename, decl)
        return None

    def find_value_group(self, kind: str, names: Iterable[str]) -> Match[ValueDecl] | None:
        """Return the first const/var group of *kind* sharing at least one name with *names*."""
        wanted = set(names)
        for filename, parsed in self._each():
            for decl in parsed.value_groups(kind):
                if wanted.intersection(decl.names):
                    return Match(filename, decl)
        return None

    def find_type(self, name: str) -> Match[TypeDecl] | None:
        for filename, parsed in self._each():
            for decl in parsed.types():
                if name in decl.names:
                    return Match(filename, decl)
        return None

    def type_names(self) -> list[str]:
        return sorted({name for _, parsed in self._each() for decl in parsed.types() for name in decl.names})
