"""Exception hierarchy for the patch engine."""

from __future__ import annotations

from collections.abc import Sequence


class SrcPatchError(Exception):
    """Base class for every error raised by srcpatch."""


class SourceSyntaxError(SrcPatchError):
    """Raised when bytes are not valid Go source."""

    def __init__(self, filename: str, line: int, column: int, offset: int, message: str) -> None:
        self.filename = filename
        self.line = line
        self.column = column
        self.offset = offset
        self.message = message
        super().__init__(f"{filename}:{line}:{column}: {message}")

    def shifted(self, byte_count: int, line_count: int) -> "SourceSyntaxError":
        """Return a copy positioned as if *byte_count* bytes / *line_count* lines were never there."""
        return SourceSyntaxError(
            self.filename,
            max(self.line - line_count, 1),
            self.column,
            max(self.offset - byte_count, 0),
            self.message,
        )


class SnippetParseError(SrcPatchError):
    """Raised when a snippet is valid Go but cannot be expressed as transforms."""


class UnsupportedConstructError(SnippetParseError):
    def __init__(self, filename: str, kind: str) -> None:
        self.filename = filename
        self.kind = kind
        super().__init__(f"{filename}: unsupported top-level construct: {kind}")


class AmbiguousGroupError(SrcPatchError):
    """Raised when an existing declaration group cannot be replaced by a single splice."""

    def __init__(self, kind: str, existing: Sequence[str], requested: Sequence[str]) -> None:
        self.kind = kind
        self.existing = list(existing)
        self.requested = list(requested)
        super().__init__(
            f"name list from transform {kind} block {self.requested} "
            f"is not a superset of existing block {self.existing}"
        )


class AmbiguousPackageNameError(SrcPatchError):
    def __init__(self, names: Sequence[str]) -> None:
        self.names = list(names)
        super().__init__(f"multiple package names found: {self.names}")


class InvalidPackageNameError(SrcPatchError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"derived package name {name!r} is not valid")


class CapabilityError(SrcPatchError):
    """Raised when the output filesystem cannot create files or directories."""


class FormatterError(SrcPatchError):
    def __init__(self, filename: str, message: str, output: str = "") -> None:
        self.filename = filename
        self.output = output
        detail = f"; full output: {output}" if output else ""
        super().__init__(f"{filename}: {message}{detail}")


class NotFoundError(SrcPatchError):
    """Raised when a declaration lookup yields nothing.

    Callers are expected to catch it and present ``suggestions`` to the user.
    """

    def __init__(self, name: str, suggestions: Sequence[str] = ()) -> None:
        self.name = name
        self.suggestions = list(suggestions)
        message = f"{name!r} not found"
        if self.suggestions:
            message += f" (did you mean {', '.join(self.suggestions)}?)"
        super().__init__(message)


class TransformError(SrcPatchError):
    """Wraps an error raised while applying one transform of a batch."""

    def __init__(self, kind: str, filename: str, index: int, total: int, cause: Exception) -> None:
        self.kind = kind
        self.filename = filename
        self.index = index
        self.total = total
        self.cause = cause
        target = f" ({filename})" if filename else ""
        super().__init__(f"transform {index + 1} of {total} [{kind}{target}] failed: {cause}")
