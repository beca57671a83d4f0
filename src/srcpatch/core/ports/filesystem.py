from typing import Protocol, runtime_checkable


@runtime_checkable
class ReadableFS(Protocol):
    """Read side of a filesystem layer. Paths are slash separated and relative to the layer root."""

    def read_bytes(self, path: str) -> bytes: ...

    def list_files(self, path: str) -> list[str]: ...

    def is_dir(self, path: str) -> bool: ...

    def file_mode(self, path: str) -> int | None: ...


@runtime_checkable
class WritableFS(ReadableFS, Protocol):
    def write_file(self, path: str, data: bytes, mode: int = 0o644) -> None: ...

    def makedirs(self, path: str, mode: int = 0o755) -> None: ...
