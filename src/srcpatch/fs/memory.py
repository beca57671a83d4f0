import posixpath
from dataclasses import dataclass

from srcpatch.fs.paths import clean_path, parent_dir


@dataclass(frozen=True)
class MemoryFile:
    data: bytes
    mode: int


class MemoryFS:
    """In-memory filesystem layer, used as the output layer for dry runs and in tests.

    Implements the ``WritableFS`` protocol. Like a real directory tree, a file can
    only be written once its parent directory exists.
    """

    def __init__(self) -> None:
        self.files: dict[str, MemoryFile] = {}
        self.dirs: set[str] = {"."}

    def read_bytes(self, path: str) -> bytes:
        entry = self.files.get(clean_path(path))
        if entry is None:
            raise FileNotFoundError(path)
        return entry.data

    def list_files(self, path: str) -> list[str]:
        directory = clean_path(path)
        if directory not in self.dirs:
            raise FileNotFoundError(path)
        return sorted(posixpath.basename(name) for name in self.files if parent_dir(name) == directory)

    def is_dir(self, path: str) -> bool:
        return clean_path(path) in self.dirs

    def file_mode(self, path: str) -> int | None:
        entry = self.files.get(clean_path(path))
        return entry.mode if entry else None

    def write_file(self, path: str, data: bytes, mode: int = 0o644) -> None:
        name = clean_path(path)
        if name in self.dirs:
            raise IsADirectoryError(path)
        parent = parent_dir(name)
        if parent not in self.dirs:
            raise FileNotFoundError(f"parent directory {parent!r} does not exist")
        self.files[name] = MemoryFile(data=bytes(data), mode=mode)

    def makedirs(self, path: str, mode: int = 0o755) -> None:
        name = clean_path(path)
        if name in self.files:
            raise FileExistsError(path)
        while name != ".":
            self.dirs.add(name)
            name = posixpath.dirname(name) or "."
