import stat
from pathlib import Path

from srcpatch.fs.paths import clean_path


class DirFS:
    """Filesystem layer rooted at a directory on disk. Implements ``WritableFS``."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"DirFS({str(self.root)!r})"

    def _resolve(self, path: str) -> Path:
        name = clean_path(path)
        return self.root if name == "." else self.root.joinpath(*name.split("/"))

    def read_bytes(self, path: str) -> bytes:
        return self._resolve(path).read_bytes()

    def list_files(self, path: str) -> list[str]:
        return sorted(entry.name for entry in self._resolve(path).iterdir() if entry.is_file())

    def is_dir(self, path: str) -> bool:
        return self._resolve(path).is_dir()

    def file_mode(self, path: str) -> int | None:
        try:
            return stat.S_IMODE(self._resolve(path).stat().st_mode)
        except FileNotFoundError:
            return None

    def write_file(self, path: str, data: bytes, mode: int = 0o644) -> None:
        target = self._resolve(path)
        existed = target.exists()
        target.write_bytes(data)
        if not existed:
            target.chmod(mode)

    def makedirs(self, path: str, mode: int = 0o755) -> None:
        self._resolve(path).mkdir(mode=mode, parents=True, exist_ok=True)
