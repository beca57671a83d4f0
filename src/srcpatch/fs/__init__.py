from srcpatch.fs.dir import DirFS
from srcpatch.fs.memory import MemoryFile, MemoryFS
from srcpatch.fs.paths import clean_path, parent_dir

__all__ = [
    "DirFS",
    "MemoryFS",
    "MemoryFile",
    "clean_path",
    "parent_dir",
]
