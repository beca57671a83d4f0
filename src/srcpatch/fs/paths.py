import posixpath


def clean_path(path: str) -> str:
    """Normalize a slash separated layer path; the layer root is ".".

    Paths that climb above the root are rejected.
    """
    cleaned = posixpath.normpath(path.replace("\\", "/")).lstrip("/") or "."
    if cleaned == ".." or cleaned.startswith("../"):
        raise ValueError(f"path {path!r} escapes the filesystem root")
    return cleaned


def parent_dir(path: str) -> str:
    return posixpath.dirname(clean_path(path)) or "."
