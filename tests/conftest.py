"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from srcpatch.config import Settings
from srcpatch.core.package import Package
from srcpatch.fs import MemoryFS

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Package helpers
# ---------------------------------------------------------------------------


def _memory_fs(files: dict[str, str]) -> MemoryFS:
    """Build a MemoryFS holding *files*, creating parent dirs as needed."""
    fs = MemoryFS()
    for path, content in files.items():
        fs.makedirs(path.rsplit("/", 1)[0] if "/" in path else ".")
        fs.write_file(path, content.encode("utf-8"))
    return fs


def _make_package(
    files: dict[str, str],
    sub_dir: str = "test1",
    module_path: str = "example.com/test",
    settings: Settings | None = None,
) -> tuple[Package, MemoryFS, MemoryFS]:
    """Return a package over an input layer holding *files* and an empty output layer."""
    input_fs = _memory_fs(files)
    output_fs = MemoryFS()
    pkg = Package(input_fs, output_fs, module_path, sub_dir, settings=settings or Settings())
    return pkg, input_fs, output_fs


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def memory() -> MemoryFS:
    return MemoryFS()


@pytest.fixture
def go_module(tmp_path: Path) -> Path:
    """Return a module root on disk holding go.mod and one package, ``things``."""
    (tmp_path / "go.mod").write_text("module example.com/things\n\ngo 1.21\n", encoding="utf-8")
    pkg_dir = tmp_path / "things"
    pkg_dir.mkdir()
    (pkg_dir / "widget.go").write_text(
        'package things\n\nimport "io"\n\n// Widget does things.\ntype Widget struct {\n\tr io.Reader\n}\n',
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def make_package() -> Callable[..., tuple[Package, MemoryFS, MemoryFS]]:
    """Return a factory building a package from a ``{path: content}`` dict."""
    return _make_package
