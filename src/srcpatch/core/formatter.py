from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from typing import TYPE_CHECKING

from srcpatch.errors import FormatterError
from srcpatch.models import FormatTransform

if TYPE_CHECKING:
    from srcpatch.core.package import Package

logger = logging.getLogger(__name__)

# nothing shorter than this can be a formatted Go file
MIN_FORMATTED = b"package a\n"


def format_source(filename: str, source: bytes, command: Sequence[str], timeout: float) -> bytes:
    """Pipe *source* through the external formatter and return its stdout."""
    try:
        result = subprocess.run(
            list(command),
            input=source,
            capture_output=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as err:
        raise FormatterError(filename, f"formatter {command[0]!r} not found") from err
    except subprocess.TimeoutExpired as err:
        raise FormatterError(filename, f"formatter timed out after {timeout}s") from err

    if result.returncode != 0:
        raise FormatterError(
            filename,
            f"formatter exited with status {result.returncode}",
            result.stderr.decode("utf-8", errors="replace").strip(),
        )
    if len(result.stdout) < len(MIN_FORMATTED):
        raise FormatterError(
            filename,
            "formatter returned contents that are too short to be valid",
            result.stdout.decode("utf-8", errors="replace"),
        )
    return result.stdout


def apply_format(pkg: Package, t: FormatTransform) -> None:
    if t.filename_list is None:
        names = sorted(pkg.file_bytes)
    else:
        names = [n for n in dict.fromkeys(t.filename_list) if n in pkg.file_bytes]

    command = pkg.settings.gofmt_command
    for filename in names:
        source = pkg.file_bytes[filename]
        out = format_source(filename, source, command, pkg.settings.format_timeout)
        if out == source:
            continue
        pkg.write_file(filename, out)
        logger.info("Formatted %s", filename)
