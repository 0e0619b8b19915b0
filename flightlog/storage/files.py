"""File primitives for session artifacts.

Writes go to a temporary file in the destination directory and are moved into
place with ``os.replace``, so a reader sees either the previous artifact or the
complete new one, never a truncated file.
"""

import os
import tempfile
from pathlib import Path


def write_atomic(path: Path, data: bytes) -> None:
    """Atomically replace ``path`` with ``data``.

    Args:
        path: Destination file. Its directory must exist.
        data: Complete file contents.

    Raises:
        OSError: If the temporary file cannot be written or moved into place.
    """
    descriptor, temporary_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".partial",
        dir=path.parent,
    )
    temporary_path = Path(temporary_name)
    try:
        with os.fdopen(descriptor, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temporary_path, path)
    except BaseException:
        temporary_path.unlink(missing_ok=True)
        raise


def read_optional(path: Path) -> bytes | None:
    """Read a file, treating a missing file as absent.

    Raises:
        OSError: If the file exists but cannot be read.
    """
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
