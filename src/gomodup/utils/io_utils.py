"""
Centralized file I/O utilities.

- Single place for encoding handling
- Writes go through a temp file in the target directory and an atomic rename
"""

import os
import tempfile
from pathlib import Path
from typing import Union

from .config import DEFAULT_FILE_ENCODING


def read_source_file(path: Union[Path, str]) -> str:
    """Read source file with standard encoding."""
    p = Path(path) if not isinstance(path, Path) else path
    # newline="" keeps CRLF line endings intact for byte-identical rewrites
    with p.open("r", encoding=DEFAULT_FILE_ENCODING, newline="") as f:
        return f.read()


def read_source_bytes(path: Union[Path, str]) -> bytes:
    p = Path(path) if not isinstance(path, Path) else path
    return p.read_bytes()


def write_file_atomic(path: Union[Path, str], data: Union[str, bytes]) -> None:
    """
    Replace ``path`` with ``data``.

    The content is written to a temporary sibling first and renamed over the
    original, so a crash mid-write never leaves a half-written file. The
    original file mode is kept. The temp file is removed on every failure
    path and the error propagates to the caller.
    """
    p = Path(path) if not isinstance(path, Path) else path
    payload = data.encode(DEFAULT_FILE_ENCODING) if isinstance(data, str) else data

    try:
        mode = p.stat().st_mode & 0o777
    except FileNotFoundError:
        mode = 0o644

    fd, tmp_name = tempfile.mkstemp(prefix=f".{p.name}.", suffix=".tmp", dir=str(p.parent))
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, p)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
