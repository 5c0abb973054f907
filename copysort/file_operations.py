"""
File copy primitive used by the transfer workers.
"""

import os
import shutil
from pathlib import Path

from .constants import COPY_BUFFER_SIZE


def ensure_directory(directory: Path) -> None:
    """Create directory and parents if needed."""
    directory.mkdir(parents=True, exist_ok=True)


def copy_file(source: Path, dest: Path, mtime: float) -> int:
    """Copy source to dest and stamp dest with the source modification time.

    An existing dest is truncated. Returns the number of bytes written. Any
    OSError propagates; a partially written dest is left in place.
    """
    ensure_directory(dest.parent)

    with open(source, 'rb') as fsrc, open(dest, 'wb') as fdst:
        shutil.copyfileobj(fsrc, fdst, COPY_BUFFER_SIZE)
        copied = fdst.tell()

    os.utime(dest, (mtime, mtime))
    return copied
