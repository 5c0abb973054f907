"""
File extension constants, defaults, and shared helpers for copysort.
"""

import logging
import os
import shutil
from functools import lru_cache

from rich.console import Console

PROGRAM = "copysort"

# Extension classes (lower-cased, with leading dot)
MEDIA_EXTENSIONS = (".jpg", ".jpeg", ".mp4", ".mov", ".avi", ".3gp")
MOVIE_EXTENSIONS = (".mp4", ".mov", ".avi", ".3gp")
EXCLUDED_EXTENSIONS = (".png", ".webp", ".gif")

# Any source path containing this substring is never scanned
RECYCLE_BIN_MARKER = "RECYCLE.BIN"

SORTED_PHOTOS_DIR = "sorted_photos"
MANIFEST_FILENAME = ".copy_sort_manifest.txt"

DEFAULT_WORKERS = 8
SAMPLE_WINDOW = 20
COPY_BUFFER_SIZE = 1024 * 1024

_console = None


def get_console() -> Console:
    """Shared console for progress, logging, and summaries."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def get_logger() -> logging.Logger:
    return logging.getLogger(PROGRAM)


@lru_cache(maxsize=None)
def check_tool_availability(cmd: str) -> bool:
    """Check whether an external command is on PATH."""
    return shutil.which(cmd) is not None


def file_extension(path) -> str:
    """Lower-cased extension from the last dot of the base name, dot included.

    Unlike Path.suffix, a name that is only an extension (".png") counts as
    one, and a trailing dot yields ".".
    """
    name = os.path.basename(os.fspath(path))
    dot = name.rfind(".")
    return name[dot:].lower() if dot != -1 else ""
