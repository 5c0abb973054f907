"""
Manifest of relative paths already transferred.

The manifest is plain newline-delimited text: one source-relative path per
line, UTF-8, no header. It is only ever appended to, so manifests from
separate runs can be concatenated. Paths containing newlines are not escaped.

File names are arbitrary bytes on POSIX. Bytes that are not valid UTF-8 are
carried through surrogateescape, the same way os.fsdecode hands them to us,
so such names are written back byte for byte and match again on reload.
"""

import threading
from pathlib import Path
from typing import FrozenSet, Optional, TextIO, Union

from .constants import get_logger
from .exceptions import ManifestError

ENCODING = 'utf-8'
ERRORS = 'surrogateescape'


def load_manifest(path: Union[str, Path]) -> FrozenSet[str]:
    """Load the set of relative paths recorded in the manifest.

    A missing or unreadable manifest is a fresh start, not an error.
    """
    logger = get_logger()
    try:
        with open(path, 'r', encoding=ENCODING, errors=ERRORS) as f:
            entries = frozenset(line.rstrip('\n') for line in f if line.strip('\n'))
    except OSError as e:
        logger.debug(f"No usable manifest at {path}: {e}")
        return frozenset()

    logger.debug(f"Loaded {len(entries)} manifest entries from {path}")
    return entries


class ManifestWriter:
    """Append-only manifest sink shared by all transfer workers."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()
        self.count = 0
        try:
            self._file: Optional[TextIO] = open(self.path, 'a', encoding=ENCODING, errors=ERRORS)
        except OSError as e:
            raise ManifestError(f"Failed to open manifest {self.path}: {e}") from e

    def append(self, relative_path: str) -> None:
        """Record one completed transfer; the line is flushed before returning."""
        with self._lock:
            self._file.write(relative_path + '\n')
            self._file.flush()
            self.count += 1

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def __enter__(self) -> "ManifestWriter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
