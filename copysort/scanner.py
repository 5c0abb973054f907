"""
Source tree scanning against the manifest.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import AbstractSet, List

from .constants import RECYCLE_BIN_MARKER, get_logger


@dataclass
class ScanResult:
    """Pending jobs in traversal order plus the count already in the manifest."""
    jobs: List[Path] = field(default_factory=list)
    already_copied: int = 0

    @property
    def total(self) -> int:
        return len(self.jobs) + self.already_copied


def _ignore_walk_error(error: OSError) -> None:
    # Unreadable directories are left out of the job list
    get_logger().debug(f"Skipping unreadable path: {error}")


def scan_source(source: Path, copied: AbstractSet[str]) -> ScanResult:
    """Find every regular file under source that is not yet in the manifest."""
    result = ScanResult()
    root = str(source)

    for dirpath, _, filenames in os.walk(root, onerror=_ignore_walk_error):
        for filename in filenames:
            path = os.path.join(dirpath, filename)
            if not os.path.isfile(path):
                continue

            # Plain substring match on the whole path, not a segment match
            if RECYCLE_BIN_MARKER in path:
                continue

            relative_path = os.path.relpath(path, root)
            if relative_path in copied:
                result.already_copied += 1
            else:
                result.jobs.append(Path(path))

    return result
