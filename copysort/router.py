"""
File classification and destination routing.
"""

import enum
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from .constants import (EXCLUDED_EXTENSIONS, MEDIA_EXTENSIONS, SORTED_PHOTOS_DIR, file_extension,
                        get_logger)
from .timestamps import CaptureTimeExtractor, extract_capture_time


class Classification(enum.Enum):
    MEDIA = "media"
    EXCLUDED = "excluded"
    OTHER = "other"


def classify(path: Path) -> Classification:
    """Classify a file by its lower-cased extension."""
    ext = file_extension(path)
    if ext in EXCLUDED_EXTENSIONS:
        return Classification.EXCLUDED
    if ext in MEDIA_EXTENSIONS:
        return Classification.MEDIA
    return Classification.OTHER


class Router:
    """Computes where each source file lands in the destination tree.

    Photos and videos go to sorted_photos/YYYY/MM/DD/<basename>, dated by
    their capture time or, failing that, their modification time. Everything
    else keeps its path relative to the source root.
    """

    def __init__(self, source: Path, dest: Path,
                 extractor: CaptureTimeExtractor = extract_capture_time):
        self.source = source
        self.dest = dest
        self.extractor = extractor
        self.logger = get_logger()

    def capture_date(self, file_path: Path, mtime: float) -> datetime:
        """Capture time from metadata, falling back to modification time."""
        try:
            return self.extractor(file_path)
        except Exception as e:
            self.logger.debug(f"Using mtime for {file_path}: {e}")
            return datetime.fromtimestamp(mtime)

    def destination_for(self, file_path: Path, mtime: float) -> Optional[Path]:
        """Destination path for file_path, or None if it is excluded."""
        classification = classify(file_path)
        if classification is Classification.EXCLUDED:
            return None

        if classification is Classification.MEDIA:
            taken = self.capture_date(file_path, mtime)
            return (self.dest / SORTED_PHOTOS_DIR / f"{taken.year:04d}" /
                    f"{taken.month:02d}" / f"{taken.day:02d}" / file_path.name)

        return self.dest / os.path.relpath(file_path, self.source)
