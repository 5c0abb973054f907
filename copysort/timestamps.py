"""Capture-time extraction from embedded photo and video metadata."""

import json
import re
import subprocess
import zoneinfo
from datetime import datetime, timedelta, timezone, tzinfo
from pathlib import Path
from typing import Callable, Dict, Optional

from .constants import MOVIE_EXTENSIONS, check_tool_availability, file_extension, get_logger
from .exceptions import NoMetadata


logger = get_logger()

CaptureTimeExtractor = Callable[[Path], datetime]

# exiftool tags in priority order
EXIF_DATE_TAGS = (
    'SubSecDateTimeOriginal',
    'DateTimeOriginal',
    'SubSecCreateDate',
    'CreateDate',
    'CreationDate',
    'MediaCreateDate',
    'TrackCreateDate',
    'ModifyDate',
)

# ffprobe format tags in priority order
VIDEO_DATE_TAGS = ('com.apple.quicktime.creationdate', 'creation_time')

DATETIME_PATTERN = re.compile(
    r'(\d{4})[-:](\d{2})[-:](\d{2})[T ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?\s*(Z|[+-]\d{2}:?\d{2})?'
)


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """Look up an IANA zone name; None means the local system zone.

    Raises zoneinfo.ZoneInfoNotFoundError (or ValueError) for unknown names.
    """
    return zoneinfo.ZoneInfo(name) if name else None


def parse_metadata_datetime(timestamp_str: str, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Parse an EXIF or ISO 8601 date-time string into a naive datetime.

    Handles raw EXIF (2023:05:10 10:00:00), ISO 8601 (2023-05-10T10:00:00Z,
    2025-05-06T19:41:34-0400) and fractional seconds. Values without an offset
    are wall-clock capture times and are returned unchanged; values with an
    offset are converted to tz, or to the local zone when tz is None.
    """
    match = DATETIME_PATTERN.match(timestamp_str.strip())
    if not match:
        return None

    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction, offset = match.group(7), match.group(8)

    # Cameras without a clock write all zeros
    if year == 0:
        return None

    microsecond = int(fraction.ljust(6, '0')[:6]) if fraction else 0
    try:
        parsed = datetime(year, month, day, hour, minute, second, microsecond)
    except ValueError:
        return None

    if not offset:
        return parsed

    if offset == 'Z':
        recorded = timezone.utc
    else:
        sign = 1 if offset[0] == '+' else -1
        digits = offset[1:].replace(':', '')
        minutes = int(digits[:2]) * 60 + int(digits[2:4])
        recorded = timezone(timedelta(minutes=sign * minutes))

    return parsed.replace(tzinfo=recorded).astimezone(tz).replace(tzinfo=None)


def canonical_exif_date(tags: Dict[str, str], tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Pick the highest-priority parseable date tag."""
    for tag in EXIF_DATE_TAGS:
        value = tags.get(tag)
        if not isinstance(value, str):
            continue
        parsed = parse_metadata_datetime(value, tz)
        if parsed:
            return parsed
    return None


def get_exif_capture_time(file_path: Path, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Read capture time tags with exiftool."""
    if not check_tool_availability("exiftool"):
        return None

    try:
        result = subprocess.run(
            ["exiftool", "-q", "-json", "-fast2"]
            + [f"-{tag}" for tag in EXIF_DATE_TAGS]
            + [str(file_path)],
            capture_output=True, text=True, check=True
        )
        tags = json.loads(result.stdout)[0]
    except (subprocess.CalledProcessError, OSError) as e:
        logger.debug(f"exiftool failed for {file_path}: {e}")
        return None
    except (json.JSONDecodeError, IndexError, KeyError) as e:
        logger.debug(f"Unusable exiftool output for {file_path}: {e}")
        return None

    return canonical_exif_date(tags, tz)


def get_video_capture_time(file_path: Path, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Extract creation date from video container metadata with ffprobe."""
    if not check_tool_availability("ffprobe"):
        return None

    try:
        result = subprocess.run([
            "ffprobe", "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            str(file_path)
        ], capture_output=True, text=True, check=True)
        data = json.loads(result.stdout)
    except (subprocess.CalledProcessError, OSError) as e:
        logger.debug(f"ffprobe failed for {file_path}: {e}")
        return None
    except json.JSONDecodeError as e:
        logger.debug(f"Failed to parse ffprobe JSON output for {file_path}: {e}")
        return None

    tags = data.get("format", {}).get("tags", {})
    for date_key in VIDEO_DATE_TAGS:
        date_str = tags.get(date_key)
        if date_str:
            creation_date = parse_metadata_datetime(date_str, tz)
            if creation_date:
                return creation_date

    return None


def extract_capture_time(file_path: Path, tz: Optional[tzinfo] = None) -> datetime:
    """Return the capture time embedded in a photo or video.

    Raises NoMetadata when neither exiftool nor ffprobe yields a usable date.
    """
    capture_time = get_exif_capture_time(file_path, tz)
    if capture_time is None and file_extension(file_path) in MOVIE_EXTENSIONS:
        capture_time = get_video_capture_time(file_path, tz)

    if capture_time is None:
        raise NoMetadata(f"No capture time in {file_path}")
    return capture_time
