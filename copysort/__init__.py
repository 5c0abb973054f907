"""
copysort - Incrementally copy a directory tree, sorting photos and videos by date.

Photos and videos are filed under sorted_photos/YYYY/MM/DD by their embedded
capture time; every other file keeps its relative path. A manifest of copied
files makes repeated runs resume where the last one stopped.
"""

__version__ = "1.0.0"


# Public API
from .cli import main
from .config import Config
from .core import TransferEngine, partition
from .manifest import ManifestWriter, load_manifest
from .router import Classification, Router, classify
from .scanner import ScanResult, scan_source
from .stats import TransferStats
from .timestamps import extract_capture_time

__all__ = [ "main", "Config", "TransferEngine", "partition", "ManifestWriter", "load_manifest",
            "Classification", "Router", "classify", "ScanResult", "scan_source", "TransferStats",
            "extract_capture_time" ]
