"""
Exceptions raised by copysort.
"""


class CopySortError(Exception):
    """Base class for fatal copysort errors."""


class ManifestError(CopySortError):
    """The manifest file cannot be opened for append."""


class NoMetadata(Exception):
    """No capture time could be extracted from a media file."""
