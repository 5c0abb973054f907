"""
Test file classification and destination routing.
"""

from datetime import datetime
from pathlib import Path

import pytest

from copysort.router import Classification, Router, classify


class TestClassify:
    """Test classification by extension."""

    @pytest.mark.parametrize("name", [
        "a.jpg", "a.JPG", "a.jpeg", "a.mp4", "a.MOV", "a.avi", "a.3gp", ".jpg", "dir/.MOV",
    ])
    def test_media(self, name):
        assert classify(Path(name)) is Classification.MEDIA

    @pytest.mark.parametrize("name", ["a.png", "a.PNG", "a.webp", "a.gif", ".png", "x.tar.gif"])
    def test_excluded(self, name):
        assert classify(Path(name)) is Classification.EXCLUDED

    @pytest.mark.parametrize("name", [
        "notes.txt", "Makefile", "raw.cr2", "a.heic", "archive.jpg.zip", "trailing.", ".bashrc",
        "photos.jpg/notes",
    ])
    def test_other(self, name):
        assert classify(Path(name)) is Classification.OTHER


class TestRouter:
    """Test destination paths for each classification."""

    def test_media_routed_by_capture_time(self, tmp_path):
        source, dest = tmp_path / "src", tmp_path / "dest"
        router = Router(source, dest, extractor=lambda p: datetime(2023, 5, 10, 10, 0, 0))
        mtime = datetime(2021, 1, 2, 12, 0).timestamp()

        result = router.destination_for(source / "camera" / "IMG_0001.jpg", mtime)

        assert result == dest / "sorted_photos" / "2023" / "05" / "10" / "IMG_0001.jpg"

    def test_media_falls_back_to_mtime(self, tmp_path, no_metadata):
        source, dest = tmp_path / "src", tmp_path / "dest"
        router = Router(source, dest, extractor=no_metadata)
        mtime = datetime(2021, 1, 2, 12, 0).timestamp()

        result = router.destination_for(source / "IMG_0002.JPG", mtime)

        assert result == dest / "sorted_photos" / "2021" / "01" / "02" / "IMG_0002.JPG"

    def test_any_extractor_error_falls_back_to_mtime(self, tmp_path):
        def broken(path):
            raise ValueError("corrupt file")

        router = Router(tmp_path / "src", tmp_path / "dest", extractor=broken)
        mtime = datetime(2019, 12, 31, 23, 0).timestamp()

        assert router.capture_date(tmp_path / "src" / "clip.mp4", mtime) == datetime(2019, 12, 31, 23, 0)

    def test_extractor_only_called_for_media(self, tmp_path):
        calls = []

        def extractor(path):
            calls.append(path)
            return datetime(2023, 5, 10)

        source, dest = tmp_path / "src", tmp_path / "dest"
        router = Router(source, dest, extractor=extractor)
        router.destination_for(source / "notes.txt", 0)
        router.destination_for(source / "image.png", 0)
        router.destination_for(source / "clip.mov", 0)

        assert calls == [source / "clip.mov"]

    def test_other_keeps_relative_path(self, tmp_path):
        source, dest = tmp_path / "src", tmp_path / "dest"
        router = Router(source, dest)

        assert router.destination_for(source / "docs" / "notes.txt", 0) == dest / "docs" / "notes.txt"

    def test_file_without_extension_keeps_relative_path(self, tmp_path):
        source, dest = tmp_path / "src", tmp_path / "dest"
        router = Router(source, dest)

        assert router.destination_for(source / "bin" / "README", 0) == dest / "bin" / "README"

    def test_excluded_has_no_destination(self, tmp_path):
        source, dest = tmp_path / "src", tmp_path / "dest"
        router = Router(source, dest)

        assert router.destination_for(source / "screenshot.png", 0) is None

    def test_bare_extension_name_is_excluded(self, tmp_path):
        """A file named just ".png" is a PNG, not an extensionless file."""
        source, dest = tmp_path / "src", tmp_path / "dest"
        router = Router(source, dest)

        assert router.destination_for(source / "screens" / ".png", 0) is None

    def test_bare_extension_name_is_dated(self, tmp_path, no_metadata):
        source, dest = tmp_path / "src", tmp_path / "dest"
        router = Router(source, dest, extractor=no_metadata)
        mtime = datetime(2021, 1, 2, 12, 0).timestamp()

        assert router.destination_for(source / ".jpg", mtime) == \
            dest / "sorted_photos" / "2021" / "01" / "02" / ".jpg"
