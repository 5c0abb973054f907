"""
pytest configuration and fixtures for copysort tests.
"""

import io
import os
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List

import pytest


@dataclass
class CliResult:
    """Result from running CLI command."""
    exit_code: int
    output: str
    error: str


@pytest.fixture
def test_config_path(tmp_path):
    """Isolated config path so tests never touch ~/.copysort."""
    return tmp_path / "copysort_config" / "config.yml"


@pytest.fixture
def manifest_path(tmp_path):
    return tmp_path / "manifest.txt"


@pytest.fixture
def cli_runner():
    """Create a CLI runner that captures output and uses test config."""

    def run_cli(*args, config_path=None):
        """Run copysort CLI with given arguments.

        Args:
            *args: Command line arguments (source, dest, --flags, etc)
            config_path: Optional config path for test isolation

        Returns:
            CliResult with exit_code, output, and error
        """
        from copysort.cli import main

        old_stdout = sys.stdout
        old_stderr = sys.stderr
        old_argv = sys.argv
        stdout = io.StringIO()
        stderr = io.StringIO()

        try:
            sys.stdout = stdout
            sys.stderr = stderr
            sys.argv = ['copysort'] + [str(a) for a in args]

            exit_code = main(config_path=config_path)

            return CliResult(
                exit_code=exit_code,
                output=stdout.getvalue(),
                error=stderr.getvalue()
            )
        except SystemExit as e:
            return CliResult(
                exit_code=e.code if e.code is not None else 0,
                output=stdout.getvalue(),
                error=stderr.getvalue()
            )
        finally:
            sys.stdout = old_stdout
            sys.stderr = old_stderr
            sys.argv = old_argv

    return run_cli


def set_mtime(path: Path, when: datetime) -> None:
    stamp = when.timestamp()
    os.utime(path, (stamp, stamp))


@pytest.fixture
def create_test_files(tmp_path):
    """Helper to create a source tree with specific files."""

    def create_files(file_specs: List[dict]) -> Path:
        """Create test files based on specifications.

        Args:
            file_specs: List of dicts with keys:
                - name: path relative to the source root
                - content: file content (optional)
                - mtime: modification time as datetime (optional)

        Returns:
            Path to the source root
        """
        source = tmp_path / "source"
        source.mkdir(exist_ok=True)

        for spec in file_specs:
            file_path = source / spec['name']
            file_path.parent.mkdir(parents=True, exist_ok=True)

            content = spec.get('content', b'test file content')
            if isinstance(content, str):
                file_path.write_text(content)
            else:
                file_path.write_bytes(content)

            if 'mtime' in spec:
                set_mtime(file_path, spec['mtime'])

        return source

    return create_files


@pytest.fixture
def no_metadata():
    """Capture-time extractor that never finds metadata."""
    from copysort.exceptions import NoMetadata

    def extractor(path: Path) -> datetime:
        raise NoMetadata(f"No capture time in {path}")

    return extractor
