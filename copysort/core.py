"""
Core transfer engine: static job partitioning and parallel copy workers.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, TypeVar

from .constants import DEFAULT_WORKERS, get_logger
from .file_operations import copy_file
from .manifest import ManifestWriter
from .progress import ProgressContext
from .router import Router
from .stats import TransferStats

T = TypeVar("T")


def partition(jobs: Sequence[T], workers: int) -> List[List[T]]:
    """Split jobs into at most `workers` contiguous chunks of equal size.

    The last chunk takes whatever remains; empty chunks are dropped.
    """
    if workers < 1:
        raise ValueError(f"workers must be positive, got {workers}")
    if not jobs:
        return []

    chunk_size = -(-len(jobs) // workers)
    return [list(jobs[start:start + chunk_size])
            for start in range(0, len(jobs), chunk_size)]


class TransferEngine:
    """Copies a fixed job list with a pool of worker threads.

    Each worker drains one statically assigned chunk. A job that fails at any
    step is abandoned without a manifest entry, so the next run picks it up
    again; nothing is retried within a run.
    """

    def __init__(self, source: Path, router: Router, manifest: ManifestWriter,
                 stats: Optional[TransferStats] = None,
                 progress_ctx: Optional[ProgressContext] = None,
                 workers: int = DEFAULT_WORKERS):
        self.source = source
        self.router = router
        self.manifest = manifest
        self.stats = stats or TransferStats()
        self.progress_ctx = progress_ctx or ProgressContext()
        self.workers = workers
        self.logger = get_logger()

    def run(self, jobs: Sequence[Path]) -> TransferStats:
        """Transfer every job and wait for all workers to finish."""
        chunks = partition(jobs, self.workers)
        self.progress_ctx.pending = len(jobs)
        self.logger.info(f"Transferring {len(jobs)} files with {len(chunks)} workers")

        if chunks:
            with ThreadPoolExecutor(max_workers=len(chunks)) as executor:
                futures = [executor.submit(self._process_chunk, chunk) for chunk in chunks]
                for future in futures:
                    future.result()

        return self.stats

    def _process_chunk(self, chunk: List[Path]) -> None:
        for file_path in chunk:
            self.transfer_one(file_path)

    def transfer_one(self, file_path: Path) -> bool:
        """Copy one job; returns True when it was committed to the manifest."""
        try:
            mtime = os.stat(file_path).st_mtime
        except OSError as e:
            self.logger.debug(f"Skipping {file_path}: {e}")
            self.stats.record_failure()
            return False

        relative_path = os.path.relpath(file_path, self.source)
        dest_path = self.router.destination_for(file_path, mtime)
        if dest_path is None:
            self.stats.record_excluded()
            return False

        try:
            copied = copy_file(file_path, dest_path, mtime)
        except OSError as e:
            self.logger.debug(f"Failed to copy {file_path} -> {dest_path}: {e}")
            self.stats.record_failure()
            return False

        try:
            self.manifest.append(relative_path)
        except (OSError, ValueError) as e:
            # The copy stays on disk but is not committed; the next run redoes it
            self.logger.warning(f"Could not record {relative_path} in manifest: {e}")
            self.stats.record_failure()
            return False

        self.stats.record_transfer(copied)
        self.progress_ctx.advance()
        self.logger.debug(f"{file_path} -> {dest_path}")
        return True
