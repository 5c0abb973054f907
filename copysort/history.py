"""
Transfer history for copysort.
"""

from datetime import datetime
from pathlib import Path

from .stats import TransferStats, human_duration, human_size


class HistoryManager:
    """Appends one summary line per completed run to transfers.log."""

    def __init__(self, root_dir: Path):
        self.root_dir = root_dir
        self.transfers_log = self.root_dir / "transfers.log"

    def log_transfer_summary(self, source: Path, dest: Path, manifest_path: Path,
                             stats: TransferStats, elapsed: float) -> None:
        """Log run summary to the global transfers.log."""
        self.root_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        status = "SUCCESS" if stats.failed == 0 else "PARTIAL"
        summary = (
            f"{timestamp} | {status} | "
            f"Source: {source} | Dest: {dest} | Manifest: {manifest_path} | "
            f"Files: {stats.files} | Size: {human_size(stats.bytes)} | "
            f"Skipped: {stats.failed} | Elapsed: {human_duration(elapsed)}\n"
        )

        with open(self.transfers_log, 'a', encoding='utf-8') as f:
            f.write(summary)
