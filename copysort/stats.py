"""
Thread-safe statistics for transfer runs.
"""

import threading
import time
from collections import deque
from typing import Deque, Optional, Tuple

from .constants import SAMPLE_WINDOW


class TransferStats:
    """Aggregate counters shared by all transfer workers.

    Besides running totals, keeps a rolling window of the most recent
    (timestamp, cumulative bytes) samples for instantaneous throughput and
    ETA estimates.
    """

    def __init__(self, window: int = SAMPLE_WINDOW):
        self._lock = threading.Lock()
        self._samples: Deque[Tuple[float, int]] = deque(maxlen=window)
        self.start_time = time.monotonic()
        self.files = 0
        self.bytes = 0
        self.failed = 0
        self.excluded = 0

    def record_transfer(self, copied: int) -> int:
        """Record a committed job and return the new cumulative byte count."""
        with self._lock:
            self.files += 1
            self.bytes += copied
            self._samples.append((time.monotonic(), self.bytes))
            return self.bytes

    def record_failure(self) -> None:
        with self._lock:
            self.failed += 1

    def record_excluded(self) -> None:
        with self._lock:
            self.excluded += 1

    @property
    def samples(self) -> Tuple[Tuple[float, int], ...]:
        with self._lock:
            return tuple(self._samples)

    @property
    def elapsed(self) -> float:
        """Seconds since the stats were created."""
        return time.monotonic() - self.start_time

    def throughput(self) -> Optional[float]:
        """Bytes per second across the sample window."""
        samples = self.samples
        if len(samples) < 2:
            return None
        (t0, b0), (t1, b1) = samples[0], samples[-1]
        if t1 <= t0:
            return None
        return (b1 - b0) / (t1 - t0)

    def eta(self, remaining: int) -> Optional[float]:
        """Seconds left for `remaining` files at the recent per-file pace."""
        samples = self.samples
        if len(samples) < 2:
            return None
        span = samples[-1][0] - samples[0][0]
        return remaining * span / (len(samples) - 1)

    def average_mb_per_second(self, elapsed: Optional[float] = None) -> float:
        elapsed = self.elapsed if elapsed is None else elapsed
        if elapsed <= 0:
            return 0.0
        return self.bytes / 1024 / 1024 / elapsed


def human_size(size: int) -> str:
    """Format a byte count with binary units, e.g. 1.5 MB."""
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"


def human_duration(seconds: float) -> str:
    """Format a duration as 1h5m, 3m20s, or 42s."""
    whole = int(seconds)
    if seconds > 3600:
        return f"{whole // 3600}h{whole // 60 % 60}m"
    if seconds > 60:
        return f"{whole // 60}m{whole % 60}s"
    return f"{whole}s"
