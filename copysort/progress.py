"""Progress reporting for transfer runs."""

from typing import Optional

from rich.progress import Progress, TaskID

from .stats import TransferStats, human_duration, human_size

DESCRIPTION = "[cyan]Copying...[/cyan]"


class ProgressContext:
    """Advances a rich progress task as transfers commit.

    Inactive (no progress bar) contexts accept every call and do nothing, so
    workers never need to check whether a bar is being rendered.
    """

    def __init__(self, progress: Optional[Progress] = None, task: Optional[TaskID] = None,
                 stats: Optional[TransferStats] = None, pending: int = 0):
        self.progress = progress
        self.task = task
        self.stats = stats
        self.pending = pending

    @property
    def is_active(self) -> bool:
        return self.progress is not None and self.task is not None

    def describe(self) -> str:
        """Description with the recent copy rate and ETA, once known."""
        if self.stats is None:
            return DESCRIPTION
        rate = self.stats.throughput()
        eta = self.stats.eta(max(self.pending - self.stats.files, 0))
        if rate is None or eta is None:
            return DESCRIPTION
        return (f"[cyan]Copying[/cyan] ({human_size(self.stats.bytes)} @ "
                f"{human_size(int(rate))}/s, ETA {human_duration(eta)})")

    def advance(self, steps: int = 1) -> None:
        if self.is_active:
            self.progress.update(self.task, advance=steps, description=self.describe())
