"""
Command-line interface for copysort.
"""

import argparse
import functools
import logging
import sys
import zoneinfo
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from .config import Config
from .constants import DEFAULT_WORKERS, MANIFEST_FILENAME, PROGRAM, get_console, get_logger
from .core import TransferEngine
from .exceptions import ManifestError
from .history import HistoryManager
from .manifest import ManifestWriter, load_manifest
from .progress import DESCRIPTION, ProgressContext
from .router import Router
from .scanner import scan_source
from .stats import TransferStats, human_duration, human_size
from .timestamps import extract_capture_time, resolve_timezone


def parse_workers(value: str) -> int:
    """Convert a worker count argument to a positive integer."""
    try:
        workers = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid worker count: {value}")
    if workers < 1:
        raise argparse.ArgumentTypeError(f"Worker count must be at least 1: {value}")
    return workers


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    from . import __version__

    parser = argparse.ArgumentParser(
        prog=PROGRAM,
        description="Incrementally copy a directory tree, sorting photos and videos by date",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {PROGRAM} /media/sdcard ~/Backup
  {PROGRAM} --manifest ~/card.manifest /media/sdcard ~/Backup
        """
    )

    parser.add_argument("source", help="Source directory to copy from")
    parser.add_argument("dest", help="Destination directory to copy into")
    parser.add_argument(
        "--manifest", metavar="PATH",
        help=f"Manifest of already-copied files (default: ~/{MANIFEST_FILENAME})"
    )
    parser.add_argument(
        "--workers", "-w", type=parse_workers, metavar="N",
        help="Number of parallel copy workers (default: 8)"
    )
    parser.add_argument(
        "--timezone", "--tz", type=str, metavar="TIMEZONE",
        help="Timezone for capture times recorded with a UTC offset (default: local)"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--version", "-V", action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def setup_logging(console: Console, verbose: bool) -> logging.Logger:
    """Route copysort log records through a rich console handler."""
    logger = get_logger()
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)
    level = logging.DEBUG if verbose else logging.WARNING
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
    return logger


def load_config(config_path: Optional[Path]) -> Optional[Config]:
    """Load the user config; None when there is no home directory to find it in."""
    try:
        return Config(config_path=config_path)
    except (RuntimeError, KeyError) as e:
        get_logger().debug(f"No user config available: {e}")
        return None


def resolve_manifest_path(manifest_arg: Optional[str], config: Optional[Config]) -> Path:
    """Pick the manifest from --manifest, then the config file, then the home default.

    Raises RuntimeError (or KeyError) when the home directory cannot be resolved.
    """
    if manifest_arg:
        return Path(manifest_arg).expanduser()
    if config is not None and config.get_manifest():
        return Path(config.get_manifest()).expanduser()
    return Path.home() / MANIFEST_FILENAME


def create_progress(console: Console) -> Progress:
    return Progress(
        TextColumn("{task.description}"),
        BarColumn(bar_width=40),
        MofNCompleteColumn(),
        console=console,
        transient=True,
        refresh_per_second=10,
    )


def main(config_path: Optional[Path] = None) -> int:
    """Main entry point.

    Args:
        config_path: Optional path to config file (for testing)
    """
    parser = create_parser()
    args = parser.parse_args()

    console = get_console()
    logger = setup_logging(console, args.verbose)
    config = load_config(config_path)

    workers = args.workers or (config.get_workers() if config else DEFAULT_WORKERS)
    timezone = args.timezone or (config.get_timezone() if config else None)
    try:
        zone = resolve_timezone(timezone)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError) as e:
        print(f"Error: Unknown timezone {timezone}: {e}")
        return 1

    # Options given on the command line become the saved defaults
    if config is not None:
        if args.workers:
            config.update_workers(args.workers)
        if args.timezone:
            config.update_timezone(args.timezone)

    try:
        manifest_path = resolve_manifest_path(args.manifest, config)
    except (RuntimeError, KeyError) as e:
        print(f"Error: Failed to get user home dir: {e}")
        return 1
    console.print(f"Using manifest {escape(str(manifest_path))}", soft_wrap=True, highlight=False)

    source = Path(args.source).expanduser()
    dest = Path(args.dest).expanduser()
    if not source.is_dir():
        logger.warning(f"Source is not a readable directory: {source}")

    copied = load_manifest(manifest_path)
    scan = scan_source(source, copied)
    logger.info(f"Found {len(scan.jobs)} pending files, {scan.already_copied} already copied")

    if not scan.jobs:
        console.print("No files to copy. You're done!", soft_wrap=True, highlight=False)
        return 0

    try:
        manifest = ManifestWriter(manifest_path)
    except ManifestError as e:
        print(f"Error: {e}")
        return 1

    stats = TransferStats()
    router = Router(source, dest, extractor=functools.partial(extract_capture_time, tz=zone))
    with manifest, create_progress(console) as progress:
        task = progress.add_task(DESCRIPTION, total=scan.total, completed=scan.already_copied)
        progress_ctx = ProgressContext(progress, task, stats=stats)
        engine = TransferEngine(source, router, manifest, stats=stats,
                                progress_ctx=progress_ctx, workers=workers)
        engine.run(scan.jobs)

    elapsed = stats.elapsed
    console.print(
        f"\n✅ Done: {stats.files} files, {human_size(stats.bytes)} copied in "
        f"{human_duration(elapsed)} ({stats.average_mb_per_second(elapsed):.2f} MB/s)",
        soft_wrap=True, highlight=False
    )
    if stats.failed:
        console.print(f"[yellow]{stats.failed} files skipped (will retry next run)[/yellow]",
                      soft_wrap=True, highlight=False)

    if config is not None:
        try:
            HistoryManager(config.program_root).log_transfer_summary(
                source, dest, manifest_path, stats, elapsed)
        except OSError as e:
            logger.warning(f"Could not write transfer history: {e}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
