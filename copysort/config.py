"""
Configuration management for copysort.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

import yaml

from .constants import DEFAULT_WORKERS, PROGRAM


class Config:
    """Manages configuration file for storing user preferences."""

    def __init__(self, config_path: Optional[Path] = None):
        # Default config location: ~/.<PROGRAM>/config.yml
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = Path.home() / f".{PROGRAM}" / "config.yml"
        self.program_root = self.config_path.parent
        self.data = self._load_config()

    def _load_config(self) -> Dict:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except Exception as e:
            logger = logging.getLogger(PROGRAM)
            logger.warning(f"Could not load config: {e}")
            return {}

        if not isinstance(data, dict):
            logging.getLogger(PROGRAM).warning(f"Ignoring malformed config: {self.config_path}")
            return {}
        return data

    def save_config(self) -> None:
        """Save current configuration to file."""
        self.program_root.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.config_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(self.data, f, default_flow_style=False)
        except Exception as e:
            logger = logging.getLogger(PROGRAM)
            logger.error(f"Could not save config: {e}")

    def get_manifest(self) -> Optional[str]:
        """Get the configured manifest path, if any."""
        return self.data.get('manifest')

    def get_workers(self) -> int:
        """Get the worker count (default: 8)."""
        try:
            workers = int(self.data.get('workers', DEFAULT_WORKERS))
        except (TypeError, ValueError):
            return DEFAULT_WORKERS
        return workers if workers > 0 else DEFAULT_WORKERS

    def get_timezone(self) -> Optional[str]:
        """Get the saved timezone setting."""
        return self.data.get('timezone')

    def update_workers(self, workers: int) -> None:
        self.data['workers'] = workers
        self.save_config()

    def update_timezone(self, timezone: str) -> None:
        """Update and save the timezone setting."""
        self.data['timezone'] = timezone
        self.save_config()
