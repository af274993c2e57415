"""Configuration management for the Seaweed CLI."""

import json
import os
import shutil
import tempfile
from pathlib import Path

from common.constants import DEFAULT_FILER_PORT, DEFAULT_MASTER_PORT, DEFAULT_TIMEOUT_SECONDS
from common.logging_config import get_logger
from seaweed.config import FilerConfig, MasterConfig

logger = get_logger(__name__)


class Config:
    """Manages CLI configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "master_host": os.environ.get("SEAWEED_MASTER_HOST", "localhost"),
        "master_port": int(os.environ.get("SEAWEED_MASTER_PORT", str(DEFAULT_MASTER_PORT))),
        "filer_host": os.environ.get("SEAWEED_FILER_HOST", "localhost"),
        "filer_port": int(os.environ.get("SEAWEED_FILER_PORT", str(DEFAULT_FILER_PORT))),
        "https": False,
        "timeout": DEFAULT_TIMEOUT_SECONDS,
    }

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.seaweed/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.seaweed' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (json.JSONDecodeError, IOError) as e:
                backup_path = self.config_path.with_suffix('.json.bak')
                logger.warning(f"Unreadable config {self.config_path}: {e}, backing up to {backup_path}")
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError as copy_error:
                    logger.warning(f"Config backup failed: {copy_error}")
                return self.DEFAULT_CONFIG.copy()

        config = self.DEFAULT_CONFIG.copy()
        try:
            with open(self.config_path, 'w') as f:
                json.dump(config, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not write default config {self.config_path}: {e}")
        return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not save config {self.config_path}: {e}")

    def get_timeout(self) -> float:
        """
        Get request timeout in seconds.

        Returns:
            Timeout value in seconds
        """
        return float(self.data.get('timeout', DEFAULT_TIMEOUT_SECONDS))

    def get_master_config(self) -> MasterConfig:
        """
        Build master connection settings.

        Returns:
            MasterConfig for the configured master
        """
        return MasterConfig(
            host=self.data.get('master_host', 'localhost'),
            port=self.data.get('master_port', DEFAULT_MASTER_PORT),
            https=bool(self.data.get('https', False)),
            timeout=self.get_timeout(),
        )

    def get_filer_config(self) -> FilerConfig:
        """
        Build filer connection settings.

        Returns:
            FilerConfig for the configured filer
        """
        return FilerConfig(
            host=self.data.get('filer_host', 'localhost'),
            port=self.data.get('filer_port', DEFAULT_FILER_PORT),
            https=bool(self.data.get('https', False)),
            timeout=self.get_timeout(),
        )
