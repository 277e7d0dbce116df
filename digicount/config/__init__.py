"""Simple YAML configuration loader for DigiCount."""

import copy
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from ..errors import ConfigurationError
from ..models.transcription import DigitMappingPolicy

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    "audio": {
        "sample_rate": 16000,
        "chunk_size": 1024,
        "channels": 1,
    },
    "google_cloud": {
        "language": "en-US",
    },
    "counting": {
        "aggressive_mapping": True,
        "pause_threshold_seconds": 2.0,
        "timer_interval_seconds": 0.25,
    },
    "storage": {
        "data_directory": "data",
    },
    "verification": {
        "reference_length": 10000,
    },
    "logging": {
        "level": "INFO",
        "file_path": "data/logs/digicount.log",
        "console_output": True,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` on top of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class DigiCountConfig:
    """DigiCount configuration loader."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, built-in defaults
                        are used with paths relative to the working directory.
        """
        self.config_file: Optional[Path] = Path(config_path) if config_path else None

        if self.config_file is None:
            logger.info("No configuration file given, using defaults")
            self.config = copy.deepcopy(DEFAULT_CONFIG)
            return

        if not self.config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_file}")

        logger.info(f"Loading configuration from: {self.config_file}")
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        if not loaded:
            raise ConfigurationError("Configuration file is empty")
        if not isinstance(loaded, dict):
            raise ConfigurationError("Configuration file must contain a mapping")

        config = _merge(DEFAULT_CONFIG, loaded)
        self._resolve_paths(config)

        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        for section, key in (
            ('google_cloud', 'credentials_path'),
            ('storage', 'data_directory'),
            ('logging', 'file_path'),
            ('verification', 'reference_file'),
        ):
            value = config.get(section, {}).get(key)
            if value and not os.path.isabs(value):
                config[section][key] = str(config_dir / value)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'counting.pause_threshold_seconds').

        Args:
            key_path: Dot-separated key path
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value
            value: Value to set
        """
        keys = key_path.split('.')
        config_dict = self.config

        for key in keys[:-1]:
            if key not in config_dict:
                config_dict[key] = {}
            config_dict = config_dict[key]

        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def get_google_credentials_path(self) -> Optional[str]:
        """Get Google credentials path, or None when not configured.

        A missing path is not an error here: the permission check reports it
        as a denied speech authorization.
        """
        creds_path = self.get('google_cloud.credentials_path')
        if not creds_path:
            return None
        return str(Path(creds_path).absolute())

    def get_data_directory(self) -> str:
        """Get data directory path."""
        data_dir = self.get('storage.data_directory', 'data')
        return str(Path(data_dir).absolute())

    def get_mapping_policy(self) -> DigitMappingPolicy:
        """Get the configured word→digit mapping policy."""
        if self.get('counting.aggressive_mapping', True):
            return DigitMappingPolicy.AGGRESSIVE
        return DigitMappingPolicy.STRICT

    def get_pause_threshold(self) -> float:
        """Get the silence gap (seconds) that produces a pause marker."""
        threshold = self.get('counting.pause_threshold_seconds', 2.0)
        try:
            threshold = float(threshold)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid pause threshold: {threshold!r}") from e
        if threshold < 0:
            raise ConfigurationError(f"Pause threshold must be >= 0, got {threshold}")
        return threshold
