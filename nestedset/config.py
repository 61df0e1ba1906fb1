"""
Configuration management for nestedset.

This module handles loading and accessing configuration values from
nestedset.yaml. Values found in the file are merged over built-in defaults,
so a file only needs to name the settings it changes.
"""

import copy
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
import logging

from .models.settings import ConversionSettings


DEFAULT_CONFIG: Dict[str, Any] = {
    "fields": {
        "id": "id",
        "parent_id": "parent_id",
        "left": "left",
        "right": "right",
        "depth": "depth",
        "children": "children",
        "position": None,
        "parent_position": None,
        "child_count": None
    },
    "output": {
        "emit_depth": True
    },
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "file": None
    }
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge `override` into a copy of `base`."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """
    Manages configuration loading and access for nestedset.
    """

    def __init__(self, config_path: str = "nestedset.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from the YAML file, falling back to defaults."""
        if not self.config_path.exists():
            logging.debug(f"No configuration file at {self.config_path}, using defaults")
            self._config = copy.deepcopy(DEFAULT_CONFIG)
            return

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}

            if not isinstance(loaded, dict):
                raise ValueError(f"expected a mapping at the top level, got {type(loaded).__name__}")

            self._config = _merge(DEFAULT_CONFIG, loaded)
            logging.info(f"Configuration loaded from {self.config_path}")

        except (OSError, yaml.YAMLError, ValueError) as e:
            logging.error(f"Failed to load configuration from {self.config_path}: {e}")
            self._config = copy.deepcopy(DEFAULT_CONFIG)

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "fields.id")
            default: Default value if key is not found

        Returns:
            The configuration value

        Examples:
            config.get("fields.parent_id")  # Returns "parent_id"
            config.get("output.emit_depth")  # Returns True
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.

        Args:
            section: Name of the configuration section

        Returns:
            Dictionary containing the section configuration
        """
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    # Convenience properties for commonly used values

    @property
    def id_field(self) -> str:
        return self.get("fields.id", "id")

    @property
    def parent_field(self) -> str:
        return self.get("fields.parent_id", "parent_id")

    @property
    def left_field(self) -> str:
        return self.get("fields.left", "left")

    @property
    def right_field(self) -> str:
        return self.get("fields.right", "right")

    @property
    def depth_field(self) -> str:
        return self.get("fields.depth", "depth")

    @property
    def children_field(self) -> str:
        return self.get("fields.children", "children")

    @property
    def emit_depth(self) -> bool:
        return bool(self.get("output.emit_depth", True))

    @property
    def log_level(self) -> str:
        return str(self.get("logging.level", "INFO")).upper()

    @property
    def log_format(self) -> str:
        return self.get("logging.format", DEFAULT_CONFIG["logging"]["format"])

    @property
    def log_file(self) -> Optional[str]:
        """Optional log file; None logs to stderr only."""
        return self.get("logging.file")

    def conversion_settings(self) -> ConversionSettings:
        """
        Build validated conversion settings from the configured field names.

        Raises:
            pydantic.ValidationError: If the configured names are empty or collide
        """
        return ConversionSettings(
            id_field=self.id_field,
            parent_field=self.parent_field,
            left_field=self.left_field,
            right_field=self.right_field,
            depth_field=self.depth_field,
            emit_depth=self.emit_depth,
            position_field=self.get("fields.position"),
            parent_position_field=self.get("fields.parent_position"),
            child_count_field=self.get("fields.child_count"),
            children_field=self.children_field,
        )


# Global configuration instance
config = ConfigManager()


def get_config() -> ConfigManager:
    """
    Get the global configuration instance.

    Returns:
        The global ConfigManager instance
    """
    return config
