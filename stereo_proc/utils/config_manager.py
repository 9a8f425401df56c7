"""
Configuration Management System

Handles loading, validation, and management of system parameters.
"""

import yaml
from typing import Dict, Any, Optional
from pathlib import Path


MATCHER_TYPES = ('block_matching', 'sgbm')


class ConfigManager:
    """Manages configuration parameters for the stereo processing pipeline."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to configuration file. If None, uses default config.
        """
        self.config_path = config_path or self._get_default_config_path()
        self.config = self._load_config()
        self._validate_config()

    def _get_default_config_path(self) -> str:
        """Get path to default configuration file."""
        current_dir = Path(__file__).parent.parent.parent
        return str(current_dir / "config" / "default_config.yaml")

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_path, 'r') as file:
                config = yaml.safe_load(file)
            return config or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing configuration file: {e}")

    def _validate_config(self) -> None:
        """Validate configuration parameters for consistency and feasibility."""
        matcher = self.config.get('matcher', {})

        matcher_type = matcher.get('type', 'block_matching')
        if matcher_type not in MATCHER_TYPES:
            raise ValueError(f"Unknown matcher type '{matcher_type}', expected one of {MATCHER_TYPES}")

        disparity_range = matcher.get('disparity_range', 64)
        if disparity_range <= 0 or disparity_range % 16 != 0:
            raise ValueError("matcher disparity_range must be a positive multiple of 16")

        window = matcher.get('correlation_window_size', 15)
        if window % 2 == 0 or window < 5:
            raise ValueError("matcher correlation_window_size must be odd and at least 5")

        prefilter_size = matcher.get('prefilter_size', 9)
        if prefilter_size % 2 == 0 or not 5 <= prefilter_size <= 255:
            raise ValueError("matcher prefilter_size must be odd and between 5 and 255")

        prefilter_cap = matcher.get('prefilter_cap', 31)
        if not 1 <= prefilter_cap <= 63:
            raise ValueError("matcher prefilter_cap must be between 1 and 63")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'matcher.correlation_window_size')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'matcher.disparity_range')
            value: Value to set
        """
        keys = key.split('.')
        config_ref = self.config

        for k in keys[:-1]:
            if k not in config_ref:
                config_ref[k] = {}
            config_ref = config_ref[k]

        config_ref[keys[-1]] = value
        self._validate_config()

    def save(self, output_path: Optional[str] = None) -> None:
        """
        Save current configuration to file.

        Args:
            output_path: Path to save configuration. If None, overwrites current file.
        """
        save_path = output_path or self.config_path

        with open(save_path, 'w') as file:
            yaml.dump(self.config, file, default_flow_style=False, indent=2)

    def get_matcher_params(self) -> Dict[str, Any]:
        """Get stereo matcher parameters as a dictionary."""
        return self.config.get('matcher', {})

    def get_mono_params(self) -> Dict[str, Any]:
        """Get monocular stage parameters as a dictionary."""
        return self.config.get('mono', {})
