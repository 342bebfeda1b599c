"""
Configuration management for locallog.

Handles loading and merging configuration from:
- Built-in defaults
- A YAML configuration file
- Environment variables
"""

import copy
import os
from typing import Any, Dict, Optional

import yaml

DEFAULT_CONFIG: Dict[str, Any] = {
    "store": {
        "directory": "./logs",
    },
    "display": {
        "enabled": True,
        "line_spacing": 0,
    },
    "logging": {
        "level": "WARNING",
        "format": "console",
    },
    "server": {
        "host": "0.0.0.0",
        "port": 8080,
        "public_dir": "../client",
    },
}

_TRUTHY = {"1", "true", "yes", "on"}


class Config:
    """Configuration manager for locallog."""
    
    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.
        
        Args:
            config_file: Path to a YAML configuration file. If None, only
                defaults and environment overrides apply.
        """
        self._config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        
        if config_file:
            self._load_config_file(config_file)
        
        self._apply_env_overrides()
    
    def _load_config_file(self, config_file: str) -> None:
        """
        Load configuration from YAML file.
        
        Args:
            config_file: Path to YAML configuration file
        
        Raises:
            ValueError: If the file does not hold a mapping
        """
        with open(config_file, "r") as f:
            file_config = yaml.safe_load(f)
        
        if file_config is None:
            return
        if not isinstance(file_config, dict):
            raise ValueError(f"Configuration file must contain a mapping: {config_file}")
        
        self._merge_config(file_config)
    
    def _merge_config(self, new_config: Dict[str, Any]) -> None:
        """Deep merge new configuration into existing configuration."""
        self._config = self._deep_merge(self._config, new_config)
    
    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
    
    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        if store_dir := os.getenv("LOCALLOG_DIR"):
            self.set("store.directory", store_dir)
        
        if display := os.getenv("LOCALLOG_DISPLAY"):
            self.set("display.enabled", display.strip().lower() in _TRUTHY)
        
        if log_level := os.getenv("LOG_LEVEL"):
            self.set("logging.level", log_level)
    
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.
        
        Args:
            key: Configuration key in dot notation (e.g., "store.directory")
            default: Default value if key not found
        
        Returns:
            Configuration value
        """
        value = self._config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value
    
    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.
        
        Args:
            key: Configuration key in dot notation
            value: Value to set
        """
        keys = key.split(".")
        config = self._config
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value
