"""Configuration loading for pi-gpio."""

from .config_manager import ConfigError, ConfigManager

__all__ = ["ConfigError", "ConfigManager"]
