"""Configuration manager for loading and validating config files."""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional, TypeVar, Union

import yaml

from ..gpio_admin import DEFAULT_COMMAND
from ..sysfs import SYSFS_ROOT_NEW, SYSFS_ROOT_OLD, detect_sysfs_root

T = TypeVar("T")


logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "gpio_admin": {
        "command": DEFAULT_COMMAND,
    },
    "sysfs": {
        "root": None,
        "new_root": SYSFS_ROOT_NEW,
        "old_root": SYSFS_ROOT_OLD,
    },
}


class ConfigError(Exception):
    """Raised when configuration is invalid."""


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """Manages loading and accessing configuration from YAML files."""

    def __init__(self, user_config_path: Optional[str] = None) -> None:
        """Initialize the configuration manager.

        Args:
            user_config_path: Path to user config file. Built-in defaults are
                              used when omitted.

        Raises:
            ConfigError: If config file doesn't exist or is invalid
        """
        self._config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        self._user_config_path = user_config_path
        self._sysfs_root: Optional[Path] = None
        self._load_config()

    def _load_yaml_file(self, path: Path) -> Dict[str, Any]:
        """Load a YAML file and return its contents.

        Raises:
            ConfigError: If file cannot be read or parsed
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {path}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load config file {path}: {e}") from e

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return content

    def _validate_config(self) -> None:
        """Validate the loaded configuration.

        Raises:
            ConfigError: If configuration is invalid
        """
        for section in ("gpio_admin", "sysfs"):
            if not isinstance(self._config.get(section), dict):
                raise ConfigError(f"'{section}' section must be a dictionary")

        command = self._config["gpio_admin"].get("command")
        if not isinstance(command, str) or not command.strip():
            raise ConfigError("'gpio_admin.command' must be a non-empty string")

        sysfs = self._config["sysfs"]
        for name in ("new_root", "old_root"):
            if not isinstance(sysfs.get(name), str) or not sysfs[name]:
                raise ConfigError(f"'sysfs.{name}' must be a non-empty string")
        if sysfs.get("root") is not None and not isinstance(sysfs["root"], str):
            raise ConfigError("'sysfs.root' must be a string or null")

    def _load_config(self) -> None:
        """Load configuration from the user config file, if any.

        Raises:
            ConfigError: If config file doesn't exist or is invalid
        """
        if self._user_config_path is None:
            logger.debug("No config file given, using defaults")
        else:
            config_path = Path(self._user_config_path)
            if not config_path.exists():
                raise ConfigError(
                    f"Configuration file not found: {config_path}\n"
                    f"Please create a config file. See config.yml.example for reference."
                )
            logger.info("Loading configuration from: %s", config_path)
            self._config = _merge(self._config, self._load_yaml_file(config_path))

        self._validate_config()
        logger.info("Configuration loaded and validated successfully")

    def get(self, key: str, default: Optional[T] = None) -> Union[Any, T]:
        """Get a configuration value by key.

        Supports dot notation for nested values (e.g., 'sysfs.root')

        Args:
            key: Configuration key (supports dot notation)
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value: Any = self._config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default  # type: ignore[return-value]
        return value

    def get_gpio_admin_command(self) -> str:
        """Get the gpio-admin executable to run."""
        command: str = self.get("gpio_admin.command")
        return command

    def get_sysfs_root(self) -> Path:
        """Get the sysfs GPIO root.

        An explicit ``sysfs.root`` wins. Otherwise the new and old roots are
        probed, once; later calls return the same path.
        """
        if self._sysfs_root is None:
            override = self.get("sysfs.root")
            if override:
                self._sysfs_root = Path(override)
                logger.info("Using configured sysfs GPIO root: %s", self._sysfs_root)
            else:
                self._sysfs_root = detect_sysfs_root(
                    self.get("sysfs.new_root"), self.get("sysfs.old_root")
                )
        return self._sysfs_root

    def to_dict(self) -> Dict[str, Any]:
        """Get the entire configuration as a dictionary."""
        return copy.deepcopy(self._config)
