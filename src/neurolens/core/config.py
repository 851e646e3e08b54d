"""
Configuration Management
========================

This module provides TOML-based configuration file support for neurolens.

Configuration files are merged in the following order (lowest to highest priority):
1. Built-in defaults
2. /etc/neurolens/config.toml (system config)
3. ~/.config/neurolens/config.toml (user config)
4. ./neurolens.toml (current directory)
5. Path specified via --config option

Example configuration file (neurolens.toml):

    [server]
    url = "http://localhost:5000"
    timeout = 30

    [classifier]
    resolution = "150x150"
    grayscale = false

    [history]
    dir = "~/.local/share/neurolens"
    single_cap = 10
    bulk_cap = 50

    [bulk]
    max_images = 500
    seconds_per_image = 2

    [api]
    max_retries = 2
    user_agent = "neurolens/0.1"

    [logging]
    level = "WARNING"
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

SERVER_URL_ENV = "NEUROLENS_SERVER_URL"

# Default configuration values
DEFAULT_CONFIG: Dict[str, Any] = {
    "server": {
        "url": "http://localhost:5000",
        "timeout": 30,
    },
    "classifier": {
        "resolution": "150x150",
        "grayscale": False,
    },
    "history": {
        "dir": "~/.local/share/neurolens",
        "single_cap": 10,
        "bulk_cap": 50,
    },
    "bulk": {
        "max_images": 500,
        "seconds_per_image": 2,
    },
    "api": {
        "max_retries": 2,
        "user_agent": "neurolens/0.1",
    },
    "logging": {
        "level": "WARNING",
    },
}

# Standard config file locations, highest priority first
CONFIG_LOCATIONS = [
    Path("neurolens.toml"),
    Path("~/.config/neurolens/config.toml").expanduser(),
    Path("/etc/neurolens/config.toml"),
]


@dataclass
class Config:
    """
    Configuration container for neurolens settings.

    Attributes:
        server: Classification service location and timeout
        classifier: Default resolution and grayscale flag
        history: Storage directory and bounded log caps
        bulk: Bulk run limits and time estimate heuristic
        api: HTTP client settings
        logging: Logging settings
        _source: Path to the config file that was loaded
    """

    server: Dict[str, Any] = field(default_factory=dict)
    classifier: Dict[str, Any] = field(default_factory=dict)
    history: Dict[str, Any] = field(default_factory=dict)
    bulk: Dict[str, Any] = field(default_factory=dict)
    api: Dict[str, Any] = field(default_factory=dict)
    logging: Dict[str, Any] = field(default_factory=dict)
    _source: Optional[str] = None

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        section_dict = getattr(self, section, {})
        if section_dict is None:
            return default
        return section_dict.get(key, default)

    def set(self, section: str, key: str, value: Any) -> None:
        """Set a configuration value."""
        section_dict = getattr(self, section, None)
        if section_dict is not None:
            section_dict[key] = value

    @property
    def history_dir(self) -> Path:
        """Storage directory for the history logs, with ~ expanded."""
        return Path(str(self.get("history", "dir", DEFAULT_CONFIG["history"]["dir"]))).expanduser()

    @property
    def server_url(self) -> str:
        """Server URL, with the environment variable taking precedence."""
        return os.environ.get(SERVER_URL_ENV) or self.get("server", "url", "")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "server": self.server,
            "classifier": self.classifier,
            "history": self.history,
            "bulk": self.bulk,
            "api": self.api,
            "logging": self.logging,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> "Config":
        """Create Config from dictionary."""
        return cls(
            server=data.get("server", {}),
            classifier=data.get("classifier", {}),
            history=data.get("history", {}),
            bulk=data.get("bulk", {}),
            api=data.get("api", {}),
            logging=data.get("logging", {}),
            _source=source,
        )


def load_toml(filepath: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a TOML configuration file.

    Args:
        filepath: Path to the TOML file

    Returns:
        Dictionary with configuration values

    Raises:
        FileNotFoundError: If file doesn't exist
        tomllib.TOMLDecodeError: If TOML parsing fails
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    with open(path, "rb") as f:
        return tomllib.load(f)


def save_toml(config: Dict[str, Any], filepath: Union[str, Path]) -> str:
    """
    Save configuration to a TOML file.

    Args:
        config: Configuration dictionary
        filepath: Path to save the file

    Returns:
        Path to the saved file
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    lines = []
    for section, values in config.items():
        if isinstance(values, dict) and values:
            lines.append(f"[{section}]")
            for key, value in values.items():
                if isinstance(value, str):
                    lines.append(f'{key} = "{value}"')
                elif isinstance(value, bool):
                    lines.append(f"{key} = {str(value).lower()}")
                elif isinstance(value, (int, float)):
                    lines.append(f"{key} = {value}")
                elif isinstance(value, list):
                    items = ", ".join(f'"{v}"' if isinstance(v, str) else str(v) for v in value)
                    lines.append(f"{key} = [{items}]")
            lines.append("")

    path.write_text("\n".join(lines), encoding="utf-8")
    return str(path)


def get_default_config() -> Config:
    """Get the default configuration."""
    return Config.from_dict(_deep_copy_dict(DEFAULT_CONFIG))


def create_default_config_file(filepath: Optional[str] = None) -> str:
    """
    Create a default configuration file.

    Args:
        filepath: Path to create the file (default: ./neurolens.toml)

    Returns:
        Path to the created file
    """
    if filepath is None:
        filepath = "neurolens.toml"

    return save_toml(DEFAULT_CONFIG, filepath)


def _deep_copy_dict(d: Dict[str, Any]) -> Dict[str, Any]:
    """Create a deep copy of a dictionary."""
    result = {}
    for key, value in d.items():
        if isinstance(value, dict):
            result[key] = _deep_copy_dict(value)
        elif isinstance(value, list):
            result[key] = value.copy()
        else:
            result[key] = value
    return result


def _merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two dictionaries, with override taking precedence."""
    result = _deep_copy_dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


# Global configuration instance
_global_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = load_config_cascade()
    return _global_config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Reset the global configuration to None (will reload on next access)."""
    global _global_config
    _global_config = None


def get_config_locations() -> List[Path]:
    """
    Get configuration file search locations in priority order.

    Returns:
        List of paths to search, in priority order (highest first)
    """
    return CONFIG_LOCATIONS.copy()


def load_config_cascade(explicit_path: Optional[str] = None) -> Config:
    """
    Load configuration with full cascade support.

    Merges configs from all levels in priority order:
    defaults -> system -> user -> current dir -> explicit

    Args:
        explicit_path: Explicit config file path (highest priority)

    Returns:
        Config object with merged settings from all sources
    """
    config_data = _deep_copy_dict(DEFAULT_CONFIG)
    source = None

    # Lowest priority first so later files override earlier ones
    for location in reversed(get_config_locations()):
        if location.exists():
            try:
                config_data = _merge_dicts(config_data, load_toml(location))
                source = str(location)
                logger.debug(f"Merged configuration from {location}")
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.warning(f"Error loading {location}: {e}")

    if explicit_path:
        path = Path(explicit_path)
        if path.exists():
            try:
                config_data = _merge_dicts(config_data, load_toml(path))
                source = str(path)
                logger.debug(f"Merged configuration from {path}")
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.warning(f"Error loading {path}: {e}")
        else:
            logger.warning(f"Specified config file not found: {explicit_path}")

    return Config.from_dict(config_data, source=source)
