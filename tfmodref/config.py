"""User configuration for the file search defaults"""

import configparser
import os
import platform
from pathlib import Path
from typing import List, Optional

from tfmodref.files import DEFAULT_EXCLUDE_DIRS, DEFAULT_EXTENSIONS

APP_NAME = "tfmodref"
CONFIG_ENV_VAR = "TFMODREF_CONFIG"
SEARCH_SECTION = "search"


def _default_config_dir() -> Path:
    if platform.system() == "Darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
    return base / APP_NAME


config_dir = _default_config_dir()


def get_config_file() -> Path:
    """The configuration file, overridable with TFMODREF_CONFIG."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return config_dir / f"{APP_NAME}.cfg"


class ConfigAccessor:
    """
    Read-only view of the tfmodref INI file.

    A missing file reads as an empty configuration, and a missing section or
    key yields the caller's default. Nothing is ever written back.

    Usage:
        config = ConfigAccessor()
        extensions = config.get_list("search", "extensions", [".tf"])
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else get_config_file()
        self._parser = configparser.ConfigParser()
        if self.config_path.is_file():
            self._parser.read(self.config_path)

    def get(self, section: str, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the raw value of ``key`` in ``section``, or *default*."""
        return self._parser.get(section, key, fallback=default)

    def get_list(self, section: str, key: str, default: List[str]) -> List[str]:
        """Get a comma separated value as a list, ignoring empty items."""
        value = self.get(section, key)
        if value is None:
            return list(default)
        return [item.strip() for item in value.split(",") if item.strip()]


def get_extensions(config: Optional[ConfigAccessor] = None) -> List[str]:
    """File extensions searched when none are given on the command line."""
    config = config or ConfigAccessor()
    return config.get_list(SEARCH_SECTION, "extensions", list(DEFAULT_EXTENSIONS))


def get_exclude_dirs(config: Optional[ConfigAccessor] = None) -> List[str]:
    """Directory names never descended into while searching."""
    config = config or ConfigAccessor()
    return config.get_list(SEARCH_SECTION, "exclude_dirs", list(DEFAULT_EXCLUDE_DIRS))
