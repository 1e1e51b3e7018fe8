"""Platform-aware configuration path resolution.

Handles config file locations for:
- Windows: %PROGRAMDATA% (system), %APPDATA% (user)
- Unix: /etc/ (system), ~/.config/pinbridge/ or ~/.pinbridge/ (user)
- Explicit: --config or PINBRIDGE_CONFIG
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

CONFIG_FILENAME = "config.yaml"
APP_NAME = "pinbridge"
SHORT_NAME = ".pinbridge"
CONFIG_ENV_VAR = "PINBRIDGE_CONFIG"


def get_system_config_path() -> Path | None:
    """Get system-level config path.

    Returns:
        Path to system config file, or None if not determinable.
        The file may not exist.
    """
    if sys.platform == "win32":
        program_data = os.environ.get("PROGRAMDATA")
        if program_data:
            return Path(program_data) / APP_NAME / CONFIG_FILENAME
    else:
        return Path("/etc") / APP_NAME / CONFIG_FILENAME
    return None


def get_user_config_path() -> Path | None:
    """Get user-level config path.

    Returns:
        Path to user config file, or None if not determinable.
        The file may not exist.
    """
    if sys.platform == "win32":
        app_data = os.environ.get("APPDATA")
        if app_data:
            return Path(app_data) / APP_NAME / CONFIG_FILENAME
    else:
        # Try XDG_CONFIG_HOME first, then ~/.config, then ~/.pinbridge
        xdg_config = os.environ.get("XDG_CONFIG_HOME")
        if xdg_config:
            return Path(xdg_config) / APP_NAME / CONFIG_FILENAME

        home = Path.home()

        xdg_default = home / ".config"
        if xdg_default.exists():
            return xdg_default / APP_NAME / CONFIG_FILENAME

        return home / SHORT_NAME / CONFIG_FILENAME

    return None


def get_explicit_config_path(config_path: str | None = None) -> Path | None:
    """Get the config file named on the command line or in the environment."""
    explicit = config_path or os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        return Path(explicit).expanduser()
    return None


def get_config_paths(config_path: str | None = None) -> list[Path]:
    """Get all config paths in priority order (lowest to highest).

    Args:
        config_path: Optional explicit config file.

    Returns:
        List of config paths in order: system, user, explicit.
        Later paths override earlier ones when merging.
    """
    paths: list[Path] = []

    system_path = get_system_config_path()
    if system_path:
        paths.append(system_path)

    user_path = get_user_config_path()
    if user_path:
        paths.append(user_path)

    explicit_path = get_explicit_config_path(config_path)
    if explicit_path:
        paths.append(explicit_path)

    return paths
