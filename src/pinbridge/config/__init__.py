"""Configuration management for pinbridge.

Provides hierarchical YAML-based configuration with:
- System-level config (/etc/pinbridge/ or %PROGRAMDATA%)
- User-level config (~/.config/pinbridge/, ~/.pinbridge/ or %APPDATA%)
- Explicit config file (--config or PINBRIDGE_CONFIG)
- Environment variable overrides (highest priority)

Example usage:
    from pinbridge.config import load_config, get_config

    config = load_config(config_path="~/pinbridge.yaml")
    print(config.cache.backend)

    # Get cached global config
    config = get_config()
"""

from pinbridge.config.loader import (
    get_config,
    load_config,
    reset_config,
)
from pinbridge.config.paths import (
    get_config_paths,
    get_explicit_config_path,
    get_system_config_path,
    get_user_config_path,
)
from pinbridge.config.schema import (
    BiometricsConfig,
    CacheConfig,
    Config,
    LoggingConfig,
    ProtocolConfig,
    TerminalConfig,
)

__all__ = [
    # Main API
    "Config",
    "load_config",
    "get_config",
    "reset_config",
    # Schema types
    "LoggingConfig",
    "ProtocolConfig",
    "CacheConfig",
    "BiometricsConfig",
    "TerminalConfig",
    # Path utilities
    "get_config_paths",
    "get_system_config_path",
    "get_user_config_path",
    "get_explicit_config_path",
]
