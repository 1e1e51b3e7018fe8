"""Configuration file loading and caching.

Handles:
- YAML file parsing
- Environment variable overrides
- Config caching with reload support
- Conversion from dict to typed Config dataclass
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from pinbridge.config.merge import merge_configs
from pinbridge.config.paths import get_config_paths
from pinbridge.config.schema import (
    BiometricsConfig,
    CacheConfig,
    Config,
    LoggingConfig,
    ProtocolConfig,
    TerminalConfig,
)

# Module logger (may not be configured yet at import time)
_log = logging.getLogger("pinbridge.config")

# Global cached config
_cached_config: Config | None = None


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except PermissionError:
        _log.debug("Permission denied reading %s", path)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def env_overrides() -> dict[str, Any]:
    """Build config dict from environment variables.

    Environment variables take highest priority.
    """
    overrides: dict[str, Any] = {}

    log_path = os.environ.get("PINBRIDGE_LOG")
    if log_path:
        overrides.setdefault("logging", {})["file"] = log_path

    cache_backend = os.environ.get("PINBRIDGE_CACHE")
    if cache_backend:
        overrides.setdefault("cache", {})["backend"] = cache_backend

    return overrides


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name)
    return value if isinstance(value, dict) else {}


def _as_int(value: Any) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        _log.warning("Ignoring non-integer config value %r", value)
        return None


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        _log.warning("Ignoring non-numeric config value %r", value)
        return default


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert merged dict to typed Config dataclass."""
    log_data = _section(data, "logging")
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=_as_int(log_data.get("verbose")),
        file=log_data.get("file"),
    )

    protocol_data = _section(data, "protocol")
    protocol_defaults = ProtocolConfig()
    protocol = ProtocolConfig(
        greeting=str(protocol_data.get("greeting", protocol_defaults.greeting)),
        flavor=str(protocol_data.get("flavor", protocol_defaults.flavor)),
    )

    cache_data = _section(data, "cache")
    cache_defaults = CacheConfig()
    cache = CacheConfig(
        backend=str(cache_data.get("backend", cache_defaults.backend)).lower(),
        service=str(cache_data.get("service", cache_defaults.service)),
        default_label=str(cache_data.get("default_label", cache_defaults.default_label)),
        command=str(cache_data.get("command", cache_defaults.command)),
    )

    bio_data = _section(data, "biometrics")
    bio_defaults = BiometricsConfig()
    command = bio_data.get("command", bio_defaults.command)
    if isinstance(command, str):
        command = command.split()
    elif not isinstance(command, list):
        command = bio_defaults.command
    biometrics = BiometricsConfig(
        backend=str(bio_data.get("backend", bio_defaults.backend)).lower(),
        command=[str(part) for part in command if part],
        timeout=_as_float(bio_data.get("timeout", bio_defaults.timeout), bio_defaults.timeout),
    )

    terminal_data = _section(data, "terminal")
    terminal = TerminalConfig(device=terminal_data.get("device"))

    known_keys = {"logging", "protocol", "cache", "biometrics", "terminal"}
    extra = {k: v for k, v in data.items() if k not in known_keys}

    return Config(
        logging=logging_config,
        protocol=protocol,
        cache=cache,
        biometrics=biometrics,
        terminal=terminal,
        extra=extra,
    )


def load_config(config_path: str | None = None, reload: bool = False) -> Config:
    """Load and merge config from all sources.

    Priority order (highest to lowest):
    1. Environment variables
    2. Explicit config file (--config or PINBRIDGE_CONFIG)
    3. User config (~/.config/pinbridge/config.yaml or %APPDATA%)
    4. System config (/etc/pinbridge/ or %PROGRAMDATA%)

    Args:
        config_path: Explicit config file.
        reload: Force reload even if cached.

    Returns:
        Merged Config object.
    """
    global _cached_config

    if _cached_config is not None and not reload and config_path is None:
        return _cached_config

    configs: list[dict[str, Any]] = []

    for path in get_config_paths(config_path):
        config_data = load_yaml_file(path)
        if config_data:
            _log.debug("Loaded config from %s", path)
            configs.append(config_data)

    env_config = env_overrides()
    if env_config:
        configs.append(env_config)

    config = dict_to_config(merge_configs(*configs))
    _cached_config = config
    return config


def get_config() -> Config:
    """Get the cached global config, loading it if needed."""
    if _cached_config is None:
        return load_config()
    return _cached_config


def reset_config() -> None:
    """Reset cached config.

    Useful for testing or forcing a reload.
    """
    global _cached_config
    _cached_config = None
