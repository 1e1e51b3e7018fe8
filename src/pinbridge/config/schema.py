"""Configuration schema dataclasses for pinbridge.

Defines the structure of configuration at all levels (system, user,
explicit file). All fields have defaults so partial configs merge cleanly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0-4, overrides level when set
    file: str | None = None  # Log file path


@dataclass
class ProtocolConfig:
    """Assuan protocol presentation.

    Example config.yaml:
        protocol:
          greeting: "Pleased to meet you"
          flavor: pinbridge
    """

    greeting: str = "Pleased to meet you"
    flavor: str = "pinbridge"  # Reported by GETINFO flavor


@dataclass
class CacheConfig:
    """External password cache backend.

    The cache is only consulted when the agent sends
    ``OPTION allow-external-password-cache``.

    Example config.yaml:
        cache:
          backend: secret-tool
          service: GnuPG
    """

    backend: str = "none"  # "none", "memory", or "secret-tool"
    service: str = "GnuPG"  # Keyring service attribute
    default_label: str = "GnuPG"  # Label when the description names no key
    command: str = "secret-tool"


@dataclass
class BiometricsConfig:
    """Identity check guarding use of cached credentials.

    Example config.yaml:
        biometrics:
          backend: fprintd
          command: ["fprintd-verify", "-f", "right-index-finger"]
    """

    backend: str = "none"  # "none" or "fprintd"
    command: list[str] = field(default_factory=lambda: ["fprintd-verify"])
    timeout: float = 30.0  # Seconds before the check counts as declined


@dataclass
class TerminalConfig:
    """Terminal presenter settings."""

    device: str | None = None  # Default: --ttyname, then GPG_TTY, then /dev/tty


@dataclass
class Config:
    """Root configuration object.

    Aggregates all configuration sections. All fields use default factories
    to ensure partial configs work correctly with deep merging.
    """

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    protocol: ProtocolConfig = field(default_factory=ProtocolConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    biometrics: BiometricsConfig = field(default_factory=BiometricsConfig)
    terminal: TerminalConfig = field(default_factory=TerminalConfig)

    # Extension point for future config sections
    extra: dict[str, Any] = field(default_factory=dict)
