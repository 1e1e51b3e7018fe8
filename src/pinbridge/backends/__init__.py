"""Concrete credential cache and biometric gate backends.

Selected by name from configuration:

    cache:
      backend: secret-tool      # none | memory | secret-tool
    biometrics:
      backend: fprintd          # none | fprintd
"""

from __future__ import annotations

from pinbridge.backends.biometrics import DisabledBiometricGate, FprintdBiometricGate
from pinbridge.backends.cache import (
    BackendError,
    MemoryCredentialCache,
    NullCredentialCache,
    SecretToolCredentialCache,
)
from pinbridge.config.schema import BiometricsConfig, CacheConfig
from pinbridge.interaction.protocols import BiometricGate, CredentialCache

__all__ = [
    "BackendError",
    "DisabledBiometricGate",
    "FprintdBiometricGate",
    "MemoryCredentialCache",
    "NullCredentialCache",
    "SecretToolCredentialCache",
    "build_biometric_gate",
    "build_cache",
]


def build_cache(config: CacheConfig) -> CredentialCache:
    """Create the cache backend named in config.

    Raises:
        BackendError: If the backend name is unknown.
    """
    if config.backend in ("none", "null", ""):
        return NullCredentialCache()
    if config.backend == "memory":
        return MemoryCredentialCache()
    if config.backend in ("secret-tool", "secret_tool", "keyring"):
        return SecretToolCredentialCache(service=config.service, command=config.command)
    raise BackendError(f"Unknown cache backend: {config.backend}")


def build_biometric_gate(config: BiometricsConfig) -> BiometricGate:
    """Create the biometric backend named in config.

    Raises:
        BackendError: If the backend name is unknown.
    """
    if config.backend in ("none", "disabled", ""):
        return DisabledBiometricGate()
    if config.backend == "fprintd":
        return FprintdBiometricGate(command=config.command, timeout=config.timeout)
    raise BackendError(f"Unknown biometrics backend: {config.backend}")
