"""Credential cache backends.

- NullCredentialCache: never has anything, never stores (default)
- MemoryCredentialCache: process-lifetime dict, mostly for tests and demos
- SecretToolCredentialCache: the desktop keyring through libsecret's
  ``secret-tool`` command
"""

from __future__ import annotations

import subprocess
import threading

from pinbridge.logging import get_logger

log = get_logger("cache")

DEFAULT_SERVICE = "GnuPG"


class BackendError(Exception):
    """Raised when a cache or biometric backend cannot do its job."""


class NullCredentialCache:
    def lookup(self, key: str) -> str | None:
        return None

    def store(self, key: str, credential: str, label: str) -> None:
        log.debug("Null cache: dropping credential for %s", key)


class MemoryCredentialCache:
    """In-process cache keyed by key grip."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}
        self._lock = threading.Lock()

    def lookup(self, key: str) -> str | None:
        with self._lock:
            return self._items.get(key)

    def store(self, key: str, credential: str, label: str) -> None:
        with self._lock:
            self._items[key] = credential
        log.debug("Memory cache: stored %s as %r", key, label)


class SecretToolCredentialCache:
    """Stores credentials in the Secret Service keyring.

    Items are looked up by the attributes ``service=<service>`` and
    ``account=<key>``; storing replaces any existing item with the same
    attributes.
    """

    def __init__(
        self,
        service: str = DEFAULT_SERVICE,
        command: str = "secret-tool",
        timeout: float = 30.0,
    ) -> None:
        self.service = service
        self.command = command
        self.timeout = timeout

    def _attributes(self, key: str) -> list[str]:
        return ["service", self.service, "account", key.strip()]

    def lookup(self, key: str) -> str | None:
        if not key.strip():
            return None
        try:
            result = subprocess.run(
                [self.command, "lookup", *self._attributes(key)],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise BackendError(f"{self.command} lookup failed: {e}") from e
        if result.returncode != 0:
            # secret-tool exits 1 when no item matches
            return None
        return result.stdout or None

    def store(self, key: str, credential: str, label: str) -> None:
        if not key.strip():
            return
        try:
            result = subprocess.run(
                [self.command, "store", f"--label={label}", *self._attributes(key)],
                input=credential,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise BackendError(f"{self.command} store failed: {e}") from e
        if result.returncode != 0:
            raise BackendError(
                f"{self.command} store exited with {result.returncode}: {result.stderr.strip()}"
            )
