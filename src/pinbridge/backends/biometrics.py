"""Biometric gate backends."""

from __future__ import annotations

import subprocess

from pinbridge.logging import get_logger

log = get_logger("biometrics")

DEFAULT_FPRINTD_COMMAND = ["fprintd-verify"]


class DisabledBiometricGate:
    """Always declines, so cached credentials are never used silently."""

    def authenticate(self, reason: str) -> tuple[bool, str | None]:
        return False, "biometric authentication disabled"


class FprintdBiometricGate:
    """Fingerprint check through fprintd.

    Runs ``fprintd-verify`` and treats exit code 0 as a match. The call
    blocks until the user touches the reader or the command gives up.
    """

    def __init__(self, command: list[str] | None = None, timeout: float = 30.0) -> None:
        self.command = list(command or DEFAULT_FPRINTD_COMMAND)
        self.timeout = timeout

    def authenticate(self, reason: str) -> tuple[bool, str | None]:
        log.info("Requesting fingerprint: %s", reason)
        try:
            result = subprocess.run(
                self.command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            return False, f"{self.command[0]} not installed"
        except subprocess.TimeoutExpired:
            return False, "fingerprint verification timed out"
        except OSError as e:
            return False, str(e)

        if result.returncode == 0:
            return True, None
        detail = (result.stdout or result.stderr).strip().splitlines()
        return False, detail[-1] if detail else f"exit code {result.returncode}"
