"""GETINFO sub-requests."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass

from pinbridge.assuan.encoding import ErrorCode, data_response, error_response, escape_line

FLAVOR = "pinbridge"
UNKNOWN_FIELD = "-"


@dataclass(slots=True)
class TerminalInfo:
    """Terminal details reported by GETINFO.

    Values given on the command line (--ttyname, --ttytype, --display)
    take precedence over the environment.
    """

    tty_name: str | None = None
    tty_type: str | None = None
    display: str | None = None

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, str] | None = None,
        tty_name: str | None = None,
        tty_type: str | None = None,
        display: str | None = None,
    ) -> TerminalInfo:
        env = os.environ if environ is None else environ
        return cls(
            tty_name=tty_name or env.get("GPG_TTY") or None,
            tty_type=tty_type or env.get("TERM") or None,
            display=display or env.get("DISPLAY") or None,
        )


def lookup_tty_name() -> str | None:
    """Ask the platform for the terminal attached to stdin."""
    try:
        return os.ttyname(sys.stdin.fileno())
    except (OSError, AttributeError, ValueError):
        return None


class InfoProvider:
    """Answers GETINFO; pure apart from the platform tty lookup."""

    def __init__(
        self,
        version: str,
        terminal: TerminalInfo | None = None,
        flavor: str = FLAVOR,
        pid: int | None = None,
    ) -> None:
        self.version = version
        self.terminal = terminal or TerminalInfo()
        self.flavor = flavor
        self._pid = pid

    @property
    def pid(self) -> int:
        return self._pid if self._pid is not None else os.getpid()

    def tty_name(self) -> str:
        return self.terminal.tty_name or lookup_tty_name() or ""

    def tty_info(self) -> str:
        fields = (
            self.terminal.tty_name or UNKNOWN_FIELD,
            self.terminal.tty_type or UNKNOWN_FIELD,
            self.terminal.display or UNKNOWN_FIELD,
        )
        return " ".join(fields)

    def handle(self, request: str) -> str:
        """Answer one GETINFO sub-request (already decoded and trimmed)."""
        if request in ("", "pid"):
            value = str(self.pid)
        elif request == "version":
            value = self.version
        elif request == "tty_name":
            value = self.tty_name()
        elif request == "ttyinfo":
            value = self.tty_info()
        elif request == "flavor":
            value = self.flavor
        elif request in ("socket_name", "display"):
            value = ""
        else:
            return error_response(ErrorCode.NOT_SUPPORTED)
        return data_response(escape_line(value))
