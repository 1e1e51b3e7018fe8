"""Assuan command dispatcher.

Reads one command line at a time, updates the SessionState for SET* and
OPTION commands, and runs the blocking GETPIN / CONFIRM / MESSAGE flows
against an injected Presenter. Every non-blank, non-comment line yields a
response; unknown commands are answered with OK so the agent is never
blocked by a command this helper does not implement.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from pinbridge.assuan import encoding
from pinbridge.assuan.encoding import ErrorCode
from pinbridge.assuan.gate import CredentialGate
from pinbridge.assuan.info import InfoProvider
from pinbridge.assuan.state import (
    BAD_PASSPHRASE_TEXT,
    DEFAULT_CANCEL,
    DEFAULT_OK,
    SessionState,
)
from pinbridge.interaction.protocols import (
    ConfirmRequest,
    InputRequest,
    MessageRequest,
    Presenter,
)
from pinbridge.interaction.rendezvous import Rendezvous
from pinbridge.interaction.timeout import TimeoutController
from pinbridge.logging import get_logger

log = get_logger("dispatcher")

EXTERNAL_CACHE_OPTION = "allow-external-password-cache"

# (credential or None, save requested)
InputResult = tuple[str | None, bool]
_CANCELLED: InputResult = (None, False)

Handler = Callable[[str, str], str]


class CommandDispatcher:
    """Top-level command state machine for one pinentry session.

    Args:
        presenter: UI collaborator used by the interaction flows.
        gate: Cache/biometric gate for the GETPIN silent path.
        info: Provider for GETINFO answers.
        state: Initial session state (defaults if None).
    """

    def __init__(
        self,
        presenter: Presenter,
        gate: CredentialGate | None = None,
        info: InfoProvider | None = None,
        state: SessionState | None = None,
    ) -> None:
        from pinbridge import __version__

        self.presenter = presenter
        self.gate = gate or CredentialGate()
        self.info = info or InfoProvider(version=__version__)
        self.state = state or SessionState()
        # Dispatch is strictly sequential
        self._busy = threading.Lock()

        self._handlers: dict[str, Handler] = {
            "SETDESC": self._cmd_setdesc,
            "SETPROMPT": self._cmd_setprompt,
            "SETTITLE": self._cmd_settitle,
            "SETERROR": self._cmd_seterror,
            "SETOK": self._cmd_setok,
            "SETCANCEL": self._cmd_setcancel,
            "SETNOTOK": self._cmd_setnotok,
            "SETKEYINFO": self._cmd_setkeyinfo,
            "SETREPEAT": self._cmd_setrepeat,
            "SETREPEATERROR": self._cmd_setrepeaterror,
            "SETTIMEOUT": self._cmd_settimeout,
            "OPTION": self._cmd_option,
            "SETQUALITYBAR": self._cmd_ignored,
            "SETQUALITYBAR_TT": self._cmd_ignored,
            "GETPIN": self._cmd_getpin,
            "CONFIRM": self._cmd_confirm,
            "MESSAGE": self._cmd_message,
            "GETINFO": self._cmd_getinfo,
            "BYE": self._cmd_ignored,
        }

    def handle(self, line: str) -> str | None:
        """Process one command line.

        Returns:
            The response (possibly several lines joined by newlines), or
            None for blank lines and comments.
        """
        line = line.strip()
        if not line or line.startswith("#"):
            return None

        command, _, args = line.partition(" ")
        command = command.upper()
        handler = self._handlers.get(command)
        if handler is None:
            log.debug("Ignoring unknown command %s", command)
            return encoding.ok()

        log.debug("<< %s (%d bytes of arguments)", command, len(args))
        with self._busy:
            return handler(args, encoding.percent_decode(args))

    # -------------------------------------------------------------------------
    # Session configuration
    # -------------------------------------------------------------------------

    def _cmd_setdesc(self, args: str, text: str) -> str:
        self.state.set_description(text)
        return encoding.ok()

    def _cmd_setprompt(self, args: str, text: str) -> str:
        self.state.prompt = text
        return encoding.ok()

    def _cmd_settitle(self, args: str, text: str) -> str:
        self.state.window_title = text
        return encoding.ok()

    def _cmd_seterror(self, args: str, text: str) -> str:
        # gpg-agent's own wording is replaced by a fixed message
        self.state.error_text = BAD_PASSPHRASE_TEXT
        return encoding.ok()

    def _cmd_setok(self, args: str, text: str) -> str:
        self.state.ok_text = text or DEFAULT_OK
        return encoding.ok()

    def _cmd_setcancel(self, args: str, text: str) -> str:
        self.state.cancel_text = text or DEFAULT_CANCEL
        return encoding.ok()

    def _cmd_setnotok(self, args: str, text: str) -> str:
        self.state.not_ok_text = text
        return encoding.ok()

    def _cmd_setkeyinfo(self, args: str, text: str) -> str:
        # The key grip is taken from the undecoded argument
        self.state.set_key_info(args)
        return encoding.ok()

    def _cmd_setrepeat(self, args: str, text: str) -> str:
        self.state.repeat_prompt = text
        return encoding.ok()

    def _cmd_setrepeaterror(self, args: str, text: str) -> str:
        self.state.repeat_error = text
        return encoding.ok()

    def _cmd_settimeout(self, args: str, text: str) -> str:
        try:
            seconds = int(args.strip())
        except ValueError:
            seconds = 0
        self.state.timeout_seconds = max(seconds, 0)
        return encoding.ok()

    def _cmd_option(self, args: str, text: str) -> str:
        if EXTERNAL_CACHE_OPTION in args:
            self.state.allow_external_cache = True
            log.debug("External password cache allowed")
        return encoding.ok()

    def _cmd_ignored(self, args: str, text: str) -> str:
        return encoding.ok()

    def _cmd_getinfo(self, args: str, text: str) -> str:
        return self.info.handle(text.strip())

    # -------------------------------------------------------------------------
    # Interaction flows
    # -------------------------------------------------------------------------

    def _cmd_getpin(self, args: str, text: str) -> str:
        state = self.state

        cached = self.gate.try_silent(state)
        if cached is not None:
            state.reset_after_getpin()
            return encoding.credential_response(cached)

        request = InputRequest(
            title=state.window_title,
            description=state.effective_description,
            prompt=state.prompt,
            key_info=state.key_info,
            ok_label=state.ok_text,
            cancel_label=state.effective_cancel_label,
            is_error=state.error_text is not None,
            allow_cache=state.allow_external_cache,
            repeat_prompt=state.repeat_prompt,
            repeat_error=state.repeat_error,
        )
        rendezvous: Rendezvous[InputResult] = Rendezvous("getpin")

        def on_complete(credential: str | None, save_requested: bool) -> None:
            rendezvous.deliver((credential, save_requested))

        timeout = TimeoutController(
            state.timeout_seconds, rendezvous, _CANCELLED, self.presenter.force_close
        )
        with timeout:
            self._present(self.presenter.request_input, request, on_complete,
                          rendezvous, _CANCELLED)
            credential, save_requested = rendezvous.wait() or _CANCELLED

        state.reset_after_getpin()

        if credential is None:
            log.info("GETPIN cancelled%s", " (timeout)" if timeout.fired else "")
            return encoding.error_response(ErrorCode.GETPIN_CANCELLED)

        self.gate.save(state, credential, save_requested)
        log.info("GETPIN completed")
        return encoding.credential_response(credential)

    def _cmd_confirm(self, args: str, text: str) -> str:
        state = self.state
        request = ConfirmRequest(
            title=state.window_title,
            description=state.description,
            ok_label=state.ok_text,
            cancel_label=state.effective_cancel_label,
        )
        rendezvous: Rendezvous[bool] = Rendezvous("confirm")
        self._present(self.presenter.request_confirm, request, rendezvous.deliver,
                      rendezvous, False)
        confirmed = bool(rendezvous.wait())

        state.reset_after_confirm()

        if not confirmed:
            log.info("CONFIRM declined")
            return encoding.error_response(ErrorCode.CONFIRM_CANCELLED)
        return encoding.ok()

    def _cmd_message(self, args: str, text: str) -> str:
        state = self.state
        request = MessageRequest(
            title=state.window_title,
            description=text or state.description,
            ok_label=state.ok_text,
        )
        rendezvous: Rendezvous[bool] = Rendezvous("message")
        self._present(self.presenter.request_message, request,
                      lambda: rendezvous.deliver(True), rendezvous, True)
        rendezvous.wait()
        return encoding.ok()

    def _present(
        self,
        method: Callable[[Any, Any], None],
        request: object,
        on_complete: Callable[..., Any],
        rendezvous: Rendezvous[Any],
        fallback: object,
    ) -> None:
        """Hand a request to the presenter.

        A presenter that raises instead of calling back would leave the
        protocol thread blocked forever, so its failure completes the
        rendezvous with the fallback result.
        """
        try:
            method(request, on_complete)
        except Exception as e:
            log.error("Presenter failed: %s", e)
            rendezvous.deliver(fallback)
