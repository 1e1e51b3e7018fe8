"""Terminal presenter.

Prompts on the user's terminal device (GPG_TTY / --ttyname / /dev/tty),
never on stdin/stdout, which carry the Assuan protocol. Rendering uses rich;
line input uses prompt_toolkit with password masking.

All UI work is posted to a PresentationLoop; each request completes its
callback exactly once, whether the user answers, cancels with Ctrl-C/Ctrl-D,
the terminal cannot be opened, or force_close() is called on timeout.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable
from typing import Any, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.input import Input, create_input
from prompt_toolkit.output import Output, create_output
from rich.console import Console
from rich.text import Text

from pinbridge.interaction.presentation import PresentationLoop
from pinbridge.interaction.protocols import (
    ConfirmCallback,
    ConfirmRequest,
    InputCallback,
    InputRequest,
    MessageCallback,
    MessageRequest,
)
from pinbridge.logging import get_logger

log = get_logger("terminal")

DEFAULT_DEVICE = "/dev/tty"
SAVE_QUESTION = "Save in password cache? [y/N] "
_YES = frozenset({"y", "yes"})


class _Pending:
    """A presenter callback that may fire only once."""

    def __init__(self, callback: Callable[..., None], *cancel_args: Any) -> None:
        self._callback = callback
        self._cancel_args = cancel_args
        self._lock = threading.Lock()
        self.done = False

    def complete(self, *args: Any) -> bool:
        with self._lock:
            if self.done:
                return False
            self.done = True
        self._callback(*args)
        return True

    def cancel(self) -> bool:
        return self.complete(*self._cancel_args)


class TerminalSession:
    """An open terminal: a rich console for output, prompt_toolkit for input.

    ``interrupt()`` is sticky: once called, the running prompt exits and any
    later ``ask()`` on this session raises EOFError without waiting for
    input, even if the interrupt arrived before prompt_toolkit started.
    """

    def __init__(self, device: str = DEFAULT_DEVICE) -> None:
        self.device = device
        self._in: TextIO | None = None
        self._out: TextIO | None = None
        self._prompt: PromptSession[str] | None = None
        self._aborted = False
        self.console: Console | None = None

    def __enter__(self) -> TerminalSession:
        self._in = open(self.device, encoding="utf-8")  # noqa: SIM115
        self._out = open(self.device, "w", encoding="utf-8")  # noqa: SIM115
        self.attach(create_input(stdin=self._in), create_output(stdout=self._out), self._out)
        return self

    def __exit__(self, *exc: object) -> None:
        for stream in (self._in, self._out):
            if stream is not None:
                stream.close()

    def attach(self, pt_input: Input, pt_output: Output, console_file: TextIO) -> None:
        """Bind the console and prompt to already-open terminal streams."""
        self.console = Console(file=console_file, highlight=False)
        self._prompt = PromptSession(input=pt_input, output=pt_output)

    def show(self, title: str, description: str, is_error: bool = False,
             key_info: str | None = None) -> None:
        assert self.console is not None
        self.console.rule(Text(title, style="bold"))
        self.console.print(Text(description, style="bold red" if is_error else ""))
        if key_info and key_info != "default":
            self.console.print(Text(f"Keygrip: {key_info}", style="dim"))

    def error(self, text: str) -> None:
        assert self.console is not None
        self.console.print(Text(text, style="bold red"))

    def ask(self, prompt: str, password: bool = False) -> str:
        """Read one line; raises EOFError/KeyboardInterrupt on cancel."""
        assert self._prompt is not None
        if self._aborted:
            raise EOFError
        if not prompt.endswith(" "):
            prompt += " "
        return self._prompt.prompt(prompt, is_password=password, pre_run=self._check_aborted)

    def interrupt(self) -> None:
        """Abort the current and any later prompt; safe from any thread."""
        self._aborted = True
        if self._prompt is None:
            return
        app = self._prompt.app
        loop = getattr(app, "loop", None)
        if app.is_running and loop is not None:
            loop.call_soon_threadsafe(self._exit_prompt)

    def _check_aborted(self) -> None:
        # An interrupt that raced the prompt start saw no running app
        if self._aborted:
            asyncio.get_running_loop().call_soon(self._exit_prompt)

    def _exit_prompt(self) -> None:
        assert self._prompt is not None
        app = self._prompt.app
        if app.is_running and app.future is not None and not app.future.done():
            app.exit(exception=EOFError())


class TerminalPresenter:
    """Presenter that talks to the user on a terminal device."""

    def __init__(
        self,
        loop: PresentationLoop,
        device: str = DEFAULT_DEVICE,
        session_factory: Callable[[str], TerminalSession] = TerminalSession,
    ) -> None:
        self._loop = loop
        self.device = device
        self._session_factory = session_factory
        self._lock = threading.Lock()
        self._pending: _Pending | None = None
        self._session: TerminalSession | None = None

    # -------------------------------------------------------------------------
    # Presenter protocol
    # -------------------------------------------------------------------------

    def request_input(self, request: InputRequest, on_complete: InputCallback) -> None:
        pending = self._begin(_Pending(on_complete, None, False))
        self._loop.post(lambda: self._run(pending, self._input, request))

    def request_confirm(self, request: ConfirmRequest, on_complete: ConfirmCallback) -> None:
        pending = self._begin(_Pending(on_complete, False))
        self._loop.post(lambda: self._run(pending, self._confirm, request))

    def request_message(self, request: MessageRequest, on_complete: MessageCallback) -> None:
        pending = self._begin(_Pending(on_complete))
        self._loop.post(lambda: self._run(pending, self._message, request))

    def force_close(self) -> None:
        with self._lock:
            pending, session = self._pending, self._session
            self._pending = None
        if session is not None:
            session.interrupt()
        if pending is not None and pending.cancel():
            log.debug("Open prompt force-closed")

    # -------------------------------------------------------------------------
    # Dialogs (presentation thread)
    # -------------------------------------------------------------------------

    def _begin(self, pending: _Pending) -> _Pending:
        with self._lock:
            self._pending = pending
        return pending

    def _run(self, pending: _Pending, dialog: Callable[..., None], request: Any) -> None:
        if pending.done:
            return
        try:
            with self._session_factory(self.device) as session:
                with self._lock:
                    if self._pending is not pending:
                        # force_close() ran while the terminal was opening
                        return
                    self._session = session
                dialog(session, pending, request)
        except (EOFError, KeyboardInterrupt):
            pending.cancel()
        except OSError as e:
            log.error("Cannot open terminal %s: %s", self.device, e)
            pending.cancel()
        finally:
            with self._lock:
                self._session = None
                if self._pending is pending:
                    self._pending = None

    def _input(self, session: TerminalSession, pending: _Pending, request: InputRequest) -> None:
        session.show(request.title, request.description, request.is_error, request.key_info)
        while not pending.done:
            first = session.ask(request.prompt, password=True)
            if not first:
                continue
            if request.repeat_prompt is not None:
                second = session.ask(request.repeat_prompt, password=True)
                if first != second:
                    session.error(request.repeat_error)
                    continue
            save = False
            if request.allow_cache and request.repeat_prompt is None:
                save = session.ask(SAVE_QUESTION).strip().lower() in _YES
            pending.complete(first, save)

    def _confirm(self, session: TerminalSession, pending: _Pending, request: ConfirmRequest) -> None:
        session.show(request.title, request.description)
        answer = session.ask(f"{request.ok_label} / {request.cancel_label}?").strip().lower()
        confirmed = answer in _YES or (bool(answer) and answer == request.ok_label.lower())
        pending.complete(confirmed)

    def _message(self, session: TerminalSession, pending: _Pending, request: MessageRequest) -> None:
        session.show(request.title, request.description)
        session.ask(f"[{request.ok_label}]")
        pending.complete()
