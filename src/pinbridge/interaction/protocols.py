"""Ports between the protocol core and its collaborators.

These protocols define the contract between:
- The command dispatcher and the UI that collects input (Presenter)
- The credential gate and the secure store (CredentialCache)
- The credential gate and the identity check (BiometricGate)

Presenter methods return immediately and report the outcome later through
the ``on_complete`` callback, usually from the presentation thread.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

# Callback signatures
InputCallback = Callable[[str | None, bool], None]  # (credential or None, save requested)
ConfirmCallback = Callable[[bool], None]
MessageCallback = Callable[[], None]


@dataclass(frozen=True, slots=True)
class InputRequest:
    """Snapshot of session state for a passphrase prompt."""

    title: str
    description: str
    prompt: str
    key_info: str
    ok_label: str
    cancel_label: str
    is_error: bool = False
    allow_cache: bool = False
    repeat_prompt: str | None = None
    repeat_error: str = ""


@dataclass(frozen=True, slots=True)
class ConfirmRequest:
    """Snapshot of session state for a yes/no question."""

    title: str
    description: str
    ok_label: str
    cancel_label: str


@dataclass(frozen=True, slots=True)
class MessageRequest:
    """Snapshot of session state for a message box."""

    title: str
    description: str
    ok_label: str


@runtime_checkable
class Presenter(Protocol):
    """UI collaborator that owns dialogs.

    Implementations:
    - TerminalPresenter: prompts on the controlling terminal
    - Test doubles that complete synchronously or after a delay

    Double-entry (repeat_prompt) validation happens inside the presenter;
    on_complete is only called once both entries match or the user cancels.
    """

    def request_input(self, request: InputRequest, on_complete: InputCallback) -> None:
        """Show a passphrase prompt."""
        ...

    def request_confirm(self, request: ConfirmRequest, on_complete: ConfirmCallback) -> None:
        """Ask the user to confirm or decline."""
        ...

    def request_message(self, request: MessageRequest, on_complete: MessageCallback) -> None:
        """Show a message and wait for dismissal."""
        ...

    def force_close(self) -> None:
        """Close any open prompt.

        A pending on_complete that has not fired yet must fire with a
        cancellation result.
        """
        ...


@runtime_checkable
class CredentialCache(Protocol):
    """Secure store for previously entered credentials."""

    def lookup(self, key: str) -> str | None:
        """Return the credential stored under key, if any."""
        ...

    def store(self, key: str, credential: str, label: str) -> None:
        """Store (or replace) the credential under key."""
        ...


@runtime_checkable
class BiometricGate(Protocol):
    """Identity check that guards use of a cached credential."""

    def authenticate(self, reason: str) -> tuple[bool, str | None]:
        """Ask the user to prove presence.

        Returns:
            (success, error description or None). May block.
        """
        ...
