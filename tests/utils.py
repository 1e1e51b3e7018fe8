"""Shared test doubles for pinbridge tests."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from pinbridge.interaction.protocols import (
    ConfirmCallback,
    ConfirmRequest,
    InputCallback,
    InputRequest,
    MessageCallback,
    MessageRequest,
)


class FakePresenter:
    """Presenter double.

    mode:
        "sync"  - complete inside the request call
        "delay" - complete from another thread after ``delay`` seconds
        "never" - only force_close() completes the request
    """

    def __init__(
        self,
        credential: str | None = "secret",
        save: bool = False,
        confirm: bool = True,
        mode: str = "sync",
        delay: float = 0.05,
    ) -> None:
        self.credential = credential
        self.save = save
        self.confirm = confirm
        self.mode = mode
        self.delay = delay
        self.requests: list[Any] = []
        self.force_close_calls = 0
        self._pending: Any = None

    def _complete(self, callback: Any, *args: Any) -> None:
        if self.mode == "sync":
            callback(*args)
        elif self.mode == "delay":
            threading.Timer(self.delay, callback, args).start()
        else:
            self._pending = (callback, args)

    def request_input(self, request: InputRequest, on_complete: InputCallback) -> None:
        self.requests.append(request)
        self._complete(on_complete, self.credential, self.save)

    def request_confirm(self, request: ConfirmRequest, on_complete: ConfirmCallback) -> None:
        self.requests.append(request)
        self._complete(on_complete, self.confirm)

    def request_message(self, request: MessageRequest, on_complete: MessageCallback) -> None:
        self.requests.append(request)
        self._complete(on_complete)

    def force_close(self) -> None:
        self.force_close_calls += 1
        if self._pending is not None:
            callback, _ = self._pending
            self._pending = None
            if isinstance(self.requests[-1], InputRequest):
                callback(None, False)
            elif isinstance(self.requests[-1], ConfirmRequest):
                callback(False)
            else:
                callback()

    @property
    def last_request(self) -> Any:
        return self.requests[-1]


@dataclass
class FakeCache:
    items: dict[str, str] = field(default_factory=dict)
    lookups: list[str] = field(default_factory=list)
    stored: list[tuple[str, str, str]] = field(default_factory=list)
    fail: bool = False

    def lookup(self, key: str) -> str | None:
        self.lookups.append(key)
        if self.fail:
            raise RuntimeError("keyring locked")
        return self.items.get(key)

    def store(self, key: str, credential: str, label: str) -> None:
        if self.fail:
            raise RuntimeError("keyring locked")
        self.stored.append((key, credential, label))
        self.items[key] = credential


@dataclass
class FakeBiometrics:
    success: bool = True
    error: str | None = None
    reasons: list[str] = field(default_factory=list)

    def authenticate(self, reason: str) -> tuple[bool, str | None]:
        self.reasons.append(reason)
        return self.success, self.error
