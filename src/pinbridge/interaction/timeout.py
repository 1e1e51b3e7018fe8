"""Cancellable prompt timeout."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from pinbridge.interaction.rendezvous import Rendezvous
from pinbridge.logging import get_logger

log = get_logger("timeout")


class TimeoutController:
    """Fires a cancellation into a rendezvous after a delay.

    On expiry the presenter is told to close its prompt and the waiting
    thread is released with ``cancel_value``, both under the rendezvous
    lock so a user response arriving at the same moment is ignored. If the
    user responds first, expiry does nothing.
    """

    def __init__(
        self,
        seconds: float,
        rendezvous: Rendezvous[Any],
        cancel_value: Any,
        force_close: Callable[[], None],
    ) -> None:
        self._seconds = seconds
        self._rendezvous = rendezvous
        self._cancel_value = cancel_value
        self._force_close = force_close
        self._timer: threading.Timer | None = None
        self.fired = False

    def start(self) -> None:
        if self._seconds <= 0 or self._timer is not None:
            return
        self._timer = threading.Timer(self._seconds, self._expire)
        self._timer.daemon = True
        self._timer.start()
        log.debug("Timeout armed for %ss", self._seconds)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()

    def _expire(self) -> None:
        def close() -> None:
            # Runs only while nothing has been delivered yet
            self.fired = True
            self._force_close()

        self._rendezvous.deliver(self._cancel_value, before=close)
        if self.fired:
            log.info("Prompt timed out after %ss", self._seconds)

    def __enter__(self) -> TimeoutController:
        self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.cancel()
