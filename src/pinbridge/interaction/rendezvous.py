"""Single-use rendezvous between the protocol thread and its signallers.

The protocol thread blocks in ``wait()`` while the presentation thread and
the timeout timer race to ``deliver()`` a result. The first delivery wins;
later ones are ignored and reported as such.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

from pinbridge.logging import get_logger

log = get_logger("rendezvous")

T = TypeVar("T")


class Rendezvous(Generic[T]):
    """One producer result, one consumer, exactly-once delivery."""

    def __init__(self, name: str = "rendezvous") -> None:
        self.name = name
        self._lock = threading.RLock()
        self._event = threading.Event()
        self._value: T | None = None

    @property
    def delivered(self) -> bool:
        return self._event.is_set()

    def deliver(self, value: T, before: Callable[[], None] | None = None) -> bool:
        """Deliver a result if nothing has been delivered yet.

        Args:
            value: The result handed to the waiting thread.
            before: Optional action run under the delivery lock, only when
                this call is going to win. A nested deliver() from inside
                ``before`` (same thread) wins instead and this call becomes
                a no-op.

        Returns:
            True if this call delivered the result.
        """
        with self._lock:
            if self._event.is_set():
                log.debug("%s: late delivery ignored", self.name)
                return False
            if before is not None:
                try:
                    before()
                except Exception as e:
                    log.warning("%s: pre-delivery action failed: %s", self.name, e)
                if self._event.is_set():
                    return False
            self._value = value
            self._event.set()
            return True

    def wait(self, timeout: float | None = None) -> T | None:
        """Block until a result is delivered.

        Args:
            timeout: Seconds to wait, or None to wait forever.

        Returns:
            The delivered value, or None if the wait timed out.
        """
        if not self._event.wait(timeout):
            return None
        return self._value
