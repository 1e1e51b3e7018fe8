"""Presentation thread work queue.

UI work runs on one dedicated thread (the process main thread when started
from the CLI) while the protocol thread blocks on a rendezvous. Presenters
post closures here instead of touching the UI from the protocol thread.
"""

from __future__ import annotations

import queue
from collections.abc import Callable

from pinbridge.logging import get_logger

log = get_logger("presentation")

_STOP = object()


class PresentationLoop:
    """Serial executor for UI callables."""

    def __init__(self) -> None:
        self._queue: queue.Queue[object] = queue.Queue()

    def post(self, job: Callable[[], None]) -> None:
        """Schedule a callable on the presentation thread."""
        self._queue.put(job)

    def stop(self) -> None:
        """Ask the loop to exit once queued work is done."""
        self._queue.put(_STOP)

    def run(self) -> None:
        """Process jobs on the calling thread until stop() is called."""
        log.debug("Presentation loop started")
        try:
            while True:
                job = self._queue.get()
                if job is _STOP:
                    break
                try:
                    job()  # type: ignore[operator]
                except Exception as e:
                    log.error("Presentation job failed: %s", e)
        finally:
            log.debug("Presentation loop stopped")

