"""Tests for the rendezvous, timeout controller and presentation loop."""

from __future__ import annotations

import threading
import time

from pinbridge.interaction.presentation import PresentationLoop
from pinbridge.interaction.rendezvous import Rendezvous
from pinbridge.interaction.timeout import TimeoutController


class TestRendezvous:
    def test_first_delivery_wins(self) -> None:
        rendezvous: Rendezvous[str] = Rendezvous()
        assert rendezvous.deliver("first") is True
        assert rendezvous.deliver("second") is False
        assert rendezvous.wait() == "first"

    def test_wait_timeout(self) -> None:
        rendezvous: Rendezvous[str] = Rendezvous()
        assert rendezvous.wait(timeout=0.01) is None
        assert not rendezvous.delivered

    def test_cross_thread(self) -> None:
        rendezvous: Rendezvous[int] = Rendezvous()
        threading.Timer(0.02, rendezvous.deliver, (7,)).start()
        assert rendezvous.wait(timeout=5) == 7

    def test_before_runs_only_for_winner(self) -> None:
        calls: list[str] = []
        rendezvous: Rendezvous[str] = Rendezvous()
        rendezvous.deliver("user")
        rendezvous.deliver("timeout", before=lambda: calls.append("close"))
        assert calls == []

    def test_nested_delivery_from_before_wins(self) -> None:
        """A synchronous completion triggered by ``before`` takes precedence."""
        rendezvous: Rendezvous[str] = Rendezvous()
        result = rendezvous.deliver("timeout", before=lambda: rendezvous.deliver("closed"))
        assert result is False
        assert rendezvous.wait() == "closed"

    def test_before_failure_still_delivers(self) -> None:
        def boom() -> None:
            raise RuntimeError("close failed")

        rendezvous: Rendezvous[str] = Rendezvous()
        assert rendezvous.deliver("timeout", before=boom) is True
        assert rendezvous.wait() == "timeout"


class TestTimeoutController:
    def test_fires(self) -> None:
        closes: list[int] = []
        rendezvous: Rendezvous[str] = Rendezvous()
        controller = TimeoutController(0.05, rendezvous, "cancelled", lambda: closes.append(1))
        with controller:
            assert rendezvous.wait(timeout=5) == "cancelled"
        assert controller.fired
        assert closes == [1]

    def test_zero_never_fires(self) -> None:
        rendezvous: Rendezvous[str] = Rendezvous()
        with TimeoutController(0, rendezvous, "cancelled", lambda: None) as controller:
            assert rendezvous.wait(timeout=0.1) is None
        assert not controller.fired

    def test_cancelled_on_exit(self) -> None:
        closes: list[int] = []
        rendezvous: Rendezvous[str] = Rendezvous()
        with TimeoutController(0.05, rendezvous, "cancelled", lambda: closes.append(1)):
            rendezvous.deliver("answer")
        time.sleep(0.15)
        assert closes == []
        assert rendezvous.wait() == "answer"

    def test_late_expiry_is_noop(self) -> None:
        """Expiry after delivery neither closes nor overrides the result."""
        closes: list[int] = []
        rendezvous: Rendezvous[str] = Rendezvous()
        controller = TimeoutController(1, rendezvous, "cancelled", lambda: closes.append(1))
        rendezvous.deliver("answer")
        controller._expire()
        assert closes == []
        assert not controller.fired
        assert rendezvous.wait() == "answer"


class TestPresentationLoop:
    def test_runs_jobs_in_order(self) -> None:
        loop = PresentationLoop()
        seen: list[int] = []
        for i in range(3):
            loop.post(lambda i=i: seen.append(i))
        loop.stop()
        loop.run()
        assert seen == [0, 1, 2]

    def test_failing_job_does_not_stop_loop(self) -> None:
        loop = PresentationLoop()
        seen: list[str] = []

        def boom() -> None:
            raise RuntimeError("broken dialog")

        loop.post(boom)
        loop.post(lambda: seen.append("after"))
        loop.stop()
        loop.run()
        assert seen == ["after"]

    def test_jobs_run_on_loop_thread(self) -> None:
        """Jobs posted from another thread run on the thread that called run()."""
        loop = PresentationLoop()
        names: list[str] = []

        def protocol_side() -> None:
            loop.post(lambda: names.append(threading.current_thread().name))
            loop.stop()

        poster = threading.Thread(target=protocol_side, name="assuan")
        poster.start()
        loop.run()
        poster.join(timeout=5)
        assert names == [threading.current_thread().name]
