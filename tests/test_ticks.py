"""Tests for the virtual and monotonic tick sources."""
import pytest

from practempo.ticks import MonotonicTickSource, VirtualTickSource


class FakeClock:
    def __init__(self) -> None:
        self.t = 100.0
        self.sleeps: list[float] = []

    def now(self) -> float:
        return self.t

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.t += seconds


class TestVirtualTickSource:
    """Deterministic virtual clock behavior."""

    def test_nothing_fires_without_advance(self):
        """Scheduling alone delivers nothing."""
        ticks = VirtualTickSource()
        calls = []
        ticks.schedule(1000, calls.append)
        assert calls == []

    def test_advance_delivers_period_deltas(self):
        """advance(3.5) at 1s cadence delivers three 1.0 deltas."""
        ticks = VirtualTickSource()
        calls = []
        ticks.schedule(1000, calls.append)
        ticks.advance(3.5)
        assert calls == [1.0, 1.0, 1.0]
        assert ticks.now == 3.5

    def test_partial_period_carries_to_next_advance(self):
        """Two half-period advances add up to one tick."""
        ticks = VirtualTickSource()
        calls = []
        ticks.schedule(1000, calls.append)
        ticks.advance(0.5)
        ticks.advance(0.5)
        assert calls == [1.0]

    def test_sub_second_interval(self):
        """A 250ms cadence delivers four quarter-second deltas per second."""
        ticks = VirtualTickSource()
        calls = []
        ticks.schedule(250, calls.append)
        ticks.advance(1.0)
        assert calls == [0.25, 0.25, 0.25, 0.25]

    def test_hundred_ms_cadence_does_not_drift(self):
        """100ms ticks land exactly on whole seconds, however many are delivered."""
        ticks = VirtualTickSource()
        calls = []
        ticks.schedule(100, calls.append)
        ticks.advance(10)
        assert len(calls) == 100
        assert all(delta == 0.1 for delta in calls)
        assert ticks.now == 10

    def test_hundred_ms_cadence_with_fractional_advances(self):
        """Advancing by 0.3 three times delivers exactly nine ticks."""
        ticks = VirtualTickSource()
        calls = []
        ticks.schedule(100, calls.append)
        for _ in range(3):
            ticks.advance(0.3)
        assert len(calls) == 9

    def test_cancel_stops_delivery(self):
        """Nothing is delivered after cancel()."""
        ticks = VirtualTickSource()
        calls = []
        handle = ticks.schedule(1000, calls.append)
        ticks.advance(2)
        ticks.cancel(handle)
        ticks.advance(5)
        assert calls == [1.0, 1.0]
        assert ticks.active() == []

    def test_cancel_unknown_handle_is_noop(self):
        """Cancelling an unknown handle does not raise."""
        ticks = VirtualTickSource()
        ticks.cancel(999)

    def test_callback_cancelling_itself(self):
        """A callback may cancel its own registration mid-advance."""
        ticks = VirtualTickSource()
        calls = []
        handle = None

        def once(delta):
            calls.append(delta)
            ticks.cancel(handle)

        handle = ticks.schedule(1000, once)
        ticks.advance(10)
        assert calls == [1.0]

    def test_callbacks_fire_in_due_order(self):
        """Registrations interleave by due time."""
        ticks = VirtualTickSource()
        order = []
        ticks.schedule(1000, lambda d: order.append("slow"))
        ticks.schedule(400, lambda d: order.append("fast"))
        ticks.advance(1.0)
        assert order == ["fast", "fast", "slow"]

    def test_fire_delivers_irregular_delta(self):
        """fire() hands an arbitrary delta over without moving the clock."""
        ticks = VirtualTickSource()
        calls = []
        ticks.schedule(1000, calls.append)
        ticks.fire(7.25)
        assert calls == [7.25]
        assert ticks.now == 0.0

    def test_invalid_interval_rejected(self):
        """A non-positive cadence raises ValueError."""
        ticks = VirtualTickSource()
        with pytest.raises(ValueError, match="interval_ms must be positive"):
            ticks.schedule(0, lambda d: None)

    def test_negative_advance_rejected(self):
        """The virtual clock never moves backwards."""
        ticks = VirtualTickSource()
        with pytest.raises(ValueError):
            ticks.advance(-1)

    def test_exception_propagates_to_caller(self):
        """A failing callback raises out of advance()."""
        ticks = VirtualTickSource()

        def boom(delta):
            raise RuntimeError("boom")

        ticks.schedule(1000, boom)
        with pytest.raises(RuntimeError, match="boom"):
            ticks.advance(1)


class TestMonotonicTickSource:
    """Real-clock tick source driven by pump()."""

    def test_pump_before_due_does_nothing(self):
        """pump() before the first period elapses fires nothing."""
        clock = FakeClock()
        ticks = MonotonicTickSource(now=clock.now, sleep=clock.sleep)
        calls = []
        ticks.schedule(1000, calls.append)
        clock.t += 0.5
        assert ticks.pump() == 0
        assert calls == []

    def test_pump_delivers_real_elapsed(self):
        """The delta is the real time since the last delivery."""
        clock = FakeClock()
        ticks = MonotonicTickSource(now=clock.now, sleep=clock.sleep)
        calls = []
        ticks.schedule(1000, calls.append)
        clock.t += 1.2
        assert ticks.pump() == 1
        assert calls == [pytest.approx(1.2)]

    def test_late_pump_coalesces_into_one_delta(self):
        """A late pump delivers one large delta instead of losing time."""
        clock = FakeClock()
        ticks = MonotonicTickSource(now=clock.now, sleep=clock.sleep)
        calls = []
        ticks.schedule(1000, calls.append)
        clock.t += 4.0
        ticks.pump()
        assert calls == [pytest.approx(4.0)]

    def test_cancelled_handle_not_delivered(self):
        """A handle cancelled earlier in the same pump is skipped."""
        clock = FakeClock()
        ticks = MonotonicTickSource(now=clock.now, sleep=clock.sleep)
        calls = []
        second = None

        def first(delta):
            calls.append("first")
            ticks.cancel(second)

        ticks.schedule(1000, first)
        second = ticks.schedule(1000, lambda d: calls.append("second"))
        clock.t += 1.0
        ticks.pump()
        assert calls == ["first"]

    def test_run_until_predicate(self):
        """run() sleeps between due times until the predicate holds."""
        clock = FakeClock()
        ticks = MonotonicTickSource(now=clock.now, sleep=clock.sleep)
        total = []
        ticks.schedule(1000, total.append)
        ticks.run(until=lambda: sum(total) >= 5)
        assert sum(total) == pytest.approx(5.0)
        assert all(s > 0 for s in clock.sleeps)

    def test_run_idles_without_registrations(self):
        """With nothing registered run() sleeps the idle period."""
        clock = FakeClock()
        ticks = MonotonicTickSource(now=clock.now, sleep=clock.sleep)
        ticks.run(until=lambda: len(clock.sleeps) >= 3, idle=0.1)
        assert clock.sleeps == [0.1, 0.1, 0.1]
