"""
Tests for timers.py — scheduling, ordering and cancellation.
"""

from snake_arcade.timers import Scheduler


class TestScheduler:
    def test_event_fires_once_when_due(self):
        """A callback runs on the first run_due at or after its due time, and only then."""
        calls = []
        scheduler = Scheduler()
        event = scheduler.schedule(100, lambda: calls.append("x"), now=0)
        assert scheduler.run_due(99) == 0
        assert scheduler.run_due(100) == 1
        assert scheduler.run_due(500) == 0
        assert calls == ["x"]
        assert event.fired and not event.pending

    def test_events_fire_in_due_order(self):
        """Several due events fire earliest first."""
        calls = []
        scheduler = Scheduler()
        scheduler.schedule(300, lambda: calls.append("late"), now=0)
        scheduler.schedule(100, lambda: calls.append("early"), now=0)
        scheduler.run_due(1_000)
        assert calls == ["early", "late"]

    def test_cancelled_event_never_fires(self):
        """cancel() is idempotent and suppresses the callback."""
        calls = []
        scheduler = Scheduler()
        event = scheduler.schedule(10, lambda: calls.append("x"), now=0)
        event.cancel()
        event.cancel()
        assert scheduler.run_due(100) == 0
        assert calls == []
        assert event.cancelled

    def test_cancel_all(self):
        """cancel_all drops every pending event."""
        calls = []
        scheduler = Scheduler()
        first = scheduler.schedule(10, lambda: calls.append(1), now=0)
        scheduler.schedule(20, lambda: calls.append(2), now=0)
        assert len(scheduler) == 2
        scheduler.cancel_all()
        assert len(scheduler) == 0
        assert scheduler.run_due(100) == 0
        assert calls == []
        assert first.cancelled
