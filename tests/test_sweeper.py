"""
Tests for the recurring sweep scheduler
"""

from datetime import timedelta
from unittest.mock import Mock

from companion.app.errors import PersistenceError
from companion.session.sweeper import SweepScheduler

DAY_MS = 24 * 60 * 60 * 1000


class TestSweepScheduler:
    def test_run_once_removes_idle_sessions(self, manager, clock):
        manager.get_or_create_session(10, 1)
        clock.advance(31 * DAY_MS)

        removed = SweepScheduler(manager, max_idle=timedelta(days=30)).run_once()

        assert removed == 1
        assert manager.get_session(1) is None

    def test_run_once_survives_failure(self):
        manager = Mock()
        manager.sweep_inactive.side_effect = PersistenceError("disk full")

        assert SweepScheduler(manager).run_once() == 0

    def test_background_loop_runs_and_stops(self):
        manager = Mock()
        manager.sweep_inactive.return_value = 0
        scheduler = SweepScheduler(manager, interval=timedelta(milliseconds=10), max_idle=timedelta(days=3))

        scheduler.start()
        try:
            for _ in range(200):
                if manager.sweep_inactive.called:
                    break
                scheduler._stop.wait(0.01)
        finally:
            scheduler.stop(timeout=2)

        manager.sweep_inactive.assert_called_with(timedelta(days=3))
        assert scheduler._thread is None
