"""
Tests for the polling scheduler, using a mock timer instead of threads.
"""

from unittest.mock import MagicMock, Mock

import pytest

from src.utils.scheduler import PollingScheduler


def test_start_arms_timer():
    timer_factory = MagicMock()
    scheduler = PollingScheduler(Mock(), interval=2.0, timer_factory=timer_factory)

    scheduler.start()
    scheduler.start()

    assert scheduler.running is True
    timer_factory.assert_called_once_with(2.0, scheduler.tick)
    timer_factory.return_value.start.assert_called_once()


def test_tick_runs_callback_and_rearms():
    callback = Mock()
    timer_factory = MagicMock()
    scheduler = PollingScheduler(callback, interval=1.5, timer_factory=timer_factory)

    scheduler.start()
    scheduler.tick()

    callback.assert_called_once_with()
    assert timer_factory.call_count == 2


def test_stop_cancels_pending_timer():
    timer_factory = MagicMock()
    scheduler = PollingScheduler(Mock(), timer_factory=timer_factory)

    scheduler.start()
    scheduler.stop()
    scheduler.tick()

    assert scheduler.running is False
    timer_factory.return_value.cancel.assert_called_once()
    # A tick that was already in flight does not re-arm after stop
    assert timer_factory.call_count == 1


def test_failing_callback_keeps_polling():
    callback = Mock(side_effect=RuntimeError("boom"))
    timer_factory = MagicMock()
    scheduler = PollingScheduler(callback, timer_factory=timer_factory)

    scheduler.start()
    scheduler.tick()

    assert timer_factory.call_count == 2


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        PollingScheduler(Mock(), interval=0)
