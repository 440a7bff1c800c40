import pytest

from neuralstride.monitoring.timer_manager import ManualClock, TickScheduler


def test_task_fires_once_per_period(clock, scheduler):
    fired = []
    scheduler.every("tick", 1.0, fired.append)
    clock.advance(0.5)
    assert scheduler.run_pending() == []
    clock.advance(0.5)
    assert scheduler.run_pending() == ["tick"]
    assert fired == [1.0]


def test_missed_periods_catch_up_in_order(clock, scheduler):
    fired = []
    scheduler.every("tick", 2.0, fired.append)
    clock.advance(7)
    assert scheduler.run_pending() == ["tick"] * 3
    assert fired == [2.0, 4.0, 6.0]


def test_cancel_stops_future_runs(clock, scheduler):
    fired = []
    scheduler.every("tick", 1.0, fired.append)
    assert scheduler.cancel("tick") is True
    assert scheduler.cancel("tick") is False
    clock.advance(5)
    scheduler.run_pending()
    assert fired == []


def test_callback_may_cancel_its_own_task(clock, scheduler):
    fired = []

    def once(now):
        fired.append(now)
        scheduler.cancel("once")

    scheduler.every("once", 1.0, once)
    clock.advance(5)
    scheduler.run_pending()
    assert fired == [1.0]
    assert not scheduler.is_scheduled("once")


def test_independent_periods(clock, scheduler):
    scheduler.every("fast", 1.0, lambda now: None)
    scheduler.every("slow", 6.0, lambda now: None)
    clock.advance(6)
    fired = scheduler.run_pending()
    assert fired.count("fast") == 6
    assert fired.count("slow") == 1
    assert scheduler.get_state_snapshot()["slow"]["ready_in"] == 6.0


def test_invalid_period_rejected(scheduler):
    with pytest.raises(ValueError):
        scheduler.every("bad", 0, lambda now: None)


def test_manual_clock_cannot_go_backwards():
    clock = ManualClock(10)
    with pytest.raises(ValueError):
        clock.advance(-1)
    assert clock() == 10
    assert TickScheduler(clock).clock() == 10
