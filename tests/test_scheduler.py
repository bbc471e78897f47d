"""Tests for the virtual-clock scheduler."""

from typing import List

import pytest

from vantwin.control import ManualScheduler


def test_callbacks_fire_in_deadline_order() -> None:
    clock = ManualScheduler()
    fired: List[str] = []
    clock.call_later(2.0, lambda: fired.append("b"))
    clock.call_later(1.0, lambda: fired.append("a"))
    clock.call_later(2.0, lambda: fired.append("c"))
    assert clock.advance(1.5) == 1
    assert fired == ["a"]
    assert clock.now() == 1.5
    assert clock.advance(1.0) == 2
    assert fired == ["a", "b", "c"]


def test_cancelled_timer_never_fires() -> None:
    clock = ManualScheduler()
    fired: List[int] = []
    handle = clock.call_later(1.0, lambda: fired.append(1))
    assert clock.pending_count() == 1
    handle.cancel()
    assert handle.cancelled()
    assert clock.pending_count() == 0
    clock.advance(5.0)
    assert fired == []
    assert not handle.fired


def test_callbacks_scheduled_during_advance_fire_in_window() -> None:
    clock = ManualScheduler()
    times: List[float] = []

    def chain() -> None:
        times.append(clock.now())
        if len(times) < 3:
            clock.call_later(1.0, chain)

    clock.call_later(1.0, chain)
    clock.advance(10.0)
    assert times == [1.0, 2.0, 3.0]
    assert clock.now() == 10.0


def test_run_until_idle() -> None:
    clock = ManualScheduler()
    fired: List[int] = []
    clock.call_later(3.0, lambda: fired.append(3))
    clock.call_later(8.0, lambda: fired.append(8))
    assert clock.run_until_idle(max_time=5.0) == 1
    assert clock.now() == 3.0
    assert clock.run_until_idle() == 1
    assert fired == [3, 8]
    assert clock.now() == 8.0


def test_negative_values_rejected() -> None:
    clock = ManualScheduler()
    with pytest.raises(ValueError):
        clock.call_later(-1.0, lambda: None)
    with pytest.raises(ValueError):
        clock.advance(-0.1)


def test_advance_to_absolute_time() -> None:
    clock = ManualScheduler(start=1.0)
    fired: List[float] = []
    clock.call_later(2.0, lambda: fired.append(clock.now()))
    assert clock.advance_to(2.5) == 0
    assert clock.advance_to(3.0) == 1
    assert fired == [3.0]
    assert clock.now() == 3.0
    with pytest.raises(ValueError):
        clock.advance_to(2.0)


def test_deadline_one_ulp_late_still_fires() -> None:
    clock = ManualScheduler()
    fired: List[float] = []
    clock.call_later(0.1 + 0.2, lambda: fired.append(clock.now()))
    assert clock.advance_to(0.3) == 1
    assert fired == [0.3]
    strict = ManualScheduler(tolerance=0.0)
    strict.call_later(0.1 + 0.2, lambda: None)
    assert strict.advance_to(0.3) == 0
    assert strict.pending_count() == 1


def test_frame_times_reach_stage_deadline() -> None:
    clock = ManualScheduler()
    fired: List[int] = []
    frame = 0
    clock.call_later(3.0, lambda: fired.append(frame))
    for frame in range(1, 200):
        clock.advance_to(frame * (1.0 / 60.0))
    assert fired == [180]
