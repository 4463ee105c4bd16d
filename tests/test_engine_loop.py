from __future__ import annotations

import pytest

from scratchcard.engine import EngineConfig, GameEngine, Scheduler


def test_engine_runs_exact_steps():
    engine = GameEngine(EngineConfig(tick_rate=0, max_steps=5))
    engine.run()
    assert engine.step == 5
    assert engine.running is False


def test_engine_update_advances_scheduler_then_hooks():
    engine = GameEngine(EngineConfig(tick_rate=0, max_steps=2))
    calls = []
    engine.scheduler.call_later(0.01, lambda: calls.append("timer"))
    engine.add_frame_hook(lambda dt: calls.append(("hook", dt)))
    engine.start()
    engine.update(0.016)
    engine.update(0.016)
    assert calls == ["timer", ("hook", 0.016), ("hook", 0.016)]
    assert engine.running is False


def test_update_ignored_when_not_running():
    engine = GameEngine()
    engine.update(1.0)
    assert engine.step == 0


def test_scheduler_fires_in_due_order():
    scheduler = Scheduler()
    fired = []
    scheduler.call_later(0.3, lambda: fired.append("b"))
    scheduler.call_later(0.1, lambda: fired.append("a"))
    assert scheduler.advance(0.2) == 1
    assert scheduler.advance(0.2) == 1
    assert fired == ["a", "b"]
    assert scheduler.pending == []


def test_cancelled_call_never_fires():
    scheduler = Scheduler()
    fired = []
    call = scheduler.call_later(0.5, lambda: fired.append(1), label="popup")
    assert call.pending
    call.cancel()
    scheduler.advance(1.0)
    assert fired == []
    assert call.cancelled and not call.fired


def test_callback_can_cancel_later_call_in_same_batch():
    scheduler = Scheduler()
    fired = []
    second = scheduler.call_later(0.2, lambda: fired.append("second"))
    scheduler.call_later(0.1, lambda: (fired.append("first"), second.cancel()))
    scheduler.advance(1.0)
    assert fired == ["first"]


def test_cancel_all_and_negative_delay():
    scheduler = Scheduler()
    a = scheduler.call_later(1, lambda: None)
    scheduler.cancel_all()
    assert not a.pending
    with pytest.raises(ValueError):
        scheduler.call_later(-1, lambda: None)
