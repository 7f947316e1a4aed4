from __future__ import annotations

from simmer.engine.loop import GameConfig, GameEngine


def test_engine_runs_exact_steps():
    engine = GameEngine(GameConfig(tick_rate=0, max_steps=5))
    engine.run()
    assert engine.step == 5
    assert engine.running is False


def test_engine_update_and_stop():
    engine = GameEngine(GameConfig(tick_rate=0, max_steps=2))
    engine.start()
    engine.update(0.016)
    engine.update(0.016)
    assert engine.step == 2
    assert engine.running is False


def test_systems_run_in_registration_order_with_dt():
    calls = []
    engine = GameEngine(
        GameConfig(tick_rate=0, max_steps=2),
        systems=[lambda dt: calls.append(("energy", dt)), lambda dt: calls.append(("cooking", dt))],
    )
    engine.run(fixed_dt=0.25)

    assert calls == [("energy", 0.25), ("cooking", 0.25), ("energy", 0.25), ("cooking", 0.25)]


def test_update_is_ignored_until_started():
    calls = []
    engine = GameEngine(GameConfig(tick_rate=0), systems=[calls.append])
    engine.update(1.0)
    assert engine.step == 0
    assert calls == []


def test_paused_steps_skip_systems():
    calls = []
    advancing = {"value": False}
    engine = GameEngine(
        GameConfig(tick_rate=0, max_steps=3),
        systems=[calls.append],
        is_advancing=lambda: advancing["value"],
    )
    engine.start()
    engine.update(1.0)
    engine.update(1.0)
    assert engine.step == 2
    assert calls == []

    advancing["value"] = True
    engine.update(0.5)
    assert calls == [0.5]
    assert engine.running is False


def test_add_system_after_construction():
    calls = []
    engine = GameEngine(GameConfig(tick_rate=0, max_steps=1))
    engine.add_system(calls.append)
    engine.run(fixed_dt=0.1)
    assert calls == [0.1]
