import pytest

from snake_engine.effects import ActiveEffects


@pytest.fixture()
def effects(scheduler) -> ActiveEffects:
    return ActiveEffects(lambda: scheduler, duration=5.0)


def test_armed_effect_expires_after_duration(effects, scheduler):
    effects.arm("speed_boost", 1.5)
    assert effects.speed_boost == 1.5
    scheduler.advance(4.9)
    assert effects.is_active("speed_boost")
    scheduler.advance(0.2)
    assert effects.speed_boost is None


def test_slots_are_independent(effects, scheduler):
    effects.arm("shield", 5000)
    scheduler.advance(2.0)
    effects.arm("double_points", 5000)
    scheduler.advance(3.0)
    assert effects.as_dict() == {"double_points": 5000}


def test_rearming_restarts_the_window(effects, scheduler):
    effects.arm("slow_down", 0.7)
    scheduler.advance(4.0)
    effects.arm("slow_down", 0.7)
    scheduler.advance(4.0)
    assert effects.slow_down == 0.7
    scheduler.advance(1.0)
    assert effects.slow_down is None


def test_consume_cancels_timer(effects, scheduler):
    effects.arm("shield", 5000)
    effects.consume("shield")
    assert effects.shield is None
    assert scheduler.pending() == []


def test_clear_cancels_and_invalidates_old_generation(effects, scheduler):
    effects.arm("shield", 5000)
    stale = scheduler.pending()[0]
    effects.clear()
    assert scheduler.pending() == []
    assert effects.generation == 1

    effects.arm("shield", 5000)
    # a stale callback that slipped past cancellation must be a no-op
    stale.callback()
    assert effects.shield == 5000


def test_unknown_slot_rejected(effects):
    with pytest.raises(KeyError):
        effects.arm("invisibility", 1)


def test_effective_speed(effects):
    assert effects.effective_speed(150) == 150
    effects.arm("speed_boost", 1.5)
    assert effects.effective_speed(150) == pytest.approx(100)
    effects.arm("slow_down", 0.7)
    assert effects.effective_speed(150) == pytest.approx(70)
