"""Tests for the phase state machine."""
from __future__ import annotations

import pytest

from tick_swing.config import SwingConfig
from tick_swing.oscillator import Oscillator
from tick_swing.phase import Phase, PhaseController


def test_initial_state():
    phase = PhaseController()
    assert phase.phase is Phase.ACCELERATING
    assert phase.tick_count == 0
    assert phase.angle == 0.0
    assert not phase.settled()


def test_uses_given_oscillator():
    osc = Oscillator()
    phase = PhaseController(osc)
    phase.tick()
    assert phase.oscillator is osc
    assert osc.elapsed_time > 0.0


def test_acceleration_ramp():
    phase = PhaseController()
    osc = phase.oscillator
    for i in range(30):
        phase.tick()
        assert phase.phase is Phase.ACCELERATING, f"tick {i}"
        assert osc.amplitude == 2.0
        assert osc.damping == 0.0

    phase.tick()
    assert phase.phase is Phase.DRIVEN
    assert osc.amplitude == 0.0
    assert osc.damping == 0.5

    for _ in range(100):
        phase.tick()
        assert phase.phase is Phase.DRIVEN
        assert osc.amplitude == 0.0
        assert osc.damping == 0.5


def test_ramp_moves_the_swing():
    phase = PhaseController()
    peak = 0.0
    for _ in range(30):
        phase.tick()
        peak = max(peak, abs(phase.angle))
    assert peak > 0.1


def test_slowdown_from_driven():
    phase = PhaseController()
    for _ in range(40):
        phase.tick()
    phase.slowdown()
    osc = phase.oscillator
    assert phase.phase is Phase.DECELERATING
    assert osc.amplitude == 0.0
    assert osc.damping == 1.2

    for _ in range(50):
        phase.tick()
        assert phase.phase is Phase.DECELERATING
        assert osc.amplitude == 0.0
        assert osc.damping == 1.2


def test_slowdown_during_ramp_never_returns_to_accelerating():
    phase = PhaseController()
    for _ in range(10):
        phase.tick()
    phase.slowdown()
    for _ in range(60):
        phase.tick()
        assert phase.phase is Phase.DECELERATING
        assert phase.oscillator.amplitude == 0.0
        assert phase.oscillator.damping == 1.2


def test_transition_callback():
    log = []
    phase = PhaseController(on_transition=lambda old, new: log.append((old, new)))
    for _ in range(35):
        phase.tick()
    phase.slowdown()
    phase.slowdown()

    assert log == [
        (Phase.ACCELERATING, Phase.DRIVEN),
        (Phase.DRIVEN, Phase.DECELERATING),
    ]


def test_not_settled_before_ramp_completes():
    phase = PhaseController(config=SwingConfig(acceleration_amplitude=0.0))
    for _ in range(29):
        phase.tick()
        assert not phase.settled()
    phase.tick()
    assert phase.tick_count == 30
    assert phase.settled()


def test_not_settled_while_driven():
    phase = PhaseController()
    for _ in range(300):
        phase.tick()
        assert not phase.settled()


@pytest.fixture
def settled_phase():
    phase = PhaseController()
    for _ in range(40):
        phase.tick()
    phase.slowdown()
    for _ in range(2000):
        phase.tick()
        if phase.settled():
            break
    return phase


def test_settles_after_slowdown(settled_phase):
    assert settled_phase.settled()
    assert settled_phase.tick_count < 40 + 2000
    assert abs(settled_phase.angle) < 0.01
    assert abs(settled_phase.angular_velocity) < 0.5


def test_settled_is_monotonic(settled_phase):
    for _ in range(500):
        settled_phase.tick()
        assert settled_phase.oscillator.damping >= 0.5
        assert settled_phase.settled()


def test_at_rest_can_flip_back_after_settling():
    phase = PhaseController(config=SwingConfig(acceleration_ticks=0))
    phase.tick()
    assert phase.at_rest()
    assert phase.settled()

    phase.slowdown()
    phase.oscillator.set_amplitude(20.0)
    phase.tick()
    assert abs(phase.angular_velocity) > 0.5
    assert not phase.at_rest()
    assert phase.settled()


def test_settled_latches_over_residual_wobble(settled_phase):
    raw = []
    for _ in range(200):
        settled_phase.tick()
        raw.append(settled_phase.at_rest())
        assert settled_phase.settled()
    assert not all(raw)
