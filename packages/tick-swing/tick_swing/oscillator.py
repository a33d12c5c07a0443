"""Damped, driven pendulum integrated in fixed steps."""
from __future__ import annotations

import math
from dataclasses import dataclass

from tick_swing.config import SwingConfig


@dataclass
class OscillatorState:
    """Scalar pendulum state. ``angle`` is wrapped into (-135, 135] degrees."""

    angle: float = 0.0
    angular_velocity: float = 0.0
    amplitude: float = 0.0
    damping: float = 0.0
    elapsed_time: float = 0.0


class Oscillator:
    """Single degree of freedom pendulum.

    Each step advances time, evaluates the acceleration at the current
    state, moves the angle with the current velocity and only then applies
    the acceleration to the velocity.
    """

    def __init__(self, config: SwingConfig | None = None) -> None:
        self._config = config if config is not None else SwingConfig()
        self._state = OscillatorState()
        self._wrap = self._config.wrap_modulus

    @property
    def config(self) -> SwingConfig:
        return self._config

    @property
    def state(self) -> OscillatorState:
        s = self._state
        return OscillatorState(
            s.angle, s.angular_velocity, s.amplitude, s.damping, s.elapsed_time
        )

    @property
    def angle(self) -> float:
        return self._state.angle

    @property
    def angular_velocity(self) -> float:
        return self._state.angular_velocity

    @property
    def amplitude(self) -> float:
        return self._state.amplitude

    @property
    def damping(self) -> float:
        return self._state.damping

    @property
    def elapsed_time(self) -> float:
        return self._state.elapsed_time

    def set_amplitude(self, amplitude: float) -> None:
        self._state.amplitude = amplitude

    def set_damping(self, damping: float) -> None:
        self._state.damping = damping

    def step(self, dt: float | None = None) -> None:
        if dt is None:
            dt = self._config.time_step
        if dt < 0:
            raise ValueError(f"dt must be >= 0, got {dt}")
        s = self._state
        s.elapsed_time += dt
        acceleration = self.angular_acceleration()
        s.angle = self.wrap(s.angle + s.angular_velocity * dt)
        s.angular_velocity += acceleration * dt

    def angular_acceleration(self) -> float:
        c = self._config
        s = self._state
        inertia = c.mass * c.length ** 2
        return (
            -(c.gravity / c.length) * math.sin(s.angle)
            - (s.damping / inertia) * s.angular_velocity
            + (s.amplitude / inertia) * math.cos(c.drive_frequency * s.elapsed_time)
        )

    def wrap(self, angle: float) -> float:
        """Signed IEEE remainder against the wrap modulus, in (-m/2, m/2]."""
        wrapped = math.remainder(angle, self._wrap)
        if wrapped <= -self._wrap / 2:
            wrapped += self._wrap
        return wrapped
