"""Phase state machine layered on the oscillator."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from tick_swing.config import SwingConfig
from tick_swing.oscillator import Oscillator

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Amplitude/damping policy currently applied to the oscillator."""

    ACCELERATING = "accelerating"
    DRIVEN = "driven"
    DECELERATING = "decelerating"


class PhaseController:
    """Decides each tick what amplitude and damping the oscillator runs with.

    ``ACCELERATING`` pushes with a fixed amplitude for the first
    ``acceleration_ticks`` ticks, then ``DRIVEN`` lets the swing run with
    normal damping for as long as nobody calls :meth:`slowdown`.
    ``DECELERATING`` is terminal: amplitude and damping are never touched
    again and the controller only steps until the swing settles.
    """

    def __init__(
        self,
        oscillator: Oscillator | None = None,
        config: SwingConfig | None = None,
        on_transition: Callable[[Phase, Phase], None] | None = None,
    ) -> None:
        if oscillator is None:
            oscillator = Oscillator(config)
        self._oscillator = oscillator
        self._config = config if config is not None else oscillator.config
        self._on_transition = on_transition
        self._phase = Phase.ACCELERATING
        self._tick_count = 0
        self._settled = False

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def oscillator(self) -> Oscillator:
        return self._oscillator

    @property
    def angle(self) -> float:
        return self._oscillator.angle

    @property
    def angular_velocity(self) -> float:
        return self._oscillator.angular_velocity

    def tick(self) -> None:
        c = self._config
        if self._phase is Phase.ACCELERATING and self._tick_count >= c.acceleration_ticks:
            self._transition(Phase.DRIVEN)

        if self._phase is Phase.ACCELERATING:
            self._oscillator.set_amplitude(c.acceleration_amplitude)
        elif self._phase is Phase.DRIVEN:
            self._oscillator.set_amplitude(0.0)
            self._oscillator.set_damping(c.normal_damping)

        self._oscillator.step(c.time_step)
        self._tick_count += 1
        if not self._settled and self.at_rest():
            self._settled = True
            logger.debug("swing at rest after %d ticks", self._tick_count)

    def slowdown(self) -> None:
        """Enter ``DECELERATING``. Further calls are no-ops."""
        if self._phase is Phase.DECELERATING:
            return
        self._oscillator.set_amplitude(0.0)
        self._oscillator.set_damping(self._config.deceleration_damping)
        self._transition(Phase.DECELERATING)

    def settled(self) -> bool:
        """Latched :meth:`at_rest`.

        Becomes true at the end of the first tick where :meth:`at_rest` holds
        and stays true afterwards, even though the raw predicate can flip back
        while the swing keeps wobbling below the velocity threshold.
        """
        return self._settled

    def at_rest(self) -> bool:
        """Raw rest check: slow and near vertical once the ramp is over."""
        c = self._config
        return (
            abs(self._oscillator.angular_velocity) < c.still_threshold
            and abs(self._oscillator.angle) < c.angle_threshold
            and self._tick_count >= c.acceleration_ticks
        )

    def _transition(self, new: Phase) -> None:
        old = self._phase
        self._phase = new
        logger.debug("phase %s -> %s at tick %d", old.value, new.value, self._tick_count)
        if self._on_transition is not None:
            self._on_transition(old, new)
