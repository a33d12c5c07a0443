"""Swing controller: spawns the assemblies and runs one swing at a time."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from tick_swing.assembly import AssemblyGroup
from tick_swing.config import SwingConfig, SwingGeometry
from tick_swing.host import RenderHost
from tick_swing.phase import Phase, PhaseController
from tick_swing.pose import PoseComposer
from tick_swing.scheduler import TaskHandle, TickScheduler
from tick_swing.signals import (
    AreaLoaded,
    Interact,
    RiderDismounted,
    RiderQuit,
    SignalBus,
    SwingAborted,
    SwingSettled,
    SwingStarted,
)
from tick_swing.transform import scaling
from tick_swing.types import Handle, TickContext, Vec3

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """Rider and motion flags shared by the controller and its signal handlers."""

    has_passenger: bool = False
    swinging: bool = False
    passenger: Handle | None = None


def area_of(position: Vec3, size: int) -> tuple[int, int]:
    """Horizontal world area (column) containing ``position``."""
    return (math.floor(position[0] / size), math.floor(position[2] / size))


class SwingController:
    """Owns one swing: its render objects, its rider and its animation task.

    Rider input arrives as signals on ``bus`` and is observed on the next
    flush; :meth:`install` schedules that flush ahead of any swing task so a
    dismount is always seen before the tick decides whether to slow down.
    """

    def __init__(
        self,
        host: RenderHost,
        scheduler: TickScheduler,
        geometry: SwingGeometry,
        config: SwingConfig | None = None,
        bus: SignalBus | None = None,
    ) -> None:
        self._host = host
        self._scheduler = scheduler
        self._geometry = geometry
        self._config = config if config is not None else SwingConfig()
        self._bus = bus if bus is not None else SignalBus()
        self.state = SessionState()

        self._still = AssemblyGroup("still", geometry.still)
        self._rope = AssemblyGroup("rope", geometry.rope)
        self._rotating = AssemblyGroup("rotating", geometry.rotating)
        self._area = area_of(geometry.location, self._config.area_size)

        self._interaction: Handle | None = None
        self._fulcrum: Handle | None = None
        self._primary: Handle | None = None
        self._composer: PoseComposer | None = None
        self._phase: PhaseController | None = None
        self._task: TaskHandle | None = None
        self._pump: TaskHandle | None = None

        if not math.isclose(scheduler.dt, self._config.time_step):
            logger.warning(
                "scheduler ticks every %.3fs but the swing is tuned for %.3fs",
                scheduler.dt,
                self._config.time_step,
            )

    @property
    def bus(self) -> SignalBus:
        return self._bus

    @property
    def groups(self) -> tuple[AssemblyGroup, AssemblyGroup, AssemblyGroup]:
        return (self._rope, self._rotating, self._still)

    @property
    def interaction(self) -> Handle | None:
        return self._interaction

    @property
    def fulcrum(self) -> Handle | None:
        return self._fulcrum

    @property
    def primary(self) -> Handle | None:
        return self._primary

    @property
    def composer(self) -> PoseComposer | None:
        return self._composer

    @property
    def phase(self) -> PhaseController | None:
        return self._phase

    @property
    def task(self) -> TaskHandle | None:
        return self._task

    @property
    def area(self) -> tuple[int, int]:
        return self._area

    # -- Lifecycle --

    def install(self) -> None:
        """Subscribe to rider signals and start flushing the bus every tick."""
        self._bus.subscribe(Interact, self._on_interact)
        self._bus.subscribe(RiderDismounted, self._on_dismounted)
        self._bus.subscribe(RiderQuit, self._on_quit)
        self._bus.subscribe(AreaLoaded, self._on_area_loaded)
        self._pump = self._scheduler.schedule_repeating(self._flush)

    def spawn(self) -> None:
        if self.state.swinging:
            self._stop_swing()
        self.state.has_passenger = False
        self.state.passenger = None
        self._remove_fixtures()
        self.clear()

        hitbox = self._geometry.interaction
        self._interaction = self._host.create(
            "interaction",
            scaling((hitbox.width, hitbox.height, hitbox.width)),
            hitbox.position,
        )
        fulcrum = self._geometry.fulcrum
        self._fulcrum = self._host.create(
            fulcrum.block, fulcrum.transformation.matrix(), fulcrum.position
        )

        location = self._geometry.location
        for group in (self._still, self._rope, self._rotating):
            group.spawn(location, self._host)
        self._primary = self._rotating.attach_followers(self._host)

        self._composer = PoseComposer(
            self._host,
            self._rotating,
            self._rope,
            self._primary,
            location,
            fulcrum.radius,
        )
        self._composer.reset_rotation()
        logger.info(
            "spawned swing at %s (%d rope, %d rotating, %d still)",
            location,
            len(self._rope),
            len(self._rotating),
            len(self._still),
        )

    def clear(self) -> None:
        for group in (self._still, self._rope, self._rotating):
            group.clear(self._host)
        self._primary = None

    def shutdown(self) -> None:
        if self.state.swinging:
            self._stop_swing()
        if self._pump is not None:
            self._pump.cancel()
            self._pump = None
        self._bus.unsubscribe(Interact, self._on_interact)
        self._bus.unsubscribe(RiderDismounted, self._on_dismounted)
        self._bus.unsubscribe(RiderQuit, self._on_quit)
        self._bus.unsubscribe(AreaLoaded, self._on_area_loaded)
        self.clear()
        self._remove_fixtures()
        logger.info("swing shut down")

    def validate(self) -> bool:
        """True if every group is intact; otherwise every group is cleared."""
        for group in (self._rope, self._rotating, self._still):
            if not group.validate(self._host):
                logger.warning("assembly %r lost a render object", group.name)
                self.clear()
                return False
        return True

    def area_loaded(self, area: tuple[int, int]) -> None:
        if self.validate():
            return
        if area == self._area:
            logger.info("area %s reloaded, respawning swing", area)
            self.spawn()

    # -- Rider --

    def interact(self, rider: Handle, target: Handle) -> bool:
        """Mount ``rider`` if it clicked the hitbox of an idle, empty swing."""
        if self.state.has_passenger or self.state.swinging:
            return False
        if target != self._interaction or self._primary is None:
            return False
        if rider in self._own_handles():
            logger.warning("refusing rider %d: it is part of the swing", rider)
            return False
        if not self.validate():
            return False

        self._host.attach(self._primary, rider)
        self.state.passenger = rider
        self.state.has_passenger = True
        self.state.swinging = True
        self._phase = PhaseController(config=self._config, on_transition=self._on_phase)
        self._task = self._scheduler.schedule_repeating(self._swing_tick)
        self._bus.publish(SwingStarted(rider))
        logger.info("rider %d mounted", rider)
        return True

    def dismount(self, rider: Handle) -> None:
        if not self.state.has_passenger or rider != self.state.passenger:
            return
        self.state.has_passenger = False
        self.state.passenger = None
        logger.info("rider %d dismounted", rider)

    def quit(self, rider: Handle) -> None:
        if not self.state.has_passenger or rider != self.state.passenger:
            return
        if self._primary is not None:
            self._host.detach(self._primary, rider)
        self.state.has_passenger = False
        self.state.passenger = None
        logger.info("rider %d quit", rider)

    # -- Tick --

    def _flush(self, ctx: TickContext) -> None:
        self._bus.flush()

    def _swing_tick(self, ctx: TickContext) -> None:
        phase = self._phase
        composer = self._composer
        if phase is None or composer is None:
            return
        if not self.validate():
            self._abort(ctx)
            return

        phase.tick()
        if phase.settled():
            composer.reset_rotation()
            self._stop_swing()
            self._bus.publish(SwingSettled(ctx.tick_number))
            logger.info("swing settled at tick %d", ctx.tick_number)
            return

        if not self.state.has_passenger and phase.phase is not Phase.DECELERATING:
            phase.slowdown()
        composer.rotate(phase.angle)

    def _abort(self, ctx: TickContext) -> None:
        self._stop_swing()
        self.state.has_passenger = False
        self.state.passenger = None
        self._bus.publish(SwingAborted(ctx.tick_number))
        logger.warning("swing aborted at tick %d", ctx.tick_number)

    def _stop_swing(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._phase = None
        self.state.swinging = False

    def _on_phase(self, old: Phase, new: Phase) -> None:
        logger.info("swing phase %s -> %s", old.value, new.value)

    def _own_handles(self) -> set[Handle]:
        owned = {h for h in (self._interaction, self._fulcrum) if h is not None}
        for group in (self._still, self._rope, self._rotating):
            owned.update(group.handles)
        return owned

    def _remove_fixtures(self) -> None:
        for handle in (self._interaction, self._fulcrum):
            if handle is not None:
                self._host.remove(handle)
        self._interaction = None
        self._fulcrum = None

    # -- Signal handlers --

    def _on_interact(self, event: Interact) -> None:
        self.interact(event.rider, event.target)

    def _on_dismounted(self, event: RiderDismounted) -> None:
        self.dismount(event.rider)

    def _on_quit(self, event: RiderQuit) -> None:
        self.quit(event.rider)

    def _on_area_loaded(self, event: AreaLoaded) -> None:
        self.area_loaded(tuple(event.area))
