"""End-to-end scenarios: a full ride, and self-healing after external removal."""
from __future__ import annotations

import math

import numpy as np
from numpy.testing import assert_allclose

from tick_swing.signals import Interact, RiderDismounted, SwingAborted, SwingSettled, SwingStarted
from tick_swing.config import Fulcrum, Hitbox, ModelPart, SwingGeometry
from tick_swing.host import DisplayWorld
from tick_swing.phase import Phase
from tick_swing.scheduler import TickScheduler
from tick_swing.session import SwingController
from tick_swing.transform import Transformation

_QUARTER_X = (math.cos(math.pi / 4), math.sin(math.pi / 4), 0.0, 0.0)


def _geometry() -> SwingGeometry:
    return SwingGeometry(
        location=(-20.5, 64.0, 3.5),
        still=(
            ModelPart("frame", Transformation(translation=(0.0, 0.5, -1.0))),
            ModelPart("frame", Transformation(translation=(0.0, 0.5, 1.0))),
        ),
        rope=(
            ModelPart("rope", Transformation(translation=(0.0, -0.6, 0.0), scale=(0.1, 1.2, 0.1))),
            ModelPart("rope", Transformation(translation=(0.0, -1.4, 0.0), scale=(0.1, 1.2, 0.1))),
        ),
        rotating=(
            ModelPart("tire", Transformation(left_rotation=_QUARTER_X)),
            ModelPart("tire", Transformation(translation=(0.3, 0.0, 0.0), left_rotation=_QUARTER_X)),
            ModelPart("tire", Transformation(translation=(-0.3, 0.0, 0.0), left_rotation=_QUARTER_X)),
        ),
        interaction=Hitbox(position=(-20.5, 61.5, 3.5), width=1.0, height=1.2),
        fulcrum=Fulcrum(position=(-20.5, 64.0, 3.5), block="dark_oak_fence", radius=2.0),
    )


def _rig():
    world = DisplayWorld()
    scheduler = TickScheduler()
    controller = SwingController(world, scheduler, _geometry())
    controller.install()
    controller.spawn()
    rider = world.create("player", np.identity(4), (-18.0, 62.0, 3.0))

    # The front end reports every dismount as a signal.
    def on_dismount(w, parent, child):
        if w.get(child).kind == "player":
            controller.bus.publish(RiderDismounted(child))

    world.on_dismount(on_dismount)
    return world, scheduler, controller, rider


def _collect(controller, event_type):
    received = []
    controller.bus.subscribe(event_type, received.append)
    return received


def test_full_ride():
    world, scheduler, controller, rider = _rig()
    settled = _collect(controller, SwingSettled)
    started = _collect(controller, SwingStarted)
    transitions = []

    controller.bus.publish(Interact(rider, controller.interaction))
    scheduler.step()
    phase = controller.phase
    assert phase is not None
    osc = phase.oscillator
    assert (osc.angle, osc.angular_velocity) == (0.0, 0.0)

    # Acceleration ramp: 30 ticks with the driving amplitude.
    for _ in range(30):
        scheduler.step()
        assert phase.phase is Phase.ACCELERATING
        assert osc.amplitude == 2.0
    assert started == [{"rider": rider}]

    # Free drive while the rider stays on.
    for _ in range(10):
        scheduler.step()
        assert phase.phase is Phase.DRIVEN
        assert osc.amplitude == 0.0
        assert osc.damping == 0.5
    assert phase.tick_count == 40

    # Rider jumps off at tick 40.
    world.detach(controller.primary, rider)
    scheduler.step()
    assert phase.phase is Phase.DECELERATING
    assert osc.damping == 1.2
    assert osc.amplitude == 0.0

    for _ in range(2000):
        if not controller.state.swinging:
            break
        scheduler.step()
        if controller.state.swinging:
            assert osc.damping == 1.2
            assert osc.amplitude == 0.0
    assert not controller.state.swinging
    assert phase.settled()
    assert phase.tick_count < 40 + 2000

    # Settling cancels the task and restores the rest pose.
    assert controller.task is None
    assert controller.phase is None
    assert len(scheduler.tasks) == 1
    rope, rotating, _ = controller.groups
    for group in (rope, rotating):
        for member in group:
            assert_allclose(world.get(member.handle).matrix, member.part.transformation.swing_matrix(0.0))
    assert_allclose(world.get(controller.primary).position, (-20.5, 62.0, 3.5), atol=1e-12)

    scheduler.step()
    assert len(settled) == 1

    # Once settled, stays settled.
    for _ in range(200):
        phase.tick()
        assert phase.settled()

    # The swing can be ridden again.
    controller.bus.publish(Interact(rider, controller.interaction))
    scheduler.step()
    assert controller.state.swinging
    assert controller.phase is not phase


def test_rider_staying_on_keeps_swinging():
    world, scheduler, controller, rider = _rig()
    controller.bus.publish(Interact(rider, controller.interaction))
    scheduler.step()
    scheduler.run(300)
    assert controller.state.swinging
    assert controller.phase.phase is Phase.DRIVEN
    assert controller.state.has_passenger


def test_validation_abort():
    world, scheduler, controller, rider = _rig()
    aborted = _collect(controller, SwingAborted)
    controller.bus.publish(Interact(rider, controller.interaction))
    scheduler.step()
    scheduler.run(12)
    task = controller.task

    # Someone else removes one rope display between ticks.
    rope = controller.groups[0]
    world.remove(rope.handles[1])
    writes = world.writes

    scheduler.step()
    assert task.cancelled
    assert controller.task is None
    assert not controller.state.swinging
    assert not controller.state.has_passenger
    assert all(len(group) == 0 for group in controller.groups)
    assert set(world.handles()) == {rider, controller.interaction, controller.fulcrum}
    assert world.writes == writes

    scheduler.run(20)
    assert world.writes == writes
    assert len(aborted) == 1
    assert len(scheduler.tasks) == 1
