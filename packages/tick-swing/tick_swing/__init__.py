"""tick-swing - A tick-driven tire swing: pendulum, phase control and 3D poses."""
from __future__ import annotations

from tick_swing.assembly import AssemblyGroup, AssemblyMember
from tick_swing.config import Fulcrum, Hitbox, ModelPart, SwingConfig, SwingGeometry
from tick_swing.host import Display, DisplayWorld, RenderHost
from tick_swing.oscillator import Oscillator, OscillatorState
from tick_swing.phase import Phase, PhaseController
from tick_swing.pose import PivotFrame, PoseComposer
from tick_swing.scheduler import TaskHandle, TickScheduler
from tick_swing.session import SessionState, SwingController
from tick_swing.signals import SignalBus
from tick_swing.transform import Transformation
from tick_swing.types import Handle, InvalidHandleError, TickContext

__all__ = [
    "AssemblyGroup",
    "AssemblyMember",
    "Display",
    "DisplayWorld",
    "Fulcrum",
    "Handle",
    "Hitbox",
    "InvalidHandleError",
    "ModelPart",
    "Oscillator",
    "OscillatorState",
    "Phase",
    "PhaseController",
    "PivotFrame",
    "PoseComposer",
    "RenderHost",
    "SessionState",
    "SignalBus",
    "SwingConfig",
    "SwingController",
    "SwingGeometry",
    "TaskHandle",
    "TickContext",
    "TickScheduler",
    "Transformation",
]
