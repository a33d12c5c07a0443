"""Per-tick poses for the swinging assemblies."""
from __future__ import annotations

import math
from dataclasses import dataclass

from tick_swing.assembly import AssemblyGroup
from tick_swing.host import RenderHost
from tick_swing.types import Handle, Vec3


@dataclass(frozen=True)
class PivotFrame:
    """Where the rotating assembly sits on its vertical orbit this tick."""

    center: Vec3
    radius: float
    orbit_angle: float

    @property
    def offset(self) -> Vec3:
        return (
            0.0,
            math.sin(self.orbit_angle) * self.radius,
            math.cos(self.orbit_angle) * self.radius,
        )

    @property
    def position(self) -> Vec3:
        cx, cy, cz = self.center
        ox, oy, oz = self.offset
        return (cx + ox, cy + oy, cz + oz)


def orbit_angle(angle: float) -> float:
    """Orbit parameter for a swing angle; 0 places the seat straight below."""
    return -(angle + math.pi / 2)


class PoseComposer:
    """Writes the swing's angle into its render objects.

    Rope and rotating members are rotated about their local X axis with a
    one tick interpolation window. The primary rotating object is then
    teleported onto the orbit, carrying its attached members and riders.
    """

    INTERPOLATION_DELAY = 0
    INTERPOLATION_DURATION = 1

    def __init__(
        self,
        host: RenderHost,
        rotating: AssemblyGroup,
        rope: AssemblyGroup,
        primary: Handle | None,
        center: Vec3,
        radius: float | None,
    ) -> None:
        self._host = host
        self._rotating = rotating
        self._rope = rope
        self._primary = primary
        self._center = center
        self._radius = radius

    @property
    def radius(self) -> float | None:
        return self._radius

    @radius.setter
    def radius(self, value: float) -> None:
        if value < 0:
            raise ValueError(f"radius must be >= 0, got {value}")
        self._radius = value

    def pivot_frame(self, angle: float) -> PivotFrame:
        if self._radius is None:
            raise RuntimeError("orbit radius has not been set")
        return PivotFrame(self._center, self._radius, orbit_angle(angle))

    def rotate(self, angle: float) -> None:
        for group in (self._rope, self._rotating):
            for member in group:
                self._host.set_transform(
                    member.handle,
                    member.part.transformation.swing_matrix(angle),
                    self.INTERPOLATION_DELAY,
                    self.INTERPOLATION_DURATION,
                )
        frame = self.pivot_frame(angle)
        if self._primary is not None:
            self._host.teleport(self._primary, frame.position, retain_passengers=True)

    def reset_rotation(self) -> None:
        self.rotate(0.0)
