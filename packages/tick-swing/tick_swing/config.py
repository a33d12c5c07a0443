"""Swing configuration and geometry dataclasses."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from tick_swing.transform import Transformation
from tick_swing.types import IDENTITY_QUAT, Vec3


@dataclass(frozen=True)
class SwingConfig:
    """Immutable tuning for the pendulum and its phase policy.

    The defaults are tuned for a 20 ticks per second visual cadence (``time_step`` 0.05 s) and should not be
    re-derived from physics.

    Attributes:
        gravity: Gravitational acceleration (m/s^2).
        length: Pendulum length (m).
        mass: Pendulum mass (kg).
        drive_frequency: Angular frequency of the driving force (rad/s).
        time_step: Seconds integrated per tick.
        acceleration_ticks: Ticks spent in the acceleration ramp.
        acceleration_amplitude: Driving amplitude during the ramp.
        normal_damping: Damping while a rider keeps the swing going.
        deceleration_damping: Damping once the rider has left.
        still_threshold: Angular velocity below which the swing may settle.
        angle_threshold: Angle (rad) below which the swing may settle.
        wrap_degrees: Modulus of the signed angle wrap.
        area_size: Width of the square world area used for reload detection.
    """

    gravity: float = 9.81
    length: float = 1.0
    mass: float = 1.0
    drive_frequency: float = 3.20
    time_step: float = 0.05
    acceleration_ticks: int = 30
    acceleration_amplitude: float = 2.0
    normal_damping: float = 0.5
    deceleration_damping: float = 1.2
    still_threshold: float = 0.5
    angle_threshold: float = 0.01
    wrap_degrees: float = 270.0
    area_size: int = 16

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ValueError(f"length must be > 0, got {self.length}")
        if self.mass <= 0:
            raise ValueError(f"mass must be > 0, got {self.mass}")
        if self.time_step <= 0:
            raise ValueError(f"time_step must be > 0, got {self.time_step}")
        if self.acceleration_ticks < 0:
            raise ValueError(
                f"acceleration_ticks must be >= 0, got {self.acceleration_ticks}"
            )
        if self.wrap_degrees <= 0:
            raise ValueError(f"wrap_degrees must be > 0, got {self.wrap_degrees}")
        if self.area_size <= 0:
            raise ValueError(f"area_size must be > 0, got {self.area_size}")

    @property
    def wrap_modulus(self) -> float:
        return math.radians(self.wrap_degrees)


@dataclass(frozen=True)
class ModelPart:
    """One render object of an assembly: what to show and its rest transform."""

    kind: str
    transformation: Transformation = field(default_factory=Transformation)


@dataclass(frozen=True)
class Hitbox:
    """Interaction volume a rider clicks to mount the swing."""

    position: Vec3
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"hitbox dimensions must be >= 0, got {self.width}x{self.height}"
            )


@dataclass(frozen=True)
class Fulcrum:
    """Static block the swing hangs from. ``radius`` is the orbit radius."""

    position: Vec3
    block: str
    transformation: Transformation = field(default_factory=Transformation)
    radius: float = 0.0

    def __post_init__(self) -> None:
        if self.radius < 0:
            raise ValueError(f"radius must be >= 0, got {self.radius}")


@dataclass(frozen=True)
class SwingGeometry:
    """Read-only placement of one swing, consumed once at construction."""

    location: Vec3
    still: tuple[ModelPart, ...]
    rope: tuple[ModelPart, ...]
    rotating: tuple[ModelPart, ...]
    interaction: Hitbox
    fulcrum: Fulcrum

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SwingGeometry:
        """Build geometry from already-loaded JSON-like data.

        Expects ``location``, ``interaction``, ``fulcrum`` and a ``model``
        mapping with ``still``, ``rope`` and ``rotational`` part lists.
        Missing transformation fields fall back to identity rotations, zero
        translations and unit scale. Missing sections raise ``KeyError``.
        """
        model = data["model"]
        interaction = data["interaction"]
        fulcrum = data["fulcrum"]
        return cls(
            location=_vec(data["location"]),
            still=_parts(model["still"]),
            rope=_parts(model["rope"]),
            rotating=_parts(model["rotational"]),
            interaction=Hitbox(
                position=_vec(interaction["location"]),
                width=float(interaction.get("width", 0.0)),
                height=float(interaction.get("height", 0.0)),
            ),
            fulcrum=Fulcrum(
                position=_vec(fulcrum["location"]),
                block=fulcrum["material"],
                transformation=Transformation(
                    left_rotation=_quat(fulcrum.get("left_rotation")),
                    right_rotation=_quat(fulcrum.get("right_rotation")),
                ),
                radius=float(fulcrum.get("radius", 0.0)),
            ),
        )


_ZERO: Vec3 = (0.0, 0.0, 0.0)
_ONE: Vec3 = (1.0, 1.0, 1.0)


def _vec(node: Mapping[str, Any] | None, default: Vec3 = _ZERO) -> Vec3:
    if node is None:
        return default
    return (
        float(node.get("x", 0.0)),
        float(node.get("y", 0.0)),
        float(node.get("z", 0.0)),
    )


def _quat(node: Mapping[str, Any] | None) -> tuple[float, float, float, float]:
    if node is None:
        return IDENTITY_QUAT
    return (
        float(node.get("w", 1.0)),
        float(node.get("x", 0.0)),
        float(node.get("y", 0.0)),
        float(node.get("z", 0.0)),
    )


def _parts(nodes: list[Mapping[str, Any]]) -> tuple[ModelPart, ...]:
    return tuple(
        ModelPart(
            kind=node.get("texture", "player_head"),
            transformation=Transformation(
                translation=_vec(node.get("translation")),
                left_rotation=_quat(node.get("left_rotation")),
                scale=_vec(node.get("scale"), _ONE),
                right_rotation=_quat(node.get("right_rotation")),
            ),
        )
        for node in nodes
    )
