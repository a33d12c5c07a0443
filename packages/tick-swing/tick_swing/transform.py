"""Display transformations as 4x4 homogeneous matrices."""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import quaternion  # numpy-quaternion

from tick_swing.types import IDENTITY_QUAT, Quat, Vec3


@dataclass(frozen=True)
class Transformation:
    """Static transform of a display: translation, rotations and scale.

    ``left_rotation`` is the base rotation, ``right_rotation`` the secondary
    one applied after scaling. Rotations are unit quaternions ``(w, x, y, z)``.
    """

    translation: Vec3 = (0.0, 0.0, 0.0)
    left_rotation: Quat = IDENTITY_QUAT
    scale: Vec3 = (1.0, 1.0, 1.0)
    right_rotation: Quat = IDENTITY_QUAT

    def matrix(self) -> np.ndarray:
        """Rest matrix used when the display is created."""
        return (
            translation(self.translation)
            @ rotation(self.left_rotation)
            @ scaling(self.scale)
            @ rotation(self.right_rotation)
        )

    def swing_matrix(self, angle: float) -> np.ndarray:
        """Base transform swung by ``angle`` radians about the local X axis."""
        base = (
            translation(self.translation)
            @ scaling(self.scale)
            @ rotation(self.left_rotation)
        )
        return rotate_local_x(base, angle)


def translation(v: Vec3) -> np.ndarray:
    m = np.identity(4)
    m[:3, 3] = v
    return m


def scaling(v: Vec3) -> np.ndarray:
    return np.diag([v[0], v[1], v[2], 1.0])


def rotation(q: Quat) -> np.ndarray:
    m = np.identity(4)
    m[:3, :3] = quaternion.as_rotation_matrix(np.quaternion(*q).normalized())
    return m


def rotation_x(angle: float) -> np.ndarray:
    c = math.cos(angle)
    s = math.sin(angle)
    return np.array(
        [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, c, -s, 0.0],
            [0.0, s, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def rotate_local_x(m: np.ndarray, angle: float) -> np.ndarray:
    """Pre-multiply ``m`` by a rotation about X, rotating its translation too."""
    return rotation_x(angle) @ m


def apply(m: np.ndarray, point: Vec3) -> Vec3:
    x, y, z, _ = m @ np.array([point[0], point[1], point[2], 1.0])
    return (float(x), float(y), float(z))
