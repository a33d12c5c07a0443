"""Shared type aliases and errors for tick-swing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

Handle = int

Vec3 = tuple[float, float, float]

# Quaternion as (w, x, y, z).
Quat = tuple[float, float, float, float]

IDENTITY_QUAT: Quat = (1.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True, slots=True)
class TickContext:
    tick_number: int
    dt: float
    elapsed: float
    request_stop: Callable[[], None]


class InvalidHandleError(KeyError):
    """Raised when writing to a render object that no longer exists."""

    def __init__(self, handle: int, message: str) -> None:
        self.handle = handle
        super().__init__(message)


TickCallback = Callable[[TickContext], None]
