"""Render host contract and an in-memory display world."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Protocol, runtime_checkable

import numpy as np

from tick_swing.transform import apply
from tick_swing.types import Handle, InvalidHandleError, Vec3


@runtime_checkable
class RenderHost(Protocol):
    """Capabilities the swing consumes from whatever world renders it."""

    def create(self, kind: str, matrix: np.ndarray, position: Vec3) -> Handle:
        ...

    def remove(self, handle: Handle) -> None:
        ...

    def is_valid(self, handle: Handle) -> bool:
        ...

    def set_transform(
        self,
        handle: Handle,
        matrix: np.ndarray,
        interpolation_delay: int = 0,
        interpolation_duration: int = 0,
    ) -> None:
        ...

    def teleport(self, handle: Handle, position: Vec3, retain_passengers: bool = False) -> None:
        ...

    def attach(self, parent: Handle, child: Handle) -> None:
        ...

    def detach(self, parent: Handle, child: Handle) -> None:
        ...


@dataclass
class Display:
    """State of one render object as last written by the swing."""

    kind: str
    matrix: np.ndarray
    position: Vec3
    interpolation_delay: int = 0
    interpolation_duration: int = 0
    parent: Handle | None = None
    passengers: list[Handle] = field(default_factory=list)


HookCallback = Callable[["DisplayWorld", Handle, Display], None]
DismountCallback = Callable[["DisplayWorld", Handle, Handle], None]


class DisplayWorld:
    """Reference :class:`RenderHost` keeping every display in memory.

    Handles are never reused. Passengers ride at their vehicle's position.
    ``writes`` counts transform and position writes, for observers that
    need to know whether anything was posed.
    """

    def __init__(self) -> None:
        self._displays: dict[Handle, Display] = {}
        self._next_id: Handle = 0
        self._on_create: list[HookCallback] = []
        self._on_remove: list[HookCallback] = []
        self._on_dismount: list[DismountCallback] = []
        self.writes = 0

    def create(self, kind: str, matrix: np.ndarray, position: Vec3) -> Handle:
        handle = self._next_id
        self._next_id += 1
        display = Display(kind=kind, matrix=np.array(matrix, dtype=float), position=position)
        self._displays[handle] = display
        for cb in self._on_create:
            cb(self, handle, display)
        return handle

    def remove(self, handle: Handle) -> None:
        display = self._displays.get(handle)
        if display is None:
            return
        if display.parent is not None:
            self.detach(display.parent, handle)
        for child in list(display.passengers):
            self.detach(handle, child)
        del self._displays[handle]
        for cb in self._on_remove:
            cb(self, handle, display)

    def is_valid(self, handle: Handle) -> bool:
        return handle in self._displays

    def get(self, handle: Handle) -> Display:
        display = self._displays.get(handle)
        if display is None:
            raise InvalidHandleError(handle, f"Display {handle} does not exist")
        return display

    def handles(self, kind: str | None = None) -> list[Handle]:
        return [
            h for h, d in self._displays.items() if kind is None or d.kind == kind
        ]

    def set_transform(
        self,
        handle: Handle,
        matrix: np.ndarray,
        interpolation_delay: int = 0,
        interpolation_duration: int = 0,
    ) -> None:
        display = self.get(handle)
        display.matrix = np.array(matrix, dtype=float)
        display.interpolation_delay = interpolation_delay
        display.interpolation_duration = interpolation_duration
        self.writes += 1

    def teleport(self, handle: Handle, position: Vec3, retain_passengers: bool = False) -> None:
        display = self.get(handle)
        if not retain_passengers:
            for child in list(display.passengers):
                self.detach(handle, child)
        self._move(display, position)
        self.writes += 1

    def attach(self, parent: Handle, child: Handle) -> None:
        if parent == child:
            raise ValueError(f"Display {parent} cannot ride itself")
        vehicle = self.get(parent)
        rider = self.get(child)
        ancestor = vehicle.parent
        while ancestor is not None:
            if ancestor == child:
                raise ValueError(f"Display {child} already carries {parent}")
            ancestor = self._displays[ancestor].parent
        if rider.parent is not None:
            self.detach(rider.parent, child)
        rider.parent = parent
        vehicle.passengers.append(child)
        self._move(rider, vehicle.position)

    def detach(self, parent: Handle, child: Handle) -> None:
        vehicle = self._displays.get(parent)
        if vehicle is None or child not in vehicle.passengers:
            return
        vehicle.passengers.remove(child)
        rider = self._displays.get(child)
        if rider is not None:
            rider.parent = None
        for cb in self._on_dismount:
            cb(self, parent, child)

    def passengers(self, handle: Handle) -> list[Handle]:
        return list(self.get(handle).passengers)

    def world_point(self, handle: Handle, local: Vec3 = (0.0, 0.0, 0.0)) -> Vec3:
        """World position of ``local`` in the display's transformed frame."""
        display = self.get(handle)
        x, y, z = apply(display.matrix, local)
        px, py, pz = display.position
        return (px + x, py + y, pz + z)

    def _move(self, display: Display, position: Vec3) -> None:
        display.position = position
        for child in display.passengers:
            self._move(self._displays[child], position)

    # -- Lifecycle hooks --

    def on_create(self, callback: HookCallback) -> None:
        self._on_create.append(callback)

    def on_remove(self, callback: HookCallback) -> None:
        self._on_remove.append(callback)

    def on_dismount(self, callback: DismountCallback) -> None:
        self._on_dismount.append(callback)

    def off_dismount(self, callback: DismountCallback) -> None:
        try:
            self._on_dismount.remove(callback)
        except ValueError:
            pass
