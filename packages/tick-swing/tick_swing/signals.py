"""Rider and swing events, queued on a bus and delivered once per tick."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar, Union

from tick_swing.types import Handle


# Consumed by the swing.


@dataclass(frozen=True)
class Interact:
    """``rider`` clicked the render object ``target``."""

    rider: Handle
    target: Handle


@dataclass(frozen=True)
class RiderDismounted:
    rider: Handle


@dataclass(frozen=True)
class RiderQuit:
    """``rider`` left the world; the swing drops it."""

    rider: Handle


@dataclass(frozen=True)
class AreaLoaded:
    area: tuple[int, int]


# Published by the swing.


@dataclass(frozen=True)
class SwingStarted:
    rider: Handle


@dataclass(frozen=True)
class SwingSettled:
    tick: int


@dataclass(frozen=True)
class SwingAborted:
    """The swing lost a render object mid-ride at ``tick``."""

    tick: int


SwingEvent = Union[
    Interact,
    RiderDismounted,
    RiderQuit,
    AreaLoaded,
    SwingStarted,
    SwingSettled,
    SwingAborted,
]
EVENT_TYPES: tuple[type, ...] = (
    Interact,
    RiderDismounted,
    RiderQuit,
    AreaLoaded,
    SwingStarted,
    SwingSettled,
    SwingAborted,
)

E = TypeVar("E")


class SignalBus:
    """Routes swing events to handlers registered for their exact type.

    :meth:`publish` only queues; handlers run on :meth:`flush`, in
    subscription order. Events published by a handler during a flush wait for
    the next flush.
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = {}
        self._queue: list[SwingEvent] = []

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> None:
        if event_type not in EVENT_TYPES:
            raise TypeError(f"{event_type!r} is not a swing event")
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: type[E], handler: Callable[[E], None]) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: SwingEvent) -> None:
        if type(event) not in EVENT_TYPES:
            raise TypeError(f"{event!r} is not a swing event")
        self._queue.append(event)

    def flush(self) -> int:
        """Deliver the queued events. Returns how many were delivered."""
        batch, self._queue = self._queue, []
        for event in batch:
            for handler in list(self._handlers.get(type(event), ())):
                handler(event)
        return len(batch)

    def clear(self) -> None:
        self._queue.clear()
