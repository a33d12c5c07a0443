"""Named groups of render objects spawned from model parts."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator

from tick_swing.config import ModelPart
from tick_swing.host import RenderHost
from tick_swing.types import Handle, Vec3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssemblyMember:
    part: ModelPart
    handle: Handle


class AssemblyGroup:
    """Owns the render objects spawned for one sub-assembly.

    The first member is the primary; :meth:`attach_followers` makes every
    other member ride it so a single teleport moves the whole group.
    """

    def __init__(self, name: str, parts: Iterable[ModelPart]) -> None:
        self._name = name
        self._parts = tuple(parts)
        self._members: list[AssemblyMember] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def parts(self) -> tuple[ModelPart, ...]:
        return self._parts

    @property
    def members(self) -> list[AssemblyMember]:
        return list(self._members)

    @property
    def handles(self) -> list[Handle]:
        return [m.handle for m in self._members]

    @property
    def primary(self) -> Handle | None:
        return self._members[0].handle if self._members else None

    def __iter__(self) -> Iterator[AssemblyMember]:
        return iter(list(self._members))

    def __len__(self) -> int:
        return len(self._members)

    def spawn(self, origin: Vec3, host: RenderHost) -> None:
        for part in self._parts:
            handle = host.create(part.kind, part.transformation.matrix(), origin)
            self._members.append(AssemblyMember(part, handle))
        logger.debug("spawned %s with %d members", self._name, len(self._members))

    def attach_followers(self, host: RenderHost) -> Handle | None:
        primary = self.primary
        if primary is None:
            return None
        for member in self._members[1:]:
            host.attach(primary, member.handle)
        return primary

    def clear(self, host: RenderHost) -> None:
        if not self._members:
            return
        primary = self.primary
        for member in self._members:
            if primary is not None and member.handle != primary:
                host.detach(primary, member.handle)
            host.remove(member.handle)
        logger.debug("cleared %s (%d members)", self._name, len(self._members))
        self._members.clear()

    def is_valid(self, host: RenderHost) -> bool:
        if not self._members:
            return False
        return all(host.is_valid(m.handle) for m in self._members)

    def validate(self, host: RenderHost) -> bool:
        """Check liveness; an invalid group clears itself."""
        if self.is_valid(host):
            return True
        self.clear(host)
        return False
