"""Per-vertex bookkeeping used by the shortest-path solver."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .exceptions import HeapContractError
from .graph import Float, Vertex


@dataclass(eq=False)
class DistanceRecord:
    """Tentative distance of ``vertex`` and the vertex it was reached from.

    Records order by ``distance`` only; that ordering is what the heap uses.
    A record is mutated in place while its vertex is in the frontier and
    frozen once the vertex is finalized.
    """

    vertex: Vertex
    distance: Float
    predecessor: Vertex
    frozen: bool = field(default=False, repr=False)

    def __lt__(self, other: "DistanceRecord") -> bool:
        return self.distance < other.distance

    def __le__(self, other: "DistanceRecord") -> bool:
        return self.distance <= other.distance

    def update(self, distance: Float, predecessor: Vertex) -> None:
        """Lower the tentative distance and record the new predecessor.

        Raises:
            HeapContractError: If the record is frozen or ``distance`` is not
                strictly smaller than the current one.
        """
        if self.frozen:
            raise HeapContractError(f"record of vertex {self.vertex} is finalized")
        if not distance < self.distance:
            raise HeapContractError(
                f"distance of vertex {self.vertex} must decrease "
                f"({distance} >= {self.distance})"
            )
        self.distance = distance
        self.predecessor = predecessor

    def freeze(self) -> None:
        self.frozen = True


@dataclass(frozen=True)
class Unseen:
    """Vertex never pushed into the frontier."""


@dataclass(frozen=True)
class Active:
    """Vertex currently in the frontier under ``slot_id``."""

    slot_id: int


@dataclass(frozen=True)
class Finalized:
    """Vertex popped from the frontier; its distance is final."""


VertexState = Union[Unseen, Active, Finalized]

UNSEEN = Unseen()
FINALIZED = Finalized()


__all__ = [
    "Active",
    "DistanceRecord",
    "FINALIZED",
    "Finalized",
    "UNSEEN",
    "Unseen",
    "VertexState",
]
