"""Directed graph representation consumed by the shortest-path solver."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Protocol, Tuple

from .exceptions import GraphFormatError, InputError

Vertex = int
Float = float
Edge = Tuple[Vertex, Vertex, Float]


class GraphLike(Protocol):
    """Read-only view the solver needs from a graph."""

    n: int

    def edges(self, u: Vertex) -> Iterable[Tuple[Vertex, Float]]:
        """Yield the ``(neighbor, weight)`` pairs leaving ``u``."""
        ...


def check_weight(u: Vertex, v: Vertex, w: object) -> Float:
    """Return ``w`` as a float or raise if it is not a usable edge weight.

    Raises:
        GraphFormatError: If ``w`` is non-numeric, non-finite or negative.
    """
    if isinstance(w, bool) or not isinstance(w, numbers.Real):
        raise GraphFormatError(f"non-numeric weight {w!r} on edge ({u}, {v})")
    if not math.isfinite(w):
        raise GraphFormatError(f"non-finite weight {w} on edge ({u}, {v})")
    if w < 0:
        raise GraphFormatError(f"negative weight {w} on edge ({u}, {v})")
    return float(w)


def is_vertex(v: object, n: int) -> bool:
    """Return whether ``v`` is an integer vertex id in ``[0, n)``."""
    return isinstance(v, numbers.Integral) and not isinstance(v, bool) and 0 <= v < n


def iter_edges(G: GraphLike) -> Iterator[Edge]:
    """Yield every edge of ``G`` as a ``(u, v, w)`` tuple in adjacency order."""
    for u in range(G.n):
        for v, w in G.edges(u):
            yield u, v, w


def count_edges(G: GraphLike) -> int:
    """Return the number of edges of any :class:`GraphLike`."""
    return sum(1 for _ in iter_edges(G))


@dataclass
class Graph:
    """Directed graph with non-negative edge weights.

    Negative weights are not supported: attempting to insert an edge with
    ``w < 0`` raises :class:`~ssspid.exceptions.GraphFormatError` that cites the
    offending edge. The solver never mutates a graph.

    Attributes:
        n: Number of vertices in the range ``0`` .. ``n-1``.
        adj: Outgoing adjacency lists.
    """

    n: int

    def __post_init__(self) -> None:
        """Validate vertex count and initialize adjacency lists."""
        if isinstance(self.n, bool) or not isinstance(self.n, int) or self.n <= 0:
            raise InputError("Graph.n must be a positive integer.")
        self.adj: List[List[Tuple[Vertex, Float]]] = [[] for _ in range(self.n)]

    def add_edge(self, u: Vertex, v: Vertex, w: Float) -> None:
        """Add a directed edge from ``u`` to ``v``.

        Args:
            u: Tail vertex.
            v: Head vertex.
            w: Non-negative, finite edge weight.

        Raises:
            InputError: If ``u`` or ``v`` is not an integer id in range.
            GraphFormatError: If ``w`` is negative, infinite or not a number.

        Examples:
            ```python
            >>> g = Graph(2)
            >>> g.add_edge(0, 1, 1.5)
            >>> g.adj
            [[(1, 1.5)], []]
            ```
        """
        if not (is_vertex(u, self.n) and is_vertex(v, self.n)):
            raise InputError(f"edge ({u!r}, {v!r}) needs integer vertex ids in [0, n).")
        self.adj[u].append((int(v), check_weight(u, v, w)))

    @classmethod
    def from_edges(cls, n: int, edges: Iterable[Edge]) -> "Graph":
        """Create a graph from an iterable of ``(u, v, w)`` edges."""
        g = cls(n)
        for u, v, w in edges:
            g.add_edge(u, v, w)
        return g

    @classmethod
    def random(cls, n: int, m: int, seed: int = 0, max_weight: Float = 10.0) -> "Graph":
        """Generate ``m`` uniformly random edges over ``n`` vertices.

        Endpoints and weights in ``[0, max_weight)`` come from a
        ``random.Random(seed)`` stream, so equal seeds give equal graphs.
        """
        import random

        rnd = random.Random(seed)
        edges: List[Edge] = []
        for _ in range(m):
            u = rnd.randrange(n)
            v = rnd.randrange(n)
            w = rnd.random() * max_weight
            edges.append((u, v, w))
        return cls.from_edges(n, edges)

    def edges(self, u: Vertex) -> Iterator[Tuple[Vertex, Float]]:
        """Iterate over the outgoing ``(neighbor, weight)`` pairs of ``u``."""
        return iter(self.adj[u])

    def out_degree(self, u: Vertex) -> int:
        """Return the out-degree of vertex ``u``."""
        return len(self.adj[u])

    @property
    def m(self) -> int:
        """Total number of edges."""
        return sum(self.out_degree(u) for u in range(self.n))

    def iter_edges(self) -> Iterator[Edge]:
        """Yield every edge as a ``(u, v, w)`` tuple in adjacency order."""
        return iter_edges(self)


__all__ = [
    "Edge",
    "Float",
    "Graph",
    "GraphLike",
    "Vertex",
    "check_weight",
    "count_edges",
    "is_vertex",
    "iter_edges",
]
