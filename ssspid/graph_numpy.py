"""NumPy-backed graph representation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple

import numpy as np
import numpy.typing as npt

from .exceptions import InputError
from .graph import Edge, Float, Graph, Vertex, check_weight, is_vertex, iter_edges


@dataclass
class NumpyGraph:
    """Directed graph using NumPy arrays for adjacency lists.

    Each ``adj[u]`` is a ``(k, 2)`` float64 array of ``[neighbor, weight]``
    rows. Invalid weights are rejected exactly as in
    :class:`~ssspid.graph.Graph`.
    """

    n: int

    def __post_init__(self) -> None:
        """Validate initialization arguments and allocate adjacency storage."""
        if isinstance(self.n, bool) or not isinstance(self.n, int) or self.n <= 0:
            raise InputError("Graph.n must be a positive integer.")
        self.adj: List[npt.NDArray[np.float64]] = [
            np.zeros((0, 2), dtype=np.float64) for _ in range(self.n)
        ]

    def add_edge(self, u: Vertex, v: Vertex, w: Float) -> None:
        """Add a directed edge from ``u`` to ``v``."""
        if not (is_vertex(u, self.n) and is_vertex(v, self.n)):
            raise InputError(f"edge ({u!r}, {v!r}) needs integer vertex ids in [0, n).")
        row = np.array([[v, check_weight(u, v, w)]], dtype=np.float64)
        self.adj[u] = np.vstack([self.adj[u], row])

    @classmethod
    def from_edges(cls, n: int, edges: Iterable[Edge]) -> "NumpyGraph":
        """Construct a graph from an iterable of ``(u, v, w)`` edges.

        Rows are grouped per tail vertex and stacked once per vertex.
        """
        g = cls(n)
        rows: List[List[Tuple[float, float]]] = [[] for _ in range(n)]
        for u, v, w in edges:
            if not (is_vertex(u, n) and is_vertex(v, n)):
                raise InputError(f"edge ({u!r}, {v!r}) needs integer vertex ids in [0, n).")
            rows[u].append((float(v), check_weight(u, v, w)))
        for u, lst in enumerate(rows):
            if lst:
                g.adj[u] = np.asarray(lst, dtype=np.float64)
        return g

    def edges(self, u: Vertex) -> Iterator[Tuple[Vertex, Float]]:
        """Iterate over the outgoing ``(neighbor, weight)`` pairs of ``u``."""
        for v, w in self.adj[u]:
            yield int(v), float(w)

    def out_degree(self, u: Vertex) -> int:
        """Return the out-degree of vertex ``u``."""
        return int(self.adj[u].shape[0])

    @property
    def m(self) -> int:
        """Total number of edges."""
        return sum(self.out_degree(u) for u in range(self.n))

    def to_graph(self) -> Graph:
        """Return a standard :class:`~ssspid.graph.Graph` copy of this graph."""
        return Graph.from_edges(self.n, iter_edges(self))


__all__ = ["NumpyGraph"]
