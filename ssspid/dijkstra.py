"""Lazy-deletion ``heapq`` Dijkstra used as a reference in tests and benchmarks."""

from __future__ import annotations

import heapq
import math
from typing import List, Optional, Set, Tuple

from .exceptions import InputError
from .graph import Float, GraphLike, Vertex, is_vertex
from .solver import SSSPResult


def dijkstra_reference(G: GraphLike, source: Vertex) -> SSSPResult:
    """Run the textbook Dijkstra algorithm with re-insertion instead of decrease-key.

    Args:
        G: Input graph with non-negative edge weights.
        source: Source vertex identifier.

    Returns:
        Distances and predecessors; the source is its own predecessor, as in
        :class:`~ssspid.solver.DijkstraSolver`.
    """
    n = G.n
    if not is_vertex(source, n):
        raise InputError("source must be a valid vertex id.")
    dist: List[Float] = [math.inf] * n
    pred: List[Optional[Vertex]] = [None] * n
    dist[source] = 0.0
    pred[source] = source
    pq: List[Tuple[Float, Vertex]] = [(0.0, source)]
    seen: Set[Vertex] = set()
    while pq:
        d, u = heapq.heappop(pq)
        if d != dist[u] or u in seen:
            continue
        seen.add(u)
        for v, w in G.edges(u):
            nd = d + w
            if nd < dist[v]:
                dist[v] = nd
                pred[v] = u
                heapq.heappush(pq, (nd, v))
    return SSSPResult(distances=dist, predecessors=pred)


__all__ = ["dijkstra_reference"]
