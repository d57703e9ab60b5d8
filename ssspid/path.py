"""Utilities for reconstructing paths from predecessor arrays."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .exceptions import AlgorithmError, InputError, TargetNotReachableError
from .graph import is_vertex

Vertex = int
PathChain = List[Tuple[Vertex, float]]


def reconstruct_path(
    predecessors: Sequence[Optional[Vertex]],
    distances: Sequence[float],
    source: Vertex,
    target: Vertex,
) -> PathChain:
    """Walk predecessor links from ``target`` back to ``source``.

    Args:
        predecessors: Predecessor of each vertex, ``None`` if never reached.
            The source is its own predecessor.
        distances: Final distance of each vertex.
        source: Source vertex identifier.
        target: Target vertex identifier.

    Returns:
        ``(vertex, distance)`` pairs ordered from the target back to the
        source (both inclusive).

    Raises:
        InputError: If ``source`` or ``target`` is out of range.
        TargetNotReachableError: If ``target`` was never reached.
        AlgorithmError: If the predecessor chain does not lead to ``source``.
    """
    n = len(predecessors)
    if not (is_vertex(source, n) and is_vertex(target, n)):
        raise InputError("source/target out of range.")
    if predecessors[target] is None:
        raise TargetNotReachableError(source, target)

    chain: PathChain = []
    cur = target
    # A simple path visits each vertex at most once.
    for _ in range(n):
        chain.append((cur, distances[cur]))
        if cur == source:
            return chain
        nxt = predecessors[cur]
        if nxt is None or nxt == cur:
            break
        cur = nxt
    raise AlgorithmError(f"predecessor chain from {target} does not reach {source}")


def path_vertices(chain: PathChain) -> List[Vertex]:
    """Return the vertices of ``chain`` ordered from source to target."""
    return [v for v, _ in reversed(chain)]


def path_distance(chain: PathChain) -> float:
    """Return the total distance of ``chain`` (the target's distance)."""
    if not chain:
        raise InputError("empty path")
    return chain[0][1]


__all__ = ["PathChain", "path_distance", "path_vertices", "reconstruct_path"]
