"""Single-source shortest paths (Dijkstra) with in-place decrease-key."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional

from .exceptions import AlgorithmError, ConfigError, InputError, TargetNotReachableError
from .graph import Float, GraphLike, Vertex, count_edges, is_vertex
from .heap import IndexedMinHeap
from .logger import Logger, NoopLogger
from .path import PathChain, reconstruct_path
from .records import FINALIZED, UNSEEN, Active, DistanceRecord, Unseen, VertexState


@dataclass(frozen=True)
class SSSPResult:
    """Distances and predecessors produced by a solver.

    Unreached vertices have distance ``inf`` and predecessor ``None``; the
    source is its own predecessor.
    """

    distances: List[Float]
    predecessors: List[Optional[Vertex]]

    def is_reachable(self, v: Vertex) -> bool:
        """Return ``True`` if ``v`` was reached from the source."""
        return self.predecessors[v] is not None


@dataclass(frozen=True)
class SolverMetrics:
    """Performance metrics collected from a solver run."""

    n: int
    m: int
    counters: Dict[str, int]
    wall_ms: float
    peak_mib: float | None = None


@dataclass(frozen=True)
class SolverConfig:
    """Configuration knobs for the solver.

    Attributes:
        validate_heap: Re-check the heap invariants after every heap
            mutation. Costs ``O(n)`` per operation; meant for debugging.
        collect_counters: Maintain the operation counters reported by
            :meth:`DijkstraSolver.summary`.
    """

    validate_heap: bool = False
    collect_counters: bool = True

    def __post_init__(self) -> None:
        for name in ("validate_heap", "collect_counters"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} must be a bool")


_COUNTERS = ("pushes", "pops", "decrease_keys", "edges_relaxed", "max_heap_size")


class DijkstraSolver:
    """Dijkstra's algorithm over an :class:`~ssspid.heap.IndexedMinHeap`.

    Each discovered vertex gets one :class:`~ssspid.records.DistanceRecord`
    that is pushed exactly once. Improvements to a vertex still in the
    frontier lower its record in place and call ``reposition`` with the slot
    id kept in the vertex's :class:`~ssspid.records.Active` state, so the heap
    never holds stale entries and never exceeds ``n`` elements.

    Args:
        G: Graph exposing ``n`` and ``edges(u)``; weights must be
            non-negative.
        source: Source vertex identifier.
        config: Optional solver configuration.
        logger: Optional event logger.

    Raises:
        InputError: If ``source`` is not a valid vertex id.
    """

    def __init__(
        self,
        G: GraphLike,
        source: Vertex,
        config: Optional[SolverConfig] = None,
        logger: Logger | None = None,
    ) -> None:
        if not is_vertex(source, G.n):
            raise InputError("source must be a valid vertex id.")
        self.G = G
        self.source = source
        self.cfg = config or SolverConfig()
        self.logger = logger or NoopLogger()
        self.counters: Dict[str, int] = dict.fromkeys(_COUNTERS, 0)
        self._records: List[Optional[DistanceRecord]] = []
        self._states: List[VertexState] = []
        self._result: Optional[SSSPResult] = None

    # ---------- utilities -------------------------------------------------

    def _count(self, name: str, amount: int = 1) -> None:
        if self.cfg.collect_counters:
            self.counters[name] += amount

    def _push(self, heap: IndexedMinHeap[DistanceRecord], rec: DistanceRecord) -> None:
        slot_id = heap.push(rec)
        self._states[rec.vertex] = Active(slot_id)
        if self.cfg.collect_counters:
            self.counters["pushes"] += 1
            self.counters["max_heap_size"] = max(self.counters["max_heap_size"], len(heap))
        self.logger.debug("push", vertex=rec.vertex, distance=rec.distance, slot_id=slot_id)

    # ---------- public API ------------------------------------------------

    def solve(self) -> SSSPResult:
        """Run the traversal from the source and return distances/predecessors.

        Every call starts from fresh tables, so repeated calls on an
        unchanged graph return identical results.

        Raises:
            InputError: If ``G.edges`` yields a neighbor id outside ``[0, n)``.
        """
        n = self.G.n
        self.counters = dict.fromkeys(_COUNTERS, 0)
        self._records = [None] * n
        self._states = [UNSEEN] * n
        records = self._records
        states = self._states
        heap: IndexedMinHeap[DistanceRecord] = IndexedMinHeap(
            n, validate=self.cfg.validate_heap
        )

        src = DistanceRecord(self.source, 0.0, self.source)
        records[self.source] = src
        self._push(heap, src)

        while not heap.is_empty():
            rec = heap.pop()
            self._count("pops")
            rec.freeze()
            u = rec.vertex
            states[u] = FINALIZED
            self.logger.debug("finalize", vertex=u, distance=rec.distance)

            for v, w in self.G.edges(u):
                if not is_vertex(v, n):
                    raise InputError(f"edge ({u}, {v!r}) leaves [0, n) with n={n}")
                self._count("edges_relaxed")
                cand = rec.distance + w
                state = states[v]
                if isinstance(state, Unseen):
                    nrec = DistanceRecord(v, cand, u)
                    records[v] = nrec
                    self._push(heap, nrec)
                elif isinstance(state, Active):
                    vrec = records[v]
                    if vrec is None:
                        raise AlgorithmError(f"active vertex {v} has no record")
                    if cand < vrec.distance:
                        vrec.update(cand, u)
                        heap.reposition(state.slot_id)
                        self._count("decrease_keys")
                        self.logger.debug(
                            "decrease_key", vertex=v, distance=cand, predecessor=u
                        )

        distances: List[Float] = [math.inf] * n
        preds: List[Optional[Vertex]] = [None] * n
        for v, rec in enumerate(records):
            if rec is not None:
                distances[v] = rec.distance
                preds[v] = rec.predecessor
        self._result = SSSPResult(distances=distances, predecessors=preds)

        self.logger.info(
            "solve",
            n=n,
            source=self.source,
            reached=sum(1 for p in preds if p is not None),
            **self.summary(),
        )
        return self._result

    def state(self, v: Vertex) -> VertexState:
        """Return the traversal state of ``v`` after the last :meth:`solve`.

        Raises:
            AlgorithmError: If called before :meth:`solve`.
            InputError: If ``v`` is out of range.
        """
        if self._result is None:
            raise AlgorithmError("Call solve() before inspecting vertex states.")
        if not is_vertex(v, self.G.n):
            raise InputError("v must be a valid vertex id.")
        return self._states[v]

    def path(self, target: Vertex) -> PathChain:
        """Return the shortest path to ``target`` as ``(vertex, distance)`` pairs.

        The pairs are ordered from ``target`` back to the source. ``solve``
        must be called beforehand.

        Raises:
            InputError: If ``target`` is out of range.
            TargetNotReachableError: If ``target`` was never reached.
        """
        if self._result is None:
            raise AlgorithmError("Call solve() before requesting paths.")
        if not is_vertex(target, self.G.n):
            raise InputError("target must be a valid vertex id.")
        try:
            return reconstruct_path(
                self._result.predecessors, self._result.distances, self.source, target
            )
        except TargetNotReachableError:
            self.logger.warning("target_unreachable", source=self.source, target=target)
            raise

    # ---------- counters --------------------------------------------------

    def summary(self) -> Dict[str, int]:
        """Return a copy of internal counter values."""
        return dict(self.counters)

    def metrics(self, wall_ms: float, peak_mib: float | None = None) -> SolverMetrics:
        """Return performance metrics for the most recent run.

        Args:
            wall_ms: Wall-clock time spent in :meth:`solve` in milliseconds.
            peak_mib: Optional peak memory usage in MiB.
        """
        return SolverMetrics(
            n=self.G.n,
            m=count_edges(self.G),
            counters=self.summary(),
            wall_ms=wall_ms,
            peak_mib=peak_mib,
        )


def shortest_path(
    G: GraphLike,
    source: Vertex,
    target: Vertex,
    config: Optional[SolverConfig] = None,
    logger: Logger | None = None,
) -> PathChain:
    """Compute the shortest path from ``source`` to ``target``.

    Returns:
        ``(vertex, distance)`` pairs from ``target`` back to ``source``.

    Raises:
        InputError: If ``source`` or ``target`` is not a valid vertex id.
        TargetNotReachableError: If no path exists.

    Examples:
        ```python
        >>> from ssspid.graph import Graph
        >>> g = Graph.from_edges(3, [(0, 1, 2.0), (1, 2, 0.5)])
        >>> shortest_path(g, 0, 2)
        [(2, 2.5), (1, 2.0), (0, 0.0)]
        ```
    """
    solver = DijkstraSolver(G, source, config=config, logger=logger)
    if not is_vertex(target, G.n):
        raise InputError("target must be a valid vertex id.")
    solver.solve()
    return solver.path(target)


__all__ = ["DijkstraSolver", "SSSPResult", "SolverConfig", "SolverMetrics", "shortest_path"]
