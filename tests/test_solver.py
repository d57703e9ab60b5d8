"""Tests for the decrease-key Dijkstra solver."""

from __future__ import annotations

import io
import json
import math

import pytest

from ssspid import (
    AlgorithmError,
    ConfigError,
    DijkstraSolver,
    Graph,
    InputError,
    NumpyGraph,
    SolverConfig,
    StdLogger,
    TargetNotReachableError,
    dijkstra_reference,
    shortest_path,
)
from ssspid.path import path_vertices
from ssspid.records import Active, DistanceRecord, Finalized, Unseen


def _diamond() -> Graph:
    return Graph.from_edges(4, [(0, 1, 4.0), (0, 2, 1.0), (2, 1, 1.0), (1, 3, 1.0)])


def test_shortest_path_prefers_cheaper_detour():
    chain = shortest_path(_diamond(), 0, 3)
    assert chain == [(3, 3.0), (1, 2.0), (2, 1.0), (0, 0.0)]
    assert path_vertices(chain) == [0, 2, 1, 3]


def test_solver_counters_record_decrease_key():
    solver = DijkstraSolver(_diamond(), 0)
    res = solver.solve()
    assert res.distances == [0.0, 2.0, 1.0, 3.0]
    assert res.predecessors == [0, 2, 0, 1]
    assert solver.summary() == {
        "pushes": 4,
        "pops": 4,
        "decrease_keys": 1,
        "edges_relaxed": 4,
        "max_heap_size": 2,
    }


def test_source_is_its_own_predecessor():
    solver = DijkstraSolver(_diamond(), 2)
    solver.solve()
    assert solver.path(2) == [(2, 0.0)]


def test_unreachable_target_is_reported():
    g = Graph.from_edges(5, [(0, 1, 1.0), (1, 2, 1.0), (3, 0, 1.0)])
    solver = DijkstraSolver(g, 0)
    res = solver.solve()
    assert math.isinf(res.distances[3])
    assert res.predecessors[4] is None
    assert not res.is_reachable(4)
    with pytest.raises(TargetNotReachableError) as info:
        solver.path(4)
    assert info.value.source == 0
    assert info.value.target == 4
    with pytest.raises(LookupError):
        shortest_path(g, 0, 3)


def test_vertex_states_after_solve():
    g = Graph.from_edges(3, [(0, 1, 1.0)])
    solver = DijkstraSolver(g, 0)
    with pytest.raises(AlgorithmError):
        solver.state(0)
    solver.solve()
    assert isinstance(solver.state(0), Finalized)
    assert isinstance(solver.state(1), Finalized)
    assert isinstance(solver.state(2), Unseen)
    assert not isinstance(solver.state(2), Active)
    with pytest.raises(InputError):
        solver.state(-1)
    with pytest.raises(InputError):
        solver.state(3)


def test_requery_is_idempotent():
    g = Graph.random(60, 240, seed=5)
    solver = DijkstraSolver(g, 0)
    first = solver.solve()
    second = solver.solve()
    assert first.distances == second.distances
    assert first.predecessors == second.predecessors
    assert DijkstraSolver(g, 0).solve() == first


@pytest.mark.parametrize("seed", range(8))
def test_matches_reference_on_random_graphs(seed):
    g = Graph.random(80, 400, seed=seed)
    res = DijkstraSolver(g, 0, config=SolverConfig(validate_heap=True)).solve()
    ref = dijkstra_reference(g, 0)
    assert res.distances == pytest.approx(ref.distances)
    for v, p in enumerate(res.predecessors):
        if p is None or v == 0:
            continue
        best = min(w for x, w in g.edges(p) if x == v)
        assert res.distances[v] == pytest.approx(res.distances[p] + best)


def test_heap_never_exceeds_vertex_count():
    g = Graph.random(30, 600, seed=2)
    solver = DijkstraSolver(g, 0)
    solver.solve()
    c = solver.summary()
    assert c["max_heap_size"] <= g.n
    assert c["pushes"] == c["pops"]
    assert c["pushes"] <= g.n


def test_zero_weights_and_self_loops():
    g = Graph.from_edges(3, [(0, 0, 0.0), (0, 1, 0.0), (1, 1, 2.0), (1, 2, 0.0)])
    assert shortest_path(g, 0, 2) == [(2, 0.0), (1, 0.0), (0, 0.0)]


def test_numpy_graph_gives_same_result():
    edges = [(0, 1, 4.0), (0, 2, 1.0), (2, 1, 1.0), (1, 3, 1.0)]
    ng = NumpyGraph.from_edges(4, edges)
    assert DijkstraSolver(ng, 0).solve() == DijkstraSolver(_diamond(), 0).solve()


@pytest.mark.parametrize("source", [-1, 4, True, "0"])
def test_invalid_source_is_rejected(source):
    with pytest.raises(InputError):
        DijkstraSolver(_diamond(), source)


def test_invalid_target_is_rejected():
    with pytest.raises(InputError):
        shortest_path(_diamond(), 0, 9)
    solver = DijkstraSolver(_diamond(), 0)
    solver.solve()
    with pytest.raises(InputError):
        solver.path(-1)


def test_path_before_solve_fails():
    with pytest.raises(AlgorithmError):
        DijkstraSolver(_diamond(), 0).path(3)


def test_config_rejects_non_bool():
    with pytest.raises(ConfigError):
        SolverConfig(validate_heap="yes")  # type: ignore[arg-type]


def test_counters_can_be_disabled():
    solver = DijkstraSolver(_diamond(), 0, config=SolverConfig(collect_counters=False))
    solver.solve()
    assert set(solver.summary().values()) == {0}


def test_metrics_snapshot():
    solver = DijkstraSolver(_diamond(), 0)
    solver.solve()
    m = solver.metrics(wall_ms=1.5)
    assert (m.n, m.m, m.wall_ms, m.peak_mib) == (4, 4, 1.5, None)
    assert m.counters["decrease_keys"] == 1


def test_logger_receives_events():
    stream = io.StringIO()
    logger = StdLogger(level="debug", stream=stream)
    solver = DijkstraSolver(_diamond(), 0, logger=logger)
    solver.solve()
    lines = stream.getvalue().splitlines()
    assert "debug push vertex=0 distance=0.0 slot_id=0" in lines
    assert any(line.startswith("debug decrease_key vertex=1 distance=2.0") for line in lines)
    assert lines[-1].startswith("info solve n=4 source=0 reached=4")


def test_unreachable_logs_warning_as_json():
    stream = io.StringIO()
    g = Graph.from_edges(2, [])
    solver = DijkstraSolver(g, 0, logger=StdLogger(level="warning", json_fmt=True, stream=stream))
    solver.solve()
    with pytest.raises(TargetNotReachableError):
        solver.path(1)
    events = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert events == [
        {"level": "warning", "event": "target_unreachable", "source": 0, "target": 1}
    ]


def test_distance_record_update_contract():
    rec = DistanceRecord(vertex=1, distance=5.0, predecessor=0)
    rec.update(3.0, 2)
    assert (rec.distance, rec.predecessor) == (3.0, 2)
    with pytest.raises(AssertionError):
        rec.update(3.0, 4)
    rec.freeze()
    with pytest.raises(AssertionError):
        rec.update(1.0, 4)
    other = DistanceRecord(vertex=2, distance=3.0, predecessor=0)
    assert rec <= other and not rec < other


class _ListGraph:
    """Minimal graph satisfying ``GraphLike`` without any validation."""

    def __init__(self, n, adj):
        self.n = n
        self._adj = adj

    def edges(self, u):
        return iter(self._adj.get(u, []))


def test_custom_graph_is_solved():
    g = _ListGraph(3, {0: [(1, 2.0), (2, 5.0)], 1: [(2, 1.0)]})
    res = DijkstraSolver(g, 0).solve()
    assert res.distances == [0.0, 2.0, 3.0]
    assert res.predecessors == [0, 0, 1]


@pytest.mark.parametrize("bad", [-1, 3, 1.0])
def test_custom_graph_with_bad_neighbor_fails(bad):
    g = _ListGraph(3, {0: [(bad, 5.0)]})
    with pytest.raises(InputError, match=r"leaves \[0, n\)"):
        DijkstraSolver(g, 0).solve()


def test_metrics_counts_custom_graph_edges():
    g = _ListGraph(3, {0: [(1, 2.0), (2, 5.0)], 1: [(2, 1.0)]})
    solver = DijkstraSolver(g, 0)
    solver.solve()
    assert solver.metrics(wall_ms=0.0).m == 3
