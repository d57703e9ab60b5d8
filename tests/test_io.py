"""Tests for graph file readers and writers."""

from __future__ import annotations

import pytest

from ssspid import Graph, GraphFormatError, NumpyGraph, read_graph, write_graph
from ssspid.io import detect_format, read_edgelist_source


def _sample() -> Graph:
    # Vertex 4 has no edges at all.
    return Graph.from_edges(5, [(0, 1, 4.0), (0, 2, 1.0), (2, 1, 1.5), (1, 3, 0.25)])


@pytest.mark.parametrize("suffix", [".csv", ".jsonl", ".mtx", ".graphml", ".txt"])
def test_round_trip_keeps_edges_and_vertex_count(tmp_path, suffix):
    path = tmp_path / f"g{suffix}"
    g = _sample()
    write_graph(g, str(path))
    back = read_graph(str(path))
    assert list(back.iter_edges()) == list(g.iter_edges())
    if suffix != ".jsonl":
        assert back.n == 5


def test_jsonl_infers_vertex_count_unless_given(tmp_path):
    path = tmp_path / "g.jsonl"
    write_graph(_sample(), str(path))
    assert read_graph(str(path)).n == 4
    assert read_graph(str(path), n=6).n == 6


def test_numpy_graph_can_be_written(tmp_path):
    path = tmp_path / "g.csv"
    write_graph(NumpyGraph.from_edges(2, [(0, 1, 2.5)]), str(path))
    assert list(read_graph(str(path)).iter_edges()) == [(0, 1, 2.5)]


def test_csv_skips_comments_and_short_rows(tmp_path):
    path = tmp_path / "g.tsv"
    path.write_text("# header\n0\t1\t2.0\n\n1,2\n1,2,3.5\n", encoding="utf-8")
    g = read_graph(str(path))
    assert g.n == 3
    assert list(g.iter_edges()) == [(0, 1, 2.0), (1, 2, 3.5)]


def test_edgelist_header_and_source(tmp_path):
    path = tmp_path / "g.txt"
    path.write_text("4 2 1\n1 2 3\n2 3 1\n", encoding="utf-8")
    g = read_graph(str(path))
    assert g.n == 4
    assert read_edgelist_source(str(path)) == 1
    path.write_text("4 0\n", encoding="utf-8")
    assert read_edgelist_source(str(path)) is None
    assert read_graph(str(path)).m == 0


@pytest.mark.parametrize(
    "name,content",
    [
        ("bad.txt", "3 1 0\n0 1\n"),
        ("bad.txt", "three 1 0\n"),
        ("bad.csv", "0,1,heavy\n"),
        ("bad.jsonl", '{"u": 0, "v": 1}\n'),
        ("bad.mtx", "%%MatrixMarket matrix coordinate real general\n"),
        ("bad.graphml", "<graphml"),
        ("empty.csv", "# nothing\n"),
        ("neg.csv", "0,1,-2.0\n"),
        ("short.txt", "2 1 0\n0 5 1.0\n"),
    ],
)
def test_malformed_files_raise(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    with pytest.raises(GraphFormatError):
        read_graph(str(path))


def test_vertex_count_override_must_cover_edges(tmp_path):
    path = tmp_path / "g.csv"
    path.write_text("0,3,1.0\n", encoding="utf-8")
    with pytest.raises(GraphFormatError):
        read_graph(str(path), n=2)


def test_unknown_format(tmp_path):
    path = tmp_path / "g.bin"
    path.write_text("", encoding="utf-8")
    assert detect_format(path) is None
    with pytest.raises(GraphFormatError):
        read_graph(str(path))
    with pytest.raises(GraphFormatError):
        write_graph(_sample(), str(path))
    write_graph(_sample(), str(path), fmt="csv")
    assert read_graph(str(path), fmt="csv").m == 4
