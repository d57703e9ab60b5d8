"""Graph input/output helpers.

Supported formats (auto-detected from the file extension):

* ``csv`` (``.csv``, ``.tsv``): ``u,v,w`` rows, ``#`` comments.
* ``jsonl`` (``.jsonl``, ``.json``): one ``{"u": .., "v": .., "w": ..}`` per line.
* ``mtx``: Matrix Market coordinate files (1-based ids).
* ``graphml``: ``<edge source=.. target=.. weight=..>`` elements.
* ``edgelist`` (``.txt``): a ``n m [source]`` header followed by ``u v w`` lines.

``jsonl`` carries no vertex count and ``csv`` only an optional ``# n=<count>``
comment; without one the count is inferred as the largest id plus one unless
``n`` is passed to :func:`read_graph`.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from .exceptions import GraphFormatError
from .graph import Graph, GraphLike, count_edges, iter_edges

EdgeList = List[Tuple[int, int, float]]
ReadResult = Tuple[Optional[int], EdgeList]


def _parse_edge(parts: List[str], path: Path, lineno: int) -> Tuple[int, int, float]:
    try:
        return int(parts[0].strip()), int(parts[1].strip()), float(parts[2].strip())
    except ValueError as exc:
        raise GraphFormatError(f"{path}:{lineno}: malformed edge {parts!r}") from exc


def _read_csv(path: Path) -> ReadResult:
    """Read ``u,v,w`` rows; tabs are accepted as separators.

    Blank lines, ``#`` comments and rows with fewer than three columns are
    skipped. A ``# n=<count>`` comment declares the vertex count.
    """
    edges: EdgeList = []
    declared: Optional[int] = None
    with path.open("r", encoding="utf-8") as fh:
        for lineno, raw in enumerate(fh, start=1):
            row = raw.strip()
            if not row:
                continue
            if row.startswith("#"):
                key, sep, value = row[1:].partition("=")
                if sep and key.strip() == "n" and value.strip().isdigit():
                    declared = int(value)
                continue
            parts = row.replace("\t", ",").split(",")
            if len(parts) < 3:
                continue
            edges.append(_parse_edge(parts, path, lineno))
    return declared, edges


def _write_csv(path: Path, G: GraphLike) -> None:
    with path.open("w", encoding="utf-8") as fh:
        fh.write(f"# n={G.n}\n")
        for u, v, w in iter_edges(G):
            fh.write(f"{u},{v},{w}\n")


def _read_jsonl(path: Path) -> ReadResult:
    """Read JSON Lines objects with keys ``u``, ``v`` and ``w``."""
    edges: EdgeList = []
    with path.open("r", encoding="utf-8") as fh:
        for lineno, raw in enumerate(fh, start=1):
            row = raw.strip()
            if not row:
                continue
            try:
                obj = json.loads(row)
                edges.append((int(obj["u"]), int(obj["v"]), float(obj["w"])))
            except (ValueError, KeyError, TypeError) as exc:
                raise GraphFormatError(f"{path}:{lineno}: malformed edge record") from exc
    return None, edges


def _write_jsonl(path: Path, G: GraphLike) -> None:
    with path.open("w", encoding="utf-8") as fh:
        for u, v, w in iter_edges(G):
            fh.write(json.dumps({"u": u, "v": v, "w": w}) + "\n")


def _read_mtx(path: Path) -> ReadResult:
    """Read a Matrix Market coordinate file.

    Lines starting with ``%`` are comments. The first other line holds
    ``rows cols entries``; ids in the file are 1-based.
    """
    edges: EdgeList = []
    n: Optional[int] = None
    with path.open("r", encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, start=1):
            line = line.strip()
            if not line or line.startswith("%"):
                continue
            if n is None:
                try:
                    nrows, ncols, _ = map(int, line.split())
                except ValueError as exc:
                    raise GraphFormatError(f"{path}:{lineno}: bad size line") from exc
                n = max(nrows, ncols)
                continue
            parts = line.split()
            if len(parts) < 3:
                continue
            u, v, w = _parse_edge(parts, path, lineno)
            edges.append((u - 1, v - 1, w))
    if n is None:
        raise GraphFormatError(f"{path}: missing Matrix Market size line")
    return n, edges


def _write_mtx(path: Path, G: GraphLike) -> None:
    edges = list(iter_edges(G))
    with path.open("w", encoding="utf-8") as fh:
        fh.write("%%MatrixMarket matrix coordinate real general\n")
        fh.write(f"{G.n} {G.n} {len(edges)}\n")
        for u, v, w in edges:
            fh.write(f"{u+1} {v+1} {w}\n")


def _graphml_id(raw: str, path: Path) -> int:
    try:
        return int(raw[1:]) if raw.startswith("n") else int(raw)
    except ValueError as exc:
        raise GraphFormatError(f"{path}: non-integer node id {raw!r}") from exc


def _read_graphml(path: Path) -> ReadResult:
    """Parse GraphML ``node`` and ``edge`` elements.

    Node ids may be plain integers or ``n<int>``. The weight is taken from a
    ``weight`` attribute or a ``<data key="w">`` child and defaults to ``1.0``.
    """
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise GraphFormatError(f"{path}: {exc}") from exc
    ns = "{http://graphml.graphdrawing.org/xmlns}"
    node_ids = [_graphml_id(node.attrib.get("id", ""), path) for node in root.iter(f"{ns}node")]
    edges: EdgeList = []
    for edge in root.iter(f"{ns}edge"):
        u = _graphml_id(edge.attrib.get("source", ""), path)
        v = _graphml_id(edge.attrib.get("target", ""), path)
        w_attr = edge.attrib.get("weight")
        if w_attr is None:
            data = edge.find(f"{ns}data[@key='w']")
            w_attr = data.text if (data is not None and data.text is not None) else "1.0"
        try:
            w = float(w_attr)
        except ValueError as exc:
            raise GraphFormatError(f"{path}: bad weight {w_attr!r} on edge ({u}, {v})") from exc
        edges.append((u, v, w))
    n = max(node_ids) + 1 if node_ids else None
    return n, edges


def _write_graphml(path: Path, G: GraphLike) -> None:
    lines: List[str] = []
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')
    lines.append('<graphml xmlns="http://graphml.graphdrawing.org/xmlns">')
    lines.append('  <graph id="G" edgedefault="directed">')
    for i in range(G.n):
        lines.append(f'    <node id="n{i}"/>')
    for u, v, w in iter_edges(G):
        lines.append(f'    <edge source="n{u}" target="n{v}" weight="{w}"/>')
    lines.append("  </graph>")
    lines.append("</graphml>")
    path.write_text("\n".join(lines), encoding="utf-8")


def _read_edgelist_header(path: Path, line: str) -> Tuple[int, Optional[int]]:
    parts = line.split()
    try:
        n = int(parts[0])
        source = int(parts[2]) if len(parts) > 2 else None
    except (ValueError, IndexError) as exc:
        raise GraphFormatError(f"{path}:1: expected 'n m [source]' header") from exc
    if len(parts) < 2:
        raise GraphFormatError(f"{path}:1: expected 'n m [source]' header")
    return n, source


def _read_edgelist(path: Path) -> ReadResult:
    """Read the ``n m [source]`` header format followed by ``u v w`` lines."""
    edges: EdgeList = []
    with path.open("r", encoding="utf-8") as fh:
        n, _ = _read_edgelist_header(path, fh.readline())
        for lineno, line in enumerate(fh, start=2):
            parts = line.split()
            if not parts:
                continue
            if len(parts) < 3:
                raise GraphFormatError(f"{path}:{lineno}: expected 'u v w'")
            edges.append(_parse_edge(parts, path, lineno))
    return n, edges


def _write_edgelist(path: Path, G: GraphLike) -> None:
    with path.open("w", encoding="utf-8") as fh:
        fh.write(f"{G.n} {count_edges(G)}\n")
        for u, v, w in iter_edges(G):
            fh.write(f"{u} {v} {w}\n")


_FMT_READERS: Dict[str, Callable[[Path], ReadResult]] = {
    "csv": _read_csv,
    "jsonl": _read_jsonl,
    "mtx": _read_mtx,
    "graphml": _read_graphml,
    "edgelist": _read_edgelist,
}

_FMT_WRITERS: Dict[str, Callable[[Path, GraphLike], None]] = {
    "csv": _write_csv,
    "jsonl": _write_jsonl,
    "mtx": _write_mtx,
    "graphml": _write_graphml,
    "edgelist": _write_edgelist,
}

FORMATS = tuple(_FMT_READERS)


def detect_format(path: Path) -> Optional[str]:
    """Return the format implied by ``path``'s extension, or ``None``."""
    ext = path.suffix.lower()
    if ext in {".csv", ".tsv"}:
        return "csv"
    if ext in {".jsonl", ".json"}:
        return "jsonl"
    if ext == ".mtx":
        return "mtx"
    if ext == ".graphml":
        return "graphml"
    if ext == ".txt":
        return "edgelist"
    return None


def _resolve_format(path: Path, fmt: Optional[str], table: Dict[str, object]) -> str:
    fmt = fmt or detect_format(path)
    if fmt is None or fmt not in table:
        raise GraphFormatError(f"unknown graph format for {path}")
    return fmt


def read_graph(path: str, fmt: Optional[str] = None, n: Optional[int] = None) -> Graph:
    """Read a graph from ``path``.

    Args:
        path: The path to the graph file.
        fmt: One of :data:`FORMATS`; auto-detected from the extension if
            ``None``.
        n: Vertex count to use instead of the one stored in (or inferred
            from) the file. Must cover every vertex id used by an edge.

    Returns:
        The graph constructed from the file.

    Raises:
        GraphFormatError: If the format is unknown, the file is malformed, an
            edge weight is invalid or the vertex count is inconsistent.
    """
    p = Path(path)
    reader = _FMT_READERS[_resolve_format(p, fmt, _FMT_READERS)]  # type: ignore[arg-type]
    declared, edges = reader(p)
    if any(u < 0 or v < 0 for u, v, _ in edges):
        raise GraphFormatError(f"{p}: negative vertex id")
    inferred = max((max(u, v) for u, v, _ in edges), default=-1) + 1
    if n is None:
        n = declared if declared is not None else inferred
    if n <= 0:
        raise GraphFormatError(f"{p}: no edges parsed from file")
    if n < inferred:
        raise GraphFormatError(f"{p}: vertex id {inferred - 1} out of range for n={n}")
    return Graph.from_edges(n, edges)


def read_edgelist_source(path: str) -> Optional[int]:
    """Return the source vertex stored in an ``edgelist`` header, if any."""
    p = Path(path)
    with p.open("r", encoding="utf-8") as fh:
        _, source = _read_edgelist_header(p, fh.readline())
    return source


def write_graph(G: GraphLike, path: str, fmt: Optional[str] = None) -> None:
    """Write ``G`` to ``path``.

    Args:
        G: The graph to write (:class:`~ssspid.graph.Graph` or
            :class:`~ssspid.graph_numpy.NumpyGraph`).
        path: Destination file.
        fmt: One of :data:`FORMATS`; auto-detected from the extension if
            ``None``.

    Raises:
        GraphFormatError: If the format is unknown.
    """
    p = Path(path)
    _FMT_WRITERS[_resolve_format(p, fmt, _FMT_WRITERS)](p, G)  # type: ignore[arg-type]


__all__ = ["FORMATS", "detect_format", "read_edgelist_source", "read_graph", "write_graph"]
