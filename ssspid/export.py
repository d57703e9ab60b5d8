"""Rendering of shortest paths and shortest-path trees."""

from __future__ import annotations

import json
import math
from typing import List, Tuple

from .path import PathChain, path_distance, path_vertices
from .solver import SSSPResult


def _fmt_distance(d: float) -> str:
    return f"{d:g}"


def format_path_lines(chain: PathChain) -> str:
    """Return one ``n<vertex> <distance>`` line per path vertex.

    Lines run from the target back to the source, matching the order of
    ``chain``.

    Examples:
        ```python
        >>> print(format_path_lines([(3, 3.0), (1, 2.0), (0, 0.0)]), end="")
        n3 3
        n1 2
        n0 0
        ```
    """
    return "".join(f"n{v} {_fmt_distance(d)}\n" for v, d in chain)


def export_path_json(chain: PathChain) -> str:
    """Return a JSON object describing ``chain``.

    Keys are ``source``, ``target``, ``distance`` and ``path`` (vertices from
    source to target).
    """
    vertices = path_vertices(chain)
    data = {
        "source": vertices[0],
        "target": vertices[-1],
        "distance": path_distance(chain),
        "path": vertices,
    }
    return json.dumps(data)


def shortest_path_tree(result: SSSPResult) -> List[Tuple[int, int]]:
    """Return the predecessor edges ``(pred[v], v)`` of every reached vertex.

    The source, being its own predecessor, contributes no edge.
    """
    return [
        (p, v)
        for v, p in enumerate(result.predecessors)
        if p is not None and p != v
    ]


def export_tree_json(result: SSSPResult) -> str:
    """Return a JSON string with nodes (and distances) and tree edges.

    Unreached vertices carry ``"distance": null``.
    """
    edges = shortest_path_tree(result)
    data = {
        "nodes": [
            {"id": i, "distance": d if math.isfinite(d) else None}
            for i, d in enumerate(result.distances)
        ],
        "edges": [{"source": u, "target": v} for (u, v) in edges],
    }
    return json.dumps(data)


def export_tree_graphml(result: SSSPResult) -> str:
    """Return a minimal GraphML string for the shortest-path tree."""
    edges = shortest_path_tree(result)
    lines: List[str] = []
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')
    lines.append('<graphml xmlns="http://graphml.graphdrawing.org/xmlns">')
    lines.append('  <key id="d" for="node" attr.name="distance" attr.type="double"/>')
    lines.append('  <graph id="T" edgedefault="directed">')
    for i, d in enumerate(result.distances):
        if math.isfinite(d):
            lines.append(f'    <node id="n{i}"><data key="d">{d!r}</data></node>')
        else:
            lines.append(f'    <node id="n{i}"/>')
    for u, v in edges:
        lines.append(f'    <edge source="n{u}" target="n{v}"/>')
    lines.append("  </graph>")
    lines.append("</graphml>")
    return "\n".join(lines)


__all__ = [
    "export_path_json",
    "export_tree_graphml",
    "export_tree_json",
    "format_path_lines",
    "shortest_path_tree",
]
