"""Public package exports for :mod:`ssspid`."""

from __future__ import annotations

from .dijkstra import dijkstra_reference
from .exceptions import (
    AlgorithmError,
    ConfigError,
    GraphFormatError,
    HeapContractError,
    InputError,
    SSSPIDError,
    TargetNotReachableError,
)
from .export import export_path_json, format_path_lines
from .graph import Graph
from .graph_numpy import NumpyGraph
from .heap import IndexedMinHeap, MinHeap
from .io import read_graph, write_graph
from .logger import Logger, NoopLogger, StdLogger
from .path import path_vertices, reconstruct_path
from .records import DistanceRecord
from .solver import DijkstraSolver, SolverConfig, SolverMetrics, SSSPResult, shortest_path

__version__ = "0.1.0"

__all__ = [
    "Graph",
    "NumpyGraph",
    "MinHeap",
    "IndexedMinHeap",
    "DistanceRecord",
    "DijkstraSolver",
    "SSSPResult",
    "SolverConfig",
    "SolverMetrics",
    "shortest_path",
    "reconstruct_path",
    "path_vertices",
    "dijkstra_reference",
    "format_path_lines",
    "export_path_json",
    "Logger",
    "NoopLogger",
    "StdLogger",
    "read_graph",
    "write_graph",
    "SSSPIDError",
    "InputError",
    "GraphFormatError",
    "ConfigError",
    "AlgorithmError",
    "HeapContractError",
    "TargetNotReachableError",
]
