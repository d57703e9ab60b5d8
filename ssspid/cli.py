"""Command-line interface for running shortest-path queries."""

from __future__ import annotations

import argparse
import json
import math
import sys
import traceback
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import ConfigError, InputError, SSSPIDError, TargetNotReachableError
from .export import export_path_json, export_tree_graphml, export_tree_json, format_path_lines
from .graph import Graph
from .io import FORMATS, detect_format, read_edgelist_source, read_graph
from .logger import StdLogger
from .solver import DijkstraSolver, SolverConfig

EXAMPLE_CSV = """# u,v,w
0,1,4.0
0,2,1.0
2,1,1.0
1,3,1.0
"""

EXIT_OK = 0
EXIT_UNREACHABLE = 1
EXIT_USAGE = 64
EXIT_INTERNAL = 70


def _build_graph_from_file(path: str, fmt: Optional[str], n: Optional[int]) -> Tuple[Graph, int, int]:
    """Build a :class:`Graph` from an edges file."""
    p = Path(path)
    if not p.exists():
        raise InputError(f"edges file not found: {path}")
    G = read_graph(path, fmt, n=n)
    return G, G.n, G.m


def _default_source(args: argparse.Namespace) -> int:
    """Source from ``--source``, else an edge-list header, else ``0``."""
    if args.source is not None:
        return args.source
    if args.edges and (args.format or detect_format(Path(args.edges))) == "edgelist":
        source = read_edgelist_source(args.edges)
        if source is not None:
            return source
    return 0


def _json_distance(d: float) -> Optional[float]:
    return d if math.isfinite(d) else None


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``ssspid`` command-line tool."""
    examples = (
        "Examples:\n"
        "  ssspid --edges graph.csv --source 0 --target 3\n"
        "  ssspid --edges graph.txt --target 7 --output lines\n"
        "  ssspid --random --n 100 --m 500 --seed 1\n"
        "  ssspid --edges graph.csv --export-json tree.json\n"
    )
    p = argparse.ArgumentParser(
        prog="ssspid",
        description="Dijkstra shortest paths over an indexed binary heap",
        epilog=examples,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    p.add_argument("--verbose", action="store_true", help="Show full tracebacks")
    p.add_argument("--log-json", action="store_true", help="Emit structured log lines as JSON")
    p.add_argument(
        "--log-level",
        choices=sorted(StdLogger.LEVELS, key=StdLogger.LEVELS.__getitem__),
        default="warning",
        help="Log verbosity",
    )
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--edges", type=str, help="Path to edges file")
    src.add_argument("--random", action="store_true", help="Use a random graph")
    src.add_argument(
        "--example",
        action="store_true",
        help="Print a sample edges CSV to stdout and exit",
    )

    p.add_argument(
        "--format",
        choices=list(FORMATS),
        default=None,
        help="Edge file format (auto-detected from extension)",
    )
    p.add_argument(
        "--vertices",
        type=int,
        default=None,
        help="Vertex count override for formats without one",
    )

    p.add_argument("--n", type=int, default=10, help="Vertices (random mode)")
    p.add_argument("--m", type=int, default=20, help="Edges (random mode)")
    p.add_argument("--seed", type=int, default=0, help="Seed controlling random graph generation")

    p.add_argument("--source", type=int, default=None, help="Source vertex id (default 0)")
    p.add_argument("--target", type=int, default=None, help="Target vertex id for path output")
    p.add_argument(
        "--output",
        choices=["json", "lines"],
        default="json",
        help="json: one JSON object; lines: 'n<vertex> <distance>' per line",
    )
    p.add_argument(
        "--validate-heap",
        action="store_true",
        help="Check heap invariants after every operation (slow)",
    )

    p.add_argument("--export-json", type=str, default=None, help="Write shortest-path tree as JSON")
    p.add_argument(
        "--export-graphml",
        type=str,
        default=None,
        help="Write shortest-path tree as GraphML",
    )
    p.add_argument(
        "--metrics-out",
        type=str,
        default=None,
        help="Write run metrics to this JSON file",
    )

    args = p.parse_args(argv)

    if args.example:
        sys.stdout.write(EXAMPLE_CSV)
        return EXIT_OK

    try:
        if args.random:
            if args.n <= 0 or args.m < 0:
                raise InputError("--n must be positive and --m non-negative")
            G = Graph.random(args.n, args.m, args.seed)
            n, m = args.n, args.m
        else:
            G, n, m = _build_graph_from_file(args.edges, args.format, args.vertices)

        source = _default_source(args)
        cfg = SolverConfig(validate_heap=args.validate_heap)
        logger = StdLogger(level=args.log_level, json_fmt=args.log_json, stream=sys.stderr)

        if args.verbose and not args.log_json:
            sys.stderr.write(f"config: n={n} m={m} source={source} seed={args.seed}\n")

        import time

        solver = DijkstraSolver(G, source, config=cfg, logger=logger)
        if args.metrics_out:
            import tracemalloc

            tracemalloc.start()
            t0 = time.perf_counter()
            res = solver.solve()
            wall_ms = (time.perf_counter() - t0) * 1000.0
            _, peak = tracemalloc.get_traced_memory()
            tracemalloc.stop()
            metrics = solver.metrics(wall_ms=wall_ms, peak_mib=peak / (1024 * 1024))
            with open(args.metrics_out, "w", encoding="utf-8") as fh:
                json.dump(asdict(metrics), fh)
        else:
            res = solver.solve()

        if args.export_json:
            with open(args.export_json, "w", encoding="utf-8") as fh:
                fh.write(export_tree_json(res))
        if args.export_graphml:
            with open(args.export_graphml, "w", encoding="utf-8") as fh:
                fh.write(export_tree_graphml(res))

        if args.target is not None:
            chain = solver.path(args.target)
            if args.output == "lines":
                sys.stdout.write(format_path_lines(chain))
            else:
                sys.stdout.write(export_path_json(chain) + "\n")
            return EXIT_OK

        if args.output == "lines":
            reached = [(v, d) for v, d in enumerate(res.distances) if math.isfinite(d)]
            sys.stdout.write(format_path_lines(reached))
        else:
            out: Dict[str, Any] = {
                "source": source,
                "distances": [_json_distance(d) for d in res.distances],
                "predecessors": res.predecessors,
            }
            sys.stdout.write(json.dumps(out) + "\n")
        return EXIT_OK

    except TargetNotReachableError as exc:
        sys.stderr.write(f"not reachable: {exc}\n")
        return EXIT_UNREACHABLE
    except (InputError, ConfigError) as exc:
        if args.verbose:
            traceback.print_exc()
        else:
            sys.stderr.write(f"error: {exc}\n")
        return EXIT_USAGE
    except SSSPIDError as exc:
        if args.verbose:
            traceback.print_exc()
        else:
            sys.stderr.write(f"internal error: {exc}\n")
        return EXIT_INTERNAL
    except Exception as exc:  # pragma: no cover - unexpected
        if args.verbose:
            traceback.print_exc()
        else:
            sys.stderr.write(f"internal error: {exc}\n")
        return EXIT_INTERNAL


if __name__ == "__main__":
    sys.exit(main())
