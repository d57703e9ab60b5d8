"""Micro-benchmark comparing the indexed-heap solver with the ``heapq`` reference.

Run this module as a script across multiple random graphs:

```bash
python -m ssspid.bench --trials 5 --sizes 1000,5000 2000,10000 --out-csv out.csv
```

Use ``--mem`` to record peak memory usage during solver runs.
"""

from __future__ import annotations

import argparse
import csv
import math
import statistics
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple

from .dijkstra import dijkstra_reference
from .graph import Graph
from .solver import DijkstraSolver, SolverMetrics


@dataclass
class BenchResult:
    """Result of a single benchmarking run."""

    metrics: SolverMetrics
    reference_ms: float
    max_abs_err: float


def run_once(n: int, m: int, seed: int = 0, track_mem: bool = False) -> BenchResult:
    """Solve one random graph with both implementations and compare distances.

    Args:
        n: Number of vertices.
        m: Number of edges.
        seed: Seed for the random graph generator.
        track_mem: Record peak memory of the solver run with ``tracemalloc``.
    """
    G = Graph.random(n, m, seed)
    s = 0

    if track_mem:
        import tracemalloc

        tracemalloc.start()
        t0 = time.perf_counter()
        solver = DijkstraSolver(G, s)
        res = solver.solve()
        t1 = time.perf_counter()
        _, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()
    else:
        t0 = time.perf_counter()
        solver = DijkstraSolver(G, s)
        res = solver.solve()
        t1 = time.perf_counter()
        peak = None

    t2 = time.perf_counter()
    ref = dijkstra_reference(G, s)
    t3 = time.perf_counter()

    max_err = 0.0
    for a, b in zip(res.distances, ref.distances):
        if math.isinf(a) or math.isinf(b):
            if a != b:
                max_err = math.inf
            continue
        max_err = max(max_err, abs(a - b))

    peak_mib = (peak / (1024 * 1024)) if peak is not None else None
    metrics = solver.metrics(wall_ms=(t1 - t0) * 1000.0, peak_mib=peak_mib)
    return BenchResult(metrics=metrics, reference_ms=(t3 - t2) * 1000.0, max_abs_err=max_err)


def _p95(values: List[float]) -> float:
    if len(values) == 1:
        return values[0]
    return statistics.quantiles(values, n=100, method="inclusive")[94]


def main(argv: List[str] | None = None) -> None:
    """Run benchmarking trials and optionally record results."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--trials", type=int, default=1, help="Number of trials per size")
    parser.add_argument(
        "--sizes",
        nargs="+",
        default=["10,20", "20,40"],
        help="Size pairs as n,m (e.g. 1000,5000). Defaults to a small demo.",
    )
    parser.add_argument("--seed-base", type=int, default=0, help="Base seed for random graphs")
    parser.add_argument("--out-csv", type=Path, help="Optional path to write per-trial CSV data")
    parser.add_argument("--mem", action="store_true", help="Record peak memory (MiB)")
    args = parser.parse_args(argv)

    sizes: List[Tuple[int, int]] = []
    for spec in args.sizes:
        try:
            n_str, m_str = spec.split(",")
            sizes.append((int(n_str), int(m_str)))
        except ValueError:
            parser.error(f"invalid size specification '{spec}'")

    rows: List[List[object]] = []
    per_size: Dict[Tuple[int, int], List[BenchResult]] = {}
    for n, m in sizes:
        results = per_size.setdefault((n, m), [])
        for trial in range(args.trials):
            res = run_once(n, m, seed=args.seed_base + trial, track_mem=args.mem)
            results.append(res)
            c = res.metrics.counters
            row: List[object] = [
                n,
                m,
                trial,
                f"{res.metrics.wall_ms:.6f}",
                f"{res.reference_ms:.6f}",
                c["pushes"],
                c["decrease_keys"],
                c["max_heap_size"],
                res.max_abs_err,
            ]
            if args.mem:
                row.append(f"{(res.metrics.peak_mib or 0.0):.6f}")
            rows.append(row)

    if args.out_csv:
        with args.out_csv.open("w", newline="") as fh:
            writer = csv.writer(fh)
            header = [
                "n",
                "m",
                "trial",
                "solver_ms",
                "reference_ms",
                "pushes",
                "decrease_keys",
                "max_heap_size",
                "max_abs_err",
            ]
            if args.mem:
                header.append("peak_mib")
            writer.writerow(header)
            writer.writerows(rows)

    print(
        f"{'n':>6} {'m':>7} {'pushes':>8} {'dec_keys':>8}"
        f" {'solver_med':>11} {'solver_p95':>11} {'ref_med':>11} {'ref_p95':>11} {'max_err':>9}"
    )
    for (n, m), results in per_size.items():
        s_times = [r.metrics.wall_ms for r in results]
        r_times = [r.reference_ms for r in results]
        pushes = statistics.median(r.metrics.counters["pushes"] for r in results)
        dec = statistics.median(r.metrics.counters["decrease_keys"] for r in results)
        err = max(r.max_abs_err for r in results)
        print(
            f"{n:6d} {m:7d} {int(pushes):8d} {int(dec):8d}"
            f" {statistics.median(s_times):11.2f} {_p95(s_times):11.2f}"
            f" {statistics.median(r_times):11.2f} {_p95(r_times):11.2f} {err:9.2g}"
        )


if __name__ == "__main__":  # pragma: no cover - manual invocation
    main()
