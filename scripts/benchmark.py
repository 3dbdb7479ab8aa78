#!/usr/bin/env python3
"""
Watchables Performance Benchmarks
=================================

Times the hot paths of the watchables package and renders the results with
rich: leaf updates fanned out to many watchers, chains of map() derivations,
and the startup of partial_combine_watchable over many inputs.

Each benchmark scales its workload by SCALE_FACTOR until a single run takes
longer than TIME_LIMIT_SECONDS. Combination startup should scale linearly;
the per-input time column makes a quadratic regression obvious.

Usage:
    python scripts/benchmark.py              # Run all benchmarks
    python scripts/benchmark.py --config     # Show current configuration
    python scripts/benchmark.py --quiet      # Only show the final table
"""

import argparse
import time
from dataclasses import dataclass
from typing import Callable, Dict, List

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from watchables import WatchableSubject, partial_combine_watchable

# Configuration constants - adjust these to change benchmark behavior
TIME_LIMIT_SECONDS = 0.5  # Stop scaling once a run takes this long
STARTING_N = 100  # Starting workload size
SCALE_FACTOR = 2.0  # How much to multiply N by each iteration


@dataclass
class BenchmarkResult:
    """Outcome of the largest run of one benchmark."""

    max_n: int
    operation_time: float
    operations_per_second: float

    @property
    def microseconds_per_item(self) -> float:
        return self.operation_time / max(self.max_n, 1) * 1e6


def _fanout_update(n: int) -> int:
    """Update a leaf watched by n watchers."""
    subject = WatchableSubject.of(0)
    for _ in range(n):
        subject.watch(lambda value: None)
    subject.update(1)
    return n


def _map_chain(n: int) -> int:
    """Push one update through a chain of n map() derivations."""
    subject = WatchableSubject.of(0)
    current = subject
    for i in range(n):
        current = current.map(lambda x, i=i: x + i)
    current.watch(lambda value: None)
    subject.update(1)
    return n


def _combine_startup(n: int) -> int:
    """Watch a combination of n populated leaves."""
    inputs = {i: WatchableSubject.of(i) for i in range(n)}
    partial_combine_watchable(inputs).watch(lambda value: None)
    return n


BENCHMARKS: Dict[str, Callable[[int], int]] = {
    "Fan-out update": _fanout_update,
    "Map chain": _map_chain,
    "Combination startup": _combine_startup,
}

# Chains recurse once per link, so keep them below the recursion limit
MAX_N: Dict[str, int] = {"Map chain": 200}


def run_adaptive_benchmark(
    operation: Callable[[int], int], max_n: int = 10_000_000
) -> BenchmarkResult:
    """Scale the workload until a run reaches the time limit."""
    n = STARTING_N
    while True:
        start = time.perf_counter()
        performed = operation(n)
        elapsed = time.perf_counter() - start

        result = BenchmarkResult(
            max_n=n,
            operation_time=elapsed,
            operations_per_second=performed / elapsed if elapsed else float("inf"),
        )
        next_n = int(n * SCALE_FACTOR)
        if elapsed >= TIME_LIMIT_SECONDS or next_n > max_n:
            return result
        n = next_n


class WatchablesBenchmark:
    """Rich-formatted display for watchables benchmarking."""

    def __init__(self, quiet: bool = False):
        self.console = Console()
        self.quiet = quiet
        self.results: Dict[str, BenchmarkResult] = {}

    def run_benchmarks(self, names: List[str]) -> None:
        start_time = time.time()
        self._display_header()

        for name in names:
            if not self.quiet:
                self.console.print(f"[yellow]Running {name}...[/yellow]")
            result = run_adaptive_benchmark(BENCHMARKS[name], MAX_N.get(name, 10_000_000))
            self.results[name] = result
            if not self.quiet:
                self.console.print(
                    f"[green]✓[/green] {name}: {result.operations_per_second:,.0f} "
                    f"items/sec ({result.max_n} items)"
                )

        self._display_final_results(start_time)

    def _display_header(self) -> None:
        header = Panel(
            Align.center("Watchables Performance Benchmark Suite"),
            title="Watchables Benchmarks",
            border_style="blue",
        )
        self.console.print(header)
        self.console.print()

    def _display_final_results(self, start_time: float) -> None:
        elapsed = time.time() - start_time

        table = Table(title="Final Benchmark Results")
        table.add_column("Benchmark", style="cyan", no_wrap=True)
        table.add_column("Max Workload", style="magenta", justify="right")
        table.add_column("Throughput", style="green", justify="right")
        table.add_column("Per Item", style="yellow", justify="right")

        for name, result in self.results.items():
            table.add_row(
                name,
                f"{result.max_n:,}",
                f"{result.operations_per_second / 1000:,.1f}K/sec",
                f"{result.microseconds_per_item:.2f}μs",
            )

        self.console.print()
        self.console.print(table)
        self.console.print(f"[dim]Completed in {elapsed:.2f}s[/dim]")


def print_config() -> None:
    """Print the current benchmark configuration."""
    print("Watchables Benchmark Configuration:")
    print(f"  TIME_LIMIT_SECONDS: {TIME_LIMIT_SECONDS}")
    print(f"  STARTING_N: {STARTING_N}")
    print(f"  SCALE_FACTOR: {SCALE_FACTOR}")


def main():
    parser = argparse.ArgumentParser(description="Watchables Performance Benchmarks")
    parser.add_argument(
        "--config", action="store_true", help="Show current benchmark configuration"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output, show only final results",
    )
    parser.add_argument(
        "--only",
        choices=sorted(BENCHMARKS),
        action="append",
        help="Run only the named benchmark (may be repeated)",
    )

    args = parser.parse_args()

    if args.config:
        print_config()
        return

    if not args.quiet:
        print_config()
        print()

    WatchablesBenchmark(quiet=args.quiet).run_benchmarks(args.only or list(BENCHMARKS))


if __name__ == "__main__":
    main()
