#!/usr/bin/env python3
"""
Matrix-multiplication benchmark for the einloop odometer evaluator.

Times ``einloop.einsum("ij,jk->ik", A, B)`` for square matrices of a few sizes
and reports the NumPy ``einsum`` timing next to it for scale.
"""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

import numpy as np

from einloop import EinsumConfig, einsum

SUBSCRIPTS = "ij,jk->ik"


@dataclass
class BenchmarkResult:
    backend: str
    size: int
    min_s: float
    mean_s: float
    iterations: int


def build_inputs(size: int, *, seed: int):
    rng = np.random.default_rng(seed)
    a = rng.normal(size=(size, size))
    b = rng.normal(size=(size, size))
    return a, b


def bench(fn: Callable[[], Any], *, iterations: int, warmup: int) -> Iterable[float]:
    timings = []
    for step in range(iterations + warmup):
        start = time.perf_counter()
        fn()
        elapsed = time.perf_counter() - start
        if step >= warmup:
            timings.append(elapsed)
    return timings


def _summarize(backend: str, size: int, timings: List[float]) -> BenchmarkResult:
    return BenchmarkResult(
        backend=backend,
        size=size,
        min_s=min(timings),
        mean_s=sum(timings) / len(timings),
        iterations=len(timings),
    )


def run_einloop(size: int, *, iterations: int, warmup: int, seed: int, summed_order: str):
    a, b = build_inputs(size, seed=seed)
    config = EinsumConfig(summed_order=summed_order)
    timings = list(bench(lambda: einsum(SUBSCRIPTS, a, b, config=config), iterations=iterations, warmup=warmup))
    return _summarize("einloop", size, timings)


def run_numpy(size: int, *, iterations: int, warmup: int, seed: int):
    a, b = build_inputs(size, seed=seed)
    timings = list(bench(lambda: np.einsum(SUBSCRIPTS, a, b), iterations=iterations, warmup=warmup))
    return _summarize("numpy", size, timings)


def format_result(result: BenchmarkResult) -> str:
    return (
        f"{result.backend:8s} n={result.size:<5d} min={result.min_s * 1e3:9.3f}ms "
        f"mean={result.mean_s * 1e3:9.3f}ms iters={result.iterations}"
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--sizes", type=int, nargs="+", default=[10, 30, 60])
    parser.add_argument("--iterations", type=int, default=5)
    parser.add_argument("--warmup", type=int, default=1)
    parser.add_argument("--seed", type=int, default=1)
    parser.add_argument(
        "--summed-order",
        default="appearance",
        choices=["appearance", "sorted", "reversed"],
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    for size in args.sizes:
        for result in (
            run_einloop(
                size,
                iterations=args.iterations,
                warmup=args.warmup,
                seed=args.seed,
                summed_order=args.summed_order,
            ),
            run_numpy(size, iterations=args.iterations, warmup=args.warmup, seed=args.seed),
        ):
            print(format_result(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
