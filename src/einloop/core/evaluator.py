from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .ir import Subscripts
from .odometer import SUMMED_ORDERS, Odometer
from .operands import Operand, as_operand
from .parser import parse_subscripts
from .projector import flat_index, output_size
from .shape_checker import resolve_extents
from .stats import compute_einsum_stats

logger = logging.getLogger(__name__)


def _json_ready(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (np.integer, np.floating)):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, dict):
        return {str(k): _json_ready(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_json_ready(v) for v in value]
    return str(value)


@dataclass(frozen=True)
class EinsumConfig:
    """
    Switches for a single einsum evaluation.

    * ``summed_order`` picks the nesting order of the summed indices
      (``"appearance"``, ``"sorted"`` or ``"reversed"``). Free indices always
      follow the output order.
    * ``trace`` records parse/resolve/run entries for :meth:`Evaluator.explain`.
    * ``dtype`` is the NumPy dtype used when results are materialized as arrays.
    """

    summed_order: str = "appearance"
    trace: bool = False
    explain_timings: bool = True
    dtype: str = "float64"

    def normalized(self) -> "EinsumConfig":
        summed_order = (self.summed_order or "appearance").lower()
        if summed_order not in SUMMED_ORDERS:
            raise ValueError(f"Unsupported summed index order: {self.summed_order}")
        try:
            dtype = np.dtype(self.dtype).name
        except TypeError as exc:
            raise ValueError(f"Unsupported dtype: {self.dtype}") from exc
        return replace(
            self,
            summed_order=summed_order,
            trace=bool(self.trace),
            explain_timings=bool(self.explain_timings),
            dtype=dtype,
        )


class EinsumResult(NamedTuple):
    shape: Tuple[int, ...]
    values: List[float]

    def to_numpy(self, dtype: Any = np.float64) -> np.ndarray:
        return np.asarray(self.values, dtype=dtype).reshape(self.shape)


class Evaluator:
    def __init__(self, config: Optional[EinsumConfig] = None):
        self.config = (config or EinsumConfig()).normalized()
        self.logs: List[Dict[str, Any]] = []

    def _log(self, kind: str, payload: Dict[str, Any]) -> None:
        if self.config.trace:
            self.logs.append({"kind": kind, kind: payload})

    def run(self, subscripts: str, operands: Sequence[Any]) -> EinsumResult:
        spec = parse_subscripts(subscripts)
        self._log("parse", spec.to_dict())
        coerced = [as_operand(operand) for operand in operands]
        return self.evaluate(spec, coerced)

    def evaluate(self, spec: Subscripts, operands: Sequence[Operand]) -> EinsumResult:
        start = time.perf_counter()
        extents = resolve_extents(spec, operands)
        self._log(
            "resolve",
            {
                "extents": dict(extents),
                "operands": [list(operand.dimensions()) for operand in operands],
            },
        )
        odometer = Odometer.from_subscripts(spec, extents, self.config.summed_order)
        shape = odometer.free_extents()
        out = [0.0] * output_size(shape)
        counters = odometer.counters

        while not odometer.exhausted:
            idx = flat_index(counters)
            cur = 1.0
            for letters, operand in zip(spec.inputs, operands):
                row = odometer.value_of(letters[0])
                if len(letters) == 1:
                    cur *= operand.element_at(row, 0)
                else:
                    cur *= operand.element_at(row, odometer.value_of(letters[1]))
            out[idx] += cur
            odometer.advance()

        duration_ms = (time.perf_counter() - start) * 1000.0
        logger.debug("evaluated %s -> shape %s in %.3fms", spec, shape, duration_ms)
        if self.config.trace:
            entry: Dict[str, Any] = dict(compute_einsum_stats(spec, extents))
            entry["subscripts"] = str(spec)
            entry["shape"] = list(shape)
            entry["counters"] = [counter.letter for counter in counters]
            if self.config.explain_timings:
                entry["duration_ms"] = duration_ms
            self._log("run", entry)
        return EinsumResult(shape=tuple(shape), values=out)

    def explain(self, *, json: bool = False):
        if json:
            runs = [entry["run"] for entry in self.logs if entry["kind"] == "run"]
            totals = {
                "runs": len(runs),
                "iterations": sum(run["iterations"] for run in runs),
                "flops": sum(run["flops"] for run in runs),
            }
            if self.config.explain_timings:
                totals["duration_ms"] = sum(run.get("duration_ms", 0.0) for run in runs)
            return _json_ready({"logs": self.logs, "totals": totals})

        lines: List[str] = []
        for entry in self.logs:
            kind = entry["kind"]
            if kind == "parse":
                parse = entry["parse"]
                free = ",".join(parse["free"]) or "∅"
                summed = ",".join(parse["summed"]) or "∅"
                lines.append(f"[parse] {parse['subscripts']} free={free} summed={summed}")
            elif kind == "resolve":
                resolve = entry["resolve"]
                extents = " ".join(f"{k}={v}" for k, v in resolve["extents"].items())
                dims = " ".join(f"{tuple(d)}" for d in resolve["operands"])
                lines.append(f"[resolve] {extents} operands={dims}")
            elif kind == "run":
                run = entry["run"]
                details = [
                    f"shape={tuple(run['shape'])}",
                    f"counters={''.join(run['counters'])}",
                    f"iterations={run['iterations']}",
                    f"flops={run['flops']:.0f}",
                ]
                if run["contracted"]:
                    details.append(f"contracted={','.join(run['contracted'])}")
                duration = run.get("duration_ms")
                if duration is not None:
                    details.append(f"time={duration:.3f}ms")
                lines.append(f"[run] {run['subscripts']} " + " ".join(details))
        return "\n".join(lines)


def einsum(subscripts: str, *operands: Any, config: Optional[EinsumConfig] = None) -> EinsumResult:
    """Evaluate ``subscripts`` over ``operands``.

    Returns an :class:`EinsumResult`, which unpacks as ``(shape, values)``
    with ``values`` flattened in row-major order over ``shape``.
    """
    return Evaluator(config).run(subscripts, operands)


def einsum_array(subscripts: str, *operands: Any, config: Optional[EinsumConfig] = None) -> np.ndarray:
    evaluator = Evaluator(config)
    result = evaluator.run(subscripts, operands)
    return result.to_numpy(dtype=evaluator.config.dtype)
