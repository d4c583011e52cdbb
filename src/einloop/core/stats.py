from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

from .ir import Subscripts


def _prod(values: Iterable[int]) -> int:
    result = 1
    for value in values:
        result *= int(value)
    return int(result)


def compute_einsum_stats(spec: Subscripts, extents: Mapping[str, int]) -> Dict[str, Any]:
    output_labels = list(spec.output)
    contracted_labels = list(spec.summed_in_order())

    output_size = _prod(extents[label] for label in output_labels)
    contract_size = _prod(extents[label] for label in contracted_labels)
    iterations = output_size * contract_size

    # One multiply per extra operand and one add per visited combination.
    multiplies = max(len(spec.inputs) - 1, 0)
    flops = float(iterations * (multiplies + 1))
    reductions = int(max(contract_size - 1, 0) * output_size) if contracted_labels else 0

    return {
        "iterations": int(iterations),
        "output_size": int(output_size),
        "contract_size": int(contract_size),
        "flops": flops,
        "reductions": reductions,
        "contracted": contracted_labels,
        "output_indices": output_labels,
    }
