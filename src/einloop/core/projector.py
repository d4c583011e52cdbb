from __future__ import annotations

from typing import Iterable, Sequence

from .odometer import Counter


def flat_index(counters: Sequence[Counter]) -> int:
    """Row-major position of the current free counter values.

    Summed counters are skipped, so they may sit anywhere in ``counters``
    without affecting the projection.
    """
    index = 0
    stride = 1
    for counter in reversed(counters):
        if not counter.is_free:
            continue
        index += counter.value * stride
        stride *= counter.extent
    return index


def output_size(extents: Iterable[int]) -> int:
    total = 1
    for extent in extents:
        total *= int(extent)
    return total
