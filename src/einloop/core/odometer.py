from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Mapping, Sequence, Tuple

from .exceptions import UnresolvedIndexError
from .ir import Subscripts

SUMMED_ORDERS = ("appearance", "sorted", "reversed")


@dataclass
class Counter:
    """One emulated loop level: a letter, its position and its bound."""

    letter: str
    is_free: bool
    extent: int
    value: int = 0

    def __repr__(self) -> str:
        return (
            f"{{letter: {self.letter!r}, free: {self.is_free}, "
            f"value: {self.value}, extent: {self.extent}}}"
        )


def order_summed(letters: Sequence[str], summed_order: str) -> List[str]:
    if summed_order == "appearance":
        return list(letters)
    if summed_order == "sorted":
        return sorted(letters)
    if summed_order == "reversed":
        return list(reversed(letters))
    raise ValueError(f"Unsupported summed index order: {summed_order}")


class Odometer:
    """Mixed-radix counter standing in for a runtime-determined loop nest.

    Free counters come first (outer loops, in output order), summed counters
    after them (inner loops). The last counter is the least significant.
    Iterating yields every combination of counter values exactly once, in
    lexicographic order; an odometer cannot be restarted once exhausted.
    """

    def __init__(self, counters: Sequence[Counter]):
        self.counters: List[Counter] = list(counters)
        self.exhausted = any(counter.extent <= 0 for counter in self.counters)
        self._started = False

    @classmethod
    def from_subscripts(
        cls,
        spec: Subscripts,
        extents: Mapping[str, int],
        summed_order: str = "appearance",
    ) -> "Odometer":
        counters = [Counter(letter, spec.is_free(letter), int(extents[letter])) for letter in spec.output]
        for letter in order_summed(spec.summed_in_order(), summed_order):
            counters.append(Counter(letter, spec.is_free(letter), int(extents[letter])))
        return cls(counters)

    def value_of(self, letter: str) -> int:
        # Linear scan over a handful of counters.
        for counter in self.counters:
            if counter.letter == letter:
                return counter.value
        raise UnresolvedIndexError(f"No counter for index {letter!r}", letter=letter)

    def values(self) -> Tuple[int, ...]:
        return tuple(counter.value for counter in self.counters)

    def free_extents(self) -> Tuple[int, ...]:
        return tuple(counter.extent for counter in self.counters if counter.is_free)

    def size(self) -> int:
        total = 1
        for counter in self.counters:
            total *= counter.extent
        return total

    def advance(self) -> None:
        if self.exhausted:
            return
        for idx in range(len(self.counters) - 1, -1, -1):
            counter = self.counters[idx]
            if counter.value + 1 < counter.extent:
                counter.value += 1
                return
            if idx == 0:
                break
            counter.value = 0
        self.exhausted = True

    def __iter__(self) -> Iterator[Tuple[int, ...]]:
        return self

    def __next__(self) -> Tuple[int, ...]:
        if self._started:
            self.advance()
        self._started = True
        if self.exhausted:
            raise StopIteration
        return self.values()

    def __repr__(self) -> str:
        counters = ", ".join(repr(counter) for counter in self.counters)
        return f"{{exhausted: {self.exhausted}, {counters}}}"
