from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Tuple

ARROW = "->"


@dataclass(frozen=True)
class Subscripts:
    """Parsed form of an einsum subscript string such as ``"ij,jk->ik"``.

    ``inputs`` holds one letter sequence per operand, ``output`` the letters
    following the arrow. Letters in ``output`` are free; every other letter
    is summed over.
    """

    inputs: Tuple[Tuple[str, ...], ...]
    output: Tuple[str, ...] = ()
    all_indices: FrozenSet[str] = field(default=frozenset())
    free_indices: FrozenSet[str] = field(default=frozenset())

    @classmethod
    def build(cls, inputs, output=()) -> "Subscripts":
        inputs = tuple(tuple(letters) for letters in inputs)
        output = tuple(output)
        all_indices = frozenset(letter for letters in inputs for letter in letters)
        return cls(
            inputs=inputs,
            output=output,
            all_indices=all_indices,
            free_indices=frozenset(output),
        )

    @property
    def summed_indices(self) -> FrozenSet[str]:
        return self.all_indices - self.free_indices

    def letters_in_order(self) -> Tuple[str, ...]:
        seen: List[str] = []
        for letters in self.inputs:
            for letter in letters:
                if letter not in seen:
                    seen.append(letter)
        return tuple(seen)

    def summed_in_order(self) -> Tuple[str, ...]:
        summed = self.summed_indices
        return tuple(letter for letter in self.letters_in_order() if letter in summed)

    def is_free(self, letter: str) -> bool:
        return letter in self.free_indices

    def __str__(self) -> str:
        inputs = ",".join("".join(letters) for letters in self.inputs)
        return f"{inputs}{ARROW}{''.join(self.output)}"

    def render_with_values(self, lookup: Callable[[str], int]) -> str:
        """Canonical form with each letter followed by ``lookup(letter)``.

        Used when debugging a run: ``i(0)k(1),k(1)j(0)->i(0)j(0)``.
        """

        def _render(letters: Tuple[str, ...]) -> str:
            return "".join(f"{letter}({lookup(letter)})" for letter in letters)

        inputs = ",".join(_render(letters) for letters in self.inputs)
        return f"{inputs}{ARROW}{_render(self.output)}"

    def to_dict(self) -> dict:
        return {
            "subscripts": str(self),
            "inputs": ["".join(letters) for letters in self.inputs],
            "output": "".join(self.output),
            "free": list(self.output),
            "summed": list(self.summed_in_order()),
        }
