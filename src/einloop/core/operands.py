from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol, Tuple, Union, runtime_checkable

import numpy as np

from .exceptions import OperandTypeError, RankMismatchError, UnsupportedRankError

MAX_OPERAND_RANK = 2


@runtime_checkable
class Operand(Protocol):
    """Element access required from every einsum operand.

    Vectors report ``(length, 1)`` and are read with column ``0``.
    """

    def dimensions(self) -> Tuple[int, int]: ...

    def element_at(self, row: int, col: int) -> float: ...


class DenseOperand:
    """Operand backed by a NumPy array of rank 1 or 2."""

    def __init__(self, data: Any):
        array = np.asarray(data)
        if array.ndim == 0:
            raise RankMismatchError("Scalar operands have no axes to index")
        if array.ndim > MAX_OPERAND_RANK:
            raise UnsupportedRankError(
                f"only 2D matrix supported, got array of rank {array.ndim}",
                rank=array.ndim,
            )
        if np.issubdtype(array.dtype, np.complexfloating) or not (
            np.issubdtype(array.dtype, np.number) or np.issubdtype(array.dtype, np.bool_)
        ):
            raise OperandTypeError(
                f"operands must hold real numbers, got dtype {array.dtype}",
                dtype=str(array.dtype),
            )
        self.array = array

    @property
    def rank(self) -> int:
        return int(self.array.ndim)

    def dimensions(self) -> Tuple[int, int]:
        if self.array.ndim == 1:
            return int(self.array.shape[0]), 1
        rows, cols = self.array.shape
        return int(rows), int(cols)

    def element_at(self, row: int, col: int) -> float:
        if self.array.ndim == 1:
            if col != 0:
                raise IndexError(f"column {col} out of range for vector operand")
            return float(self.array[row])
        return float(self.array[row, col])

    def __repr__(self) -> str:
        rows, cols = self.dimensions()
        return f"DenseOperand(rank={self.rank}, dims=({rows}, {cols}))"


def as_operand(value: Any) -> Operand:
    if isinstance(value, Operand):
        return value
    return DenseOperand(value)


def load_operand(path: Union[str, Path]) -> DenseOperand:
    file_path = Path(path)
    ext = file_path.suffix.lower()
    if ext == ".npy":
        return DenseOperand(np.load(file_path, allow_pickle=False))
    if ext == ".npz":
        with np.load(file_path, allow_pickle=False) as data:
            if not data.files:
                raise ValueError(f"Archive '{file_path}' contained no arrays")
            if "arr_0" in data.files:
                return DenseOperand(data["arr_0"])
            if len(data.files) == 1:
                return DenseOperand(data[data.files[0]])
            raise ValueError(f"Archive '{file_path}' holds {len(data.files)} arrays; expected one")
    if ext == ".json":
        with file_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        return DenseOperand(np.asarray(payload, dtype=np.float64))
    raise ValueError(f"Unsupported operand file type '{ext}' for {file_path}")
