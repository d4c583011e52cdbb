from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from .exceptions import (
    DimensionMismatchError,
    OperandCountError,
    RankMismatchError,
    ShapeError,
    UnresolvedIndexError,
    UnsupportedRankError,
)
from .ir import Subscripts
from .operands import MAX_OPERAND_RANK, Operand

logger = logging.getLogger(__name__)


def validate_operands(spec: Subscripts, operands: Sequence[Operand]) -> None:
    if len(operands) != len(spec.inputs):
        raise OperandCountError(
            f"Subscripts '{spec}' name {len(spec.inputs)} operand(s) but {len(operands)} were given",
            expected=len(spec.inputs),
            actual=len(operands),
        )
    for i, (letters, operand) in enumerate(zip(spec.inputs, operands)):
        if len(letters) > MAX_OPERAND_RANK:
            raise UnsupportedRankError(
                f"only 2D matrix supported, {len(letters)} indices given for input {i}",
                rank=len(letters),
                operand_index=i,
            )
        if len(letters) == 1:
            rows, cols = operand.dimensions()
            if cols != 1:
                raise RankMismatchError(
                    f"input {i} has one index '{letters[0]}' but dimensions ({rows}, {cols})",
                    operand_index=i,
                )


def resolve_extent(letter: str, spec: Subscripts, operands: Sequence[Operand]) -> int:
    """Return the size bound to ``letter`` by the operands that mention it.

    Position 0 of an operand's indices binds its row count, position 1 its
    column count. Every occurrence must agree.
    """
    extent: Optional[int] = None
    for i, letters in enumerate(spec.inputs):
        for position, candidate in enumerate(letters):
            if candidate != letter:
                continue
            if position >= MAX_OPERAND_RANK:
                raise UnsupportedRankError(
                    f"only 2D matrix supported, index '{letter}' at position {position} of input {i}",
                    rank=position + 1,
                    operand_index=i,
                )
            size = int(operands[i].dimensions()[position])
            if size < 0:
                raise ShapeError(f"negative dimension {size} for input {i} (index '{letter}')")
            if extent is None:
                extent = size
            elif extent != size:
                raise DimensionMismatchError(
                    f"expected dimension {extent} did not match {size} "
                    f"for input {i} (index '{letter}')",
                    letter=letter,
                    expected=extent,
                    actual=size,
                    operand_index=i,
                )
    if extent is None:
        raise UnresolvedIndexError(
            f"Index '{letter}' does not appear in any input of '{spec}'",
            letter=letter,
        )
    return extent


def resolve_extents(spec: Subscripts, operands: Sequence[Operand]) -> Dict[str, int]:
    validate_operands(spec, operands)
    letters: List[str] = list(spec.letters_in_order())
    letters.extend(letter for letter in spec.output if letter not in spec.all_indices)
    extents = {letter: resolve_extent(letter, spec, operands) for letter in letters}
    logger.debug("resolved extents for %s: %s", spec, extents)
    return extents
