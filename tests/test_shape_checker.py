import numpy as np
import pytest

from einloop import (
    DenseOperand,
    DimensionMismatchError,
    OperandCountError,
    RankMismatchError,
    ShapeError,
    Subscripts,
    UnresolvedIndexError,
    UnsupportedRankError,
    parse_subscripts,
)
from einloop.core.shape_checker import resolve_extent, resolve_extents


def _ops(*shapes):
    return [DenseOperand(np.zeros(shape)) for shape in shapes]


def test_resolve_extents_for_matmul():
    spec = parse_subscripts("ij,jk->ik")
    assert resolve_extents(spec, _ops((2, 3), (3, 4))) == {"i": 2, "j": 3, "k": 4}


def test_resolve_extents_for_vectors():
    spec = parse_subscripts("i,j->ij")
    assert resolve_extents(spec, _ops((2,), (5,))) == {"i": 2, "j": 5}


def test_shared_index_mismatch_names_sizes_and_operand():
    spec = parse_subscripts("ij,jk->ik")
    with pytest.raises(DimensionMismatchError) as excinfo:
        resolve_extents(spec, _ops((2, 3), (2, 4)))
    err = excinfo.value
    assert (err.letter, err.expected, err.actual, err.operand_index) == ("j", 3, 2, 1)
    assert "expected dimension 3 did not match 2 for input 1" in str(err)


def test_diagonal_requires_square_operand():
    spec = parse_subscripts("ii->i")
    with pytest.raises(DimensionMismatchError) as excinfo:
        resolve_extents(spec, _ops((2, 3)))
    assert excinfo.value.operand_index == 0
    assert (excinfo.value.expected, excinfo.value.actual) == (2, 3)


def test_output_only_index_is_unresolved():
    spec = parse_subscripts("ij->ik")
    with pytest.raises(UnresolvedIndexError) as excinfo:
        resolve_extents(spec, _ops((2, 2)))
    assert excinfo.value.letter == "k"


def test_three_indices_on_one_operand_is_unsupported():
    spec = parse_subscripts("ijk->i")
    with pytest.raises(UnsupportedRankError) as excinfo:
        resolve_extents(spec, _ops((2, 2)))
    assert excinfo.value.rank == 3
    assert excinfo.value.operand_index == 0


def test_resolve_extent_rejects_third_position():
    spec = Subscripts.build([("i", "j", "k")], ("i",))
    operands = _ops((2, 3))
    assert resolve_extent("i", spec, operands) == 2
    assert resolve_extent("j", spec, operands) == 3
    with pytest.raises(UnsupportedRankError):
        resolve_extent("k", spec, operands)


def test_single_index_on_matrix_is_rank_mismatch():
    spec = parse_subscripts("i->i")
    with pytest.raises(RankMismatchError):
        resolve_extents(spec, _ops((2, 3)))


def test_single_index_on_column_matrix_is_accepted():
    spec = parse_subscripts("i->i")
    assert resolve_extents(spec, _ops((4, 1))) == {"i": 4}


def test_operand_count_must_match_inputs():
    spec = parse_subscripts("ij,jk->ik")
    with pytest.raises(OperandCountError) as excinfo:
        resolve_extents(spec, _ops((2, 2)))
    assert (excinfo.value.expected, excinfo.value.actual) == (2, 1)


def test_negative_dimension_is_rejected():
    class Negative:
        def dimensions(self):
            return (-2, 1)

        def element_at(self, row, col):
            return 0.0

    spec = parse_subscripts("i->i")
    with pytest.raises(ShapeError, match="negative dimension -2"):
        resolve_extents(spec, [Negative()])
