import json

import numpy as np
import pytest

from einloop import (
    DenseOperand,
    Operand,
    OperandTypeError,
    RankMismatchError,
    UnsupportedRankError,
    as_operand,
    load_operand,
)


def test_vector_reports_single_column():
    op = DenseOperand([1.0, 2.0, 3.0])
    assert op.dimensions() == (3, 1)
    assert op.element_at(2, 0) == 3.0
    with pytest.raises(IndexError):
        op.element_at(0, 1)


def test_matrix_dimensions_and_elements():
    op = DenseOperand([[1, 2, 3], [4, 5, 6]])
    assert op.dimensions() == (2, 3)
    assert op.element_at(1, 2) == 6.0
    assert isinstance(op.element_at(0, 0), float)
    assert op.rank == 2


def test_rank_limits():
    with pytest.raises(UnsupportedRankError) as excinfo:
        DenseOperand(np.zeros((2, 2, 2)))
    assert excinfo.value.rank == 3
    with pytest.raises(RankMismatchError):
        DenseOperand(3.0)


def test_as_operand_keeps_protocol_objects():
    class Ones:
        def dimensions(self):
            return (2, 2)

        def element_at(self, row, col):
            return 1.0

    ones = Ones()
    assert isinstance(ones, Operand)
    assert as_operand(ones) is ones
    wrapped = as_operand(np.eye(2))
    assert isinstance(wrapped, DenseOperand)
    assert "dims=(2, 2)" in repr(wrapped)


def test_load_operand_formats(tmp_path):
    matrix = np.arange(6.0).reshape(2, 3)
    np.save(tmp_path / "m.npy", matrix)
    np.savez(tmp_path / "m.npz", matrix)
    (tmp_path / "m.json").write_text(json.dumps(matrix.tolist()), encoding="utf-8")
    for name in ("m.npy", "m.npz", "m.json"):
        op = load_operand(tmp_path / name)
        assert op.dimensions() == (2, 3)
        assert op.element_at(1, 1) == 4.0


def test_load_operand_rejects_unknown_suffix(tmp_path):
    path = tmp_path / "m.csv"
    path.write_text("1,2\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported operand file type"):
        load_operand(path)


def test_complex_operand_is_rejected():
    with pytest.raises(OperandTypeError, match="complex128") as excinfo:
        DenseOperand(np.array([1 + 1j, 2]))
    assert excinfo.value.dtype == "complex128"
    assert isinstance(excinfo.value, TypeError)


def test_non_numeric_operand_is_rejected():
    with pytest.raises(OperandTypeError):
        DenseOperand(["a", "b"])
    with pytest.raises(OperandTypeError):
        DenseOperand(np.array([object(), object()]))


def test_bool_operand_is_accepted():
    op = DenseOperand([True, False])
    assert op.element_at(0, 0) == 1.0
    assert op.element_at(1, 0) == 0.0
