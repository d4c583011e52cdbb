from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _load_version

from .core.evaluator import EinsumConfig, EinsumResult, Evaluator, einsum, einsum_array
from .core.exceptions import (
    DimensionMismatchError,
    EinsumError,
    InvalidCharacterError,
    InvalidMarkerError,
    MalformedExpressionError,
    OperandCountError,
    OperandTypeError,
    ParseError,
    RankMismatchError,
    ShapeError,
    UnresolvedIndexError,
    UnsupportedRankError,
)
from .core.ir import Subscripts
from .core.odometer import Counter, Odometer
from .core.operands import DenseOperand, Operand, as_operand, load_operand
from .core.parser import parse_subscripts

try:
    __version__ = _load_version("einloop")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "einsum",
    "einsum_array",
    "EinsumConfig",
    "EinsumResult",
    "Evaluator",
    "Subscripts",
    "parse_subscripts",
    "Counter",
    "Odometer",
    "Operand",
    "DenseOperand",
    "as_operand",
    "load_operand",
    "EinsumError",
    "ParseError",
    "InvalidCharacterError",
    "InvalidMarkerError",
    "MalformedExpressionError",
    "ShapeError",
    "UnresolvedIndexError",
    "DimensionMismatchError",
    "UnsupportedRankError",
    "RankMismatchError",
    "OperandCountError",
    "OperandTypeError",
    "__version__",
]
