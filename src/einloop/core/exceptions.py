from __future__ import annotations

from typing import Optional


class EinsumError(Exception):
    """Base class for einloop-specific exceptions."""


class ParseError(EinsumError, ValueError):
    def __init__(
        self,
        message: str,
        *,
        subscripts: Optional[str] = None,
        position: Optional[int] = None,
        char: Optional[str] = None,
    ):
        detail = _format_location(subscripts, position)
        super().__init__(f"{message}{detail}")
        self.subscripts = subscripts
        self.position = position
        self.char = char


class InvalidCharacterError(ParseError):
    pass


class InvalidMarkerError(ParseError):
    pass


class MalformedExpressionError(ParseError):
    pass


class ShapeError(EinsumError, ValueError):
    pass


class UnresolvedIndexError(ShapeError):
    def __init__(self, message: str, *, letter: Optional[str] = None):
        super().__init__(message)
        self.letter = letter


class DimensionMismatchError(ShapeError):
    def __init__(
        self,
        message: str,
        *,
        letter: Optional[str] = None,
        expected: Optional[int] = None,
        actual: Optional[int] = None,
        operand_index: Optional[int] = None,
    ):
        super().__init__(message)
        self.letter = letter
        self.expected = expected
        self.actual = actual
        self.operand_index = operand_index


class UnsupportedRankError(ShapeError):
    def __init__(
        self,
        message: str,
        *,
        rank: Optional[int] = None,
        operand_index: Optional[int] = None,
    ):
        super().__init__(message)
        self.rank = rank
        self.operand_index = operand_index


class RankMismatchError(ShapeError):
    def __init__(self, message: str, *, operand_index: Optional[int] = None):
        super().__init__(message)
        self.operand_index = operand_index


class OperandCountError(EinsumError, ValueError):
    def __init__(self, message: str, *, expected: int, actual: int):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class OperandTypeError(EinsumError, TypeError):
    def __init__(self, message: str, *, dtype: Optional[str] = None):
        super().__init__(message)
        self.dtype = dtype


def _format_location(subscripts: Optional[str], position: Optional[int]) -> str:
    if position is None:
        return ""
    location_str = f" (col {position + 1})"
    if subscripts is None or position < 0:
        return location_str
    caret = " " * position + "^"
    return f"{location_str}\n  {subscripts}\n  {caret}"
