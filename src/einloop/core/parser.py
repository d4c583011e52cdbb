from __future__ import annotations

import enum
import logging
from functools import lru_cache
from typing import List

from lark import Lark, Token
from lark.exceptions import UnexpectedCharacters

from .exceptions import (
    InvalidCharacterError,
    InvalidMarkerError,
    MalformedExpressionError,
)
from .ir import ARROW, Subscripts

logger = logging.getLogger(__name__)

SUBSCRIPT_GRAMMAR = r"""
start: item*
?item: LETTER | COMMA | ARROW

LETTER: /[^\W\d_]/
COMMA: ","
ARROW: "->"
WS: /\s+/
%ignore WS
"""


class ParseMode(enum.Enum):
    NEW_INPUT = "new_input"
    GROW_INPUT = "grow_input"
    OUTPUT = "output"


@lru_cache(maxsize=1)
def _build_lark() -> Lark:
    return Lark(SUBSCRIPT_GRAMMAR, parser="lalr", lexer="basic", start="start")


def _tokens(subscripts: str):
    try:
        yield from _build_lark().parse(subscripts).children
    except UnexpectedCharacters as exc:
        pos = exc.pos_in_stream
        char = subscripts[pos]
        if char == ARROW[0]:
            following = subscripts[pos + 1 : pos + 2]
            if not following:
                raise MalformedExpressionError(
                    "Unterminated '->' marker at end of subscripts",
                    subscripts=subscripts,
                    position=pos,
                    char=char,
                ) from None
            raise InvalidMarkerError(
                f"Unexpected character {following!r} after '-'",
                subscripts=subscripts,
                position=pos + 1,
                char=following,
            ) from None
        raise InvalidCharacterError(
            f"Unexpected non-letter character {char!r}",
            subscripts=subscripts,
            position=pos,
            char=char,
        ) from None


class _SubscriptScanner:
    def __init__(self, subscripts: str):
        self.subscripts = subscripts
        self.mode = ParseMode.NEW_INPUT
        self.inputs: List[List[str]] = []
        self.output: List[str] = []

    def _malformed(self, message: str, token: Token) -> MalformedExpressionError:
        return MalformedExpressionError(
            message,
            subscripts=self.subscripts,
            position=token.start_pos,
            char=str(token),
        )

    def scan(self) -> Subscripts:
        for token in _tokens(self.subscripts):
            if token.type == "LETTER":
                self._letter(token)
            elif token.type == "COMMA":
                self._comma(token)
            else:
                self._arrow(token)
        if self.mode is ParseMode.NEW_INPUT:
            if not self.inputs:
                raise MalformedExpressionError(
                    "Subscripts must name at least one operand",
                    subscripts=self.subscripts,
                )
            raise MalformedExpressionError(
                "Trailing ',' leaves an empty operand",
                subscripts=self.subscripts,
                position=len(self.subscripts.rstrip()) - 1,
                char=",",
            )
        return Subscripts.build(self.inputs, self.output)

    def _letter(self, token: Token) -> None:
        letter = str(token)
        if not letter.isalpha():
            raise InvalidCharacterError(
                f"Unexpected non-letter character {letter!r}",
                subscripts=self.subscripts,
                position=token.start_pos,
                char=letter,
            )
        if self.mode is ParseMode.NEW_INPUT:
            self.inputs.append([letter])
            self.mode = ParseMode.GROW_INPUT
        elif self.mode is ParseMode.GROW_INPUT:
            self.inputs[-1].append(letter)
        else:
            if letter in self.output:
                raise self._malformed(f"Output index {letter!r} is repeated", token)
            self.output.append(letter)

    def _comma(self, token: Token) -> None:
        if self.mode is ParseMode.OUTPUT:
            raise self._malformed("Operand separator ',' after '->'", token)
        if self.mode is ParseMode.NEW_INPUT:
            raise self._malformed("Empty operand before ','", token)
        self.mode = ParseMode.NEW_INPUT

    def _arrow(self, token: Token) -> None:
        if self.mode is ParseMode.OUTPUT:
            raise self._malformed("Repeated '->' marker", token)
        if self.mode is ParseMode.NEW_INPUT:
            if not self.inputs:
                raise self._malformed("No operands before '->'", token)
            raise self._malformed("Empty operand before '->'", token)
        self.mode = ParseMode.OUTPUT


@lru_cache(maxsize=256)
def parse_subscripts(subscripts: str) -> Subscripts:
    """Parse ``subscripts`` into an immutable :class:`Subscripts`.

    Letters are index names (any alphabetic character, case-sensitive),
    ``,`` separates operands, ``->`` starts the output and whitespace is
    ignored. Without ``->`` the output is empty and every index is summed.
    """
    if not isinstance(subscripts, str):
        raise TypeError(f"subscripts must be a string, got {type(subscripts).__name__}")
    spec = _SubscriptScanner(subscripts).scan()
    logger.debug("parsed %r as %s", subscripts, spec)
    return spec
