import pytest

from einloop import parse_subscripts

hypothesis = pytest.importorskip("hypothesis")
from hypothesis import given, settings  # noqa: E402
from hypothesis import strategies as st  # noqa: E402

_LETTERS = list("ijklmnABZαβ")
_WHITESPACE = ["", "", " ", "  ", "\t"]


@st.composite
def subscript_parts(draw):
    operand_count = draw(st.integers(min_value=1, max_value=4))
    inputs = [
        draw(st.lists(st.sampled_from(_LETTERS), min_size=1, max_size=3))
        for _ in range(operand_count)
    ]
    used = sorted({letter for letters in inputs for letter in letters})
    output = draw(st.lists(st.sampled_from(used), unique=True, max_size=len(used)))
    return inputs, output


@st.composite
def spaced(draw, tokens):
    pieces = []
    for token in tokens:
        pieces.append(draw(st.sampled_from(_WHITESPACE)))
        pieces.append(token)
    pieces.append(draw(st.sampled_from(_WHITESPACE)))
    return "".join(pieces)


def _tokens(inputs, output):
    tokens = []
    for i, letters in enumerate(inputs):
        if i:
            tokens.append(",")
        tokens.extend(letters)
    tokens.append("->")
    tokens.extend(output)
    return tokens


@settings(max_examples=200, deadline=None)
@given(subscript_parts())
def test_round_trip_reconstructs_subscripts(parts):
    inputs, output = parts
    text = ",".join("".join(letters) for letters in inputs) + "->" + "".join(output)
    spec = parse_subscripts(text)
    assert str(spec) == text
    assert [list(letters) for letters in spec.inputs] == inputs
    assert list(spec.output) == output
    assert spec.free_indices == frozenset(output)
    assert spec.free_indices <= spec.all_indices


@settings(max_examples=100, deadline=None)
@given(st.data())
def test_whitespace_is_ignored(data):
    inputs, output = data.draw(subscript_parts())
    tokens = _tokens(inputs, output)
    text = data.draw(spaced(tokens))
    assert str(parse_subscripts(text)) == "".join(tokens)
