"""Tests for comparison operators."""

import itertools

import pytest

from statcheck.operators import Operator


SAMPLES = [-3, -1, 0, 1, 2, 10, 42, 2**62]


@pytest.mark.parametrize(
    "symbol, native",
    [
        ("<", lambda a, b: a < b),
        (">", lambda a, b: a > b),
        ("<=", lambda a, b: a <= b),
        (">=", lambda a, b: a >= b),
        ("==", lambda a, b: a == b),
        ("!=", lambda a, b: a != b),
    ],
)
def test_compare_matches_native_comparison(symbol, native):
    op = Operator.from_symbol(symbol)
    for observed, threshold in itertools.product(SAMPLES, repeat=2):
        assert op.compare(observed, threshold) is native(observed, threshold)


@pytest.mark.parametrize(
    "symbol, inverse",
    [
        ("<", ">="),
        (">", "<="),
        ("<=", ">"),
        (">=", "<"),
        ("==", "!="),
        ("!=", "=="),
    ],
)
def test_inverse_table(symbol, inverse):
    assert Operator.from_symbol(symbol).inverse.symbol == inverse


def test_inverse_is_an_involution():
    for op in Operator:
        assert op.inverse.inverse is op


def test_inverse_is_a_bijection():
    assert {op.inverse for op in Operator} == set(Operator)


def test_inverse_holds_exactly_when_operator_does_not():
    for op in Operator:
        for observed, threshold in itertools.product(SAMPLES, repeat=2):
            assert op.inverse.compare(observed, threshold) is not op.compare(
                observed, threshold
            )


def test_from_symbol_unknown():
    assert Operator.from_symbol("<>") is None
    assert Operator.from_symbol("") is None
    assert Operator.from_symbol(None) is None
    assert Operator.from_symbol(" <") is None


def test_symbols_lists_all_six():
    assert Operator.symbols() == ["<", ">", "<=", ">=", "==", "!="]


@pytest.mark.parametrize("op", list(Operator))
def test_every_member_has_comparator_and_inverse(op):
    assert isinstance(op.compare(1, 2), bool)
    assert isinstance(op.inverse, Operator)
