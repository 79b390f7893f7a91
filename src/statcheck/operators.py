"""Comparison operators used by statistic tests."""

from __future__ import annotations

import operator as _op
from enum import Enum


class Operator(Enum):
    LESS = "<"
    GREATER = ">"
    LESS_OR_EQUAL = "<="
    GREATER_OR_EQUAL = ">="
    EQUAL = "=="
    NOT_EQUAL = "!="

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def inverse(self) -> Operator:
        """The relation that holds whenever this one does not."""
        return _INVERSES[self]

    def compare(self, observed: int, threshold: int) -> bool:
        return _COMPARATORS[self](observed, threshold)

    @classmethod
    def from_symbol(cls, symbol: str | None) -> Operator | None:
        """Look up an operator by its symbol, returning None if unrecognized."""
        if symbol is None:
            return None
        return _BY_SYMBOL.get(symbol)

    @classmethod
    def symbols(cls) -> list[str]:
        return [o.symbol for o in cls]


_BY_SYMBOL: dict[str, Operator] = {o.symbol: o for o in Operator}

_COMPARATORS = {
    Operator.LESS: _op.lt,
    Operator.GREATER: _op.gt,
    Operator.LESS_OR_EQUAL: _op.le,
    Operator.GREATER_OR_EQUAL: _op.ge,
    Operator.EQUAL: _op.eq,
    Operator.NOT_EQUAL: _op.ne,
}

_INVERSES = {
    Operator.LESS: Operator.GREATER_OR_EQUAL,
    Operator.GREATER: Operator.LESS_OR_EQUAL,
    Operator.LESS_OR_EQUAL: Operator.GREATER,
    Operator.GREATER_OR_EQUAL: Operator.LESS,
    Operator.EQUAL: Operator.NOT_EQUAL,
    Operator.NOT_EQUAL: Operator.EQUAL,
}
