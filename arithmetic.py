"""Arithmetic engine.

A single pure function applies the pending operator to the running
result and the operand just entered.  Division by zero is detected by
exact comparison with zero; there is no tolerance window.
"""

from __future__ import annotations

import math
from enum import Enum

from keymap import Key


class DivideByZero(ZeroDivisionError):
    """Raised when the right operand of a division is exactly zero."""

    def __init__(self, left: float) -> None:
        self.left = left
        super().__init__(f"division of {left!r} by zero")


class ResultOverflow(OverflowError):
    """Raised when a result cannot be represented."""

    def __init__(self, value: float) -> None:
        self.value = value
        super().__init__(f"result {value!r} cannot be represented")


class Operator(str, Enum):
    NONE = ""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    @classmethod
    def from_key(cls, key: Key) -> Operator:
        if not key.is_operator:
            raise ValueError(f"{key!r} is not an operator key")
        return cls(key.value)


def apply(op: Operator, left: float, right: float) -> float:
    """Apply ``op`` to ``left`` and ``right``.

    With no pending operator the right operand simply replaces the
    result; that is how the first number typed seeds the computation.
    """
    if op == Operator.NONE:
        raw = right
    elif op == Operator.ADD:
        raw = left + right
    elif op == Operator.SUB:
        raw = left - right
    elif op == Operator.MUL:
        raw = left * right
    elif op == Operator.DIV:
        if right == 0:
            raise DivideByZero(left)
        raw = left / right
    else:
        raise ValueError(f"unknown operator: {op!r}")

    if not math.isfinite(raw):
        raise ResultOverflow(raw)
    return raw
