"""Result formatting.

Renders a number with a fixed maximum number of fractional digits, then
trims trailing zeros and a dangling decimal point.  The output never
exceeds the display capacity:

- when the fractional digits do not fit, fewer are shown;
- when the integer part alone does not fit, the overflow mode decides
  between raising ``ResultOverflow`` and saturating at the widest
  representable value.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from arithmetic import ResultOverflow

DEFAULT_PRECISION = 4


class OverflowMode(str, Enum):
    ERROR = "error"   # Raise ResultOverflow
    CLAMP = "clamp"   # Saturate at +/- 99...9


def trim(text: str) -> str:
    """Drop trailing fractional zeros, a lone point, and the sign of zero."""
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


@dataclass(frozen=True)
class ResultFormatter:
    capacity: int = 16
    precision: int = DEFAULT_PRECISION
    overflow: OverflowMode = OverflowMode.ERROR

    def __post_init__(self) -> None:
        if self.capacity < 2:
            raise ValueError(f"capacity ({self.capacity}) must be >= 2")
        if self.precision < 0:
            raise ValueError(f"precision ({self.precision}) must be >= 0")

    @property
    def largest(self) -> str:
        return "9" * self.capacity

    @property
    def smallest(self) -> str:
        return "-" + "9" * (self.capacity - 1)

    def format(self, value: float) -> str:
        if math.isnan(value):
            raise ResultOverflow(value)

        if math.isfinite(value):
            for digits in range(self.precision, -1, -1):
                text = trim(f"{value:.{digits}f}")
                if len(text) <= self.capacity:
                    return text

        if self.overflow == OverflowMode.CLAMP:
            return self.largest if value > 0 else self.smallest
        raise ResultOverflow(value)

    __call__ = format
