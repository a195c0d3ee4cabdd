"""The number currently being typed.

The buffer only ever holds an optional leading minus sign, digits, and
at most one decimal point.  An empty buffer displays as ``"0"``.
"""

from __future__ import annotations

from bounded import BoundedString
from logging_config import get_logger

logger = get_logger("input_buffer")

DEFAULT_CAPACITY = 16

_LONE_ZEROS = ("0", "-0")


class InputBuffer:
    """Bounded text of the operand under entry."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self._text = BoundedString(capacity)

    @property
    def capacity(self) -> int:
        return self._text.capacity

    @property
    def text(self) -> str:
        return self._text.text

    @property
    def display(self) -> str:
        return self._text.text or "0"

    def is_empty(self) -> bool:
        return len(self._text) == 0

    def has_point(self) -> bool:
        return "." in self._text

    # -- editing -------------------------------------------------------------

    def append_digit(self, digit: str) -> bool:
        """Append one digit.  Returns False when the digit was not taken.

        A lone ``0`` (optionally signed) is never followed by more zeros,
        and a nonzero digit replaces it.
        """
        if len(digit) != 1 or not digit.isdigit():
            raise ValueError(f"not a digit: {digit!r}")

        current = self._text.text
        if current in _LONE_ZEROS:
            if digit == "0":
                return False
            return self._text.set(current[:-1] + digit)

        if not self._text.append(digit):
            logger.debug("input full at %d chars, dropped %r", self.capacity, digit)
            return False
        return True

    def append_point(self) -> bool:
        """Append a decimal point, writing a leading zero if none is there."""
        if self.has_point():
            return False
        current = self._text.text
        if current in ("", "-"):
            return self._text.append("0.")
        return self._text.append(".")

    def negate(self) -> bool:
        """Start a negative number.  Only possible on an empty buffer."""
        if not self.is_empty():
            return False
        return self._text.append("-")

    def set(self, text: str) -> bool:
        return self._text.set(text)

    def clear(self) -> None:
        self._text.clear()

    # -- conversion ----------------------------------------------------------

    def as_number(self) -> float:
        """Numeric value of the buffer; unparseable text counts as 0."""
        text = self._text.text
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            logger.debug("malformed number %r treated as 0", text)
            return 0.0

    def __str__(self) -> str:
        return self.display

    def __repr__(self) -> str:
        return f"InputBuffer({self._text.text!r}, capacity={self.capacity})"
