"""Bounded text storage.

A BoundedString owns a piece of text together with a fixed capacity.
Writes that would not fit are rejected as a whole and reported back to
the caller through the boolean return value.  Nothing is ever silently
truncated.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(eq=False)
class BoundedString:
    """Text with an explicit maximum length."""

    capacity: int
    _text: str = field(default="", repr=False)

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError(f"capacity ({self.capacity}) must be >= 1")
        if len(self._text) > self.capacity:
            raise ValueError(
                f"initial text {self._text!r} exceeds capacity {self.capacity}"
            )

    # -- queries -------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def remaining(self) -> int:
        return self.capacity - len(self._text)

    @property
    def is_full(self) -> bool:
        return len(self._text) >= self.capacity

    def fits(self, text: str) -> bool:
        return len(text) <= self.capacity

    # -- mutation ------------------------------------------------------------

    def append(self, text: str) -> bool:
        """Append ``text`` if all of it fits.  Returns whether it did."""
        if len(text) > self.remaining:
            return False
        self._text += text
        return True

    def set(self, text: str) -> bool:
        """Replace the contents if ``text`` fits.  Returns whether it did."""
        if not self.fits(text):
            return False
        self._text = text
        return True

    def clear(self) -> None:
        self._text = ""

    # -- dunder --------------------------------------------------------------

    def __str__(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def __contains__(self, item: str) -> bool:
        return item in self._text

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BoundedString):
            return self._text == other._text and self.capacity == other.capacity
        if isinstance(other, str):
            return self._text == other
        return NotImplemented
