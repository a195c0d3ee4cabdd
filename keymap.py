"""Logical keys and the 6x4 key matrix layout.

The key-matrix scanner reports physical (row, column) positions.  This
module turns them into logical keys.  It is a pure lookup table with no
state of its own.
"""

from __future__ import annotations

from enum import Enum


class KeyPositionError(LookupError):
    """Raised when a (row, column) pair lies outside the key matrix."""

    def __init__(self, row: int, column: int) -> None:
        self.row = row
        self.column = column
        super().__init__(
            f"No key at row {row}, column {column} "
            f"(matrix is {ROWS}x{COLUMNS})"
        )


class Key(str, Enum):
    ZERO = "0"
    ONE = "1"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    POINT = "."
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    EQUALS = "="
    CLEAR = "C"
    MEM_A = "a"
    MEM_B = "b"
    MEM_C = "c"
    MEM_D = "d"

    @classmethod
    def from_symbol(cls, symbol: str) -> Key:
        """Resolve a pre-resolved logical symbol, accepting firmware aliases."""
        if isinstance(symbol, Key):
            return symbol
        symbol = _ALIASES.get(symbol, symbol)
        try:
            return cls(symbol)
        except ValueError:
            raise ValueError(f"Unknown key symbol: {symbol!r}") from None

    @property
    def is_digit(self) -> bool:
        return self.value.isdigit()

    @property
    def is_operator(self) -> bool:
        return self in _OPERATORS

    @property
    def is_memory(self) -> bool:
        return self in _MEMORY


_OPERATORS = frozenset({Key.ADD, Key.SUB, Key.MUL, Key.DIV})
_MEMORY = frozenset({Key.MEM_A, Key.MEM_B, Key.MEM_C, Key.MEM_D})

_ALIASES = {
    "x": "*",
    "X": "*",
    "\n": "=",
    # Upper-case "C" is Clear, so only a, b and d get upper-case aliases.
    "A": "a",
    "B": "b",
    "D": "d",
}


# ---------------------------------------------------------------------------
# Matrix layout
# ---------------------------------------------------------------------------

ROWS = 6
COLUMNS = 4

KEYMAP: tuple[tuple[Key, ...], ...] = (
    (Key.MEM_A, Key.MEM_B, Key.MEM_C, Key.MEM_D),
    (Key.CLEAR, Key.DIV, Key.MUL, Key.SUB),
    (Key.SEVEN, Key.EIGHT, Key.NINE, Key.ADD),
    (Key.FOUR, Key.FIVE, Key.SIX, Key.ADD),
    (Key.ONE, Key.TWO, Key.THREE, Key.EQUALS),
    (Key.ZERO, Key.ZERO, Key.POINT, Key.EQUALS),
)

# Long press here switches the active mode instead of reaching the mode.
MODE_SWITCH_POSITION = (1, 0)


def key_at(row: int, column: int) -> Key:
    """Return the logical key at a matrix position."""
    if not (0 <= row < ROWS and 0 <= column < COLUMNS):
        raise KeyPositionError(row, column)
    return KEYMAP[row][column]


def positions_of(key: Key) -> list[tuple[int, int]]:
    """All matrix positions that produce ``key`` (some keys are doubled)."""
    return [
        (r, c)
        for r, row in enumerate(KEYMAP)
        for c, k in enumerate(row)
        if k == key
    ]
