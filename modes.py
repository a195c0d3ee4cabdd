"""Mode dispatch.

The keypad runs one mode at a time.  A ModeManager owns every mode and
the index of the active one; a long press on the mode-switch key hides
the active mode and shows the next.  All other events go to the active
mode unchanged.
"""

from __future__ import annotations

from typing import Callable, Protocol, Sequence

from keymap import Key, MODE_SWITCH_POSITION, key_at
from logging_config import get_logger

logger = get_logger("modes")


class Mode(Protocol):
    """What the manager needs from a mode."""

    name: str

    def on_press(self, row: int, column: int) -> None: ...

    def on_long_press(self, row: int, column: int) -> None: ...

    def on_show(self) -> None: ...

    def on_hide(self) -> None: ...

    def needs_redraw(self) -> bool: ...


class NumpadMode:
    """Pass-through mode that types each key to the host."""

    name = "numpad"

    def __init__(self, host: Callable[[str], None] | None = None) -> None:
        self._host = host
        self._redraw = True

    def on_press(self, row: int, column: int) -> None:
        key = key_at(row, column)
        if key.is_memory or key == Key.CLEAR:
            return
        text = "\n" if key == Key.EQUALS else key.value
        if self._host is not None:
            self._host(text)

    def on_long_press(self, row: int, column: int) -> None:
        pass

    def on_show(self) -> None:
        self._redraw = True

    def on_hide(self) -> None:
        pass

    def needs_redraw(self) -> bool:
        redraw, self._redraw = self._redraw, False
        return redraw


class ModeManager:
    """Holds all modes and switches between them on request."""

    def __init__(self, modes: Sequence[Mode]) -> None:
        if not modes:
            raise ValueError("ModeManager needs at least one mode")
        self._modes: list[Mode] = list(modes)
        self._active = 0
        self.active.on_show()

    @property
    def modes(self) -> list[Mode]:
        return list(self._modes)

    @property
    def active(self) -> Mode:
        return self._modes[self._active]

    @property
    def active_index(self) -> int:
        return self._active

    def get(self, name: str) -> Mode:
        for mode in self._modes:
            if mode.name == name:
                return mode
        raise KeyError(f"No mode named {name!r}")

    def switch_to(self, index: int) -> None:
        if not 0 <= index < len(self._modes):
            raise IndexError(f"mode index {index} out of range")
        if index == self._active:
            return
        self.active.on_hide()
        self._active = index
        logger.info("switched to %s mode", self.active.name)
        self.active.on_show()

    def next_mode(self) -> None:
        self.switch_to((self._active + 1) % len(self._modes))

    def press(self, row: int, column: int) -> None:
        self.active.on_press(row, column)

    def long_press(self, row: int, column: int) -> None:
        if (row, column) == MODE_SWITCH_POSITION and len(self._modes) > 1:
            self.next_mode()
            return
        self.active.on_long_press(row, column)
