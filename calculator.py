"""Keypad calculator controller.

Receives discrete key events, drives the input buffer, the pending
operator and the memory bank, and exposes two display strings plus an
error flag for the renderer.

State machine
-------------
IDLE               no number under entry (initial, after ``=`` or Clear)
ENTERING           digits are appending to the current number
OPERATOR_PENDING   an operator was just pressed; the next digit starts
                   a new number

The *stale* flag decides whether the next digit clears the buffer
first.  It is set by every commit (operator or ``=``) and by Clear.

Commit applies the pending operator to (running result, buffer) and only
happens when the buffer holds a fresh, non-stale number.  Division by
zero or an unrepresentable result sets the error flag and leaves the
running result untouched.  While the error flag is up, commits are
suppressed; pressing Clear on an empty buffer is the only way out.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

from arithmetic import DivideByZero, Operator, ResultOverflow, apply
from config import CalculatorConfig
from formatter import ResultFormatter
from input_buffer import InputBuffer
from keymap import Key, key_at
from logging_config import get_logger
from memory_bank import ByteStorage, FileStorage, MemoryBank

logger = get_logger("calculator")

HostTyper = Callable[[str], None]


class CalculatorState(str, Enum):
    IDLE = "idle"
    ENTERING = "entering"
    OPERATOR_PENDING = "operator_pending"


class Calculator:
    """Façade driven by key events, one at a time."""

    name = "calculator"

    def __init__(
        self,
        config: CalculatorConfig | None = None,
        storage: ByteStorage | None = None,
        host: HostTyper | None = None,
    ) -> None:
        self.config = config or CalculatorConfig()
        self.formatter = ResultFormatter(
            capacity=self.config.capacity,
            precision=self.config.precision,
            overflow=self.config.overflow,
        )
        if storage is None and self.config.memory_file:
            storage = FileStorage(self.config.memory_file)
        self.memory = MemoryBank(storage, self.formatter)
        self.memory.load()
        self._host = host
        self.reset()

    def reset(self) -> None:
        """Return to the initial state.  Memory slots are kept."""
        self._buffer = InputBuffer(self.config.capacity)
        self._result = "0"
        self._pending = Operator.NONE
        self._stale = True
        self._error = False
        self._state = CalculatorState.IDLE
        self._redraw = True

    # -- outputs -------------------------------------------------------------

    @property
    def input_display(self) -> str:
        return self._buffer.display

    @property
    def result_display(self) -> str:
        return self._result

    @property
    def is_error(self) -> bool:
        return self._error

    @property
    def pending(self) -> Operator:
        return self._pending

    @property
    def stale(self) -> bool:
        return self._stale

    @property
    def state(self) -> CalculatorState:
        return self._state

    def needs_redraw(self) -> bool:
        """Report whether anything changed since the last call, then reset."""
        redraw, self._redraw = self._redraw, False
        return redraw

    # -- mode lifecycle ------------------------------------------------------

    def on_show(self) -> None:
        logger.debug("calculator shown")
        self.reset()

    def on_hide(self) -> None:
        logger.debug("calculator hidden")

    # -- events --------------------------------------------------------------

    def on_press(self, row: int, column: int) -> None:
        self.press(key_at(row, column))

    def on_long_press(self, row: int, column: int) -> None:
        self.long_press(key_at(row, column))

    def press(self, key: Key | str) -> None:
        key = Key.from_symbol(key)
        logger.debug("press %s", key.value)

        if key.is_digit:
            self._digit(key.value)
        elif key == Key.POINT:
            self._point()
        elif key == Key.SUB and self._starts_negative():
            self._negate()
        elif key.is_operator:
            self._operator(Operator.from_key(key))
        elif key == Key.EQUALS:
            self._equals()
        elif key == Key.CLEAR:
            self._clear()
        elif key.is_memory:
            self._recall(key)

        self._redraw = True

    def long_press(self, key: Key | str) -> None:
        key = Key.from_symbol(key)
        logger.debug("long press %s", key.value)

        if key.is_memory:
            self._store(key)
            self._redraw = True
        elif key == Key.EQUALS:
            self._emit()

    # -- transitions ---------------------------------------------------------

    def _fresh(self) -> None:
        if self._stale:
            self._buffer.clear()
            self._stale = False

    def _digit(self, digit: str) -> None:
        self._fresh()
        self._buffer.append_digit(digit)
        self._state = CalculatorState.ENTERING

    def _point(self) -> None:
        self._fresh()
        self._buffer.append_point()
        self._state = CalculatorState.ENTERING

    def _starts_negative(self) -> bool:
        # Only from a cleared slate; otherwise "-" subtracts from the result.
        return (
            self._buffer.is_empty()
            and self._pending == Operator.NONE
            and self._result == "0"
        )

    def _negate(self) -> None:
        self._fresh()
        self._buffer.negate()
        self._state = CalculatorState.ENTERING

    def _operator(self, op: Operator) -> None:
        self._commit()
        self._pending = op
        self._stale = True
        self._state = CalculatorState.OPERATOR_PENDING

    def _equals(self) -> None:
        self._commit()
        self._stale = True
        self._state = CalculatorState.IDLE

    def _clear(self) -> None:
        if not self._buffer.is_empty():
            self._buffer.clear()
        else:
            self._result = "0"
            self._pending = Operator.NONE
            self._error = False
        self._stale = True
        self._state = CalculatorState.IDLE

    def _commit(self) -> None:
        if self._buffer.is_empty() or self._stale:
            return
        if self._error:
            logger.debug("commit suppressed while in error")
            return

        left = float(self._result)
        right = self._buffer.as_number()
        try:
            self._result = self.formatter.format(apply(self._pending, left, right))
        except DivideByZero:
            logger.warning("division by zero: %s / %s", self._result, self._buffer.text)
            self._error = True
        except ResultOverflow as e:
            logger.warning("result overflow: %s", e)
            self._error = True

    # -- memory --------------------------------------------------------------

    def _recall(self, slot: Key) -> None:
        if self._buffer.set(self.memory.recall(slot)):
            self._stale = False
            self._state = CalculatorState.ENTERING

    def _store(self, slot: Key) -> None:
        self.memory.store(slot, self._result)
        if self.config.store_copies_to_input and self._buffer.set(self._result):
            self._stale = False
            self._state = CalculatorState.ENTERING

    def _emit(self) -> None:
        if self._host is None:
            logger.debug("no host attached, result not typed")
            return
        self._host(self.result_display)
