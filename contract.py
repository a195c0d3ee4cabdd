"""Behavioural contract for the keypad calculator.

The contract is machine-readable.  Tests and the counterexample search
iterate over it instead of hard-coding expectations.

Layers
------
Scenario        a key sequence with the displays and flags it must leave
Invariant       a predicate that must hold after *every* key event
Contract        scenarios + invariants for one configuration
build_contract  constructs a Contract for a given configuration
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable

from arithmetic import Operator
from calculator import Calculator
from config import CalculatorConfig

DECIMAL = re.compile(r"^-?\d+(\.\d+)?$")
PARTIAL_INPUT = re.compile(r"^-?(\d+(\.\d*)?)?$")


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Scenario:
    name: str
    description: str
    keys: str
    input: str | None = None
    result: str | None = None
    error: bool = False
    pending: Operator | None = None
    long_press: str = ""   # memory keys long-pressed after ``keys``
    then: str = ""         # keys pressed after the long presses

    def run(self, calc: Calculator) -> Calculator:
        for key in self.keys:
            calc.press(key)
        for key in self.long_press:
            calc.long_press(key)
        for key in self.then:
            calc.press(key)
        return calc


@dataclass(frozen=True)
class Invariant:
    name: str
    description: str
    check: Callable[[Calculator], bool]


@dataclass(frozen=True)
class Contract:
    config: CalculatorConfig
    scenarios: list[Scenario] = field(default_factory=list)
    invariants: list[Invariant] = field(default_factory=list)

    def check(self, calc: Calculator) -> list[Invariant]:
        """Return the invariants that ``calc`` currently violates."""
        return [inv for inv in self.invariants if not inv.check(calc)]


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

def build_contract(config: CalculatorConfig | None = None) -> Contract:
    """Construct the calculator contract for a configuration."""
    config = config or CalculatorConfig()
    n = config.capacity

    scenarios = [
        Scenario(
            "addition", "5 + 3 = gives 8",
            "5+3=", result="8", pending=Operator.ADD,
        ),
        Scenario(
            "chained_operators", "+ then - keeps - and computes nothing",
            "9+-", result="9", pending=Operator.SUB,
        ),
        Scenario(
            "left_to_right", "operators apply in key order, not precedence",
            "2+3*4=", result="20",
        ),
        Scenario(
            "divide_by_zero", "7 / 0 = flags an error and keeps the result",
            "7/0=", result="7", error=True,
        ),
        Scenario(
            "error_blocks_commits", "no arithmetic happens while in error",
            "7/0=+2=", result="7", error=True,
        ),
        Scenario(
            "clear_recovers", "Clear twice after an error resets everything",
            "7/0=CC", input="0", result="0", error=False, pending=Operator.NONE,
        ),
        Scenario(
            "decimal_entry", "1 . 5 types 1.5",
            "1.5", input="1.5",
        ),
        Scenario(
            "second_point_ignored", "a second point changes nothing",
            "1.5.", input="1.5",
        ),
        Scenario(
            "leading_point", "a point on a fresh number writes 0.",
            ".5", input="0.5",
        ),
        Scenario(
            "negative_entry", "- on an empty buffer starts a negative number",
            "-5", input="-5",
        ),
        Scenario(
            "zero_suppressed", "0 after a lone 0 is ignored",
            "00", input="0",
        ),
        Scenario(
            "negative_zero_suppressed", "0 after -0 is ignored",
            "-00", input="-0",
        ),
        Scenario(
            "capacity", "digits beyond capacity are dropped",
            "1" * (n + 3), input="1" * n,
        ),
        Scenario(
            "precision", "results keep at most the configured fraction digits",
            "2/3=", result=f"{2 / 3:.{config.precision}f}".rstrip("0").rstrip("."),
        ),
        Scenario(
            "trailing_zeros_trimmed", "1.5 * 2 shows 3",
            "1.5*2=", result="3",
        ),
        Scenario(
            "fresh_number_after_equals", "a digit after = starts a new operand",
            "5+3=2=", result="10", input="2",
        ),
        Scenario(
            "clear_input_only", "Clear with input keeps the running result",
            "5+3C", input="0", result="5", pending=Operator.ADD,
        ),
        Scenario(
            "memory_round_trip", "store, clear, recall gives the stored value",
            "1.25*4=", long_press="a", then="Ca", input="5", result="5",
        ),
        Scenario(
            "memory_unwritten", "an unwritten slot recalls 0",
            "7", then="d", input="0",
        ),
    ]

    invariants = [
        Invariant(
            "input_bounded", f"input display is at most {n} characters",
            lambda c: len(c.input_display) <= n,
        ),
        Invariant(
            "input_well_formed", "input is a (possibly partial) signed decimal",
            lambda c: PARTIAL_INPUT.match(c.input_display) is not None,
        ),
        Invariant(
            "single_point", "input holds at most one decimal point",
            lambda c: c.input_display.count(".") <= 1,
        ),
        Invariant(
            "result_bounded", f"result display is at most {n} characters",
            lambda c: len(c.result_display) <= n,
        ),
        Invariant(
            "result_decimal", "result is a complete signed decimal",
            lambda c: DECIMAL.match(c.result_display) is not None,
        ),
        Invariant(
            "result_trimmed", "result has no trailing fractional zero or point",
            lambda c: not ("." in c.result_display and c.result_display.endswith("0")),
        ),
        Invariant(
            "no_negative_zero", "result never shows -0",
            lambda c: c.result_display != "-0",
        ),
        Invariant(
            "memory_decimal", "every memory slot holds a complete decimal",
            lambda c: all(DECIMAL.match(v) for v in c.memory.snapshot().values()),
        ),
    ]

    return Contract(config=config, scenarios=scenarios, invariants=invariants)
