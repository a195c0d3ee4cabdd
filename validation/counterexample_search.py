"""Counterexample search for the keypad calculator.

Runs independently of the test suite.  It searches for:

1. Scenario violations: key sequences from the contract that leave the
   wrong displays or flags behind.
2. Invariant violations: random key sequences (presses and long
   presses, across configurations) after which some contract invariant
   no longer holds.  Invariants are checked after every single event,
   so a counterexample is always the shortest failing prefix.

Run directly::

    python -m validation.counterexample_search
"""
from __future__ import annotations

import random
import sys
from dataclasses import dataclass, field

from calculator import Calculator
from config import CalculatorConfig
from contract import Contract, build_contract
from formatter import OverflowMode
from keymap import Key

PRESS_KEYS = [k for k in Key]
LONG_PRESS_KEYS = [Key.MEM_A, Key.MEM_B, Key.MEM_C, Key.MEM_D, Key.EQUALS]


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    name: str
    events: tuple[str, ...]
    expected: str
    actual: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Counterexample Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category} / {cx.name}")
                lines.append(f"      Events:   {' '.join(cx.events)}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
        else:
            lines.append("\nNo counterexamples found: all checks passed.")
        return "\n".join(lines)


def _observed(calc: Calculator) -> str:
    return (
        f"input={calc.input_display!r} result={calc.result_display!r} "
        f"error={calc.is_error} pending={calc.pending.name}"
    )


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_scenario_violations(
    contract: Contract,
) -> tuple[list[Counterexample], int]:
    """Replay every scenario on a fresh calculator."""
    cxs: list[Counterexample] = []
    checks = 0

    for sc in contract.scenarios:
        calc = sc.run(Calculator(contract.config))
        checks += 1
        expected = {
            "input": sc.input,
            "result": sc.result,
            "pending": sc.pending,
        }
        actual = {
            "input": calc.input_display,
            "result": calc.result_display,
            "pending": calc.pending,
        }
        wrong = [
            k for k, v in expected.items() if v is not None and actual[k] != v
        ]
        if calc.is_error != sc.error:
            wrong.append("error")
        if wrong:
            events = tuple(sc.keys) + tuple(f"long:{k}" for k in sc.long_press) + tuple(sc.then)
            cxs.append(Counterexample(
                category="scenario_violation",
                name=sc.name,
                events=events,
                expected=sc.description,
                actual=f"{', '.join(wrong)} differ: {_observed(calc)}",
            ))

    return cxs, checks


def search_invariant_violations(
    contract: Contract,
    sequences: int = 200,
    length: int = 40,
    seed: int = 0,
) -> tuple[list[Counterexample], int]:
    """Drive random key sequences and check every invariant after each event."""
    rng = random.Random(seed)
    cxs: list[Counterexample] = []
    checks = 0

    for _ in range(sequences):
        calc = Calculator(contract.config)
        events: list[str] = []
        for _ in range(length):
            if rng.random() < 0.1:
                key = rng.choice(LONG_PRESS_KEYS)
                calc.long_press(key)
                events.append(f"long:{key.value}")
            else:
                key = rng.choice(PRESS_KEYS)
                calc.press(key)
                events.append(key.value)

            checks += 1
            broken = contract.check(calc)
            if broken:
                for inv in broken:
                    cxs.append(Counterexample(
                        category="invariant_violation",
                        name=inv.name,
                        events=tuple(events),
                        expected=inv.description,
                        actual=_observed(calc),
                    ))
                break

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(
    config: CalculatorConfig,
    sequences: int = 200,
    seed: int = 0,
) -> SearchReport:
    """Run the complete counterexample search for one configuration."""
    contract = build_contract(config)
    report = SearchReport()

    cxs, checks = search_scenario_violations(contract)
    report.counterexamples.extend(cxs)
    report.checks_run += checks

    cxs, checks = search_invariant_violations(contract, sequences=sequences, seed=seed)
    report.counterexamples.extend(cxs)
    report.checks_run += checks

    return report


def main() -> None:
    """Run the counterexample search across several configurations."""
    configs = [
        ("default", CalculatorConfig()),
        ("clamp overflow", CalculatorConfig(overflow=OverflowMode.CLAMP)),
        ("precision 2", CalculatorConfig(precision=2)),
        ("precision 8", CalculatorConfig(precision=8)),
        ("store copies input", CalculatorConfig(store_copies_to_input=True)),
        ("capacity 24", CalculatorConfig(capacity=24)),
    ]

    all_passed = True
    for name, config in configs:
        print(f"\n--- Configuration: {name} ---")
        report = run_search(config)
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL CONFIGURATIONS PASSED")
    else:
        print("SOME CONFIGURATIONS HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
