"""Contract conformance tests.

These tests are driven by ``contract.build_contract``: every scenario is
replayed and every invariant is checked after every key event of
randomly generated sequences.  Adding a scenario or an invariant to the
contract extends these tests automatically.
"""
from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from calculator import Calculator
from config import CalculatorConfig
from contract import build_contract
from formatter import OverflowMode
from keymap import Key
from validation.counterexample_search import run_search

CONFIGS = [
    CalculatorConfig(),
    CalculatorConfig(overflow=OverflowMode.CLAMP),
    CalculatorConfig(precision=2),
    CalculatorConfig(store_copies_to_input=True),
    CalculatorConfig(capacity=24),
]

CONTRACT = build_contract()

events = st.lists(
    st.tuples(st.booleans(), st.sampled_from(list(Key))),
    max_size=60,
)


# ===================================================================
# SCENARIOS
# ===================================================================

class TestScenarios:

    @pytest.mark.parametrize("scenario", CONTRACT.scenarios, ids=lambda s: s.name)
    def test_scenario(self, scenario):
        calc = scenario.run(Calculator(CONTRACT.config))
        if scenario.input is not None:
            assert calc.input_display == scenario.input
        if scenario.result is not None:
            assert calc.result_display == scenario.result
        if scenario.pending is not None:
            assert calc.pending == scenario.pending
        assert calc.is_error == scenario.error


# ===================================================================
# INVARIANTS (property-based)
# ===================================================================

class TestInvariants:

    def test_initial_state_satisfies_contract(self):
        assert CONTRACT.check(Calculator()) == []

    @given(sequence=events)
    @settings(max_examples=300)
    def test_invariants_hold_after_every_event(self, sequence):
        calc = Calculator(CONTRACT.config)
        for long, key in sequence:
            if long:
                calc.long_press(key)
            else:
                calc.press(key)
            broken = CONTRACT.check(calc)
            assert not broken, (
                f"Invariants {[b.name for b in broken]} broken after "
                f"{sequence!r}: input={calc.input_display!r} "
                f"result={calc.result_display!r}"
            )

    @given(digits=st.text(alphabet="0123456789+-*/=.C", max_size=80))
    @settings(max_examples=300)
    def test_displays_bounded(self, digits):
        calc = Calculator()
        for key in digits:
            calc.press(key)
        assert len(calc.input_display) <= 16
        assert len(calc.result_display) <= 16


# ===================================================================
# COUNTEREXAMPLE SEARCH (across configurations)
# ===================================================================

class TestCounterexampleSearch:

    @pytest.mark.parametrize(
        "config", CONFIGS,
        ids=lambda c: f"{c.overflow.value}-p{c.precision}-n{c.capacity}-s{int(c.store_copies_to_input)}",
    )
    def test_no_counterexamples(self, config):
        report = run_search(config, sequences=50)
        assert report.passed, report.summary()
        assert report.checks_run > len(build_contract(config).scenarios)
