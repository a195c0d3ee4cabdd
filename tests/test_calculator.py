"""White-box tests for the calculator controller.

Each class targets one kind of key event and the transitions it drives.
"""

from __future__ import annotations

import pytest

from arithmetic import Operator
from calculator import Calculator, CalculatorState
from config import CalculatorConfig
from formatter import OverflowMode
from keymap import Key
from memory_bank import MemoryBank

from conftest import press_all


class TestInitialState:
    def test_displays(self, calc):
        assert calc.input_display == "0"
        assert calc.result_display == "0"
        assert not calc.is_error

    def test_flags(self, calc):
        assert calc.state == CalculatorState.IDLE
        assert calc.pending == Operator.NONE
        assert calc.stale

    def test_first_frame_needs_redraw(self, calc):
        assert calc.needs_redraw()
        assert not calc.needs_redraw()


class TestDigits:
    def test_digits_concatenate(self, calc):
        press_all(calc, "1234")
        assert calc.input_display == "1234"
        assert calc.state == CalculatorState.ENTERING
        assert not calc.stale

    def test_overflow_silently_dropped(self, calc):
        press_all(calc, "9" * 20)
        assert calc.input_display == "9" * 16
        assert not calc.is_error

    def test_digit_after_operator_starts_fresh(self, calc):
        press_all(calc, "12+3")
        assert calc.input_display == "3"

    def test_matrix_position(self, calc):
        calc.on_press(2, 0)
        calc.on_press(5, 1)
        assert calc.input_display == "70"


class TestPoint:
    def test_decimal(self, calc):
        press_all(calc, "1.5")
        assert calc.input_display == "1.5"

    def test_second_point_noop(self, calc):
        press_all(calc, "1.5.")
        assert calc.input_display == "1.5"

    def test_point_on_stale_input(self, calc):
        press_all(calc, "5+.")
        assert calc.input_display == "0."
        press_all(calc, "5=")
        assert calc.result_display == "5.5"


class TestNegation:
    def test_minus_then_digit(self, calc):
        press_all(calc, "-5")
        assert calc.input_display == "-5"
        assert calc.pending == Operator.NONE

    def test_negative_operand(self, calc):
        press_all(calc, "-5+3=")
        assert calc.result_display == "-2"

    def test_zero_after_minus_zero(self, calc):
        press_all(calc, "-00")
        assert calc.input_display == "-0"

    def test_minus_after_cleared_input_subtracts(self, calc):
        press_all(calc, "5=C-3=")
        assert calc.result_display == "2"
        assert calc.pending == Operator.SUB

    def test_minus_after_full_clear_negates(self, calc):
        press_all(calc, "5=CC-3=")
        assert calc.result_display == "-3"

    def test_minus_with_pending_operator_chains(self, calc):
        press_all(calc, "+-")
        assert calc.pending == Operator.SUB
        assert calc.input_display == "0"


class TestOperators:
    def test_first_operator_seeds_result(self, calc):
        press_all(calc, "5+")
        assert calc.result_display == "5"
        assert calc.pending == Operator.ADD
        assert calc.state == CalculatorState.OPERATOR_PENDING
        assert calc.stale

    def test_chaining_replaces_operator_only(self, calc):
        press_all(calc, "9+")
        press_all(calc, "-")
        assert calc.pending == Operator.SUB
        assert calc.result_display == "9"
        press_all(calc, "*/")
        assert calc.pending == Operator.DIV
        assert calc.result_display == "9"

    def test_operator_commits_previous(self, calc):
        press_all(calc, "2+3*")
        assert calc.result_display == "5"
        press_all(calc, "4=")
        assert calc.result_display == "20"

    @pytest.mark.parametrize("keys, result", [
        ("5+3=", "8"),
        ("5-8=", "-3"),
        ("6*7=", "42"),
        ("1/4=", "0.25"),
        ("2/3=", "0.6667"),
        ("0.1+0.2=", "0.3"),
    ])
    def test_arithmetic(self, calc, keys, result):
        press_all(calc, keys)
        assert calc.result_display == result


class TestEquals:
    def test_equals_keeps_pending(self, calc):
        press_all(calc, "5+3=")
        assert calc.pending == Operator.ADD
        assert calc.state == CalculatorState.IDLE
        assert calc.stale

    def test_repeated_equals_is_noop(self, calc):
        press_all(calc, "5+3==")
        assert calc.result_display == "8"

    def test_continue_with_new_operand(self, calc):
        press_all(calc, "5+3=2=")
        assert calc.result_display == "10"

    def test_equals_without_operator(self, calc):
        press_all(calc, "42=")
        assert calc.result_display == "42"

    def test_operator_after_equals_continues(self, calc):
        press_all(calc, "5+3=*2=")
        assert calc.result_display == "16"


class TestDivideByZero:
    def test_sets_error_keeps_result(self, calc):
        press_all(calc, "7/0=")
        assert calc.is_error
        assert calc.result_display == "7"

    def test_prior_result_kept(self, calc):
        press_all(calc, "3*4=/0=")
        assert calc.is_error
        assert calc.result_display == "12"

    def test_commits_blocked_in_error(self, calc):
        press_all(calc, "7/0=+5=")
        assert calc.is_error
        assert calc.result_display == "7"

    def test_first_clear_keeps_error(self, calc):
        press_all(calc, "7/0=C")
        assert calc.is_error
        assert calc.input_display == "0"

    def test_full_clear_recovers(self, calc):
        press_all(calc, "7/0=CC")
        assert not calc.is_error
        assert calc.result_display == "0"
        press_all(calc, "1+1=")
        assert calc.result_display == "2"


class TestOverflowPolicy:
    def test_error_mode_flags(self, calc):
        press_all(calc, "99999999*99999999999=")
        assert calc.is_error
        assert calc.result_display == "99999999"

    def test_full_width_input_rounds_past_capacity(self, calc):
        # 9999999999999999 is not a double; it rounds to 1e16 (17 digits).
        press_all(calc, "9" * 16 + "*9=")
        assert calc.is_error
        assert calc.result_display == "0"

    def test_full_width_input_clamped(self):
        calc = Calculator(CalculatorConfig(overflow=OverflowMode.CLAMP))
        press_all(calc, "9" * 16 + "+")
        assert not calc.is_error
        assert calc.result_display == "9" * 16

    def test_clamp_mode_saturates(self):
        calc = Calculator(CalculatorConfig(overflow=OverflowMode.CLAMP))
        press_all(calc, "99999999*99999999999=")
        assert not calc.is_error
        assert calc.result_display == "9" * 16


class TestClear:
    def test_clear_input_only(self, calc):
        press_all(calc, "5+3C")
        assert calc.input_display == "0"
        assert calc.result_display == "5"
        assert calc.pending == Operator.ADD
        assert calc.state == CalculatorState.IDLE
        press_all(calc, "4=")
        assert calc.result_display == "9"

    def test_clear_on_empty_resets(self, calc):
        press_all(calc, "5+3=CC")
        assert calc.result_display == "0"
        assert calc.pending == Operator.NONE

    def test_clear_after_equals_clears_stale_input(self, calc):
        press_all(calc, "5+3=C")
        assert calc.input_display == "0"
        assert calc.result_display == "8"


class TestMemory:
    def test_store_recall_round_trip(self, calc):
        press_all(calc, "1.5*3=")
        calc.long_press("a")
        press_all(calc, "C")
        calc.press("a")
        assert calc.input_display == "4.5"
        assert not calc.stale
        assert calc.state == CalculatorState.ENTERING

    def test_recalled_value_is_operand(self, calc):
        press_all(calc, "6=")
        calc.long_press("b")
        press_all(calc, "CC2*b=")
        assert calc.result_display == "12"

    def test_recall_unwritten(self, calc):
        press_all(calc, "7c")
        assert calc.input_display == "0"

    def test_store_leaves_input_by_default(self, calc):
        press_all(calc, "5+3=9")
        calc.long_press("a")
        assert calc.input_display == "9"
        assert calc.memory.recall("a") == "8"

    def test_store_copies_to_input_when_configured(self):
        calc = Calculator(CalculatorConfig(store_copies_to_input=True))
        press_all(calc, "5+3=9")
        calc.long_press("a")
        assert calc.input_display == "8"
        assert not calc.stale

    def test_long_press_matrix(self, calc):
        press_all(calc, "5=")
        calc.on_long_press(0, 3)
        assert calc.memory.recall(Key.MEM_D) == "5"

    def test_memory_survives_show(self, calc):
        press_all(calc, "5=")
        calc.long_press("a")
        calc.on_show()
        assert calc.result_display == "0"
        assert calc.memory.recall("a") == "5"

    def test_memory_persists_through_storage(self, storage):
        first = Calculator(storage=storage)
        press_all(first, "2.5*2=")
        first.long_press("c")

        second = Calculator(storage=storage)
        second.press("c")
        assert second.input_display == "5"

    def test_memory_file_config(self, tmp_path):
        config = CalculatorConfig(memory_file=str(tmp_path / "mem.bin"))
        first = Calculator(config)
        press_all(first, "3=")
        first.long_press("b")

        assert Calculator(config).memory.recall("b") == "3"


class TestHostEmission:
    def test_long_press_equals_types_result(self, typed):
        calc = Calculator(host=typed.append)
        press_all(calc, "5+3=")
        calc.long_press(Key.EQUALS)
        assert typed == ["8"]

    def test_no_host_is_fine(self, calc):
        press_all(calc, "5=")
        calc.long_press("=")
        assert calc.result_display == "5"

    def test_long_press_digit_ignored(self, calc):
        calc.needs_redraw()
        calc.long_press("5")
        assert calc.input_display == "0"
        assert not calc.needs_redraw()


class TestRedraw:
    def test_press_sets_redraw(self, calc):
        calc.needs_redraw()
        calc.press("1")
        assert calc.needs_redraw()
        assert not calc.needs_redraw()

    def test_store_sets_redraw(self, calc):
        calc.needs_redraw()
        calc.long_press("a")
        assert calc.needs_redraw()


class TestModeLifecycle:
    def test_show_resets(self, calc):
        press_all(calc, "5+3")
        calc.on_show()
        assert calc.input_display == "0"
        assert calc.result_display == "0"
        assert calc.pending == Operator.NONE
        assert calc.stale
        assert calc.state == CalculatorState.IDLE

    def test_hide_keeps_state(self, calc):
        press_all(calc, "5+3")
        calc.on_hide()
        assert calc.input_display == "3"

    def test_preloaded_memory_bank(self, storage):
        MemoryBank(storage).store("a", "9")
        assert Calculator(storage=storage).memory.recall("a") == "9"
