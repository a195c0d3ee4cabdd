"""Shared fixtures for keypad calculator tests."""

from __future__ import annotations

import pytest

from calculator import Calculator
from config import CalculatorConfig
from memory_bank import InMemoryStorage


def press_all(calc: Calculator, keys: str) -> Calculator:
    """Press each character of ``keys`` in order."""
    for key in keys:
        calc.press(key)
    return calc


@pytest.fixture
def config() -> CalculatorConfig:
    return CalculatorConfig()


@pytest.fixture
def calc(config) -> Calculator:
    return Calculator(config)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def typed() -> list[str]:
    """Collects text a mode types to the host."""
    return []
