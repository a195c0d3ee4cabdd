"""Calculator configuration.

Defaults match the keypad firmware: a 16 character value buffer, four
fractional digits, and memory store that leaves the input untouched.
``CalculatorConfig.from_env()`` lets environment variables override any
of them.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field

from formatter import OverflowMode

ENV_PREFIX = "KEYPAD_"


class CalculatorConfig(BaseModel):
    """Validated settings for one calculator instance."""

    model_config = {"frozen": True}

    capacity: int = Field(default=16, ge=16, le=64)
    precision: int = Field(default=4, ge=0, le=8)
    overflow: OverflowMode = OverflowMode.ERROR
    # One firmware variant copied the stored value into the input
    # buffer, the other did not.  Off by default.
    store_copies_to_input: bool = False
    memory_file: str | None = None
    log_level: str = Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR)$")
    log_json: bool = False
    log_file: str | None = None

    @classmethod
    def from_env(cls) -> CalculatorConfig:
        """Build a config from ``KEYPAD_*`` environment variables."""
        env = {
            "capacity": os.getenv(f"{ENV_PREFIX}CAPACITY"),
            "precision": os.getenv(f"{ENV_PREFIX}PRECISION"),
            "overflow": os.getenv(f"{ENV_PREFIX}OVERFLOW"),
            "store_copies_to_input": os.getenv(f"{ENV_PREFIX}STORE_COPIES_INPUT"),
            "memory_file": os.getenv(f"{ENV_PREFIX}MEMORY_FILE"),
            "log_level": os.getenv(f"{ENV_PREFIX}LOG_LEVEL"),
            "log_json": os.getenv(f"{ENV_PREFIX}LOG_JSON"),
            "log_file": os.getenv(f"{ENV_PREFIX}LOG_FILE"),
        }
        values: dict[str, Any] = {k: v for k, v in env.items() if v is not None}
        if "log_level" in values:
            values["log_level"] = values["log_level"].upper()
        if "overflow" in values:
            values["overflow"] = values["overflow"].lower()
        return cls.model_validate(values)
