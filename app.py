"""Application factory and entry point for the keypad simulator.

Run with:
    uvicorn app:app --reload
"""

from __future__ import annotations

from fastapi import FastAPI

from api import HostLog, router, set_host_log, set_manager
from calculator import Calculator
from config import CalculatorConfig
from logging_config import setup_logging
from memory_bank import ByteStorage
from modes import ModeManager, NumpadMode


def build_manager(
    config: CalculatorConfig,
    host: HostLog,
    storage: ByteStorage | None = None,
) -> ModeManager:
    """Numpad first, as the firmware boots; calculator one long press away."""
    return ModeManager([
        NumpadMode(host=host),
        Calculator(config, storage=storage, host=host),
    ])


def create_app(
    config: CalculatorConfig | None = None,
    storage: ByteStorage | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts an optional config and storage for testing; reads the
    environment if no config is given.
    """
    if config is None:
        config = CalculatorConfig.from_env()

    setup_logging(config.log_level, config.log_file, config.log_json)

    host_log = HostLog()
    set_host_log(host_log)
    set_manager(build_manager(config, host_log, storage))

    app = FastAPI(
        title="Keypad Calculator Simulator",
        description=(
            "Drives the keypad calculator with simulated key-matrix events "
            "and exposes what the display and the host computer would see."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    return app


# Default app instance for `uvicorn app:app`
app = create_app()
