"""FastAPI endpoints that simulate the keypad device.

Routes
------
POST   /keys/press        Deliver a press (position or key symbol)
POST   /keys/long-press   Deliver a long press
GET    /display           Current frame for the active mode
GET    /memory            Calculator memory slots
GET    /host/text         Text typed to the host so far
DELETE /host/text         Forget typed host text
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from calculator import Calculator
from keymap import Key, positions_of
from models import DisplayState, HostText, KeyEvent, MemorySnapshot
from modes import ModeManager

router = APIRouter(tags=["keypad"])


class HostLog:
    """Collects everything the device types to the host."""

    def __init__(self) -> None:
        self._chunks: list[str] = []

    def __call__(self, text: str) -> None:
        self._chunks.append(text)

    @property
    def text(self) -> str:
        return "".join(self._chunks)

    def clear(self) -> None:
        self._chunks.clear()


# The manager and host log are injected by the app factory (see app.py).
_manager: ModeManager | None = None
_host_log: HostLog | None = None


def set_manager(manager: ModeManager) -> None:
    global _manager
    _manager = manager


def get_manager() -> ModeManager:
    assert _manager is not None, "Mode manager not initialized"
    return _manager


def set_host_log(host_log: HostLog) -> None:
    global _host_log
    _host_log = host_log


def get_host_log() -> HostLog:
    assert _host_log is not None, "Host log not initialized"
    return _host_log


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _position(event: KeyEvent) -> tuple[int, int]:
    if event.key is None:
        return event.row, event.column
    return positions_of(Key.from_symbol(event.key))[0]


def _calculator(manager: ModeManager) -> Calculator:
    try:
        mode = manager.get(Calculator.name)
    except KeyError:
        raise HTTPException(status_code=404, detail="No calculator mode") from None
    assert isinstance(mode, Calculator)
    return mode


def _display(manager: ModeManager) -> DisplayState:
    mode = manager.active
    redraw = mode.needs_redraw()
    if isinstance(mode, Calculator):
        return DisplayState(
            mode=mode.name,
            input=mode.input_display,
            result=mode.result_display,
            error=mode.is_error,
            redraw=redraw,
        )
    return DisplayState(mode=mode.name, redraw=redraw)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/keys/press", response_model=DisplayState)
def press(event: KeyEvent) -> DisplayState:
    manager = get_manager()
    manager.press(*_position(event))
    return _display(manager)


@router.post("/keys/long-press", response_model=DisplayState)
def long_press(event: KeyEvent) -> DisplayState:
    manager = get_manager()
    manager.long_press(*_position(event))
    return _display(manager)


@router.get("/display", response_model=DisplayState)
def display() -> DisplayState:
    return _display(get_manager())


@router.get("/memory", response_model=MemorySnapshot)
def memory() -> MemorySnapshot:
    return MemorySnapshot(slots=_calculator(get_manager()).memory.snapshot())


@router.get("/host/text", response_model=HostText)
def host_text() -> HostText:
    return HostText(text=get_host_log().text)


@router.delete("/host/text", status_code=204)
def clear_host_text() -> None:
    get_host_log().clear()
