"""Wire models for the keypad simulator API.

Key events arrive either as a matrix position or as a logical key
symbol, never both.  Display state mirrors what the renderer would be
handed: two strings, an error flag, and whether a redraw is due.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from keymap import COLUMNS, ROWS, Key


class KeyEvent(BaseModel):
    """A single key event from the matrix scanner."""

    row: int | None = Field(default=None, ge=0, lt=ROWS)
    column: int | None = Field(default=None, ge=0, lt=COLUMNS)
    key: str | None = Field(default=None, min_length=1, max_length=1)

    @field_validator("key")
    @classmethod
    def key_is_known(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return Key.from_symbol(v).value

    @model_validator(mode="after")
    def position_or_key(self) -> KeyEvent:
        has_position = self.row is not None or self.column is not None
        if self.key is not None and has_position:
            raise ValueError("Give either row/column or key, not both")
        if self.key is None:
            if self.row is None or self.column is None:
                raise ValueError("Both row and column are required without key")
        return self


class DisplayState(BaseModel):
    """Everything the renderer needs for one frame."""

    mode: str
    input: str | None = None
    result: str | None = None
    error: bool = False
    redraw: bool = False


class MemorySnapshot(BaseModel):
    slots: dict[str, str]


class HostText(BaseModel):
    text: str
