"""Memory slots with optional write-through persistence.

Four named slots (``a`` to ``d``) hold previously stored results as
text.  A slot that was never written recalls as ``"0"``.

When a ``ByteStorage`` is attached, every store also writes the value's
canonical encoding (a little-endian IEEE-754 double) at
``BASE_ADDRESS + index * SLOT_STRIDE``, and ``load()`` fills the slots
back from storage at startup.  Erased storage reads as all ``0xFF``
bytes, which decodes to NaN and therefore loads as ``"0"``.
"""

from __future__ import annotations

import math
import os
import struct
from pathlib import Path
from typing import Protocol

from arithmetic import ResultOverflow
from formatter import ResultFormatter
from keymap import Key
from logging_config import get_logger

logger = get_logger("memory_bank")

SLOTS: tuple[str, ...] = ("a", "b", "c", "d")
SLOT_FORMAT = "<d"
SLOT_STRIDE = struct.calcsize(SLOT_FORMAT)
BASE_ADDRESS = 0
ERASED_BYTE = 0xFF


class UnknownSlotError(KeyError):
    """Raised for a slot name outside ``a``..``d``."""

    def __init__(self, slot: str) -> None:
        self.slot = slot
        super().__init__(f"Unknown memory slot: {slot!r}")


# ---------------------------------------------------------------------------
# Persistence collaborators
# ---------------------------------------------------------------------------

class ByteStorage(Protocol):
    """Byte-addressable durable medium."""

    def read_bytes(self, address: int, length: int) -> bytes: ...

    def write_bytes(self, address: int, data: bytes) -> None: ...


def _check_range(address: int, length: int, size: int) -> None:
    if address < 0 or length < 0 or address + length > size:
        raise IndexError(
            f"range [{address}, {address + length}) outside storage of {size} bytes"
        )


class InMemoryStorage:
    """Volatile stand-in for an EEPROM; starts fully erased."""

    def __init__(self, size: int = SLOT_STRIDE * len(SLOTS)) -> None:
        self._data = bytearray([ERASED_BYTE]) * size

    @property
    def size(self) -> int:
        return len(self._data)

    def read_bytes(self, address: int, length: int) -> bytes:
        _check_range(address, length, self.size)
        return bytes(self._data[address : address + length])

    def write_bytes(self, address: int, data: bytes) -> None:
        _check_range(address, len(data), self.size)
        self._data[address : address + len(data)] = data


class FileStorage:
    """Fixed-size file used as the durable medium.

    The file is created erased if missing and grown (erased) if shorter
    than ``size``.
    """

    def __init__(
        self, path: str | os.PathLike[str], size: int = SLOT_STRIDE * len(SLOTS)
    ) -> None:
        self.path = Path(path)
        self.size = size
        existing = self.path.read_bytes() if self.path.exists() else b""
        if len(existing) < size:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            padding = bytes([ERASED_BYTE]) * (size - len(existing))
            self.path.write_bytes(existing + padding)

    def read_bytes(self, address: int, length: int) -> bytes:
        _check_range(address, length, self.size)
        with self.path.open("rb") as fh:
            fh.seek(address)
            return fh.read(length)

    def write_bytes(self, address: int, data: bytes) -> None:
        _check_range(address, len(data), self.size)
        with self.path.open("r+b") as fh:
            fh.seek(address)
            fh.write(data)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def slot_index(slot: str | Key) -> int:
    name = slot.value if isinstance(slot, Key) else slot
    try:
        return SLOTS.index(name)
    except ValueError:
        raise UnknownSlotError(name) from None


def slot_address(slot: str | Key) -> int:
    return BASE_ADDRESS + slot_index(slot) * SLOT_STRIDE


def encode_value(value: str) -> bytes:
    return struct.pack(SLOT_FORMAT, float(value))


def decode_value(data: bytes) -> float:
    (value,) = struct.unpack(SLOT_FORMAT, data)
    return value


# ---------------------------------------------------------------------------
# The bank
# ---------------------------------------------------------------------------

class MemoryBank:
    """Four independently overwritten slots."""

    def __init__(
        self,
        storage: ByteStorage | None = None,
        formatter: ResultFormatter | None = None,
    ) -> None:
        self._storage = storage
        self._formatter = formatter or ResultFormatter()
        self._slots: dict[str, str] = {}

    @property
    def persistent(self) -> bool:
        return self._storage is not None

    def store(self, slot: str | Key, value: str) -> None:
        index = slot_index(slot)
        name = SLOTS[index]
        self._slots[name] = value
        if self._storage is not None:
            self._storage.write_bytes(slot_address(name), encode_value(value))
            logger.info("stored %s=%s (address %d)", name, value, slot_address(name))

    def recall(self, slot: str | Key) -> str:
        name = SLOTS[slot_index(slot)]
        return self._slots.get(name, "0")

    def load(self) -> None:
        """Populate the slots from storage.  A no-op without storage."""
        if self._storage is None:
            return
        for name in SLOTS:
            raw = decode_value(self._storage.read_bytes(slot_address(name), SLOT_STRIDE))
            self._slots[name] = self._render(name, raw)

    def snapshot(self) -> dict[str, str]:
        return {name: self.recall(name) for name in SLOTS}

    def _render(self, name: str, raw: float) -> str:
        if not math.isfinite(raw):
            return "0"
        try:
            return self._formatter.format(raw)
        except ResultOverflow:
            logger.warning("slot %s holds unrepresentable %r, loading 0", name, raw)
            return "0"
