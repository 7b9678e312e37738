"""Plain byte-addressable RAM mapped at a base address."""

from __future__ import annotations

import logging
import os
from pathlib import Path

_log = logging.getLogger(__name__)

OUT_OF_BOUNDS_VALUE = 0xFF


class RAM:
    """A block of RAM that answers flat 24-bit addresses."""

    def __init__(self, base_address: int, size: int, name: str = "RAM") -> None:
        self.base_address = base_address
        self.size = size
        self.name = name
        self.data = bytearray(size)

    def _offset(self, address: int) -> int:
        return (address - self.base_address) & 0xFFFFFFFF

    def read_byte(self, address: int) -> int:
        offset = self._offset(address)
        if offset < self.size:
            return self.data[offset]
        _log.error("RAM %s: Read out of bounds at offset $%x", self.name, offset)
        return OUT_OF_BOUNDS_VALUE

    def store_byte(self, address: int, value: int) -> None:
        offset = self._offset(address)
        if offset < self.size:
            self.data[offset] = value & 0xFF
        else:
            _log.error("RAM %s: Write out of bounds at offset $%x", self.name, offset)

    def decode_address(self, address: int) -> int | None:
        """Return the address if this RAM answers it, otherwise None."""
        if self.base_address <= address < self.base_address + self.size:
            return address
        return None

    def load_from_file(self, filename: str | os.PathLike, offset: int = 0) -> int:
        """Copy a file's bytes into RAM at ``offset``; return the byte count."""
        content = Path(filename).read_bytes()
        if offset + len(content) > self.size:
            raise ValueError(
                f"RAM {self.name}: File too large for RAM (file: {len(content)} bytes, "
                f"available: {self.size - offset} bytes)"
            )
        self.data[offset:offset + len(content)] = content
        _log.info("RAM %s: Loaded %d bytes from %s at offset $%x",
                  self.name, len(content), filename, offset)
        return len(content)

    def save_to_file(self, filename: str | os.PathLike) -> None:
        Path(filename).write_bytes(bytes(self.data))
        _log.info("RAM %s: Saved %d bytes to %s", self.name, self.size, filename)

    def clear(self, value: int = 0x00) -> None:
        self.data[:] = bytes([value & 0xFF]) * self.size