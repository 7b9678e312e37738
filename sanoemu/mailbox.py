"""Dual-port mailbox memory used for messages between CPUs."""

from __future__ import annotations

import logging
from typing import Callable

_log = logging.getLogger(__name__)

OUT_OF_BOUNDS_VALUE = 0xFF


class Mailbox:
    """Shared memory that flags new data and notifies a listener on writes."""

    def __init__(self, base_address: int, size: int, name: str = "Mailbox") -> None:
        self.base_address = base_address
        self.size = size
        self.name = name
        self.data = bytearray(size)
        self.busy = False
        self.write_callback: Callable[[], None] | None = None
        self._new_data = False

    @property
    def has_new_data(self) -> bool:
        return self._new_data

    def clear_new_data_flag(self) -> None:
        self._new_data = False

    def set_new_data_flag(self) -> None:
        self._new_data = True

    def _offset(self, address: int) -> int:
        return (address - self.base_address) & 0xFFFFFF

    def read_byte(self, address: int) -> int:
        """Read a byte; reading consumes the new-data flag."""
        offset = self._offset(address)
        if offset < self.size:
            self._new_data = False
            return self.data[offset]
        _log.error("Mailbox %s: Read out of bounds at offset $%x", self.name, offset)
        return OUT_OF_BOUNDS_VALUE

    def store_byte(self, address: int, value: int) -> None:
        """Write a byte, raise the new-data flag and notify the listener."""
        offset = self._offset(address)
        _log.debug("Mailbox %s: store $%02x at $%06x", self.name, value & 0xFF, address)
        if offset < self.size:
            self.data[offset] = value & 0xFF
            self._new_data = True
            if self.write_callback is not None:
                self.write_callback()
        else:
            _log.error("Mailbox %s: Write out of bounds at offset $%x", self.name, offset)

    def decode_address(self, address: int) -> int | None:
        """Return the address if this mailbox answers it, otherwise None."""
        if self.base_address <= address < self.base_address + self.size:
            return address
        return None

    def clear(self) -> None:
        self.data[:] = bytes(self.size)
        self._new_data = False
        self.busy = False