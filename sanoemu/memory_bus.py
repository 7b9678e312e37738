"""A 24-bit address space that routes reads and writes to mapped devices."""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass

ADDRESS_MASK = 0xFFFFFF
OPEN_BUS = 0xFF

_log = logging.getLogger(__name__)


class MemoryDevice(ABC):
    """A device that answers byte reads and writes at absolute addresses."""

    @abstractmethod
    def read(self, address: int) -> int:
        ...

    @abstractmethod
    def write(self, address: int, value: int) -> None:
        ...


@dataclass(frozen=True)
class MappedRegion:
    base_address: int
    end_address: int
    device: MemoryDevice

    def contains(self, address: int) -> bool:
        return self.base_address <= address <= self.end_address


class MemoryBus:
    """Maps address ranges to devices; unmapped reads return open bus."""

    def __init__(self) -> None:
        self._regions: list[MappedRegion] = []

    @property
    def regions(self) -> tuple[MappedRegion, ...]:
        return tuple(self._regions)

    def read(self, address: int) -> int:
        address &= ADDRESS_MASK
        device = self.find_device(address)
        if device is None:
            return OPEN_BUS
        return device.read(address)

    def write(self, address: int, value: int) -> None:
        address &= ADDRESS_MASK
        device = self.find_device(address)
        if device is not None:
            device.write(address, value & 0xFF)

    def read16(self, address: int) -> int:
        low = self.read(address)
        high = self.read(address + 1)
        return (high << 8) | low

    def write16(self, address: int, value: int) -> None:
        self.write(address, value & 0xFF)
        self.write(address + 1, (value >> 8) & 0xFF)

    def map_device(self, device: MemoryDevice | None, base_address: int, size: int) -> None:
        if device is None or size == 0:
            return
        region = MappedRegion(
            base_address & ADDRESS_MASK,
            (base_address + size - 1) & ADDRESS_MASK,
            device,
        )
        for existing in self._regions:
            if not (region.end_address < existing.base_address
                    or region.base_address > existing.end_address):
                _log.warning("Memory region overlap detected at $%06x", base_address)
        self._regions.append(region)
        self._regions.sort(key=lambda r: r.base_address)

    def unmap_all(self) -> None:
        self._regions.clear()

    def find_device(self, address: int) -> MemoryDevice | None:
        for region in self._regions:
            if region.contains(address):
                return region.device
            if address < region.base_address:
                break
        return None

    def dump_memory(self, start: int, length: int) -> None:
        """Print a hex dump of ``length`` bytes starting at ``start``."""
        out = sys.stdout
        out.write(f"Memory dump from ${start:06x}:\n")
        for i in range(length):
            if i % 16 == 0:
                out.write(f"{start + i:06x}: ")
            out.write(f"{self.read(start + i):02x} ")
            if (i + 1) % 16 == 0 or i == length - 1:
                out.write("\n")
        out.flush()