"""CPU and PPU memory buses with the console's address mirroring."""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum

BUS_SIZE = 64 * 1024

# Interrupt vectors
IRQ_VECTOR_LOW = 0xFFFE
IRQ_VECTOR_HIGH = 0xFFFF
RES_VECTOR_LOW = 0xFFFC
RES_VECTOR_HIGH = 0xFFFD
NMI_VECTOR_LOW = 0xFFFA
NMI_VECTOR_HIGH = 0xFFFB

# Descending stack page
STACK_BEGIN = 0x0100
STACK_END = 0x01FF

# Program ROM
PRG_ROM_BEGIN = 0x8000
PRG_ROM_BANK2_BEGIN = 0xC000

# Internal RAM 0x0000-0x07FF is mirrored every 0x0800 bytes up to 0x1FFF
RAM_END = 0x07FF
RAM_MIRROR_PADDING = 0x0800
RAM_MIRROR_COUNT = 4

# PPU registers 0x2000-0x2007 are mirrored every 8 bytes up to 0x3FFF
PPU_REG_BEGIN = 0x2000
PPU_REG_END = 0x2007
PPU_REG_MIRROR_END = 0x3FFF
PPU_REG_MIRROR_PADDING = 0x08

# PPU address space
NAMETABLE_BEGIN = 0x2000
NAMETABLE_MIRRORED_END = 0x2EFF
NAMETABLE_MIRROR_BEGIN = 0x3000
PALETTE_BEGIN = 0x3F00
PALETTE_END = 0x3F1F
PALETTE_MIRROR_BEGIN = 0x3F20
PPU_SPACE_END = 0x3FFF
PPU_WRAP_BEGIN = 0x4000


class PpuRegister(IntEnum):
    """CPU-visible addresses of the PPU registers."""

    PPUCTRL = 0x2000
    PPUMASK = 0x2001
    PPUSTATUS = 0x2002
    OAMADDR = 0x2003
    OAMDATA = 0x2004
    PPUSCROLL = 0x2005
    PPUADDR = 0x2006
    PPUDATA = 0x2007
    OAMDMA = 0x4014


class Bus:
    """The 64 KiB CPU address space."""

    def __init__(self) -> None:
        self._mem = bytearray(BUS_SIZE)
        self.write(RES_VECTOR_LOW, 0x00)
        self.write(RES_VECTOR_HIGH, 0x80)

    def read(self, address: int) -> int:
        """Return the byte stored at ``address``."""
        return self._mem[address & 0xFFFF]

    def write(self, address: int, value: int) -> None:
        """Store ``value`` at ``address`` and at every mirror of it."""
        address &= 0xFFFF
        value &= 0xFF
        self._mem[address] = value
        self._mirror(address, value)

    def write_stack(self, sp: int, value: int) -> None:
        """Store ``value`` in the stack page at offset ``sp``."""
        self.write(STACK_BEGIN | (sp & 0xFF), value)

    def read_stack(self, sp: int) -> int:
        """Return the byte in the stack page at offset ``sp``."""
        return self._mem[STACK_BEGIN | (sp & 0xFF)]

    def init_rom(self, buffer: Iterable[int], address: int = PRG_ROM_BEGIN) -> None:
        """Copy ``buffer`` into memory starting at ``address`` without mirroring."""
        data = bytes(buffer)
        if address < 0 or address + len(data) > BUS_SIZE:
            raise ValueError(
                f"ROM of {len(data)} bytes does not fit at address {address:#06x}"
            )
        self._mem[address : address + len(data)] = data

    def reset_vector(self) -> int:
        """Return the address held in the reset vector."""
        low = self.read(RES_VECTOR_LOW)
        high = self.read(RES_VECTOR_HIGH)
        return (high << 8) | low

    @staticmethod
    def _is_mirrored(address: int) -> bool:
        return address <= RAM_END or PPU_REG_BEGIN <= address <= PPU_REG_END

    def _mirror(self, address: int, value: int) -> None:
        if address <= RAM_END:
            for i in range(RAM_MIRROR_COUNT):
                self._mem[address + i * RAM_MIRROR_PADDING] = value
        if PPU_REG_BEGIN <= address <= PPU_REG_END:
            for target in range(address, PPU_REG_MIRROR_END, PPU_REG_MIRROR_PADDING):
                self._mem[target] = value


class PpuBus:
    """The PPU's own address space (VRAM, pattern tables and palettes)."""

    def __init__(self) -> None:
        self._mem = bytearray(BUS_SIZE)

    def read(self, address: int) -> int:
        """Return the byte at ``address``, or 0 beyond the 16 KiB PPU space."""
        address &= 0xFFFF
        if address <= PPU_SPACE_END:
            return self._mem[address]
        return 0

    def write(self, address: int, value: int) -> None:
        """Store ``value`` at ``address``, its wrap-around copy and its mirrors."""
        address &= 0xFFFF
        value &= 0xFF
        self._mem[address] = value
        self._mem[address | PPU_WRAP_BEGIN] = value
        self._mirror(address, value)

    @staticmethod
    def _is_mirrored(address: int) -> bool:
        return (
            NAMETABLE_BEGIN <= address <= NAMETABLE_MIRRORED_END
            or PALETTE_BEGIN <= address <= PALETTE_END
        )

    def _mirror(self, address: int, value: int) -> None:
        if NAMETABLE_BEGIN <= address <= NAMETABLE_MIRRORED_END:
            self._mem[address | NAMETABLE_MIRROR_BEGIN] = value
        if PALETTE_BEGIN <= address <= PALETTE_END:
            self._mem[address | PALETTE_MIRROR_BEGIN] = value