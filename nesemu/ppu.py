"""Picture processing unit state: timing counters, VRAM address and registers."""

from __future__ import annotations

from .bus import Bus, PpuBus, PpuRegister

TICKS_PER_SCANLINE = 341
VBLANK_SCANLINES = 21
INCREMENT_MODE = 0x04  # PPUCTRL bit I: add 32 instead of 1 per PPUDATA access


class PPU:
    """The PPU's counters and registers, attached to the CPU and PPU buses."""

    def __init__(self, cpu_bus: Bus, ppu_bus: PpuBus) -> None:
        self.cpu_bus = cpu_bus
        self.ppu_bus = ppu_bus
        self.registers: dict[PpuRegister, int] = dict.fromkeys(PpuRegister, 0)
        self.address = 0
        self.vertical_blank = False
        self.ticks = 0
        self.scanline = 0
        self.offset_pixel = 0

    def clock(self) -> None:
        """Advance one PPU cycle."""
        self.ticks = (self.ticks + 1) & 0xFFFF

    def in_vblank(self) -> bool:
        """True during the vertical blanking interval."""
        return self.vertical_blank

    def enable_vblank(self) -> None:
        """Enter the vertical blanking interval."""
        self.vertical_blank = True

    def disable_vblank(self) -> None:
        """Leave the vertical blanking interval."""
        self.vertical_blank = False

    def x_coord(self) -> int:
        """Current scanline, counted from the end of vertical blanking."""
        return (self.ticks // TICKS_PER_SCANLINE - VBLANK_SCANLINES) & 0xFFFF

    def y_coord(self) -> int:
        """Current dot within the scanline."""
        return self.ticks % TICKS_PER_SCANLINE

    def step_address(self) -> None:
        """Advance the VRAM address after a PPUDATA access."""
        step = 32 if self.registers[PpuRegister.PPUCTRL] & INCREMENT_MODE else 1
        self.address = (self.address + step) & 0xFFFF