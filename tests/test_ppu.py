from nesemu.bus import Bus, PpuBus, PpuRegister
from nesemu.ppu import PPU, TICKS_PER_SCANLINE, VBLANK_SCANLINES


def _ppu():
    return PPU(Bus(), PpuBus())


def test_clock_counts_ticks():
    ppu = _ppu()
    for _ in range(5):
        ppu.clock()
    assert ppu.ticks == 5


def test_clock_wraps_at_16_bits():
    ppu = _ppu()
    ppu.ticks = 0xFFFF
    ppu.clock()
    assert ppu.ticks == 0


def test_vblank_toggle():
    ppu = _ppu()
    assert not ppu.in_vblank()
    ppu.enable_vblank()
    assert ppu.in_vblank()
    ppu.disable_vblank()
    assert not ppu.in_vblank()


def test_coordinates():
    ppu = _ppu()
    ppu.ticks = TICKS_PER_SCANLINE * (VBLANK_SCANLINES + 3) + 7
    assert ppu.x_coord() == 3
    assert ppu.y_coord() == 7


def test_y_coord_stays_within_scanline():
    ppu = _ppu()
    for ticks in range(0, 2000, 37):
        ppu.ticks = ticks
        assert 0 <= ppu.y_coord() < TICKS_PER_SCANLINE


def test_step_address_by_one():
    ppu = _ppu()
    ppu.address = 0x2000
    ppu.step_address()
    assert ppu.address == 0x2001


def test_step_address_by_row_in_increment_mode():
    ppu = _ppu()
    ppu.registers[PpuRegister.PPUCTRL] = 0x04
    ppu.address = 0x2000
    ppu.step_address()
    assert ppu.address == 0x2000 + 32


def test_step_address_wraps():
    ppu = _ppu()
    ppu.address = 0xFFFF
    ppu.step_address()
    assert ppu.address == 0