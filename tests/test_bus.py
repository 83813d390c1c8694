import pytest

from nesemu.bus import (
    PPU_REG_MIRROR_PADDING,
    RAM_MIRROR_PADDING,
    RES_VECTOR_HIGH,
    RES_VECTOR_LOW,
    STACK_BEGIN,
    Bus,
    PpuBus,
    PpuRegister,
)


def test_default_reset_vector_points_to_prg_rom():
    bus = Bus()
    assert bus.reset_vector() == 0x8000
    assert bus.read(RES_VECTOR_LOW) == 0x00
    assert bus.read(RES_VECTOR_HIGH) == 0x80


def test_reset_vector_follows_writes():
    bus = Bus()
    bus.write(RES_VECTOR_LOW, 0x34)
    bus.write(RES_VECTOR_HIGH, 0xC0)
    assert bus.reset_vector() == (0xC0 << 8) | 0x34


def test_read_back_written_value():
    bus = Bus()
    bus.write(0x6000, 0x42)
    assert bus.read(0x6000) == 0x42


def test_ram_is_mirrored_four_times():
    bus = Bus()
    bus.write(0x0010, 0x5A)
    for i in range(4):
        assert bus.read(0x0010 + i * RAM_MIRROR_PADDING) == 0x5A


def test_write_to_ram_mirror_does_not_propagate_back():
    bus = Bus()
    bus.write(0x0900, 0x77)
    assert bus.read(0x0900) == 0x77
    assert bus.read(0x0100) == 0


def test_ppu_registers_are_mirrored():
    bus = Bus()
    bus.write(PpuRegister.PPUSTATUS, 0x99)
    assert bus.read(PpuRegister.PPUSTATUS + PPU_REG_MIRROR_PADDING) == 0x99
    assert bus.read(0x3FFA) == 0x99


def test_ppu_register_mirror_stops_before_end():
    bus = Bus()
    bus.write(PpuRegister.PPUDATA, 0x11)
    assert bus.read(0x3FF7) == 0x11
    assert bus.read(0x3FFF) == 0


def test_stack_round_trip_and_mirror():
    bus = Bus()
    bus.write_stack(0xFD, 0xAB)
    assert bus.read_stack(0xFD) == 0xAB
    assert bus.read(STACK_BEGIN | 0xFD) == 0xAB
    assert bus.read((STACK_BEGIN | 0xFD) + RAM_MIRROR_PADDING) == 0xAB


def test_init_rom_default_address():
    bus = Bus()
    bus.init_rom([1, 2, 3])
    assert [bus.read(0x8000 + i) for i in range(3)] == [1, 2, 3]


def test_init_rom_at_given_address():
    bus = Bus()
    rom = bytes(range(16))
    bus.init_rom(rom, 0xC000)
    assert bytes(bus.read(0xC000 + i) for i in range(16)) == rom


def test_init_rom_overflow_raises():
    bus = Bus()
    with pytest.raises(ValueError):
        bus.init_rom(bytes(0x10), 0xFFF8)


def test_value_is_truncated_to_byte():
    bus = Bus()
    bus.write(0x0300, 0x1FF)
    assert bus.read(0x0300) == 0xFF


def test_ppu_bus_round_trip():
    ppu = PpuBus()
    ppu.write(0x0123, 0x3C)
    assert ppu.read(0x0123) == 0x3C


def test_ppu_bus_nametable_mirror():
    ppu = PpuBus()
    ppu.write(0x2005, 0x21)
    assert ppu.read(0x3005) == 0x21
    ppu.write(0x2405, 0x22)
    assert ppu.read(0x3405) == 0x22


def test_ppu_bus_palette_mirror():
    ppu = PpuBus()
    ppu.write(0x3F01, 0x0F)
    assert ppu.read(0x3F21) == 0x0F