from nesemu.bus import Bus
from nesemu.cpu import CPU
from nesemu.debug import CpuDebug


def _debug(program=b""):
    bus = Bus()
    if program:
        bus.init_rom(program, 0xC000)
    cpu = CPU(bus, debug=True)
    cpu.power_on()
    return CpuDebug(cpu)


def test_registers_text_after_power_on():
    lines = _debug().registers_text().splitlines()
    assert lines[0] == "Registers--------------"
    assert "A: 0x00" in lines
    assert "PC: 0xC000" in lines
    assert lines[-2] == "N V U B D I Z C"
    assert lines[-1] == "0 0 1 0 0 1 0 0"


def test_registers_text_tracks_accumulator():
    debug = _debug()
    debug.cpu.registers.a = 0x3C
    assert "A: 0x3C" in debug.registers_text().splitlines()


def test_zeropage_text_layout():
    debug = _debug()
    debug.cpu.bus.write(0x0012, 0xAB)
    lines = debug.zeropage_text().splitlines()
    rows = [line for line in lines if line]
    assert len(rows) == 16
    tokens = rows[1].split()
    assert tokens[0] == "0x0010:"
    assert tokens[3] == "0xAB"
    assert len(tokens) == 17


def test_zeropage_matches_page_zero_dump():
    debug = _debug()
    assert debug.zeropage_text() == debug.memory_text(0)


def test_memory_text_page():
    debug = _debug(bytes([0xA9, 0x42]))
    rows = [line for line in debug.memory_text(0xC0).splitlines() if line]
    assert rows[0].split()[:3] == ["0xC000:", "0xA9", "0x42"]
    assert rows[-1].split()[0] == "0xC0F0:"


def test_current_instruction_text_after_execution():
    debug = _debug(bytes([0xA9, 0x42]))
    cpu = debug.cpu
    cpu.ticks = 0
    cpu.clock()
    text = debug.current_instruction_text()
    assert "Op: LDA  0xA9" in text
    assert "Data: 0x42 count:1" in text
    assert "Address absolute: 0xC001" in text