import io
import sys

from nesemu.bus import Bus
from nesemu.console import Console, main
from nesemu.cpu import CPU
from nesemu.debug import CpuDebug
from nesemu.nesparser import NES_MAGIC, PRG_ROM_UNIT


def _console(program=bytes([0xA9, 0x42]), keys=""):
    bus = Bus()
    bus.init_rom(program, 0xC000)
    cpu = CPU(bus, debug=True)
    cpu.power_on()
    return Console(CpuDebug(cpu), io.StringIO(keys), io.StringIO())


def test_page_keys():
    console = _console()
    console.process("+")
    assert console.memory_page == 0x81
    console.process("s")
    assert console.memory_page == 0x01
    console.process("-")
    console.process("-")
    assert console.memory_page == 0xFF


def test_fast_forward_key():
    console = _console()
    console.process("n")
    console.process("N")
    assert console.instruction_count == 200


def test_quit_keys():
    console = _console()
    console.process("q")
    assert not console.is_open
    other = _console()
    other.process("\x1b")
    assert not other.is_open


def test_clock_key_steps_cpu():
    console = _console()
    cpu = console.debug.cpu
    cpu.ticks = 0
    console.process("c")
    assert cpu.registers.a == 0x42


def test_render_contains_all_panels():
    console = _console()
    screen = console.render()
    assert "0x0000:" in screen
    assert "0x8000:" in screen
    assert "PC: 0xC000" in screen
    assert "INSTRUCTION--------------" in screen


def test_loop_executes_and_quits():
    console = _console(keys="c\nq\n")
    console.loop()
    assert console.debug.cpu.registers.a == 0x42
    assert not console.is_open
    assert "PC: 0xC002" in console.stdout.getvalue()


def test_loop_stops_at_end_of_input():
    console = _console(keys="")
    console.loop()
    assert not console.is_open
    assert console.debug.cpu.registers.pc == 0xC000


def test_main_runs_rom(tmp_path, monkeypatch, capsys):
    prg = bytes([0xA9, 0x42]) + bytes(PRG_ROM_UNIT - 2)
    rom_path = tmp_path / "game.nes"
    rom_path.write_bytes(NES_MAGIC + bytes([1, 0, 0, 0, 0, 0, 0]) + bytes(5) + prg)
    log_path = tmp_path / "emu.log"
    monkeypatch.setattr(sys, "stdin", io.StringIO("c\nq\n"))
    assert main([str(rom_path), "--log", str(log_path)]) == 0
    assert "LDA" in log_path.read_text()
    assert "A: 0x42" in capsys.readouterr().out


def test_main_missing_rom(tmp_path, capsys):
    assert main([str(tmp_path / "missing.nes"), "--no-log"]) == 1
    assert "error" in capsys.readouterr().err