"""Interactive text console for stepping the processor and inspecting memory."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TextIO

from .bus import PRG_ROM_BANK2_BEGIN, STACK_BEGIN, Bus
from .cpu import CPU
from .debug import CpuDebug
from .nesparser import load_nes

DEFAULT_MEMORY_PAGE = 0x80
FAST_FORWARD_CLOCKS = 100
_QUIT_KEYS = frozenset({"q", "\x1b"})
HELP = "keys: c=clock  +/-=page  s=stack page  n=+100 clocks  q=quit"


class Console:
    """Reads key presses from a text stream and shows the CPU state."""

    def __init__(
        self,
        debug: CpuDebug,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.debug = debug
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.memory_page = DEFAULT_MEMORY_PAGE
        self.instruction_count = 0
        self.is_open = True

    def process(self, key: str) -> None:
        """Apply one key press."""
        key = key.lower()
        if key == "c":
            self.debug.cpu.clock()
        elif key == "+":
            self.memory_page = (self.memory_page + 1) & 0xFF
        elif key == "-":
            self.memory_page = (self.memory_page - 1) & 0xFF
        elif key == "s":
            self.memory_page = STACK_BEGIN >> 8
        elif key == "n":
            self.instruction_count += FAST_FORWARD_CLOCKS
        elif key in _QUIT_KEYS:
            self.is_open = False

    def render(self) -> str:
        """Return the full screen: page zero, selected page, registers, instruction."""
        debug = self.debug
        return "\n".join(
            (
                debug.zeropage_text(),
                debug.memory_text(self.memory_page),
                debug.registers_text(),
                debug.current_instruction_text(),
            )
        )

    def loop(self) -> None:
        """Run until a quit key is pressed or input ends."""
        cpu = self.debug.cpu
        self.instruction_count = 0
        while self.is_open:
            for _ in range(self.instruction_count):
                cpu.clock()
            while cpu.ticks > 0:
                cpu.clock()
            self.instruction_count = 0
            self.stdout.write(self.render())
            self.stdout.write(HELP + "\n> ")
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                self.is_open = False
                break
            for key in line.strip():
                self.process(key)
                if not self.is_open:
                    break


def main(argv: list[str] | None = None) -> int:
    """Load a cartridge and start the interactive console."""
    parser = argparse.ArgumentParser(prog="nesemu", description=__doc__)
    parser.add_argument("rom", help="iNES cartridge image")
    parser.add_argument("--log", default="emu.log", help="instruction log file")
    parser.add_argument("--no-log", action="store_true", help="do not log instructions")
    parser.add_argument(
        "--debug",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="start at 0xC000 instead of the reset vector",
    )
    args = parser.parse_args(argv)

    log_path = None
    if not args.no_log:
        log_path = Path(args.log)
        log_path.write_text("")

    try:
        rom = load_nes(args.rom).rom_data
        bus = Bus()
        bus.init_rom(rom, PRG_ROM_BANK2_BEGIN)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    cpu = CPU(bus, debug=args.debug, log_path=log_path)
    cpu.power_on()
    try:
        Console(CpuDebug(cpu)).loop()
    finally:
        cpu.power_off()
    return 0