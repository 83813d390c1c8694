# nesemu

An emulator for the 6502 CPU as found in the NES. It comes with a text-mode
debugger for stepping through the program of an iNES (`.nes`) ROM.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running the debugger

```
nesemu path/to/game.nes
```

The command loads the ROM's PRG data at `0xC000` and powers on the CPU. It
then prints the zero page, a chosen memory page (`0x80` at start), the
registers and flags, and the instruction that ran last, and waits for a line
of input. Each character of the line is a command:

| Key         | Action                                          |
|-------------|-------------------------------------------------|
| `c`         | run one CPU clock tick                          |
| `n`         | run 100 more clock ticks before the next screen |
| `+`         | show the next memory page                       |
| `-`         | show the previous memory page                   |
| `s`         | show the stack page (`0x01`)                    |
| `q` / Esc   | quit                                            |

Keys are not case-sensitive. Before each screen the debugger lets the current
instruction finish, so the CPU always stops between instructions. The program
also ends when input runs out.

Options:

- `--debug` / `--no-debug`: with `--debug`, which is the default, the program
  counter starts at `0xC000`. With `--no-debug` it starts at the address in the
  reset vector.
- `--log FILE`: the trace log file. The default is `emu.log`. The file is
  emptied at start. Every executed instruction then adds a line to it: the
  instruction number, mnemonic and opcode, and the A, X, Y, P and SP registers
  after the instruction ran.
- `--no-log`: do not write a trace log.

The command exits with status 1 and an error message if the ROM cannot be read
or does not fit in memory.

## Using it as a library

```python
from nesemu.bus import Bus
from nesemu.cpu import CPU, Flag
from nesemu.nesparser import load_nes

rom = load_nes("game.nes")
bus = Bus()
bus.init_rom(rom.rom_data, 0xC000)

cpu = CPU(bus, debug=True)   # debug=True: PC starts at 0xC000
cpu.power_on()
cpu.clock()                  # finishes the power-on cycle
cpu.clock()                  # fetches and executes the first instruction
print(cpu.registers.pc, cpu.get_flag(Flag.Z))
```

A `CPU` made with `debug=False`, the default, starts at the reset vector.
A fresh `Bus` has `0x8000` in the reset vector. Pass `log_path=...` to write
the trace log. `cpu.power_off()` closes the log. `irq()`, `nmi()` and `reset()`
service the interrupts. `update_flag()` and `get_flag()` work on the status
register, and `read()` and `write()` go through the bus.

The modules:

- `nesemu.cpu`: `CPU`, `Registers` (`pc`, `sp`, `a`, `x`, `y`, `p`) and the
  `Flag` status bits.
- `nesemu.opcodes`: the opcode matrix. `instruction_for(opcode)` returns an
  `Instruction` with its mnemonic, `AddressingMode`, byte size, cycles and
  extra cycles. Undocumented opcodes appear as `???` and do nothing.
- `nesemu.bus`: `Bus`, the CPU's 64 KiB memory. It mirrors RAM `0x0000-0x07FF`
  up to `0x1FFF` and the PPU registers `0x2000-0x2007` up to `0x3FFF`. The
  module also has `PpuBus`, video memory with nametable, palette and
  `0x4000` wrap-around mirroring.
- `nesemu.nesparser`: `parse_nes` and `load_nes` return a `NesRom` (a
  `NesHeader`, the trainer and the PRG ROM). The module also has
  `parse_assembly` and `load_assembly`, which read upper-case hex text, and
  `load_binary`, which reads raw bytes and skips whitespace bytes.
- `nesemu.ppu`: `PPU`, a tick counter with vertical-blank state, scanline and
  dot coordinates, and VRAM address stepping.
- `nesemu.debug`: `CpuDebug`, which formats the registers, the current
  instruction and memory pages as text.
- `nesemu.console`: `Console`, the interactive debugger, and `main`, which
  runs the `nesemu` command.
- `nesemu.utility`: the hex formatting helpers `format_u8`, `format_u16`,
  `hex8` and `hex16`.

## What it does not do

nesemu runs the CPU only:

- There is no picture output. The `PPU` class counts ticks and does not draw
  anything.
- There is no sound and no controller input.
- There is no mapper support. Only the PRG ROM is loaded, at a fixed address.
- Decimal mode is not emulated.
- Undocumented opcodes are treated as no-ops.