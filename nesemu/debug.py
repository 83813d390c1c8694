"""Text views of the processor's registers, current instruction and memory."""

from __future__ import annotations

from .cpu import CPU, Flag
from .utility import hex8, hex16

_FLAG_ORDER = (Flag.N, Flag.V, Flag.U, Flag.B, Flag.D, Flag.I, Flag.Z, Flag.C)


class CpuDebug:
    """Formats a CPU's state for display."""

    def __init__(self, cpu: CPU) -> None:
        self.cpu = cpu

    def registers_text(self) -> str:
        """Registers and status flags."""
        regs = self.cpu.registers
        flags = " ".join(str(self.cpu.get_flag(flag)) for flag in _FLAG_ORDER)
        return (
            "Registers--------------\n"
            f"A: {hex8(regs.a)}\n"
            f"X: {hex8(regs.x)}\n"
            f"Y: {hex8(regs.y)}\n"
            f"SP: {hex8(regs.sp)}\n"
            f"PC: {hex16(regs.pc)}\n"
            "FLAGS--------------\n"
            "N V U B D I Z C\n"
            f"{flags}\n"
        )

    def current_instruction_text(self) -> str:
        """The last decoded instruction and its operand addresses."""
        cpu = self.cpu
        instruction = cpu.opcodes_table[cpu.current_opcode]
        return (
            "INSTRUCTION--------------\n"
            f"Op: {instruction.mnemonic}  {hex8(instruction.opcode)}\n"
            f"Data: {hex8(cpu.data)} count:{cpu.instruction_count}\n"
            f"Address absolute: {hex16(cpu.abs_addr)}\n"
            f"Address relative: {hex16(cpu.rel_addr)}\n"
        )

    def zeropage_text(self) -> str:
        """A hex dump of page zero."""
        return self.memory_text(0x00)

    def memory_text(self, page: int) -> str:
        """A hex dump of the 256-byte memory page ``page``."""
        base = (page & 0xFF) << 8
        bus = self.cpu.bus
        lines = []
        for row in range(base, base + 0x100, 0x10):
            values = "".join(hex8(bus.read(row | col)) + "   " for col in range(0x10))
            lines.append(f"{hex16(row)}:     {values}\n")
        return "".join(lines) + "\n"