"""The 6502 processor core: registers, addressing modes, instructions and interrupts."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import IntFlag
from typing import IO, Callable

from .bus import (
    IRQ_VECTOR_HIGH,
    IRQ_VECTOR_LOW,
    NMI_VECTOR_HIGH,
    NMI_VECTOR_LOW,
    PRG_ROM_BANK2_BEGIN,
    RES_VECTOR_HIGH,
    RES_VECTOR_LOW,
    STACK_END,
    Bus,
)
from .opcodes import OPCODE_TABLE, AddressingMode, Instruction
from .utility import hex8

PROCESSOR_FLAG_POWER_ON = 0x24
STACK_POINTER_POWER_ON = STACK_END & 0xFD


class Flag(IntFlag):
    """Bits of the processor status register."""

    C = 1 << 0  # carry
    Z = 1 << 1  # zero
    I = 1 << 2  # interrupt disable  # noqa: E741
    D = 1 << 3  # decimal mode
    B = 1 << 4  # break
    U = 1 << 5  # unused
    V = 1 << 6  # overflow
    N = 1 << 7  # negative


@dataclass
class Registers:
    """The processor's programmer-visible registers."""

    pc: int = 0
    sp: int = 0
    a: int = 0
    x: int = 0
    y: int = 0
    p: int = 0


class CPU:
    """A cycle-counting 6502 core attached to a CPU bus."""

    def __init__(
        self, bus: Bus, debug: bool = False, log_path: str | os.PathLike | None = None
    ) -> None:
        self.bus = bus
        self.debug = debug
        self.log_path = log_path
        self.registers = Registers()
        self.ticks = 1
        self.current_opcode = 0x00
        self.rel_addr = 0x0000
        self.abs_addr = 0x0000
        self.data = 0x00
        self.instruction_count = 0
        self.opcodes_table: tuple[Instruction, ...] = OPCODE_TABLE
        self._log: IO[str] | None = None
        self._modes: dict[AddressingMode, Callable[[], int]] = {
            AddressingMode.ZP: self._zp,
            AddressingMode.ZPX: self._zpx,
            AddressingMode.ZPY: self._zpy,
            AddressingMode.ABS: self._abs,
            AddressingMode.ABSX: self._absx,
            AddressingMode.ABSY: self._absy,
            AddressingMode.IND: self._ind,
            AddressingMode.IMP: self._imp,
            AddressingMode.ACC: self._acc,
            AddressingMode.IMM: self._imm,
            AddressingMode.REL: self._rel,
            AddressingMode.INDX: self._indx,
            AddressingMode.INDY: self._indy,
        }
        self._operations: dict[str, Callable[[], int]] = {
            name: getattr(self, "_op_" + name.lower())
            for name in (
                "ADC AND ASL BCC BCS BEQ BIT BMI BNE BPL BRK BVC BVS CLC CLD CLI "
                "CLV CMP CPX CPY DEC DEX DEY EOR INC INX INY JMP JSR LDA LDX LDY "
                "LSR NOP ORA PHA PHP PLA PLP ROL ROR RTI RTS SBC SEC SED SEI STA "
                "STX STY TAX TAY TSX TXA TXS TYA ILL"
            ).split()
        }

    # ------------------------------------------------------------------ state

    def update_flag(self, flag: Flag, value: object) -> None:
        """Set ``flag`` when ``value`` is truthy, clear it otherwise."""
        if value:
            self.registers.p |= flag
        else:
            self.registers.p &= ~flag & 0xFF

    def get_flag(self, flag: Flag) -> int:
        """Return 1 if ``flag`` is set, else 0."""
        return 1 if self.registers.p & flag else 0

    def read(self, address: int) -> int:
        """Read a byte from the bus."""
        return self.bus.read(address & 0xFFFF)

    def write(self, address: int, value: int) -> None:
        """Write a byte to the bus."""
        self.bus.write(address & 0xFFFF, value & 0xFF)

    def power_on(self) -> None:
        """Put the registers in their power-up state."""
        regs = self.registers
        regs.a = regs.x = regs.y = 0
        regs.p = PROCESSOR_FLAG_POWER_ON
        regs.sp = STACK_POINTER_POWER_ON
        regs.pc = PRG_ROM_BANK2_BEGIN if self.debug else self.bus.reset_vector()

    def soft_reset(self) -> None:
        """Perform a regular reset."""
        self.reset()

    def power_off(self) -> None:
        """Close the instruction log, if one is open."""
        if self._log is not None:
            self._log.close()
            self._log = None

    # ------------------------------------------------------------------ clock

    def clock(self) -> None:
        """Advance one CPU cycle, executing a new instruction when the last one is done."""
        if self.ticks == 0:
            regs = self.registers
            opcode = self.read(regs.pc)
            regs.pc = (regs.pc + 1) & 0xFFFF
            self.current_opcode = opcode
            instruction = self.opcodes_table[opcode]
            addressing_cycles = self._modes[instruction.mode]()
            instruction_cycles = self._operations[instruction.operation]()
            self.ticks += instruction.cycles + (addressing_cycles & instruction_cycles)
            if self.log_path is not None:
                self._write_log(instruction)
            self.instruction_count = (self.instruction_count + 1) & 0xFFFF
        self.ticks -= 1

    def _write_log(self, instruction: Instruction) -> None:
        if self._log is None:
            self._log = open(self.log_path, "a", encoding="ascii")
        regs = self.registers
        self._log.write(
            f"{self.instruction_count + 1}   {instruction.mnemonic}  "
            f"{hex8(instruction.opcode)}   \t\tA:{hex8(regs.a)} ; X:{hex8(regs.x)}"
            f" ; Y:{hex8(regs.y)} ; P:{hex8(regs.p)} ; SP:{hex8(regs.sp)}\n"
        )
        self._log.flush()

    # ------------------------------------------------------------- interrupts

    def _vector(self, low: int, high: int) -> int:
        return (self.bus.read(high) << 8) | self.bus.read(low)

    def _interrupt(self, low: int, high: int) -> None:
        regs = self.registers
        regs.sp = (regs.sp - 1) & 0xFF
        self._push(regs.pc >> 8)
        self._push(regs.pc & 0xFF)
        self.bus.write_stack(regs.sp, regs.p)
        self.update_flag(Flag.I, True)
        regs.pc = self._vector(low, high)

    def irq(self) -> None:
        """Service a maskable interrupt."""
        self._interrupt(IRQ_VECTOR_LOW, IRQ_VECTOR_HIGH)

    def nmi(self) -> None:
        """Service a non-maskable interrupt."""
        self._interrupt(NMI_VECTOR_LOW, NMI_VECTOR_HIGH)

    def reset(self) -> None:
        """Jump to the reset vector with interrupts disabled."""
        value = (self.read(RES_VECTOR_HIGH) << 8) | self.read(RES_VECTOR_LOW)
        self.update_flag(Flag.I, True)
        self.registers.pc = value

    # ---------------------------------------------------------------- helpers

    def _next_byte(self) -> int:
        regs = self.registers
        value = self.read(regs.pc)
        regs.pc = (regs.pc + 1) & 0xFFFF
        return value

    def _fetch(self) -> None:
        if self.opcodes_table[self.current_opcode].mode is not AddressingMode.IMP:
            self.data = self.read(self.abs_addr)

    def _is_accumulator_mode(self) -> bool:
        return self.opcodes_table[self.current_opcode].mode is AddressingMode.ACC

    def _push(self, value: int) -> None:
        regs = self.registers
        self.bus.write_stack(regs.sp, value)
        regs.sp = (regs.sp - 1) & 0xFF

    def _pull(self) -> int:
        regs = self.registers
        regs.sp = (regs.sp + 1) & 0xFF
        return self.bus.read_stack(regs.sp)

    def _set_zn(self, value: int) -> None:
        self.update_flag(Flag.Z, value == 0)
        self.update_flag(Flag.N, value & 0x80)

    # ------------------------------------------------------- addressing modes

    def _zp(self) -> int:
        self.abs_addr = self._next_byte()
        return 0

    def _zpx(self) -> int:
        self.abs_addr = (self._next_byte() + self.registers.x) & 0xFF
        return 0

    def _zpy(self) -> int:
        self.abs_addr = (self._next_byte() + self.registers.y) & 0xFF
        return 0

    def _abs(self) -> int:
        low = self._next_byte()
        high = self._next_byte()
        self.abs_addr = (high << 8) | low
        return 0

    def _indexed_absolute(self, index: int) -> int:
        low = self._next_byte()
        high = self._next_byte()
        self.abs_addr = (((high << 8) | low) + index) & 0xFFFF
        return 1 if (self.abs_addr & 0xFF00) != (high << 8) else 0

    def _absx(self) -> int:
        return self._indexed_absolute(self.registers.x)

    def _absy(self) -> int:
        return self._indexed_absolute(self.registers.y)

    def _ind(self) -> int:
        low = self._next_byte()
        high = self._next_byte()
        pointer = (high << 8) | low
        # The hardware does not carry into the high byte when the pointer ends a page.
        if low == 0xFF:
            self.abs_addr = (self.read(pointer & 0xFF00) << 8) | self.read(pointer)
        else:
            self.abs_addr = (self.read(pointer + 1) << 8) | self.read(pointer)
        return 0

    def _imp(self) -> int:
        self.data = self.registers.a
        return 0

    def _acc(self) -> int:
        self.data = self.registers.a
        return 0

    def _imm(self) -> int:
        regs = self.registers
        self.abs_addr = regs.pc
        regs.pc = (regs.pc + 1) & 0xFFFF
        return 0

    def _rel(self) -> int:
        self.rel_addr = self._next_byte()
        if self.rel_addr & 0x80:
            self.rel_addr |= 0xFF00
        return 0

    def _indx(self) -> int:
        pointer = self._next_byte()
        x = self.registers.x
        low = self.read((pointer + x) & 0xFF)
        high = self.read((pointer + x + 1) & 0xFF)
        self.abs_addr = (high << 8) | low
        return 0

    def _indy(self) -> int:
        pointer = self._next_byte()
        low = self.read(pointer)
        high = self.read((pointer + 1) & 0xFF)
        self.abs_addr = (((high << 8) | low) + self.registers.y) & 0xFFFF
        return 1 if (self.abs_addr & 0xFF00) != (high << 8) else 0

    # ----------------------------------------------------------- instructions

    def _branch(self, condition: object) -> int:
        self._fetch()
        if condition:
            regs = self.registers
            old_addr = self.abs_addr
            self.ticks += 1
            regs.pc = (regs.pc + self.rel_addr) & 0xFFFF
            self.abs_addr = regs.pc
            if (old_addr & 0xFF00) != (regs.pc & 0xFF00):
                self.ticks += 1
        return 0

    def _op_adc(self) -> int:
        self._fetch()
        regs = self.registers
        data_sign = self.data & 0x80
        acc_sign = regs.a & 0x80
        total = self.data + regs.a + self.get_flag(Flag.C)
        regs.a = total & 0xFF
        self.update_flag(Flag.C, total & 0x100)
        self.update_flag(Flag.Z, regs.a == 0)
        self.update_flag(Flag.V, data_sign == acc_sign and (total & 0x80) != acc_sign)
        self.update_flag(Flag.N, regs.a & 0x80)
        return 1

    def _op_and(self) -> int:
        self._fetch()
        self.registers.a &= self.data
        self._set_zn(self.registers.a)
        return 1

    def _op_asl(self) -> int:
        self._fetch()
        regs = self.registers
        if self._is_accumulator_mode():
            self.update_flag(Flag.C, regs.a & 0x80)
            regs.a = (regs.a << 1) & 0xFF
            self._set_zn(regs.a)
        else:
            self.update_flag(Flag.C, self.data & 0x80)
            self.data = (self.data << 1) & 0xFF
            self._set_zn(self.data)
            self.write(self.abs_addr, self.data)
        return 0

    def _op_bcc(self) -> int:
        return self._branch(not self.get_flag(Flag.C))

    def _op_bcs(self) -> int:
        return self._branch(self.get_flag(Flag.C))

    def _op_beq(self) -> int:
        return self._branch(self.get_flag(Flag.Z))

    def _op_bmi(self) -> int:
        return self._branch(self.get_flag(Flag.N))

    def _op_bne(self) -> int:
        return self._branch(not self.get_flag(Flag.Z))

    def _op_bpl(self) -> int:
        return self._branch(not self.get_flag(Flag.N))

    def _op_bvc(self) -> int:
        return self._branch(not self.get_flag(Flag.V))

    def _op_bvs(self) -> int:
        return self._branch(self.get_flag(Flag.V))

    def _op_bit(self) -> int:
        self._fetch()
        self.update_flag(Flag.Z, (self.data & self.registers.a) == 0)
        self.update_flag(Flag.V, self.data & 0x40)
        self.update_flag(Flag.N, self.data & 0x80)
        return 0

    def _op_brk(self) -> int:
        self._fetch()
        regs = self.registers
        regs.sp = (regs.sp - 1) & 0xFF
        self._push(regs.pc & 0xFF)
        self._push(regs.pc >> 8)
        self.bus.write_stack(regs.sp, regs.p)
        regs.pc = self._vector(IRQ_VECTOR_LOW, IRQ_VECTOR_HIGH)
        self.update_flag(Flag.B, True)
        return 0

    def _op_clc(self) -> int:
        self.update_flag(Flag.C, False)
        return 0

    def _op_cld(self) -> int:
        self.update_flag(Flag.D, False)
        return 0

    def _op_cli(self) -> int:
        self.update_flag(Flag.I, False)
        return 0

    def _op_clv(self) -> int:
        self.update_flag(Flag.V, False)
        return 0

    def _compare(self, register: int) -> None:
        self._fetch()
        self.update_flag(Flag.C, register >= self.data)
        self.update_flag(Flag.Z, register == self.data)
        self.update_flag(Flag.N, (register - self.data) & 0x80)

    def _op_cmp(self) -> int:
        self._compare(self.registers.a)
        return 1

    def _op_cpx(self) -> int:
        self._compare(self.registers.x)
        return 0

    def _op_cpy(self) -> int:
        self._compare(self.registers.y)
        return 0

    def _op_dec(self) -> int:
        self._fetch()
        value = (self.data - 1) & 0xFF
        self._set_zn(value)
        self.write(self.abs_addr, value)
        return 0

    def _op_dex(self) -> int:
        self._fetch()
        self.registers.x = (self.registers.x - 1) & 0xFF
        self._set_zn(self.registers.x)
        return 0

    def _op_dey(self) -> int:
        self._fetch()
        self.registers.y = (self.registers.y - 1) & 0xFF
        self._set_zn(self.registers.y)
        return 0

    def _op_eor(self) -> int:
        self._fetch()
        self.registers.a ^= self.data
        self._set_zn(self.registers.a)
        return 1

    def _op_inc(self) -> int:
        self._fetch()
        value = (self.data + 1) & 0xFF
        self._set_zn(value)
        self.write(self.abs_addr, value)
        return 0

    def _op_inx(self) -> int:
        self._fetch()
        self.registers.x = (self.registers.x + 1) & 0xFF
        self._set_zn(self.registers.x)
        return 0

    def _op_iny(self) -> int:
        self._fetch()
        self.registers.y = (self.registers.y + 1) & 0xFF
        self._set_zn(self.registers.y)
        return 0

    def _op_jmp(self) -> int:
        self._fetch()
        self.registers.pc = self.abs_addr
        return 0

    def _op_jsr(self) -> int:
        self._fetch()
        regs = self.registers
        return_point = (regs.pc - 1) & 0xFFFF
        self._push(return_point >> 8)
        self._push(return_point & 0xFF)
        regs.pc = self.abs_addr
        return 0

    def _op_lda(self) -> int:
        self._fetch()
        self.registers.a = self.data
        self._set_zn(self.registers.a)
        return 1

    def _op_ldx(self) -> int:
        self._fetch()
        self.registers.x = self.data
        self._set_zn(self.registers.x)
        return 1

    def _op_ldy(self) -> int:
        self._fetch()
        self.registers.y = self.data
        self._set_zn(self.registers.y)
        return 1

    def _op_lsr(self) -> int:
        self._fetch()
        regs = self.registers
        if self._is_accumulator_mode():
            self.update_flag(Flag.C, regs.a & 0x01)
            regs.a >>= 1
            self._set_zn(regs.a)
        else:
            self.update_flag(Flag.C, self.data & 0x01)
            result = self.data >> 1
            self.update_flag(Flag.Z, result == 0)
            self.update_flag(Flag.N, result == 0x80)
            self.write(self.abs_addr, result)
        return 0

    def _op_nop(self) -> int:
        self._fetch()
        return 0

    def _op_ora(self) -> int:
        self._fetch()
        self.registers.a |= self.data
        self._set_zn(self.registers.a)
        return 1

    def _op_pha(self) -> int:
        self._push(self.registers.a)
        return 0

    def _op_php(self) -> int:
        self._push(self.registers.p)
        return 0

    def _op_pla(self) -> int:
        self.registers.a = self._pull()
        self._set_zn(self.registers.a)
        return 0

    def _op_plp(self) -> int:
        self.registers.p = self._pull()
        return 0

    def _op_rol(self) -> int:
        self._fetch()
        regs = self.registers
        old_carry = self.get_flag(Flag.C)
        if self._is_accumulator_mode():
            self.update_flag(Flag.C, regs.a & 0x80)
            regs.a = ((regs.a << 1) | old_carry) & 0xFF
            self._set_zn(regs.a)
        else:
            self.update_flag(Flag.C, self.data & 0x80)
            new_data = ((self.data << 1) | old_carry) & 0xFF
            self.update_flag(Flag.N, new_data & 0x80)
            self.bus.write(self.abs_addr, new_data)
        return 0

    def _op_ror(self) -> int:
        self._fetch()
        regs = self.registers
        old_carry = self.get_flag(Flag.C) << 7
        if self._is_accumulator_mode():
            self.update_flag(Flag.C, regs.a & 0x01)
            regs.a = (regs.a >> 1) | old_carry
            self._set_zn(regs.a)
        else:
            self.update_flag(Flag.C, self.data & 0x01)
            new_data = (self.data >> 1) | old_carry
            self.update_flag(Flag.N, new_data & 0x80)
            self.bus.write(self.abs_addr, new_data)
        return 0

    def _op_rti(self) -> int:
        self._fetch()
        regs = self.registers
        regs.sp = (regs.sp + 1) & 0xFF
        flags = self.bus.read_stack(regs.sp)
        regs.sp = (regs.sp + 1) & 0xFF
        pcl = self.bus.read_stack(regs.sp)
        regs.sp = (regs.sp + 1) & 0xFF
        pch = self.bus.read_stack(regs.sp)
        regs.p = flags
        regs.pc = (pch << 8) | pcl
        return 0

    def _op_rts(self) -> int:
        self._fetch()
        regs = self.registers
        regs.sp = (regs.sp + 1) & 0xFF
        pcl = self.bus.read_stack(regs.sp)
        regs.sp = (regs.sp + 1) & 0xFF
        pch = self.bus.read_stack(regs.sp)
        regs.pc = (((pch << 8) | pcl) + 1) & 0xFFFF
        return 0

    def _op_sbc(self) -> int:
        self._fetch()
        regs = self.registers
        data_sign = self.data & 0x80
        acc_sign = regs.a & 0x80
        result = (regs.a - self.data - (1 - self.get_flag(Flag.C))) & 0xFF
        regs.a = result
        overflow = (data_sign and not acc_sign and result & 0x80) or (
            not data_sign and acc_sign and not result & 0x80
        )
        self.update_flag(Flag.Z, regs.a == 0)
        self.update_flag(Flag.V, overflow)
        self.update_flag(Flag.N, regs.a & 0x80)
        self.update_flag(Flag.C, not regs.a & 0x80)
        return 1

    def _op_sec(self) -> int:
        self.update_flag(Flag.C, True)
        return 0

    def _op_sed(self) -> int:
        self.update_flag(Flag.D, True)
        return 0

    def _op_sei(self) -> int:
        self.update_flag(Flag.I, True)
        return 0

    def _op_sta(self) -> int:
        self._fetch()
        self.write(self.abs_addr, self.registers.a)
        return 0

    def _op_stx(self) -> int:
        self._fetch()
        self.write(self.abs_addr, self.registers.x)
        return 0

    def _op_sty(self) -> int:
        self._fetch()
        self.write(self.abs_addr, self.registers.y)
        return 0

    def _op_tax(self) -> int:
        self.registers.x = self.registers.a
        self._set_zn(self.registers.x)
        return 0

    def _op_tay(self) -> int:
        self.registers.y = self.registers.a
        self._set_zn(self.registers.y)
        return 0

    def _op_tsx(self) -> int:
        self.registers.x = self.registers.sp
        self._set_zn(self.registers.x)
        return 0

    def _op_txa(self) -> int:
        self.registers.a = self.registers.x
        self._set_zn(self.registers.a)
        return 0

    def _op_txs(self) -> int:
        self.registers.sp = self.registers.x
        return 0

    def _op_tya(self) -> int:
        self.registers.a = self.registers.y
        self._set_zn(self.registers.a)
        return 0

    def _op_ill(self) -> int:
        return 0