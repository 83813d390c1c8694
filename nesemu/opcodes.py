"""The 6502 opcode matrix: mnemonic, addressing mode, size and timing per opcode."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AddressingMode(Enum):
    """How an instruction locates its operand."""

    ZP = "ZP"  # zero page
    ZPX = "ZPX"  # indexed zero page X
    ZPY = "ZPY"  # indexed zero page Y
    ABS = "ABS"  # absolute
    ABSX = "ABSX"  # absolute indexed X
    ABSY = "ABSY"  # absolute indexed Y
    IND = "IND"  # indirect
    IMP = "IMP"  # implied
    ACC = "ACC"  # accumulator
    IMM = "IMM"  # immediate
    REL = "REL"  # relative
    INDX = "INDX"  # indexed indirect X
    INDY = "INDY"  # indirect indexed Y


ILLEGAL_MNEMONIC = "???"
ILLEGAL_OPERATION = "ILL"


@dataclass(frozen=True)
class Instruction:
    """One entry of the opcode matrix."""

    mnemonic: str
    opcode: int
    mode: AddressingMode
    operation: str
    size: int
    cycles: int
    extra_cycles: int

    @property
    def is_illegal(self) -> bool:
        """True for opcodes the emulator treats as illegal no-ops."""
        return self.operation == ILLEGAL_OPERATION


# mnemonic, addressing mode, byte count, machine cycles, additional cycles
_TABLE = """
BRK IMP 1 7 0 | ORA INDX 2 6 0 | ??? IMP 1 2 0 | ??? INDX 2 8 0
??? ZP 2 3 0 | ORA ZP 2 3 0 | ASL ZP 2 5 0 | ??? ZP 2 5 0
PHP IMP 1 3 0 | ORA IMM 2 2 0 | ASL ACC 1 2 0 | ??? IMM 2 2 0
??? ABS 3 4 0 | ORA ABS 3 4 0 | ASL ABS 3 6 0 | ??? ABS 3 6 0
BPL REL 2 4 3 | ORA INDY 2 6 1 | ??? IMP 1 2 0 | ??? INDY 2 8 0
??? ZPX 2 4 0 | ORA ZPX 2 4 0 | ASL ZPX 2 6 0 | ??? ZPX 2 6 0
CLC IMP 1 2 0 | ORA ABSY 3 5 1 | ??? IMP 1 2 0 | ??? ABSY 3 7 0
??? ABSX 3 4 0 | ORA ABSX 3 5 1 | ASL ABSX 3 7 0 | ??? ABSX 3 7 0
JSR ABS 3 6 0 | AND INDX 2 6 0 | ??? IMP 1 2 0 | ??? INDX 2 8 0
BIT ZP 2 3 0 | AND ZP 2 3 0 | ROL ZP 2 5 0 | ??? ZP 2 5 0
PLP IMP 1 4 0 | AND IMM 2 2 0 | ROL ACC 1 2 0 | ??? IMM 2 2 0
BIT ABS 3 4 0 | AND ABS 3 4 0 | ROL ABS 3 6 0 | ??? ABS 3 6 0
BMI REL 2 2 3 | AND INDY 2 5 1 | ??? IMP 1 2 0 | ??? INDY 2 8 0
??? ZPX 2 4 0 | AND ZPX 2 4 0 | ROL ZPX 2 6 0 | ??? ZPX 2 6 0
SEC IMP 1 2 0 | AND ABSY 3 4 1 | ??? IMP 1 2 0 | ??? ABSY 3 7 0
??? ABSX 3 4 0 | AND ABSX 3 4 1 | ROL ABSX 3 7 0 | ??? ABSX 3 7 0
RTI IMP 1 6 0 | EOR INDX 2 6 0 | ??? IMP 1 2 0 | ??? INDX 2 8 0
??? ZP 2 3 0 | EOR ZP 2 3 0 | LSR ZP 2 5 0 | ??? ZP 2 6 0
PHA IMP 1 3 0 | EOR IMM 2 2 0 | LSR ACC 1 2 0 | ??? IMM 2 2 0
JMP ABS 3 3 0 | EOR ABS 3 4 0 | LSR ABS 3 6 0 | ??? ABS 3 6 0
BVC REL 2 2 3 | EOR INDY 2 5 1 | ??? IMP 1 2 0 | ??? INDY 2 8 0
??? ZPX 2 4 0 | EOR ZPX 2 4 0 | LSR ZPX 2 6 0 | ??? ZPX 2 6 0
CLI IMP 1 2 0 | EOR ABSY 3 4 1 | ??? IMP 1 2 0 | ??? ABSY 3 7 0
??? ABSX 3 4 0 | EOR ABSX 3 4 1 | LSR ABSX 3 7 0 | ??? ABSX 3 7 0
RTS IMP 1 6 0 | ADC INDX 2 6 0 | ??? IMP 1 2 0 | ??? INDX 2 8 0
??? ZP 2 3 0 | ADC ZP 2 3 0 | ROR ZP 2 5 0 | ??? ZP 2 5 0
PLA IMP 1 4 0 | ADC IMM 2 2 0 | ROR ACC 1 2 0 | ??? IMM 2 2 0
JMP IND 3 5 0 | ADC ABS 3 4 0 | ROR ABS 3 6 0 | ??? ABS 3 6 0
BVS REL 2 2 3 | ADC INDY 2 5 1 | ??? IMP 1 2 0 | ??? INDY 2 8 0
??? ZPX 2 4 0 | ADC ZPX 2 4 0 | ROR ZPX 2 6 0 | ??? ZPX 2 6 0
SEI IMP 1 2 0 | ADC ABSY 3 4 1 | ??? IMP 1 2 0 | ??? ABSY 3 7 0
??? ABSX 3 4 0 | ADC ABSX 3 4 1 | ROR ABSX 3 7 0 | ??? ABSX 3 7 0
??? IMM 2 2 0 | STA INDX 2 6 0 | ??? IMM 2 2 0 | ??? INDX 2 6 0
STY ZP 2 3 0 | STA ZP 2 3 0 | STX ZP 2 3 0 | ??? ZP 2 3 0
DEY IMP 1 2 0 | ??? IMM 2 2 0 | TXA IMP 1 2 0 | ??? IMM 2 2 0
STY ABS 3 4 0 | STA ABS 3 4 0 | STX ABS 3 4 0 | ??? ABS 3 4 0
BCC REL 2 2 3 | STA INDY 2 6 0 | ??? IMP 1 2 0 | ??? INDY 2 6 0
STY ZPX 2 4 0 | STA ZPX 2 4 0 | STX ZPY 2 4 0 | ??? ZPY 2 4 0
TYA IMP 1 2 0 | STA ABSY 3 5 0 | TXS IMP 1 2 0 | ??? ABSY 3 5 0
??? ABSX 3 5 0 | STA ABSX 3 5 0 | ??? ABSY 3 5 0 | ??? ABSY 3 5 0
LDY IMM 2 2 0 | LDA INDX 2 6 0 | LDX IMM 2 2 0 | ??? INDX 2 6 0
LDY ZP 2 3 0 | LDA ZP 2 3 0 | LDX ZP 2 3 0 | ??? ZP 2 3 0
TAY IMP 1 2 0 | LDA IMM 2 2 0 | TAX IMP 1 2 0 | ??? IMM 2 2 0
LDY ABS 3 4 0 | LDA ABS 3 4 0 | LDX ABS 3 4 0 | ??? ABS 3 4 0
BCS REL 2 2 3 | LDA INDY 2 5 1 | ??? IMP 1 2 0 | ??? INDY 2 5 0
LDY ZPX 2 4 0 | LDA ZPX 2 4 0 | LDX ZPY 2 4 0 | ??? ZPY 2 4 0
CLV IMP 1 2 0 | LDA ABSY 3 4 1 | TSX IMP 1 2 0 | ??? ABSY 3 4 0
LDY ABSX 3 4 1 | LDA ABSX 3 4 1 | LDX ABSY 3 4 1 | ??? ABSY 3 4 0
CPY IMM 2 2 0 | CMP INDX 2 6 0 | ??? IMM 2 2 0 | ??? INDX 2 8 0
CPY ZP 2 3 0 | CMP ZP 2 3 0 | DEC ZP 2 5 0 | ??? ZP 2 5 0
INY IMP 1 2 0 | CMP IMM 2 2 0 | DEX IMP 1 2 0 | ??? IMM 2 2 0
CPY ABS 3 4 0 | CMP ABS 3 4 0 | DEC ABS 3 6 0 | ??? ABS 3 6 0
BNE REL 2 2 3 | CMP INDY 2 5 1 | ??? IMP 1 2 0 | ??? INDY 2 8 0
??? ZPX 2 4 0 | CMP ZPX 2 4 0 | DEC ZPX 2 6 0 | ??? ZPX 2 6 0
CLD IMP 1 2 0 | CMP ABSY 3 4 1 | ??? IMP 1 2 0 | ??? ABSY 3 7 0
??? ABSX 3 4 0 | CMP ABSX 3 4 1 | DEC ABSX 3 7 0 | ??? ABSX 3 7 0
CPX IMM 2 2 0 | SBC INDX 2 6 0 | ??? IMM 2 2 0 | ??? INDX 2 8 0
CPX ZP 2 3 0 | SBC ZP 2 3 0 | INC ZP 2 5 0 | ??? ZP 2 5 0
INX IMP 1 2 0 | SBC IMM 2 2 0 | NOP IMP 1 2 0 | ??? IMM 2 2 0
CPX ABS 3 4 0 | SBC ABS 3 4 0 | INC ABS 3 6 0 | ??? ABS 3 6 0
BEQ REL 2 2 3 | SBC INDY 2 5 1 | ??? IMP 1 2 0 | ??? INDY 2 8 0
??? ZPX 2 4 0 | SBC ZPX 2 4 0 | INC ZPX 2 6 0 | ??? ZPX 2 6 0
SED IMP 1 2 0 | SBC ABSY 3 4 1 | ??? IMP 1 2 0 | ??? ABSY 3 7 0
??? ABSX 3 4 0 | SBC ABSX 3 4 1 | INC ABSX 3 7 0 | ??? IMP 1 2 0
"""

# The final matrix entry is recorded with opcode 0xFA rather than its own index.
_OPCODE_FIELD_OVERRIDES = {0xFF: 0xFA}


def _build_table() -> tuple[Instruction, ...]:
    entries = [
        entry.split()
        for line in _TABLE.strip().splitlines()
        for entry in line.split("|")
    ]
    if len(entries) != 256:
        raise RuntimeError(f"opcode matrix has {len(entries)} entries, expected 256")
    table = []
    for index, (mnemonic, mode, size, cycles, extra) in enumerate(entries):
        operation = ILLEGAL_OPERATION if mnemonic == ILLEGAL_MNEMONIC else mnemonic
        table.append(
            Instruction(
                mnemonic=mnemonic,
                opcode=_OPCODE_FIELD_OVERRIDES.get(index, index),
                mode=AddressingMode(mode),
                operation=operation,
                size=int(size),
                cycles=int(cycles),
                extra_cycles=int(extra),
            )
        )
    return tuple(table)


OPCODE_TABLE: tuple[Instruction, ...] = _build_table()


def instruction_for(opcode: int) -> Instruction:
    """Return the matrix entry for an opcode byte."""
    if not 0 <= opcode <= 0xFF:
        raise ValueError(f"opcode out of range: {opcode!r}")
    return OPCODE_TABLE[opcode]