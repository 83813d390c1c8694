import pytest

from nesemu.opcodes import (
    OPCODE_TABLE,
    AddressingMode,
    Instruction,
    instruction_for,
)

_SIZE_BY_MODE = {
    AddressingMode.IMP: 1,
    AddressingMode.ACC: 1,
    AddressingMode.IMM: 2,
    AddressingMode.ZP: 2,
    AddressingMode.ZPX: 2,
    AddressingMode.ZPY: 2,
    AddressingMode.REL: 2,
    AddressingMode.INDX: 2,
    AddressingMode.INDY: 2,
    AddressingMode.ABS: 3,
    AddressingMode.ABSX: 3,
    AddressingMode.ABSY: 3,
    AddressingMode.IND: 3,
}


def _all_instructions():
    return [instruction_for(op) for op in range(256)]


def test_table_covers_every_byte():
    assert len(OPCODE_TABLE) == 256
    assert all(instruction_for(op) is OPCODE_TABLE[op] for op in range(256))


def test_opcode_field_matches_index_except_last():
    mismatched = [op for op in range(256) if instruction_for(op).opcode != op]
    assert mismatched == [0xFF]
    assert instruction_for(0xFF).opcode == 0xFA


def test_lda_immediate():
    ins = instruction_for(0xA9)
    assert ins.mnemonic == "LDA"
    assert ins.mode is AddressingMode.IMM
    assert ins.operation == "LDA"
    assert not ins.is_illegal


def test_indirect_jump():
    ins = instruction_for(0x6C)
    assert ins.mnemonic == "JMP"
    assert ins.mode is AddressingMode.IND


def test_brk_timing():
    ins = instruction_for(0x00)
    assert (ins.mnemonic, ins.mode, ins.size, ins.cycles) == (
        "BRK",
        AddressingMode.IMP,
        1,
        7,
    )


def test_illegal_entries_use_ill_operation():
    instructions = _all_instructions()
    assert any(ins.is_illegal for ins in instructions)
    for ins in instructions:
        assert ins.is_illegal == (ins.mnemonic == "???")
        if not ins.is_illegal:
            assert ins.operation == ins.mnemonic


def test_size_follows_addressing_mode():
    for ins in _all_instructions():
        assert ins.size == _SIZE_BY_MODE[ins.mode], ins


@pytest.mark.parametrize("opcode", [0x10, 0x30, 0x50, 0x70, 0x90, 0xB0, 0xD0, 0xF0])
def test_branches_are_relative(opcode):
    ins = instruction_for(opcode)
    assert ins.mode is AddressingMode.REL
    assert ins.mnemonic.startswith("B")
    assert ins.extra_cycles == instruction_for(0x30).extra_cycles


def test_accumulator_shifts():
    accumulator_ops = {
        ins.mnemonic
        for ins in _all_instructions()
        if ins.mode is AddressingMode.ACC
    }
    assert accumulator_ops == {"ASL", "ROL", "LSR", "ROR"}


@pytest.mark.parametrize("opcode", [-1, 256, 0x1000])
def test_out_of_range_opcode_raises(opcode):
    with pytest.raises(ValueError):
        instruction_for(opcode)


def test_instructions_are_immutable():
    ins = instruction_for(0xEA)
    assert ins.mnemonic == "NOP"
    with pytest.raises(AttributeError):
        ins.cycles = 99  # type: ignore[misc]


def test_instruction_equality_by_value():
    ins = instruction_for(0xEA)
    copy = Instruction(
        mnemonic=ins.mnemonic,
        opcode=ins.opcode,
        mode=ins.mode,
        operation=ins.operation,
        size=ins.size,
        cycles=ins.cycles,
        extra_cycles=ins.extra_cycles,
    )
    assert copy == ins