"""Loaders for iNES cartridge images, hex-text assembly dumps and raw binaries."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from itertools import zip_longest
from pathlib import Path

NES_MAGIC = b"NES\x1a"
HEADER_SIZE = 16
TRAINER_SIZE = 512
PRG_ROM_UNIT = 16 * 1024

_HEX_DIGITS = "0123456789ABCDEF"
_WHITESPACE = frozenset(b" \t\n\v\f\r")


@dataclass(frozen=True)
class NesHeader:
    """The fields of a 16-byte iNES header."""

    valid: bool = False
    prg_rom: int = 0  # size of PRG ROM in 16 KiB units
    chr_rom: int = 0  # size of CHR ROM in 8 KiB units, 0 means CHR RAM
    flag6: int = 0
    flag7: int = 0
    flag8: int = 0
    flag9: int = 0
    flag10: int = 0

    @property
    def has_trainer(self) -> bool:
        """True when bit 2 of flag 6 announces a 512-byte trainer."""
        return bool(self.flag6 & 0x04)


@dataclass(frozen=True)
class NesRom:
    """A parsed cartridge: its header, optional trainer and PRG ROM."""

    header: NesHeader = field(default_factory=NesHeader)
    trainer: bytes = b""
    rom_data: bytes = b""


def parse_nes(data: bytes) -> NesRom:
    """Parse an iNES image; data without the iNES magic yields an invalid, empty ROM."""
    data = bytes(data)
    if data[: len(NES_MAGIC)] != NES_MAGIC:
        return NesRom()
    if len(data) < HEADER_SIZE:
        raise ValueError(f"iNES header truncated: {len(data)} of {HEADER_SIZE} bytes")
    prg_rom, chr_rom, flag6, flag7, flag8, flag9, flag10 = data[4:11]
    header = NesHeader(
        valid=True,
        prg_rom=prg_rom,
        chr_rom=chr_rom,
        flag6=flag6,
        flag7=flag7,
        flag8=flag8,
        flag9=flag9,
        flag10=flag10,
    )
    offset = HEADER_SIZE
    trainer = b""
    if header.has_trainer:
        trainer = data[offset : offset + TRAINER_SIZE]
        if len(trainer) < TRAINER_SIZE:
            raise ValueError("iNES trainer truncated")
        offset += TRAINER_SIZE
    size = header.prg_rom * PRG_ROM_UNIT
    rom_data = data[offset : offset + size]
    if len(rom_data) < size:
        raise ValueError(f"PRG ROM truncated: {len(rom_data)} of {size} bytes")
    return NesRom(header=header, trainer=trainer, rom_data=rom_data)


def load_nes(path: str | os.PathLike) -> NesRom:
    """Read and parse an iNES file."""
    return parse_nes(Path(path).read_bytes())


def _nibble(char: str) -> int:
    index = _HEX_DIGITS.find(char)
    return index if index >= 0 else 0


def parse_assembly(text: str) -> bytes:
    """Turn pairs of upper-case hex digits into bytes, ignoring whitespace.

    Characters that are not hex digits count as 0, and a trailing lone digit
    becomes the high nibble of a final byte.
    """
    content = "".join(text.split())
    return bytes(
        (_nibble(high) << 4) | _nibble(low)
        for high, low in zip_longest(content[0::2], content[1::2], fillvalue="")
    )


def load_assembly(path: str | os.PathLike) -> bytes:
    """Read a hex-text program file."""
    return parse_assembly(Path(path).read_text())


def load_binary(path: str | os.PathLike) -> bytes:
    """Read a file's bytes, skipping whitespace bytes."""
    return bytes(b for b in Path(path).read_bytes() if b not in _WHITESPACE)