"""Hexadecimal formatting helpers used for logs and debug views."""

_HEX_DIGITS = "0123456789ABCDEF"


def format_u8(val: int) -> str:
    """Return the two upper-case hex digits of an 8-bit value."""
    val &= 0xFF
    return _HEX_DIGITS[val >> 4] + _HEX_DIGITS[val & 0x0F]


def format_u16(val: int) -> str:
    """Return the four upper-case hex digits of a 16-bit value."""
    val &= 0xFFFF
    return format_u8(val >> 8) + format_u8(val & 0xFF)


def hex8(val: int) -> str:
    """Return an 8-bit value as ``0xNN``."""
    return "0x" + format_u8(val)


def hex16(val: int) -> str:
    """Return a 16-bit value as ``0xNNNN``."""
    return "0x" + format_u16(val)