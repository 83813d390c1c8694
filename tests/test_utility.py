import pytest

from nesemu.utility import format_u8, format_u16, hex8, hex16


@pytest.mark.parametrize("val", range(256))
def test_format_u8_round_trip(val):
    text = format_u8(val)
    assert len(text) == 2
    assert int(text, 16) == val
    assert text == text.upper()


@pytest.mark.parametrize("val", [0x0000, 0x00FF, 0x0100, 0x8000, 0xC000, 0xFFFF, 0x1234])
def test_format_u16_round_trip(val):
    text = format_u16(val)
    assert len(text) == 4
    assert int(text, 16) == val


def test_format_u16_is_high_then_low_byte():
    assert format_u16(0xC000) == format_u8(0xC0) + format_u8(0x00)


def test_hex8_prefix():
    assert hex8(0) == "0x00"
    assert hex8(0xFF) == "0xFF"


def test_hex16_prefix():
    assert hex16(0xC000) == "0xC000"
    assert int(hex16(0xFFFA), 16) == 0xFFFA


def test_format_u8_truncates_to_byte():
    assert format_u8(0x1AB) == format_u8(0xAB)