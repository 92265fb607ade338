"""Bounds checks and cursor handling for the byte stream reader."""
from __future__ import annotations

import pytest

from smf_codec import ByteStream, ParsingError


def test_reads_big_endian_integers_in_sequence() -> None:
    stream = ByteStream(bytes([0x7F, 0x01, 0x02, 0x00, 0x00, 0x01, 0xE0]))

    assert stream.read_u8() == 0x7F
    assert stream.read_u16() == 0x0102
    assert stream.read_u32() == 0x000001E0
    assert stream.remaining == 0
    assert stream.at_end()


def test_read_bytes_and_ascii() -> None:
    stream = ByteStream(b"MThd\x01\x02")

    assert stream.read_ascii(4) == "MThd"
    assert stream.read_bytes(2) == b"\x01\x02"


def test_read_ascii_rejects_non_ascii_bytes() -> None:
    stream = ByteStream(b"M\xffhd")
    with pytest.raises(ParsingError, match="Invalid ASCII"):
        stream.read_ascii(4)


@pytest.mark.parametrize(
    ("reader", "data"),
    [
        pytest.param(lambda s: s.read_u8(), b"", id="u8"),
        pytest.param(lambda s: s.read_u16(), b"\x01", id="u16"),
        pytest.param(lambda s: s.read_u32(), b"\x01\x02\x03", id="u32"),
        pytest.param(lambda s: s.read_bytes(5), b"\x01\x02", id="slice"),
        pytest.param(lambda s: s.peek_u8(), b"", id="peek"),
    ],
)
def test_reads_past_the_end_raise_parsing_error(reader, data: bytes) -> None:
    stream = ByteStream(data)
    with pytest.raises(ParsingError, match="Unexpected end of data"):
        reader(stream)


def test_failed_read_does_not_move_cursor() -> None:
    stream = ByteStream(b"\x01\x02")
    stream.read_u8()

    with pytest.raises(ParsingError) as excinfo:
        stream.read_u32()

    assert excinfo.value.offset == 1
    assert stream.position == 1


def test_rewind_steps_back_one_byte() -> None:
    stream = ByteStream(b"\x3c\x40")
    assert stream.read_u8() == 0x3C
    stream.rewind()
    assert stream.position == 0
    assert stream.read_u8() == 0x3C


def test_rewind_before_start_is_rejected() -> None:
    stream = ByteStream(b"\x00")
    with pytest.raises(ParsingError, match="Cannot move cursor"):
        stream.rewind()


def test_position_can_be_set_within_bounds() -> None:
    stream = ByteStream(b"\x00\x01\x02")
    stream.position = 2
    assert stream.peek_u8() == 0x02
    assert stream.remaining == 1
    with pytest.raises(ParsingError):
        stream.position = 4


def test_skip_advances_and_checks_bounds() -> None:
    stream = ByteStream(b"\x00\x01\x02")
    stream.skip(2)
    assert stream.read_u8() == 0x02
    with pytest.raises(ParsingError):
        stream.skip(1)


def test_negative_sizes_are_programming_errors() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        ByteStream(b"\x00").read_bytes(-1)


def test_stream_copies_mutable_input() -> None:
    data = bytearray(b"\x01")
    stream = ByteStream(data)
    data[0] = 0x7F
    assert stream.read_u8() == 0x01
    assert len(stream) == 1
