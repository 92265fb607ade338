"""Bounds-checked cursor over an immutable byte buffer."""
from __future__ import annotations

import struct

from .errors import ParsingError
from .vlq import DEFAULT_MAX_VLQ_BYTES, read_vlq


class ByteStream:
    """Read big-endian integers, slices and VLQs with a rewindable cursor.

    Every read checks the remaining length first and raises
    :class:`~smf_codec.errors.ParsingError` instead of reading past the end.
    The cursor is a plain index so callers can step back over a byte they
    have already consumed (running status needs exactly that).
    """

    __slots__ = ("_data", "_length", "_position")

    def __init__(self, data: bytes | bytearray | memoryview):
        self._data = memoryview(bytes(data))
        self._length = len(self._data)
        self._position = 0

    def __len__(self) -> int:
        return self._length

    @property
    def remaining(self) -> int:
        return self._length - self._position

    @property
    def position(self) -> int:
        return self._position

    @position.setter
    def position(self, value: int) -> None:
        if not 0 <= value <= self._length:
            raise ParsingError(
                f"Cannot move cursor to {value}; buffer holds {self._length} bytes.",
                offset=self._position,
            )
        self._position = value

    def at_end(self) -> bool:
        return self._position >= self._length

    def read_bytes(self, size: int) -> bytes:
        if size < 0:
            raise ValueError("Size must be non-negative.")
        if self.remaining < size:
            raise ParsingError(
                f"Unexpected end of data: wanted {size} bytes, {self.remaining} remaining.",
                offset=self._position,
            )
        start = self._position
        self._position += size
        return bytes(self._data[start : start + size])

    def read_u8(self) -> int:
        return self.read_bytes(1)[0]

    def read_u16(self) -> int:
        return struct.unpack(">H", self.read_bytes(2))[0]

    def read_u32(self) -> int:
        return struct.unpack(">I", self.read_bytes(4))[0]

    def read_ascii(self, size: int) -> str:
        start = self._position
        raw = self.read_bytes(size)
        try:
            return raw.decode("ascii")
        except UnicodeDecodeError as exc:
            raise ParsingError(f"Invalid ASCII string {raw!r}", offset=start) from exc

    def read_vlq(self, *, max_bytes: int = DEFAULT_MAX_VLQ_BYTES) -> int:
        return read_vlq(self, max_bytes=max_bytes)

    def peek_u8(self) -> int:
        if self.remaining <= 0:
            raise ParsingError("Unexpected end of data.", offset=self._position)
        return self._data[self._position]

    def skip(self, size: int) -> None:
        self.read_bytes(size)

    def rewind(self, count: int = 1) -> None:
        self.position = self._position - count


__all__ = ["ByteStream"]
