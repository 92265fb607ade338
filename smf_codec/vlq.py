"""Variable-length quantities used for SMF delta-times and lengths."""
from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

from .errors import InvalidRange, ParsingError

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from .streams import ByteStream

MAX_VLQ_VALUE = 0xFFFFFFFF
# Five 7-bit groups cover every unsigned 32-bit value.
DEFAULT_MAX_VLQ_BYTES = 5


def encode_vlq(value: int) -> bytes:
    """Encode ``value`` most-significant group first; 0 encodes as ``b"\\x00"``."""

    if not 0 <= value <= MAX_VLQ_VALUE:
        raise InvalidRange(f"VLQ value must be 0-{MAX_VLQ_VALUE}, got {value}")
    groups = [value & 0x7F]
    value >>= 7
    while value:
        groups.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(groups))


def read_vlq(stream: "ByteStream", *, max_bytes: int = DEFAULT_MAX_VLQ_BYTES) -> int:
    """Read one VLQ from ``stream``, advancing its cursor past it."""

    start = stream.position
    value = 0
    consumed = 0
    while True:
        if stream.remaining <= 0:
            raise ParsingError("Truncated variable-length quantity.", offset=start)
        byte = stream.read_u8()
        value = (value << 7) | (byte & 0x7F)
        consumed += 1
        if byte & 0x80 == 0:
            break
        if max_bytes and consumed >= max_bytes:
            raise ParsingError(
                f"Variable-length quantity exceeds {max_bytes} bytes.", offset=start
            )
    if value > MAX_VLQ_VALUE:
        raise ParsingError("Variable-length quantity does not fit in 32 bits.", offset=start)
    return value


def decode_vlq(data: bytes, *, max_bytes: int = DEFAULT_MAX_VLQ_BYTES) -> Tuple[int, int]:
    """Decode a VLQ at the start of ``data``; return ``(value, bytes consumed)``."""

    from .streams import ByteStream

    stream = ByteStream(data)
    value = read_vlq(stream, max_bytes=max_bytes)
    return value, stream.position


__all__ = [
    "DEFAULT_MAX_VLQ_BYTES",
    "MAX_VLQ_VALUE",
    "decode_vlq",
    "encode_vlq",
    "read_vlq",
]
