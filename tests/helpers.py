from __future__ import annotations

import struct
from typing import Sequence


def vlq(value: int) -> bytes:
    buffer = [value & 0x7F]
    value >>= 7
    while value:
        buffer.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(buffer))


def track_chunk(body: bytes) -> bytes:
    return b"MTrk" + struct.pack(">I", len(body)) + body


def smf_bytes(
    track_bodies: Sequence[bytes],
    *,
    file_format: int = 1,
    division: int = 480,
    declared_tracks: int | None = None,
) -> bytes:
    count = len(track_bodies) if declared_tracks is None else declared_tracks
    header = b"MThd" + struct.pack(">IHHH", 6, file_format, count, division)
    return header + b"".join(track_chunk(body) for body in track_bodies)


END_OF_TRACK = bytes([0x00, 0xFF, 0x2F, 0x00])
