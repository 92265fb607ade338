"""Standard MIDI File header and track chunks."""
from __future__ import annotations

import logging
import struct
from typing import List, Tuple

from app.config import DecodeOptions, EncodeOptions, get_decode_options, get_encode_options
from shared.result import Result

from .errors import InvalidRange, MidiError, ParsingError
from .models import FileFormat, MidiFile, Track
from .streams import ByteStream
from .tracks import decode_track, encode_track

logger = logging.getLogger(__name__)

HEADER_CHUNK_ID = "MThd"
TRACK_CHUNK_ID = "MTrk"
HEADER_LENGTH = 6
MAX_TRACKS = 0xFFFF


def encode_file(midi_file: MidiFile, options: EncodeOptions | None = None) -> bytes:
    """Serialise ``midi_file`` to SMF bytes."""

    options = options or get_encode_options()
    track_count = len(midi_file.tracks)
    if track_count > MAX_TRACKS:
        raise InvalidRange(f"A MIDI file holds at most {MAX_TRACKS} tracks, got {track_count}")

    chunks = [
        HEADER_CHUNK_ID.encode("ascii")
        + struct.pack(
            ">IHHH",
            HEADER_LENGTH,
            int(midi_file.format),
            track_count,
            midi_file.ticks_per_quarter_note,
        )
    ]
    for track in midi_file.tracks:
        body = encode_track(track, options)
        chunks.append(TRACK_CHUNK_ID.encode("ascii") + struct.pack(">I", len(body)) + body)

    data = b"".join(chunks)
    logger.debug("Encoded %s into %d bytes", midi_file, len(data))
    return data


def read_chunk(stream: ByteStream) -> Tuple[str, bytes]:
    """Read one chunk from ``stream``, returning its four-letter id and payload."""

    chunk_id = stream.read_ascii(4)
    length = stream.read_u32()
    payload = stream.read_bytes(length)
    return chunk_id, payload


def decode_file(data: bytes, options: DecodeOptions | None = None) -> MidiFile:
    """Parse SMF bytes into a :class:`MidiFile`.

    The header must be exactly six bytes long and the number of track chunks
    must match the count it declares. Bytes after the last declared track are
    ignored.
    """

    options = options or get_decode_options()
    stream = ByteStream(data)

    header_id = stream.read_bytes(4)
    if header_id != HEADER_CHUNK_ID.encode("ascii"):
        raise ParsingError(
            f"Invalid MIDI file: expected {HEADER_CHUNK_ID!r}, got {header_id!r}", offset=0
        )

    header_length = stream.read_u32()
    if header_length != HEADER_LENGTH:
        raise ParsingError(f"Invalid header length: {header_length}", offset=4)

    format_value = stream.read_u16()
    try:
        file_format = FileFormat(format_value)
    except ValueError as exc:
        raise ParsingError(f"Invalid MIDI format: {format_value}", offset=8) from exc

    track_count = stream.read_u16()
    ticks_per_quarter_note = stream.read_u16()

    tracks: List[Track] = []
    for track_index in range(track_count):
        chunk_offset = stream.position
        chunk_id, body = read_chunk(stream)
        if chunk_id != TRACK_CHUNK_ID:
            raise ParsingError(
                f"Invalid track header: expected {TRACK_CHUNK_ID!r}, got {chunk_id!r}",
                offset=chunk_offset,
            )
        body_offset = chunk_offset + 8
        try:
            tracks.append(decode_track(body, track_index, options))
        except ParsingError as exc:
            offset = None if exc.offset is None else body_offset + exc.offset
            raise ParsingError(f"Track {track_index + 1}: {exc.detail}", offset=offset) from exc

    if stream.remaining:
        logger.debug("Ignored %d bytes after the last declared track", stream.remaining)

    midi_file = MidiFile(file_format, ticks_per_quarter_note, tuple(tracks))
    logger.debug("Decoded %s from %d bytes", midi_file, len(data))
    return midi_file


def try_decode_file(
    data: bytes, options: DecodeOptions | None = None
) -> Result[MidiFile, MidiError]:
    try:
        return Result.ok(decode_file(data, options))
    except MidiError as exc:
        return Result.err(exc)


__all__ = [
    "HEADER_CHUNK_ID",
    "HEADER_LENGTH",
    "TRACK_CHUNK_ID",
    "decode_file",
    "encode_file",
    "read_chunk",
    "try_decode_file",
]
