"""Track chunk bodies: delta-times, running status and meta events."""
from __future__ import annotations

import logging
from typing import List

from app.config import DecodeOptions, EncodeOptions, get_decode_options, get_encode_options

from .errors import ParsingError
from .messages import (
    SYSEX_END,
    SYSEX_START,
    SysEx,
    encode_message,
    message_length_for_status,
    parse_message,
)
from .models import MAX_TICK, Event, Track
from .streams import ByteStream
from .vlq import encode_vlq

logger = logging.getLogger(__name__)

META_EVENT = 0xFF
META_TRACK_NAME = 0x03
META_END_OF_TRACK = 0x2F
END_OF_TRACK = bytes([META_EVENT, META_END_OF_TRACK, 0x00])


def encode_track(track: Track, options: EncodeOptions | None = None) -> bytes:
    """Serialise ``track`` into an MTrk chunk body (without the chunk header).

    Events are written in tick order; events sharing a tick keep the order in
    which they were added so the output is deterministic.
    """

    options = options or get_encode_options()
    body = bytearray()

    if track.name:
        name_bytes = track.name.encode("utf-8")
        body += encode_vlq(0)
        body += bytes([META_EVENT, META_TRACK_NAME])
        body += encode_vlq(len(name_bytes))
        body += name_bytes

    last_tick = 0
    running_status: int | None = None
    for event in track.sorted().events:
        body += encode_vlq(event.tick - last_tick)
        last_tick = event.tick
        message = event.message

        if isinstance(message, SysEx):
            # SMF framing: the length covers the payload and the closing 0xF7.
            payload = message.data + bytes([SYSEX_END])
            body.append(SYSEX_START)
            body += encode_vlq(len(payload))
            body += payload
            running_status = None
            continue

        wire = encode_message(message)
        if options.running_status and wire[0] == running_status:
            body += wire[1:]
        else:
            body += wire
        running_status = wire[0]

    body += encode_vlq(0)
    body += END_OF_TRACK

    logger.debug(
        "Encoded track %r: %d events, %d bytes (running_status=%s)",
        track.name,
        len(track.events),
        len(body),
        options.running_status,
    )
    return bytes(body)


def decode_track(
    data: bytes,
    track_index: int = 0,
    options: DecodeOptions | None = None,
) -> Track:
    """Parse an MTrk chunk body into a :class:`Track`.

    Tracks without a name meta event are named after their position
    (``"Track 1"`` for index 0 by default). Decoding stops at the
    end-of-track meta event; a body that simply runs out of bytes is accepted
    unless ``options.require_end_of_track`` is set.
    """

    options = options or get_decode_options()
    stream = ByteStream(data)
    events: List[Event] = []
    name = options.track_name_for(track_index)
    tick = 0
    running_status: int | None = None
    reached_end = False

    while stream.remaining > 0:
        delta_offset = stream.position
        tick += stream.read_vlq(max_bytes=options.max_vlq_bytes)
        if tick > MAX_TICK:
            raise ParsingError("Accumulated tick exceeds 32 bits.", offset=delta_offset)

        status_offset = stream.position
        status = stream.read_u8()
        if status < 0x80:
            if running_status is None:
                raise ParsingError(
                    "Running status encountered before any status byte.",
                    offset=status_offset,
                )
            stream.rewind()
            status = running_status

        if status == META_EVENT:
            running_status = None
            meta_type = stream.read_u8()
            length = stream.read_vlq(max_bytes=options.max_vlq_bytes)
            payload = stream.read_bytes(length)
            if meta_type == META_TRACK_NAME:
                name = _decode_track_name(payload, default=name)
            elif meta_type == META_END_OF_TRACK:
                reached_end = True
                break
            continue

        if status in (SYSEX_START, SYSEX_END):
            running_status = None
            length = stream.read_vlq(max_bytes=options.max_vlq_bytes)
            payload = stream.read_bytes(length)
            if status == SYSEX_START and payload.endswith(bytes([SYSEX_END])):
                payload = payload[:-1]
            events.append(Event(tick, SysEx.from_packet(payload)))
            continue

        running_status = status
        data_length = message_length_for_status(status) - 1
        data_offset = stream.position
        message_bytes = bytes([status]) + stream.read_bytes(data_length)
        try:
            message = parse_message(message_bytes)
        except ParsingError as exc:
            # message_bytes index 1 is the first data byte, wherever the status came from.
            offset = status_offset if exc.offset is None else data_offset + exc.offset - 1
            raise ParsingError(exc.detail, offset=offset) from exc
        events.append(Event(tick, message))

    if not reached_end:
        if options.require_end_of_track:
            raise ParsingError("Track ended without an end-of-track event.", offset=len(data))
        logger.warning(
            "Track %d ended without an end-of-track event after %d events",
            track_index,
            len(events),
        )
    elif stream.remaining:
        logger.debug(
            "Ignored %d bytes after end-of-track in track %d", stream.remaining, track_index
        )

    logger.debug("Decoded track %d %r: %d events", track_index, name, len(events))
    return Track(name, tuple(events))


def _decode_track_name(payload: bytes, *, default: str) -> str:
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("Track name %r is not valid UTF-8; keeping %r", payload, default)
        return default


__all__ = [
    "END_OF_TRACK",
    "META_END_OF_TRACK",
    "META_EVENT",
    "META_TRACK_NAME",
    "decode_track",
    "encode_track",
]
