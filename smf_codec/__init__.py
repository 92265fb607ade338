"""Standard MIDI File and MIDI 1.0 message codec."""

from .errors import InvalidRange, MidiError, ParsingError
from .files import decode_file, encode_file, read_chunk, try_decode_file
from .messages import (
    ChannelPressure,
    ControlChange,
    Message,
    NoteOff,
    NoteOn,
    PitchBend,
    PolyPressure,
    ProgramChange,
    SysEx,
    encode_message,
    message_length_for_status,
    parse_message,
    try_parse_message,
)
from .models import Event, FileFormat, MidiFile, Track
from .streams import ByteStream
from .tracks import decode_track, encode_track
from .values import Channel, NoteNumber, Velocity
from .vlq import decode_vlq, encode_vlq, read_vlq

__all__ = [
    "ByteStream",
    "Channel",
    "ChannelPressure",
    "ControlChange",
    "Event",
    "FileFormat",
    "InvalidRange",
    "Message",
    "MidiError",
    "MidiFile",
    "NoteNumber",
    "NoteOff",
    "NoteOn",
    "ParsingError",
    "PitchBend",
    "PolyPressure",
    "ProgramChange",
    "SysEx",
    "Track",
    "Velocity",
    "decode_file",
    "decode_track",
    "decode_vlq",
    "encode_file",
    "encode_message",
    "encode_track",
    "encode_vlq",
    "message_length_for_status",
    "parse_message",
    "read_chunk",
    "read_vlq",
    "try_decode_file",
    "try_parse_message",
]
