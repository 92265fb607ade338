"""MIDI 1.0 channel and system-exclusive messages and their wire encoding."""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterable, Tuple, Type, TypeVar, Union

from shared.result import Result

from .errors import InvalidRange, MidiError, ParsingError
from .values import Channel, NoteNumber, Velocity

NOTE_OFF = 0x80
NOTE_ON = 0x90
POLY_PRESSURE = 0xA0
CONTROL_CHANGE = 0xB0
PROGRAM_CHANGE = 0xC0
CHANNEL_PRESSURE = 0xD0
PITCH_BEND = 0xE0
SYSEX_START = 0xF0
SYSEX_END = 0xF7

PITCH_BEND_MIN = -8192
PITCH_BEND_MAX = 8191
_PITCH_BEND_CENTER = 8192

V = TypeVar("V", Channel, NoteNumber, Velocity)


def _coerce(kind: Type[V], value: V | int) -> V:
    if isinstance(value, kind):
        return value
    return kind(value)


def _check_data_byte(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if not 0 <= value <= 0x7F:
        raise InvalidRange(f"{name} must be 0-127, got {value}")
    return value


class _MessageBase:
    """Messages compare and hash by their canonical wire bytes."""

    __slots__ = ()

    def to_bytes(self) -> bytes:
        return encode_message(self)  # type: ignore[arg-type]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _MessageBase):
            return NotImplemented
        return self.to_bytes() == other.to_bytes()

    def __hash__(self) -> int:
        return hash(self.to_bytes())


@dataclass(frozen=True, eq=False)
class _ChannelMessage(_MessageBase):
    channel: Channel

    status_nibble: ClassVar[int] = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "channel", _coerce(Channel, self.channel))

    @property
    def status(self) -> int:
        return self.status_nibble | self.channel.value


@dataclass(frozen=True, eq=False)
class NoteOn(_ChannelMessage):
    note: NoteNumber
    velocity: Velocity

    status_nibble: ClassVar[int] = NOTE_ON

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "note", _coerce(NoteNumber, self.note))
        object.__setattr__(self, "velocity", _coerce(Velocity, self.velocity))

    def __str__(self) -> str:
        return f"Note On: {self.note} on {self.channel} with {self.velocity}"


@dataclass(frozen=True, eq=False)
class NoteOff(_ChannelMessage):
    note: NoteNumber
    velocity: Velocity

    status_nibble: ClassVar[int] = NOTE_OFF

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "note", _coerce(NoteNumber, self.note))
        object.__setattr__(self, "velocity", _coerce(Velocity, self.velocity))

    def __str__(self) -> str:
        return f"Note Off: {self.note} on {self.channel} with {self.velocity}"


@dataclass(frozen=True, eq=False)
class ControlChange(_ChannelMessage):
    controller: int
    value: int

    status_nibble: ClassVar[int] = CONTROL_CHANGE

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_data_byte("Controller number", self.controller)
        _check_data_byte("Controller value", self.value)

    def __str__(self) -> str:
        return f"CC: Controller {self.controller} = {self.value} on {self.channel}"


@dataclass(frozen=True, eq=False)
class ProgramChange(_ChannelMessage):
    program: int

    status_nibble: ClassVar[int] = PROGRAM_CHANGE

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_data_byte("Program number", self.program)

    def __str__(self) -> str:
        return f"Program Change: {self.program} on {self.channel}"


@dataclass(frozen=True, eq=False)
class PitchBend(_ChannelMessage):
    """Pitch wheel position; 0 is centred, -8192..8191."""

    value: int

    status_nibble: ClassVar[int] = PITCH_BEND

    def __post_init__(self) -> None:
        super().__post_init__()
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Pitch bend must be an int, got {type(self.value).__name__}")
        if not PITCH_BEND_MIN <= self.value <= PITCH_BEND_MAX:
            raise InvalidRange(
                f"Pitch bend must be {PITCH_BEND_MIN}-{PITCH_BEND_MAX}, got {self.value}"
            )

    def __str__(self) -> str:
        return f"Pitch Bend: {self.value} on {self.channel}"


@dataclass(frozen=True, eq=False)
class ChannelPressure(_ChannelMessage):
    pressure: int

    status_nibble: ClassVar[int] = CHANNEL_PRESSURE

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_data_byte("Channel pressure", self.pressure)

    def __str__(self) -> str:
        return f"Channel Pressure: {self.pressure} on {self.channel}"


@dataclass(frozen=True, eq=False)
class PolyPressure(_ChannelMessage):
    note: NoteNumber
    pressure: int

    status_nibble: ClassVar[int] = POLY_PRESSURE

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "note", _coerce(NoteNumber, self.note))
        _check_data_byte("Key pressure", self.pressure)

    def __str__(self) -> str:
        return f"Poly Pressure: {self.note} = {self.pressure} on {self.channel}"


@dataclass(frozen=True, eq=False)
class SysEx(_MessageBase):
    """System-exclusive payload without the 0xF0/0xF7 framing bytes."""

    data: bytes = b""

    def __post_init__(self) -> None:
        payload = bytes(self.data) if not isinstance(self.data, bytes) else self.data
        for byte in payload:
            if byte > 0x7F:
                raise InvalidRange(f"SysEx data bytes must be 0-127, got {byte}")
        object.__setattr__(self, "data", payload)

    @classmethod
    def from_packet(cls, data: bytes) -> "SysEx":
        """Wrap a raw SMF SysEx/escape packet without checking its bytes.

        Escape packets (0xF7) carry arbitrary bytes such as realtime 0xF8 or
        MTC 0xF1, so they cannot go through the 7-bit check.
        """

        message = object.__new__(cls)
        object.__setattr__(message, "data", bytes(data))
        return message

    def __str__(self) -> str:
        return f"SysEx: {len(self.data)} bytes"


Message = Union[
    NoteOn,
    NoteOff,
    ControlChange,
    ProgramChange,
    PitchBend,
    ChannelPressure,
    PolyPressure,
    SysEx,
]
MESSAGE_TYPES: Tuple[type, ...] = (
    NoteOn,
    NoteOff,
    ControlChange,
    ProgramChange,
    PitchBend,
    ChannelPressure,
    PolyPressure,
    SysEx,
)


def message_length_for_status(status: int) -> int:
    """Return the wire length (status byte included) of a channel message."""

    kind = status & 0xF0
    if kind in (NOTE_OFF, NOTE_ON, POLY_PRESSURE, CONTROL_CHANGE, PITCH_BEND):
        return 3
    if kind in (PROGRAM_CHANGE, CHANNEL_PRESSURE):
        return 2
    return 1


def encode_message(message: Message) -> bytes:
    """Return the canonical MIDI bytes for ``message``."""

    if isinstance(message, (NoteOn, NoteOff)):
        return bytes([message.status, message.note.value, message.velocity.value])
    if isinstance(message, ControlChange):
        return bytes([message.status, message.controller, message.value])
    if isinstance(message, ProgramChange):
        return bytes([message.status, message.program])
    if isinstance(message, PitchBend):
        unsigned = message.value + _PITCH_BEND_CENTER
        return bytes([message.status, unsigned & 0x7F, (unsigned >> 7) & 0x7F])
    if isinstance(message, ChannelPressure):
        return bytes([message.status, message.pressure])
    if isinstance(message, PolyPressure):
        return bytes([message.status, message.note.value, message.pressure])
    if isinstance(message, SysEx):
        return bytes([SYSEX_START]) + message.data + bytes([SYSEX_END])
    raise TypeError(f"Unsupported MIDI message type: {type(message).__name__}")


def _data_bytes(data: bytes, count: int, description: str) -> bytes:
    if len(data) < count + 1:
        raise ParsingError(f"Incomplete {description} message")
    payload = data[1 : count + 1]
    for index, byte in enumerate(payload, start=1):
        if byte & 0x80:
            raise ParsingError(
                f"Invalid {description} data byte 0x{byte:02X}", offset=index
            )
    return payload


def parse_message(data: bytes | bytearray | Iterable[int]) -> Message:
    """Decode one MIDI message from the start of ``data``.

    A note-on with velocity 0 comes back as a :class:`NoteOff`, following the
    MIDI convention. Bytes beyond the message are ignored.
    """

    data = bytes(data)
    if not data:
        raise ParsingError("Empty MIDI message")

    first = data[0]
    if first == SYSEX_START:
        end = data.find(SYSEX_END, 1)
        if end < 0:
            raise ParsingError("Incomplete SysEx message: missing 0xF7 terminator")
        payload = data[1:end]
        for index, byte in enumerate(payload, start=1):
            if byte & 0x80:
                raise ParsingError(f"Invalid SysEx data byte 0x{byte:02X}", offset=index)
        return SysEx(payload)

    kind = first & 0xF0
    channel = Channel(first & 0x0F)

    if kind == NOTE_ON:
        note, velocity = _data_bytes(data, 2, "note on")
        if velocity == 0:
            return NoteOff(channel, NoteNumber(note), Velocity(0))
        return NoteOn(channel, NoteNumber(note), Velocity(velocity))
    if kind == NOTE_OFF:
        note, velocity = _data_bytes(data, 2, "note off")
        return NoteOff(channel, NoteNumber(note), Velocity(velocity))
    if kind == CONTROL_CHANGE:
        controller, value = _data_bytes(data, 2, "control change")
        return ControlChange(channel, controller, value)
    if kind == PROGRAM_CHANGE:
        (program,) = _data_bytes(data, 1, "program change")
        return ProgramChange(channel, program)
    if kind == PITCH_BEND:
        lsb, msb = _data_bytes(data, 2, "pitch bend")
        return PitchBend(channel, (lsb | (msb << 7)) - _PITCH_BEND_CENTER)
    if kind == CHANNEL_PRESSURE:
        (pressure,) = _data_bytes(data, 1, "channel pressure")
        return ChannelPressure(channel, pressure)
    if kind == POLY_PRESSURE:
        note, pressure = _data_bytes(data, 2, "poly pressure")
        return PolyPressure(channel, NoteNumber(note), pressure)
    raise ParsingError(f"Unknown MIDI message type: 0x{kind:02X}")


def try_parse_message(data: bytes | bytearray | Iterable[int]) -> Result[Message, MidiError]:
    try:
        return Result.ok(parse_message(data))
    except MidiError as exc:
        return Result.err(exc)


__all__ = [
    "CHANNEL_PRESSURE",
    "CONTROL_CHANGE",
    "ChannelPressure",
    "ControlChange",
    "MESSAGE_TYPES",
    "Message",
    "NOTE_OFF",
    "NOTE_ON",
    "NoteOff",
    "NoteOn",
    "PITCH_BEND",
    "PITCH_BEND_MAX",
    "PITCH_BEND_MIN",
    "POLY_PRESSURE",
    "PROGRAM_CHANGE",
    "PitchBend",
    "PolyPressure",
    "ProgramChange",
    "SYSEX_END",
    "SYSEX_START",
    "SysEx",
    "encode_message",
    "message_length_for_status",
    "parse_message",
    "try_parse_message",
]
